# ============================================================================
# Reminder Sheet Export
# ============================================================================

import csv
import io
import logging
import re
from typing import Iterable, List, Literal

from deadline_tracker.processing.models import ExtractionItem

logger = logging.getLogger(__name__)

PASTED_TEXT_SOURCE = "pasted text"

CSV_HEADER = ["Item", "Date", "Type", "Source Snippet", "Confidence", "Source", "Location", "Notes"]

MEDIA_TYPES = {
    "csv": "text/csv; charset=utf-8",
    "txt": "text/plain; charset=utf-8",
}


def sanitize_filename_token(value: str) -> str:
    """Lowercase, drop the extension, keep ``[a-z0-9-]``."""
    token = re.sub(r'\.[^.]+$', '', value.lower())
    token = re.sub(r'[^a-z0-9]+', '-', token).strip('-')
    return token or "reminder-sheet"


class ReminderSheet:
    """
    Renders extracted items as a downloadable reminder sheet (CSV or TXT).
    """

    def __init__(self, items: Iterable[ExtractionItem]):
        self.items: List[ExtractionItem] = list(items)

    def filename(self, ext: Literal["csv", "txt"]) -> str:
        """Name the file after the sources the items came from."""
        sources = []
        for item in self.items:
            source = (item.source or "").strip()
            if source and source not in sources:
                sources.append(source)
        file_sources = [s for s in sources if s.lower() != PASTED_TEXT_SOURCE]

        if len(file_sources) == 1:
            return f"{sanitize_filename_token(file_sources[0])}-reminder-sheet.{ext}"
        if len(file_sources) > 1:
            first = sanitize_filename_token(file_sources[0])
            return f"{first}-plus-{len(file_sources) - 1}-files-reminder-sheet.{ext}"
        if sources:
            return f"pasted-text-reminder-sheet.{ext}"
        return f"reminder-sheet.{ext}"

    def to_csv(self) -> str:
        buffer = io.StringIO()
        writer = csv.writer(buffer, quoting=csv.QUOTE_ALL, lineterminator="\n")
        writer.writerow(CSV_HEADER)
        for item in self.items:
            writer.writerow([
                item.item,
                item.date or "",
                item.type,
                item.snippet,
                item.confidence,
                item.source,
                item.location or "",
                item.notes or "",
            ])
        return buffer.getvalue().rstrip("\n")

    def to_txt(self) -> str:
        blocks = []
        for item in self.items:
            blocks.append(
                f"{item.item} | {item.date or 'null'} | {item.type} | {item.confidence} | "
                f"{item.source} | {item.location or ''}\n"
                f"Snippet: {item.snippet}\n"
                f"Notes: {item.notes or ''}\n"
            )
        return "\n".join(blocks)

    def render(self, fmt: Literal["csv", "txt"]) -> str:
        """
        Render the sheet in the requested format.

        Args:
            fmt: "csv" or "txt"

        Returns:
            Sheet content as text
        """
        logger.info(f"Rendering reminder sheet with {len(self.items)} items as {fmt}")
        if fmt == "csv":
            return self.to_csv()
        if fmt == "txt":
            return self.to_txt()
        raise ValueError(f"Unsupported export format: {fmt}")
