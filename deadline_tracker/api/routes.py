"""
API Routes for Deadline Tracker.
Implements RESTful endpoints for text extraction, file upload and export.
"""

import asyncio
import logging
from typing import List, Optional
from datetime import datetime, timezone
from fastapi import APIRouter, File, Form, HTTPException, UploadFile
from fastapi.responses import Response

from deadline_tracker.api.models import (
    HealthResponse,
    ExtractRequest,
    ExtractResponse,
    ExportRequest,
    FileReport
)
from deadline_tracker.processing.document_processor import DocumentProcessor
from deadline_tracker.processing.obligation_extractor import ObligationExtractor
from deadline_tracker.utils.config import get_app_version, load_extraction_settings
from deadline_tracker.utils.report_generator import MEDIA_TYPES, ReminderSheet

logger = logging.getLogger(__name__)
router = APIRouter()

PASTED_TEXT_SOURCE = "Pasted Text"

# Initialize components (singleton pattern)
_obligation_extractor = None
_doc_processor = None


def get_obligation_extractor() -> ObligationExtractor:
    global _obligation_extractor
    if _obligation_extractor is None:
        _obligation_extractor = ObligationExtractor(load_extraction_settings())
    return _obligation_extractor


def get_doc_processor() -> DocumentProcessor:
    global _doc_processor
    if _doc_processor is None:
        _doc_processor = DocumentProcessor()
    return _doc_processor


@router.get("/health", response_model=HealthResponse, tags=["System"])
async def health_check():
    """Health check endpoint."""
    return HealthResponse(
        status="healthy",
        version=get_app_version(),
        timestamp=datetime.now(timezone.utc).isoformat()
    )


@router.post("/extract", response_model=ExtractResponse, tags=["Extract"])
async def extract_text(request: ExtractRequest):
    """Extract dated obligations from pasted contract text."""
    try:
        logger.info(f"Extract request from {request.source}: {len(request.text)} characters")
        extractor = get_obligation_extractor()
        items = await asyncio.to_thread(extractor.extract, request.text, request.source)

        return ExtractResponse(
            items=items,
            file_reports=[FileReport(source=request.source, ok=True, chars=len(request.text))]
        )

    except Exception as e:
        logger.error(f"Error extracting obligations: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=str(e))


@router.post("/upload", response_model=ExtractResponse, tags=["Upload"])
async def upload_files(
    files: Optional[List[UploadFile]] = File(None),
    text: Optional[str] = Form(None)
):
    """
    Decode up to three contract files (plus optional pasted text) and
    extract obligations from each. Decode failures are reported per file.
    """
    files = files or []
    pasted = (text or "").strip()

    doc_processor = get_doc_processor()
    if len(files) > doc_processor.max_files:
        raise HTTPException(
            status_code=400,
            detail=f"Too many files: {len(files)}. Max: {doc_processor.max_files}"
        )
    if not files and not pasted:
        raise HTTPException(status_code=400, detail="Upload at least one file or paste contract text.")

    try:
        extractor = get_obligation_extractor()
        items = []
        reports = []

        if pasted:
            items.extend(await asyncio.to_thread(extractor.extract, pasted, PASTED_TEXT_SOURCE))
            reports.append(FileReport(source=PASTED_TEXT_SOURCE, ok=True, chars=len(pasted)))

        for upload in files:
            filename = upload.filename or "upload"
            content = await upload.read()
            logger.info(f"Received {filename}: {len(content)} bytes")

            is_valid, error = doc_processor.validate_file(filename, len(content))
            if not is_valid:
                raise HTTPException(status_code=400, detail=f"{filename}: {error}")

            try:
                document = await asyncio.to_thread(doc_processor.process_document, content, filename)
            except Exception as e:
                logger.warning(f"Failed to decode {filename}: {e}")
                reports.append(FileReport(source=filename, ok=False, error=f"Failed to read file: {e}"))
                continue

            if document["error"]:
                reports.append(FileReport(
                    source=filename,
                    ok=False,
                    chars=document["total_characters"],
                    error=document["error"]
                ))
                continue

            items.extend(await asyncio.to_thread(extractor.extract, document["full_text"], filename))
            reports.append(FileReport(source=filename, ok=True, chars=document["total_characters"]))

        logger.info(f"Upload processed: {len(reports)} sources, {len(items)} items")
        return ExtractResponse(items=items, file_reports=reports)

    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error processing upload: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=str(e))


@router.post("/export", tags=["Export"])
async def export_items(request: ExportRequest):
    """Download the items as a CSV or TXT reminder sheet."""
    try:
        sheet = ReminderSheet(request.items)
        content = sheet.render(request.format)
        filename = sheet.filename(request.format)

        return Response(
            content=content,
            media_type=MEDIA_TYPES[request.format],
            headers={"Content-Disposition": f'attachment; filename="{filename}"'}
        )

    except Exception as e:
        logger.error(f"Error exporting reminder sheet: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=str(e))
