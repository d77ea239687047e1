"""
Configuration loading for Deadline Tracker.
Reads the YAML files under ``config/`` and builds the extraction settings.
"""

import os
import logging
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from pydantic import BaseModel, ConfigDict, Field

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_DIR = Path(__file__).resolve().parents[2] / "config"


class ExtractionSettings(BaseModel):
    """Window sizes and caps used by the extraction pipeline."""
    model_config = ConfigDict(frozen=True)

    # --- Windows (characters) ---
    absolute_window: int = Field(140, gt=0)
    relative_window: int = Field(230, gt=0)
    anchor_label_window: int = Field(130, gt=0)
    anchor_expansion_window: int = Field(280, gt=0)
    fallback_signal_radius: int = Field(120, gt=0)

    # --- Anchor resolution ---
    anchor_max_distance: int = Field(2600, gt=0)

    # --- Clause segmentation ---
    clause_max_length: int = Field(650, gt=0)
    clause_chunk_window: int = Field(520, gt=0)
    clause_chunk_stride: int = Field(300, gt=0)

    # --- Output caps ---
    max_items: int = Field(240, gt=0)
    max_high_priority: int = Field(3, ge=0)


def get_config_dir() -> Path:
    return Path(os.getenv("CONFIG_DIR", str(DEFAULT_CONFIG_DIR)))


def load_yaml_config(filename: str, config_dir: Optional[Path] = None) -> Dict[str, Any]:
    """
    Load one YAML configuration file.

    Args:
        filename: File name inside the config directory
        config_dir: Directory override (default: ``CONFIG_DIR`` or ``config/``)

    Returns:
        Parsed mapping, empty when the file is missing or empty
    """
    path = Path(config_dir or get_config_dir()) / filename
    if not path.exists():
        logger.warning(f"Config file not found: {path}, using defaults")
        return {}
    with open(path, 'r') as f:
        return yaml.safe_load(f) or {}


def get_api_config() -> Dict[str, Any]:
    return load_yaml_config("api_config.yaml")


def get_app_version() -> str:
    config = load_yaml_config("extraction_config.yaml")
    return str(config.get('app', {}).get('version', '1.0.0'))


def load_extraction_settings(config_dir: Optional[Path] = None) -> ExtractionSettings:
    """Build ExtractionSettings from ``extraction_config.yaml``."""
    config = load_yaml_config("extraction_config.yaml", config_dir)
    return ExtractionSettings(**(config.get('extraction_settings') or {}))
