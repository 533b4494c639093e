"""Configuration management for the receipt OCR system.

Loads and validates YAML configuration with sensible defaults
for image normalization, OCR, and line-item extraction settings.
"""

import logging
from pathlib import Path

import yaml
from pydantic import BaseModel, Field

logger = logging.getLogger(__name__)

DEFAULT_BOILERPLATE_KEYWORDS: list[str] = [
    "total",
    "subtotal",
    "change",
    "cash",
    "visa",
    "mastercard",
    "date",
    "time",
    "tax",
]


class NormalizerConfig(BaseModel):
    """Configuration for the image normalizer run before OCR."""

    enabled: bool = True
    max_width: int = Field(default=1500, gt=0)
    low_threshold: int = Field(default=80, ge=0, le=255)
    high_threshold: int = Field(default=120, ge=0, le=255)


class OCRConfig(BaseModel):
    """Configuration for Tesseract OCR engine."""

    tesseract_cmd: str | None = None
    default_lang: str = "eng"
    psm: int = 6


class ExtractionConfig(BaseModel):
    """Configuration for receipt line-item extraction."""

    min_line_length: int = 5
    min_name_length: int = 2
    max_price: float = 10000.0
    boilerplate_keywords: list[str] = Field(
        default_factory=lambda: list(DEFAULT_BOILERPLATE_KEYWORDS)
    )
    diagnostic_sample_chars: int = 200


class AppConfig(BaseModel):
    """Top-level application configuration."""

    normalizer: NormalizerConfig = Field(default_factory=NormalizerConfig)
    ocr: OCRConfig = Field(default_factory=OCRConfig)
    extraction: ExtractionConfig = Field(default_factory=ExtractionConfig)
    log_level: str = "INFO"


def load_config(path: Path | None = None) -> AppConfig:
    """Load configuration from a YAML file.

    Args:
        path: Path to the YAML configuration file.
            Defaults to configs/config.yaml.

    Returns:
        Validated application configuration.
    """
    if path is None:
        path = Path("configs/config.yaml")

    if path.exists():
        logger.info("Loading configuration from %s", path)
        with open(path) as f:
            raw = yaml.safe_load(f) or {}
        return AppConfig(**raw)

    logger.info("No config file found at %s, using defaults", path)
    return AppConfig()
