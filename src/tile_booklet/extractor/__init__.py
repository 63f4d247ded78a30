"""
Module: extractor

Purpose:
    Extraction pipeline turning scanned pages into fragment images:
    fixed content crop, 3x3 grid split, and removal of near-blank cells.
    Completed work is tracked in an explicit manifest.

Key Functions:
    - extract_fragments(): Main entry point for extraction

Key Classes:
    - ExtractionConfig: Crop, grid and threshold settings
    - ExtractionManifest: Per-source cache records
    - ExtractionResult: Container for extraction output

Dependencies:
    - PIL: Image cropping
    - portalocker: Manifest locking

Used By:
    - tile_booklet.builder.controller: Booklet build pipeline
"""

from .config import ExtractionConfig
from .manifest import ExtractionManifest, MANIFEST_FILENAME
from .pipeline import extract_fragments, ExtractionResult, ExtractionError

__all__ = [
    "extract_fragments",
    "ExtractionConfig",
    "ExtractionManifest",
    "ExtractionResult",
    "ExtractionError",
    "MANIFEST_FILENAME",
]
