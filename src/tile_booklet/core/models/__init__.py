"""
Module: core.models

Purpose:
    Immutable data models shared by the extraction and build pipelines.

Key Classes:
    - CropBox: Pixel rectangle in ImageMagick-style geometry
    - SourceImage: Scanned page on disk
    - Fragment: Surviving grid cell of a cropped page
    - Placeholder: Padding marker for unfilled page slots
"""

from .bounds import CropBox, grid_boxes
from .fragments import SourceImage, Fragment, Placeholder, PLACEHOLDER

__all__ = [
    "CropBox",
    "grid_boxes",
    "SourceImage",
    "Fragment",
    "Placeholder",
    "PLACEHOLDER",
]
