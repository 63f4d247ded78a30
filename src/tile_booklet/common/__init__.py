"""Common utilities shared across the toolkit."""

from __future__ import annotations

from .path_utils import (
    SOURCE_IMAGE_SUFFIXES,
    is_source_image,
    list_source_images,
    natural_sorted,
)

__all__ = [
    "SOURCE_IMAGE_SUFFIXES",
    "is_source_image",
    "list_source_images",
    "natural_sorted",
]
