"""Path and filename utilities.

Provides shared functions for discovering source scans and ordering
files the way a person reading page numbers would expect.
"""

from __future__ import annotations

from pathlib import Path
from typing import Iterable, List

import natsort

SOURCE_IMAGE_SUFFIXES = frozenset({".jpg", ".png"})


def is_source_image(path: str | Path) -> bool:
    """Check whether a path looks like a scanned page image.

    Matching is done on the file extension only and is case-insensitive.

    Examples:
        >>> is_source_image("input/page_01.JPG")
        True
        >>> is_source_image("input/notes.txt")
        False
    """
    return Path(path).suffix.lower() in SOURCE_IMAGE_SUFFIXES


def natural_sorted(paths: Iterable[str | Path]) -> List[Path]:
    """Sort paths with numeric-aware ordering ("page_2" before "page_10").

    Args:
        paths: Paths or path strings to sort.

    Returns:
        New list of Path objects in natural order.
    """
    return [Path(p) for p in natsort.natsorted(paths, key=lambda p: str(p))]


def list_source_images(input_dir: Path) -> List[Path]:
    """List every source image under a directory, naturally sorted.

    The directory is walked recursively. Ordering uses the full path so
    that sub-folders (chapters) keep their own natural order.

    Args:
        input_dir: Directory holding the scanned pages.

    Returns:
        Naturally sorted list of image paths (may be empty).

    Raises:
        FileNotFoundError: If the directory does not exist.
    """
    if not input_dir.is_dir():
        raise FileNotFoundError(f"Input directory not found: {input_dir}")

    images = [p for p in input_dir.rglob("*") if p.is_file() and is_source_image(p)]
    return natural_sorted(images)
