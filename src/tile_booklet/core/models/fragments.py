"""
Module: fragments

Purpose:
    Models for the units flowing through the pipeline: the scanned source
    page, the fragments cut out of it, and the placeholder used to pad the
    last page of a booklet.

Key Classes:
    - SourceImage: A scanned page on disk
    - Fragment: A kept grid cell, with its origin and encoded size
    - Placeholder: Marker type for an empty page slot (use PLACEHOLDER)

Dependencies:
    - dataclasses (std)
    - pathlib (std)
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Tuple


@dataclass(frozen=True)
class SourceImage:
    """
    A scanned page image. Identity is the path.

    Attributes:
        path: Location of the image file
    """

    path: Path

    @property
    def name(self) -> str:
        return self.path.name


@dataclass(frozen=True)
class Fragment:
    """
    One surviving cell of a cropped page.

    Attributes:
        path: Location of the fragment PNG
        source_name: File name of the SourceImage it was cut from
        row: Grid row within the cropped page (0-indexed)
        col: Grid column within the cropped page (0-indexed)
        size_bytes: Encoded size of the PNG on disk

    Example:
        >>> frag = Fragment(Path("rect_p1.jpg_0_1.png"), "p1.jpg", 0, 1, 250_000)
        >>> frag.grid_position
        (0, 1)
    """

    path: Path
    source_name: str
    row: int
    col: int
    size_bytes: int

    @property
    def grid_position(self) -> Tuple[int, int]:
        return (self.row, self.col)

    def to_dict(self) -> Dict[str, Any]:
        """Serialize for the extraction manifest."""
        return {
            "path": self.path.as_posix(),
            "source_name": self.source_name,
            "row": self.row,
            "col": self.col,
            "size_bytes": self.size_bytes,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Fragment":
        """Deserialize from the extraction manifest."""
        return cls(
            path=Path(data["path"]),
            source_name=data["source_name"],
            row=int(data["row"]),
            col=int(data["col"]),
            size_bytes=int(data["size_bytes"]),
        )


class Placeholder:
    """
    Marker for a page slot with no fragment.

    Rendered as a solid background cell. Use the module-level
    PLACEHOLDER instance rather than creating new ones.
    """

    _instance: "Placeholder | None" = None

    def __new__(cls) -> "Placeholder":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "PLACEHOLDER"


PLACEHOLDER = Placeholder()
