"""
Module: builder.config

Purpose:
    Configuration dataclass for a booklet build. Immutable
    configuration with validation on construction.

Key Classes:
    - BuilderConfig: Main configuration for building a booklet

Dependencies:
    - dataclasses (std)
    - pathlib (std)

Used By:
    - builder.controller: Main build controller
    - tile_booklet.cli: Built from command-line options
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from tile_booklet.extractor.config import ExtractionConfig
from tile_booklet.extractor.manifest import MANIFEST_FILENAME
from tile_booklet.builder.layout.config import (
    DEFAULT_CELL_HEIGHT_PX,
    DEFAULT_CELL_WIDTH_PX,
    SUPPORTED_TILES,
)
from tile_booklet.builder.output.compressor import COMPRESSION_TIERS, DEFAULT_TIER
from tile_booklet.builder.output.renderer import DEFAULT_DPI, DEFAULT_QUALITY


@dataclass(frozen=True)
class BuilderConfig:
    """
    Configuration for building a booklet (immutable).

    Attributes:
        input_dir: Directory of scanned page images
        tiles_per_page: Fragments per output page (1, 4 or 9)
        build_dir: Root of the staging tree
        output_dir: Directory for the final PDF
        name: Base name of the final PDF ("<name>_<tiles>.pdf")
        quality: JPEG quality of pages embedded in the PDF
        compress: Run the Ghostscript compression pass
        compress_tier: Ghostscript PDFSETTINGS tier
        force_extract: Ignore the manifest and extract every source again
        extraction: Crop, grid and threshold settings
        cell_width: Width of one tile cell in pixels
        cell_height: Height of one tile cell in pixels
        dpi: DPI used to size PDF pages from pixel dimensions

    Example:
        >>> config = BuilderConfig(input_dir=Path("input"), tiles_per_page=4)
        >>> config.output_pdf
        PosixPath('output/booklet_4.pdf')
    """

    # Required
    input_dir: Path
    tiles_per_page: int

    # Locations
    build_dir: Path = Path("build")
    output_dir: Path = Path("output")
    name: str = "booklet"

    # PDF
    quality: int = DEFAULT_QUALITY
    compress: bool = True
    compress_tier: str = DEFAULT_TIER
    dpi: int = DEFAULT_DPI

    # Extraction
    force_extract: bool = False
    extraction: ExtractionConfig = field(default_factory=ExtractionConfig)

    # Layout
    cell_width: int = DEFAULT_CELL_WIDTH_PX
    cell_height: int = DEFAULT_CELL_HEIGHT_PX

    def __post_init__(self) -> None:
        """Validate configuration on construction."""
        if self.tiles_per_page not in SUPPORTED_TILES:
            raise ValueError(
                f"Invalid tiles option {self.tiles_per_page!r}. Use 1, 4, or 9."
            )
        if not 1 <= self.quality <= 95:
            raise ValueError(f"quality must be between 1 and 95: {self.quality}")
        if self.compress_tier not in COMPRESSION_TIERS:
            raise ValueError(f"compress_tier must be one of {COMPRESSION_TIERS}: {self.compress_tier!r}")
        if self.dpi <= 0:
            raise ValueError(f"dpi must be positive: {self.dpi}")
        if not self.name or "/" in self.name or "\\" in self.name:
            raise ValueError(f"name must be a plain file name: {self.name!r}")

    # Staging layout

    @property
    def cropped_dir(self) -> Path:
        return self.build_dir / "cropped_images"

    @property
    def fragments_dir(self) -> Path:
        return self.build_dir / "rectangles"

    @property
    def pages_dir(self) -> Path:
        return self.build_dir / "assembled_pages"

    @property
    def pdf_dir(self) -> Path:
        return self.build_dir / "pdf"

    @property
    def manifest_path(self) -> Path:
        return self.build_dir / MANIFEST_FILENAME

    @property
    def metadata_path(self) -> Path:
        return self.build_dir / "build_metadata.json"

    # Outputs; both names encode tiles so runs with other settings don't collide

    @property
    def intermediate_pdf(self) -> Path:
        return self.pdf_dir / f"intermedium_{self.tiles_per_page}.pdf"

    @property
    def output_pdf(self) -> Path:
        return self.output_dir / f"{self.name}_{self.tiles_per_page}.pdf"
