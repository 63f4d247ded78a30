"""
Module: extractor.config

Purpose:
    Configuration dataclass for the extraction pipeline. Holds the page
    content crop, the grid used to cut it into fragments, and the size
    threshold below which a fragment is treated as blank.

Key Classes:
    - ExtractionConfig: Main configuration for extraction

Dependencies:
    - dataclasses: For frozen dataclass support

Used By:
    - extractor.pipeline: Crop, split and filter settings
    - extractor.manifest: Config signature for cache entries
"""

from dataclasses import dataclass

from tile_booklet.core.models import CropBox

# Content region of the scanned volume: 2232x3117 at +124+129
DEFAULT_CROP_BOX = CropBox(left=124, top=129, width=2232, height=3117)
DEFAULT_GRID_ROWS = 3
DEFAULT_GRID_COLS = 3
DEFAULT_MIN_FRAGMENT_BYTES = 100_000


@dataclass(frozen=True)
class ExtractionConfig:
    """
    Configuration for fragment extraction.

    Attributes:
        crop_box: Content region cropped from every source image
        grid_rows: Rows in the split grid (default 3)
        grid_cols: Columns in the split grid (default 3)
        min_fragment_bytes: Fragments whose PNG is smaller are discarded.
            A fragment exactly this size is kept.
    """
    crop_box: CropBox = DEFAULT_CROP_BOX
    grid_rows: int = DEFAULT_GRID_ROWS
    grid_cols: int = DEFAULT_GRID_COLS
    min_fragment_bytes: int = DEFAULT_MIN_FRAGMENT_BYTES

    def __post_init__(self) -> None:
        """Validate configuration on construction."""
        if self.grid_rows <= 0 or self.grid_cols <= 0:
            raise ValueError(f"grid must be positive: {self.grid_rows}x{self.grid_cols}")
        if self.crop_box.width < self.grid_cols or self.crop_box.height < self.grid_rows:
            raise ValueError(
                f"crop {self.crop_box.to_geometry()} too small for a "
                f"{self.grid_rows}x{self.grid_cols} grid"
            )
        if self.min_fragment_bytes < 0:
            raise ValueError(f"min_fragment_bytes must be non-negative: {self.min_fragment_bytes}")

    @property
    def signature(self) -> str:
        """Stable string identifying settings that change extraction output."""
        return (
            f"{self.crop_box.to_geometry()}|{self.grid_rows}x{self.grid_cols}"
            f"|{self.min_fragment_bytes}"
        )
