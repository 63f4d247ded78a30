import os
import sys
from pathlib import Path
from typing import Iterable, Tuple

import pytest
from PIL import Image

# Add src to sys.path so we can import tile_booklet
SRC_PATH = Path(__file__).resolve().parent.parent / "src"
if SRC_PATH.as_posix() not in sys.path:
    sys.path.insert(0, SRC_PATH.as_posix())

from tile_booklet.core.models import CropBox, Fragment
from tile_booklet.extractor import ExtractionConfig


# Small geometry so tests stay fast: 100x130 scans, 90x120 content, 30x40 cells
SCAN_SIZE = (100, 130)
TEST_CROP = CropBox(left=5, top=5, width=90, height=120)
CELL_SIZE = (30, 40)
# Noise cells encode to ~3.6KB of PNG, flat cells to well under 200 bytes
TEST_MIN_BYTES = 1000


def _noise(size: Tuple[int, int]) -> Image.Image:
    return Image.frombytes("RGB", size, os.urandom(size[0] * size[1] * 3))


def write_scan(path: Path, noisy_cells: Iterable[Tuple[int, int]]) -> Path:
    """Write a scan whose content grid has noise in the given (row, col) cells."""
    img = Image.new("RGB", SCAN_SIZE, "white")
    for row, col in noisy_cells:
        x = TEST_CROP.left + col * CELL_SIZE[0]
        y = TEST_CROP.top + row * CELL_SIZE[1]
        img.paste(_noise(CELL_SIZE), (x, y))
    path.parent.mkdir(parents=True, exist_ok=True)
    img.save(path)
    return path


ALL_CELLS = [(r, c) for r in range(3) for c in range(3)]


@pytest.fixture
def extraction_config():
    """Extraction settings matching the synthetic scans."""
    return ExtractionConfig(crop_box=TEST_CROP, min_fragment_bytes=TEST_MIN_BYTES)


@pytest.fixture
def input_dir(tmp_path: Path):
    """Input folder with three scans: 9, 2 and 0 content cells."""
    folder = tmp_path / "input"
    write_scan(folder / "page_1.png", ALL_CELLS)
    write_scan(folder / "page_2.png", [(0, 0), (2, 2)])
    write_scan(folder / "page_10.png", [])
    return folder


@pytest.fixture
def fragment_factory(tmp_path: Path):
    """Factory creating Fragment records backed by real PNG files."""
    def _create(count: int, size: Tuple[int, int] = CELL_SIZE, color: str = "red"):
        folder = tmp_path / "fragments"
        folder.mkdir(exist_ok=True)
        fragments = []
        for i in range(count):
            row, col = divmod(i % 9, 3)
            path = folder / f"rect_src{i // 9}.png_{row}_{col}.png"
            Image.new("RGB", size, color).save(path)
            fragments.append(Fragment(
                path=path,
                source_name=f"src{i // 9}.png",
                row=row,
                col=col,
                size_bytes=path.stat().st_size,
            ))
        return fragments
    return _create


@pytest.fixture
def sample_image(tmp_path: Path):
    """Create a simple test image."""
    img = Image.new("RGB", (200, 100), color="white")
    img_path = tmp_path / "sample.png"
    img.save(img_path)
    return img_path


@pytest.fixture
def scan_writer():
    """Return the write_scan helper for tests that build their own inputs."""
    return write_scan
