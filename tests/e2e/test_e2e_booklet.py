"""
End-to-End Tests for the booklet pipeline.

Tests the full workflow:
Scans → Crop → 3x3 split → size filter → pages → PDF

Pages are checked pixel by pixel after reading them back out of the
staging tree, and the PDF is opened with pypdf.
"""
import os

import pytest
from PIL import Image
from pypdf import PdfReader

from tile_booklet.builder import BuilderConfig, build_booklet


@pytest.fixture
def config_for(tmp_path, extraction_config):
    def _config(input_dir, tiles):
        return BuilderConfig(
            input_dir=input_dir,
            tiles_per_page=tiles,
            build_dir=tmp_path / "build",
            output_dir=tmp_path / "output",
            compress=False,
            extraction=extraction_config,
            cell_width=30,
            cell_height=40,
        )
    return _config


def _tinted_noise(size, dominant):
    """Random cell whose `dominant` channel (0=R, 2=B) is always the brightest."""
    count = size[0] * size[1]
    channels = []
    for band in range(3):
        data = bytes(b // 2 + (128 if band == dominant else 0) for b in os.urandom(count))
        channels.append(Image.frombytes("L", size, data))
    return Image.merge("RGB", channels)


class TestEndToEndBooklet:
    """Scans in, tiled PDF out."""

    def test_e2e_when_ten_fragments_four_tiles_then_last_page_half_black(
        self, tmp_path, config_for, scan_writer
    ):
        """10 fragments: pages of 4, 4 and 2 + two black placeholders."""
        # Arrange
        scans = tmp_path / "scans"
        scan_writer(scans / "p1.png", [(r, c) for r in range(3) for c in range(3)])
        scan_writer(scans / "p2.png", [(1, 1)])
        config = config_for(scans, 4)

        # Act
        result = build_booklet(config)

        # Assert
        assert result.page_count == 3
        assert result.placeholder_count == 2
        assert len(PdfReader(result.output_pdf).pages) == 3
        with Image.open(config.pages_dir / "page_2.png") as last:
            assert last.size == (60, 80)
            assert last.crop((0, 0, 60, 40)).getbbox() is not None
            assert last.crop((0, 40, 60, 80)).getbbox() is None

    def test_e2e_when_pages_sorted_naturally_then_fragments_follow_source_order(
        self, tmp_path, config_for
    ):
        """page_2 comes before page_10, so its fragment lands in slot 0."""
        # Arrange
        scans = tmp_path / "scans"
        scans.mkdir()
        for name, dominant in (("page_10.png", 2), ("page_2.png", 0)):
            img = Image.new("RGB", (100, 130), "white")
            img.paste(_tinted_noise((30, 40), dominant), (5, 5))
            img.save(scans / name)
        config = config_for(scans, 4)

        # Act
        result = build_booklet(config)

        # Assert
        assert result.fragment_count == 2
        with Image.open(config.pages_dir / "page_0.png") as page:
            first = page.getpixel((15, 20))
            second = page.getpixel((45, 20))
        assert first[0] > first[2]
        assert second[2] > second[0]

    def test_e2e_when_run_twice_then_same_pdf_page_count(self, input_dir, config_for):
        config = config_for(input_dir, 9)

        first = build_booklet(config)
        second = build_booklet(config)

        assert second.extraction_skipped
        assert len(PdfReader(second.output_pdf).pages) == first.page_count == 2
