"""
Tests for builder.config
"""
from pathlib import Path

import pytest

from tile_booklet.builder import BuilderConfig


def test_default_paths():
    config = BuilderConfig(input_dir=Path("input"), tiles_per_page=4)

    assert config.cropped_dir == Path("build/cropped_images")
    assert config.fragments_dir == Path("build/rectangles")
    assert config.pages_dir == Path("build/assembled_pages")
    assert config.intermediate_pdf == Path("build/pdf/intermedium_4.pdf")
    assert config.output_pdf == Path("output/booklet_4.pdf")


def test_output_names_encode_tiles():
    one = BuilderConfig(input_dir=Path("in"), tiles_per_page=1, name="saint_seiya")
    nine = BuilderConfig(input_dir=Path("in"), tiles_per_page=9, name="saint_seiya")

    assert one.output_pdf.name == "saint_seiya_1.pdf"
    assert nine.output_pdf.name == "saint_seiya_9.pdf"
    assert one.intermediate_pdf != nine.intermediate_pdf


@pytest.mark.parametrize("tiles", [0, 2, 5, 16])
def test_invalid_tiles(tiles):
    with pytest.raises(ValueError, match="Invalid tiles option"):
        BuilderConfig(input_dir=Path("in"), tiles_per_page=tiles)


@pytest.mark.parametrize("overrides,message", [
    ({"quality": 0}, "quality"),
    ({"quality": 100}, "quality"),
    ({"compress_tier": "tiny"}, "compress_tier"),
    ({"dpi": 0}, "dpi"),
    ({"name": ""}, "name"),
    ({"name": "a/b"}, "name"),
])
def test_invalid_options(overrides, message):
    with pytest.raises(ValueError, match=message):
        BuilderConfig(input_dir=Path("in"), tiles_per_page=4, **overrides)
