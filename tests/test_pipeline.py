from pathlib import Path

import pytest

from bmpfilter import pipeline as pipeline_module
from bmpfilter.ascii_art import render_ascii
from bmpfilter.bmpcodec import decode_bmp
from bmpfilter.errors import ImageReadError, UnsupportedFormatError
from bmpfilter.filter_spec import FilterKind, FilterSpec
from bmpfilter.filters import gaussian_blur
from bmpfilter.pipeline import FilterPipeline, output_path_for

from conftest import random_grid


@pytest.mark.parametrize("kind, name", [
    (FilterKind.BLUR, "cat_Gaussian Blur.bmp"),
    (FilterKind.NONE, "cat_No Filter.bmp"),
    (FilterKind.EDGE_DETECT, "cat_Edge Detection.bmp"),
    (FilterKind.ASCII_ART, "cat_ASCII.txt"),
])
def test_output_names(tmp_path, kind, name):
    assert output_path_for(tmp_path / "cat.bmp", kind) == tmp_path / name


def test_run_blur(bmp_file):
    path, grid = bmp_file
    out = FilterPipeline().run(path, FilterSpec(FilterKind.BLUR, strength=2))
    assert out == path.with_name("sample_Gaussian Blur.bmp")

    expected = grid.copy()
    gaussian_blur(expected)
    gaussian_blur(expected)
    result, _ = decode_bmp(out)
    assert result == expected
    # the source file is never overwritten
    assert decode_bmp(path)[0] == grid


def test_run_explicit_output(tmp_path, bmp_file):
    path, grid = bmp_file
    out = FilterPipeline().run(path, FilterSpec(FilterKind.FLIP), output=tmp_path / "flipped.bmp")
    assert out == tmp_path / "flipped.bmp"
    result, _ = decode_bmp(out)
    assert result.to_rows()[0] == grid.to_rows()[0][::-1]


def test_run_ascii(tmp_path):
    from bmpfilter.bmpcodec import encode_bmp

    grid = random_grid(12, 12, seed=9)
    path = tmp_path / "art.bmp"
    encode_bmp(grid, path)
    out = FilterPipeline().run(path, FilterSpec(FilterKind.ASCII_ART, ascii_width=6))
    assert out == tmp_path / "art_ASCII.txt"
    assert out.read_text(encoding="ascii") == render_ascii(grid, 6).to_text()


def test_invalid_spec_checked_before_loading(tmp_path, monkeypatch):
    def boom(path):
        raise AssertionError("should not load")

    monkeypatch.setattr(pipeline_module, "decode_bmp", boom)
    with pytest.raises(ValueError):
        FilterPipeline().run(tmp_path / "x.bmp", FilterSpec(FilterKind.SHARPEN))


def test_missing_input(tmp_path):
    with pytest.raises(ImageReadError):
        FilterPipeline().load(tmp_path / "missing.png")


def test_bad_bmp_is_not_converted(tmp_path, monkeypatch):
    calls = []
    monkeypatch.setattr(pipeline_module, "convert_to_bmp", lambda *a, **k: calls.append(a))
    path = tmp_path / "eight_bit.bmp"
    random_grid(4, 4).to_image().convert("P").save(path, format="BMP")
    with pytest.raises(UnsupportedFormatError):
        FilterPipeline().load(path)
    assert calls == []


def test_other_format_converted_once(tmp_path):
    grid = random_grid(5, 4, seed=10)
    src = tmp_path / "photo.png"
    grid.to_image().save(src)

    image = FilterPipeline(converter="pillow").load(src)
    assert image.path == tmp_path / "photo.bmp"
    assert image.grid == grid

    out = FilterPipeline(converter="pillow").run(src, FilterSpec(FilterKind.GRAYSCALE))
    assert out == tmp_path / "photo_Grayscale.bmp"


def test_still_invalid_after_conversion(tmp_path, monkeypatch):
    calls = []

    def convert(path, backend):
        calls.append(path)
        dst = Path(path).with_suffix(".bmp")
        dst.write_bytes(b"BM" + bytes(10))
        return dst

    monkeypatch.setattr(pipeline_module, "convert_to_bmp", convert)
    src = tmp_path / "weird.tga"
    src.write_bytes(b"\x00" * 100)
    with pytest.raises(UnsupportedFormatError):
        FilterPipeline().load(src)
    assert len(calls) == 1


def test_preview_written(tmp_path, bmp_file):
    path, _ = bmp_file
    preview = tmp_path / "compare.png"
    FilterPipeline().run(path, FilterSpec(FilterKind.SEPIA, strength=5), preview=preview)
    assert preview.exists()
    assert preview.read_bytes()[:8] == b"\x89PNG\r\n\x1a\n"


def test_preview_skipped_for_ascii(tmp_path, bmp_file):
    path, _ = bmp_file
    preview = tmp_path / "compare.png"
    FilterPipeline().run(path, FilterSpec(FilterKind.ASCII_ART, ascii_width=3), preview=preview)
    assert not preview.exists()
