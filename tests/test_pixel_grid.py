"""Tests for the in-memory pixel grid."""

import numpy as np
import pytest

from bmpfilter.errors import AllocationError
from bmpfilter.pixel_grid import PixelGrid, clip8

from conftest import random_grid


def test_blank_has_requested_size_and_fill():
    grid = PixelGrid.blank(5, 3, (1, 2, 3))
    assert grid.width == 5
    assert grid.height == 3
    assert grid.size == (5, 3)
    assert all(grid.get(y, x) == (1, 2, 3) for y in range(3) for x in range(5))


@pytest.mark.parametrize("shape", [(0, 3, 3), (3, 0, 3), (3, 3), (3, 3, 4)])
def test_rejects_bad_shapes(shape):
    with pytest.raises(ValueError):
        PixelGrid(np.zeros(shape, dtype=np.uint8))


def test_blank_rejects_non_positive_size():
    with pytest.raises(ValueError):
        PixelGrid.blank(0, 4)


def test_allocation_error_is_a_memory_error():
    assert issubclass(AllocationError, MemoryError)


def test_from_rows_rejects_ragged_rows():
    with pytest.raises(ValueError):
        PixelGrid.from_rows([[(0, 0, 0), (1, 1, 1)], [(2, 2, 2)]])


def test_from_rows_rejects_out_of_range_values():
    with pytest.raises(ValueError):
        PixelGrid.from_rows([[(0, 0, 256)]])


def test_rows_round_trip():
    rows = [[(1, 2, 3), (4, 5, 6)], [(7, 8, 9), (10, 11, 12)]]
    grid = PixelGrid.from_rows(rows)
    assert grid.to_rows() == rows
    assert grid.get(1, 0) == (7, 8, 9)


def test_copy_is_independent():
    grid = random_grid(4, 4)
    clone = grid.copy()
    assert clone == grid
    clone.set(0, 0, (0, 0, 0))
    grid.set(0, 0, (255, 255, 255))
    assert clone.get(0, 0) == (0, 0, 0)
    assert not np.shares_memory(clone.pixels, grid.pixels)


def test_accessors_are_bounds_checked():
    grid = PixelGrid.blank(2, 2)
    with pytest.raises(IndexError):
        grid.get(2, 0)
    with pytest.raises(IndexError):
        grid.set(0, -1, (0, 0, 0))


def test_set_clips_channels():
    grid = PixelGrid.blank(1, 1)
    grid.set(0, 0, (300, -5, 10))
    assert grid.get(0, 0) == (255, 0, 10)
    assert clip8(-1) == 0 and clip8(256) == 255 and clip8(7) == 7


def test_equality_checks_shape_and_pixels():
    a = PixelGrid.blank(2, 3, (9, 9, 9))
    assert a == PixelGrid.blank(2, 3, (9, 9, 9))
    assert a != PixelGrid.blank(3, 2, (9, 9, 9))
    assert a != PixelGrid.blank(2, 3, (9, 9, 8))
    assert a != "not a grid"


def test_pillow_interop():
    grid = random_grid(6, 4)
    img = grid.to_image()
    assert img.size == (6, 4)
    assert img.mode == "RGB"
    assert img.getpixel((5, 3)) == grid.get(3, 5)
    assert PixelGrid.from_image(img) == grid
