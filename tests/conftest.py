import os

os.environ.setdefault("MPLBACKEND", "Agg")

import numpy as np  # noqa: E402
import pytest  # noqa: E402

from bmpfilter.bmpcodec import encode_bmp  # noqa: E402
from bmpfilter.pixel_grid import PixelGrid  # noqa: E402


def uniform_grid(width, height, rgb):
    return PixelGrid.blank(width, height, rgb)


def checkerboard(size, block=1, dark=(0, 0, 0), light=(255, 255, 255)):
    rows = []
    for y in range(size):
        rows.append([light if ((x // block) + (y // block)) % 2 else dark for x in range(size)])
    return PixelGrid.from_rows(rows)


def random_grid(width, height, seed=0):
    rng = np.random.default_rng(seed)
    return PixelGrid(rng.integers(0, 256, size=(height, width, 3), dtype=np.uint8))


@pytest.fixture
def gray_4x4() -> PixelGrid:
    """A 4x4 image filled with (128, 128, 128)."""
    return uniform_grid(4, 4, (128, 128, 128))


@pytest.fixture
def noisy_grid() -> PixelGrid:
    return random_grid(16, 12, seed=1)


@pytest.fixture
def bmp_file(tmp_path):
    """Write a 7x5 random bitmap (7 columns needs row padding) and return (path, grid)."""
    grid = random_grid(7, 5, seed=2)
    path = tmp_path / "sample.bmp"
    encode_bmp(grid, path)
    return path, grid
