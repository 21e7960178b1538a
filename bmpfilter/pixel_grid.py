# pixel_grid.py
"""
In-memory RGB image used by every filter.

Pixels live in a single numpy uint8 buffer of shape (height, width, 3),
row-major, row 0 at the top of the picture, channels in R, G, B order.
"""

from __future__ import annotations

from typing import List, Tuple

import numpy as np
from PIL import Image

from .errors import AllocationError

# RGB row type alias
RGB = Tuple[int, int, int]
RGBRows = List[List[RGB]]


def clip8(x: int) -> int:
    return 0 if x < 0 else (255 if x > 255 else x)


class PixelGrid:
    """A rectangular grid of (R, G, B) bytes with value-semantics copy."""

    def __init__(self, pixels: np.ndarray):
        pixels = np.asarray(pixels)
        if pixels.ndim != 3 or pixels.shape[2] != 3:
            raise ValueError(f"Expected a (height, width, 3) array, got shape {pixels.shape}")
        if pixels.shape[0] <= 0 or pixels.shape[1] <= 0:
            raise ValueError("Grid width and height must be positive")
        if pixels.dtype != np.uint8:
            if pixels.min() < 0 or pixels.max() > 255:
                raise ValueError("Channel values must be in 0..255")
            pixels = pixels.astype(np.uint8)
        self.pixels = np.ascontiguousarray(pixels)

    # ---------------- Construction ----------------

    @classmethod
    def blank(cls, width: int, height: int, fill: RGB = (0, 0, 0)) -> "PixelGrid":
        if width <= 0 or height <= 0:
            raise ValueError("Grid width and height must be positive")
        try:
            pixels = np.empty((height, width, 3), dtype=np.uint8)
        except MemoryError as exc:
            raise AllocationError(f"Could not allocate a {width}x{height} image") from exc
        pixels[:, :] = fill
        return cls(pixels)

    @classmethod
    def from_rows(cls, rgb_rows: RGBRows) -> "PixelGrid":
        if not rgb_rows or not rgb_rows[0]:
            raise ValueError("Grid width and height must be positive")
        width = len(rgb_rows[0])
        if any(len(row) != width for row in rgb_rows):
            raise ValueError("Every row must have the same number of columns")
        return cls(np.array(rgb_rows, dtype=np.int64))

    @classmethod
    def from_image(cls, image: Image.Image) -> "PixelGrid":
        return cls(np.array(image.convert("RGB"), dtype=np.uint8))

    # ---------------- Shape ----------------

    @property
    def width(self) -> int:
        return self.pixels.shape[1]

    @property
    def height(self) -> int:
        return self.pixels.shape[0]

    @property
    def size(self) -> Tuple[int, int]:
        return self.width, self.height

    # ---------------- Access ----------------

    def _check(self, y: int, x: int):
        if not (0 <= y < self.height and 0 <= x < self.width):
            raise IndexError(f"Pixel ({y}, {x}) outside {self.width}x{self.height} grid")

    def get(self, y: int, x: int) -> RGB:
        self._check(y, x)
        r, g, b = self.pixels[y, x]
        return int(r), int(g), int(b)

    def set(self, y: int, x: int, rgb: RGB):
        self._check(y, x)
        self.pixels[y, x] = [clip8(int(c)) for c in rgb]

    def copy(self) -> "PixelGrid":
        """Deep copy; the clone shares no memory with this grid."""
        return PixelGrid(self.pixels.copy())

    # ---------------- Interop ----------------

    def to_rows(self) -> RGBRows:
        return [[(int(r), int(g), int(b)) for (r, g, b) in row] for row in self.pixels.tolist()]

    def to_image(self) -> Image.Image:
        return Image.fromarray(self.pixels)

    def __eq__(self, other):
        if not isinstance(other, PixelGrid):
            return NotImplemented
        return self.pixels.shape == other.pixels.shape and bool(np.array_equal(self.pixels, other.pixels))

    __hash__ = None

    def __repr__(self):
        return f"PixelGrid(width={self.width}, height={self.height})"
