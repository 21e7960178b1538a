# ascii_art.py
"""
Text-art rendering: shrink the grid with box averaging, stretch its
grayscale contrast, then map each pixel to a glyph of the brightness ramp.
"""

from __future__ import annotations

import logging
import math
from pathlib import Path
from typing import List, Union

import numpy as np

from .config import ASCII_ASPECT, ASCII_RAMP
from .errors import InvalidResizeTarget
from .image_processing import grayscale_values
from .pixel_grid import PixelGrid

logger = logging.getLogger(__name__)


class AsciiGrid:
    """Rows of single display characters, top row first."""

    def __init__(self, rows: List[str]):
        if not rows or any(len(row) != len(rows[0]) for row in rows):
            raise ValueError("AsciiGrid rows must be non-empty and equally long")
        self.rows = rows

    @property
    def width(self) -> int:
        return len(self.rows[0])

    @property
    def height(self) -> int:
        return len(self.rows)

    def to_text(self) -> str:
        return "".join(row + "\n" for row in self.rows)

    def save(self, path: Union[str, Path]):
        Path(path).write_text(self.to_text(), encoding="ascii")


# ---------------------------------------------------------------------
# Downsampler
# ---------------------------------------------------------------------
def target_height(grid: PixelGrid, new_width: int) -> int:
    """Rows of text for `new_width` columns, corrected for tall glyph cells."""
    return int(math.floor(grid.height * (new_width / grid.width) * ASCII_ASPECT + 0.5))


def resize(grid: PixelGrid, new_width: int) -> PixelGrid:
    """
    Box-average `grid` down to `new_width` columns.

    Raises InvalidResizeTarget without touching `grid` when the target is
    larger than the source or a box would be empty. Boxes are laid out from
    the bottom-left corner, the first pixel in file order, so remainder rows
    are dropped from the top and remainder columns from the right.
    """
    if new_width <= 0 or new_width > grid.width:
        raise InvalidResizeTarget(
            f"Width {new_width} must be between 1 and the image width {grid.width}"
        )
    new_height = target_height(grid, new_width)
    if new_height > grid.height:
        raise InvalidResizeTarget("New size is larger than original image dimensions")

    box_x = grid.width // new_width
    box_y = grid.height // new_height if new_height > 0 else 0
    if box_x <= 0 or box_y <= 0:
        raise InvalidResizeTarget(
            f"Width {new_width} gives an empty sampling box for a {grid.width}x{grid.height} image"
        )

    first_row = grid.height - new_height * box_y
    used = grid.pixels[first_row:, :new_width * box_x].astype(np.int64)
    boxes = used.reshape(new_height, box_y, new_width, box_x, 3)
    count = max(box_x * box_y, 1)
    averaged = boxes.sum(axis=(1, 3)) // count
    logger.debug(f"resized {grid.width}x{grid.height} -> {new_width}x{new_height} (box {box_x}x{box_y})")
    return PixelGrid(averaged.astype(np.uint8))


# ---------------------------------------------------------------------
# Glyph mapper
# ---------------------------------------------------------------------
def stretch_contrast(intensity: np.ndarray) -> np.ndarray:
    """255 * (v - min) // (max - min + 1); never divides by zero."""
    lo = int(intensity.min())
    hi = int(intensity.max())
    values = intensity.astype(np.int64)
    return 255 * (values - lo) // (hi - lo + 1)


def quantize(grid: PixelGrid, ramp: str = ASCII_RAMP) -> AsciiGrid:
    """Map the grayscale-stretched grid onto `ramp`, one glyph per pixel."""
    stretched = stretch_contrast(grayscale_values(grid.pixels))
    indices = stretched * (len(ramp) - 1) // 255
    rows = ["".join(ramp[i] for i in row) for row in indices.tolist()]
    return AsciiGrid(rows)


def render_ascii(grid: PixelGrid, new_width: int) -> AsciiGrid:
    """resize() then quantize(); the source grid is left as it was."""
    return quantize(resize(grid, new_width))
