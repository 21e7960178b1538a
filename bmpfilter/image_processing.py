# image_processing.py
"""
Point-processing filters. Each pixel is transformed on its own, so these
work directly on the live grid without a snapshot.
"""

import logging
from typing import Optional

import numpy as np

from .pixel_grid import PixelGrid

logger = logging.getLogger(__name__)

SEPIA_MATRIX = np.array([
    [0.393, 0.769, 0.189],
    [0.349, 0.686, 0.168],
    [0.272, 0.534, 0.131],
])


def round_half_up(values: np.ndarray) -> np.ndarray:
    """Round non-negative values with halves going up, like C's round()."""
    return np.floor(values + 0.5)


# ---------------------------------------------------------------------
# 1. Grayscale Transformation
# ---------------------------------------------------------------------
def grayscale_values(pixels: np.ndarray) -> np.ndarray:
    """s = (R + G + B) // 3 for every pixel, as a (height, width) array."""
    return (pixels.astype(np.uint16).sum(axis=2) // 3).astype(np.uint8)


def grayscale(grid: PixelGrid):
    """Replace every channel with the truncated channel average."""
    grid.pixels[...] = grayscale_values(grid.pixels)[:, :, np.newaxis]
    logger.debug(f"grayscale applied to {grid.width}x{grid.height} grid")


# ---------------------------------------------------------------------
# 2. Sepia Tone
# ---------------------------------------------------------------------
def sepia(grid: PixelGrid, strength: Optional[int] = None):
    """
    Sepia tone:
        R' = 0.393R + 0.769G + 0.189B
        G' = 0.349R + 0.686G + 0.168B
        B' = 0.272R + 0.534G + 0.131B
    each rounded and capped at 255. `strength` is accepted for the
    filter menu but does not change the result.
    """
    src = grid.pixels.astype(np.float64)
    r, g, b = src[:, :, 0], src[:, :, 1], src[:, :, 2]
    out = np.empty_like(src)
    for channel, (kr, kg, kb) in enumerate(SEPIA_MATRIX):
        out[:, :, channel] = round_half_up((r * kr) + (g * kg) + (b * kb))
    grid.pixels[...] = np.minimum(out, 255).astype(np.uint8)
    logger.debug(f"sepia applied (strength={strength} has no effect)")


# ---------------------------------------------------------------------
# 3. Horizontal Flip
# ---------------------------------------------------------------------
def flip(grid: PixelGrid):
    """Mirror left/right: pixel (y, x) swaps with (y, width - 1 - x)."""
    grid.pixels[...] = grid.pixels[:, ::-1].copy()
    logger.debug(f"flip applied to {grid.width}x{grid.height} grid")
