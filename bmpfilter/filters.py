#!/usr/bin/env python3
"""
filters.py

Spatial domain filters on a PixelGrid:
- Gaussian blur (3x3 binomial kernel)
- Edge detection via the Sobel operator
- Sharpen (unsharp mask built from grid arithmetic)
- Noise reduction (variable-size median)

Every filter here reads its neighbours from a snapshot of the grid taken
before the pass and writes into the live grid, so no pixel ever sees an
already-filtered neighbour.
"""

import enum
import logging
from typing import Iterator, Sequence, Tuple

import numpy as np
from numpy.lib.stride_tricks import sliding_window_view

from .config import GAUSSIAN_KERNEL, SOBEL_GX, SOBEL_GY
from .image_processing import grayscale_values, round_half_up
from .pixel_grid import PixelGrid

logger = logging.getLogger(__name__)

Kernel = Sequence[Sequence[float]]

# ------------------ Border handling ------------------


class BorderPolicy(enum.Enum):
    """How a filter treats pixels whose window leaves the image."""

    SKIP = "skip"    # leave the outer ring untouched
    CLAMP = "clamp"  # shrink the window to the in-bounds samples


def has_interior(grid: PixelGrid, radius: int = 1) -> bool:
    return grid.height > 2 * radius and grid.width > 2 * radius


def clamped_window(y: int, x: int, offset: int, height: int, width: int) -> Tuple[slice, slice]:
    """Rows/cols of the square window around (y, x), cut at the image edge."""
    return (
        slice(max(0, y - offset), min(height, y + offset + 1)),
        slice(max(0, x - offset), min(width, x + offset + 1)),
    )


def border_pixels(height: int, width: int, offset: int) -> Iterator[Tuple[int, int]]:
    """(y, x) of every pixel whose window reaches past the image edge."""
    for y in range(height):
        if offset <= y < height - offset:
            xs = list(range(min(offset, width))) + list(range(max(width - offset, offset), width))
        else:
            xs = range(width)
        for x in xs:
            yield y, x


# ------------------ Convolution ------------------


def pad_replicate(values: np.ndarray, r: int) -> np.ndarray:
    """Replicate-pad the first two axes by r pixels."""
    pad = ((r, r), (r, r)) + ((0, 0),) * (values.ndim - 2)
    return np.pad(values, pad, mode="edge")


def convolve3x3(values: np.ndarray, kernel: Kernel,
                border: BorderPolicy = BorderPolicy.SKIP) -> np.ndarray:
    """
    Signed 3x3 correlation of `values`, shape (h, w) or (h, w, c), in float64.

    SKIP returns only the interior response, shape (h-2, w-2[, c]).
    CLAMP replicates the edge pixels and returns a full-size response.
    """
    src = values.astype(np.float64)
    if border is BorderPolicy.CLAMP:
        src = pad_replicate(src, 1)
    h, w = src.shape[0], src.shape[1]
    out = np.zeros((h - 2, w - 2) + src.shape[2:], dtype=np.float64)
    for ky in range(3):
        for kx in range(3):
            weight = kernel[ky][kx]
            if weight:
                out += src[ky:h - 2 + ky, kx:w - 2 + kx] * weight
    return out


def _target(grid: PixelGrid, border: BorderPolicy) -> np.ndarray:
    """The part of the live grid a 3x3 filter writes to."""
    return grid.pixels[1:-1, 1:-1] if border is BorderPolicy.SKIP else grid.pixels


def gaussian_blur(grid: PixelGrid, border: BorderPolicy = BorderPolicy.SKIP):
    """One 3x3 Gaussian pass; with SKIP the 1px border ring is kept."""
    if border is BorderPolicy.SKIP and not has_interior(grid):
        return
    snapshot = grid.copy()
    blurred = convolve3x3(snapshot.pixels, GAUSSIAN_KERNEL, border)
    _target(grid, border)[...] = np.clip(blurred, 0.0, 255.0).astype(np.uint8)
    logger.debug(f"gaussian blur pass on {grid.width}x{grid.height} grid")


def edge_detection(grid: PixelGrid, border: BorderPolicy = BorderPolicy.SKIP):
    """
    Sobel gradient magnitude of the grayscale image. With SKIP the border
    ring keeps its original colour.
    """
    if border is BorderPolicy.SKIP and not has_interior(grid):
        return
    snapshot = grid.copy()
    intensity = grayscale_values(snapshot.pixels)
    gx = convolve3x3(intensity, SOBEL_GX, border)
    gy = convolve3x3(intensity, SOBEL_GY, border)
    magnitude = round_half_up(np.sqrt(gx * gx + gy * gy))
    magnitude = np.clip(magnitude, 0, 255).astype(np.uint8)
    _target(grid, border)[...] = magnitude[:, :, np.newaxis]
    logger.debug(f"edge detection on {grid.width}x{grid.height} grid")


# ------------------ Grid arithmetic ------------------


def subtract_grids(a: PixelGrid, b: PixelGrid) -> PixelGrid:
    """a - b per channel with unsigned 8-bit wraparound (no clamping)."""
    return PixelGrid(a.pixels - b.pixels)


def multiply_grid(grid: PixelGrid, scalar: float):
    """Scale every channel in place, truncating and clamping to 0..255."""
    scaled = np.trunc(grid.pixels.astype(np.float64) * scalar)
    grid.pixels[...] = np.clip(scaled, 0, 255).astype(np.uint8)


def add_grids(a: PixelGrid, b: PixelGrid) -> PixelGrid:
    """a + b per channel, clamped to 0..255."""
    total = a.pixels.astype(np.int32) + b.pixels.astype(np.int32)
    return PixelGrid(np.clip(total, 0, 255).astype(np.uint8))


# ------------------ Sharpen ------------------


def sharpen(grid: PixelGrid, strength: float, wraparound: bool = True):
    """
    Unsharp mask: grid + strength * (grid - blur(grid)).

    With `wraparound` the difference is taken in unsigned bytes, so a pixel
    darker than its blur produces a large positive mask value. Without it
    the difference is signed and only the final sum is clamped.
    """
    blurred = grid.copy()
    gaussian_blur(blurred)

    if wraparound:
        mask = subtract_grids(grid, blurred)
        multiply_grid(mask, strength)
        grid.pixels[...] = add_grids(grid, mask).pixels
    else:
        original = grid.pixels.astype(np.float64)
        diff = original - blurred.pixels.astype(np.float64)
        out = np.trunc(original + strength * diff)
        grid.pixels[...] = np.clip(out, 0, 255).astype(np.uint8)
    logger.debug(f"sharpen strength={strength} wraparound={wraparound}")


# ------------------ Median ------------------


def median_kernel_size(strength: int) -> int:
    """Window size for a noise-reduction strength (even strengths are halved)."""
    if strength % 2 == 0:
        strength = (strength + 1) // 2
    return 3 + strength


def noise_reduction(grid: PixelGrid, strength: int, border: BorderPolicy = BorderPolicy.CLAMP):
    """
    Median filter with a window that grows with `strength`.

    With CLAMP the window is clipped at the image edge, so border pixels see
    fewer samples; SKIP leaves pixels closer than the window radius to the
    edge untouched. For `count` samples the value at index count // 2 of
    each sorted channel is kept, which is the upper median when `count` is
    even.
    """
    kernel_size = median_kernel_size(strength)
    offset = kernel_size // 2
    snapshot = grid.copy()
    src = snapshot.pixels
    h, w = grid.height, grid.width

    # full windows, one image row at a time
    size = 2 * offset + 1
    mid = size * size // 2
    if h > 2 * offset and w > 2 * offset:
        windows = sliding_window_view(src, (size, size), axis=(0, 1))
        for y in range(h - 2 * offset):
            samples = windows[y].reshape(w - 2 * offset, 3, size * size)
            medians = np.partition(samples, mid, axis=2)[:, :, mid]
            grid.pixels[y + offset, offset:w - offset] = medians

    if border is BorderPolicy.CLAMP:
        for y, x in border_pixels(h, w, offset):
            rows, cols = clamped_window(y, x, offset, h, w)
            samples = src[rows, cols].reshape(-1, 3)
            ordered = np.sort(samples, axis=0)
            grid.pixels[y, x] = ordered[len(ordered) // 2]
    logger.debug(f"noise reduction kernel={kernel_size} on {w}x{h} grid")
