# preview.py
"""
Before/after comparison sheet: both images side by side with their
R, G, B and gray histograms underneath, saved as a PNG.
"""

from pathlib import Path
from typing import Dict, Union

import matplotlib.pyplot as plt
import numpy as np

from .image_processing import grayscale_values
from .pixel_grid import PixelGrid

HISTOGRAM_COLORS = {"R": "red", "G": "green", "B": "blue", "Gray": "gray"}


def compute_histograms(grid: PixelGrid) -> Dict[str, np.ndarray]:
    """256-bin counts for each channel and for the (R+G+B)//3 gray level."""
    pixels = grid.pixels
    return {
        "R": np.bincount(pixels[:, :, 0].ravel(), minlength=256),
        "G": np.bincount(pixels[:, :, 1].ravel(), minlength=256),
        "B": np.bincount(pixels[:, :, 2].ravel(), minlength=256),
        "Gray": np.bincount(grayscale_values(pixels).ravel(), minlength=256),
    }


def _plot_histograms(ax, grid: PixelGrid):
    for name, hist in compute_histograms(grid).items():
        ax.plot(range(256), hist, color=HISTOGRAM_COLORS[name], label=name, linewidth=1)
    ax.set_xlim(0, 255)
    ax.legend(loc="upper right", fontsize="small")


def save_comparison(before: PixelGrid, after: PixelGrid, path: Union[str, Path],
                    title: str = "Filtered"):
    fig, axes = plt.subplots(2, 2, figsize=(10, 8))

    axes[0][0].imshow(before.pixels)
    axes[0][0].set_title("Original")
    axes[0][1].imshow(after.pixels)
    axes[0][1].set_title(title)
    for ax in axes[0]:
        ax.axis("off")

    _plot_histograms(axes[1][0], before)
    _plot_histograms(axes[1][1], after)

    fig.tight_layout()
    fig.savefig(path, format="png")
    plt.close(fig)
