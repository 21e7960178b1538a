# converter.py
"""
Conversion of other image formats into a 24-bit bitmap.

The default backend runs ImageMagick's `convert` in a separate process;
the Pillow backend does the same conversion in-process.
"""

import logging
import subprocess
from pathlib import Path
from typing import List, Union

from PIL import Image, UnidentifiedImageError

from .config import (
    BMP_EXTENSION,
    CONVERTER_IMAGEMAGICK,
    CONVERTER_PILLOW,
    CONVERTERS,
    DEFAULT_CONVERTER,
    IMAGEMAGICK_COMMAND,
)
from .errors import ConversionError

logger = logging.getLogger(__name__)


def derived_bmp_path(path: Union[str, Path]) -> Path:
    """Same directory and stem, bitmap extension."""
    return Path(path).with_suffix(BMP_EXTENSION)


def is_bmp_path(path: Union[str, Path]) -> bool:
    return Path(path).suffix.lower() == BMP_EXTENSION


def imagemagick_command(src: Path, dst: Path) -> List[str]:
    return [part.format(src=src, dst=dst) for part in IMAGEMAGICK_COMMAND]


def convert_with_imagemagick(src: Path, dst: Path):
    cmd = imagemagick_command(src, dst)
    logger.debug(f"Running: {' '.join(cmd)}")
    try:
        result = subprocess.run(cmd, capture_output=True, text=True)
    except FileNotFoundError as exc:
        raise ConversionError(f"ImageMagick 'convert' was not found; cannot convert {src}") from exc
    if result.returncode != 0:
        detail = result.stderr.strip()
        raise ConversionError(
            f"Image conversion failed with code {result.returncode}" + (f": {detail}" if detail else "")
        )


def convert_with_pillow(src: Path, dst: Path):
    try:
        with Image.open(src) as img:
            img.convert("RGB").save(dst, format="BMP")
    except (UnidentifiedImageError, OSError) as exc:
        raise ConversionError(f"Pillow could not convert {src}: {exc}") from exc


def convert_to_bmp(path: Union[str, Path], backend: str = DEFAULT_CONVERTER) -> Path:
    """
    Convert `path` to a 24-bit bitmap beside it and return the new path.
    Raises ConversionError when the backend fails.
    """
    src = Path(path)
    if backend not in CONVERTERS:
        raise ValueError(f"Unknown converter '{backend}', expected one of {', '.join(CONVERTERS)}")
    dst = derived_bmp_path(src)

    if backend == CONVERTER_IMAGEMAGICK:
        convert_with_imagemagick(src, dst)
    elif backend == CONVERTER_PILLOW:
        convert_with_pillow(src, dst)

    logger.info(f"Image converted successfully: {dst}")
    return dst
