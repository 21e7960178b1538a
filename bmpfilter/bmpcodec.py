#!/usr/bin/env python3
"""
bmpcodec.py: 24-bit uncompressed BMP reader/writer (no Pillow)

Reads:
- BITMAPFILEHEADER (14 bytes) and BITMAPINFOHEADER (40 bytes)
- BGR pixel rows, bottom-to-top unless the height is negative,
  each row padded to a multiple of 4 bytes
Returns:
    PixelGrid (top row first, RGB), BitmapHeaders
"""

from __future__ import annotations

import dataclasses
import logging
import os
import struct
from dataclasses import dataclass
from pathlib import Path
from typing import BinaryIO, Optional, Union

import numpy as np

from .config import (
    BMP_BITS_PER_PIXEL,
    BMP_COMPRESSION_RGB,
    BMP_DEFAULT_PPM,
    BMP_FILE_HEADER_FMT,
    BMP_FILE_HEADER_SIZE,
    BMP_INFO_HEADER_FMT,
    BMP_INFO_HEADER_SIZE,
    BMP_MAGIC,
)
from .errors import AllocationError, ImageReadError, UnsupportedFormatError
from .pixel_grid import PixelGrid

logger = logging.getLogger(__name__)


@dataclass
class BitmapFileHeader:
    type: int
    file_size: int
    reserved1: int
    reserved2: int
    pixel_offset: int

    def pack(self) -> bytes:
        return struct.pack(BMP_FILE_HEADER_FMT, *dataclasses.astuple(self))


@dataclass
class BitmapInfoHeader:
    size: int
    width: int
    height: int
    planes: int
    bit_count: int
    compression: int
    image_size: int
    x_pels_per_meter: int
    y_pels_per_meter: int
    colors_used: int
    colors_important: int

    @property
    def top_down(self) -> bool:
        return self.height < 0

    def pack(self) -> bytes:
        return struct.pack(BMP_INFO_HEADER_FMT, *dataclasses.astuple(self))


@dataclass
class BitmapHeaders:
    file: BitmapFileHeader
    info: BitmapInfoHeader


def row_padding(width: int) -> int:
    return (4 - (width * 3) % 4) % 4


def row_stride(width: int) -> int:
    return width * 3 + row_padding(width)


# ------------------ Reading ------------------

def read_bmp_headers(fp: BinaryIO) -> BitmapHeaders:
    data = fp.read(BMP_FILE_HEADER_SIZE + BMP_INFO_HEADER_SIZE)
    if len(data) < BMP_FILE_HEADER_SIZE + BMP_INFO_HEADER_SIZE:
        raise UnsupportedFormatError("Incomplete bitmap header")
    file_header = BitmapFileHeader(*struct.unpack(BMP_FILE_HEADER_FMT, data[:BMP_FILE_HEADER_SIZE]))
    info_header = BitmapInfoHeader(*struct.unpack(BMP_INFO_HEADER_FMT, data[BMP_FILE_HEADER_SIZE:]))
    return BitmapHeaders(file_header, info_header)


def validate_headers(headers: BitmapHeaders):
    """Accept only uncompressed 24-bit bitmaps with a usable size."""
    fh, ih = headers.file, headers.info
    if fh.type != BMP_MAGIC:
        raise UnsupportedFormatError(f"Not a bitmap (magic 0x{fh.type:04X})")
    if ih.bit_count != BMP_BITS_PER_PIXEL:
        raise UnsupportedFormatError(f"Unsupported bitmap depth: {ih.bit_count}-bit")
    if ih.compression != BMP_COMPRESSION_RGB:
        raise UnsupportedFormatError(f"Unsupported bitmap compression: {ih.compression}")
    if ih.width <= 0 or ih.height == 0:
        raise UnsupportedFormatError(f"Invalid bitmap dimensions {ih.width}x{ih.height}")


def decode_pixels(raw: bytes, width: int, height: int, top_down: bool) -> PixelGrid:
    stride = row_stride(width)
    if len(raw) < stride * height:
        raise ImageReadError(
            f"Truncated pixel data: expected {stride * height} bytes, got {len(raw)}"
        )
    try:
        rows = np.frombuffer(raw, dtype=np.uint8, count=stride * height).reshape(height, stride)
        bgr = rows[:, :width * 3].reshape(height, width, 3)
        rgb = bgr[:, :, ::-1]
        if not top_down:
            rgb = rgb[::-1]
        return PixelGrid(rgb.copy())
    except (MemoryError, OverflowError) as exc:
        raise AllocationError(f"Could not allocate memory for a {width}x{height} image") from exc


def decode_bmp(path: Union[str, Path]):
    """Decode a 24-bit bitmap into (PixelGrid, BitmapHeaders)."""
    path = Path(path)
    try:
        with open(path, "rb") as fp:
            headers = read_bmp_headers(fp)
            validate_headers(headers)
            info = headers.info
            height = abs(info.height)
            expected = row_stride(info.width) * height
            available = os.fstat(fp.fileno()).st_size - headers.file.pixel_offset
            if expected > available:
                raise ImageReadError(
                    f"Truncated pixel data: header says {info.width}x{height} "
                    f"({expected} bytes), file holds {max(available, 0)}"
                )
            fp.seek(headers.file.pixel_offset)
            try:
                raw = fp.read(expected)
            except (MemoryError, OverflowError) as exc:
                raise AllocationError(f"Could not allocate memory for a {info.width}x{height} image") from exc
    except FileNotFoundError as exc:
        raise ImageReadError(f"Could not open file {path}") from exc
    except IsADirectoryError as exc:
        raise ImageReadError(f"Could not open file {path}: is a directory") from exc
    except PermissionError as exc:
        raise ImageReadError(f"Could not open file {path}: permission denied") from exc

    grid = decode_pixels(raw, info.width, height, info.top_down)
    logger.info(f"Decoded {path.name}: {grid.width}x{grid.height}")
    return grid, headers


# ------------------ Writing ------------------

def make_headers(width: int, height: int) -> BitmapHeaders:
    """Fresh headers for a bottom-up 24-bit bitmap of the given size."""
    image_size = row_stride(width) * height
    offset = BMP_FILE_HEADER_SIZE + BMP_INFO_HEADER_SIZE
    return BitmapHeaders(
        BitmapFileHeader(BMP_MAGIC, offset + image_size, 0, 0, offset),
        BitmapInfoHeader(
            BMP_INFO_HEADER_SIZE, width, height, 1, BMP_BITS_PER_PIXEL,
            BMP_COMPRESSION_RGB, image_size, BMP_DEFAULT_PPM, BMP_DEFAULT_PPM, 0, 0,
        ),
    )


def normalize_headers(headers: BitmapHeaders) -> BitmapHeaders:
    """
    Copy of `headers` whose layout fields match what encode_bmp writes:
    a 40-byte info header directly followed by the pixel rows.
    """
    info = headers.info
    image_size = row_stride(info.width) * abs(info.height)
    offset = BMP_FILE_HEADER_SIZE + BMP_INFO_HEADER_SIZE
    return BitmapHeaders(
        dataclasses.replace(headers.file, file_size=offset + image_size, pixel_offset=offset),
        dataclasses.replace(info, size=BMP_INFO_HEADER_SIZE, image_size=image_size),
    )


def encode_pixels(grid: PixelGrid, top_down: bool = False) -> bytes:
    rows = grid.pixels[:, :, ::-1]
    if not top_down:
        rows = rows[::-1]
    padding = row_padding(grid.width)
    if padding:
        pad = np.zeros((grid.height, padding), dtype=np.uint8)
        data = np.concatenate([rows.reshape(grid.height, grid.width * 3), pad], axis=1)
    else:
        data = rows.reshape(grid.height, grid.width * 3)
    return np.ascontiguousarray(data).tobytes()


def encode_bmp(grid: PixelGrid, path: Union[str, Path], headers: Optional[BitmapHeaders] = None):
    """
    Write `grid` as a 24-bit bitmap. Headers read from the source file are
    reused (resolution, reserved fields, row order); without them fresh
    headers are built.
    """
    if headers is None:
        headers = make_headers(grid.width, grid.height)
    elif headers.info.width != grid.width or abs(headers.info.height) != grid.height:
        raise ValueError(
            f"Header size {headers.info.width}x{abs(headers.info.height)} "
            f"does not match grid {grid.width}x{grid.height}"
        )
    headers = normalize_headers(headers)

    path = Path(path)
    with open(path, "wb") as fp:
        fp.write(headers.file.pack())
        fp.write(headers.info.pack())
        fp.write(encode_pixels(grid, headers.info.top_down))
    logger.info(f"Output file created: {path}")
