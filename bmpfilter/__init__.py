"""
bmpfilter

Filters for uncompressed 24-bit bitmaps:
- pixel_grid: in-memory RGB grid
- image_processing: grayscale, sepia, flip
- filters: gaussian blur, edge detection, sharpen, noise reduction
- ascii_art: downsampling and glyph mapping to text
- bmpcodec: bitmap header/pixel reader and writer
- pipeline: load (with conversion), filter, save
"""

from .ascii_art import AsciiGrid, quantize, render_ascii, resize
from .bmpcodec import decode_bmp, encode_bmp
from .filter_spec import FilterKind, FilterSpec, apply_filter
from .pipeline import FilterPipeline
from .pixel_grid import PixelGrid

__version__ = "1.0.0"

__all__ = [
    'AsciiGrid',
    'FilterKind',
    'FilterPipeline',
    'FilterSpec',
    'PixelGrid',
    'apply_filter',
    'decode_bmp',
    'encode_bmp',
    'quantize',
    'render_ascii',
    'resize',
]
