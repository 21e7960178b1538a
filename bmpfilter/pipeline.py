"""
File-to-file processing: decode (converting once if needed), filter, save.

Usage:
    pipeline = FilterPipeline(converter="pillow")
    out_path = pipeline.run("photo.jpg", FilterSpec(FilterKind.BLUR, strength=3))
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Union

from .ascii_art import AsciiGrid
from .bmpcodec import BitmapHeaders, decode_bmp, encode_bmp
from .config import BMP_EXTENSION, DEFAULT_CONVERTER, TEXT_EXTENSION
from .converter import convert_to_bmp, is_bmp_path
from .errors import UnsupportedFormatError
from .filter_spec import FilterKind, FilterSpec, apply_filter
from .pixel_grid import PixelGrid
from .preview import save_comparison

logger = logging.getLogger(__name__)


@dataclass
class LoadedImage:
    grid: PixelGrid
    headers: BitmapHeaders
    path: Path  # the bitmap actually decoded (converted copy if any)


def output_path_for(source: Union[str, Path], kind: FilterKind) -> Path:
    """<stem>_<Filter Label>.bmp, or <stem>_ASCII.txt, next to `source`."""
    source = Path(source)
    ext = TEXT_EXTENSION if kind is FilterKind.ASCII_ART else BMP_EXTENSION
    return source.with_name(f"{source.stem}_{kind.label}{ext}")


class FilterPipeline:
    """Orchestrates one conversion from an input file to an output file."""

    def __init__(self, converter: str = DEFAULT_CONVERTER):
        self.converter = converter

    def load(self, path: Union[str, Path]) -> LoadedImage:
        """
        Decode `path`. A file that is not a 24-bit bitmap and does not carry
        the bitmap extension is converted once and decoded again; any second
        failure is final.
        """
        path = Path(path)
        try:
            grid, headers = decode_bmp(path)
            return LoadedImage(grid, headers, path)
        except UnsupportedFormatError as exc:
            if is_bmp_path(path):
                raise
            logger.info(f"{path.name} is not a 24-bit bitmap ({exc}); converting")

        converted = convert_to_bmp(path, backend=self.converter)
        grid, headers = decode_bmp(converted)
        return LoadedImage(grid, headers, converted)

    def save(self, image: LoadedImage, result: Optional[AsciiGrid], spec: FilterSpec,
             output: Optional[Union[str, Path]] = None) -> Path:
        out_path = Path(output) if output is not None else output_path_for(image.path, spec.kind)
        if result is not None:
            result.save(out_path)
            logger.info(f"ASCII image saved to: {out_path}")
        else:
            encode_bmp(image.grid, out_path, image.headers)
        return out_path

    def run(self, path: Union[str, Path], spec: FilterSpec,
            output: Optional[Union[str, Path]] = None,
            preview: Optional[Union[str, Path]] = None) -> Path:
        spec.validate()
        return self.process(self.load(path), spec, output, preview)

    def process(self, image: LoadedImage, spec: FilterSpec,
                output: Optional[Union[str, Path]] = None,
                preview: Optional[Union[str, Path]] = None) -> Path:
        before = image.grid.copy() if preview is not None else None
        result = apply_filter(image.grid, spec)
        out_path = self.save(image, result, spec, output)

        if before is not None:
            if result is None:
                save_comparison(before, image.grid, preview, title=spec.kind.label)
            else:
                logger.warning("Preview is not available for ASCII output")
        return out_path
