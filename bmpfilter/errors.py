# errors.py
"""
Exceptions raised while reading, filtering and writing images.

Each class also derives from the builtin that best describes it, so callers
that only know about OSError / ValueError / MemoryError still catch them.
"""


class BmpFilterError(Exception):
    """Base class for every error reported by bmpfilter."""


class ImageReadError(BmpFilterError, OSError):
    """The input file is missing, unreadable or truncated."""


class UnsupportedFormatError(BmpFilterError, ValueError):
    """The file is not an uncompressed 24-bit bitmap."""


class ConversionError(UnsupportedFormatError):
    """The external converter failed; never retried."""


class AllocationError(BmpFilterError, MemoryError):
    """The pixel buffer could not be allocated."""


class InvalidFilterSelection(BmpFilterError, ValueError):
    """Unknown filter, or strength/width outside its allowed range."""


class InvalidResizeTarget(BmpFilterError, ValueError):
    """Requested ascii size exceeds the source or gives an empty box."""
