# config.py
"""
Constants shared by the codec, the filters and the command line.
"""

# ---------------------------------------------------------------------
# Filter strength
# ---------------------------------------------------------------------
MIN_STRENGTH = 1
MAX_STRENGTH = 100

# ---------------------------------------------------------------------
# Kernels
# ---------------------------------------------------------------------
# binomial approximation of a Gaussian with sigma ~ 1
GAUSSIAN_KERNEL = (
    (1 / 16, 2 / 16, 1 / 16),
    (2 / 16, 4 / 16, 2 / 16),
    (1 / 16, 2 / 16, 1 / 16),
)

SOBEL_GX = (
    (-1, 0, 1),
    (-2, 0, 2),
    (-1, 0, 1),
)

SOBEL_GY = (
    (1, 2, 1),
    (0, 0, 0),
    (-1, -2, -1),
)

# ---------------------------------------------------------------------
# ASCII art
# ---------------------------------------------------------------------
# 92 glyphs, darkest first
ASCII_RAMP = (
    " `.-':_,^=;><+!rc*/z?sLTv)J7(|Fi{C}fI31tlu[neoZ5Yxjya]2ESwqkP6h9d4V"
    "pOGbUAKXHm8RD#$Bg0MNWQ%&@"
)
# character cells are taller than wide
ASCII_ASPECT = 0.4

# ---------------------------------------------------------------------
# Bitmap layout (little-endian, packed)
# ---------------------------------------------------------------------
BMP_MAGIC = 0x4D42  # "BM"
BMP_FILE_HEADER_FMT = "<HIHHI"
BMP_INFO_HEADER_FMT = "<IiiHHIIiiII"
BMP_FILE_HEADER_SIZE = 14
BMP_INFO_HEADER_SIZE = 40
BMP_BITS_PER_PIXEL = 24
BMP_COMPRESSION_RGB = 0
BMP_DEFAULT_PPM = 2835  # 72 dpi
BMP_EXTENSION = ".bmp"
TEXT_EXTENSION = ".txt"

# ---------------------------------------------------------------------
# External conversion
# ---------------------------------------------------------------------
CONVERTER_IMAGEMAGICK = "imagemagick"
CONVERTER_PILLOW = "pillow"
CONVERTERS = (CONVERTER_IMAGEMAGICK, CONVERTER_PILLOW)
DEFAULT_CONVERTER = CONVERTER_IMAGEMAGICK
IMAGEMAGICK_COMMAND = ["convert", "{src}", "-depth", "8", "-type", "TrueColor", "BMP3:{dst}"]

# ---------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------
LOG_FORMAT = "%(asctime)s - %(levelname)s - %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
LOG_MAX_BYTES = 5 * 1024 * 1024
LOG_BACKUP_COUNT = 3
