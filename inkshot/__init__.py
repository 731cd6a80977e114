"""Image preparation for e-ink dashboards.

Screenshots are dithered to a small number of gray levels and optionally
packed into 1-bit or 24-bit BMP containers for display firmware.
"""

from .dithering import DitherResult, DitheringEngine, dither
from .errors import BufferTooSmall, InkshotError, InvalidInput, InvalidOption, ProcessingFailed, UnsupportedDepth
from .options import DitherOptions, parse_dither_params, supported_methods
from .raster import BMPEncoder, encode

__all__ = [
    "BMPEncoder",
    "BufferTooSmall",
    "DitherOptions",
    "DitherResult",
    "DitheringEngine",
    "InkshotError",
    "InvalidInput",
    "InvalidOption",
    "ProcessingFailed",
    "UnsupportedDepth",
    "dither",
    "encode",
    "parse_dither_params",
    "supported_methods",
]
