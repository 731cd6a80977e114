from .bmp import (
    MONO_PALETTE,
    SUPPORTED_BITS_PER_PIXEL,
    BMPEncoder,
    BMPHeader,
    bgr_line,
    encode,
    pack_line,
)
from .image import encode_image, image_to_samples
from .types import RasterSamples

__all__ = [
    "BMPEncoder",
    "BMPHeader",
    "MONO_PALETTE",
    "RasterSamples",
    "SUPPORTED_BITS_PER_PIXEL",
    "bgr_line",
    "encode",
    "encode_image",
    "image_to_samples",
    "pack_line",
]
