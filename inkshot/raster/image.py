from __future__ import annotations

from PIL import Image

from .bmp import BMPEncoder


def image_to_samples(img: Image.Image, bits_per_pixel: int) -> bytes:
    """Flatten an image into the sample layout the BMP encoder expects."""
    if bits_per_pixel == 1:
        return (img if img.mode == "L" else img.convert("L")).tobytes()
    return (img if img.mode == "RGB" else img.convert("RGB")).tobytes()


def encode_image(img: Image.Image, bits_per_pixel: int) -> bytes:
    encoder = BMPEncoder(img.width, img.height, bits_per_pixel)
    return encoder.encode(image_to_samples(img, bits_per_pixel))
