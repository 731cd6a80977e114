from __future__ import annotations

import io

from PIL import Image, UnidentifiedImageError

from ...errors import InvalidInput
from ...options import DitherOptions

# Formats written back in kind; anything else comes out as PNG.
WRITABLE_FORMATS = {"PNG", "BMP", "TIFF", "GIF", "WEBP", "JPEG"}
DEFAULT_OUTPUT_FORMAT = "PNG"


class DitherBackend:
    """Blocking image transform used by the dithering engine."""

    name = "base"

    def process(self, data: bytes, options: DitherOptions) -> bytes:
        raise NotImplementedError


def sniff_format(data: bytes) -> str:
    """Return the Pillow format name of an encoded image, reading only its header."""
    try:
        with Image.open(io.BytesIO(data)) as img:
            fmt = img.format
    except (UnidentifiedImageError, OSError, ValueError) as exc:
        raise InvalidInput(f"Input is not a decodable image: {exc}") from exc
    if not fmt:
        raise InvalidInput("Input is not a decodable image: unknown format")
    return fmt


def output_format_for(input_format: str) -> str:
    fmt = (input_format or "").upper()
    if fmt in WRITABLE_FORMATS:
        return fmt
    return DEFAULT_OUTPUT_FORMAT
