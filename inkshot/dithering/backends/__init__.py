from __future__ import annotations

from typing import Optional

from ...errors import InvalidOption
from .base import DitherBackend, output_format_for, sniff_format
from .magick import MagickBackend, build_command
from .pillow import PillowBackend

BACKEND_NAMES = ("pillow", "magick")


def get_backend(name: str, magick_path: Optional[str] = None) -> DitherBackend:
    key = (name or "").strip().lower()
    if key == "pillow":
        return PillowBackend()
    if key == "magick":
        return MagickBackend(magick_path)
    raise InvalidOption(f"Unknown dithering backend: {name!r}. Supported: {', '.join(BACKEND_NAMES)}")


__all__ = [
    "BACKEND_NAMES",
    "DitherBackend",
    "MagickBackend",
    "PillowBackend",
    "build_command",
    "get_backend",
    "output_format_for",
    "sniff_format",
]
