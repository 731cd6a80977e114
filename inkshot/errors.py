from __future__ import annotations

from typing import Optional


class InkshotError(Exception):
    """Base class for all inkshot errors."""


class InvalidInput(InkshotError, ValueError):
    """Input buffer is missing, empty or not a decodable image."""


class InvalidOption(InkshotError, ValueError):
    """Options failed validation."""


class ProcessingFailed(InkshotError, RuntimeError):
    """The transform was attempted but the backend failed."""

    def __init__(self, message: str, cause: Optional[BaseException] = None) -> None:
        super().__init__(message)
        self.cause = cause


class UnsupportedDepth(InkshotError, ValueError):
    """Raster container does not support the requested bits per pixel."""


class BufferTooSmall(InkshotError, ValueError):
    """Pixel samples do not cover width * height * channels."""
