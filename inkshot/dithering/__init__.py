from .algorithms import BAYER_8X8, floyd_steinberg, level_lut, level_values, ordered, posterize, threshold
from .backends import DitherBackend, MagickBackend, PillowBackend, get_backend
from .engine import DitherResult, DitheringEngine, dither

__all__ = [
    "BAYER_8X8",
    "DitherBackend",
    "DitherResult",
    "DitheringEngine",
    "MagickBackend",
    "PillowBackend",
    "dither",
    "floyd_steinberg",
    "get_backend",
    "level_lut",
    "level_values",
    "ordered",
    "posterize",
    "threshold",
]
