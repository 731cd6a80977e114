from __future__ import annotations

import io
import struct
from typing import Dict, Optional

from PIL import Image, PngImagePlugin

from ...options import METHOD_FLOYD_STEINBERG, METHOD_ORDERED, DitherOptions
from .. import algorithms
from .base import DitherBackend, output_format_for

# Metadata keys that carry a tone-response curve or color profile.
PROFILE_INFO_KEYS = ("icc_profile", "gamma", "srgb", "chromaticity")
BILEVEL_FORMATS = {"PNG", "BMP", "TIFF"}


class PillowBackend(DitherBackend):
    """In-process implementation of the dithering pipeline."""

    name = "pillow"

    def process(self, data: bytes, options: DitherOptions) -> bytes:
        with Image.open(io.BytesIO(data)) as img:
            img.load()
            input_format = img.format or ""
            info = dict(img.info)
            gray = self._to_grayscale(img)
        if options.gamma_correction:
            info = self._strip_profile(info)
        if options.adjusts_levels:
            gray = gray.point(algorithms.level_lut(options.black_level, options.white_level))
        pixels = self.quantize(gray.tobytes(), gray.width, gray.height, options)
        result = Image.frombytes("L", gray.size, bytes(pixels))
        return self._encode(result, output_format_for(input_format), options, info)

    @staticmethod
    def quantize(pixels: bytes, width: int, height: int, options: DitherOptions) -> bytearray:
        levels = options.levels
        if options.method == METHOD_FLOYD_STEINBERG:
            return algorithms.floyd_steinberg(pixels, width, height, levels)
        if options.method == METHOD_ORDERED:
            return algorithms.ordered(pixels, width, height, levels)
        if options.bit_depth == 1:
            return algorithms.threshold(pixels)
        return algorithms.posterize(pixels, levels)

    @staticmethod
    def _to_grayscale(img: Image.Image) -> Image.Image:
        if img.mode == "L":
            return img.copy()
        if img.mode != "RGB":
            img = img.convert("RGB")
        return img.convert("L")

    @staticmethod
    def _strip_profile(info: Dict[str, object]) -> Dict[str, object]:
        return {key: value for key, value in info.items() if key not in PROFILE_INFO_KEYS}

    @staticmethod
    def _encode(
        img: Image.Image,
        fmt: str,
        options: DitherOptions,
        info: Dict[str, object],
    ) -> bytes:
        if options.bit_depth == 1 and fmt in BILEVEL_FORMATS:
            img = img.convert("1", dither=Image.Dither.NONE)
        kwargs: Dict[str, object] = {}
        if fmt == "PNG":
            pnginfo = _gamma_chunk(info.get("gamma"))
            if pnginfo is not None:
                kwargs["pnginfo"] = pnginfo
        elif fmt == "WEBP":
            kwargs["lossless"] = True
        elif fmt == "JPEG":
            kwargs["quality"] = 95
        out = io.BytesIO()
        img.save(out, format=fmt, **kwargs)
        return out.getvalue()


def _gamma_chunk(gamma: object) -> Optional[PngImagePlugin.PngInfo]:
    if not isinstance(gamma, (int, float)) or gamma <= 0:
        return None
    pnginfo = PngImagePlugin.PngInfo()
    pnginfo.add(b"gAMA", struct.pack(">I", int(round(gamma * 100000))))
    return pnginfo
