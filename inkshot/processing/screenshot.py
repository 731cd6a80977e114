from __future__ import annotations

import asyncio
import io
import logging
import time
from dataclasses import dataclass
from typing import Mapping, Optional

from PIL import Image, ImageOps, UnidentifiedImageError

from ..dithering import DitherBackend, DitheringEngine
from ..errors import InvalidInput, InvalidOption
from ..options import DitherOptions, parse_dither_params, parse_int
from ..raster import encode_image

logger = logging.getLogger(__name__)

FORMATS = ("png", "jpeg", "webp", "bmp")
ROTATIONS = (90, 180, 270)
CONTENT_TYPES = {
    "png": "image/png",
    "jpeg": "image/jpeg",
    "webp": "image/webp",
    "bmp": "image/bmp",
}
MIN_EINK_COLORS = 2
MAX_EINK_COLORS = 256
# Two-color e-ink output keeps only near-white pixels white.
EINK_THRESHOLD = 220


@dataclass(frozen=True)
class ScreenshotParams:
    format: str = "png"
    rotate: Optional[int] = None
    eink_colors: Optional[int] = None
    invert: bool = False
    dithering: Optional[DitherOptions] = None

    def validate(self) -> "ScreenshotParams":
        if self.format not in FORMATS:
            raise InvalidOption(f"Invalid output format: {self.format!r}. Supported: {', '.join(FORMATS)}")
        if self.rotate is not None and self.rotate not in ROTATIONS:
            raise InvalidOption(f"Invalid rotation: {self.rotate!r}. Supported: 90, 180, 270")
        if self.eink_colors is not None and not MIN_EINK_COLORS <= self.eink_colors <= MAX_EINK_COLORS:
            raise InvalidOption(f"eink colors must be between {MIN_EINK_COLORS} and {MAX_EINK_COLORS}")
        if self.dithering is not None:
            self.dithering.validate()
        return self

    @property
    def content_type(self) -> str:
        return CONTENT_TYPES[self.format]


@dataclass(frozen=True)
class ProcessedImage:
    data: bytes
    format: str
    content_type: str
    elapsed_ms: float


def parse_screenshot_params(params: Mapping[str, str]) -> ScreenshotParams:
    """Build post-processing parameters from URL query parameters."""
    fmt = params.get("format") or "png"
    if fmt not in FORMATS:
        fmt = "png"
    rotate = parse_int(params.get("rotate"))
    if rotate not in ROTATIONS:
        rotate = None
    eink_colors = parse_int(params.get("eink"))
    if eink_colors is not None and not MIN_EINK_COLORS <= eink_colors <= MAX_EINK_COLORS:
        eink_colors = None
    return ScreenshotParams(
        format=fmt,
        rotate=rotate,
        eink_colors=eink_colors,
        invert="invert" in params,
        dithering=parse_dither_params(params),
    ).validate()


def bmp_bits_for_levels(levels: int) -> int:
    """BMP only carries 1-bit and 24-bit layouts; anything above two levels is 24-bit."""
    return 1 if levels <= 2 else 24


def convert_to_format(img: Image.Image, fmt: str, bits_per_pixel: int = 24, colors: Optional[int] = None) -> bytes:
    if fmt == "bmp":
        return encode_image(img, bits_per_pixel)
    out = io.BytesIO()
    if fmt == "jpeg":
        if img.mode not in ("RGB", "L"):
            img = img.convert("RGB")
        img.save(out, format="JPEG")
    elif fmt == "webp":
        img.save(out, format="WEBP")
    else:
        if colors:
            img = img.convert("RGB").quantize(colors=colors)
        img.save(out, format="PNG")
    return out.getvalue()


def apply_legacy_eink(img: Image.Image, fmt: str, eink_colors: int, invert: bool) -> bytes:
    """Threshold (2 colors) or palette reduction selected by an e-ink color count."""
    if eink_colors == 2:
        img = img.convert("L").point(lambda value: 255 if value >= EINK_THRESHOLD else 0)
        if invert:
            img = ImageOps.invert(img)
    return convert_to_format(img, fmt, bmp_bits_for_levels(eink_colors), colors=eink_colors)


class ScreenshotProcessor:
    """Turns a captured screenshot into the bytes served to a display."""

    def __init__(self, backend: Optional[DitherBackend] = None) -> None:
        self.engine = DitheringEngine(backend)

    async def process(self, image_bytes: bytes, params: Optional[ScreenshotParams] = None) -> ProcessedImage:
        params = (params or ScreenshotParams()).validate()
        start = time.perf_counter()
        loop = asyncio.get_running_loop()
        img = await loop.run_in_executor(None, self._load, image_bytes, params.rotate)

        if params.dithering is not None:
            png = await loop.run_in_executor(None, convert_to_format, img, "png")
            result = await self.engine.run(png, params.dithering)
            logger.debug("Advanced dithering took %dms", result.elapsed_ms)
            dithered = await loop.run_in_executor(None, self._load, result.data, None)
            bits = bmp_bits_for_levels(params.dithering.levels)
            data = await loop.run_in_executor(None, convert_to_format, dithered, params.format, bits)
        elif params.eink_colors:
            data = await loop.run_in_executor(
                None, apply_legacy_eink, img, params.format, params.eink_colors, params.invert
            )
        else:
            data = await loop.run_in_executor(None, convert_to_format, img, params.format)

        elapsed_ms = (time.perf_counter() - start) * 1000.0
        return ProcessedImage(data, params.format, params.content_type, elapsed_ms)

    @staticmethod
    def _load(image_bytes: bytes, rotate: Optional[int]) -> Image.Image:
        try:
            with Image.open(io.BytesIO(image_bytes)) as img:
                img.load()
                loaded = img.copy()
        except (UnidentifiedImageError, OSError, ValueError, TypeError) as exc:
            raise InvalidInput(f"Screenshot is not a decodable image: {exc}") from exc
        if rotate:
            # Pillow rotates counter-clockwise; rotation angles are clockwise.
            loaded = loaded.rotate(-rotate, expand=True)
        return loaded


async def process_screenshot(
    image_bytes: bytes,
    params: Optional[ScreenshotParams] = None,
    backend: Optional[DitherBackend] = None,
) -> ProcessedImage:
    return await ScreenshotProcessor(backend).process(image_bytes, params)
