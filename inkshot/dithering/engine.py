from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import dataclass
from typing import Optional, Union

from ..errors import InvalidInput, ProcessingFailed
from ..options import DitherOptions
from .backends import DitherBackend, PillowBackend, sniff_format

logger = logging.getLogger(__name__)

ImageBytes = Union[bytes, bytearray, memoryview]


@dataclass(frozen=True)
class DitherResult:
    data: bytes
    options: DitherOptions
    elapsed_ms: float
    input_size: int
    output_size: int


class DitheringEngine:
    """Validates a request and runs it on a blocking backend off the event loop.

    No state is kept between calls and failures are not retried.
    """

    def __init__(self, backend: Optional[DitherBackend] = None) -> None:
        self.backend = backend or PillowBackend()

    async def run(self, image_bytes: ImageBytes, options: Optional[DitherOptions] = None) -> DitherResult:
        options = options if options is not None else DitherOptions()
        data = self.validate(image_bytes, options)
        if options.is_identity:
            logger.debug("Dithering skipped: no processing requested")
            return DitherResult(image_bytes, options, 0.0, len(data), len(data))  # type: ignore[arg-type]

        start = time.perf_counter()
        loop = asyncio.get_running_loop()
        try:
            result = await loop.run_in_executor(None, self.backend.process, data, options)
        except Exception as exc:
            raise ProcessingFailed(f"Dithering failed: {exc}", exc) from exc
        if not result:
            raise ProcessingFailed("Dithering failed: backend produced empty output")
        elapsed_ms = (time.perf_counter() - start) * 1000.0

        logger.info(
            "Dithering applied: method=%s bit_depth=%d gamma_correction=%s duration=%dms input=%dKB output=%dKB",
            options.method,
            options.bit_depth,
            options.gamma_correction,
            elapsed_ms,
            round(len(data) / 1024),
            round(len(result) / 1024),
            extra={
                "dither": {
                    "method": options.method,
                    "bit_depth": options.bit_depth,
                    "gamma_correction": options.gamma_correction,
                    "backend": self.backend.name,
                    "duration_ms": elapsed_ms,
                    "input_size": len(data),
                    "output_size": len(result),
                }
            },
        )
        return DitherResult(bytes(result), options, elapsed_ms, len(data), len(result))

    @staticmethod
    def validate(image_bytes: ImageBytes, options: DitherOptions) -> bytes:
        """Check input and options; return an immutable copy of the input."""
        if not isinstance(image_bytes, (bytes, bytearray, memoryview)):
            raise InvalidInput(f"image_bytes must be a bytes-like buffer, got {type(image_bytes).__name__}")
        data = bytes(image_bytes)
        if not data:
            raise InvalidInput("image_bytes is empty")
        sniff_format(data)
        options.validate()
        return data


async def dither(
    image_bytes: ImageBytes,
    options: Optional[DitherOptions] = None,
    backend: Optional[DitherBackend] = None,
) -> bytes:
    """Dither an encoded image for an e-ink panel and return the encoded result."""
    result = await DitheringEngine(backend).run(image_bytes, options)
    return result.data
