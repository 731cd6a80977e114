from __future__ import annotations

from dataclasses import dataclass
from typing import Union

from ..errors import BufferTooSmall, InvalidInput

Samples = Union[bytes, bytearray, memoryview]


@dataclass(frozen=True)
class RasterSamples:
    """Row-major pixel samples, top row first, `channels` bytes per pixel."""

    samples: Samples
    width: int
    height: int
    channels: int

    def validate(self) -> None:
        """Validate dimensions against the sample buffer."""
        if self.width <= 0 or self.height <= 0:
            raise InvalidInput("Width and height must be greater than zero")
        if len(self.samples) < self.expected_size:
            raise BufferTooSmall(
                f"Pixel buffer has {len(self.samples)} bytes, "
                f"{self.width}x{self.height}x{self.channels} needs {self.expected_size}"
            )

    @property
    def expected_size(self) -> int:
        return self.width * self.height * self.channels

    def row(self, y: int) -> bytes:
        """Return the samples of row y."""
        stride = self.width * self.channels
        return bytes(self.samples[y * stride : (y + 1) * stride])
