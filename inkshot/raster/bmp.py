"""BMP container encoder for e-ink panels.

Only the two layouts e-ink firmware consumes are produced: 1-bit with a
black/white palette and 24-bit BGR. Both use an uncompressed
BITMAPINFOHEADER, a positive height (rows stored bottom to top) and rows
padded to a multiple of four bytes.
"""

from __future__ import annotations

import struct
from dataclasses import dataclass
from typing import Tuple

from ..errors import InvalidInput, UnsupportedDepth
from .types import RasterSamples, Samples

SIGNATURE = b"BM"
FILE_HEADER_SIZE = 14
INFO_HEADER_SIZE = 40
SUPPORTED_BITS_PER_PIXEL = (1, 24)
WHITE = 0xFF

# Index 0 black, index 1 white, each (blue, green, red, reserved).
MONO_PALETTE = bytes([0x00, 0x00, 0x00, 0x00, 0xFF, 0xFF, 0xFF, 0x00])

_HEADER_STRUCT = struct.Struct("<2sIIIIiiHHIIiiII")


def pack_line(line: Samples) -> bytes:
    """Pack one row of binarized samples, 8 per byte, MSB first; 0xFF is bit 1."""
    out = bytearray()
    for i in range(0, len(line), 8):
        chunk = line[i : i + 8]
        value = 0
        for bit, pix in enumerate(chunk):
            if pix == WHITE:
                value |= 1 << (7 - bit)
        out.append(value)
    return bytes(out)


def bgr_line(line: Samples) -> bytes:
    """Reorder one row of RGB triplets to BGR."""
    out = bytearray(len(line))
    out[0::3] = line[2::3]
    out[1::3] = line[1::3]
    out[2::3] = line[0::3]
    return bytes(out)


class BMPEncoder:
    def __init__(self, width: int, height: int, bits_per_pixel: int) -> None:
        if bits_per_pixel not in SUPPORTED_BITS_PER_PIXEL:
            raise UnsupportedDepth(
                "Unsupported bits per pixel: "
                f"{bits_per_pixel}. Supported: {', '.join(str(b) for b in SUPPORTED_BITS_PER_PIXEL)}"
            )
        if width <= 0 or height <= 0:
            raise InvalidInput("Width and height must be greater than zero")
        self.width = width
        self.height = height
        self.bits_per_pixel = bits_per_pixel
        self.row_bytes = (width * bits_per_pixel + 7) // 8
        self.padding = (4 - self.row_bytes % 4) % 4
        self.padded_row_bytes = self.row_bytes + self.padding

    @property
    def channels(self) -> int:
        return 1 if self.bits_per_pixel == 1 else 3

    @property
    def palette_size(self) -> int:
        return 2 if self.bits_per_pixel == 1 else 0

    @property
    def header_size(self) -> int:
        return FILE_HEADER_SIZE + INFO_HEADER_SIZE + 4 * self.palette_size

    @property
    def image_size(self) -> int:
        """Unpadded pixel bytes, as written to the header's image-size field."""
        return self.width * self.height * self.bits_per_pixel // 8

    @property
    def pixel_data_size(self) -> int:
        return self.height * self.padded_row_bytes

    @property
    def file_size(self) -> int:
        return self.header_size + self.pixel_data_size

    def encode(self, samples: Samples) -> bytes:
        """Encode top-down row-major samples (grayscale for 1-bit, RGB for 24-bit)."""
        raster = RasterSamples(samples, self.width, self.height, self.channels)
        raster.validate()
        return self.create_header() + self.create_pixel_data(raster)

    def create_header(self) -> bytes:
        header = _HEADER_STRUCT.pack(
            SIGNATURE,
            self.file_size,
            0,
            self.header_size,
            INFO_HEADER_SIZE,
            self.width,
            self.height,
            1,
            self.bits_per_pixel,
            0,
            self.image_size,
            0,
            0,
            self.palette_size,
            self.palette_size,
        )
        if self.bits_per_pixel == 1:
            header += MONO_PALETTE
        return header

    def create_pixel_data(self, raster: RasterSamples) -> bytes:
        pad = bytes(self.padding)
        convert = pack_line if self.bits_per_pixel == 1 else bgr_line
        out = bytearray()
        for y in range(self.height - 1, -1, -1):
            out += convert(raster.row(y))
            out += pad
        return bytes(out)


def encode(width: int, height: int, bits_per_pixel: int, samples: Samples) -> bytes:
    return BMPEncoder(width, height, bits_per_pixel).encode(samples)


@dataclass(frozen=True)
class BMPHeader:
    """Header fields read back from an encoded container."""

    file_size: int
    pixel_offset: int
    width: int
    height: int
    bits_per_pixel: int
    compression: int
    image_size: int
    palette_size: int
    palette: Tuple[Tuple[int, int, int], ...]

    @classmethod
    def parse(cls, data: bytes) -> "BMPHeader":
        if len(data) < _HEADER_STRUCT.size or data[:2] != SIGNATURE:
            raise InvalidInput("Not a BMP container")
        (
            _signature,
            file_size,
            _reserved,
            pixel_offset,
            _info_size,
            width,
            height,
            _planes,
            bits_per_pixel,
            compression,
            image_size,
            _x_res,
            _y_res,
            palette_size,
            _important,
        ) = _HEADER_STRUCT.unpack_from(data)
        palette = []
        for index in range(palette_size):
            start = _HEADER_STRUCT.size + 4 * index
            blue, green, red = data[start : start + 3]
            palette.append((red, green, blue))
        return cls(
            file_size=file_size,
            pixel_offset=pixel_offset,
            width=width,
            height=height,
            bits_per_pixel=bits_per_pixel,
            compression=compression,
            image_size=image_size,
            palette_size=palette_size,
            palette=tuple(palette),
        )
