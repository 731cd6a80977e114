from __future__ import annotations

from typing import List, Sequence

# 8x8 Bayer index matrix, values 0..63.
BAYER_8X8: Sequence[Sequence[int]] = (
    (0, 32, 8, 40, 2, 34, 10, 42),
    (48, 16, 56, 24, 50, 18, 58, 26),
    (12, 44, 4, 36, 14, 46, 6, 38),
    (60, 28, 52, 20, 62, 30, 54, 22),
    (3, 35, 11, 43, 1, 33, 9, 41),
    (51, 19, 59, 27, 49, 17, 57, 25),
    (15, 47, 7, 39, 13, 45, 5, 37),
    (63, 31, 55, 23, 61, 29, 53, 21),
)
BAYER_SIZE = 8


def level_values(levels: int) -> List[int]:
    """Return the evenly spaced 0..255 output values for a level count."""
    if levels < 2 or levels > 256:
        raise ValueError(f"Level count must be between 2 and 256, got {levels}")
    step = 255.0 / (levels - 1)
    return [int(round(i * step)) for i in range(levels)]


def nearest_level_index(value: float, levels: int) -> int:
    """Index of the level nearest to value, with value clipped to 0..255."""
    if value <= 0:
        return 0
    if value >= 255:
        return levels - 1
    return int(value * (levels - 1) / 255.0 + 0.5)


def level_lut(black_level: float, white_level: float) -> List[int]:
    """Lookup table mapping [black%, white%] of 0..255 linearly onto 0..255."""
    black = black_level * 255.0 / 100.0
    white = white_level * 255.0 / 100.0
    span = white - black
    lut = []
    for value in range(256):
        if value <= black:
            lut.append(0)
        elif value >= white:
            lut.append(255)
        else:
            lut.append(int(round((value - black) * 255.0 / span)))
    return lut


def threshold(pixels: bytes, cutoff: int = 128) -> bytearray:
    """Hard threshold: values >= cutoff become white."""
    return bytearray(255 if p >= cutoff else 0 for p in pixels)


def posterize(pixels: bytes, levels: int) -> bytearray:
    """Round every sample to the nearest of the evenly spaced levels."""
    values = level_values(levels)
    table = [values[nearest_level_index(v, levels)] for v in range(256)]
    return bytearray(table[p] for p in pixels)


def floyd_steinberg(pixels: bytes, width: int, height: int, levels: int) -> bytearray:
    """Error-diffusion quantization in raster order.

    Each pixel is quantized to the nearest level and the residual is pushed to
    unvisited neighbours: 7/16 right, 3/16 below-left, 5/16 below, 1/16
    below-right. Shares that fall outside the image are dropped.
    """
    _check_size(pixels, width, height)
    values = level_values(levels)
    out = bytearray(width * height)
    current = [float(p) for p in pixels[:width]]
    for y in range(height):
        base = y * width
        last_row = y + 1 >= height
        if last_row:
            below = [0.0] * width
        else:
            below = [float(p) for p in pixels[base + width : base + 2 * width]]
        for x in range(width):
            value = current[x]
            quantized = values[nearest_level_index(value, levels)]
            out[base + x] = quantized
            error = value - quantized
            if not error:
                continue
            if x + 1 < width:
                current[x + 1] += error * 7 / 16
            if not last_row:
                if x > 0:
                    below[x - 1] += error * 3 / 16
                below[x] += error * 5 / 16
                if x + 1 < width:
                    below[x + 1] += error * 1 / 16
        current = below
    return out


def ordered(pixels: bytes, width: int, height: int, levels: int) -> bytearray:
    """Bayer-matrix quantization; every pixel is decided independently."""
    _check_size(pixels, width, height)
    values = level_values(levels)
    top = levels - 1
    thresholds = [[(m + 0.5) / (BAYER_SIZE * BAYER_SIZE) for m in row] for row in BAYER_8X8]
    out = bytearray(width * height)
    for y in range(height):
        base = y * width
        row_thresholds = thresholds[y % BAYER_SIZE]
        for x in range(width):
            scaled = pixels[base + x] * top / 255.0
            index = int(scaled)
            if scaled - index > row_thresholds[x % BAYER_SIZE]:
                index += 1
            out[base + x] = values[min(index, top)]
    return out


def _check_size(pixels: bytes, width: int, height: int) -> None:
    if width <= 0 or height <= 0:
        raise ValueError("Width and height must be greater than zero")
    if len(pixels) < width * height:
        raise ValueError("Pixel buffer is smaller than width * height")
