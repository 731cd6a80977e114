from __future__ import annotations

import io
import random

import pytest
from PIL import Image


def gradient_image(width: int = 100, height: int = 100) -> Image.Image:
    """Horizontal gray ramp, 0 at the left edge and 255 at the right edge."""
    img = Image.new("RGB", (width, height))
    img.putdata([(v, v, v) for _y in range(height) for v in _ramp(width)])
    return img


def noise_image(width: int = 64, height: int = 64, seed: int = 7) -> Image.Image:
    rng = random.Random(seed)
    img = Image.new("RGB", (width, height))
    img.putdata([(rng.randrange(256), rng.randrange(256), rng.randrange(256)) for _ in range(width * height)])
    return img


def encode_png(img: Image.Image, **kwargs) -> bytes:
    out = io.BytesIO()
    img.save(out, format="PNG", **kwargs)
    return out.getvalue()


def decode_gray(data: bytes) -> Image.Image:
    with Image.open(io.BytesIO(data)) as img:
        img.load()
        return img.convert("L")


def _ramp(width: int):
    return [int(round(x * 255 / (width - 1))) for x in range(width)]


@pytest.fixture
def gradient_png() -> bytes:
    return encode_png(gradient_image())
