import io
import struct

import pytest
from PIL import Image

from inkshot import BMPEncoder, BufferTooSmall, UnsupportedDepth, encode
from inkshot.raster import BMPHeader, encode_image, pack_line


def read_header(data):
    return struct.unpack_from("<2sIIIIiiHHIIiiII", data)


def test_24_bit_header_fields():
    data = encode(3, 2, 24, bytes(range(18)))
    (
        signature,
        file_size,
        reserved,
        offset,
        info_size,
        width,
        height,
        planes,
        bpp,
        compression,
        image_size,
        x_res,
        y_res,
        colors,
        important,
    ) = read_header(data)

    assert signature == b"BM"
    assert file_size == len(data) == 54 + 2 * 12
    assert reserved == 0
    assert offset == 54
    assert info_size == 40
    assert (width, height) == (3, 2)
    assert planes == 1
    assert bpp == 24
    assert compression == 0
    assert image_size == 18
    assert (x_res, y_res) == (0, 0)
    assert (colors, important) == (0, 0)


def test_24_bit_rows_are_bgr_bottom_up_and_padded():
    top = bytes([1, 2, 3, 4, 5, 6, 7, 8, 9])
    bottom = bytes([10, 11, 12, 13, 14, 15, 16, 17, 18])

    pixels = encode(3, 2, 24, top + bottom)[54:]

    assert pixels == bytes(
        [12, 11, 10, 15, 14, 13, 18, 17, 16, 0, 0, 0]
        + [3, 2, 1, 6, 5, 4, 9, 8, 7, 0, 0, 0]
    )


@pytest.mark.parametrize("width,height", [(1, 1), (3, 5), (4, 4), (7, 2), (100, 3)])
def test_24_bit_size_and_row_alignment(width, height):
    encoder = BMPEncoder(width, height, 24)
    data = encoder.encode(bytes(width * height * 3))
    header = BMPHeader.parse(data)

    assert (header.width, header.height) == (width, height)
    assert encoder.padded_row_bytes % 4 == 0
    assert encoder.padded_row_bytes >= width * 3
    assert len(data) == 54 + height * encoder.padded_row_bytes


def test_1_bit_palette_and_offset():
    data = encode(10, 2, 1, bytes(20))
    header = BMPHeader.parse(data)

    assert header.pixel_offset == 62
    assert header.bits_per_pixel == 1
    assert header.palette_size == 2
    assert header.palette == ((0, 0, 0), (255, 255, 255))
    assert data[54:62] == bytes([0, 0, 0, 0, 0xFF, 0xFF, 0xFF, 0])
    assert read_header(data)[14] == 2


def test_1_bit_packs_msb_first_bottom_up():
    top = bytes([255, 0] * 5)
    bottom = bytes(10)

    pixels = encode(10, 2, 1, top + bottom)[62:]

    assert pixels == bytes([0x00, 0x00, 0x00, 0x00, 0xAA, 0x80, 0x00, 0x00])


def test_1_bit_only_full_white_sets_a_bit():
    assert pack_line(bytes([255, 254, 1, 0, 255, 0, 0, 0])) == bytes([0b10001000])


@pytest.mark.parametrize("width", [1, 8, 31, 32, 33, 100])
def test_1_bit_row_alignment(width):
    encoder = BMPEncoder(width, 3, 1)
    data = encoder.encode(bytes(width * 3))

    assert encoder.padded_row_bytes % 4 == 0
    assert encoder.row_bytes == (width + 7) // 8
    assert len(data) == 62 + 3 * encoder.padded_row_bytes


@pytest.mark.parametrize("bits", [0, 2, 4, 8, 16, 32])
def test_unsupported_depth_rejected_at_construction(bits):
    with pytest.raises(UnsupportedDepth):
        BMPEncoder(4, 4, bits)


def test_unsupported_depth_through_encode():
    with pytest.raises(UnsupportedDepth):
        encode(4, 4, 4, bytes(64))


def test_short_buffer_rejected():
    with pytest.raises(BufferTooSmall):
        encode(4, 4, 24, bytes(4 * 4 * 3 - 1))
    with pytest.raises(BufferTooSmall):
        encode(16, 2, 1, bytes(31))


def test_pillow_reads_24_bit_output():
    img = Image.new("RGB", (5, 3))
    img.putdata([(x * 40, y * 80, 200 - x * 10) for y in range(3) for x in range(5)])

    with Image.open(io.BytesIO(encode_image(img, 24))) as decoded:
        assert decoded.size == (5, 3)
        assert list(decoded.convert("RGB").getdata()) == list(img.getdata())


def test_pillow_reads_1_bit_output():
    img = Image.new("L", (13, 4))
    img.putdata([255 if (x + y) % 3 == 0 else 0 for y in range(4) for x in range(13)])

    with Image.open(io.BytesIO(encode_image(img, 1))) as decoded:
        assert decoded.size == (13, 4)
        assert list(decoded.convert("L").getdata()) == list(img.getdata())


def test_header_parse_rejects_other_data():
    with pytest.raises(ValueError):
        BMPHeader.parse(b"\x89PNG\r\n\x1a\n" + bytes(60))


@pytest.mark.parametrize(
    "width,height,bits,image_size,file_size",
    [
        (3, 2, 24, 18, 54 + 2 * 12),
        (4, 4, 24, 48, 54 + 48),
        (10, 2, 1, 2, 62 + 2 * 4),
        (33, 3, 1, 12, 62 + 3 * 8),
    ],
)
def test_image_size_field_is_unpadded(width, height, bits, image_size, file_size):
    channels = 1 if bits == 1 else 3
    data = encode(width, height, bits, bytes(width * height * channels))
    header = BMPHeader.parse(data)

    assert header.image_size == image_size
    assert header.file_size == len(data) == file_size
