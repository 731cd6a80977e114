import pytest

from inkshot.dithering import algorithms


def test_level_values_are_evenly_spaced():
    assert algorithms.level_values(2) == [0, 255]
    assert algorithms.level_values(4) == [0, 85, 170, 255]
    assert algorithms.level_values(256) == list(range(256))


def test_level_values_rejects_single_level():
    with pytest.raises(ValueError):
        algorithms.level_values(1)


def test_floyd_steinberg_spreads_error_to_four_neighbours():
    # 100 -> 0 pushes 43.75 right, 31.25 below and 6.25 below-right;
    # the right pixel (143.75) turns white and pushes its -111.25 down.
    out = algorithms.floyd_steinberg(bytes([100, 100, 100, 100]), 2, 2, 2)

    assert list(out) == [0, 255, 0, 0]


def test_floyd_steinberg_single_row_drops_downward_error():
    out = algorithms.floyd_steinberg(bytes([128, 128, 128]), 3, 1, 2)

    assert list(out) == [255, 0, 255]


def test_floyd_steinberg_preserves_mean_tone():
    width, height = 32, 32
    out = algorithms.floyd_steinberg(bytes([64] * (width * height)), width, height, 2)

    white = sum(1 for p in out if p == 255)
    assert abs(white / len(out) - 64 / 255) < 0.05


def test_floyd_steinberg_at_full_depth_is_lossless():
    pixels = bytes(range(256))

    assert algorithms.floyd_steinberg(pixels, 16, 16, 256) == bytearray(pixels)


def test_ordered_mid_gray_is_half_white_and_tiles():
    width = height = 16
    out = algorithms.ordered(bytes([128] * (width * height)), width, height, 2)

    assert sum(1 for p in out if p == 255) == len(out) // 2
    for y in range(8):
        for x in range(8):
            assert out[y * width + x] == out[(y + 8) * width + x + 8]


def test_ordered_pixels_are_independent():
    width = height = 8
    base = bytes([100] * (width * height))
    changed = bytearray(base)
    changed[27] = 200

    before = algorithms.ordered(base, width, height, 4)
    after = algorithms.ordered(bytes(changed), width, height, 4)

    differing = [i for i in range(len(before)) if before[i] != after[i]]
    assert differing in ([], [27])


def test_ordered_keeps_exact_levels():
    pixels = bytes([0, 85, 170, 255])

    assert list(algorithms.ordered(pixels, 4, 1, 4)) == [0, 85, 170, 255]


def test_posterize_rounds_to_nearest_level():
    out = algorithms.posterize(bytes([0, 40, 43, 128, 255]), 4)

    assert list(out) == [0, 0, 85, 170, 255]


def test_threshold_splits_at_midpoint():
    assert list(algorithms.threshold(bytes([0, 127, 128, 255]))) == [0, 0, 255, 255]


def test_level_lut_full_range_is_identity():
    assert algorithms.level_lut(0, 100) == list(range(256))


def test_level_lut_clips_outside_window():
    lut = algorithms.level_lut(20, 80)

    assert lut[0] == 0
    assert lut[51] == 0
    assert lut[204] == 255
    assert lut[255] == 255
    assert lut == sorted(lut)


def test_size_mismatch_rejected():
    with pytest.raises(ValueError):
        algorithms.floyd_steinberg(bytes(3), 2, 2, 2)
    with pytest.raises(ValueError):
        algorithms.ordered(bytes(4), 0, 4, 2)
