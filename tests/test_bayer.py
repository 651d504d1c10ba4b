"""Tests for 4x4 Bayer ordered dithering."""

import numpy as np
import pytest

from ditheros.processing.dither import bayer_dither

from conftest import make_buffer

FG = np.array([255.0, 255.0, 255.0])
BG = np.array([0.0, 0.0, 0.0])

MATRIX = [
    [0, 8, 2, 10],
    [12, 4, 14, 6],
    [3, 11, 1, 9],
    [15, 7, 13, 5],
]


def dither(grays, levels=2, fg=FG, bg=BG):
    pixels, width, height = make_buffer(grays)
    bayer_dither(pixels, width, height, levels, fg, bg)
    return pixels.reshape(height, width, 4)


def test_mid_gray_2x2():
    """128 gray against thresholds 0, 127.5 / 191.25, 63.75."""
    out = dither(np.full((2, 2), 128))
    assert out[:, :, 0].tolist() == [[255, 255], [0, 255]]


@pytest.mark.parametrize('gray', [1, 40, 100, 128, 200, 250])
def test_binary_threshold_matches_matrix(gray):
    out = dither(np.full((4, 4), gray))
    expected = [[255 if gray > m * 255 / 16 else 0 for m in row] for row in MATRIX]
    assert out[:, :, 0].tolist() == expected


def test_matrix_tiles():
    out = dither(np.full((9, 10), 100))
    for y in range(9):
        for x in range(10):
            expected = 255 if 100 > MATRIX[y % 4][x % 4] * 255 / 16 else 0
            assert out[y, x, 0] == expected


@pytest.mark.parametrize('gray', [0, 255])
def test_extremes_are_stable(gray):
    out = dither(np.full((4, 4), gray), levels=5)
    assert np.all(out[:, :, :3] == gray)


def test_three_levels_lower_band():
    # step 127.5: gray 100 rounds up to 127.5 where matrix value <= 12
    out = dither(np.full((4, 4), 100), levels=3)
    expected = [[128 if m <= 12 else 0 for m in row] for row in MATRIX]
    assert out[:, :, 0].tolist() == expected


def test_three_levels_upper_band():
    # base 127.5: gray 200 rounds up to 255 where matrix value <= 9
    out = dither(np.full((4, 4), 200), levels=3)
    expected = [[255 if m <= 9 else 128 for m in row] for row in MATRIX]
    assert out[:, :, 0].tolist() == expected


def test_no_error_carried():
    """A pixel's output does not depend on its neighbors."""
    grays = np.full((4, 4), 100)
    alone = dither(grays)
    grays[0, 0] = 0
    changed = dither(grays)
    assert np.array_equal(alone[1:, :], changed[1:, :])
    assert np.array_equal(alone[0, 1:], changed[0, 1:])


def test_color_ramp_and_alpha():
    pixels, width, height = make_buffer(np.full((2, 2), 128), alpha=9)
    bayer_dither(pixels, width, height, 2, np.array([255.0, 0.0, 0.0]), np.array([0.0, 0.0, 80.0]))
    rgba = pixels.reshape(2, 2, 4)
    assert rgba[0, 0].tolist() == [255, 0, 0, 9]
    assert rgba[1, 0].tolist() == [0, 0, 80, 9]
