"""Tests for Atkinson dithering."""

import numpy as np
import pytest

from ditheros.constants import ATKINSON_KERNEL
from ditheros.processing.dither import atkinson_dither, floyd_steinberg_dither

from conftest import make_buffer, reference_error_diffusion

FG = np.array([255.0, 255.0, 255.0])
BG = np.array([0.0, 0.0, 0.0])


def dither(grays, levels=2):
    pixels, width, height = make_buffer(grays)
    atkinson_dither(pixels, width, height, levels, FG, BG)
    return pixels.reshape(height, width, 4)


def test_distributes_six_eighths():
    """Six neighbors get 1/8 each, the remaining 2/8 of the residual is dropped."""
    assert len(ATKINSON_KERNEL) == 6
    assert ATKINSON_KERNEL[:, 2].sum() / 8 == pytest.approx(0.75)


@pytest.mark.parametrize('neighbor,expected', [(113, 255), (112, 0)])
def test_right_neighbor_gets_one_eighth(neighbor, expected):
    # 120 -> 0 leaves error 120, 1/8 of it is 15
    out = dither([[120, neighbor]])
    assert out[0, 1, 0] == expected


@pytest.mark.parametrize('grid', ['row', 'column'])
@pytest.mark.parametrize('far,expected', [(111, 255), (110, 0)])
def test_reaches_two_pixels_away(grid, far, expected):
    # The far pixel gets 15 from the first pixel and 1.875 from the middle one
    grays = [[120, 0, far]]
    if grid == 'column':
        grays = [[g] for g in grays[0]]
    out = dither(grays).reshape(-1, 4)
    assert out[2, 0] == expected


def test_lower_left_neighbor():
    out = dither([[0, 120], [113, 0]])
    assert out[1, 0, 0] == 255


def test_lighter_than_floyd_steinberg_on_dark_gray():
    """Dropping part of the error keeps dark areas emptier than Floyd-Steinberg."""
    grays = np.full((32, 32), 40)
    pixels, width, height = make_buffer(grays)
    atkinson_dither(pixels, width, height, 2, FG, BG)
    fs_pixels, _, _ = make_buffer(grays)
    floyd_steinberg_dither(fs_pixels, width, height, 2, FG, BG)
    assert pixels.reshape(-1, 4)[:, 0].mean() < fs_pixels.reshape(-1, 4)[:, 0].mean()


def test_alpha_untouched():
    pixels, width, height = make_buffer(np.full((4, 4), 200), alpha=3)
    atkinson_dither(pixels, width, height, 4, FG, BG)
    assert np.all(pixels.reshape(-1, 4)[:, 3] == 3)


def test_output_binary_for_two_levels(random_rgba):
    pixels = random_rgba.reshape(-1).copy()
    atkinson_dither(pixels, 32, 24, 2, FG, BG)
    assert set(np.unique(pixels.reshape(-1, 4)[:, :3]).tolist()) <= {0, 255}


def _isolated_grid(target, value):
    """
    Pixel (1, 0) holds 120 and quantizes to 0, so each neighbor should get 15.

    Every other pixel is 255 and passes on no error, apart from `target`.
    """
    grays = np.full((3, 4), 255)
    grays[0, 0] = 0
    grays[0, 1] = 120
    tx, ty = target
    grays[ty, tx] = value
    return grays


NEIGHBORS = [(2, 0), (3, 0), (0, 1), (1, 1), (2, 1), (1, 2)]


@pytest.mark.parametrize('target', NEIGHBORS)
def test_each_neighbor_receives_one_eighth(target):
    # 113 + 15 = 128 crosses the midpoint, 112 + 15 = 127 does not
    tx, ty = target
    assert dither(_isolated_grid(target, 113))[ty, tx, 0] == 255
    assert dither(_isolated_grid(target, 112))[ty, tx, 0] == 0


@pytest.mark.parametrize('target', [(3, 1), (0, 2), (2, 2), (3, 2)])
def test_remaining_quarter_is_discarded(target):
    """Pixels outside the six-neighbor pattern get none of the residual."""
    tx, ty = target
    assert dither(_isolated_grid(target, 127))[ty, tx, 0] == 0


@pytest.mark.parametrize('levels', [2, 3, 7, 16])
def test_matches_sequential_reference(levels):
    rng = np.random.default_rng(seed=100 + levels)
    rgba = rng.integers(0, 256, size=(6, 5, 4), dtype=np.uint8)
    fg, bg = (255.0, 200.0, 0.0), (10.0, 10.0, 60.0)
    neighbors = [(1, 0, 1.0), (2, 0, 1.0), (-1, 1, 1.0), (0, 1, 1.0), (1, 1, 1.0), (0, 2, 1.0)]
    expected = reference_error_diffusion(rgba, levels, fg, bg, neighbors, divisor=8.0)

    pixels = rgba.reshape(-1).copy()
    atkinson_dither(pixels, 5, 6, levels, np.array(fg), np.array(bg))
    assert np.array_equal(pixels.reshape(6, 5, 4), expected)
