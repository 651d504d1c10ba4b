import math

import numpy as np
import pytest

from ditheros.core.settings import DitherSettings

WHITE = (255, 255, 255)
BLACK = (0, 0, 0)


def make_buffer(grays, alpha=255):
    """Build a flat RGBA uint8 buffer from a 2D list of gray values."""
    arr = np.asarray(grays, dtype=np.uint8)
    height, width = arr.shape
    rgba = np.empty((height, width, 4), dtype=np.uint8)
    rgba[:, :, 0] = arr
    rgba[:, :, 1] = arr
    rgba[:, :, 2] = arr
    rgba[:, :, 3] = alpha
    return rgba.reshape(-1), width, height


@pytest.fixture
def bw_settings():
    """Neutral tone, 2 levels, white on black."""
    return DitherSettings(levels=2, fg_color=WHITE, bg_color=BLACK)


@pytest.fixture
def random_rgba():
    rng = np.random.default_rng(seed=42)
    return rng.integers(0, 256, size=(24, 32, 4), dtype=np.uint8)


def _store(value):
    """Clamp to [0, 255], round half to even."""
    if value <= 0:
        return 0.0
    if value >= 255:
        return 255.0
    return float(round(value))


def reference_error_diffusion(rgba, levels, fg, bg, neighbors, divisor=1.0):
    """
    Plain-Python sequential error diffusion used to check the compiled loops.

    Args:
        rgba: uint8 array of shape (height, width, 4).
        neighbors: List of (dx, dy, weight).
        divisor: The residual is divided by this before weighting.

    Returns:
        uint8 array of the same shape.
    """
    height, width, _ = rgba.shape
    data = rgba.astype(float).tolist()
    step = 255 / (levels - 1)

    for y in range(height):
        for x in range(width):
            px = data[y][x]
            gray = (px[0] + px[1] + px[2]) / 3
            new_gray = math.floor((gray / 255) * (levels - 1) + 0.5) * step
            ratio = new_gray / 255
            for c in range(3):
                px[c] = _store(bg[c] + (fg[c] - bg[c]) * ratio)

            error = (gray - new_gray) / divisor
            for dx, dy, weight in neighbors:
                nx, ny = x + dx, y + dy
                if 0 <= nx < width and 0 <= ny < height:
                    for c in range(3):
                        data[ny][nx][c] = _store(data[ny][nx][c] + error * weight)

    return np.array(data, dtype=np.uint8)
