import math
import numpy as np
import numpy.typing as npt
from numba import jit


@jit(nopython=True)
def store_sample(value: float) -> float:
    """
    Clamp to [0, 255] and round half to even, the way a clamped byte store does.

    The result is integral, so assigning it into a uint8 array is exact.
    """
    if value <= 0.0:
        return 0.0
    if value >= 255.0:
        return 255.0
    return np.rint(value)


def store_samples(values: npt.NDArray[np.float64]) -> npt.NDArray[np.uint8]:
    """Vectorized store_sample."""
    return np.rint(np.clip(values, 0.0, 255.0)).astype(np.uint8)


@jit(nopython=True)
def closest_level(value: float, levels: int) -> float:
    """
    Snap a gray value in [0, 255] to the nearest of `levels` evenly spaced steps.

    Ties round up. `levels` must be at least 2.
    """
    return math.floor((value / 255.0) * (levels - 1) + 0.5) * (255.0 / (levels - 1))


@jit(nopython=True)
def write_ramp_color(
    pixels: npt.NDArray[np.uint8],
    i: int,
    gray: float,
    fg: npt.NDArray[np.float64],
    bg: npt.NDArray[np.float64]
) -> None:
    """Write the bg->fg ramp color for quantized `gray` into RGB at offset `i`."""
    ratio = gray / 255.0
    for c in range(3):
        pixels[i + c] = store_sample(bg[c] + (fg[c] - bg[c]) * ratio)


@jit(nopython=True)
def diffuse_error(
    pixels: npt.NDArray[np.uint8],
    x: int,
    y: int,
    width: int,
    height: int,
    error: float
) -> None:
    """Add `error` to R, G and B of pixel (x, y). Out of bounds pixels are skipped."""
    if x < 0 or x >= width or y < 0 or y >= height:
        return
    i = (y * width + x) * 4
    for c in range(3):
        pixels[i + c] = store_sample(pixels[i + c] + error)


def ramp_colors(
    gray: npt.NDArray[np.float64],
    fg: npt.NDArray[np.float64],
    bg: npt.NDArray[np.float64]
) -> npt.NDArray[np.uint8]:
    """
    Map a 2D array of quantized gray values onto the bg->fg color ramp.

    Returns:
        uint8 array of shape (height, width, 3).
    """
    ratio = (gray / 255.0)[:, :, np.newaxis]
    return store_samples(bg + (fg - bg) * ratio)
