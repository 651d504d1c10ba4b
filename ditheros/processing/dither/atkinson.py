import numpy as np
import numpy.typing as npt
from numba import jit

from ...constants import ATKINSON_KERNEL
from ..quantize import closest_level, diffuse_error, write_ramp_color

@jit(nopython=True)
def _atkinson_jit(
    pixels: npt.NDArray[np.uint8],
    width: int,
    height: int,
    levels: int,
    fg: npt.NDArray[np.float64],
    bg: npt.NDArray[np.float64],
    kernel: npt.NDArray[np.float64]
) -> None:
    """Core Atkinson loop optimized with Numba."""
    for y in range(height):
        for x in range(width):
            i = (y * width + x) * 4

            gray = (float(pixels[i]) + float(pixels[i + 1]) + float(pixels[i + 2])) / 3.0
            new_gray = closest_level(gray, levels)

            write_ramp_color(pixels, i, new_gray, fg, bg)

            # Each neighbor receives 1/8 of the residual
            error = (gray - new_gray) / 8.0

            for k in range(kernel.shape[0]):
                diffuse_error(
                    pixels, x + int(kernel[k, 0]), y + int(kernel[k, 1]),
                    width, height, error * kernel[k, 2]
                )

def atkinson_dither(
    pixels: npt.NDArray[np.uint8],
    width: int,
    height: int,
    levels: int,
    fg: npt.NDArray[np.float64],
    bg: npt.NDArray[np.float64]
) -> None:
    """
    Apply Atkinson dithering to a flat RGBA buffer in place.
    Propagates 1/8 of the error to 6 neighbors; the other 2/8 is discarded.
    """
    _atkinson_jit(pixels, width, height, levels, fg, bg, ATKINSON_KERNEL)
