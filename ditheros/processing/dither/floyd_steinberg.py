import numpy as np
import numpy.typing as npt
from numba import jit

from ...constants import FLOYD_STEINBERG_KERNEL
from ..quantize import closest_level, diffuse_error, write_ramp_color

@jit(nopython=True)
def _floyd_steinberg_jit(
    pixels: npt.NDArray[np.uint8],
    width: int,
    height: int,
    levels: int,
    fg: npt.NDArray[np.float64],
    bg: npt.NDArray[np.float64],
    kernel: npt.NDArray[np.float64]
) -> None:
    """
    Core Floyd-Steinberg error diffusion loop optimized with Numba.

    Pixels are visited in raster order and modified in place, so every pixel
    is quantized from its value after receiving error from earlier pixels.

    Args:
        pixels: Flat RGBA buffer to modify in-place.
        width: Image width in pixels.
        height: Image height in pixels.
        levels: Number of gray quantization steps (>= 2).
        fg: Foreground RGB as floats.
        bg: Background RGB as floats.
        kernel: Rows of (dx, dy, weight).
    """
    for y in range(height):
        for x in range(width):
            i = (y * width + x) * 4

            # Gray luminance from the current (error-adjusted) values
            gray = (float(pixels[i]) + float(pixels[i + 1]) + float(pixels[i + 2])) / 3.0
            new_gray = closest_level(gray, levels)

            write_ramp_color(pixels, i, new_gray, fg, bg)

            error = gray - new_gray

            for k in range(kernel.shape[0]):
                diffuse_error(
                    pixels, x + int(kernel[k, 0]), y + int(kernel[k, 1]),
                    width, height, error * kernel[k, 2]
                )


def floyd_steinberg_dither(
    pixels: npt.NDArray[np.uint8],
    width: int,
    height: int,
    levels: int,
    fg: npt.NDArray[np.float64],
    bg: npt.NDArray[np.float64]
) -> None:
    """
    Apply Floyd-Steinberg dithering to a flat RGBA buffer in place.

    The residual of each pixel is spread 7/16 right, 3/16 down-left,
    5/16 down and 1/16 down-right. Error that would leave the image is lost.

    Args:
        pixels: Flat uint8 RGBA buffer of length width * height * 4.
        width: Image width in pixels.
        height: Image height in pixels.
        levels: Number of gray quantization steps (2-16).
        fg: Foreground RGB (float64 array of 3).
        bg: Background RGB (float64 array of 3).
    """
    _floyd_steinberg_jit(pixels, width, height, levels, fg, bg, FLOYD_STEINBERG_KERNEL)
