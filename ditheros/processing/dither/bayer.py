import numpy as np
import numpy.typing as npt

from ...constants import BAYER_4x4
from ..quantize import ramp_colors

def bayer_dither(
    pixels: npt.NDArray[np.uint8],
    width: int,
    height: int,
    levels: int,
    fg: npt.NDArray[np.float64],
    bg: npt.NDArray[np.float64],
    matrix: npt.NDArray[np.float64] = BAYER_4x4
) -> None:
    """
    Apply ordered dithering with a Bayer threshold matrix, in place.

    Each pixel is rounded down to its quantization step unless its gray value
    exceeds the step floor plus (matrix value / 16) of a step, in which case
    it is rounded up. No error is carried between pixels.
    """
    mh, mw = matrix.shape
    rgba = pixels.reshape(height, width, 4)

    # Tile the matrix to cover the image
    tiled_matrix = np.tile(matrix, (height // mh + 1, width // mw + 1))
    tiled_matrix = tiled_matrix[:height, :width]

    gray = rgba[:, :, :3].astype(np.float64).sum(axis=2) / 3.0
    step = 255.0 / (levels - 1)

    base = np.floor(gray / step) * step
    thresholds = base + (tiled_matrix / 16.0) * step

    new_gray = np.where(gray > thresholds, np.ceil(gray / step) * step, base)
    new_gray = np.clip(new_gray, 0.0, 255.0)

    rgba[:, :, :3] = ramp_colors(new_gray, fg, bg)
