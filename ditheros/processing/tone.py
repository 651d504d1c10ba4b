import numpy as np
import numpy.typing as npt

from .quantize import store_samples


def adjust_tone(pixels: npt.NDArray[np.uint8], brightness: int, contrast: int) -> None:
    """
    Apply brightness, then contrast, to the RGB channels of an RGBA buffer in place.

    Brightness is an additive offset of brightness/100 * 255. Contrast is the
    affine map v * c + 127.5 * (1 - c) with c = (contrast + 100) / 100, which
    pivots around mid gray and therefore also scales the brightness shift.
    Alpha is left untouched.

    Args:
        pixels: Flat uint8 RGBA buffer (length divisible by 4).
        brightness: -100 to 100.
        contrast: -100 to 100.
    """
    if brightness == 0 and contrast == 0:
        return

    offset = (brightness / 100) * 255
    factor = (contrast + 100) / 100
    intercept = 127.5 * (1 - factor)

    rgba = pixels.reshape(-1, 4)
    values = rgba[:, :3].astype(np.float64)
    values += offset
    values = values * factor + intercept
    rgba[:, :3] = store_samples(values)
