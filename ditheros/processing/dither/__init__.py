import numpy as np
import numpy.typing as npt
from ...constants import Color, DitherAlgorithm

from .floyd_steinberg import floyd_steinberg_dither
from .atkinson import atkinson_dither
from .bayer import bayer_dither

def apply_dithering_algorithm(
    algorithm: DitherAlgorithm,
    pixels: npt.NDArray[np.uint8],
    width: int,
    height: int,
    levels: int,
    fg_color: Color,
    bg_color: Color
) -> None:
    """
    Dispatch to appropriate dithering function.
    """
    fg = np.array(fg_color, dtype=np.float64)
    bg = np.array(bg_color, dtype=np.float64)

    match algorithm:
        case 'floyd-steinberg':
            floyd_steinberg_dither(pixels, width, height, levels, fg, bg)
        case 'atkinson':
            atkinson_dither(pixels, width, height, levels, fg, bg)
        case 'bayer':
            bayer_dither(pixels, width, height, levels, fg, bg)
        case _:
            raise ValueError(f"Unknown dithering algorithm: {algorithm}")
