from typing import Literal, Tuple
import numpy as np

Color = Tuple[int, int, int]

# Dithering algorithms
DitherAlgorithm = Literal['floyd-steinberg', 'atkinson', 'bayer']
ALGORITHMS: Tuple[DitherAlgorithm, ...] = ('floyd-steinberg', 'atkinson', 'bayer')

# Setting ranges (inclusive)
BRIGHTNESS_RANGE: Tuple[int, int] = (-100, 100)
CONTRAST_RANGE: Tuple[int, int] = (-100, 100)
LEVELS_RANGE: Tuple[int, int] = (2, 16)

# Defaults
DEFAULT_BRIGHTNESS: int = 0
DEFAULT_CONTRAST: int = 0
DEFAULT_LEVELS: int = 2
DEFAULT_ALGORITHM: DitherAlgorithm = 'floyd-steinberg'
DEFAULT_FG_COLOR: str = '#00ff00'  # phosphor green
DEFAULT_BG_COLOR: str = '#000000'

# Preview is scaled down to this width, never up
PREVIEW_MAX_WIDTH: int = 800

# Bayer 4x4 matrix, indexed [y % 4, x % 4]
BAYER_4x4 = np.array([
    [ 0,  8,  2, 10],
    [12,  4, 14,  6],
    [ 3, 11,  1,  9],
    [15,  7, 13,  5]
], dtype=float)

# Error diffusion kernels: (dx, dy, weight) relative to the current pixel
#       X   7
#   3   5   1      (/16)
FLOYD_STEINBERG_KERNEL = np.array([
    [ 1, 0, 7 / 16],
    [-1, 1, 3 / 16],
    [ 0, 1, 5 / 16],
    [ 1, 1, 1 / 16],
])

#       X   1   1
#   1   1   1      (each gets 1/8 of the error, 2/8 is dropped)
#       1
ATKINSON_KERNEL = np.array([
    [ 1, 0, 1.0],
    [ 2, 0, 1.0],
    [-1, 1, 1.0],
    [ 0, 1, 1.0],
    [ 1, 1, 1.0],
    [ 0, 2, 1.0],
])
