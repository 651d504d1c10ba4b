from typing import Union
import numpy as np
import numpy.typing as npt

from ..processing.tone import adjust_tone
from ..processing.dither import apply_dithering_algorithm
from .settings import DitherSettings

PixelBuffer = Union[npt.NDArray[np.uint8], bytearray, memoryview]


def _as_flat_pixels(buffer: PixelBuffer, width: int, height: int) -> npt.NDArray[np.uint8]:
    """
    Return a flat uint8 view sharing memory with `buffer`.

    Raises:
        ValueError: If dimensions and buffer length disagree, or the buffer
            cannot be modified in place.
    """
    if isinstance(width, bool) or isinstance(height, bool) \
            or not isinstance(width, (int, np.integer)) or not isinstance(height, (int, np.integer)):
        raise ValueError(f"Width and height must be integers, got {width!r} x {height!r}")
    if width <= 0 or height <= 0:
        raise ValueError(f"Width and height must be positive, got {width} x {height}")

    if isinstance(buffer, np.ndarray):
        if buffer.dtype != np.uint8:
            raise ValueError(f"Pixel buffer must be uint8, got {buffer.dtype}")
        if not buffer.flags.c_contiguous:
            raise ValueError("Pixel buffer must be C-contiguous")
        if buffer.ndim == 3 and buffer.shape != (height, width, 4):
            raise ValueError(
                f"Pixel buffer shape {buffer.shape} does not match ({height}, {width}, 4)"
            )
        pixels = buffer.reshape(-1)
    else:
        pixels = np.frombuffer(buffer, dtype=np.uint8)

    if not pixels.flags.writeable:
        raise ValueError("Pixel buffer is read-only")

    expected = int(width) * int(height) * 4
    if pixels.size != expected:
        raise ValueError(
            f"Pixel buffer has {pixels.size} samples, expected {expected} for {width}x{height} RGBA"
        )
    return pixels


def process(
    buffer: PixelBuffer,
    width: int,
    height: int,
    settings: DitherSettings
) -> PixelBuffer:
    """
    Tone-adjust and dither an RGBA pixel buffer in place.

    Brightness and contrast are applied to every pixel first, then the
    selected algorithm quantizes gray luminance to `settings.levels` steps and
    replaces each pixel's RGB with the matching color between
    `settings.bg_color` and `settings.fg_color`. Alpha is never touched.

    Args:
        buffer: Row-major RGBA samples, width * height * 4 bytes. Either a
            C-contiguous uint8 numpy array (flat or (height, width, 4)) or a
            writable bytes-like object such as a bytearray.
        width: Image width in pixels.
        height: Image height in pixels.
        settings: Validated dithering settings.

    Returns:
        The same buffer object, for chaining.

    Raises:
        ValueError: On invalid settings or a buffer that does not match the
            dimensions. Nothing is modified in that case.
    """
    if not isinstance(settings, DitherSettings):
        raise ValueError(f"Expected DitherSettings, got {type(settings).__name__}")
    # levels < 2 must never reach the kernels
    settings.validate()

    pixels = _as_flat_pixels(buffer, width, height)
    w, h = int(width), int(height)

    adjust_tone(pixels, settings.brightness, settings.contrast)
    apply_dithering_algorithm(
        settings.algorithm, pixels, w, h, settings.levels, settings.fg_color, settings.bg_color
    )
    return buffer
