import re
from dataclasses import dataclass, replace as dataclass_replace
from typing import Any

from ..constants import (
    ALGORITHMS, BRIGHTNESS_RANGE, CONTRAST_RANGE, LEVELS_RANGE,
    DEFAULT_ALGORITHM, DEFAULT_BG_COLOR, DEFAULT_BRIGHTNESS, DEFAULT_CONTRAST,
    DEFAULT_FG_COLOR, DEFAULT_LEVELS, Color, DitherAlgorithm
)

_HEX_COLOR = re.compile(r'^#?([a-f\d]{2})([a-f\d]{2})([a-f\d]{2})$', re.IGNORECASE)


def parse_hex_color(value: str) -> Color:
    """
    Convert a '#rrggbb' (or 'rrggbb') string to an RGB tuple.

    Raises:
        ValueError: If the string is not a 6-digit hex color.
    """
    match = _HEX_COLOR.match(value.strip())
    if match is None:
        raise ValueError(f"Invalid hex color '{value}', expected #rrggbb")
    r, g, b = (int(part, 16) for part in match.groups())
    return (r, g, b)


def format_hex_color(color: Color) -> str:
    return '#{:02x}{:02x}{:02x}'.format(*color)


def _check_range(name: str, value: Any, bounds: tuple[int, int]) -> None:
    low, high = bounds
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"{name} must be an integer, got {value!r}")
    if not (low <= value <= high):
        raise ValueError(f"{name} must be between {low} and {high}, got {value}")


def _check_color(name: str, value: Any) -> None:
    if not isinstance(value, tuple) or len(value) != 3:
        raise ValueError(f"{name} must be an (r, g, b) tuple, got {value!r}")
    for channel in value:
        _check_range(name, channel, (0, 255))


@dataclass(frozen=True)
class DitherSettings:
    """
    Parameters for one run of the dithering engine.

    Attributes:
        brightness: Additive brightness (-100 to 100).
        contrast: Contrast (-100 to 100). 0 leaves contrast unchanged.
        levels: Number of gray quantization steps (2 to 16).
        algorithm: 'floyd-steinberg', 'atkinson' or 'bayer'.
        fg_color: RGB color for the brightest level.
        bg_color: RGB color for the darkest level.
    """
    brightness: int = DEFAULT_BRIGHTNESS
    contrast: int = DEFAULT_CONTRAST
    levels: int = DEFAULT_LEVELS
    algorithm: DitherAlgorithm = DEFAULT_ALGORITHM
    fg_color: Color = parse_hex_color(DEFAULT_FG_COLOR)
    bg_color: Color = parse_hex_color(DEFAULT_BG_COLOR)

    def __post_init__(self) -> None:
        self.validate()

    def validate(self) -> None:
        """Raise ValueError if any field is out of range."""
        _check_range('brightness', self.brightness, BRIGHTNESS_RANGE)
        _check_range('contrast', self.contrast, CONTRAST_RANGE)
        _check_range('levels', self.levels, LEVELS_RANGE)
        if self.algorithm not in ALGORITHMS:
            raise ValueError(f"Unknown dithering algorithm: {self.algorithm}")
        _check_color('fg_color', self.fg_color)
        _check_color('bg_color', self.bg_color)

    @classmethod
    def from_hex(
        cls,
        brightness: int = DEFAULT_BRIGHTNESS,
        contrast: int = DEFAULT_CONTRAST,
        levels: int = DEFAULT_LEVELS,
        algorithm: DitherAlgorithm = DEFAULT_ALGORITHM,
        fg_color: str = DEFAULT_FG_COLOR,
        bg_color: str = DEFAULT_BG_COLOR
    ) -> 'DitherSettings':
        """Build settings from user-facing values, with colors as hex strings."""
        return cls(
            brightness=brightness,
            contrast=contrast,
            levels=levels,
            algorithm=algorithm,
            fg_color=parse_hex_color(fg_color),
            bg_color=parse_hex_color(bg_color)
        )

    def replace(self, **changes: Any) -> 'DitherSettings':
        return dataclass_replace(self, **changes)

