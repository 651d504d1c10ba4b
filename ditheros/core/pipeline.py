from pathlib import Path
from typing import Optional, Union, Tuple
from PIL import Image
import numpy as np

from ..constants import PREVIEW_MAX_WIDTH
from .engine import process
from .settings import DitherSettings
from .utils import get_output_filename

def apply_dither(img: Image.Image, settings: DitherSettings) -> Image.Image:
    """
    Apply tone adjustment and dithering to a PIL Image.

    The source image is left untouched; alpha is carried over unchanged.
    """
    # Convert to RGBA if needed
    if img.mode != 'RGBA':
        img = img.convert('RGBA')

    width, height = img.size
    pixels = np.array(img, dtype=np.uint8)  # (height, width, 4), owned copy

    process(pixels, width, height, settings)

    return Image.fromarray(pixels)


def preview_size(size: Tuple[int, int], max_width: int = PREVIEW_MAX_WIDTH) -> Tuple[int, int]:
    """Scale (width, height) down to at most max_width wide, never up."""
    width, height = size
    scale = min(1.0, max_width / width)
    return max(1, int(width * scale)), max(1, int(height * scale))


def render_preview(
    img: Image.Image,
    settings: DitherSettings,
    max_width: int = PREVIEW_MAX_WIDTH
) -> Image.Image:
    """
    Dither at full resolution, then scale the result down for display.

    Scaling happens after processing so the preview shows the same dot
    pattern as the saved file.
    """
    result = apply_dither(img, settings)
    target = preview_size(result.size, max_width)
    if target != result.size:
        result = result.resize(target, Image.Resampling.BILINEAR)
    return result


def load_image(input_path: Union[str, Path]) -> Image.Image:
    """
    Open and fully decode an image file.

    Raises:
        ValueError: If the file cannot be read as an image.
    """
    try:
        img = Image.open(input_path)
        img.load()
    except Exception as e:
        raise ValueError(f"Failed to open image: {e}")
    return img


def save_image(img: Image.Image, output_path: Union[str, Path]) -> Path:
    """Save with format chosen from the file suffix. JPEG drops alpha."""
    path = Path(output_path)
    if path.suffix.lower() in ['.jpg', '.jpeg']:
        img.convert('RGB').save(path, 'JPEG', quality=95)
    elif path.suffix.lower() == '.png':
        img.save(path, 'PNG')
    else:
        img.save(path)
    return path


def dither_image(
    input_path: Union[str, Path],
    settings: Optional[DitherSettings] = None,
    output_path: Optional[Union[str, Path]] = None
) -> Path:
    """
    Dither an image file and write the result.

    Args:
        input_path: Path to input image file
        settings: Dithering settings. Defaults to DitherSettings().
        output_path: Optional path for output file. If None, a PNG named
            after the input is written next to it.

    Returns:
        Path to output file
    """
    if settings is None:
        settings = DitherSettings()

    img = load_image(input_path)
    result = apply_dither(img, settings)

    # Determine final output path
    final_output_path: Path
    if output_path is None:
        final_output_path = get_output_filename(input_path)
    else:
        final_output_path = Path(output_path)

    return save_image(result, final_output_path)
