from pathlib import Path
from typing import Union

def get_output_filename(input_path: Union[str, Path], suffix: str = '.png') -> Path:
    """
    Generate output filename with -dithered suffix, avoiding overwrites.

    Args:
        input_path: Path to input image
        suffix: Extension of the output file (default: .png)

    Returns:
        Path object for output file
    """
    path = Path(input_path)
    stem = path.stem
    directory = path.parent

    # Start with base name
    output_path = directory / f"{stem}-dithered{suffix}"

    # If file exists, append number
    counter = 1
    while output_path.exists():
        output_path = directory / f"{stem}-dithered-{counter}{suffix}"
        counter += 1

    return output_path
