import sys
import click
from typing import Optional
from .constants import (
    ALGORITHMS, BRIGHTNESS_RANGE, CONTRAST_RANGE, LEVELS_RANGE,
    DEFAULT_ALGORITHM, DEFAULT_BG_COLOR, DEFAULT_FG_COLOR, DEFAULT_LEVELS, Color, DitherAlgorithm
)
from .core.pipeline import dither_image
from .core.settings import DitherSettings, format_hex_color, parse_hex_color

def _hex_color(ctx: click.Context, param: click.Parameter, value: str) -> Color:
    try:
        return parse_hex_color(value)
    except ValueError as e:
        raise click.BadParameter(str(e))

@click.command()
@click.argument('image', type=click.Path(exists=True, dir_okay=False))
@click.option(
    '--algorithm', '-a',
    type=click.Choice(list(ALGORITHMS), case_sensitive=False),
    default=DEFAULT_ALGORITHM,
    show_default=True,
    help='Dithering algorithm to use.'
)
@click.option(
    '--brightness',
    type=click.IntRange(*BRIGHTNESS_RANGE),
    default=0,
    show_default=True,
    help='Brightness adjustment (-100 to 100).'
)
@click.option(
    '--contrast',
    type=click.IntRange(*CONTRAST_RANGE),
    default=0,
    show_default=True,
    help='Contrast adjustment (-100 to 100).'
)
@click.option(
    '--levels',
    type=click.IntRange(*LEVELS_RANGE),
    default=DEFAULT_LEVELS,
    show_default=True,
    help='Number of gray levels (2 to 16). 2 gives pure foreground/background.'
)
@click.option(
    '--fg',
    default=DEFAULT_FG_COLOR,
    show_default=True,
    callback=_hex_color,
    help='Foreground color as hex (#rrggbb), used for the brightest level.'
)
@click.option(
    '--bg',
    default=DEFAULT_BG_COLOR,
    show_default=True,
    callback=_hex_color,
    help='Background color as hex (#rrggbb), used for the darkest level.'
)
@click.option(
    '--output', '-o',
    type=click.Path(dir_okay=False, writable=True),
    default=None,
    help='Output file path. Defaults to <image>-dithered.png next to the input.'
)
def main(
    image: str,
    algorithm: DitherAlgorithm,
    brightness: int,
    contrast: int,
    levels: int,
    fg: Color,
    bg: Color,
    output: Optional[str]
) -> None:
    """Dither an image down to a two-color palette.

    IMAGE is the path to the input image file (PNG, JPG, WEBP, ...).

    Brightness and contrast are applied first. The image is then reduced to
    LEVELS gray steps and each step is mapped onto the gradient between the
    background (darkest) and foreground (brightest) colors.

    Algorithms:

    - floyd-steinberg: error diffusion, smooth gradients

    - atkinson: partial error diffusion, higher contrast

    - bayer: 4x4 ordered dithering, regular crosshatch pattern
    """
    try:
        settings = DitherSettings(
            brightness=brightness,
            contrast=contrast,
            levels=levels,
            algorithm=algorithm,
            fg_color=fg,
            bg_color=bg
        )
        output_path = dither_image(image, settings, output_path=output)
        click.secho(f"✓ Dithered image saved to: {output_path}", fg='green')
        click.echo(
            f"  {settings.algorithm}, {settings.levels} levels, "
            f"{format_hex_color(settings.fg_color)} on {format_hex_color(settings.bg_color)}"
        )
    except Exception as e:
        click.secho(f"Error: {e}", fg='red', err=True)
        sys.exit(1)

if __name__ == '__main__':
    main()
