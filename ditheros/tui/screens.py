import sys
import subprocess
from pathlib import Path
from typing import cast, Tuple
from PIL import Image
from textual.app import ComposeResult
from textual.containers import Container, VerticalScroll
from textual.widgets import Button, Header, Footer, Label, Select, Input, Static, ListItem, ListView
from textual.binding import Binding
from textual.screen import Screen
from rich.text import Text
from rich.style import Style

from ..constants import (
    ALGORITHMS, BRIGHTNESS_RANGE, CONTRAST_RANGE, LEVELS_RANGE,
    DEFAULT_ALGORITHM, DEFAULT_BG_COLOR, DEFAULT_BRIGHTNESS, DEFAULT_CONTRAST,
    DEFAULT_FG_COLOR, DEFAULT_LEVELS, Color, DitherAlgorithm
)
from ..core.pipeline import apply_dither, render_preview, save_image
from ..core.settings import DitherSettings, parse_hex_color
from ..core.utils import get_output_filename

IMAGE_EXTENSIONS = {'.jpg', '.jpeg', '.png', '.webp', '.gif', '.bmp'}

# Files written next to the source by this app
OUTPUT_MARKERS = ('-dithered', '-preview')


def is_source_image(path: Path) -> bool:
    """True for image files the user can pick, excluding our own output."""
    return path.suffix.lower() in IMAGE_EXTENSIONS and not any(
        marker in path.stem for marker in OUTPUT_MARKERS
    )


def _parse_int(value: str, default: int, bounds: Tuple[int, int]) -> int:
    """Parse an integer input, falling back to `default` and clamping to `bounds`."""
    try:
        number = int(value)
    except ValueError:
        return default
    low, high = bounds
    return max(low, min(high, number))


def _parse_color(value: str, default: str) -> Color:
    try:
        return parse_hex_color(value)
    except ValueError:
        return parse_hex_color(default)


class FileSelectionScreen(Screen):
    CSS = """
    FileSelectionScreen {
        layout: vertical;
        align: center middle;
    }
    #file-list-container {
        width: 80%;
        height: 80%;
        border: solid $accent;
        background: $surface;
    }
    .header-label {
        text-align: center;
        padding: 1;
        background: $primary;
        color: $text;
        text-style: bold;
    }
    ListView {
        height: 1fr;
    }
    """

    def compose(self) -> ComposeResult:
        yield Header()
        with Container(id="file-list-container"):
            yield Label("Select an image file", classes="header-label")
            yield ListView(id="file-list")
        yield Label("Tip: You can also run with 'python tui.py <image>'", classes="header-label")
        yield Footer()

    def on_mount(self):
        files = sorted([
            f for f in Path('.').iterdir()
            if f.is_file() and is_source_image(f)
        ])

        list_view = self.query_one("#file-list", ListView)
        for f in files:
            list_view.append(ListItem(Label(f.name)))

        if not files:
            list_view.append(ListItem(Label("No image files found in current directory")))

    def on_list_view_selected(self, event: ListView.Selected):
        label = event.item.query_one(Label)
        filename = str(label.render())
        if filename.startswith("No image files"):
            return

        file_path = Path(filename).resolve()
        self.app.push_screen(DitheringScreen(file_path))


class DitheringScreen(Screen):
    CSS = """
    DitheringScreen {
        layout: horizontal;
    }
    #sidebar {
        width: 36;
        height: 100%;
        dock: left;
        border-right: solid $accent;
        padding: 1 2;
        background: $surface;
    }
    #preview-container {
        width: 1fr;
        height: 100%;
        align: center middle;
        overflow: auto;
    }
    #preview {
        width: auto;
        height: auto;
    }
    Label {
        margin-bottom: 1;
        color: $text-muted;
    }
    .header-label {
        color: $text;
        text-style: bold;
        margin-top: 1;
    }
    Input {
        margin-bottom: 1;
    }
    Select {
        margin-bottom: 1;
    }
    """

    BINDINGS = [
        Binding("q", "quit_app", "Quit"),
        Binding("escape", "back", "Back/Quit"),
        Binding("o", "open_viewer", "Open Viewer"),
        Binding("s", "save_output", "Save"),
    ]

    def __init__(self, image_path: Path):
        super().__init__()
        self.image_path = image_path
        self.original_image = Image.open(self.image_path)
        if self.original_image.mode != 'RGBA':
            self.original_image = self.original_image.convert('RGBA')

        # Debounce timer
        self.update_timer = None

    def compose(self) -> ComposeResult:
        yield Header()

        with VerticalScroll(id="sidebar"):
            yield Label("DITHER_OS", classes="header-label")

            yield Label("Algorithm")
            yield Select.from_values(list(ALGORITHMS), value=DEFAULT_ALGORITHM, id="algorithm")

            yield Label(f"Brightness ({BRIGHTNESS_RANGE[0]} to {BRIGHTNESS_RANGE[1]})")
            yield Input(value=str(DEFAULT_BRIGHTNESS), id="brightness")

            yield Label(f"Contrast ({CONTRAST_RANGE[0]} to {CONTRAST_RANGE[1]})")
            yield Input(value=str(DEFAULT_CONTRAST), id="contrast")

            yield Label(f"Dither Levels ({LEVELS_RANGE[0]} - {LEVELS_RANGE[1]})")
            yield Input(value=str(DEFAULT_LEVELS), id="levels")

            yield Label("Foreground (#rrggbb)")
            yield Input(value=DEFAULT_FG_COLOR, id="fg_color")

            yield Label("Background (#rrggbb)")
            yield Input(value=DEFAULT_BG_COLOR, id="bg_color")

            yield Label("")
            yield Button("Open External Viewer (o)", id="btn-open", variant="primary")
            yield Label("")
            yield Button("Save & Quit (s)", id="btn-save", variant="success")

        with Container(id="preview-container"):
            yield Static(id="preview")

        yield Footer()

    def on_mount(self):
        self.update_preview()

    def on_input_changed(self, event):
        self.update_preview_debounced()

    def on_select_changed(self, event):
        self.update_preview()

    def on_button_pressed(self, event):
        if event.button.id == "btn-open":
            self.action_open_viewer()
        elif event.button.id == "btn-save":
            self.action_save_output()

    def action_quit_app(self):
        self.app.exit()

    def action_back(self):
        # Popping the only screen would leave the app empty
        if len(self.app.screen_stack) > 1:
            self.app.pop_screen()
        else:
            self.app.exit()

    def update_preview_debounced(self):
        if self.update_timer:
            self.update_timer.stop()
        self.update_timer = self.set_timer(0.5, self.update_preview)

    def _get_settings(self) -> DitherSettings:
        """Build settings from the current widget values, clamped to valid ranges."""
        algorithm_val = self.query_one("#algorithm", Select).value
        algorithm = cast(
            DitherAlgorithm,
            str(algorithm_val) if algorithm_val != Select.BLANK else DEFAULT_ALGORITHM
        )

        return DitherSettings(
            brightness=_parse_int(self.query_one("#brightness", Input).value, DEFAULT_BRIGHTNESS, BRIGHTNESS_RANGE),
            contrast=_parse_int(self.query_one("#contrast", Input).value, DEFAULT_CONTRAST, CONTRAST_RANGE),
            levels=_parse_int(self.query_one("#levels", Input).value, DEFAULT_LEVELS, LEVELS_RANGE),
            algorithm=algorithm,
            fg_color=_parse_color(self.query_one("#fg_color", Input).value, DEFAULT_FG_COLOR),
            bg_color=_parse_color(self.query_one("#bg_color", Input).value, DEFAULT_BG_COLOR)
        )

    def _get_preview_target_size(self) -> Tuple[int, int]:
        """Calculate the target pixel dimensions for the preview based on container size."""
        container = self.query_one("#preview-container")
        width = container.size.width or 80
        height = container.size.height or 40

        # Adjust for padding
        width = max(20, width - 4)
        height = max(10, height - 2)

        # One character cell shows two pixels stacked vertically
        target_w_max = width
        target_h_max = height * 2

        img_w, img_h = self.original_image.size
        scale = min(target_w_max / img_w, target_h_max / img_h)

        new_w = int(img_w * scale)
        new_h = int(img_h * scale)

        # Ensure new_h is even
        if new_h % 2 != 0:
            new_h -= 1

        return max(1, new_w), max(1, new_h)

    def update_preview(self):
        try:
            settings = self._get_settings()
            result_img = render_preview(self.original_image, settings)
            self.query_one("#preview", Static).update(self.image_to_ascii(result_img))
        except Exception as e:
            self.notify(f"Error updating preview: {e}", severity="error")

    def image_to_ascii(self, img: Image.Image) -> Text:
        """Convert PIL image to colored half-block text for preview."""
        target_w, target_h = self._get_preview_target_size()

        if img.size != (target_w, target_h):
            img = img.resize((target_w, target_h), Image.Resampling.NEAREST)
        img = img.convert('RGB')

        pixels = img.load()
        if pixels is None:
            return Text("Error loading image pixels")

        text = Text()

        for y in range(0, target_h, 2):
            for x in range(target_w):
                r1, g1, b1 = cast(Tuple[int, int, int], pixels[x, y])
                if y + 1 < target_h:
                    r2, g2, b2 = cast(Tuple[int, int, int], pixels[x, y + 1])
                else:
                    r2, g2, b2 = 0, 0, 0

                # Top pixel is the foreground of the upper half block, bottom pixel the background
                color_top = f"rgb({r1},{g1},{b1})"
                color_bot = f"rgb({r2},{g2},{b2})"

                text.append("▀", style=Style(color=color_top, bgcolor=color_bot))
            text.append("\n")

        return text

    def _render_full(self) -> Image.Image:
        return apply_dither(self.original_image, self._get_settings())

    def action_open_viewer(self):
        """Open the full resolution result in an external viewer."""
        try:
            self.notify("Generating full resolution preview...")
            full_preview_path = self.image_path.parent / f"{self.image_path.stem}-preview.png"
            save_image(self._render_full(), full_preview_path)

            if sys.platform == "linux":
                subprocess.Popen(["xdg-open", str(full_preview_path)])
            elif sys.platform == "darwin": # macOS
                subprocess.Popen(["open", str(full_preview_path)])
            elif sys.platform == "win32":
                subprocess.Popen(["start", str(full_preview_path)], shell=True)
            self.notify("Opened external viewer")
        except Exception as e:
            self.notify(f"Failed to open viewer: {e}", severity="error")

    def action_save_output(self):
        """Save to final filename and quit."""
        try:
            self.notify("Generating output...")
            final_path = save_image(self._render_full(), get_output_filename(self.image_path))
            self.app.exit(final_path)
        except Exception as e:
            self.notify(f"Error saving: {e}", severity="error")
