import sys
from pathlib import Path
from typing import Optional
from textual.app import App
from .screens import FileSelectionScreen, DitheringScreen

class DitherApp(App):
    TITLE = "DITHER_OS"
    CSS = """
    Screen {
        layout: horizontal;
    }
    """

    def __init__(self, initial_image: Optional[str] = None):
        super().__init__()
        self.initial_image = initial_image

    def on_mount(self):
        if self.initial_image:
            self.push_screen(DitheringScreen(Path(self.initial_image)))
        else:
            self.push_screen(FileSelectionScreen())


def run() -> None:
    """Entry point: optional image path as the first argument."""
    initial_image = sys.argv[1] if len(sys.argv) > 1 else None
    if initial_image and not Path(initial_image).is_file():
        print(f"Error: File {initial_image} not found.", file=sys.stderr)
        sys.exit(1)

    saved = DitherApp(initial_image).run()
    if saved:
        print(f"Saved to {saved}")
