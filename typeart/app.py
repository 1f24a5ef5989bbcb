"""Main Textual application for the typeart TUI."""

from __future__ import annotations

import platform
import subprocess
from pathlib import Path

from textual import work
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, Vertical
from textual.screen import ModalScreen
from textual.widgets import Button, Footer, Header, Input, Label, Static
from textual.worker import get_current_worker

from typeart.core.pipeline import ConversionResult, Settings, convert
from typeart.core.reader import open_image
from typeart.core.source import GraySource
from typeart.tui.controls import ControlPanel
from typeart.tui.preview import AsciiPreview
from typeart.utils.cache import ResultCache


# Terminal cells are about twice as tall as wide
CHAR_ASPECT = 0.5


def fit_target(img_width: int, img_height: int, max_width: int, max_height: int) -> tuple[int, int]:
    """Largest target grid inside max_width x max_height with the image's shape.

    Never larger than the image itself; the box filter only downsamples.
    """
    max_width, max_height = max(1, max_width), max(1, max_height)
    cols_per_row = img_width / img_height / CHAR_ASPECT
    if cols_per_row * max_height > max_width:
        char_w, char_h = max_width, max(1, int(max_width / cols_per_row))
    else:
        char_w, char_h = max(1, int(max_height * cols_per_row)), max_height
    return min(char_w, img_width), min(char_h, img_height)


class SaveScreen(ModalScreen[tuple[str, str] | None]):
    """Modal screen for choosing preview and transcript paths."""

    BINDINGS = [Binding("escape", "cancel", "Cancel", priority=True)]

    def action_cancel(self) -> None:
        self.dismiss(None)

    DEFAULT_CSS = """
    SaveScreen {
        align: center middle;
    }

    SaveScreen #save-dialog {
        width: 60;
        height: 17;
        background: $surface;
        border: thick $accent;
        padding: 1 2;
    }

    SaveScreen #save-title {
        text-style: bold;
        margin-bottom: 1;
    }

    SaveScreen .button-row {
        margin-top: 1;
        align: center middle;
        height: 3;
    }

    SaveScreen Button {
        margin: 0 1;
    }
    """

    def __init__(self, preview_path: str = "", transcript_path: str = "", **kwargs) -> None:
        super().__init__(**kwargs)
        self._preview_path = preview_path
        self._transcript_path = transcript_path

    def compose(self) -> ComposeResult:
        with Vertical(id="save-dialog"):
            yield Static("Save Output", id="save-title")
            yield Label("Preview image:")
            yield Input(value=self._preview_path, placeholder="preview.png", id="preview-path")
            yield Label("Transcript:")
            yield Input(
                value=self._transcript_path,
                placeholder="transcript.txt",
                id="transcript-path",
            )
            with Horizontal(classes="button-row"):
                yield Button("Save", variant="primary", id="btn-save")
                yield Button("Cancel", variant="default", id="btn-cancel")

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "btn-save":
            self.dismiss((
                self.query_one("#preview-path", Input).value,
                self.query_one("#transcript-path", Input).value,
            ))
        elif event.button.id == "btn-cancel":
            self.dismiss(None)


class OpenFileScreen(ModalScreen[str | None]):
    """Simple modal for entering a file path."""

    BINDINGS = [Binding("escape", "cancel", "Cancel", priority=True)]

    def action_cancel(self) -> None:
        self.dismiss(None)

    DEFAULT_CSS = """
    OpenFileScreen {
        align: center middle;
    }

    OpenFileScreen #open-dialog {
        width: 60;
        height: 10;
        background: $surface;
        border: thick $accent;
        padding: 1 2;
    }

    OpenFileScreen #open-title {
        text-style: bold;
        margin-bottom: 1;
    }

    OpenFileScreen .button-row {
        margin-top: 1;
        align: center middle;
        height: 3;
    }

    OpenFileScreen Button {
        margin: 0 1;
    }
    """

    def compose(self) -> ComposeResult:
        with Vertical(id="open-dialog"):
            yield Static("Open Image", id="open-title")
            yield Input(placeholder="Path or URL of an image...", id="file-input")
            with Horizontal(classes="button-row"):
                yield Button("Open", variant="primary", id="btn-open")
                yield Button("Cancel", variant="default", id="btn-cancel")

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "btn-open":
            inp = self.query_one("#file-input", Input)
            self.dismiss(inp.value if inp.value else None)
        elif event.button.id == "btn-cancel":
            self.dismiss(None)

    def on_input_submitted(self, event: Input.Submitted) -> None:
        self.dismiss(event.value if event.value else None)


class TypeartApp(App):
    """Main TUI application."""

    TITLE = "typeart"
    CSS = """
    #main-area {
        height: 1fr;
        width: 1fr;
    }

    #preview-container {
        width: 1fr;
        height: 1fr;
    }

    #status-bar {
        height: 1;
        background: $panel;
        padding: 0 1;
        color: $text-muted;
    }
    """

    BINDINGS = [
        Binding("q", "quit", "Quit", priority=True),
        Binding("s", "save", "Save", priority=True),
        Binding("c", "copy", "Copy", priority=True),
        Binding("o", "open_file", "Open", priority=True),
        Binding("e", "toggle_encoded", "Encoded", priority=True),
        Binding("tab", "toggle_panel", "Toggle Panel"),
    ]

    def __init__(self, input_path: str | None = None, **kwargs) -> None:
        super().__init__(**kwargs)
        self._input_path = input_path
        self._source: GraySource | None = None
        self._source_name = ""
        self._cache: ResultCache[ConversionResult] = ResultCache(max_size=32)
        self._settings = Settings()
        self._panel_visible = True

    def compose(self) -> ComposeResult:
        yield Header()
        with Horizontal(id="main-area"):
            with Vertical(id="preview-container"):
                yield AsciiPreview()
            yield ControlPanel(self._settings, id="control-panel")
        yield Static("Ready", id="status-bar")
        yield Footer()

    def on_mount(self) -> None:
        if self._input_path:
            self._load_file(self._input_path)

    def _load_file(self, path: str) -> None:
        """Load an image and render it at a size that fits the preview."""
        try:
            self._source = open_image(path)
        except (FileNotFoundError, ValueError, OSError) as e:
            self._update_status(f"Error: {e}")
            return

        self._source_name = Path(path).name
        self.title = f"typeart - {self._source_name}"
        img_w, img_h = self._source.dimensions()

        preview = self.query_one(AsciiPreview)
        pw = preview.size.width or 80
        ph = preview.size.height or 24
        char_w, char_h = fit_target(img_w, img_h, pw - 2, ph - 2)

        panel = self.query_one(ControlPanel)
        panel.update_dimensions(char_w, char_h, max_size=(img_w, img_h))
        self._settings = panel.settings

        self._cache.clear()
        self._update_status(f"Loaded {self._source_name} ({img_w}x{img_h})")
        self._render_result()

    def _update_status(self, text: str) -> None:
        self.query_one("#status-bar", Static).update(text)

    @work(thread=True, exclusive=True, group="preview")
    def _render_result(self) -> None:
        """Convert the source in a background thread."""
        if self._source is None:
            return

        worker = get_current_worker()
        settings = self._settings
        cache_key = settings.hash()

        cached = self._cache.get(cache_key)
        if cached is not None:
            if not worker.is_cancelled:
                self.call_from_thread(self._display_result, cached)
            return

        try:
            result = convert(self._source, settings)
        except ValueError as e:
            if not worker.is_cancelled:
                self.call_from_thread(self._update_status, f"Error: {e}")
            return

        self._cache.put(cache_key, result)
        if not worker.is_cancelled:
            self.call_from_thread(self._display_result, result)

    def _display_result(self, result: ConversionResult) -> None:
        """Display a conversion result (called on main thread)."""
        self.query_one(AsciiPreview).update_result(result)
        self._update_status(
            f"{self._source_name}: {result.width}x{result.height}, "
            f"palette {self._settings.palette_label}, "
            f"threshold {self._settings.threshold}"
        )

    # --- Actions ---

    def action_save(self) -> None:
        preview = self.query_one(AsciiPreview)
        if preview.current_result is None or self._input_path is None:
            self._update_status("Nothing to save")
            return
        base = Path(self._input_path)
        stem = base.parent / base.stem
        self.push_screen(
            SaveScreen(f"{stem}_preview.png", f"{stem}_transcript.txt"),
            self._on_save_result,
        )

    def _on_save_result(self, paths: tuple[str, str] | None) -> None:
        if paths is None:
            return
        self._do_save(*paths)

    @work(thread=True, exclusive=True, group="save")
    def _do_save(self, preview_path: str, transcript_path: str) -> None:
        """Write the preview and transcript in a background thread."""
        from typeart.core.writer import save_outputs

        result = self.query_one(AsciiPreview).current_result
        if result is None:
            return

        try:
            written = save_outputs(
                result,
                preview_path=Path(preview_path) if preview_path else None,
                transcript_path=Path(transcript_path) if transcript_path else None,
            )
        except (OSError, ValueError) as e:
            self.call_from_thread(self._update_status, f"Save error: {e}")
            return
        names = ", ".join(str(p) for p in written) or "nothing"
        self.call_from_thread(self._update_status, f"Saved {names}")

    def action_copy(self) -> None:
        """Copy the transcript (or glyph grid) to the system clipboard."""
        preview = self.query_one(AsciiPreview)
        result = preview.current_result
        if result is None:
            self._update_status("Nothing to copy")
            return

        text = result.transcript() if preview.show_encoded else result.text()
        system = platform.system()
        if system == "Darwin":
            cmd = ["pbcopy"]
        elif system == "Linux":
            cmd = ["xclip", "-selection", "clipboard"]
        elif system == "Windows":
            cmd = ["clip"]
        else:
            self._update_status("Clipboard not supported on this platform")
            return
        try:
            proc = subprocess.Popen(cmd, stdin=subprocess.PIPE)
            proc.communicate(text.encode("utf-8"))
        except FileNotFoundError:
            self._update_status("Clipboard tool not found (pbcopy/xclip/clip)")
            return
        if proc.returncode == 0:
            self._update_status("Copied to clipboard")
        else:
            self._update_status("Failed to copy to clipboard")

    def action_open_file(self) -> None:
        self.push_screen(OpenFileScreen(), self._on_file_selected)

    def _on_file_selected(self, path: str | None) -> None:
        if path:
            self._input_path = path
            self._load_file(path)

    def action_toggle_encoded(self) -> None:
        encoded = self.query_one(AsciiPreview).toggle_encoded()
        self._update_status("Showing transcript" if encoded else "Showing glyphs")

    def action_toggle_panel(self) -> None:
        panel = self.query_one("#control-panel", ControlPanel)
        self._panel_visible = not self._panel_visible
        panel.display = self._panel_visible

    # --- Message handlers ---

    def on_control_panel_settings_changed(
        self, event: ControlPanel.SettingsChanged
    ) -> None:
        self._settings = event.settings
        if self._source is not None:
            self._render_result()


def run_app(input_path: str | None = None) -> None:
    """Launch the TUI application."""
    app = TypeartApp(input_path=input_path)
    app.run()
