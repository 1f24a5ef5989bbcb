"""Glyph preview widget for the TUI."""

from __future__ import annotations

from rich.text import Text
from textual.app import ComposeResult
from textual.message import Message
from textual.widget import Widget
from textual.widgets import Static

from typeart.core.pipeline import ConversionResult

EMPTY_MESSAGE = "No image loaded. Press 'o' to open a file."


class AsciiPreview(Widget):
    """Shows the glyph grid, or the run-length transcript when toggled."""

    DEFAULT_CSS = """
    AsciiPreview {
        width: 1fr;
        height: 1fr;
        overflow: auto;
        background: $surface;
    }

    AsciiPreview #preview-content {
        width: auto;
        height: auto;
    }
    """

    class ResultShown(Message):
        """Posted when a new conversion result is displayed."""
        def __init__(self, encoded: bool) -> None:
            super().__init__()
            self.encoded = encoded

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._result: ConversionResult | None = None
        self._show_encoded = False

    def compose(self) -> ComposeResult:
        yield Static(EMPTY_MESSAGE, id="preview-content")

    def update_result(self, result: ConversionResult) -> None:
        self._result = result
        self._refresh_content()

    def toggle_encoded(self) -> bool:
        """Switch between glyph and transcript view. Returns the new mode."""
        self._show_encoded = not self._show_encoded
        self._refresh_content()
        return self._show_encoded

    def _refresh_content(self) -> None:
        if self._result is None:
            return
        content = self.query_one("#preview-content", Static)
        if self._show_encoded:
            body = self._result.transcript()
        else:
            body = self._result.text()
        # Plain Text so glyphs like "[" are never read as markup
        content.update(Text(body, no_wrap=True))
        self.post_message(self.ResultShown(self._show_encoded))

    def clear(self) -> None:
        self._result = None
        content = self.query_one("#preview-content", Static)
        content.update(EMPTY_MESSAGE)

    @property
    def current_result(self) -> ConversionResult | None:
        return self._result

    @property
    def show_encoded(self) -> bool:
        return self._show_encoded
