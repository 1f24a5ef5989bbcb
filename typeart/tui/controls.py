"""Settings control panel for the TUI."""

from __future__ import annotations

from dataclasses import replace

from textual.app import ComposeResult
from textual.containers import Horizontal, Vertical
from textual.message import Message
from textual.widget import Widget
from textual.widgets import Button, Input, Label, Select, Static

from typeart.core.dither import DiffusionMode
from typeart.core.palette import PaletteName
from typeart.core.pipeline import Settings

# Field → (step, minimum)
NUMERIC_FIELDS: dict[str, tuple[int, int]] = {
    "width": (10, 1),
    "height": (5, 1),
    "threshold": (1, 0),
}


class ControlPanel(Widget):
    """Settings panel with controls for conversion parameters."""

    DEFAULT_CSS = """
    ControlPanel {
        width: 32;
        height: 1fr;
        background: $panel;
        padding: 1;
        border-left: solid $accent;
    }

    ControlPanel Label {
        margin-top: 1;
        color: $text-muted;
    }

    ControlPanel Select {
        width: 100%;
        margin-bottom: 0;
    }

    ControlPanel #panel-title {
        text-style: bold;
        color: $text;
        margin-bottom: 1;
    }

    ControlPanel .num-row {
        height: 3;
        margin-top: 1;
    }

    ControlPanel .num-row Label {
        width: 11;
        margin-top: 0;
        padding-top: 1;
    }

    ControlPanel .num-row Button {
        min-width: 3;
        margin: 0;
    }

    ControlPanel .num-row Input {
        width: 1fr;
        margin: 0;
    }
    """

    class SettingsChanged(Message):
        """Posted when any setting changes."""
        def __init__(self, settings: Settings) -> None:
            super().__init__()
            self.settings = settings

    def __init__(
        self,
        settings: Settings | None = None,
        max_size: tuple[int, int] | None = None,
        **kwargs,
    ) -> None:
        super().__init__(**kwargs)
        self._settings = settings or Settings()
        self._max_size = max_size

    def compose(self) -> ComposeResult:
        with Vertical():
            yield Static("Settings", id="panel-title")

            yield Label("Palette")
            yield Select(
                [(p.value, p.value) for p in PaletteName],
                value=self._settings.palette.value,
                allow_blank=False,
                id="palette-select",
            )

            yield Label("Diffusion")
            yield Select(
                [(d.value, d.value) for d in DiffusionMode],
                value=self._settings.diffusion.value,
                allow_blank=False,
                id="diffusion-select",
            )

            for field in NUMERIC_FIELDS:
                with Horizontal(classes="num-row"):
                    yield Label(field.capitalize())
                    yield Button("-", id=f"{field}-dec")
                    yield Input(
                        value=str(getattr(self._settings, field)),
                        id=f"{field}-input",
                        type="integer",
                    )
                    yield Button("+", id=f"{field}-inc")

    @property
    def settings(self) -> Settings:
        return self._settings

    def _clamp(self, field: str, value: int) -> int:
        value = max(NUMERIC_FIELDS[field][1], value)
        if self._max_size is not None and field in ("width", "height"):
            limit = self._max_size[0] if field == "width" else self._max_size[1]
            value = min(limit, value)
        return value

    def _update_settings(self, **overrides) -> None:
        """Create new settings with overrides and emit change."""
        self._settings = replace(self._settings, **overrides)
        self.post_message(self.SettingsChanged(self._settings))

    def _set_numeric(self, field: str, value: int) -> None:
        value = self._clamp(field, value)
        self.query_one(f"#{field}-input", Input).value = str(value)
        self._update_settings(**{field: value})

    def on_select_changed(self, event: Select.Changed) -> None:
        if event.value is Select.BLANK:
            return
        if event.select.id == "palette-select":
            self._update_settings(palette=PaletteName(event.value))
        elif event.select.id == "diffusion-select":
            self._update_settings(diffusion=DiffusionMode(event.value))

    def on_button_pressed(self, event: Button.Pressed) -> None:
        field, _, direction = (event.button.id or "").rpartition("-")
        if field not in NUMERIC_FIELDS:
            return
        step = NUMERIC_FIELDS[field][0]
        delta = step if direction == "inc" else -step
        self._set_numeric(field, getattr(self._settings, field) + delta)

    def on_input_submitted(self, event: Input.Submitted) -> None:
        field = (event.input.id or "").removesuffix("-input")
        if field not in NUMERIC_FIELDS:
            return
        try:
            val = int(event.value)
        except ValueError:
            return
        self._set_numeric(field, val)

    def update_dimensions(self, width: int, height: int, max_size: tuple[int, int]) -> None:
        """Set target dimensions and the source size that bounds them."""
        self._max_size = max_size
        self._settings = replace(self._settings, width=width, height=height)
        for field, value in (("width", width), ("height", height)):
            self.query_one(f"#{field}-input", Input).value = str(value)
