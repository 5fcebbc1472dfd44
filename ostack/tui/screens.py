"""
Dashboard Popups.

SelectScreen is a filterable list returning the id of the chosen item; it
serves the cloud (ctrl+o) and project (ctrl+p) popups. ErrorScreen shows
a failed request. All popups close with escape.
"""

from __future__ import annotations

from textual import on
from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Vertical
from textual.screen import ModalScreen
from textual.widgets import Input, Label, OptionList, Static
from textual.widgets.option_list import Option


class SelectScreen(ModalScreen[str]):
    """Pick one item; typing narrows the list."""

    DEFAULT_CSS = """
    SelectScreen {
        align: center middle;
    }

    SelectScreen > Vertical {
        width: 60;
        height: auto;
        max-height: 80%;
        border: thick $primary;
        background: $surface;
        padding: 0 1;
    }

    SelectScreen OptionList {
        height: auto;
        max-height: 20;
    }
    """

    BINDINGS = [Binding("escape", "dismiss_popup", "Close")]

    def __init__(self, title: str, items: list[tuple[str, str]]) -> None:
        """
        Args:
            title: Popup title
            items: (id, label) pairs
        """
        super().__init__()
        self.popup_title = title
        self.items = items

    def compose(self) -> ComposeResult:
        with Vertical():
            yield Label(f"[bold]{self.popup_title}[/]")
            yield Input(placeholder="Filter...", id="select-filter")
            yield OptionList(*self._options(""), id="select-options")

    def _options(self, text: str) -> list[Option]:
        needle = text.strip().lower()
        return [
            Option(label, id=item_id)
            for item_id, label in self.items
            if not needle or needle in label.lower()
        ]

    @on(Input.Changed, "#select-filter")
    def on_filter_changed(self, event: Input.Changed) -> None:
        options = self.query_one("#select-options", OptionList)
        options.clear_options()
        options.add_options(self._options(event.value))
        if options.option_count:
            options.highlighted = 0

    @on(Input.Submitted, "#select-filter")
    def on_filter_submitted(self) -> None:
        options = self.query_one("#select-options", OptionList)
        if options.option_count:
            index = options.highlighted if options.highlighted is not None else 0
            self.dismiss(options.get_option_at_index(index).id)

    @on(OptionList.OptionSelected, "#select-options")
    def on_option_selected(self, event: OptionList.OptionSelected) -> None:
        self.dismiss(event.option.id)

    def action_dismiss_popup(self) -> None:
        self.dismiss(None)


class ErrorScreen(ModalScreen[None]):
    """Error message of a failed request."""

    DEFAULT_CSS = """
    ErrorScreen {
        align: center middle;
    }

    ErrorScreen > Vertical {
        width: 80%;
        height: auto;
        max-height: 80%;
        border: thick $error;
        background: $surface;
        padding: 1 2;
    }
    """

    BINDINGS = [
        Binding("escape", "close", "Close"),
        Binding("enter", "close", "Close", show=False),
    ]

    def __init__(self, message: str) -> None:
        super().__init__()
        self.message = message

    def compose(self) -> ComposeResult:
        with Vertical():
            yield Label("[bold red]Error[/]")
            yield Static(self.message, markup=False, id="error-message")

    def action_close(self) -> None:
        self.dismiss(None)
