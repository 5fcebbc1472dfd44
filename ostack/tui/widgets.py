"""
Dashboard Widgets.

HeaderBar shows the connection (cloud, project, region, token state),
ResourceTable the records of the current mode with the columns of its
views.yaml view, DescribePane the selected record as JSON and StatusBar
the state of the last request.
"""

from __future__ import annotations

import json
from typing import Any

from rich.syntax import Syntax
from rich.text import Text
from textual.reactive import reactive
from textual.widgets import DataTable, Static

from ostack.cli.output import OutputFormat, OutputProcessor
from ostack.sdk.api.common import ResourceRecord
from ostack.sdk.api.endpoint import to_model
from ostack.sdk.auth.token import AuthState
from ostack.tui.worker import ConnectionInfo

TOKEN_STATE_STYLE = {
    AuthState.VALID: "green",
    AuthState.ABOUT_TO_EXPIRE: "yellow",
    AuthState.EXPIRED: "red",
    AuthState.UNSET: "dim",
}


def filter_rows(rows: list[list[str]], text: str) -> list[int]:
    """Indexes of the rows containing text in any cell (case-insensitive)."""
    needle = text.strip().lower()
    if not needle:
        return list(range(len(rows)))
    return [i for i, row in enumerate(rows) if any(needle in cell.lower() for cell in row)]


class HeaderBar(Static):
    """Connection summary line."""

    info: reactive[ConnectionInfo] = reactive(ConnectionInfo, always_update=True)

    def render(self) -> Text:
        info = self.info
        if info.cloud is None:
            return Text.from_markup(" [dim]Not connected[/] | [bold]ctrl+o[/] selects a cloud")
        style = TOKEN_STATE_STYLE[info.token_state]
        project = info.project or "[dim]unscoped[/]"
        if info.domain:
            project = f"{project} ({info.domain})"
        return Text.from_markup(
            f" Cloud: [bold]{info.cloud}[/] | "
            f"Project: [bold]{project}[/] | "
            f"Region: [bold]{info.region or '-'}[/] | "
            f"Token: [{style}]{info.token_state.value}[/]"
        )


class StatusBar(Static):
    """Request state and row counts."""

    state: reactive[str] = reactive("idle")
    mode_title: reactive[str] = reactive("")
    shown: reactive[int] = reactive(0)
    total: reactive[int] = reactive(0)
    filter_text: reactive[str] = reactive("")

    def render(self) -> Text:
        state = {
            "loading": "[yellow]loading...[/]",
            "error": "[red]error[/]",
        }.get(self.state, f"[green]{self.state}[/]")
        filtered = f" | Filter: [bold]{self.filter_text}[/]" if self.filter_text else ""
        return Text.from_markup(
            f" {self.mode_title} | Rows: [bold]{self.shown}[/]/{self.total}{filtered} | {state}"
        )


class ResourceTable(DataTable):
    """Records of the current mode."""

    def __init__(self, **kwargs: Any) -> None:
        super().__init__(cursor_type="row", zebra_stripes=True, **kwargs)
        self.records: list[Any] = []
        self._cells: list[list[str]] = []
        self._processor = OutputProcessor(output=OutputFormat.TABLE)

    def load(
        self,
        records: list[Any],
        model: type[ResourceRecord],
        view_key: str | None = None,
        filter_text: str = "",
    ) -> int:
        """
        Replace the table content; returns the number of rows shown.

        Raises:
            DataTypeError: If a record does not match the model
        """
        rows = [to_model(item, model).model_dump(by_alias=True, mode="json") for item in records]
        self.records = records
        view = self._processor.get_view(model, view_key)
        columns = self._processor.select_columns(model, rows, view_key)
        self._cells = [[self._processor.cell(view, column, row) for column in columns] for row in rows]
        self.clear(columns=True)
        self.add_columns(*columns)
        return self.apply_filter(filter_text)

    def apply_filter(self, text: str) -> int:
        self.clear()
        visible = filter_rows(self._cells, text)
        for index in visible:
            self.add_row(*self._cells[index], key=str(index))
        return len(visible)

    def selected_record(self) -> Any | None:
        if not self.row_count:
            return None
        row_key, _ = self.coordinate_to_cell_key(self.cursor_coordinate)
        if row_key.value is None:
            return None
        return self.records[int(row_key.value)]


class DescribePane(Static):
    """Selected record as JSON."""

    def show_record(self, record: Any) -> None:
        text = json.dumps(record, indent=2, ensure_ascii=False, default=str)
        self.update(Syntax(text, "json", word_wrap=True))
