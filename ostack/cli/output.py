"""
Command Output.

OutputProcessor renders command results in the format chosen with -o:

    table   rich table with the view's default columns (or the model's
            non-wide fields)
    wide    rich table with every declared field
    json    the raw records as JSON (--pretty for indentation)
    yaml    the raw records as YAML

Results are validated into the resource's response model first, so a
response that does not match the model fails with DataTypeError instead of
printing a half-empty table.

Usage:
    processor = OutputProcessor(output=OutputFormat.TABLE, fields=["id", "name"])
    processor.output_list(servers, Server)
    processor.output_single(server, Server)
"""

import json
from enum import Enum
from typing import Any

import yaml
from rich.console import Console
from rich.table import Table
from rich.text import Text

from ostack.core.config import get_app_config
from ostack.core.config_schema import ViewSchema, ViewsSchema
from ostack.sdk.api.common import ResourceRecord
from ostack.sdk.api.endpoint import to_model


class OutputFormat(str, Enum):
    TABLE = "table"
    WIDE = "wide"
    JSON = "json"
    YAML = "yaml"


def resolve_json_pointer(value: Any, pointer: str) -> Any:
    """
    Resolve an RFC 6901 JSON pointer. Missing paths give None.

    resolve_json_pointer({"a": [{"b": 1}]}, "/a/0/b") → 1
    """
    if pointer in ("", "/"):
        return value
    current = value
    for token in pointer.lstrip("/").split("/"):
        token = token.replace("~1", "/").replace("~0", "~")
        if isinstance(current, dict):
            if token not in current:
                return None
            current = current[token]
        elif isinstance(current, list):
            try:
                current = current[int(token)]
            except (ValueError, IndexError):
                return None
        else:
            return None
    return current


def format_value(value: Any) -> str:
    """Cell text: empty for None, compact JSON for nested values."""
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (dict, list)):
        return json.dumps(value, separators=(",", ":"), sort_keys=True)
    return str(value)


class OutputProcessor:
    """Prints records as table, wide table, JSON or YAML."""

    def __init__(
        self,
        output: OutputFormat = OutputFormat.TABLE,
        fields: list[str] | None = None,
        pretty: bool = False,
        console: Console | None = None,
        err_console: Console | None = None,
        views: ViewsSchema | None = None,
    ) -> None:
        self.output = output
        self.fields = list(fields or [])
        self.pretty = pretty
        self.console = console or Console()
        self.err_console = err_console or Console(stderr=True)
        self.views = views if views is not None else get_app_config().views

    # -------------------------------------------------------------------------
    # Column selection
    # -------------------------------------------------------------------------

    def get_view(self, model: type[ResourceRecord], view_key: str | None = None) -> ViewSchema:
        return self.views.views.get(view_key or model.view_key) or ViewSchema()

    def select_columns(
        self,
        model: type[ResourceRecord],
        rows: list[dict[str, Any]],
        view_key: str | None = None,
    ) -> list[str]:
        """
        Columns for table output.

        Explicit -f fields win (unknown names are kept, so extra keys of the
        response can be selected). Wide output shows every declared field
        plus keys present in the data. Otherwise the view's default_fields
        are used, then the model's non-wide fields.
        """
        view = self.get_view(model, view_key)
        if self.fields:
            return [self._match_column(name, model, rows) for name in self.fields]
        if self.output is OutputFormat.WIDE or view.wide:
            columns = model.columns(wide=True)
            for row in rows:
                for key in row:
                    if key not in columns:
                        columns.append(key)
            return columns
        if view.default_fields:
            return list(view.default_fields)
        return model.columns()

    @staticmethod
    def _match_column(name: str, model: type[ResourceRecord], rows: list[dict[str, Any]]) -> str:
        candidates = model.columns(wide=True)
        for row in rows:
            candidates.extend(k for k in row if k not in candidates)
        if name in candidates:
            return name
        for candidate in candidates:
            if candidate.lower() == name.lower():
                return candidate
        return name

    # -------------------------------------------------------------------------
    # Rendering
    # -------------------------------------------------------------------------

    @staticmethod
    def _rows(data: list[Any], model: type[ResourceRecord]) -> list[dict[str, Any]]:
        return [
            to_model(item, model).model_dump(by_alias=True, mode="json")
            for item in data
        ]

    def cell(self, view: ViewSchema, column: str, row: dict[str, Any]) -> str:
        value = row.get(column)
        field = view.get_field(column)
        if field is not None and field.json_pointer and isinstance(value, (dict, list)):
            value = resolve_json_pointer(value, field.json_pointer)
        return format_value(value)

    def _add_column(self, table: Table, view: ViewSchema, column: str) -> None:
        field = view.get_field(column)
        if field is None:
            table.add_column(column, overflow="fold")
        else:
            table.add_column(
                column,
                width=field.width,
                min_width=field.min_width,
                max_width=field.max_width,
                overflow="fold",
            )

    def _print_machine(self, data: Any) -> None:
        if self.output is OutputFormat.YAML:
            self.console.out(yaml.safe_dump(data, sort_keys=False, allow_unicode=True).rstrip())
        else:
            indent = 2 if self.pretty else None
            self.console.out(json.dumps(data, indent=indent, ensure_ascii=False))

    def output_list(self, data: list[Any], model: type[ResourceRecord]) -> None:
        """Print a list of resources."""
        rows = self._rows(data, model)
        if self.output in (OutputFormat.JSON, OutputFormat.YAML):
            self._print_machine(data)
            return

        view = self.get_view(model)
        columns = self.select_columns(model, rows)
        table = Table(show_header=True, header_style="bold cyan")
        for column in columns:
            self._add_column(table, view, column)
        for row in rows:
            table.add_row(*(Text(self.cell(view, column, row)) for column in columns))
        self.console.print(table)
        self.show_hints(model)

    def output_single(self, data: Any, model: type[ResourceRecord]) -> None:
        """Print one resource as a Field/Value table."""
        row = self._rows([data], model)[0]
        if self.output in (OutputFormat.JSON, OutputFormat.YAML):
            self._print_machine(data)
            return

        view = self.get_view(model)
        if self.fields:
            columns = [self._match_column(name, model, [row]) for name in self.fields]
        else:
            columns = list(row)
        table = Table(show_header=True, header_style="bold cyan")
        table.add_column("Field", style="cyan", no_wrap=True)
        table.add_column("Value", overflow="fold")
        for column in columns:
            table.add_row(column, Text(self.cell(view, column, row)))
        self.console.print(table)

    def output_raw(self, data: Any) -> None:
        """Print a JSON value without a response model (api command)."""
        if self.output is OutputFormat.YAML:
            self._print_machine(data)
        else:
            self.console.out(json.dumps(data, indent=2 if self.pretty else None, ensure_ascii=False))

    def show_hints(self, model: type[ResourceRecord]) -> None:
        if not self.views.enable_hints:
            return
        for hint in self.views.hints.get(model.view_key, []):
            self.err_console.print(f"[dim]Hint: {hint}[/dim]")
