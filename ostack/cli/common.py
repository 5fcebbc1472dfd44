"""
Argument Parsers.

Conversions for command line values that typer does not cover natively:
KEY=value pairs, JSON documents, lenient numbers and booleans, and comma
separated lists. Invalid input raises typer.BadParameter so click reports a
usage error (exit code 2).

Usage:
    properties = dict(parse_key_val(p) for p in property or [])
    tags = parse_csv(tags) if tags else None
"""

import json
from typing import Any

import typer

from ostack.sdk.params import CommaSeparatedList

TRUE_VALUES = frozenset({"1", "true", "yes", "y", "on"})
FALSE_VALUES = frozenset({"0", "false", "no", "n", "off"})


def parse_key_val(value: str) -> tuple[str, str]:
    """Parse "key=value". The value may itself contain "="."""
    key, sep, val = value.partition("=")
    if not sep:
        raise typer.BadParameter(f"invalid KEY=value: no `=` found in `{value}`")
    return key, val


def parse_key_val_opt(value: str) -> tuple[str, str | None]:
    """Parse "key=value"; "key=" gives (key, None)."""
    key, val = parse_key_val(value)
    return key, val or None


def parse_json(value: str) -> Any:
    try:
        return json.loads(value)
    except ValueError as e:
        raise typer.BadParameter(f"invalid JSON: {e}") from e


def parse_int(value: str | int) -> int:
    """Accept "10", " 10 " and "10.0"."""
    if isinstance(value, int):
        return value
    text = value.strip()
    try:
        return int(text)
    except ValueError:
        pass
    try:
        number = float(text)
    except ValueError as e:
        raise typer.BadParameter(f"`{value}` is not an integer") from e
    if not number.is_integer():
        raise typer.BadParameter(f"`{value}` is not an integer")
    return int(number)


def parse_bool(value: str | bool) -> bool:
    if isinstance(value, bool):
        return value
    normalized = value.strip().lower()
    if normalized in TRUE_VALUES:
        return True
    if normalized in FALSE_VALUES:
        return False
    raise typer.BadParameter(f"`{value}` is not a boolean")


def parse_number(value: str) -> int | float:
    text = value.strip()
    try:
        return int(text)
    except ValueError:
        pass
    try:
        return float(text)
    except ValueError as e:
        raise typer.BadParameter(f"`{value}` is not a number") from e


def parse_csv(value: str | list[str]) -> CommaSeparatedList:
    return CommaSeparatedList.parse(value)


def parse_properties(values: list[str] | None) -> dict[str, str] | None:
    """Repeated --property KEY=value options as a dict (None when not given)."""
    if not values:
        return None
    return dict(parse_key_val(v) for v in values)
