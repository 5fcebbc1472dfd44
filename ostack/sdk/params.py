"""
Request Parameter Helpers.

QueryParams builds query strings, JsonBodyParams builds JSON request bodies
and CommaSeparatedList is the list type OpenStack expects as "a,b,c"
(fields, tags, tags-any, ...).

Usage:
    params = QueryParams().push("limit", 10).push("tags", CommaSeparatedList(["a", "b"]))
    params.add_to_url("https://net.example.com/v2.0/networks")
    # https://net.example.com/v2.0/networks?limit=10&tags=a%2Cb
"""

import json
from collections.abc import Iterable, Iterator
from datetime import datetime
from enum import Enum
from typing import Any
from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit

from pydantic import GetCoreSchemaHandler
from pydantic_core import core_schema

from ostack.core.exceptions import BodyError


class CommaSeparatedList(list):
    """List rendered as a comma separated string."""

    def __str__(self) -> str:
        return ",".join(_render(v) for v in self)

    @classmethod
    def parse(cls, value: "str | Iterable[Any] | None") -> "CommaSeparatedList":
        """
        Build the list from "a,b" or from an iterable of such strings.

        Empty items are dropped and surrounding whitespace is stripped.
        """
        if value is None:
            return cls()
        chunks = [value] if isinstance(value, str) else list(value)
        items: list[Any] = []
        for chunk in chunks:
            if isinstance(chunk, str):
                items.extend(part.strip() for part in chunk.split(","))
            else:
                items.append(chunk)
        return cls(item for item in items if item != "")

    @classmethod
    def __get_pydantic_core_schema__(
        cls, source_type: Any, handler: GetCoreSchemaHandler,
    ) -> core_schema.CoreSchema:
        return core_schema.no_info_plain_validator_function(
            cls.parse,
            serialization=core_schema.plain_serializer_function_ser_schema(str),
        )


def _render(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, Enum):
        return str(value.value)
    if isinstance(value, datetime):
        return value.isoformat()
    return str(value)


class QueryParams:
    """Ordered multi-map of query parameters."""

    def __init__(self) -> None:
        self._params: list[tuple[str, str]] = []

    def push(self, key: str, value: Any) -> "QueryParams":
        """Add a parameter. None values are skipped."""
        if value is not None:
            self._params.append((key, _render(value)))
        return self

    def extend(self, key: str, values: Iterable[Any] | None) -> "QueryParams":
        """Add the key once per value (?k=a&k=b)."""
        for value in values or ():
            self.push(key, value)
        return self

    def items(self) -> list[tuple[str, str]]:
        return list(self._params)

    def get(self, key: str) -> str | None:
        for k, v in self._params:
            if k == key:
                return v
        return None

    def set(self, key: str, value: Any) -> "QueryParams":
        """Replace every occurrence of key with a single value."""
        self._params = [(k, v) for k, v in self._params if k != key]
        return self.push(key, value)

    def copy(self) -> "QueryParams":
        params = QueryParams()
        params._params = list(self._params)
        return params

    def add_to_url(self, url: str) -> str:
        """Append the parameters to a URL, keeping any existing query."""
        if not self._params:
            return url
        parts = urlsplit(url)
        query = parse_qsl(parts.query, keep_blank_values=True) + self._params
        return urlunsplit(parts._replace(query=urlencode(query)))

    def __iter__(self) -> Iterator[tuple[str, str]]:
        return iter(self._params)

    def __len__(self) -> int:
        return len(self._params)

    def __repr__(self) -> str:
        return f"QueryParams({self._params!r})"


class JsonBodyParams:
    """
    JSON request body, optionally wrapped under a resource key.

    JsonBodyParams("network").push("name", "n1").into_body()
    → ("application/json", b'{"network": {"name": "n1"}}')
    """

    content_type = "application/json"

    def __init__(self, key: str | None = None) -> None:
        self.key = key
        self._values: dict[str, Any] = {}

    def push(self, key: str, value: Any) -> "JsonBodyParams":
        """Set a body field. None values are skipped."""
        if value is not None:
            self._values[key] = value
        return self

    def update(self, values: dict[str, Any]) -> "JsonBodyParams":
        for key, value in values.items():
            self.push(key, value)
        return self

    def __bool__(self) -> bool:
        return bool(self._values)

    def into_value(self) -> Any:
        if self.key is None:
            return dict(self._values)
        return {self.key: dict(self._values)}

    def into_body(self) -> tuple[str, bytes]:
        return json_body(self.into_value(), self.content_type)


def json_body(value: Any, content_type: str = "application/json") -> tuple[str, bytes]:
    """
    Serialize a JSON request body.

    Raises:
        BodyError: If the value cannot be serialized
    """
    try:
        return content_type, json.dumps(value, default=_json_default).encode()
    except (TypeError, ValueError) as e:
        raise BodyError(str(e)) from e


def _json_default(value: Any) -> Any:
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, datetime):
        return value.isoformat()
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")
