"""
Unit Tests for Command Output.

Rendering of records as table, wide table, JSON and YAML, column selection
and the JSON pointer cell values of views.yaml.
"""

import io
import json

import pytest
import yaml
from rich.console import Console

from ostack.cli.output import OutputFormat, OutputProcessor, format_value, resolve_json_pointer
from ostack.core.config_schema import ViewFieldSchema, ViewSchema, ViewsSchema
from ostack.core.exceptions import DataTypeError
from ostack.sdk.api.compute.servers import Server
from ostack.sdk.api.network.networks import Network

NETWORKS = [
    {"id": "n1", "name": "private", "status": "ACTIVE", "subnets": ["s1"], "router:external": False, "mtu": 1450},
    {"id": "n2", "name": "public", "status": "ACTIVE", "subnets": [], "router:external": True, "segments": 2},
]

VIEWS = ViewsSchema(
    views={
        "network.network": ViewSchema(default_fields=["id", "name", "subnets"]),
        "compute.server": ViewSchema(
            default_fields=["id", "flavor"],
            fields=[ViewFieldSchema(name="flavor", json_pointer="/original_name")],
        ),
    },
    hints={"network.network": ["try -o wide"]},
)


def make_processor(output=OutputFormat.TABLE, fields=None, pretty=False, views=VIEWS):
    out = Console(file=io.StringIO(), width=200)
    err = Console(file=io.StringIO(), width=200)
    processor = OutputProcessor(output=output, fields=fields, pretty=pretty, console=out, err_console=err, views=views)
    return processor, out.file, err.file


class TestResolveJsonPointer:
    """Tests for RFC 6901 pointers."""

    @pytest.mark.parametrize(
        ("pointer", "expected"),
        [
            ("/a/0/b", 1),
            ("/a/1", None),
            ("/missing", None),
            ("", {"a": [{"b": 1}], "x~y": {"c/d": 2}}),
            ("/x~0y/c~1d", 2),
            ("/a/b", None),
        ],
    )
    def test_resolve(self, pointer, expected):
        assert resolve_json_pointer({"a": [{"b": 1}], "x~y": {"c/d": 2}}, pointer) == expected


class TestFormatValue:
    """Tests for cell text."""

    def test_scalars(self):
        assert format_value(None) == ""
        assert format_value(True) == "true"
        assert format_value(False) == "false"
        assert format_value(3) == "3"

    def test_nested_values_are_compact_json(self):
        assert format_value({"b": 1, "a": [1, 2]}) == '{"a":[1,2],"b":1}'


class TestColumnSelection:
    """Tests for the columns of table output."""

    def test_view_default_fields(self):
        processor, _, _ = make_processor()
        assert processor.select_columns(Network, NETWORKS) == ["id", "name", "subnets"]

    def test_model_columns_without_view(self):
        processor, _, _ = make_processor(views=ViewsSchema(views={}))
        assert processor.select_columns(Network, NETWORKS) == Network.columns()
        assert "mtu" not in Network.columns()

    def test_wide_adds_declared_and_extra_keys(self):
        processor, _, _ = make_processor(output=OutputFormat.WIDE)
        columns = processor.select_columns(Network, NETWORKS)
        assert "router:external" in columns
        assert "mtu" in columns
        assert columns[-1] == "segments"

    def test_fields_matched_case_insensitively(self):
        processor, _, _ = make_processor(fields=["ID", "Router:External", "segments", "unknown"])
        assert processor.select_columns(Network, NETWORKS) == ["id", "router:external", "segments", "unknown"]


class TestOutputList:
    """Tests for printing lists."""

    def test_json(self):
        processor, out, _ = make_processor(output=OutputFormat.JSON)
        processor.output_list(NETWORKS, Network)
        assert json.loads(out.getvalue()) == NETWORKS

    def test_pretty_json(self):
        processor, out, _ = make_processor(output=OutputFormat.JSON, pretty=True)
        processor.output_list(NETWORKS[:1], Network)
        assert out.getvalue().startswith("[\n  {")

    def test_yaml_keeps_key_order(self):
        processor, out, _ = make_processor(output=OutputFormat.YAML)
        processor.output_list(NETWORKS, Network)
        assert yaml.safe_load(out.getvalue()) == NETWORKS
        assert out.getvalue().startswith("- id: n1")

    def test_table(self):
        processor, out, err = make_processor()
        processor.output_list(NETWORKS, Network)
        text = out.getvalue()
        assert "private" in text
        assert '["s1"]' in text
        assert "status" not in text
        assert "Hint: try -o wide" in err.getvalue()

    def test_hints_disabled(self):
        views = VIEWS.model_copy(update={"enable_hints": False})
        processor, _, err = make_processor(views=views)
        processor.output_list(NETWORKS, Network)
        assert err.getvalue() == ""

    def test_no_hints_for_json(self):
        processor, _, err = make_processor(output=OutputFormat.JSON)
        processor.output_list(NETWORKS, Network)
        assert err.getvalue() == ""

    def test_json_pointer_cell(self):
        processor, out, _ = make_processor()
        processor.output_list([{"id": "srv1", "flavor": {"original_name": "m1.small", "vcpus": 1}}], Server)
        assert "m1.small" in out.getvalue()
        assert "vcpus" not in out.getvalue()

    def test_record_not_matching_model(self):
        processor, _, _ = make_processor(output=OutputFormat.JSON)
        with pytest.raises(DataTypeError, match="Network"):
            processor.output_list([{"name": "no id"}], Network)


class TestOutputSingle:
    """Tests for printing one resource."""

    def test_field_value_table(self):
        processor, out, _ = make_processor()
        processor.output_single(NETWORKS[0], Network)
        text = out.getvalue()
        assert "Field" in text
        assert "router:external" in text
        assert "1450" in text

    def test_selected_fields_only(self):
        processor, out, _ = make_processor(fields=["name"])
        processor.output_single(NETWORKS[0], Network)
        assert "private" in out.getvalue()
        assert "1450" not in out.getvalue()

    def test_raw_json(self):
        processor, out, _ = make_processor(output=OutputFormat.JSON)
        processor.output_raw({"versions": []})
        assert json.loads(out.getvalue()) == {"versions": []}
