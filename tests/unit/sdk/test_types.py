"""
Unit Tests for SDK Types and Request Parameters.

ApiVersion parsing, service type aliases, QueryParams, JsonBodyParams and
CommaSeparatedList.
"""

from datetime import datetime
from enum import Enum

import pytest

from ostack.core.exceptions import BodyError
from ostack.sdk.params import CommaSeparatedList, JsonBodyParams, QueryParams, json_body
from ostack.sdk.service_authority import get_service_authority
from ostack.sdk.types import ApiVersion, EntryStatus, ServiceType


class TestApiVersion:
    """Tests for version parsing and microversion headers."""

    @pytest.mark.parametrize(
        ("value", "expected"),
        [("v2.1", ApiVersion(2, 1)), ("2.79", ApiVersion(2, 79)), ("v3", ApiVersion(3, 0)), ("1", ApiVersion(1, 0))],
    )
    def test_from_str(self, value, expected):
        assert ApiVersion.from_str(value) == expected

    def test_prefix_required(self):
        with pytest.raises(ValueError):
            ApiVersion.from_str("2.1", prefixed=True)

    def test_prefix_forbidden(self):
        with pytest.raises(ValueError):
            ApiVersion.from_str("v2.1", prefixed=False)

    def test_ordering(self):
        assert ApiVersion(2, 10) > ApiVersion(2, 9)
        assert str(ApiVersion(2, 10)) == "2.10"

    @pytest.mark.parametrize(
        ("url", "project_id", "expected"),
        [
            ("https://compute.example/v2.1", None, ApiVersion(2, 1)),
            ("https://network.example", None, ApiVersion(0, 0)),
            ("https://volume.example/v3/abc", "abc", ApiVersion(3, 0)),
            ("https://volume.example/v3/5a7e3b1c9d2f4e6a8b0c1d2e3f4a5b6c", None, ApiVersion(3, 0)),
            ("https://swift.example/v1/AUTH_abc", "abc", ApiVersion(1, 0)),
        ],
    )
    def test_from_url(self, url, project_id, expected):
        assert ApiVersion.from_url(url, project_id) == expected

    def test_from_endpoint_path(self):
        assert ApiVersion.from_endpoint_path("v2.0/networks") == ApiVersion(2, 0)
        assert ApiVersion.from_endpoint_path("servers/detail") is None
        assert ApiVersion.from_endpoint_path("v2") is None

    def test_compute_microversion_headers(self):
        headers = ApiVersion(2, 79).microversion_headers(ServiceType.COMPUTE)
        assert headers == {
            "OpenStack-API-Version": "compute 2.79",
            "X-OpenStack-Nova-API-Version": "2.79",
        }

    def test_block_storage_microversion_header(self):
        assert ApiVersion(3, 60).microversion_headers("block-storage") == {"OpenStack-API-Version": "volume 3.60"}

    def test_no_microversion_for_network(self):
        assert ApiVersion(2, 0).microversion_headers(ServiceType.NETWORK) == {}


class TestEntryStatus:
    """Tests for discovery status normalization."""

    def test_stable_is_current(self):
        assert EntryStatus.from_str("stable") is EntryStatus.CURRENT

    def test_case_insensitive(self):
        assert EntryStatus.from_str("Supported") is EntryStatus.SUPPORTED

    def test_unknown(self):
        assert EntryStatus.from_str("weird") is EntryStatus.UNKNOWN
        assert EntryStatus.from_str(None) is EntryStatus.UNKNOWN


class TestServiceAuthority:
    """Tests for service type aliases."""

    def test_alias_to_official(self):
        authority = get_service_authority()
        assert authority.get_official_type("volumev3") == "block-storage"
        assert authority.get_official_type("container-infra") == "container-infrastructure-management"

    def test_unknown_type_maps_to_itself(self):
        assert get_service_authority().get_official_type("frobnicator") == "frobnicator"

    def test_all_types_starts_with_official(self):
        types = get_service_authority().get_all_types_by_service_type("volumev3")
        assert types[0] == "block-storage"
        assert "volumev3" in types

    def test_all_types_unknown(self):
        with pytest.raises(KeyError):
            get_service_authority().get_all_types_by_service_type("frobnicator")

    def test_service_type_from_alias(self):
        assert ServiceType.from_str("volumev3") is ServiceType.BLOCK_STORAGE


class Color(Enum):
    RED = "red"


class TestQueryParams:
    """Tests for query string building."""

    def test_none_skipped(self):
        assert QueryParams().push("a", None).items() == []

    def test_rendering(self):
        params = QueryParams().push("shared", True).push("color", Color.RED).push("n", 3)
        assert params.items() == [("shared", "true"), ("color", "red"), ("n", "3")]

    def test_extend_repeats_key(self):
        params = QueryParams().extend("id", ["a", "b"])
        assert params.add_to_url("https://x/v2.0/ports") == "https://x/v2.0/ports?id=a&id=b"

    def test_comma_separated(self):
        params = QueryParams().push("tags", CommaSeparatedList(["a", "b"]))
        assert params.add_to_url("https://x/p") == "https://x/p?tags=a%2Cb"

    def test_keeps_existing_query(self):
        url = QueryParams().push("limit", 2).add_to_url("https://x/p?marker=m1")
        assert url == "https://x/p?marker=m1&limit=2"

    def test_set_replaces(self):
        params = QueryParams().push("limit", 1).push("limit", 2).set("limit", 5)
        assert params.items() == [("limit", "5")]
        assert params.get("limit") == "5"

    def test_copy_is_independent(self):
        params = QueryParams().push("a", 1)
        copy = params.copy().push("b", 2)
        assert len(params) == 1
        assert len(copy) == 2

    def test_empty_params_leave_url(self):
        assert QueryParams().add_to_url("https://x/p") == "https://x/p"


class TestCommaSeparatedList:
    """Tests for comma separated list parsing."""

    def test_parse_string(self):
        assert CommaSeparatedList.parse("a, b,,c") == ["a", "b", "c"]

    def test_parse_repeated_values(self):
        assert CommaSeparatedList.parse(["a,b", "c"]) == ["a", "b", "c"]

    def test_parse_none(self):
        assert CommaSeparatedList.parse(None) == []

    def test_str(self):
        assert str(CommaSeparatedList([True, "x"])) == "true,x"


class TestJsonBody:
    """Tests for JSON request bodies."""

    def test_wrapped_under_key(self):
        content_type, body = JsonBodyParams("network").push("name", "n1").push("mtu", None).into_body()
        assert content_type == "application/json"
        assert body == b'{"network": {"name": "n1"}}'

    def test_unwrapped(self):
        assert JsonBodyParams().update({"name": "z."}).into_value() == {"name": "z."}

    def test_datetime_and_enum_serialized(self):
        _, body = json_body({"at": datetime(2024, 1, 2, 3, 4, 5), "c": Color.RED})
        assert body == b'{"at": "2024-01-02T03:04:05", "c": "red"}'

    def test_unserializable_raises_body_error(self):
        with pytest.raises(BodyError):
            json_body({"x": object()})
