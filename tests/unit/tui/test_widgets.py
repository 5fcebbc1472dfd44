"""Unit tests for dashboard widget helpers."""

from ostack.tui.widgets import filter_rows

ROWS = [
    ["s1", "web-1", "ACTIVE"],
    ["s2", "db-1", "SHUTOFF"],
    ["s3", "Web-2", "ERROR"],
]


class TestFilterRows:
    """Tests for the row filter."""

    def test_empty_filter_shows_all(self):
        assert filter_rows(ROWS, "") == [0, 1, 2]
        assert filter_rows(ROWS, "   ") == [0, 1, 2]

    def test_case_insensitive_match_in_any_cell(self):
        assert filter_rows(ROWS, "WEB") == [0, 2]
        assert filter_rows(ROWS, "shutoff") == [1]

    def test_no_match(self):
        assert filter_rows(ROWS, "lb") == []
