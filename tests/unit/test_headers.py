"""
Unit tests for header normalization.
"""

import pytest

from proxyhandler.http.headers import normalize_headers, split_header_list


class TestNormalizeHeaders:
    """Tests for normalize_headers()."""

    def test_lowercases_names(self):
        """Test that names are lower-cased and values kept."""
        result = normalize_headers({"Content-Type": "Application/JSON", "ACCEPT": "*/*"})
        assert result == {"content-type": "Application/JSON", "accept": "*/*"}

    def test_none_is_empty(self):
        """Test that missing headers become an empty mapping."""
        assert normalize_headers(None) == {}

    def test_empty(self):
        assert normalize_headers({}) == {}

    def test_collision_later_wins(self):
        """Test that the later of two colliding names wins."""
        result = normalize_headers({"Accept": "text/plain", "accept": "application/json"})
        assert result == {"accept": "application/json"}

    def test_does_not_mutate_input(self):
        """Test that the input mapping is left alone."""
        headers = {"X-Foo": "1"}
        normalize_headers(headers)
        assert headers == {"X-Foo": "1"}

    def test_idempotent(self):
        """Test that normalizing twice changes nothing."""
        once = normalize_headers({"X-Foo": "1", "Origin": "http://x"})
        assert normalize_headers(once) == once

    def test_non_mapping_rejected(self):
        """Test that a non-mapping raises TypeError."""
        with pytest.raises(TypeError):
            normalize_headers(["content-type", "text/plain"])


class TestSplitHeaderList:
    """Tests for split_header_list()."""

    def test_split_and_lowercase(self):
        assert split_header_list("X-Foo, x-bar") == ["x-foo", "x-bar"]

    def test_removes_all_whitespace(self):
        """Test that inner whitespace is removed too."""
        assert split_header_list(" X - Foo ,\tx-bar ") == ["x-foo", "x-bar"]

    def test_keeps_order(self):
        assert split_header_list("c, a, b") == ["c", "a", "b"]

    def test_drops_trailing_empty_entries(self):
        assert split_header_list("x-foo,,") == ["x-foo"]

    def test_keeps_inner_empty_entries(self):
        assert split_header_list("x-foo,,x-bar") == ["x-foo", "", "x-bar"]


class TestHeaderValues:
    """Tests for header value checks."""

    @pytest.mark.parametrize("value", [5, None, ["text/plain"]])
    def test_non_string_value_rejected(self, value):
        """Test that a header value that is not a string raises TypeError."""
        with pytest.raises(TypeError, match="Content-Type"):
            normalize_headers({"Content-Type": value})
