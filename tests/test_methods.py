"""Tests for switchyard.routing.methods."""

from switchyard.routing.methods import (
    REGISTRABLE_METHODS,
    ROUTABLE_METHODS,
    Method,
    parse_method,
)


class TestParseMethod:
    def test_known_methods(self) -> None:
        for token in ("DELETE", "GET", "HEAD", "OPTIONS", "PATCH", "POST", "PUT"):
            assert parse_method(token) is Method(token)

    def test_unknown_method(self) -> None:
        assert parse_method("TRACE") is None
        assert parse_method("CONNECT") is None

    def test_case_sensitive(self) -> None:
        assert parse_method("get") is None

    def test_method_is_a_string(self) -> None:
        assert Method.GET == "GET"
        assert ", ".join([Method.GET, Method.POST]) == "GET, POST"


class TestMethodTables:
    def test_options_has_no_slot(self) -> None:
        assert Method.OPTIONS not in ROUTABLE_METHODS

    def test_head_is_not_registrable(self) -> None:
        assert Method.HEAD in ROUTABLE_METHODS
        assert Method.HEAD not in REGISTRABLE_METHODS

    def test_canonical_order(self) -> None:
        assert [str(m) for m in ROUTABLE_METHODS] == [
            "DELETE",
            "GET",
            "HEAD",
            "PATCH",
            "POST",
            "PUT",
        ]
