"""Tests for corsgate.http.response — immutable chainable Response."""

import pytest

from corsgate.http.response import Response


class TestResponse:
    def test_defaults(self) -> None:
        response = Response()
        assert response.status == 200
        assert response.body == ""
        assert response.content_type == "text/html; charset=utf-8"
        assert response.headers == ()

    def test_frozen(self) -> None:
        response = Response("ok")
        with pytest.raises(AttributeError):
            response.status = 500  # type: ignore[misc]

    def test_with_status(self) -> None:
        original = Response("ok")
        changed = original.with_status(204)
        assert changed.status == 204
        assert original.status == 200

    def test_with_header_appends(self) -> None:
        response = Response().with_header("X-A", "1").with_header("X-A", "2")
        assert response.headers == (("X-A", "1"), ("X-A", "2"))

    def test_with_headers(self) -> None:
        response = Response().with_headers({"X-A": "1", "X-B": "2"})
        assert response.headers == (("X-A", "1"), ("X-B", "2"))

    def test_with_content_type(self) -> None:
        assert Response().with_content_type("text/plain").content_type == "text/plain"


class TestReplacedHeader:
    def test_replaces_every_case_variant(self) -> None:
        response = (
            Response()
            .with_header("vary", "Accept")
            .with_header("X-Keep", "1")
            .with_header("VARY", "Cookie")
            .with_replaced_header("Vary", "Origin")
        )
        assert response.headers == (("X-Keep", "1"), ("Vary", "Origin"))

    def test_adds_when_absent(self) -> None:
        assert Response().with_replaced_header("Vary", "Origin").headers == (("Vary", "Origin"),)

    def test_without_header(self) -> None:
        response = Response().with_header("X-A", "1").with_header("X-B", "2").without_header("x-a")
        assert response.headers == (("X-B", "2"),)


class TestLookup:
    def test_header_is_case_insensitive(self) -> None:
        response = Response().with_header("Access-Control-Allow-Origin", "*")
        assert response.header("access-control-allow-origin") == "*"

    def test_header_default(self) -> None:
        assert Response().header("X-Missing") is None
        assert Response().header("X-Missing", "d") == "d"

    def test_has_header(self) -> None:
        response = Response().with_header("X-A", "")
        assert response.has_header("x-a")
        assert not response.has_header("x-b")


class TestBody:
    def test_body_bytes_from_str(self) -> None:
        assert Response("héllo").body_bytes == "héllo".encode()

    def test_text_from_bytes(self) -> None:
        assert Response(b"ok").text == "ok"
