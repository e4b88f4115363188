"""Tests for corsgate.classify — preflight vs. normal requests."""

import pytest

from corsgate.classify import RequestKind, classify, classify_request
from corsgate.http.headers import Headers
from corsgate.http.request import Request


class TestClassify:
    def test_options_with_request_method_is_preflight(self) -> None:
        assert classify("OPTIONS", True) is RequestKind.PREFLIGHT

    def test_options_without_request_method_is_normal(self) -> None:
        assert classify("OPTIONS", False) is RequestKind.NORMAL

    @pytest.mark.parametrize("method", ["GET", "POST", "PUT", "DELETE", "PATCH"])
    def test_other_methods_are_normal(self, method: str) -> None:
        assert classify(method, True) is RequestKind.NORMAL


class TestClassifyRequest:
    def test_preflight_request(self) -> None:
        request = Request(
            "OPTIONS",
            headers=Headers.from_pairs({"Access-Control-Request-Method": "GET"}),
        )
        assert classify_request(request) is RequestKind.PREFLIGHT

    def test_empty_request_method_header_still_counts(self) -> None:
        request = Request(
            "OPTIONS",
            headers=Headers.from_pairs({"Access-Control-Request-Method": ""}),
        )
        assert classify_request(request) is RequestKind.PREFLIGHT

    def test_origin_alone_does_not_make_a_preflight(self) -> None:
        request = Request("OPTIONS", headers=Headers.from_pairs({"Origin": "http://a.com"}))
        assert classify_request(request) is RequestKind.NORMAL
