"""Tests for corsgate.policy — allow-lists and the frozen CORSPolicy."""

import pytest

from corsgate.errors import ConfigurationError
from corsgate.origin import NULL_ORIGIN, parse_origin
from corsgate.policy import (
    DEFAULT_HEADERS,
    DEFAULT_METHODS,
    AnyOrigin,
    CORSPolicy,
    SpecificOrigins,
)

A = parse_origin("http://a.com")
B = parse_origin("http://b.com")


class TestAnyOrigin:
    def test_allows_tuple_origins(self) -> None:
        assert AnyOrigin().allows(A)

    def test_refuses_null_by_default(self) -> None:
        assert not AnyOrigin().allows(NULL_ORIGIN)

    def test_allow_null(self) -> None:
        assert AnyOrigin(allow_null=True).allows(NULL_ORIGIN)


class TestSpecificOrigins:
    def test_of_parses_and_normalizes(self) -> None:
        allowed = SpecificOrigins.of("HTTP://A.com:80/path")
        assert allowed.allows(A)
        assert not allowed.allows(B)

    def test_null_must_be_listed(self) -> None:
        assert not SpecificOrigins.of("http://a.com").allows(NULL_ORIGIN)
        assert SpecificOrigins.of("null").allows(NULL_ORIGIN)

    def test_empty_allows_nothing(self) -> None:
        assert not SpecificOrigins().allows(A)

    def test_of_rejects_non_origins(self) -> None:
        with pytest.raises(ConfigurationError, match="Invalid allowed origin"):
            SpecificOrigins.of("not a url")

    def test_rejects_unparsed_strings(self) -> None:
        with pytest.raises(ConfigurationError, match=r"SpecificOrigins\.of"):
            SpecificOrigins(frozenset({"http://a.com"}))  # type: ignore[arg-type]

    def test_accepts_any_iterable(self) -> None:
        allowed = SpecificOrigins([A, B])  # type: ignore[arg-type]
        assert allowed.origins == frozenset({A, B})


class TestAllowOriginValue:
    def test_echoes_raw_origin(self) -> None:
        policy = CORSPolicy()
        assert policy.allowed_origin_value(A, "http://a.com") == "http://a.com"

    def test_echo_is_the_raw_header_not_the_normalized_origin(self) -> None:
        policy = CORSPolicy()
        assert policy.allowed_origin_value(A, "HTTP://A.com:80") == "HTTP://A.com:80"

    def test_prefer_wildcard(self) -> None:
        policy = CORSPolicy(prefer_wildcard=True)
        assert policy.allowed_origin_value(A, "http://a.com") == "*"
        assert policy.use_wildcard

    def test_credentials_never_wildcard(self) -> None:
        policy = CORSPolicy(prefer_wildcard=True, allow_credentials=True)
        assert policy.allowed_origin_value(A, "http://a.com") == "http://a.com"
        assert not policy.use_wildcard

    def test_specific_origins_with_wildcard(self) -> None:
        policy = CORSPolicy(
            allowed_origins=SpecificOrigins.of("http://a.com"), prefer_wildcard=True
        )
        assert policy.allowed_origin_value(A, "http://a.com") == "*"
        assert policy.allowed_origin_value(B, "http://b.com") is None

    def test_refused_null(self) -> None:
        assert CORSPolicy().allowed_origin_value(NULL_ORIGIN, "null") is None

    def test_allowed_null_echoes_null(self) -> None:
        policy = CORSPolicy(allowed_origins=AnyOrigin(allow_null=True))
        assert policy.allowed_origin_value(NULL_ORIGIN, "null") == "null"


class TestMethodsAndHeaders:
    def test_methods_are_case_sensitive(self) -> None:
        policy = CORSPolicy()
        assert policy.allows_method("PATCH")
        assert not policy.allows_method("patch")

    def test_headers_are_case_insensitive(self) -> None:
        policy = CORSPolicy()
        assert policy.disallowed_headers(["content-type", "AUTHORIZATION"]) == ()

    def test_disallowed_headers_keep_order_and_casing(self) -> None:
        policy = CORSPolicy(allowed_headers=("X-Allowed",))
        refused = policy.disallowed_headers(["X-B", "x-allowed", "X-A", "x-b"])
        assert refused == ("X-B", "X-A")

    def test_empty_request_list(self) -> None:
        assert CORSPolicy(allowed_headers=()).disallowed_headers([]) == ()


class TestCORSPolicyDefaults:
    def test_permissive(self) -> None:
        policy = CORSPolicy.permissive()
        assert policy == CORSPolicy()
        assert policy.allowed_origins == AnyOrigin(allow_null=False)
        assert policy.allowed_methods == DEFAULT_METHODS
        assert policy.allowed_headers == DEFAULT_HEADERS
        assert policy.exposed_headers == ()
        assert policy.allow_credentials is False
        assert policy.max_age == 3600
        assert policy.prefer_wildcard is False

    def test_default_lists(self) -> None:
        assert ", ".join(DEFAULT_METHODS) == (
            "OPTIONS, GET, POST, PUT, DELETE, HEAD, TRACE, CONNECT, PATCH"
        )
        assert ", ".join(DEFAULT_HEADERS) == "Authorization, Content-Type, X-Requested-With"

    def test_frozen(self) -> None:
        policy = CORSPolicy()
        with pytest.raises(AttributeError):
            policy.max_age = 10  # type: ignore[misc]

    def test_replace_returns_new_policy(self) -> None:
        policy = CORSPolicy()
        narrowed = policy.replace(allowed_methods=("GET",))
        assert narrowed.allowed_methods == ("GET",)
        assert policy.allowed_methods == DEFAULT_METHODS


class TestCORSPolicyValidation:
    def test_lists_become_tuples(self) -> None:
        policy = CORSPolicy(allowed_methods=["GET", "POST"])  # type: ignore[arg-type]
        assert policy.allowed_methods == ("GET", "POST")

    def test_duplicate_headers_collapse_case_insensitively(self) -> None:
        policy = CORSPolicy(allowed_headers=("X-Foo", "x-foo", "X-Bar"))
        assert policy.allowed_headers == ("X-Foo", "X-Bar")

    def test_duplicate_methods_are_case_sensitive(self) -> None:
        policy = CORSPolicy(allowed_methods=("GET", "GET", "get"))
        assert policy.allowed_methods == ("GET", "get")

    @pytest.mark.parametrize("max_age", [-1, "60", True, 1.5])
    def test_bad_max_age(self, max_age: object) -> None:
        with pytest.raises(ConfigurationError, match="max_age"):
            CORSPolicy(max_age=max_age)  # type: ignore[arg-type]

    def test_zero_max_age(self) -> None:
        assert CORSPolicy(max_age=0).max_age == 0

    def test_string_instead_of_sequence(self) -> None:
        with pytest.raises(ConfigurationError, match="sequence of strings"):
            CORSPolicy(allowed_methods="GET")  # type: ignore[arg-type]

    @pytest.mark.parametrize("token", ["", " GET", "GET, POST", "X Foo", 42])
    def test_bad_tokens(self, token: object) -> None:
        with pytest.raises(ConfigurationError):
            CORSPolicy(allowed_headers=(token,))  # type: ignore[arg-type]

    def test_bad_allowed_origins(self) -> None:
        with pytest.raises(ConfigurationError, match="allowed_origins"):
            CORSPolicy(allowed_origins=("http://a.com",))  # type: ignore[arg-type]

    def test_replace_revalidates(self) -> None:
        with pytest.raises(ConfigurationError):
            CORSPolicy().replace(max_age=-5)
