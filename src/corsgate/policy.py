"""CORS policy: which origins, methods and headers a resource admits.

``CORSPolicy`` is a frozen dataclass built once at startup and shared by
every request. Defaults are the permissive policy; narrow what you need::

    policy = CORSPolicy(
        allowed_origins=SpecificOrigins.of("https://app.example.com"),
        allowed_methods=("GET", "POST"),
        allow_credentials=True,
    )
"""

from __future__ import annotations

import dataclasses
from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Any

from corsgate.errors import ConfigurationError, OriginError
from corsgate.origin import NullOrigin, Origin, TupleOrigin, parse_origin_allow_null

DEFAULT_METHODS: tuple[str, ...] = (
    "OPTIONS",
    "GET",
    "POST",
    "PUT",
    "DELETE",
    "HEAD",
    "TRACE",
    "CONNECT",
    "PATCH",
)

DEFAULT_HEADERS: tuple[str, ...] = ("Authorization", "Content-Type", "X-Requested-With")


def _allow_origin_value(raw: str, *, allow_credentials: bool, prefer_wildcard: bool) -> str:
    # Credentials forbid "*", so they win over the wildcard preference.
    if allow_credentials:
        return raw
    if prefer_wildcard:
        return "*"
    return raw


@dataclass(frozen=True, slots=True)
class AnyOrigin:
    """Every tuple origin is allowed; ``null`` only when ``allow_null`` is set."""

    allow_null: bool = False

    def allows(self, origin: Origin) -> bool:
        return self.allow_null or not isinstance(origin, NullOrigin)

    def allowed_for(
        self,
        origin: Origin,
        raw: str,
        *,
        allow_credentials: bool,
        prefer_wildcard: bool,
    ) -> str | None:
        """Return the ``Access-Control-Allow-Origin`` value, or None if refused."""
        if not self.allows(origin):
            return None
        return _allow_origin_value(
            raw, allow_credentials=allow_credentials, prefer_wildcard=prefer_wildcard
        )


@dataclass(frozen=True, slots=True)
class SpecificOrigins:
    """Only the listed origins are allowed.

    ``NULL_ORIGIN`` may be listed explicitly to admit ``Origin: null``.
    """

    origins: frozenset[Origin] = frozenset()

    def __post_init__(self) -> None:
        origins = frozenset(self.origins)
        for origin in origins:
            if not isinstance(origin, (TupleOrigin, NullOrigin)):
                msg = (
                    f"SpecificOrigins expects parsed origins, got {origin!r}; "
                    "use SpecificOrigins.of()"
                )
                raise ConfigurationError(msg)
        object.__setattr__(self, "origins", origins)

    @classmethod
    def of(cls, *raw_origins: str) -> SpecificOrigins:
        """Build from origin strings (``"null"`` is accepted).

        Raises ``ConfigurationError`` for strings that are not origins.
        """
        parsed: set[Origin] = set()
        for raw in raw_origins:
            try:
                parsed.add(parse_origin_allow_null(raw))
            except OriginError as exc:
                msg = f"Invalid allowed origin {raw!r}: {exc}"
                raise ConfigurationError(msg) from exc
        return cls(frozenset(parsed))

    def allows(self, origin: Origin) -> bool:
        return origin in self.origins

    def allowed_for(
        self,
        origin: Origin,
        raw: str,
        *,
        allow_credentials: bool,
        prefer_wildcard: bool,
    ) -> str | None:
        """Return the ``Access-Control-Allow-Origin`` value, or None if refused."""
        if not self.allows(origin):
            return None
        return _allow_origin_value(
            raw, allow_credentials=allow_credentials, prefer_wildcard=prefer_wildcard
        )


type AllowedOrigins = AnyOrigin | SpecificOrigins


def _tokens(value: Any, name: str, *, case_insensitive: bool) -> tuple[str, ...]:
    """Validate and deduplicate a list of header or method tokens."""
    if isinstance(value, str) or not isinstance(value, Iterable):
        msg = f"CORSPolicy.{name} must be a sequence of strings, got {value!r}"
        raise ConfigurationError(msg)
    seen: set[str] = set()
    result: list[str] = []
    for token in value:
        if not isinstance(token, str) or not token or token.strip() != token:
            msg = f"CORSPolicy.{name} contains an invalid token: {token!r}"
            raise ConfigurationError(msg)
        if "," in token or " " in token:
            msg = f"CORSPolicy.{name} tokens must not contain commas or spaces: {token!r}"
            raise ConfigurationError(msg)
        key = token.lower() if case_insensitive else token
        if key not in seen:
            seen.add(key)
            result.append(token)
    return tuple(result)


@dataclass(frozen=True, slots=True)
class CORSPolicy:
    """Immutable CORS configuration.

    ``allowed_methods`` and ``allowed_headers`` are echoed verbatim in
    preflight responses, so they must be enumerable: there is no
    "allow everything" wildcard for them. Header names match ASCII
    case-insensitively; methods match case-sensitively.

    ``prefer_wildcard`` only takes effect while ``allow_credentials`` is
    false, since browsers reject ``*`` on credentialed responses.
    """

    allowed_origins: AllowedOrigins = AnyOrigin()
    allowed_methods: tuple[str, ...] = DEFAULT_METHODS
    allowed_headers: tuple[str, ...] = DEFAULT_HEADERS
    exposed_headers: tuple[str, ...] = ()
    allow_credentials: bool = False
    max_age: int = 3600  # 1 hour
    prefer_wildcard: bool = False

    _header_keys: frozenset[str] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        if not isinstance(self.allowed_origins, (AnyOrigin, SpecificOrigins)):
            msg = (
                "CORSPolicy.allowed_origins must be AnyOrigin or SpecificOrigins, "
                f"got {self.allowed_origins!r}"
            )
            raise ConfigurationError(msg)
        if isinstance(self.max_age, bool) or not isinstance(self.max_age, int) or self.max_age < 0:
            msg = f"CORSPolicy.max_age must be a non-negative integer, got {self.max_age!r}"
            raise ConfigurationError(msg)

        methods = _tokens(self.allowed_methods, "allowed_methods", case_insensitive=False)
        headers = _tokens(self.allowed_headers, "allowed_headers", case_insensitive=True)
        exposed = _tokens(self.exposed_headers, "exposed_headers", case_insensitive=True)
        object.__setattr__(self, "allowed_methods", methods)
        object.__setattr__(self, "allowed_headers", headers)
        object.__setattr__(self, "exposed_headers", exposed)
        object.__setattr__(self, "_header_keys", frozenset(h.lower() for h in headers))

    @classmethod
    def permissive(cls) -> CORSPolicy:
        """Any non-null origin, every standard method, common request headers."""
        return cls()

    def replace(self, **changes: Any) -> CORSPolicy:
        """Return a copy with *changes* applied (re-validated)."""
        return dataclasses.replace(self, **changes)

    @property
    def use_wildcard(self) -> bool:
        """Whether ``*`` is sent instead of echoing the origin."""
        return self.prefer_wildcard and not self.allow_credentials

    def allowed_origin_value(self, origin: Origin, raw: str) -> str | None:
        """The ``Access-Control-Allow-Origin`` value for *origin*, or None."""
        return self.allowed_origins.allowed_for(
            origin,
            raw,
            allow_credentials=self.allow_credentials,
            prefer_wildcard=self.prefer_wildcard,
        )

    def allows_method(self, method: str) -> bool:
        return method in self.allowed_methods

    def disallowed_headers(self, names: Iterable[str]) -> tuple[str, ...]:
        """Names from *names* not in ``allowed_headers``, in order, deduplicated."""
        seen: set[str] = set()
        refused: list[str] = []
        for name in names:
            key = name.lower()
            if key in self._header_keys or key in seen:
                continue
            seen.add(key)
            refused.append(name)
        return tuple(refused)
