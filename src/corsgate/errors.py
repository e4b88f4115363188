"""Corsgate exception hierarchy.

Shared across origin parsing, policy construction, the evaluation engine
and the ASGI host so every module raises and catches the same types.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from corsgate.http.response import Response


class CorsgateError(Exception):
    """Base for all corsgate-specific errors."""


class ConfigurationError(CorsgateError):
    """Raised when a policy or its configuration source is invalid.

    Always raised at startup, never while evaluating a request.
    """


# -- Origin parsing --


class OriginError(CorsgateError, ValueError):
    """A string could not be turned into a Web Origin."""

    def __init__(self, raw: str, message: str) -> None:
        super().__init__(message)
        self.raw = raw


class NotAUrl(OriginError):  # noqa: N818
    """The string is not an absolute URL."""

    def __init__(self, raw: str) -> None:
        super().__init__(raw, f"Could not be parsed as URL: '{raw}'")


class NoHost(OriginError):  # noqa: N818
    """The URL has no host component (``data:``, ``mailto:``, ...)."""

    def __init__(self, raw: str) -> None:
        super().__init__(raw, f"No host in URL '{raw}'")


class UnsupportedScheme(OriginError):  # noqa: N818
    """No explicit port and no known default port for the scheme."""

    def __init__(self, raw: str, scheme: str) -> None:
        super().__init__(raw, f"Unsupported URL scheme '{scheme}'")
        self.scheme = scheme


# -- CORS rejections --


class CORSRejection(CorsgateError):
    """A request the policy refuses.

    Raised inside the evaluators and resolved by ``evaluate()`` into a
    plain-text response. Never escapes the engine.
    """

    status = 400

    def __init__(self, detail: str) -> None:
        super().__init__(detail)
        self.detail = detail

    def __str__(self) -> str:
        return self.detail

    def to_response(self) -> Response:
        """Plain-text response carrying the diagnostic detail."""
        from corsgate.http.response import Response

        return Response(
            body=self.detail,
            status=self.status,
            content_type="text/plain; charset=utf-8",
        )


class MissingOrigin(CORSRejection):
    """Preflight without an ``Origin`` header."""

    def __init__(self) -> None:
        super().__init__("Preflight request without Origin header")


class DisallowedOrigin(CORSRejection):
    """Origin not allowed by the policy, or not parseable at all."""

    def __init__(self, raw: str, *, preflight: bool) -> None:
        kind = "Preflight" if preflight else "Normal"
        super().__init__(f"{kind} request requesting disallowed origin '{raw}'")
        self.raw = raw


class DisallowedMethod(CORSRejection):
    """Preflight asking for a method outside ``allowed_methods``."""

    def __init__(self, method: str) -> None:
        super().__init__(f"Preflight request requesting disallowed method {method}")
        self.method = method


class DisallowedHeaders(CORSRejection):
    """Preflight asking for one or more headers outside ``allowed_headers``."""

    def __init__(self, names: tuple[str, ...]) -> None:
        joined = ", ".join(names)
        super().__init__(f"Preflight request requesting disallowed header(s) {joined}")
        self.names = names


# -- Inner handler errors --


@dataclass(slots=True, eq=False)
class HTTPError(CorsgateError):
    """An error that maps directly to an HTTP status code.

    Raised by inner handlers. The engine lets it propagate untouched;
    the ASGI host turns it into a response.
    """

    status: int
    detail: str = ""
    headers: tuple[tuple[str, str], ...] = ()

    def __str__(self) -> str:
        if self.detail:
            return f"{self.status}: {self.detail}"
        return str(self.status)
