"""Immutable HTTP request.

Carries only what the CORS engine and inner handlers read: method, path,
headers and the ASGI receive callable for handlers that want the body.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from corsgate._internal.asgi import Message, Receive, Scope
from corsgate.http.headers import Headers


async def _empty_receive() -> Message:
    return {"type": "http.request", "body": b"", "more_body": False}


@dataclass(frozen=True, slots=True)
class Request:
    """An immutable HTTP request.

    Build one directly (``Request("GET", "/", Headers.from_pairs(...))``)
    or from an ASGI scope with ``from_asgi``.
    """

    method: str
    path: str = "/"
    headers: Headers = field(default_factory=Headers)
    query_string: bytes = b""

    # Private: ASGI receive callable for body streaming
    _receive: Receive = field(default=_empty_receive, repr=False, compare=False)

    # -- CORS request headers --

    @property
    def origin(self) -> str | None:
        """The raw ``Origin`` header, if present."""
        return self.headers.get("origin")

    @property
    def access_control_request_method(self) -> str | None:
        """The raw ``Access-Control-Request-Method`` header, if present."""
        return self.headers.get("access-control-request-method")

    @property
    def access_control_request_headers(self) -> tuple[str, ...]:
        """Header names listed in ``Access-Control-Request-Headers`` (empty if absent)."""
        return self.headers.get_tokens("access-control-request-headers")

    # -- Async body access --

    async def body(self) -> bytes:
        """Read the full request body from the ASGI receive channel."""
        chunks: list[bytes] = []
        while True:
            message = await self._receive()
            chunk = message.get("body", b"")
            if chunk:
                chunks.append(chunk)
            if not message.get("more_body", False):
                break
        return b"".join(chunks)

    # -- Factory --

    @classmethod
    def from_asgi(cls, scope: Scope, receive: Receive) -> Request:
        """Create a Request from an ASGI scope and receive callable."""
        return cls(
            method=scope["method"],
            path=scope["path"],
            headers=Headers(tuple(scope.get("headers", ()))),
            query_string=scope.get("query_string", b""),
            _receive=receive,
        )
