"""CORS as a raw ASGI middleware.

For applications that are not built on corsgate handlers: wrap any ASGI
app and the policy is enforced in front of it. Preflights and rejected
origins are answered here and never reach the app; for allowed requests
the CORS headers are injected into the app's ``http.response.start``.

Usage::

    app = CORSASGIMiddleware(other_asgi_app, CORSPolicy.permissive())
"""

from corsgate._internal.asgi import ASGIApp, Message, Receive, Scope, Send
from corsgate.classify import RequestKind, classify_request
from corsgate.engine import (
    add_vary,
    authorize_origin,
    evaluate_preflight,
    merge_vary,
    normal_headers,
    rejection_response,
)
from corsgate.errors import CORSRejection
from corsgate.http.request import Request
from corsgate.policy import CORSPolicy
from corsgate.server.sender import encode_headers, send_response


def _merge_headers(
    raw: list[tuple[bytes, bytes]] | tuple[tuple[bytes, bytes], ...],
    extra: tuple[tuple[str, str], ...],
) -> list[tuple[bytes, bytes]]:
    """Replace any of *extra*'s header names in *raw*, then append *extra*.

    ``Vary`` is folded into a single header that keeps the app's tokens.
    """
    encoded = encode_headers(extra)
    replaced = {name for name, _ in encoded} | {b"vary"}
    vary = merge_vary(value.decode("latin-1") for name, value in raw if name.lower() == b"vary")
    kept = [(name, value) for name, value in raw if name.lower() not in replaced]
    return [*kept, *encoded, (b"vary", vary.encode("latin-1"))]


class CORSASGIMiddleware:
    """Enforce a ``CORSPolicy`` in front of an arbitrary ASGI application."""

    __slots__ = ("app", "policy")

    def __init__(self, app: ASGIApp, policy: CORSPolicy | None = None) -> None:
        self.app = app
        self.policy = policy or CORSPolicy.permissive()

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        request = Request.from_asgi(scope, receive)

        if classify_request(request) is RequestKind.PREFLIGHT:
            response = evaluate_preflight(self.policy, request)
            await send_response(add_vary(response), send)
            return

        extra: tuple[tuple[str, str], ...] = ()
        if request.origin is not None:
            try:
                allow_origin = authorize_origin(self.policy, request.origin, preflight=False)
            except CORSRejection as exc:
                response = rejection_response(request, exc)
                await send_response(add_vary(response), send)
                return
            extra = normal_headers(self.policy, allow_origin)

        async def send_with_cors(message: Message) -> None:
            if message["type"] == "http.response.start":
                message = {**message, "headers": _merge_headers(message.get("headers", []), extra)}
            await send(message)

        await self.app(scope, receive, send_with_cors)
