"""ASGI host for an inner handler wrapped in middleware.

Translates ASGI scope/receive into a ``Request``, runs the middleware
chain around the inner handler, and sends the ``Response`` back through
ASGI ``send()``. Errors the inner handler raises are turned into
responses here, after every middleware has let them through.
"""

import logging
from collections.abc import Sequence

from corsgate._internal.asgi import Receive, Scope, Send
from corsgate._internal.invoke import invoke
from corsgate._internal.types import Handler, Next
from corsgate.errors import HTTPError
from corsgate.http.request import Request
from corsgate.http.response import Response
from corsgate.middleware.protocol import Middleware
from corsgate.server.sender import send_response

logger = logging.getLogger("corsgate.server")


def handle_http_error(exc: HTTPError, request: Request) -> Response:
    """Plain-text response for an ``HTTPError`` raised by the inner handler."""
    logger.debug("%d %s %s: %s", exc.status, request.method, request.path, exc.detail)
    response = Response(
        body=exc.detail or str(exc.status),
        status=exc.status,
        content_type="text/plain; charset=utf-8",
    )
    for name, value in exc.headers:
        response = response.with_header(name, value)
    return response


def handle_internal_error(request: Request) -> Response:
    """Log the active exception and answer 500."""
    logger.exception("500 %s %s", request.method, request.path)
    return Response(
        body="Internal Server Error",
        status=500,
        content_type="text/plain; charset=utf-8",
    )


def build_pipeline(handler: Handler, middleware: Sequence[Middleware]) -> Next:
    """Wrap *handler* in *middleware*, first entry outermost."""

    async def dispatch(request: Request) -> Response:
        return await invoke(handler, request)

    pipeline: Next = dispatch
    for mw in reversed(middleware):

        async def make_next(req: Request, _mw: Middleware = mw, _next: Next = pipeline) -> Response:
            return await _mw(req, _next)

        pipeline = make_next
    return pipeline


class ASGIHandler:
    """ASGI 3 application serving one inner handler behind middleware.

    Usage::

        async def api(request: Request) -> Response:
            return Response('{"ok": true}', content_type="application/json")

        app = ASGIHandler(api, middleware=[CORSMiddleware(policy)])

    Serve ``app`` with any ASGI server.
    """

    __slots__ = ("_pipeline", "handler", "middleware")

    def __init__(self, handler: Handler, middleware: Sequence[Middleware] = ()) -> None:
        self.handler = handler
        self.middleware = tuple(middleware)
        self._pipeline = build_pipeline(handler, self.middleware)

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] == "lifespan":
            await self._handle_lifespan(receive, send)
            return
        if scope["type"] != "http":
            return

        request = Request.from_asgi(scope, receive)
        try:
            response = await self._pipeline(request)
        except HTTPError as exc:
            response = handle_http_error(exc, request)
        except Exception:
            response = handle_internal_error(request)
        await send_response(response, send)

    async def _handle_lifespan(self, receive: Receive, send: Send) -> None:
        """Acknowledge startup and shutdown; there is nothing to set up."""
        while True:
            message = await receive()
            if message["type"] == "lifespan.startup":
                await send({"type": "lifespan.startup.complete"})
            elif message["type"] == "lifespan.shutdown":
                await send({"type": "lifespan.shutdown.complete"})
                return
