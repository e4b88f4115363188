"""CORS middleware.

Wraps the evaluation engine in the middleware shape so it composes with
other middleware in an ``ASGIHandler`` pipeline, or decorates a single
inner handler directly.
"""

import functools

from corsgate._internal.types import Handler, Next
from corsgate.engine import evaluate
from corsgate.http.request import Request
from corsgate.http.response import Response
from corsgate.policy import CORSPolicy


class CORSMiddleware:
    """Standards-compliant CORS middleware.

    Handles:
    - Preflight ``OPTIONS`` requests (204 with the allow-list headers, or 400)
    - Normal requests (CORS headers added to the inner response)
    - Disallowed or unparseable origins (400, inner handler not called)
    - Credentials (``Access-Control-Allow-Credentials``, never ``*``)

    Usage::

        handler = ASGIHandler(
            index,
            middleware=[CORSMiddleware(CORSPolicy(
                allowed_origins=SpecificOrigins.of("https://example.com"),
                allowed_methods=("GET", "POST"),
            ))],
        )
    """

    __slots__ = ("policy",)

    def __init__(self, policy: CORSPolicy | None = None) -> None:
        self.policy = policy or CORSPolicy.permissive()

    async def __call__(self, request: Request, next: Next) -> Response:
        """Process the request with CORS handling."""
        return await evaluate(self.policy, request, next)

    def decorate(self, handler: Handler) -> Next:
        """Wrap *handler* (plain or async) into a CORS-enforcing async handler::

            cors = CORSMiddleware()

            @cors.decorate
            def api(request):
                return Response("ok")
        """
        policy = self.policy

        @functools.wraps(handler)
        async def wrapper(request: Request) -> Response:
            return await evaluate(policy, request, handler)

        return wrapper
