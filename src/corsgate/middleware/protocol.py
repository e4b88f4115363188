"""Middleware protocol and Next type alias.

A middleware is any callable matching::

    async def my_mw(request: Request, next: Next) -> Response: ...

No base class required. The pipeline checks the shape, not the lineage.
``CORSMiddleware`` is one; ``ASGIHandler`` chains any number of them
around an inner handler.
"""

from typing import Protocol

from corsgate._internal.types import Handler, Next
from corsgate.http.request import Request
from corsgate.http.response import Response

__all__ = ["Handler", "Middleware", "Next"]


class Middleware(Protocol):
    """Protocol for corsgate middleware.

    Accepts both functions and callable objects::

        # Function middleware
        async def timing(request: Request, next: Next) -> Response:
            start = time.monotonic()
            response = await next(request)
            elapsed = time.monotonic() - start
            return response.with_header("X-Time", f"{elapsed:.3f}")

        # Class middleware
        class RateLimiter:
            async def __call__(self, request: Request, next: Next) -> Response:
                ...
    """

    async def __call__(self, request: Request, next: Next) -> Response: ...
