"""Middleware — Protocol-based, no inheritance required.

A middleware is any callable matching:
    async def mw(request: Request, next: Next) -> Response

Built-in middleware:
    CORSMiddleware -- Cross-Origin Resource Sharing policy enforcement
"""

from corsgate.middleware.cors import CORSMiddleware
from corsgate.middleware.protocol import Handler, Middleware, Next

__all__ = [
    "CORSMiddleware",
    "Handler",
    "Middleware",
    "Next",
]
