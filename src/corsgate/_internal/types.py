"""Shared type aliases used across corsgate modules."""

from collections.abc import Awaitable, Callable

from corsgate.http.request import Request
from corsgate.http.response import Response

# The next handler in a middleware chain
type Next = Callable[[Request], Awaitable[Response]]

# An inner handler: plain or async, taking the request
type Handler = Callable[[Request], Response | Awaitable[Response]]
