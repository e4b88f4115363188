"""Preflight vs. normal request classification.

A preflight is an ``OPTIONS`` request that carries
``Access-Control-Request-Method``. A bare ``OPTIONS`` without it is an
ordinary request and must reach the application's own handling.
"""

from enum import Enum

from corsgate.http.request import Request


class RequestKind(Enum):
    """Which evaluation path a request takes."""

    PREFLIGHT = "preflight"
    NORMAL = "normal"


def classify(method: str, has_request_method: bool) -> RequestKind:
    if method == "OPTIONS" and has_request_method:
        return RequestKind.PREFLIGHT
    return RequestKind.NORMAL


def classify_request(request: Request) -> RequestKind:
    return classify(request.method, request.access_control_request_method is not None)
