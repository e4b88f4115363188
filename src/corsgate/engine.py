"""CORS evaluation engine.

``evaluate(policy, request, call_next)`` is the whole protocol for one
request:

1. Classify it as a preflight or a normal request.
2. Preflight: run the ordered checks (origin present, origin allowed,
   method allowed, headers allowed) and answer 204 with the allow-list
   headers, or 400 with a diagnostic. ``call_next`` is never called.
3. Normal: without ``Origin`` pass straight through; with a disallowed
   origin answer 400 without calling ``call_next``; otherwise call it and
   add the allow-origin/credentials/expose headers to its response.
4. Add the CORS request headers to ``Vary`` on whatever came out,
   keeping any ``Vary`` tokens the inner handler set.

Checks run in that order and stop at the first failure, so an
unparseable origin never reaches method or header matching. Exceptions
raised by ``call_next`` propagate untouched.

The engine holds no state: the policy is frozen and every input comes
from the request, so evaluations can run concurrently on any number of
threads or tasks.
"""

import logging
from collections.abc import Iterable

from corsgate._internal.invoke import invoke
from corsgate._internal.types import Handler
from corsgate.classify import RequestKind, classify_request
from corsgate.errors import (
    CORSRejection,
    DisallowedHeaders,
    DisallowedMethod,
    DisallowedOrigin,
    MissingOrigin,
    OriginError,
)
from corsgate.http.request import Request
from corsgate.http.response import Response
from corsgate.origin import parse_origin_allow_null
from corsgate.policy import CORSPolicy

logger = logging.getLogger("corsgate.cors")

VARY_TOKENS: tuple[str, ...] = (
    "Origin",
    "Access-Control-Request-Method",
    "Access-Control-Request-Headers",
)
VARY = ", ".join(VARY_TOKENS)


def merge_vary(values: Iterable[str]) -> str:
    """Combine existing ``Vary`` values with ``VARY_TOKENS``.

    Existing tokens keep their order and casing; missing CORS tokens are
    appended. With no existing values the result is ``VARY``.
    """
    tokens = [token.strip() for value in values for token in value.split(",") if token.strip()]
    present = {token.lower() for token in tokens}
    tokens.extend(token for token in VARY_TOKENS if token.lower() not in present)
    return ", ".join(tokens)


def add_vary(response: Response) -> Response:
    """Return *response* with one ``Vary`` header that includes ``VARY_TOKENS``."""
    existing = [value for name, value in response.headers if name.lower() == "vary"]
    return response.with_replaced_header("Vary", merge_vary(existing))


def authorize_origin(policy: CORSPolicy, raw: str, *, preflight: bool) -> str:
    """Return the ``Access-Control-Allow-Origin`` value for *raw*.

    Raises ``DisallowedOrigin`` when the policy refuses the origin or the
    value is not an origin at all.
    """
    try:
        origin = parse_origin_allow_null(raw)
    except OriginError as exc:
        logger.debug("Unparseable Origin %r: %s", raw, exc)
        raise DisallowedOrigin(raw, preflight=preflight) from exc
    value = policy.allowed_origin_value(origin, raw)
    if value is None:
        raise DisallowedOrigin(raw, preflight=preflight)
    return value


def preflight_headers(policy: CORSPolicy, request: Request) -> tuple[tuple[str, str], ...]:
    """Run the preflight checks in order and return the headers to grant.

    Raises the ``CORSRejection`` for the first failing check.
    """
    raw_origin = request.origin
    if raw_origin is None:
        raise MissingOrigin()

    allow_origin = authorize_origin(policy, raw_origin, preflight=True)

    method = request.access_control_request_method or ""
    if not policy.allows_method(method):
        raise DisallowedMethod(method)

    refused = policy.disallowed_headers(request.access_control_request_headers)
    if refused:
        raise DisallowedHeaders(refused)

    headers: list[tuple[str, str]] = []
    if policy.allow_credentials:
        headers.append(("Access-Control-Allow-Credentials", "true"))
    headers.append(("Access-Control-Allow-Origin", allow_origin))
    headers.append(("Access-Control-Max-Age", str(policy.max_age)))
    headers.append(("Access-Control-Allow-Methods", ", ".join(policy.allowed_methods)))
    headers.append(("Access-Control-Allow-Headers", ", ".join(policy.allowed_headers)))
    return tuple(headers)


def normal_headers(policy: CORSPolicy, allow_origin: str) -> tuple[tuple[str, str], ...]:
    """Headers added to a successful response for an allowed origin."""
    headers: list[tuple[str, str]] = []
    if policy.allow_credentials:
        headers.append(("Access-Control-Allow-Credentials", "true"))
    headers.append(("Access-Control-Allow-Origin", allow_origin))
    if policy.exposed_headers:
        headers.append(("Access-Control-Expose-Headers", ", ".join(policy.exposed_headers)))
    return tuple(headers)


def rejection_response(request: Request, exc: CORSRejection) -> Response:
    """Log *exc* and turn it into its 400 response."""
    logger.debug("CORS rejected %s %s: %s", request.method, request.path, exc.detail)
    return exc.to_response()


def evaluate_preflight(policy: CORSPolicy, request: Request) -> Response:
    """Answer a preflight: 204 with the granted headers, or 400."""
    try:
        headers = preflight_headers(policy, request)
    except CORSRejection as exc:
        return rejection_response(request, exc)
    return Response(body="", status=204, headers=headers)


async def evaluate_normal(policy: CORSPolicy, request: Request, call_next: Handler) -> Response:
    """Answer a normal request through *call_next*, adding CORS headers.

    A request without ``Origin`` is passed through untouched. A disallowed
    origin is refused before *call_next* runs.
    """
    raw_origin = request.origin
    if raw_origin is None:
        return await invoke(call_next, request)

    try:
        allow_origin = authorize_origin(policy, raw_origin, preflight=False)
    except CORSRejection as exc:
        return rejection_response(request, exc)

    response: Response = await invoke(call_next, request)
    for name, value in normal_headers(policy, allow_origin):
        response = response.with_replaced_header(name, value)
    return response


async def evaluate(policy: CORSPolicy, request: Request, call_next: Handler) -> Response:
    """Evaluate *request* against *policy*; see the module docstring.

    *call_next* may be a plain function or a coroutine function.
    """
    match classify_request(request):
        case RequestKind.PREFLIGHT:
            response = evaluate_preflight(policy, request)
        case RequestKind.NORMAL:
            response = await evaluate_normal(policy, request, call_next)
    return add_vary(response)
