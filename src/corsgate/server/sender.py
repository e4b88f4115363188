"""ASGI response sending — translates a corsgate Response to ASGI messages."""

from corsgate._internal.asgi import Send
from corsgate.http.response import Response


def _body_allowed(status: int) -> bool:
    """Whether an HTTP status code permits a response body."""
    # RFC 9110: 1xx, 204, and 304 responses do not include a message body.
    return not (100 <= status < 200 or status in {204, 304})


def encode_headers(headers: tuple[tuple[str, str], ...]) -> list[tuple[bytes, bytes]]:
    """Lowercase names and encode pairs the way ASGI expects them."""
    return [(name.lower().encode("latin-1"), value.encode("latin-1")) for name, value in headers]


async def send_response(response: Response, send: Send) -> None:
    """Translate a Response into ASGI send() calls."""
    has_body = _body_allowed(response.status)
    body = response.body_bytes if has_body else b""

    raw_headers: list[tuple[bytes, bytes]] = []
    if has_body:
        raw_headers.append((b"content-type", response.content_type.encode("latin-1")))
    raw_headers.extend(encode_headers(response.headers))
    raw_headers.append((b"content-length", str(len(body)).encode("latin-1")))

    await send(
        {
            "type": "http.response.start",
            "status": response.status,
            "headers": raw_headers,
        }
    )
    await send(
        {
            "type": "http.response.body",
            "body": body,
        }
    )
