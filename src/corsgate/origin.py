"""Web Origins (RFC 6454).

An origin is either a ``(scheme, host, port)`` tuple or the opaque
``null`` origin. Tuples compare by value after normalization, so
``http://Example.com`` and ``http://user@example.com:80/path`` are the
same origin. ``null`` never equals a tuple.

URL splitting is delegated to ``urllib.parse``; this module only applies
the origin rules on top of it::

    >>> parse_origin("hTtP://user:pw@EXAMPLE.com:80/x") == parse_origin("http://example.com")
    True
    >>> parse_origin_allow_null("null") is NULL_ORIGIN
    True
"""

from __future__ import annotations

from dataclasses import dataclass
from urllib.parse import urlsplit

import idna

from corsgate.errors import NoHost, NotAUrl, UnsupportedScheme

# Registered default ports for schemes that have one
DEFAULT_PORTS: dict[str, int] = {
    "http": 80,
    "https": 443,
    "ws": 80,
    "wss": 443,
    "ftp": 21,
    "gopher": 70,
}

# Schemes whose URLs are invalid without a host
_HOST_REQUIRED = frozenset({"http", "https", "ws", "wss", "ftp"})

_FORBIDDEN_HOST_CHARS = frozenset("\x00\t\n\r #%/:<>?@[\\]^|")


@dataclass(frozen=True, slots=True)
class TupleOrigin:
    """A ``(scheme, host, port)`` origin.

    ``scheme`` is lowercase, ``host`` is ASCII-lowercase and punycoded,
    ``port`` is always explicit (the scheme default when the URL had none).
    """

    scheme: str
    host: str
    port: int

    def __str__(self) -> str:
        host = f"[{self.host}]" if ":" in self.host else self.host
        if DEFAULT_PORTS.get(self.scheme) == self.port:
            return f"{self.scheme}://{host}"
        return f"{self.scheme}://{host}:{self.port}"


@dataclass(frozen=True, slots=True)
class NullOrigin:
    """The opaque origin sent as ``Origin: null``.

    User agents send it when the real origin cannot be determined or is
    deliberately withheld (``data:`` and ``file:`` documents, sandboxed
    frames, cross-origin redirects). It carries no scheme, host or port.
    """

    def __str__(self) -> str:
        return "null"


NULL_ORIGIN = NullOrigin()

type Origin = TupleOrigin | NullOrigin


def parse_origin(raw: str) -> TupleOrigin:
    """Parse *raw* as a URL and reduce it to its origin.

    Path, query, fragment and userinfo are dropped; scheme and host are
    lowercased; non-ASCII hosts are IDNA-encoded; a missing port becomes
    the scheme's default.

    Raises:
        NotAUrl: *raw* is not an absolute URL, or its port or host is malformed.
        NoHost: The URL has no host (``data:``, ``mailto:``, ``file:///``).
        UnsupportedScheme: No port given and the scheme has no default port.
    """
    try:
        parts = urlsplit(raw)
        explicit_port = parts.port
    except ValueError:
        raise NotAUrl(raw) from None

    scheme = parts.scheme.lower()
    if not scheme:
        raise NotAUrl(raw)

    host = parts.hostname
    if not host:
        if scheme in _HOST_REQUIRED:
            raise NotAUrl(raw)
        raise NoHost(raw)

    # Userinfo may contain brackets too; only the host part decides
    hostport = parts.netloc.rpartition("@")[2]
    host = _normalize_host(raw, host, ipv6=hostport.startswith("["))

    port = explicit_port if explicit_port is not None else DEFAULT_PORTS.get(scheme)
    if port is None:
        raise UnsupportedScheme(raw, scheme)

    return TupleOrigin(scheme=scheme, host=host, port=port)


def parse_origin_allow_null(raw: str) -> Origin:
    """Like ``parse_origin`` but maps the literal ``"null"`` to ``NULL_ORIGIN``.

    Only use this where a null origin is an acceptable answer: ``null``
    means the origin is unknown, and treating it as trusted has caused
    real data leaks.
    """
    if raw == "null":
        return NULL_ORIGIN
    return parse_origin(raw)


def _normalize_host(raw: str, host: str, *, ipv6: bool) -> str:
    """Lowercase and punycode a hostname, rejecting forbidden characters.

    Narrower than a WHATWG URL parser: percent-encoded hosts
    (``ex%41mple.com``) are rejected rather than decoded, and numeric IPv4
    spellings (``0177.0.0.1``, ``0x7f.1``) are kept verbatim rather than
    canonicalized. Both fail closed: such an origin never matches an
    allow-list entry written in canonical form.
    """
    if ipv6:
        # urlsplit has already validated the bracketed address
        return host.lower()
    if any(ch in _FORBIDDEN_HOST_CHARS for ch in host):
        raise NotAUrl(raw)
    if host.isascii():
        return host.lower()
    try:
        return idna.encode(host, uts46=True).decode("ascii")
    except (idna.IDNAError, UnicodeError):
        raise NotAUrl(raw) from None
