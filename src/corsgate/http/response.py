"""HTTP response with chainable .with_*() transformation API.

Each transformation returns a new Response. The engine decorates the
inner handler's response this way, so the handler's own object is never
mutated.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, replace


@dataclass(frozen=True, slots=True)
class Response:
    """An HTTP response built through immutable transformations.

    Header names keep the casing they were added with; lookups through
    ``header()`` are case-insensitive.
    """

    body: str | bytes = ""
    status: int = 200
    content_type: str = "text/html; charset=utf-8"
    headers: tuple[tuple[str, str], ...] = ()

    # -- Chainable transformations --

    def with_status(self, status: int) -> Response:
        """Return a new Response with a different status code."""
        return replace(self, status=status)

    def with_header(self, name: str, value: str) -> Response:
        """Return a new Response with an additional header."""
        return replace(self, headers=(*self.headers, (name, value)))

    def with_headers(self, headers: Mapping[str, str]) -> Response:
        """Return a new Response with additional headers."""
        new = tuple(headers.items())
        return replace(self, headers=(*self.headers, *new))

    def with_content_type(self, content_type: str) -> Response:
        """Return a new Response with a different content type."""
        return replace(self, content_type=content_type)

    def with_replaced_header(self, name: str, value: str) -> Response:
        """Return a new Response where *name* appears exactly once, set to *value*."""
        return replace(self, headers=(*self.without_header(name).headers, (name, value)))

    def without_header(self, name: str) -> Response:
        """Return a new Response with every *name* header removed."""
        key = name.lower()
        kept = tuple((n, v) for n, v in self.headers if n.lower() != key)
        return replace(self, headers=kept)

    # -- Lookup --

    def header(self, name: str, default: str | None = None) -> str | None:
        """Return the first value of header *name* (case-insensitive)."""
        key = name.lower()
        for n, v in self.headers:
            if n.lower() == key:
                return v
        return default

    def has_header(self, name: str) -> bool:
        return self.header(name) is not None

    # -- Body helpers --

    @property
    def body_bytes(self) -> bytes:
        """Body as bytes."""
        if isinstance(self.body, str):
            return self.body.encode("utf-8")
        return self.body

    @property
    def text(self) -> str:
        """Body as string."""
        if isinstance(self.body, bytes):
            return self.body.decode("utf-8")
        return self.body
