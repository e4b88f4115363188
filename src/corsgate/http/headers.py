"""Immutable, case-insensitive HTTP request headers.

Stores raw byte pairs as they arrive in an ASGI scope; decodes on access.
CORS request headers are lists (``Access-Control-Request-Headers: a, b``)
and may be repeated, so ``get_tokens`` flattens every occurrence.
"""

from collections.abc import Iterable, Iterator, Mapping


class Headers(Mapping[str, str]):
    """Immutable, case-insensitive HTTP headers.

    ``__getitem__`` returns the first matching value.
    ``get_list`` returns all values for a header.
    ``get_tokens`` splits comma-separated list headers.
    """

    __slots__ = ("_raw",)

    def __init__(self, raw: tuple[tuple[bytes, bytes], ...] = ()) -> None:
        object.__setattr__(self, "_raw", raw)

    @classmethod
    def from_pairs(cls, pairs: Iterable[tuple[str, str]] | Mapping[str, str]) -> "Headers":
        """Build from ``str`` pairs or a mapping (tests, adapters)."""
        items = pairs.items() if isinstance(pairs, Mapping) else pairs
        return cls(tuple((k.encode("latin-1"), v.encode("latin-1")) for k, v in items))

    def __getitem__(self, key: str) -> str:
        key_lower = key.lower().encode("latin-1")
        for name, value in self._raw:
            if name.lower() == key_lower:
                return value.decode("latin-1")
        raise KeyError(key)

    def __contains__(self, key: object) -> bool:
        if not isinstance(key, str):
            return False
        key_lower = key.lower().encode("latin-1")
        return any(name.lower() == key_lower for name, _ in self._raw)

    def __iter__(self) -> Iterator[str]:
        seen: set[str] = set()
        for name, _ in self._raw:
            key = name.decode("latin-1").lower()
            if key not in seen:
                seen.add(key)
                yield key

    def __len__(self) -> int:
        return len(set(self))

    def __repr__(self) -> str:
        items = ", ".join(f"{k!r}: {self[k]!r}" for k in self)
        return f"Headers({{{items}}})"

    def get(self, key: str, default: str | None = None) -> str | None:  # type: ignore[override]
        """Return the first value for *key*, or *default* if missing."""
        try:
            return self[key]
        except KeyError:
            return default

    def get_list(self, key: str) -> list[str]:
        """Return all values for *key*, in arrival order."""
        key_lower = key.lower().encode("latin-1")
        return [value.decode("latin-1") for name, value in self._raw if name.lower() == key_lower]

    def get_tokens(self, key: str) -> tuple[str, ...]:
        """Return the comma-separated items of every *key* header, stripped.

        Empty items (``a,,b`` or a blank header) are skipped.
        """
        return tuple(
            item
            for value in self.get_list(key)
            for item in (part.strip() for part in value.split(","))
            if item
        )

    @property
    def raw(self) -> tuple[tuple[bytes, bytes], ...]:
        """Access raw header byte pairs for ASGI compatibility."""
        return self._raw
