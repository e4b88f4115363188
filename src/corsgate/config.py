"""Load a ``CORSPolicy`` from plain configuration data.

The policy itself is a frozen dataclass; this module turns the loosely
typed values a settings file or the environment provides into one, and
fails at startup with ``ConfigurationError`` rather than at request time.

Recognized keys (all optional)::

    allow_origins      "*" or a list of origins ("null" allowed); default "*"
    allow_null         admit Origin: null                      default false
    allow_methods      list of methods                          default all standard
    allow_headers      list of request header names             default common set
    expose_headers     list of response header names            default none
    allow_credentials  send Access-Control-Allow-Credentials    default false
    max_age            preflight cache lifetime in seconds      default 3600
    prefer_wildcard    answer "*" instead of echoing the origin default false

Lists may be given as sequences or comma-separated strings.
"""

import os
from collections.abc import Mapping
from typing import Any

from corsgate.errors import ConfigurationError
from corsgate.origin import NULL_ORIGIN
from corsgate.policy import AnyOrigin, CORSPolicy, SpecificOrigins

KEYS: frozenset[str] = frozenset(
    {
        "allow_origins",
        "allow_null",
        "allow_methods",
        "allow_headers",
        "expose_headers",
        "allow_credentials",
        "max_age",
        "prefer_wildcard",
    }
)

_TRUE = frozenset({"1", "true", "yes", "on"})
_FALSE = frozenset({"0", "false", "no", "off", ""})


def _as_list(value: Any, key: str) -> tuple[str, ...]:
    if isinstance(value, str):
        return tuple(item.strip() for item in value.split(",") if item.strip())
    if isinstance(value, (list, tuple)) and all(isinstance(item, str) for item in value):
        return tuple(value)
    msg = f"{key} must be a list of strings or a comma-separated string, got {value!r}"
    raise ConfigurationError(msg)


def _as_bool(value: Any, key: str) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in _TRUE:
            return True
        if lowered in _FALSE:
            return False
    msg = f"{key} must be a boolean, got {value!r}"
    raise ConfigurationError(msg)


def _as_int(value: Any, key: str) -> int:
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    if isinstance(value, str) and value.strip().isdigit():
        return int(value.strip())
    msg = f"{key} must be a non-negative integer, got {value!r}"
    raise ConfigurationError(msg)


def policy_from_mapping(data: Mapping[str, Any]) -> CORSPolicy:
    """Build a ``CORSPolicy`` from a mapping of the keys listed above.

    Raises ``ConfigurationError`` on unknown keys or malformed values.
    """
    unknown = sorted(set(data) - KEYS)
    if unknown:
        msg = f"Unknown CORS configuration key(s): {', '.join(unknown)}"
        raise ConfigurationError(msg)

    allow_null = _as_bool(data.get("allow_null", False), "allow_null")
    origins = _as_list(data.get("allow_origins", "*"), "allow_origins")
    if origins == ("*",):
        allowed_origins: AnyOrigin | SpecificOrigins = AnyOrigin(allow_null=allow_null)
    elif "*" in origins:
        msg = f"allow_origins cannot mix '*' with specific origins: {origins!r}"
        raise ConfigurationError(msg)
    else:
        allowed_origins = SpecificOrigins.of(*origins)
        if allow_null:
            allowed_origins = SpecificOrigins(allowed_origins.origins | {NULL_ORIGIN})

    kwargs: dict[str, Any] = {"allowed_origins": allowed_origins}
    if "allow_methods" in data:
        kwargs["allowed_methods"] = _as_list(data["allow_methods"], "allow_methods")
    if "allow_headers" in data:
        kwargs["allowed_headers"] = _as_list(data["allow_headers"], "allow_headers")
    if "expose_headers" in data:
        kwargs["exposed_headers"] = _as_list(data["expose_headers"], "expose_headers")
    if "allow_credentials" in data:
        kwargs["allow_credentials"] = _as_bool(data["allow_credentials"], "allow_credentials")
    if "max_age" in data:
        kwargs["max_age"] = _as_int(data["max_age"], "max_age")
    if "prefer_wildcard" in data:
        kwargs["prefer_wildcard"] = _as_bool(data["prefer_wildcard"], "prefer_wildcard")
    return CORSPolicy(**kwargs)


def policy_from_env(environ: Mapping[str, str] | None = None, prefix: str = "CORS_") -> CORSPolicy:
    """Build a ``CORSPolicy`` from ``<PREFIX><KEY>`` environment variables.

    ``CORS_ALLOW_ORIGINS=https://a.com,https://b.com CORS_MAX_AGE=600``
    """
    env = os.environ if environ is None else environ
    data = {key: env[prefix + key.upper()] for key in KEYS if prefix + key.upper() in env}
    return policy_from_mapping(data)
