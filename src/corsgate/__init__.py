"""corsgate — Cross-Origin Resource Sharing policy evaluation.

Classifies each request as a preflight or a normal request, checks it
against a ``CORSPolicy``, and answers with the right CORS headers or a
400 rejection.

Basic usage::

    from corsgate import ASGIHandler, CORSMiddleware, CORSPolicy, Response, SpecificOrigins

    policy = CORSPolicy(
        allowed_origins=SpecificOrigins.of("https://app.example.com"),
        allow_credentials=True,
    )

    async def handler(request):
        return Response("hello")

    app = ASGIHandler(handler, middleware=[CORSMiddleware(policy)])

Wrapping an existing ASGI application::

    from corsgate import CORSASGIMiddleware, policy_from_env

    app = CORSASGIMiddleware(other_app, policy_from_env())
"""

__version__ = "0.1.0"
__all__ = [
    "NULL_ORIGIN",
    "ASGIHandler",
    "AnyOrigin",
    "CORSASGIMiddleware",
    "CORSMiddleware",
    "CORSPolicy",
    "CORSRejection",
    "ConfigurationError",
    "CorsgateError",
    "Headers",
    "Middleware",
    "Next",
    "NullOrigin",
    "OriginError",
    "Request",
    "RequestKind",
    "Response",
    "SpecificOrigins",
    "TupleOrigin",
    "evaluate",
    "parse_origin",
    "parse_origin_allow_null",
    "policy_from_env",
    "policy_from_mapping",
]

# name -> module that defines it
_LAZY_IMPORTS: dict[str, str] = {
    "NULL_ORIGIN": "corsgate.origin",
    "NullOrigin": "corsgate.origin",
    "TupleOrigin": "corsgate.origin",
    "parse_origin": "corsgate.origin",
    "parse_origin_allow_null": "corsgate.origin",
    "AnyOrigin": "corsgate.policy",
    "CORSPolicy": "corsgate.policy",
    "SpecificOrigins": "corsgate.policy",
    "RequestKind": "corsgate.classify",
    "evaluate": "corsgate.engine",
    "CORSMiddleware": "corsgate.middleware.cors",
    "Middleware": "corsgate.middleware.protocol",
    "Next": "corsgate.middleware.protocol",
    "ASGIHandler": "corsgate.server.handler",
    "CORSASGIMiddleware": "corsgate.server.asgi",
    "Headers": "corsgate.http.headers",
    "Request": "corsgate.http.request",
    "Response": "corsgate.http.response",
    "CORSRejection": "corsgate.errors",
    "ConfigurationError": "corsgate.errors",
    "CorsgateError": "corsgate.errors",
    "OriginError": "corsgate.errors",
    "policy_from_env": "corsgate.config",
    "policy_from_mapping": "corsgate.config",
}


def __getattr__(name: str) -> object:
    """Lazy imports for public API.

    Keeps ``import corsgate`` fast while providing a clean top-level API.
    """
    module_name = _LAZY_IMPORTS.get(name)
    if module_name is None:
        msg = f"module {__name__!r} has no attribute {name!r}"
        raise AttributeError(msg)

    import importlib

    return getattr(importlib.import_module(module_name), name)
