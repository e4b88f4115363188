"""ASGI hosting for the CORS engine.

    ASGIHandler -- serve an inner handler behind corsgate middleware
    CORSASGIMiddleware -- enforce a policy in front of any ASGI app
"""

from corsgate.server.asgi import CORSASGIMiddleware
from corsgate.server.handler import ASGIHandler

__all__ = ["ASGIHandler", "CORSASGIMiddleware"]
