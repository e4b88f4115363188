"""Test utilities for corsgate-hosted applications::

    from corsgate.testing import TestClient
"""

from corsgate.testing.client import TestClient

__all__ = ["TestClient"]
