"""Test utilities for rtr routers.

    from rtr.testing import TestClient
"""

from rtr.testing.client import TestClient

__all__ = ["TestClient"]
