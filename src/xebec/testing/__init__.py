"""Test utilities for xebec applications::

    from xebec.testing import TestClient
"""

from xebec.testing.client import TestClient

__all__ = ["TestClient"]
