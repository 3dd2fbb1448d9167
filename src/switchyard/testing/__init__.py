"""Test utilities for switchyard applications.

Provides an in-process async client that drives an App through ASGI::

    from switchyard.testing import TestClient
"""

from switchyard.testing.client import TestClient

__all__ = ["TestClient"]
