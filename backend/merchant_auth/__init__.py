"""Expose the application factory at package level.

``from merchant_auth import create_app`` is the supported entry point for
gunicorn, the Flask CLI and the test-suite.
"""

from __future__ import annotations

from .factory import create_app

__all__ = ["create_app"]
