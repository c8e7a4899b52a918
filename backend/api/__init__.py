"""
PivotDesk API package.

Provides the FastAPI application for the subscription-gated pivot calculator.
"""

from .app import app, create_app

__all__ = ["app", "create_app"]
