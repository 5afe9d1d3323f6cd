"""
Eventory API package.

Provides the FastAPI application for events, tasks, event teams, documents
and feature requests.
"""

from .app import app, create_app

__all__ = ["app", "create_app"]
