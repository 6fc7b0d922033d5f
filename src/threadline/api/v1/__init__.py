# src/threadline/api/v1/__init__.py
"""Version 1 API endpoints."""

from .endpoints import users_router, votes_router

__all__ = ["users_router", "votes_router"]
