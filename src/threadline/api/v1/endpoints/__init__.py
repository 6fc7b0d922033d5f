# src/threadline/api/v1/endpoints/__init__.py
"""API endpoint modules for version 1."""

from .users import router as users_router
from .votes import router as votes_router

__all__ = ["users_router", "votes_router"]
