# src/threadline/models/__init__.py
"""SQLAlchemy models for the Threadline application."""

from .community import Community
from .post import Comment, Post
from .user import User
from .vote import TargetKind, VoteRecord, VoteState

__all__ = [
    "Community",
    "Comment",
    "Post",
    "TargetKind",
    "User",
    "VoteRecord",
    "VoteState",
]
