"""User karma endpoints."""

from __future__ import annotations

from fastapi import APIRouter, HTTPException, status
from sqlalchemy import select

from threadline.api.v1.dependencies import SessionDep
from threadline.models import User
from threadline.schemas.user import UserKarmaResponse

router = APIRouter(prefix="/users", tags=["users"])


@router.get("/{username}/karma", response_model=UserKarmaResponse)
def get_user_karma(username: str, db: SessionDep) -> User:
    """Return the stored karma of a user.

    Karma is refreshed after every vote on the user's content, so the stored
    value may briefly lag if a recompute failed.
    """
    stmt = (
        select(User)
        .where(User.username == username)
        .execution_options(populate_existing=True)
    )
    user = db.execute(stmt).scalars().first()
    if user is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
    return user
