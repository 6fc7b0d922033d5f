"""SQLAlchemy models for user accounts."""

from __future__ import annotations

from sqlalchemy import Integer, Text
from sqlalchemy.orm import Mapped, mapped_column

from threadline.db.session import Base


class User(Base):
    """Registered account that authors content and casts votes.

    ``karma`` is derived state: the sum of (upvotes - downvotes) over every
    post and comment the user authored. Only the karma recalculator writes it.
    """

    __tablename__ = "user_account"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    username: Mapped[str] = mapped_column(Text, unique=True, nullable=False)
    display_name: Mapped[str | None] = mapped_column(Text, nullable=True)
    karma: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
