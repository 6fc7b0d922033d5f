# src/threadline/models/vote.py
"""Models capturing voting interactions on posts and comments."""

from __future__ import annotations

from datetime import datetime
from enum import IntEnum, StrEnum

from sqlalchemy import (
    CheckConstraint,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    SmallInteger,
    String,
    func,
)
from sqlalchemy.orm import Mapped, mapped_column

from threadline.db.session import Base


class TargetKind(StrEnum):
    """Kinds of content that can receive votes."""

    POST = "post"
    COMMENT = "comment"


class VoteState(IntEnum):
    """A voter's standing on one target.

    NO_VOTE is the absence of a ledger row; it is never persisted.
    """

    DOWNVOTED = -1
    NO_VOTE = 0
    UPVOTED = 1

    @classmethod
    def from_value(cls, value: object) -> VoteState:
        """Map a raw request value onto a state.

        Raises:
            ValueError: If `value` is not exactly -1, 0 or 1.
        """
        # bool is an int subclass; True must not count as an upvote.
        if isinstance(value, bool) or not isinstance(value, int):
            raise ValueError(f"Unsupported vote value: {value!r}")
        return cls(value)


class VoteRecord(Base):
    """Per-user vote on a single post or comment.

    The composite primary key makes one live record per
    (voter, target kind, target) a storage-level guarantee.
    """

    __tablename__ = "vote_record"
    __table_args__ = (
        CheckConstraint("value IN (1, -1)", name="ck_vote_record_value"),
        CheckConstraint("target_kind IN ('post', 'comment')", name="ck_vote_record_kind"),
        Index("ix_vote_record_target", "target_kind", "target_id"),
    )

    voter_user_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("user_account.id", ondelete="CASCADE"),
        primary_key=True,
    )
    target_kind: Mapped[str] = mapped_column(String(16), primary_key=True)
    target_id: Mapped[int] = mapped_column(Integer, primary_key=True)

    # 1 = upvote, -1 = downvote.
    value: Mapped[int] = mapped_column(SmallInteger, nullable=False)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=func.now()
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        onupdate=func.now(),
    )

    @property
    def state(self) -> VoteState:
        """Return the stored value as a VoteState."""
        return VoteState(self.value)
