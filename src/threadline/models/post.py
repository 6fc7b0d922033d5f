"""SQLAlchemy models for posts and comments, the votable targets."""

from datetime import datetime

from sqlalchemy import CheckConstraint, DateTime, ForeignKey, Index, Integer, Text, func
from sqlalchemy.orm import Mapped, mapped_column

from threadline.db.session import Base


class Post(Base):
    """Top-level content submitted to a community."""

    __tablename__ = "post"
    __table_args__ = (
        CheckConstraint("upvotes >= 0", name="ck_post_upvotes_nonnegative"),
        CheckConstraint("downvotes >= 0", name="ck_post_downvotes_nonnegative"),
        Index("ix_post_author_user_id", "author_user_id"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    author_user_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("user_account.id"),
        nullable=False,
    )
    community_id: Mapped[int | None] = mapped_column(
        Integer,
        ForeignKey("community.id"),
        nullable=True,
    )
    title: Mapped[str] = mapped_column(Text, nullable=False)
    body_md: Mapped[str] = mapped_column(Text, nullable=False, default="")
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=func.now()
    )

    # Denormalized vote counters; written only by the vote reconciler.
    upvotes: Mapped[int] = mapped_column(default=0, nullable=False)
    downvotes: Mapped[int] = mapped_column(default=0, nullable=False)

    deleted: Mapped[bool] = mapped_column(default=False, nullable=False)


class Comment(Base):
    """Threaded reply to a post or to another comment."""

    __tablename__ = "comment"
    __table_args__ = (
        CheckConstraint("upvotes >= 0", name="ck_comment_upvotes_nonnegative"),
        CheckConstraint("downvotes >= 0", name="ck_comment_downvotes_nonnegative"),
        Index("ix_comment_author_user_id", "author_user_id"),
        Index("ix_comment_post_id", "post_id"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    post_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("post.id", ondelete="CASCADE"),
        nullable=False,
    )
    author_user_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("user_account.id"),
        nullable=False,
    )
    # Top-level comments have parent_comment_id = NULL.
    parent_comment_id: Mapped[int | None] = mapped_column(
        Integer,
        ForeignKey("comment.id"),
        nullable=True,
    )
    body_md: Mapped[str] = mapped_column(Text, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=func.now()
    )

    upvotes: Mapped[int] = mapped_column(default=0, nullable=False)
    downvotes: Mapped[int] = mapped_column(default=0, nullable=False)

    deleted: Mapped[bool] = mapped_column(default=False, nullable=False)
