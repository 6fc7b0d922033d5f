"""Data access helpers for votable targets and derived karma."""
from __future__ import annotations

from sqlalchemy import ColumnElement, case, func, select, update
from sqlalchemy.orm import Session

from threadline.models import Comment, Post, TargetKind, User

__all__ = ["TargetRepository", "VotableTarget", "model_for"]

VotableTarget = Post | Comment

_MODELS: dict[TargetKind, type[Post] | type[Comment]] = {
    TargetKind.POST: Post,
    TargetKind.COMMENT: Comment,
}


def model_for(kind: TargetKind | str) -> type[Post] | type[Comment]:
    """Return the ORM class backing a target kind."""
    return _MODELS[TargetKind(kind)]


def _floored(column: ColumnElement[int], delta: int) -> ColumnElement[int]:
    # Clamp at zero inside the UPDATE so concurrent writers never read-modify-write.
    return case((column + delta < 0, 0), else_=column + delta)


class TargetRepository:
    """Thin wrapper around database access for posts, comments and karma."""

    def __init__(self, session: Session) -> None:
        """Initialize the repository with a SQLAlchemy session."""
        self.session = session

    def get(
        self,
        kind: TargetKind | str,
        target_id: int,
    ) -> VotableTarget | None:
        """Return a live target by kind and identifier, reloaded from the database."""
        model = model_for(kind)
        stmt = (
            select(model)
            .where(model.id == target_id, model.deleted.is_(False))
            .execution_options(populate_existing=True)
        )
        return self.session.execute(stmt).scalars().first()

    def apply_counter_delta(
        self,
        kind: TargetKind | str,
        target_id: int,
        upvotes_delta: int,
        downvotes_delta: int,
    ) -> None:
        """Shift a target's counters by the given deltas, flooring each at zero."""
        if not upvotes_delta and not downvotes_delta:
            return
        model = model_for(kind)
        self.session.execute(
            update(model)
            .where(model.id == target_id)
            .values(
                upvotes=_floored(model.upvotes, upvotes_delta),
                downvotes=_floored(model.downvotes, downvotes_delta),
            )
            .execution_options(synchronize_session="fetch")
        )

    def set_counters(
        self,
        kind: TargetKind | str,
        target_id: int,
        upvotes: int,
        downvotes: int,
    ) -> None:
        """Overwrite a target's counters; used only by maintenance recounts."""
        model = model_for(kind)
        self.session.execute(
            update(model)
            .where(model.id == target_id)
            .values(upvotes=max(0, upvotes), downvotes=max(0, downvotes))
            .execution_options(synchronize_session="fetch")
        )

    def list_targets(self, kind: TargetKind | str) -> list[VotableTarget]:
        """Return every non-deleted target of one kind in id order."""
        model = model_for(kind)
        stmt = (
            select(model)
            .where(model.deleted.is_(False))
            .order_by(model.id)
            .execution_options(populate_existing=True)
        )
        return list(self.session.execute(stmt).scalars())

    def comments_for_post(self, post_id: int) -> list[Comment]:
        """Return the live comments attached to a post."""
        stmt = select(Comment).where(Comment.post_id == post_id, Comment.deleted.is_(False))
        return list(self.session.execute(stmt.order_by(Comment.id)).scalars())

    def soft_delete(self, target: VotableTarget) -> None:
        """Hide a target from reads and zero its counters."""
        target.deleted = True
        target.upvotes = 0
        target.downvotes = 0
        self.session.flush()

    def lock_user(self, user_id: int) -> bool:
        """Take a row lock on the user for the rest of the transaction.

        Returns False if the user does not exist.
        """
        stmt = select(User.id).where(User.id == user_id).with_for_update()
        return self.session.execute(stmt).scalar_one_or_none() is not None

    def karma_total(self, user_id: int) -> int:
        """Return Σ(upvotes - downvotes) over the user's live posts and comments."""
        total = 0
        for model in _MODELS.values():
            subtotal = self.session.execute(
                select(func.coalesce(func.sum(model.upvotes - model.downvotes), 0)).where(
                    model.author_user_id == user_id,
                    model.deleted.is_(False),
                )
            ).scalar_one()
            total += int(subtotal)
        return total

    def set_karma(self, user_id: int, karma: int) -> bool:
        """Store a recomputed karma value; return False if the user is missing."""
        result = self.session.execute(
            update(User)
            .where(User.id == user_id)
            .values(karma=karma)
            .execution_options(synchronize_session="fetch")
        )
        return bool(result.rowcount)

    def user_ids(self) -> list[int]:
        """Return every user identifier in id order."""
        return list(self.session.execute(select(User.id).order_by(User.id)).scalars())
