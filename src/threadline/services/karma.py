"""Karma recalculation for content authors."""
from __future__ import annotations

import logging
from threading import Lock

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from threadline.core.errors import KarmaRecalculationFailure
from threadline.repositories.target_repo import TargetRepository

# Configure logger for this module
logger = logging.getLogger(__name__)

# Users whose last recompute failed; retried on the next vote event.
_PENDING: set[int] = set()
_PENDING_LOCK = Lock()


def pending_user_ids() -> set[int]:
    """Return a snapshot of users whose karma may be stale."""
    with _PENDING_LOCK:
        return set(_PENDING)


def _mark_pending(user_id: int) -> None:
    with _PENDING_LOCK:
        _PENDING.add(user_id)


def _clear_pending(user_id: int) -> None:
    with _PENDING_LOCK:
        _PENDING.discard(user_id)


def reset_pending() -> None:
    """Forget all pending recomputes."""
    with _PENDING_LOCK:
        _PENDING.clear()


class KarmaRecalculator:
    """Recompute ``User.karma`` by full aggregation over authored content.

    Each run overwrites the stored value, including drift left by an earlier
    failure.
    """

    def __init__(self, session: Session) -> None:
        self.session = session
        self.repo = TargetRepository(session)

    def recalculate(self, user_id: int, *, commit: bool = True) -> int:
        """Recompute, store and return the user's karma.

        Raises:
            KarmaRecalculationFailure: If the aggregate query or the write fails.
        """
        try:
            # Serialize concurrent recomputes for the same author.
            self.repo.lock_user(user_id)
            karma = self.repo.karma_total(user_id)
            self.repo.set_karma(user_id, karma)
            if commit:
                self.session.commit()
        except SQLAlchemyError as exc:
            self.session.rollback()
            _mark_pending(user_id)
            raise KarmaRecalculationFailure(user_id, exc) from exc

        _clear_pending(user_id)
        logger.debug("Recalculated karma for user %s: %d", user_id, karma)
        return karma

    def recalculate_for_author(self, user_id: int) -> int | None:
        """Refresh an author's karma after a vote; never raises.

        Users left pending by earlier failures are retried first. Returns the
        author's new karma, or None when the recompute failed and the stored
        value is stale.
        """
        for pending_id in sorted(pending_user_ids() - {user_id}):
            try:
                self.recalculate(pending_id)
            except KarmaRecalculationFailure as exc:
                logger.warning("Pending karma recompute still failing for user %s: %s", pending_id, exc.cause)

        try:
            return self.recalculate(user_id)
        except KarmaRecalculationFailure as exc:
            logger.error(
                "Karma recalculation failed for user %s; vote kept, karma is stale",
                user_id,
                exc_info=exc.cause,
            )
            return None
