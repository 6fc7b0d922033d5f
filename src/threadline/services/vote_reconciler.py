"""Vote reconciliation: keep the ledger and target counters in lockstep."""
from __future__ import annotations

import logging
import random
import time
from collections.abc import Callable
from dataclasses import dataclass
from enum import StrEnum

from sqlalchemy.exc import IntegrityError, OperationalError, SQLAlchemyError
from sqlalchemy.orm import Session

from threadline.core.errors import (
    ConcurrencyConflict,
    InvalidVoteValue,
    NotTargetAuthor,
    TargetNotFound,
)
from threadline.core.settings import settings
from threadline.models import Post, TargetKind, VoteState
from threadline.repositories.target_repo import TargetRepository, VotableTarget
from threadline.services.karma import KarmaRecalculator
from threadline.services.vote_ledger import VoteLedger

# Configure logger for this module
logger = logging.getLogger(__name__)

# Write conflicts worth a fresh read-compute-write attempt: duplicate first
# votes hit the primary key, lock waits and serialization failures surface as
# OperationalError.
_RETRYABLE_ERRORS: tuple[type[Exception], ...] = (IntegrityError, OperationalError)


class LedgerAction(StrEnum):
    """What a transition does to the voter's ledger record."""

    NONE = "none"
    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"


@dataclass(frozen=True, slots=True)
class VoteTransition:
    """One row of the transition table."""

    previous: VoteState
    requested: VoteState
    ledger_action: LedgerAction
    upvotes_delta: int
    downvotes_delta: int

    @property
    def is_noop(self) -> bool:
        return self.ledger_action is LedgerAction.NONE


def plan_transition(previous: VoteState, requested: VoteState) -> VoteTransition:
    """Compute the ledger action and counter deltas for a vote change."""
    if previous is requested:
        return VoteTransition(previous, requested, LedgerAction.NONE, 0, 0)

    if previous is VoteState.NO_VOTE:
        action = LedgerAction.CREATE
    elif requested is VoteState.NO_VOTE:
        action = LedgerAction.DELETE
    else:
        action = LedgerAction.UPDATE

    upvotes_delta = int(requested is VoteState.UPVOTED) - int(previous is VoteState.UPVOTED)
    downvotes_delta = int(requested is VoteState.DOWNVOTED) - int(previous is VoteState.DOWNVOTED)
    return VoteTransition(previous, requested, action, upvotes_delta, downvotes_delta)


@dataclass(frozen=True, slots=True)
class VoteOutcome:
    """Committed result of a vote request."""

    kind: TargetKind
    target_id: int
    author_user_id: int
    previous: VoteState
    current: VoteState
    upvotes: int
    downvotes: int
    author_karma: int | None
    attempts: int = 1

    @property
    def score(self) -> int:
        return self.upvotes - self.downvotes

    @property
    def karma_stale(self) -> bool:
        """True when the post-commit karma recompute failed."""
        return self.author_karma is None


def _coerce_kind(kind: TargetKind | str) -> TargetKind:
    try:
        return TargetKind(kind)
    except ValueError as err:
        raise ValueError(f"Unknown target kind: {kind!r}") from err


class VoteReconciler:
    """Apply vote requests as atomic ledger + counter updates.

    Each attempt reads the voter's current record inside the transaction that
    writes it, applies one row of the transition table, and commits. Write
    conflicts roll the attempt back and retry from the read with jittered
    exponential backoff, up to ``max_retries`` attempts.
    """

    def __init__(
        self,
        session: Session,
        *,
        max_retries: int | None = None,
        base_delay: float | None = None,
        max_delay: float | None = None,
        karma: KarmaRecalculator | None = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.session = session
        self.ledger = VoteLedger(session)
        self.targets = TargetRepository(session)
        self.karma = karma or KarmaRecalculator(session)
        self.max_retries = max_retries if max_retries is not None else settings.vote_max_retries
        self.base_delay = base_delay if base_delay is not None else settings.vote_retry_base_delay
        self.max_delay = max_delay if max_delay is not None else settings.vote_retry_max_delay
        self._sleep = sleep

    def _backoff(self, attempt: int) -> float:
        delay = min(self.base_delay * (2 ** (attempt - 1)), self.max_delay)
        return delay * random.uniform(0.5, 1.5)

    def _require_target(self, kind: TargetKind, target_id: int) -> VotableTarget:
        target = self.targets.get(kind, target_id)
        if target is None:
            raise TargetNotFound(kind.value, target_id)
        return target

    def _apply_once(
        self,
        voter_id: int,
        kind: TargetKind,
        target_id: int,
        requested: VoteState,
    ) -> tuple[VotableTarget, VoteTransition, tuple[int, int]]:
        target = self._require_target(kind, target_id)
        previous = self.ledger.get_vote(voter_id, kind, target_id, for_update=True)
        transition = plan_transition(previous, requested)
        expected = (
            max(0, target.upvotes + transition.upvotes_delta),
            max(0, target.downvotes + transition.downvotes_delta),
        )
        if transition.is_noop:
            return target, transition, expected

        if transition.ledger_action is LedgerAction.DELETE:
            self.ledger.delete_vote(voter_id, kind, target_id)
        else:
            self.ledger.upsert_vote(voter_id, kind, target_id, requested)
        self.targets.apply_counter_delta(
            kind,
            target_id,
            transition.upvotes_delta,
            transition.downvotes_delta,
        )
        return target, transition, expected

    def cast_vote(
        self,
        voter_id: int,
        kind: TargetKind | str,
        target_id: int,
        requested: object,
    ) -> VoteOutcome:
        """Record `voter_id`'s vote of `requested` (-1, 0 or 1) on a target.

        Raises:
            InvalidVoteValue: If `requested` is not -1, 0 or 1. Nothing is read or written.
            TargetNotFound: If the target does not exist. Nothing is written.
            ConcurrencyConflict: If every attempt hit a write conflict.
        """
        try:
            requested_state = VoteState.from_value(requested)
        except ValueError:
            raise InvalidVoteValue(requested) from None
        target_kind = _coerce_kind(kind)

        attempt = 0
        while True:
            attempt += 1
            try:
                target, transition, expected = self._apply_once(
                    voter_id, target_kind, target_id, requested_state
                )
                author_id = target.author_user_id
                self.session.commit()
                break
            except _RETRYABLE_ERRORS as exc:
                self.session.rollback()
                if attempt >= self.max_retries:
                    logger.error(
                        "Vote by user %s on %s %s failed after %d attempts: %s",
                        voter_id, target_kind.value, target_id, attempt, exc,
                    )
                    raise ConcurrencyConflict(attempt, exc) from exc
                delay = self._backoff(attempt)
                logger.warning(
                    "Write conflict on vote by user %s on %s %s (attempt %d/%d), retrying in %.3fs",
                    voter_id, target_kind.value, target_id, attempt, self.max_retries, delay,
                )
                self._sleep(delay)
            except Exception:
                self.session.rollback()
                raise

        try:
            self.session.refresh(target)
            upvotes, downvotes = target.upvotes, target.downvotes
        except SQLAlchemyError as exc:
            self.session.rollback()
            upvotes, downvotes = expected
            logger.warning(
                "Could not reload %s %s after vote by user %s, reporting computed counters: %s",
                target_kind.value, target_id, voter_id, exc,
            )
        logger.debug(
            "User %s moved %s %s from %s to %s",
            voter_id, target_kind.value, target_id,
            transition.previous.name, transition.requested.name,
        )

        author_karma = self.karma.recalculate_for_author(author_id)
        return VoteOutcome(
            kind=target_kind,
            target_id=target_id,
            author_user_id=author_id,
            previous=transition.previous,
            current=transition.requested,
            upvotes=upvotes,
            downvotes=downvotes,
            author_karma=author_karma,
            attempts=attempt,
        )

    def remove_target(self, actor_id: int, kind: TargetKind | str, target_id: int) -> int:
        """Delete a target on its author's behalf along with every vote on it.

        Removing a post also removes its comments. Counters of removed targets
        are zeroed and the affected authors' karma is recomputed after commit.
        Returns the number of ledger records purged.

        Raises:
            TargetNotFound: If the target does not exist.
            NotTargetAuthor: If `actor_id` did not author the target.
        """
        target_kind = _coerce_kind(kind)
        try:
            target = self._require_target(target_kind, target_id)
            if target.author_user_id != actor_id:
                raise NotTargetAuthor(target_kind.value, target_id)

            removed: list[tuple[TargetKind, VotableTarget]] = [(target_kind, target)]
            if isinstance(target, Post):
                removed.extend(
                    (TargetKind.COMMENT, comment)
                    for comment in self.targets.comments_for_post(target.id)
                )

            purged = 0
            authors: set[int] = set()
            for removed_kind, removed_target in removed:
                purged += self.ledger.purge_target(removed_kind, removed_target.id)
                self.targets.soft_delete(removed_target)
                authors.add(removed_target.author_user_id)
            self.session.commit()
        except Exception:
            self.session.rollback()
            raise

        logger.info(
            "User %s removed %s %s (%d votes purged)",
            actor_id, target_kind.value, target_id, purged,
        )
        for author_id in sorted(authors):
            self.karma.recalculate_for_author(author_id)
        return purged
