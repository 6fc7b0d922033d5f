"""Rebuild vote counters from the ledger and recompute every user's karma."""
from __future__ import annotations

import argparse
import logging
import sys
from dataclasses import dataclass

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from threadline.core.errors import KarmaRecalculationFailure
from threadline.core.settings import settings
from threadline.db.session import build_engine
from threadline.models import TargetKind, User
from threadline.repositories.target_repo import TargetRepository
from threadline.services.karma import KarmaRecalculator
from threadline.services.vote_ledger import VoteLedger

logger = logging.getLogger(__name__)


@dataclass
class CounterDrift:
    """A target whose stored counters disagreed with the ledger."""

    kind: TargetKind
    target_id: int
    stored: tuple[int, int]
    tallied: tuple[int, int]


@dataclass
class RecountReport:
    counter_drift: list[CounterDrift]
    karma_changes: dict[int, tuple[int, int]]


def recount(session: Session, *, dry_run: bool = False) -> RecountReport:
    """Reset counters to the ledger tally and refresh karma in one transaction.

    With `dry_run` the transaction is rolled back after the report is built.

    Raises:
        KarmaRecalculationFailure: If any karma recompute fails; nothing is kept.
    """
    repo = TargetRepository(session)
    ledger = VoteLedger(session)
    report = RecountReport(counter_drift=[], karma_changes={})

    for kind in TargetKind:
        for target in repo.list_targets(kind):
            stored = (target.upvotes, target.downvotes)
            tallied = ledger.tally(kind, target.id)
            if stored != tallied:
                report.counter_drift.append(CounterDrift(kind, target.id, stored, tallied))
                repo.set_counters(kind, target.id, *tallied)

    recalculator = KarmaRecalculator(session)
    stored_karma = dict(session.query(User.id, User.karma).all())
    for user_id in repo.user_ids():
        karma = recalculator.recalculate(user_id, commit=False)
        if karma != stored_karma.get(user_id):
            report.karma_changes[user_id] = (stored_karma.get(user_id, 0), karma)

    if dry_run:
        session.rollback()
    else:
        session.commit()
    return report


def main() -> None:
    parser = argparse.ArgumentParser(
        description="Recount vote counters from the ledger and recompute karma",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Report drift without writing any changes.",
    )
    parser.add_argument(
        "--url",
        default=None,
        help="Override database URL (defaults to effective settings URL)",
    )
    args = parser.parse_args()
    logging.basicConfig(level=settings.log_level.upper())

    engine = build_engine(args.url or settings.database_url_sync)
    session = sessionmaker(bind=engine, autoflush=False)()
    try:
        report = recount(session, dry_run=args.dry_run)
    except (KarmaRecalculationFailure, SQLAlchemyError) as exc:
        print(f"[recount] ERROR: {exc}", file=sys.stderr)
        sys.exit(1)
    finally:
        session.close()
        engine.dispose()

    prefix = "[recount] (dry run)" if args.dry_run else "[recount]"
    for drift in report.counter_drift:
        print(
            f"{prefix} {drift.kind.value} {drift.target_id}: "
            f"stored={drift.stored} ledger={drift.tallied}"
        )
    for user_id, (before, after) in sorted(report.karma_changes.items()):
        print(f"{prefix} user {user_id}: karma {before} -> {after}")
    print(
        f"{prefix} {len(report.counter_drift)} targets drifted, "
        f"{len(report.karma_changes)} karma values changed"
    )


if __name__ == "__main__":
    main()
