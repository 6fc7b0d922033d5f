"""Vote ledger: the authoritative per-(voter, target) vote records."""
from __future__ import annotations

from collections.abc import Iterable

from sqlalchemy import delete, func, select
from sqlalchemy.orm import Session

from threadline.models import TargetKind, VoteRecord, VoteState

__all__ = ["VoteLedger"]


class VoteLedger:
    """Read and write VoteRecord rows keyed by (voter, target kind, target).

    The composite primary key on ``vote_record`` guarantees at most one live
    record per key. Writers that race on a first vote surface as an
    ``IntegrityError`` at flush time, which the reconciler retries.
    """

    def __init__(self, session: Session) -> None:
        self.session = session

    def _record(
        self,
        voter_id: int,
        kind: TargetKind | str,
        target_id: int,
        *,
        for_update: bool = False,
    ) -> VoteRecord | None:
        stmt = select(VoteRecord).where(
            VoteRecord.voter_user_id == voter_id,
            VoteRecord.target_kind == TargetKind(kind).value,
            VoteRecord.target_id == target_id,
        )
        if for_update:
            # No-op on SQLite, where BEGIN IMMEDIATE already serializes writers.
            stmt = stmt.with_for_update()
        return self.session.execute(stmt).scalars().first()

    def get_vote(
        self,
        voter_id: int,
        kind: TargetKind | str,
        target_id: int,
        *,
        for_update: bool = False,
    ) -> VoteState:
        """Return the voter's current state on a target (NO_VOTE when absent)."""
        record = self._record(voter_id, kind, target_id, for_update=for_update)
        return record.state if record is not None else VoteState.NO_VOTE

    def upsert_vote(
        self,
        voter_id: int,
        kind: TargetKind | str,
        target_id: int,
        state: VoteState,
    ) -> VoteRecord:
        """Create or overwrite the single record for this key.

        Raises:
            ValueError: If `state` is NO_VOTE; retractions go through delete_vote.
        """
        if state is VoteState.NO_VOTE:
            raise ValueError("NO_VOTE is represented by deleting the record")

        record = self._record(voter_id, kind, target_id)
        if record is None:
            record = VoteRecord(
                voter_user_id=voter_id,
                target_kind=TargetKind(kind).value,
                target_id=target_id,
                value=int(state),
            )
            self.session.add(record)
        else:
            record.value = int(state)
        self.session.flush()
        return record

    def delete_vote(self, voter_id: int, kind: TargetKind | str, target_id: int) -> bool:
        """Remove the record for this key. Returns False when nothing was stored."""
        record = self._record(voter_id, kind, target_id)
        if record is None:
            return False
        self.session.delete(record)
        self.session.flush()
        return True

    def get_votes_for_targets(
        self,
        voter_id: int,
        kind: TargetKind | str,
        target_ids: Iterable[int],
    ) -> dict[int, VoteState]:
        """Return the voter's state on each requested target.

        Every requested id appears in the result; targets without a record map
        to NO_VOTE.
        """
        ids = list(dict.fromkeys(target_ids))
        states = {target_id: VoteState.NO_VOTE for target_id in ids}
        if not ids:
            return states
        rows = self.session.execute(
            select(VoteRecord.target_id, VoteRecord.value).where(
                VoteRecord.voter_user_id == voter_id,
                VoteRecord.target_kind == TargetKind(kind).value,
                VoteRecord.target_id.in_(ids),
            )
        )
        for target_id, value in rows:
            states[target_id] = VoteState(value)
        return states

    def tally(self, kind: TargetKind | str, target_id: int) -> tuple[int, int]:
        """Count (upvotes, downvotes) recorded for a target."""
        rows = self.session.execute(
            select(VoteRecord.value, func.count())
            .where(
                VoteRecord.target_kind == TargetKind(kind).value,
                VoteRecord.target_id == target_id,
            )
            .group_by(VoteRecord.value)
        )
        counts = {value: int(count) for value, count in rows}
        return counts.get(VoteState.UPVOTED, 0), counts.get(VoteState.DOWNVOTED, 0)

    def purge_target(self, kind: TargetKind | str, target_id: int) -> int:
        """Delete every record referencing a target; return how many were removed."""
        result = self.session.execute(
            delete(VoteRecord)
            .where(
                VoteRecord.target_kind == TargetKind(kind).value,
                VoteRecord.target_id == target_id,
            )
            .execution_options(synchronize_session="fetch")
        )
        return int(result.rowcount or 0)
