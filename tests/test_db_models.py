"""Unit tests for the ORM models defined in threadline.models.

These tests verify basic mapping correctness: table names, the composite
primary key of the vote ledger, and the check constraints that keep stored
values inside their domain.
"""

import pytest
from sqlalchemy import insert
from sqlalchemy.exc import IntegrityError

from threadline import models


def test_table_names():
    """Model classes expose expected __tablename__ values."""
    assert getattr(models.User, "__tablename__") == "user_account"
    assert getattr(models.Post, "__tablename__") == "post"
    assert getattr(models.Comment, "__tablename__") == "comment"
    assert getattr(models.Community, "__tablename__") == "community"
    assert getattr(models.VoteRecord, "__tablename__") == "vote_record"


def test_vote_record_composite_primary_key():
    """Ledger rows are keyed by (voter, target kind, target)."""
    table = models.VoteRecord.__table__
    pk_names = {c.name for c in table.primary_key}
    assert pk_names == {"voter_user_id", "target_kind", "target_id"}


def test_vote_record_state(db_session, voter_a, test_post):
    record = models.VoteRecord(
        voter_user_id=voter_a.id,
        target_kind=models.TargetKind.POST.value,
        target_id=test_post.id,
        value=-1,
    )
    db_session.add(record)
    db_session.flush()

    assert record.state is models.VoteState.DOWNVOTED


def test_vote_value_constraint(db_session, voter_a, test_post):
    """A stored vote is either +1 or -1; NO_VOTE is never persisted."""
    with pytest.raises(IntegrityError):
        db_session.execute(
            insert(models.VoteRecord).values(
                voter_user_id=voter_a.id,
                target_kind="post",
                target_id=test_post.id,
                value=0,
            )
        )
    db_session.rollback()


def test_counter_constraint(db_session, author, community):
    with pytest.raises(IntegrityError):
        db_session.execute(
            insert(models.Post).values(
                author_user_id=author.id,
                community_id=community.id,
                title="Broken",
                body_md="",
                upvotes=-1,
            )
        )
    db_session.rollback()
