# tests/test_target_repo.py
"""Tests for target data access against objects already held by the session."""

from sqlalchemy import text

from threadline.models import TargetKind
from threadline.repositories.target_repo import TargetRepository


def test_counter_delta_visible_on_loaded_target(db_session, test_post) -> None:
    repo = TargetRepository(db_session)

    repo.apply_counter_delta(TargetKind.POST, test_post.id, 2, 1)

    assert (test_post.upvotes, test_post.downvotes) == (2, 1)
    target = repo.get(TargetKind.POST, test_post.id)
    assert target is test_post
    assert (target.upvotes, target.downvotes) == (2, 1)


def test_counter_floor_applies_to_loaded_target(db_session, test_post) -> None:
    repo = TargetRepository(db_session)

    repo.apply_counter_delta(TargetKind.POST, test_post.id, -3, 0)

    assert repo.get(TargetKind.POST, test_post.id).upvotes == 0


def test_reads_reflect_rows_changed_outside_the_orm(db_session, test_post, test_comment) -> None:
    db_session.execute(text("UPDATE post SET upvotes = 7"))
    db_session.execute(text("UPDATE comment SET downvotes = 3"))
    repo = TargetRepository(db_session)

    assert repo.get(TargetKind.POST, test_post.id).upvotes == 7
    assert [c.downvotes for c in repo.list_targets(TargetKind.COMMENT)] == [3]


def test_set_karma_updates_loaded_user(db_session, author) -> None:
    assert TargetRepository(db_session).set_karma(author.id, 12) is True

    assert author.karma == 12


def test_set_karma_missing_user(db_session) -> None:
    assert TargetRepository(db_session).set_karma(424242, 1) is False


def test_deleted_targets_are_hidden(db_session, test_post) -> None:
    test_post.deleted = True
    db_session.commit()

    assert TargetRepository(db_session).get(TargetKind.POST, test_post.id) is None


def test_lock_user(db_session, author) -> None:
    repo = TargetRepository(db_session)

    assert repo.lock_user(author.id) is True
    assert repo.lock_user(424242) is False
