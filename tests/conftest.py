# tests/conftest.py
from __future__ import annotations

import os
from collections.abc import Callable, Generator, Iterator
from itertools import count

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session
from sqlalchemy.pool import StaticPool

os.environ.setdefault("SECRET_KEY", "test-secret")
os.environ.setdefault("LOG_LEVEL", "DEBUG")

from threadline.core.security import create_access_token
from threadline.db.session import Base, build_engine
from threadline.db.session import get_db as app_get_session
from threadline.main import app as fastapi_app
from threadline.models import Comment, Community, Post, User
from threadline.services.karma import reset_pending

TEST_DB_URL = "sqlite://"

_USER_COUNTER = count(1)


@pytest.fixture(scope="session")
def engine() -> Generator[Engine, None, None]:
    engine = build_engine(TEST_DB_URL, poolclass=StaticPool)
    Base.metadata.create_all(bind=engine)
    try:
        yield engine
    finally:
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture()
def db_session(engine: Engine) -> Iterator[Session]:
    """Session whose commits and rollbacks stay inside one outer transaction.

    Service code calls ``commit()``/``rollback()`` freely; with
    ``create_savepoint`` those act on savepoints and the outer transaction is
    rolled back after the test.
    """
    connection = engine.connect()
    transaction = connection.begin()
    session = Session(
        bind=connection,
        autoflush=False,
        expire_on_commit=False,
        join_transaction_mode="create_savepoint",
    )
    try:
        yield session
    finally:
        session.close()
        if transaction.is_active:
            transaction.rollback()
        connection.close()


@pytest.fixture(autouse=True)
def clear_pending_karma() -> Iterator[None]:
    reset_pending()
    yield
    reset_pending()


@pytest.fixture(scope="session")
def app() -> FastAPI:
    return fastapi_app


@pytest.fixture(autouse=True)
def override_session_dependency(app: FastAPI, db_session: Session) -> Iterator[None]:
    def _get_session_override() -> Generator[Session, None, None]:
        yield db_session

    app.dependency_overrides[app_get_session] = _get_session_override
    try:
        yield
    finally:
        app.dependency_overrides.pop(app_get_session, None)


@pytest.fixture()
def client(app: FastAPI) -> Iterator[TestClient]:
    with TestClient(app, base_url="http://test") as test_client:
        yield test_client


@pytest.fixture()
def make_user(db_session: Session) -> Callable[..., User]:
    """Return a factory persisting users with unique usernames."""

    def _make_user(username: str | None = None) -> User:
        user = User(username=username or f"user{next(_USER_COUNTER)}", karma=0)
        db_session.add(user)
        db_session.commit()
        return user

    return _make_user


@pytest.fixture()
def author(make_user: Callable[..., User]) -> User:
    """The user who wrote the test content."""
    return make_user("author")


@pytest.fixture()
def voter_a(make_user: Callable[..., User]) -> User:
    return make_user("alice")


@pytest.fixture()
def voter_b(make_user: Callable[..., User]) -> User:
    return make_user("bob")


@pytest.fixture()
def community(db_session: Session) -> Community:
    """Create a default test community."""
    community = Community(
        name="test",
        display_name="Test Community",
        description_md="Test community description",
    )
    db_session.add(community)
    db_session.commit()
    return community


@pytest.fixture()
def test_post(db_session: Session, author: User, community: Community) -> Post:
    """Create a baseline post for tests."""
    post = Post(
        author_user_id=author.id,
        community_id=community.id,
        title="Test post",
        body_md="Test post content",
    )
    db_session.add(post)
    db_session.commit()
    return post


@pytest.fixture()
def test_comment(db_session: Session, author: User, test_post: Post) -> Comment:
    """Create a top-level comment on the baseline post."""
    comment = Comment(
        post_id=test_post.id,
        author_user_id=author.id,
        body_md="Test comment",
    )
    db_session.add(comment)
    db_session.commit()
    return comment


def auth_headers(user: User) -> dict[str, str]:
    """Return authorization headers for `user`."""
    return {"Authorization": f"Bearer {create_access_token(user.id)}"}


@pytest.fixture()
def auth_token(voter_a: User) -> dict[str, str]:
    """Return authorization headers for the primary voter."""
    return auth_headers(voter_a)


@pytest.fixture()
def other_auth_token(voter_b: User) -> dict[str, str]:
    """Return authorization headers for the secondary voter."""
    return auth_headers(voter_b)


@pytest.fixture()
def author_auth_token(author: User) -> dict[str, str]:
    return auth_headers(author)
