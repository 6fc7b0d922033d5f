# tests/v1/test_users.py
"""Tests for user karma endpoints."""

from fastapi import status


def test_get_user_karma(client, auth_token, other_auth_token, author, test_post, test_comment) -> None:
    client.post(f"/api/v1/posts/{test_post.id}/vote", json={"value": 1}, headers=auth_token)
    client.post(f"/api/v1/posts/{test_post.id}/vote", json={"value": 1}, headers=other_auth_token)
    client.post(f"/api/v1/comments/{test_comment.id}/vote", json={"value": -1}, headers=auth_token)

    response = client.get(f"/api/v1/users/{author.username}/karma")

    assert response.status_code == status.HTTP_200_OK
    data = response.json()
    assert data["id"] == author.id
    assert data["username"] == "author"
    assert data["karma"] == 1


def test_new_user_has_zero_karma(client, voter_a) -> None:
    response = client.get(f"/api/v1/users/{voter_a.username}/karma")

    assert response.status_code == status.HTTP_200_OK
    assert response.json()["karma"] == 0


def test_get_karma_unknown_user(client) -> None:
    response = client.get("/api/v1/users/nobody/karma")

    assert response.status_code == status.HTTP_404_NOT_FOUND
    assert response.json()["detail"] == "User not found"
