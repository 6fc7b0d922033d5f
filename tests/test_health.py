# tests/test_health.py
"""Tests for service-level endpoints."""

from fastapi import status


def test_health_check(client) -> None:
    response = client.get("/health")

    assert response.status_code == status.HTTP_200_OK
    assert response.json() == {"status": "ok"}


def test_root_describes_api(client) -> None:
    response = client.get("/")

    assert response.status_code == status.HTTP_200_OK
    data = response.json()
    assert data["name"] == "Threadline API"
    assert data["docs"] == "/docs"
