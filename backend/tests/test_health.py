"""
Tests for the health endpoint and startup checks.
"""
from unittest.mock import patch

from fastapi.testclient import TestClient

from app.main import app


def test_health_check(client):
    """Test health check endpoint."""
    response = client.get("/api/v1/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_unknown_route(client):
    response = client.get("/api/v1/units")
    assert response.status_code == 404


def test_startup_checks_configured_database():
    with patch("app.main.is_configured", return_value=True), \
            patch("app.main.check_connection", return_value=True) as check:
        with TestClient(app) as client:
            assert client.get("/api/v1/health").status_code == 200
    check.assert_called_once_with()


def test_startup_skips_unconfigured_database():
    with patch("app.main.is_configured", return_value=False), \
            patch("app.main.check_connection") as check:
        with TestClient(app):
            pass
    check.assert_not_called()
