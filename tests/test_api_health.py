"""Tests for API foundation and health endpoint behavior."""

from fastapi.testclient import TestClient

from gains_ledger.bootstrap import bootstrap_create_application
from gains_ledger.config import AppSettings


def test_api_health_reports_supported_methods() -> None:
    """Return deterministic health payload with supported engine methods.

    Returns:
        None: Assertions validate response payload.

    Raises:
        AssertionError: Raised when health payload differs.
    """

    client = TestClient(bootstrap_create_application(settings=AppSettings(environment_name="test")))

    response = client.get("/health")

    assert response.status_code == 200
    assert response.json() == {
        "status": "ok",
        "app": "up",
        "detail": "ledger engines available",
        "environment": "test",
        "supported_methods": ["fifo", "ma", "both"],
    }


def test_api_foundation_index_reports_ready() -> None:
    """Return service identity from the foundation route."""

    client = TestClient(bootstrap_create_application(settings=AppSettings(environment_name="test")))

    response = client.get("/")

    assert response.status_code == 200
    assert response.json() == {"service": "crypto-gains-ledger", "status": "ready", "environment": "test"}
