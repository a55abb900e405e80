"""Health endpoint router composition for service liveness checks."""

from fastapi import APIRouter, status
from fastapi.responses import JSONResponse

from gains_ledger.config import AppSettings
from gains_ledger.domain import HealthStatus
from gains_ledger.ledger import GAINS_METHOD_CHOICES


def api_create_health_router(settings: AppSettings) -> APIRouter:
    """Create health-check router with application status.

    Args:
        settings: Validated application settings.

    Returns:
        APIRouter: Router exposing `/health` endpoint.

    Raises:
        ValueError: Raised when settings is invalid.
    """

    if settings is None:
        raise ValueError("settings must not be None")

    router = APIRouter(tags=["health"])

    @router.get("/health")
    def api_health_status() -> JSONResponse:
        """Return application health state.

        Returns:
            JSONResponse: Deterministic health payload for operational checks.

        Raises:
            RuntimeError: This handler does not raise runtime errors.
        """

        health = HealthStatus(status="ok", detail="ledger engines available")
        payload = {
            "status": health.status,
            "app": "up",
            "detail": health.detail,
            "environment": settings.environment_name,
            "supported_methods": list(GAINS_METHOD_CHOICES),
        }
        return JSONResponse(content=payload, status_code=status.HTTP_200_OK)

    return router
