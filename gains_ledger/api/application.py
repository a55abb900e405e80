"""FastAPI application factory for the gains ledger service."""

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from gains_ledger.config import AppSettings

from .routers import api_create_gains_router, api_create_health_router
from .routers.gains import GainsOrchestratorFactory


def create_api_application(
    settings: AppSettings,
    orchestrator_factory: GainsOrchestratorFactory,
) -> FastAPI:
    """Create the FastAPI application instance for the service.

    Args:
        settings: Validated application settings used for runtime metadata and defaults.
        orchestrator_factory: Builds a gains orchestrator for a method and partition policy.

    Returns:
        FastAPI: Framework application instance.

    Raises:
        ValueError: Raised when dependencies are invalid.
    """
    application = FastAPI(title="Crypto Gains Ledger")

    @application.get("/", tags=["foundation"])
    def foundation_index() -> dict[str, str]:
        """Return a minimal foundation response for bootstrap verification.

        Returns:
            dict[str, str]: Minimal response for API framework verification.

        Raises:
            RuntimeError: Raised if route handler cannot produce a response.
        """

        return {
            "service": "crypto-gains-ledger",
            "status": "ready",
            "environment": settings.environment_name,
        }

    @application.exception_handler(RequestValidationError)
    def api_request_validation_handler(request: Request, error: RequestValidationError) -> JSONResponse:
        """Wrap request validation failures in the service error envelope.

        Args:
            request: Incoming request.
            error: Framework validation error.

        Returns:
            JSONResponse: 422 error envelope.

        Raises:
            RuntimeError: This handler does not raise runtime errors.
        """

        _ = request
        messages = [
            f"{'.'.join(str(part) for part in detail.get('loc', ()))}: {detail.get('msg', 'invalid')}"
            for detail in error.errors()
        ]
        payload = {
            "status": "error",
            "code": "INVALID_REQUEST",
            "message": "; ".join(messages),
        }
        return JSONResponse(content=payload, status_code=status.HTTP_422_UNPROCESSABLE_ENTITY)

    application.include_router(api_create_health_router(settings=settings))
    application.include_router(api_create_gains_router(settings=settings, orchestrator_factory=orchestrator_factory))

    return application
