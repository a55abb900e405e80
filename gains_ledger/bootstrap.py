"""Application bootstrap wiring for startup validation and dependency assembly."""

from fastapi import FastAPI

from gains_ledger.api import create_api_application
from gains_ledger.config import AppSettings, config_load_settings
from gains_ledger.jobs import GainsReportConfig, GainsReportOrchestrator


def bootstrap_create_gains_orchestrator(settings: AppSettings) -> GainsReportOrchestrator:
    """Build the file report orchestrator from validated settings.

    Args:
        settings: Validated runtime settings.

    Returns:
        GainsReportOrchestrator: Orchestrator wired with the CSV statement loader.

    Raises:
        ValueError: Raised when settings values are invalid for orchestration.
    """

    return GainsReportOrchestrator(
        config=GainsReportConfig(
            method=settings.gains_method,
            skiprows=settings.csv_skiprows,
            partition_by_asset=settings.partition_by_asset,
            show_progress=settings.show_progress,
        )
    )


def bootstrap_create_application(settings: AppSettings | None = None) -> FastAPI:
    """Assemble the runtime application after validating startup configuration.

    Args:
        settings: Optional pre-validated settings, loaded from the environment when omitted.

    Returns:
        FastAPI: Fully initialized FastAPI application instance.

    Raises:
        SettingsLoadError: Raised when startup configuration validation fails.
    """

    resolved_settings = settings or config_load_settings()

    def bootstrap_build_request_orchestrator(method: str, partition_by_asset: bool) -> GainsReportOrchestrator:
        return GainsReportOrchestrator(
            config=GainsReportConfig(
                method=method,
                skiprows=resolved_settings.csv_skiprows,
                partition_by_asset=partition_by_asset,
                show_progress=False,
            )
        )

    return create_api_application(
        settings=resolved_settings,
        orchestrator_factory=bootstrap_build_request_orchestrator,
    )
