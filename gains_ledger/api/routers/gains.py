"""Gains API router computing realized gains for posted transaction streams."""

from __future__ import annotations

from collections.abc import Callable

from fastapi import APIRouter, status
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from gains_ledger.config import AppSettings
from gains_ledger.domain import (
    LedgerTransaction,
    RealizedGainRecord,
    domain_build_stage_event,
    domain_normalize_transaction_kind,
)
from gains_ledger.jobs import GainsJobPort
from gains_ledger.ledger import LedgerRunResult, UnsupportedGainsMethodError, ledger_normalize_method

GainsOrchestratorFactory = Callable[[str, bool], GainsJobPort]


class TransactionPayload(BaseModel):
    """One posted ledger transaction.

    Numeric fields must be finite, matching what the CSV loader accepts.
    """

    order_id: str = Field(..., description="Source order identifier")
    timestamp: str = Field(..., description="Opaque ordering key")
    asset: str = Field(..., description="Asset symbol")
    kind: str = Field(..., description="Transaction kind, `buy` or `sell` in any case")
    quantity: float = Field(..., allow_inf_nan=False, description="Traded quantity")
    unit_price: float = Field(..., allow_inf_nan=False, description="Execution price per unit")
    gross_value: float = Field(..., allow_inf_nan=False, description="Trade value used as cost basis for buys")


class GainsRequestPayload(BaseModel):
    """Gains computation request body.

    Transactions must already be in chronological order.
    """

    method: str | None = Field(default=None, description="`fifo`, `ma`, or `both`; defaults to settings")
    partition_by_asset: bool | None = Field(default=None, description="Run engines once per asset")
    transactions: list[TransactionPayload] = Field(default_factory=list)


def api_create_gains_router(
    settings: AppSettings,
    orchestrator_factory: GainsOrchestratorFactory,
) -> APIRouter:
    """Create gains router exposing the realized-gain computation endpoint.

    Args:
        settings: Runtime settings used for method and partition defaults.
        orchestrator_factory: Builds an orchestrator for a method and partition policy.

    Returns:
        APIRouter: Router exposing `/gains`.

    Raises:
        ValueError: Raised when dependencies are invalid.
    """

    if settings is None:
        raise ValueError("settings must not be None")
    if orchestrator_factory is None:
        raise ValueError("orchestrator_factory must not be None")

    router = APIRouter(tags=["gains"])

    @router.post("/gains")
    def api_gains_compute(request_payload: GainsRequestPayload) -> JSONResponse:
        """Compute realized gains for one posted transaction stream.

        Args:
            request_payload: Method options and ordered transactions.

        Returns:
            JSONResponse: Per-engine records, totals, outcome counts and timeline.

        Raises:
            RuntimeError: Unexpected engine failures propagate to the framework.
        """

        requested_method = request_payload.method or settings.gains_method
        try:
            method = ledger_normalize_method(requested_method)
        except UnsupportedGainsMethodError as error:
            payload = {
                "status": "error",
                "code": "INVALID_METHOD",
                "message": str(error),
            }
            return JSONResponse(content=payload, status_code=status.HTTP_400_BAD_REQUEST)

        partition_by_asset = (
            settings.partition_by_asset
            if request_payload.partition_by_asset is None
            else request_payload.partition_by_asset
        )
        transactions = [api_build_transaction(item) for item in request_payload.transactions]

        timeline = [domain_build_stage_event(stage="compute", status="started", details={"method": method})]
        orchestrator = orchestrator_factory(method, partition_by_asset)
        file_result = orchestrator.job_execute_transactions(transactions=transactions, source_label="api")
        timeline.append(
            domain_build_stage_event(
                stage="compute",
                status="completed",
                details={"transactions": file_result.transaction_count},
            )
        )

        payload = {
            "status": "ok",
            "method": method,
            "partitioned_by_asset": partition_by_asset,
            "transaction_count": file_result.transaction_count,
            "engines": {
                method_name: api_serialize_run_result(run_result)
                for method_name, run_result in file_result.runs.items()
            },
            "timeline": timeline,
        }
        return JSONResponse(content=payload, status_code=status.HTTP_200_OK)

    return router


def api_build_transaction(item: TransactionPayload) -> LedgerTransaction:
    """Normalize one posted transaction into the engine contract.

    Args:
        item: Validated request item.

    Returns:
        LedgerTransaction: Normalized transaction.

    Raises:
        RuntimeError: This helper does not raise runtime errors.
    """

    return LedgerTransaction(
        order_id=item.order_id.strip(),
        timestamp=item.timestamp.strip(),
        asset=item.asset.strip(),
        kind=domain_normalize_transaction_kind(item.kind),
        quantity=item.quantity,
        unit_price=item.unit_price,
        gross_value=item.gross_value,
    )


def api_serialize_run_result(run_result: LedgerRunResult) -> dict[str, object]:
    """Serialize one engine run to JSON payload."""

    return {
        "records": [api_serialize_record(record) for record in run_result.records],
        "total_realized_gain": run_result.total_realized_gain,
        "outcome_counts": run_result.ledger_outcome_counts(),
        "streams": list(run_result.final_states),
    }


def api_serialize_record(record: RealizedGainRecord) -> dict[str, object]:
    """Serialize one realized-gain record to JSON payload.

    Args:
        record: Realized-gain record.

    Returns:
        dict[str, object]: JSON-serializable record payload.

    Raises:
        RuntimeError: This helper does not raise runtime errors.
    """

    return {
        "order_id": record.order_id,
        "timestamp": record.timestamp,
        "asset": record.asset,
        "sold_quantity": record.sold_quantity,
        "sale_unit_price": record.sale_unit_price,
        "proceeds": record.proceeds,
        "cost_basis": record.cost_basis,
        "realized_gain": record.realized_gain,
        "average_unit_cost": record.average_unit_cost,
    }


__all__ = [
    "GainsOrchestratorFactory",
    "GainsRequestPayload",
    "TransactionPayload",
    "api_build_transaction",
    "api_create_gains_router",
    "api_serialize_record",
    "api_serialize_run_result",
]
