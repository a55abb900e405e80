"""Structured stage-timeline helpers for gains report runs."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any


def domain_build_stage_event(
    stage: str,
    status: str,
    details: dict[str, Any] | None = None,
) -> dict[str, object]:
    """Build one structured timeline event payload.

    Args:
        stage: Stage name such as `discover`, `load`, or `compute`.
        status: Stage status marker (`started`, `completed`, `failed`).
        details: Optional structured details object.

    Returns:
        dict[str, object]: Structured timeline event.

    Raises:
        ValueError: Raised when stage or status is blank.
    """

    if not stage.strip():
        raise ValueError("stage must not be blank")
    if not status.strip():
        raise ValueError("status must not be blank")

    event_payload: dict[str, object] = {
        "stage": stage.strip(),
        "status": status.strip(),
        "at_utc": datetime.now(timezone.utc).isoformat(),
    }
    if details is not None:
        event_payload["details"] = details
    return event_payload


def domain_timeline_failed_stages(timeline: list[dict[str, object]]) -> list[str]:
    """Return stage names that recorded a failure, in timeline order.

    Args:
        timeline: Timeline events built by `domain_build_stage_event`.

    Returns:
        list[str]: Failed stage names without duplicates.

    Raises:
        RuntimeError: This helper does not raise runtime errors.
    """

    failed_stages: list[str] = []
    for event in timeline:
        stage = str(event.get("stage", ""))
        if event.get("status") == "failed" and stage not in failed_stages:
            failed_stages.append(stage)
    return failed_stages


__all__ = ["domain_build_stage_event", "domain_timeline_failed_stages"]
