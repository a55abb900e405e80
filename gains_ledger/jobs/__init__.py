"""Job layer package for gains report orchestration boundaries."""

from .interfaces import JOB_STATUS_FAILED, JOB_STATUS_SUCCESS, FileGainsResult, GainsJobPort, GainsReportResult
from .gains_orchestrator import GainsReportConfig, GainsReportOrchestrator

__all__ = [
	"JOB_STATUS_FAILED",
	"JOB_STATUS_SUCCESS",
	"FileGainsResult",
	"GainsJobPort",
	"GainsReportResult",
	"GainsReportConfig",
	"GainsReportOrchestrator",
]
