"""Domain models and normalization helpers used across application layer boundaries."""

from .models import (
	HealthStatus,
	LedgerTransaction,
	RealizedGainRecord,
	TransactionKind,
	domain_build_realized_gain_record,
)
from .parsing import domain_normalize_optional_text, domain_normalize_transaction_kind, domain_parse_float
from .timeline import domain_build_stage_event, domain_timeline_failed_stages

__all__ = [
	"HealthStatus",
	"LedgerTransaction",
	"RealizedGainRecord",
	"TransactionKind",
	"domain_build_realized_gain_record",
	"domain_normalize_optional_text",
	"domain_normalize_transaction_kind",
	"domain_parse_float",
	"domain_build_stage_event",
	"domain_timeline_failed_stages",
]
