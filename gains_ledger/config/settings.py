"""Typed runtime settings with dotenv support and startup validation."""

from typing import Any

from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from gains_ledger.ledger import GAINS_METHOD_CHOICES


class SettingsLoadError(RuntimeError):
    """Raised when runtime settings cannot be loaded or validated."""


class AppSettings(BaseSettings):
    """Application settings for report runs and the HTTP service.

    Environment variable names map directly to field names in uppercase.
    Example: `csv_skiprows` reads from `CSV_SKIPROWS`.

    Attributes:
        environment_name: Runtime environment label.
        application_host: Host interface for web server binding.
        application_port: Web server port.
        csv_pattern: Glob pattern used to discover statement CSV files.
        csv_skiprows: Number of header/metadata lines skipped at the top of each file.
        gains_method: Calculation method (`fifo`, `ma`, or `both`).
        partition_by_asset: Whether engines run once per asset instead of once per file.
        report_currency: Currency label printed next to totals.
        report_display_digits: Decimal digits used when rounding totals for display.
        show_progress: Whether report runs display a progress bar.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )

    environment_name: str = Field(default="development")
    application_host: str = Field(default="0.0.0.0")
    application_port: int = Field(default=8000, ge=1, le=65535)
    csv_pattern: str = Field(default="./tax/2024_name/*/*.csv", min_length=1)
    csv_skiprows: int = Field(default=2, ge=0)
    gains_method: str = Field(default="both")
    partition_by_asset: bool = Field(default=False)
    report_currency: str = Field(default="THB", min_length=1)
    report_display_digits: int = Field(default=2, ge=0, le=12)
    show_progress: bool = Field(default=True)

    @field_validator("csv_pattern", "report_currency")
    @classmethod
    def _validate_non_empty_string(cls, value: str) -> str:
        stripped_value = value.strip()
        if not stripped_value:
            raise ValueError("value must not be blank")
        return stripped_value

    @field_validator("gains_method")
    @classmethod
    def _validate_gains_method(cls, value: str) -> str:
        normalized_value = value.strip().lower()
        if normalized_value not in GAINS_METHOD_CHOICES:
            raise ValueError(
                f"Invalid value for gains_method: {value}. Valid options are: {', '.join(GAINS_METHOD_CHOICES)}"
            )
        return normalized_value


def config_load_settings(overrides: dict[str, Any] | None = None) -> AppSettings:
    """Load and validate runtime settings from environment, dotenv and overrides.

    Args:
        overrides: Optional explicit values (for example CLI flags). Keys with
            None values are ignored so unset flags fall back to the environment.

    Returns:
        AppSettings: Validated runtime settings object.

    Raises:
        SettingsLoadError: Raised when settings are invalid.
    """

    explicit_values = {key: value for key, value in (overrides or {}).items() if value is not None}
    try:
        return AppSettings(**explicit_values)
    except ValidationError as error:
        raise SettingsLoadError(
            f"Startup configuration validation failed. Update .env, environment variables or flags. Details: {error}"
        ) from error
