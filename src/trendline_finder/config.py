"""Configuration management."""

import os
from pathlib import Path
from typing import Any, Literal

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from trendline_finder.errors import ConfigurationError

# Load .env file if it exists
load_dotenv()

CONFIG_ENV_VAR = "TRENDLINE_FINDER_CONFIG"

Interval = Literal["1d", "1wk", "1mo"]


class TrendlineConfig(BaseModel):
    """Tuning knobs for trendline detection.

    Field names are snake_case; the camelCase names used by the web
    front end (``pivotWindow``, ``touchTolerancePct`` ...) are accepted
    as aliases.
    """

    model_config = ConfigDict(populate_by_name=True, validate_assignment=True)

    pivot_window: int = Field(
        default=4, gt=0, alias="pivotWindow", description="Bars on each side of a swing point"
    )
    touch_tolerance_pct: float = Field(
        default=0.0075,
        gt=0,
        lt=1,
        alias="touchTolerancePct",
        description="Touch band as a fraction of the projected price",
    )
    min_touch_count: int = Field(
        default=3, ge=2, alias="minTouchCount", description="Significance floor"
    )
    max_lines_per_direction: int = Field(
        default=3, ge=1, alias="maxLinesPerDirection", description="Output cap per direction"
    )
    min_span: int = Field(default=1, ge=1, alias="minSpan", description="Minimum bars between anchors")
    dedup_slope_tolerance: float = Field(
        default=0.001,
        gt=0,
        alias="dedupSlopeTolerance",
        description="Max difference of price-relative slopes for duplicate lines",
    )
    drop_threshold: float | None = Field(
        default=None,
        alias="dropThreshold",
        description="Keep swing highs only if price later fell by this fraction (e.g. -0.30)",
    )
    detect_channels: bool = Field(default=False, alias="detectChannels")
    channel_tolerance_pct: float = Field(default=0.02, gt=0, lt=1, alias="channelTolerancePct")
    interval: Interval = Field(default="1d", description="Bar interval: 1d, 1wk or 1mo")

    @field_validator("drop_threshold")
    @classmethod
    def _check_drop_threshold(cls, value: float | None) -> float | None:
        if value is not None and not -1 < value < 0:
            raise ValueError("drop_threshold must be between -1 and 0")
        return value

    @classmethod
    def from_options(cls, **options: Any) -> "TrendlineConfig":
        """Build a config, reporting bad values as ConfigurationError."""
        try:
            return cls(**options)
        except ValidationError as e:
            raise ConfigurationError(str(e)) from e

    def with_overrides(self, **overrides: Any) -> "TrendlineConfig":
        """Return a copy with the non-None overrides applied and validated."""
        values = self.model_dump()
        values.update({k: v for k, v in overrides.items() if v is not None})
        return self.from_options(**values)


class LoggingConfig(BaseModel):
    """Configuration for logging."""

    level: str = Field(default="INFO")
    json_logs: bool = Field(default=False, description="Emit JSON log lines")


class ParallelConfig(BaseModel):
    """Configuration for parallel processing."""

    max_workers: int = Field(default=4, description="Maximum concurrent workers")
    enabled: bool = Field(default=True, description="Enable parallel processing")


class OutputConfig(BaseModel):
    """Configuration for output."""

    default_format: str = Field(default="table")
    save_dir: str = Field(default="output")


class Settings(BaseModel):
    """Main settings container."""

    trendline: TrendlineConfig = Field(default_factory=TrendlineConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    parallel: ParallelConfig = Field(default_factory=ParallelConfig)


def load_settings(config_path: Path | str | None = None) -> Settings:
    """
    Load settings from YAML file.

    Args:
        config_path: Path to config file. If None, uses $TRENDLINE_FINDER_CONFIG
            or the default config/settings.yaml

    Returns:
        Settings object with validated configuration

    Raises:
        ConfigurationError: If the file holds invalid values
    """
    if config_path is None:
        config_path = os.environ.get(CONFIG_ENV_VAR)
    if config_path is None:
        # Look for config relative to project root
        config_path = Path(__file__).parent.parent.parent / "config" / "settings.yaml"

    config_path = Path(config_path)

    if not config_path.exists():
        # Return defaults if no config file
        return Settings()

    with open(config_path) as f:
        data: dict[str, Any] = yaml.safe_load(f) or {}

    try:
        return Settings(**data)
    except ValidationError as e:
        raise ConfigurationError(f"Invalid settings in {config_path}: {e}") from e


# Global settings instance (lazy loaded)
_settings: Settings | None = None


def get_settings() -> Settings:
    """Get the global settings instance."""
    global _settings
    if _settings is None:
        _settings = load_settings()
    return _settings
