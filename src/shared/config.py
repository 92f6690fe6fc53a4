"""
Jaipur Traffic Grid - Configuration Loader

Pydantic-based configuration management with:
- Environment-based configuration (dev/prod)
- YAML file loading with inheritance
- Environment variable overrides for secrets
- Type validation via Pydantic

Usage:
    from src.shared.config import get_config

    config = get_config()  # Uses TG_ENVIRONMENT env var
    config = get_config("dev")  # Explicit environment

    # Access config values
    columns = config.grid.dimensions.columns
    offset = config.temporal.utc_offset_minutes
"""

from __future__ import annotations

import os
from functools import lru_cache
from pathlib import Path
from typing import Any, Literal

import yaml
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# =============================================================================
# Configuration Models
# =============================================================================


class ProjectConfig(BaseModel):
    """Project metadata configuration."""

    name: str = "jaipur-traffic-grid"
    version: str = "0.1.0"
    description: str = "Geo-grid and timestamp core for the Jaipur traffic dashboard"


class CornerConfig(BaseModel):
    """A boundary corner in decimal degrees."""

    model_config = ConfigDict(frozen=True)

    lat: float = Field(ge=-90.0, le=90.0)
    lng: float = Field(ge=-180.0, le=180.0)


class BoundaryConfig(BaseModel):
    """Geographic rectangle covered by the grid."""

    model_config = ConfigDict(frozen=True)

    north_west: CornerConfig = Field(default_factory=lambda: CornerConfig(lat=26.99, lng=75.65))
    south_east: CornerConfig = Field(default_factory=lambda: CornerConfig(lat=26.78, lng=75.92))

    @model_validator(mode="after")
    def check_orientation(self) -> BoundaryConfig:
        """Northwest must be north of and west of southeast."""
        if self.north_west.lat <= self.south_east.lat:
            raise ValueError(
                f"north_west.lat ({self.north_west.lat}) must be greater than "
                f"south_east.lat ({self.south_east.lat})"
            )
        if self.north_west.lng >= self.south_east.lng:
            raise ValueError(
                f"north_west.lng ({self.north_west.lng}) must be less than "
                f"south_east.lng ({self.south_east.lng})"
            )
        return self


class DimensionsConfig(BaseModel):
    """Number of grid cells along each axis."""

    model_config = ConfigDict(frozen=True)

    columns: int = Field(default=15, gt=0)
    rows: int = Field(default=21, gt=0)


class ExtentConfig(BaseModel):
    """Surveyed size of the mapped area in metres."""

    model_config = ConfigDict(frozen=True)

    width_m: float = Field(gt=0)
    height_m: float = Field(gt=0)


class GridConfig(BaseModel):
    """Grid geometry configuration."""

    model_config = ConfigDict(frozen=True)

    boundary: BoundaryConfig = Field(default_factory=BoundaryConfig)
    dimensions: DimensionsConfig = Field(default_factory=DimensionsConfig)
    # When set, cells are sized in metres instead of equal degree steps
    extent: ExtentConfig | None = Field(
        default_factory=lambda: ExtentConfig(width_m=26998.580215450143, height_m=23100.0)
    )


class TemporalConfig(BaseModel):
    """Fixed civil timezone used to read upstream timestamps."""

    model_config = ConfigDict(frozen=True)

    utc_offset_minutes: int = Field(default=330, ge=-24 * 60, le=24 * 60)
    zone_label: str = "IST"


class AlertRoutingConfig(BaseModel):
    """Alert routing configuration."""

    info: list[str] = Field(default_factory=lambda: ["log"])
    warning: list[str] = Field(default_factory=lambda: ["log", "slack"])
    critical: list[str] = Field(default_factory=lambda: ["log", "slack"])


class RateLimitConfig(BaseModel):
    """Rate limit configuration."""

    max_alerts_per_hour: int = 10
    cooldown_minutes: int = 15


class AlertingConfig(BaseModel):
    """Alerting configuration."""

    routing: AlertRoutingConfig = Field(default_factory=AlertRoutingConfig)
    rate_limit: RateLimitConfig = Field(default_factory=RateLimitConfig)


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: str = "INFO"
    format: Literal["json", "text"] = "json"
    include_timestamp: bool = True


# =============================================================================
# Main Settings Class
# =============================================================================


class Settings(BaseSettings):
    """
    Main configuration class for the traffic grid core.

    Loads configuration from:
    1. YAML files in configs/environments/
    2. Environment variables (for secrets)

    Environment variables take precedence over YAML values.
    """

    model_config = SettingsConfigDict(
        env_prefix="TG_",
        env_nested_delimiter="__",
        extra="ignore",
    )

    # Environment
    environment: Literal["dev", "prod"] = "dev"

    # Configuration sections
    project: ProjectConfig = Field(default_factory=ProjectConfig)
    grid: GridConfig = Field(default_factory=GridConfig)
    temporal: TemporalConfig = Field(default_factory=TemporalConfig)
    alerting: AlertingConfig = Field(default_factory=AlertingConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    # Secrets (from environment variables only)
    slack_webhook_url: str | None = Field(default=None, alias="SLACK_WEBHOOK_URL")

    @field_validator("environment", mode="before")
    @classmethod
    def validate_environment(cls, v: str) -> str:
        """Validate environment value."""
        valid_envs = {"dev", "prod"}
        if v not in valid_envs:
            raise ValueError(f"Invalid environment: {v}. Must be one of: {valid_envs}")
        return v


# =============================================================================
# Configuration Loading Functions
# =============================================================================


def _get_config_dir() -> Path:
    """Get the configuration directory path."""
    # Repository root, relative to this file
    config_dir = Path(__file__).parent.parent.parent / "configs"
    if config_dir.exists():
        return config_dir

    # Try from current working directory
    config_dir = Path.cwd() / "configs"
    if config_dir.exists():
        return config_dir

    raise FileNotFoundError(
        "Could not find configs directory. Ensure you're running from the project root."
    )


def _load_yaml_file(path: Path) -> dict[str, Any]:
    """Load a YAML file and return its contents."""
    if not path.exists():
        return {}
    with open(path) as f:
        return yaml.safe_load(f) or {}


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Deep merge two dictionaries, with override taking precedence."""
    result = base.copy()
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value
    return result


def _load_config_for_environment(environment: str) -> dict[str, Any]:
    """Load and merge configuration for a specific environment."""
    config_dir = _get_config_dir()
    env_dir = config_dir / "environments"

    # Load base config
    base_config = _load_yaml_file(env_dir / "base.yaml")

    # Load environment-specific config
    env_config = _load_yaml_file(env_dir / f"{environment}.yaml")

    # Remove inheritance marker if present
    env_config.pop("_inherit", None)

    merged = _deep_merge(base_config, env_config)
    merged["environment"] = environment

    return merged


@lru_cache(maxsize=4)
def get_config(environment: str | None = None) -> Settings:
    """
    Get configuration for the specified environment.

    Args:
        environment: Environment name (dev, prod).
                    If None, uses TG_ENVIRONMENT env var, defaulting to "dev".

    Returns:
        Settings: Validated configuration object.

    Example:
        config = get_config()  # Uses TG_ENVIRONMENT or defaults to dev
        config = get_config("prod")  # Explicit production config

        # Access values
        rows = config.grid.dimensions.rows
        label = config.temporal.zone_label
    """
    if environment is None:
        environment = os.getenv("TG_ENVIRONMENT", "dev")

    yaml_config = _load_config_for_environment(environment)

    # Create Settings object (also loads env vars)
    return Settings(**yaml_config)


def reload_config(environment: str | None = None) -> Settings:
    """
    Reload configuration, clearing the cache.

    Useful for testing or when config files have changed.
    """
    get_config.cache_clear()
    return get_config(environment)


# =============================================================================
# Convenience Functions
# =============================================================================


def is_production() -> bool:
    """Check if running in production environment."""
    config = get_config()
    return config.environment == "prod"


def is_development() -> bool:
    """Check if running in development environment."""
    config = get_config()
    return config.environment == "dev"
