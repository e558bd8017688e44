"""Configuration loader with Pydantic validation and environment variable interpolation."""

from __future__ import annotations

import os
import re
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

import yaml
from dotenv import find_dotenv, load_dotenv
from pydantic import BaseModel, ConfigDict, Field, field_validator

# Load environment variables at module level
load_dotenv(find_dotenv(usecwd=True))

from marketsim.constants import (
    DEFAULT_TICK_COUNT,
    FAKE_USERS,
    ORDER_WINDOW,
    SESSION_START,
    TICK_INTERVAL,
    LogLevel,
)


def interpolate_env_vars(value: Any) -> Any:
    """
    Interpolate environment variables in string values.

    Supports formats:
    - ${VAR_NAME} - replaced by the variable, empty string if unset
    - ${VAR_NAME:default} - optional with default value
    """
    if not isinstance(value, str):
        return value

    pattern = r"\$\{([^}:]+)(?::([^}]*))?\}"

    def replacer(match: re.Match[str]) -> str:
        var_name = match.group(1)
        default = match.group(2)

        env_value = os.environ.get(var_name)

        if env_value is not None:
            return env_value
        elif default is not None:
            return default
        else:
            return ""

    return re.sub(pattern, replacer, value)


def process_config_dict(data: dict[str, Any]) -> dict[str, Any]:
    """Recursively process config dict to interpolate env vars."""
    result = {}
    for key, value in data.items():
        if isinstance(value, dict):
            result[key] = process_config_dict(value)
        elif isinstance(value, list):
            result[key] = [
                process_config_dict(item) if isinstance(item, dict) else interpolate_env_vars(item)
                for item in value
            ]
        else:
            result[key] = interpolate_env_vars(value)
    return result


# ============================================
# Pydantic Configuration Models
# ============================================


class EnvironmentConfig(BaseModel):
    """Runtime settings."""

    log_level: LogLevel = LogLevel.INFO
    log_format: str = "text"

    @field_validator("log_format")
    @classmethod
    def validate_log_format(cls, v: str) -> str:
        valid = {"text", "json"}
        if v.lower() not in valid:
            raise ValueError(f"Log format must be one of {valid}, got: {v}")
        return v.lower()


class GenerationConfig(BaseModel):
    """Synthetic session settings shared by every instrument."""

    seed: int | None = None
    tick_count: int = DEFAULT_TICK_COUNT
    tick_interval_seconds: float = TICK_INTERVAL.total_seconds()
    session_start: datetime = SESSION_START
    order_window_minutes: float = ORDER_WINDOW.total_seconds() / 60
    users: list[str] = Field(default_factory=lambda: list(FAKE_USERS))

    @field_validator("seed", mode="before")
    @classmethod
    def empty_seed_is_none(cls, v: Any) -> Any:
        """An interpolated but unset ${VAR} arrives as an empty string."""
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @field_validator("tick_count")
    @classmethod
    def validate_tick_count(cls, v: int) -> int:
        """Aggregation needs a previous price, so at least two ticks."""
        if v < 2:
            raise ValueError(f"tick_count must be at least 2, got: {v}")
        return v

    @field_validator("tick_interval_seconds", "order_window_minutes")
    @classmethod
    def validate_positive(cls, v: float) -> float:
        if v <= 0:
            raise ValueError(f"Value must be positive, got: {v}")
        return v

    @field_validator("session_start")
    @classmethod
    def assume_utc(cls, v: datetime) -> datetime:
        """Naive timestamps are read as UTC."""
        if v.tzinfo is None:
            return v.replace(tzinfo=timezone.utc)
        return v

    @field_validator("users")
    @classmethod
    def validate_users(cls, v: list[str]) -> list[str]:
        if not v:
            raise ValueError("users must contain at least one identifier")
        return v


class SeedConfig(BaseModel):
    """Generation parameters for one synthetic instrument."""

    model_config = ConfigDict(frozen=True, allow_inf_nan=False)

    ticker: str
    name: str
    start_price: float
    total_shares: int
    volatility: float = 0.0
    bias: float = 0.0
    crash_probability: float = 0.0
    base_volume: int = 1_000

    @field_validator("ticker")
    @classmethod
    def normalize_ticker(cls, v: str) -> str:
        """Tickers are stored in canonical uppercase."""
        v = v.strip().upper()
        if not v:
            raise ValueError("ticker must not be empty")
        return v

    @field_validator("volatility")
    @classmethod
    def validate_volatility(cls, v: float) -> float:
        if not v >= 0:
            raise ValueError(f"volatility must be non-negative, got: {v}")
        return v

    @field_validator("crash_probability")
    @classmethod
    def validate_probability(cls, v: float) -> float:
        if not 0.0 <= v <= 1.0:
            raise ValueError(f"crash_probability must be within [0, 1], got: {v}")
        return v

    @field_validator("base_volume")
    @classmethod
    def validate_base_volume(cls, v: int) -> int:
        if v <= 0:
            raise ValueError(f"base_volume must be positive, got: {v}")
        return v


class AppConfig(BaseModel):
    """Root application configuration."""

    environment: EnvironmentConfig = Field(default_factory=EnvironmentConfig)
    generation: GenerationConfig = Field(default_factory=GenerationConfig)
    # None means "use the built-in catalogue"
    instruments: list[SeedConfig] | None = None


# ============================================
# Configuration Loader
# ============================================


class ConfigLoader:
    """Load and validate configuration from YAML files with env var interpolation."""

    def __init__(self, config_path: str | Path) -> None:
        """
        Initialize config loader.

        Args:
            config_path: Path to the YAML configuration file.
        """
        self.config_path = Path(config_path)
        self._config: AppConfig | None = None

    def load(self) -> AppConfig:
        """
        Load and validate configuration.

        Returns:
            Validated AppConfig instance.

        Raises:
            FileNotFoundError: If config file doesn't exist.
            yaml.YAMLError: If YAML is invalid.
            pydantic.ValidationError: If config validation fails.
        """
        if not self.config_path.exists():
            raise FileNotFoundError(f"Config file not found: {self.config_path}")

        with open(self.config_path, encoding="utf-8") as f:
            raw_config = yaml.safe_load(f)

        if raw_config is None:
            raw_config = {}

        processed_config = process_config_dict(raw_config)

        self._config = AppConfig.model_validate(processed_config)

        return self._config

    @property
    def config(self) -> AppConfig:
        """Get loaded config, loading if necessary."""
        if self._config is None:
            return self.load()
        return self._config

    def reload(self) -> AppConfig:
        """Force reload configuration from disk."""
        self._config = None
        return self.load()


def load_config(config_path: str | Path) -> AppConfig:
    """
    Convenience function to load configuration.

    Args:
        config_path: Path to the YAML configuration file.

    Returns:
        Validated AppConfig instance.
    """
    loader = ConfigLoader(config_path)
    return loader.load()


def load_config_with_overrides(
    config_path: str | Path | None,
    *,
    seed: int | None = None,
    tick_count: int | None = None,
    log_level: str | None = None,
) -> AppConfig:
    """
    Load configuration with CLI overrides.

    Args:
        config_path: Path to the YAML configuration file, or None for defaults.
        seed: Override the random seed.
        tick_count: Override the series length.
        log_level: Override the log level.

    Returns:
        Validated AppConfig instance with overrides applied.
    """
    config = load_config(config_path) if config_path is not None else AppConfig()

    updates: dict[str, Any] = {}

    generation_updates: dict[str, Any] = {}
    if seed is not None:
        generation_updates["seed"] = seed
    if tick_count is not None:
        generation_updates["tick_count"] = tick_count
    if generation_updates:
        # Re-validate so overrides go through the same checks as the file
        updates["generation"] = GenerationConfig.model_validate(
            {**config.generation.model_dump(), **generation_updates}
        )

    if log_level is not None:
        updates["environment"] = config.environment.model_copy(
            update={"log_level": LogLevel(log_level.upper())}
        )

    if updates:
        return config.model_copy(update=updates)

    return config
