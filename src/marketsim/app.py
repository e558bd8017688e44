"""marketsim application bootstrap."""

from __future__ import annotations

import logging
import random
from datetime import timedelta
from pathlib import Path

from marketsim.config_loader import AppConfig, load_config_with_overrides
from marketsim.constants import LOG_FORMAT, LOG_FORMAT_JSON, LogLevel
from marketsim.registry import InstrumentRegistry
from marketsim.snapshot import MarketSnapshot, build_snapshot

logger = logging.getLogger(__name__)


def setup_logging(level: LogLevel = LogLevel.INFO, fmt: str = "text") -> None:
    logging.basicConfig(
        level=getattr(logging, LogLevel(level).value),
        format=LOG_FORMAT_JSON if fmt == "json" else LOG_FORMAT,
    )


class MarketSimApp:
    """
    Owns the process-wide market snapshot.

    The snapshot is built once on `initialize()` and then only read.
    """

    def __init__(
        self,
        config_path: str | Path | None = None,
        seed: int | None = None,
        tick_count: int | None = None,
        log_level: str | None = None,
    ):
        self.config_path = Path(config_path) if config_path is not None else None
        self._seed_override = seed
        self._tick_count_override = tick_count
        self._log_level_override = log_level

        self.config: AppConfig | None = None
        self.registry: InstrumentRegistry | None = None
        self._snapshot: MarketSnapshot | None = None

    def initialize(self) -> MarketSnapshot:
        """Load config, validate the registry and build the snapshot."""
        if self._snapshot is not None:
            return self._snapshot

        self.config = load_config_with_overrides(
            self.config_path,
            seed=self._seed_override,
            tick_count=self._tick_count_override,
            log_level=self._log_level_override,
        )
        setup_logging(self.config.environment.log_level, self.config.environment.log_format)
        logger.info("Initializing marketsim...")

        # Raises ConfigurationError on a malformed catalogue
        self.registry = InstrumentRegistry.from_config(self.config)

        gen = self.config.generation
        if gen.seed is not None:
            logger.info(f"Using seed {gen.seed}")
        rng = random.Random(gen.seed)

        self._snapshot = build_snapshot(
            self.registry,
            rng,
            tick_count=gen.tick_count,
            session_start=gen.session_start,
            tick_interval=timedelta(seconds=gen.tick_interval_seconds),
            order_window=timedelta(minutes=gen.order_window_minutes),
            users=gen.users,
            seed=gen.seed,
        )
        return self._snapshot

    @property
    def snapshot(self) -> MarketSnapshot:
        """The snapshot, building it on first access."""
        if self._snapshot is None:
            return self.initialize()
        return self._snapshot


def initialize_snapshot(
    config_path: str | Path | None = None, seed: int | None = None
) -> MarketSnapshot:
    """Convenience function for callers that only need the data."""
    return MarketSimApp(config_path=config_path, seed=seed).initialize()
