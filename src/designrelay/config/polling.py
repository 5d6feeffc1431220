"""Polling cadence defaults."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import timedelta

from .env import env_float
from .errors import ConfigurationError

DEFAULT_LOOKBACK_SECONDS = 10 * 60.0
DEFAULT_INTERVAL_SECONDS = 5 * 60.0
DEFAULT_BACKOFF_BASE_SECONDS = 60.0
DEFAULT_BACKOFF_MAX_SECONDS = 30 * 60.0


@dataclass(frozen=True, slots=True)
class PollingConfig:
    lookback: timedelta = timedelta(seconds=DEFAULT_LOOKBACK_SECONDS)
    interval: timedelta = timedelta(seconds=DEFAULT_INTERVAL_SECONDS)
    backoff_base: timedelta = timedelta(seconds=DEFAULT_BACKOFF_BASE_SECONDS)
    backoff_max: timedelta = timedelta(seconds=DEFAULT_BACKOFF_MAX_SECONDS)


def get_polling_config() -> PollingConfig:
    config = PollingConfig(
        lookback=timedelta(seconds=env_float("POLL_LOOKBACK_SECONDS", DEFAULT_LOOKBACK_SECONDS)),
        interval=timedelta(seconds=env_float("POLL_INTERVAL_SECONDS", DEFAULT_INTERVAL_SECONDS)),
        backoff_base=timedelta(
            seconds=env_float("POLL_BACKOFF_BASE_SECONDS", DEFAULT_BACKOFF_BASE_SECONDS)
        ),
        backoff_max=timedelta(
            seconds=env_float("POLL_BACKOFF_MAX_SECONDS", DEFAULT_BACKOFF_MAX_SECONDS)
        ),
    )
    if config.backoff_max < config.backoff_base:
        raise ConfigurationError(
            "POLL_BACKOFF_MAX_SECONDS must not be below the backoff base",
            name="POLL_BACKOFF_MAX_SECONDS",
        )
    return config
