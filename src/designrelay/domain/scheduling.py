"""Adaptive scheduling for the polling loop."""

from __future__ import annotations

import threading
from dataclasses import dataclass
from datetime import timedelta
from enum import StrEnum
from logging import getLogger
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Callable

    from designrelay.config import PollingConfig
    from designrelay.domain.reconciliation import CycleResult

log = getLogger(__name__)

DEFAULT_BACKOFF_BASE = timedelta(minutes=1)
DEFAULT_BACKOFF_MAX = timedelta(minutes=30)

_MAX_EXPONENT = 62


class PollingMode(StrEnum):
    STEADY = "steady"
    BACKOFF = "backoff"


@dataclass(frozen=True, slots=True)
class BackoffPolicy:
    """Fixed interval after success, capped exponential backoff after failure."""

    interval: timedelta
    base_delay: timedelta = DEFAULT_BACKOFF_BASE
    max_delay: timedelta = DEFAULT_BACKOFF_MAX

    def __post_init__(self) -> None:
        if self.interval <= timedelta(0) or self.base_delay <= timedelta(0):
            raise ValueError("Polling interval and backoff base must be positive")
        if self.max_delay < self.base_delay:
            raise ValueError("Backoff ceiling must not be below the backoff base")

    @classmethod
    def from_config(cls, config: PollingConfig) -> BackoffPolicy:
        return cls(
            interval=config.interval,
            base_delay=config.backoff_base,
            max_delay=config.backoff_max,
        )

    def backoff_delay(self, failures: int) -> timedelta:
        """Return ``min(base * 2**(failures - 1), max)`` for ``failures >= 1``."""

        if failures < 1:
            raise ValueError("Backoff applies only after at least one failure")
        exponent = min(failures - 1, _MAX_EXPONENT)
        seconds = self.base_delay.total_seconds() * (2**exponent)
        return timedelta(seconds=min(seconds, self.max_delay.total_seconds()))


@dataclass(slots=True)
class PollingState:
    """Failure counter and current delay; mutated only through ``record_*``."""

    delay: timedelta
    consecutive_failures: int = 0

    @property
    def mode(self) -> PollingMode:
        return PollingMode.BACKOFF if self.consecutive_failures else PollingMode.STEADY

    def record_success(self, policy: BackoffPolicy) -> timedelta:
        self.consecutive_failures = 0
        self.delay = policy.interval
        return self.delay

    def record_failure(self, policy: BackoffPolicy) -> timedelta:
        self.consecutive_failures += 1
        self.delay = policy.backoff_delay(self.consecutive_failures)
        return self.delay


class PollingScheduler:
    """Run cycles back to back, waiting the adaptive delay in between.

    The stop event is only honoured between cycles; an in-flight cycle always runs to
    completion.
    """

    def __init__(
        self,
        cycle: Callable[[], CycleResult],
        policy: BackoffPolicy,
        *,
        stop_event: threading.Event | None = None,
    ) -> None:
        self._cycle = cycle
        self.policy = policy
        self.state = PollingState(delay=policy.interval)
        self.stop_event = stop_event or threading.Event()

    def stop(self) -> None:
        self.stop_event.set()

    def step(self) -> timedelta:
        """Run one cycle, update the state and return the delay before the next one."""

        try:
            result = self._cycle()
        except Exception:  # noqa: BLE001
            log.exception("Polling cycle aborted by an unexpected error")
            succeeded = False
        else:
            succeeded = result.success

        if succeeded:
            delay = self.state.record_success(self.policy)
            log.debug("Polling succeeded, next poll in %s seconds", delay.total_seconds())
        else:
            delay = self.state.record_failure(self.policy)
            log.warning(
                "Polling failed %s times, retrying in %s seconds",
                self.state.consecutive_failures,
                delay.total_seconds(),
            )
        return delay

    def run_forever(self) -> None:
        log.info(
            "Starting order polling: interval=%ss, backoff_base=%ss, backoff_max=%ss",
            self.policy.interval.total_seconds(),
            self.policy.base_delay.total_seconds(),
            self.policy.max_delay.total_seconds(),
        )
        while not self.stop_event.is_set():
            delay = self.step()
            if self.stop_event.wait(delay.total_seconds()):
                break
        log.info("Order polling stopped")


__all__ = ["BackoffPolicy", "PollingMode", "PollingScheduler", "PollingState"]
