"""Utilities for constraining polling cycles to specific time windows."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from typing import Protocol


class Clock(Protocol):
    def __call__(self) -> datetime: ...


def utcnow() -> datetime:
    return datetime.now(UTC)


@dataclass(frozen=True)
class TimeWindow:
    """Describe the half-open interval ``[now - lookback, now)`` to poll."""

    lookback: timedelta

    def resolve(self, *, clock: Clock = utcnow) -> tuple[datetime, datetime]:
        """Resolve the window into concrete UTC timestamps anchored to ``clock()``.

        A naive clock reading is taken to be UTC.
        """

        if self.lookback < timedelta(0):
            raise ValueError("Lookback duration must be non-negative")

        anchor = clock()
        if anchor.tzinfo is None:
            anchor = anchor.replace(tzinfo=UTC)
        end = anchor.astimezone(UTC)
        return end - self.lookback, end

    @staticmethod
    def contains(value: datetime, start: datetime, end: datetime) -> bool:
        return start <= value < end


__all__ = ["Clock", "TimeWindow", "utcnow"]
