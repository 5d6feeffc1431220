"""Processed-order markers."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime


def _utcnow() -> datetime:
    return datetime.now(UTC)


@dataclass(eq=False, kw_only=True)
class ProcessedOrder:
    """Marks an order as done: notified, or conclusively skipped.

    Markers are written once and never changed.
    """

    order_id: str
    processed_at: datetime = field(default_factory=_utcnow)
