"""Ports for fetching orders from an external provider."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Sequence
    from datetime import datetime

    from designrelay.domain.model import Order


@dataclass(slots=True)
class OrderFetchResult:
    """Orders modified within a requested window, in source order."""

    orders: Sequence[Order]
    pages: int = 1


@runtime_checkable
class OrderSource(Protocol):
    """Callable port returning orders modified in ``[start, end)``.

    Implementations raise ``SourceUnavailable`` on any transport or payload failure.
    """

    def __call__(self, *, start: datetime, end: datetime) -> OrderFetchResult: ...


__all__ = ["OrderFetchResult", "OrderSource"]
