"""Domain port definitions for adapters."""

from __future__ import annotations

from .fetching import OrderFetchResult, OrderSource
from .notification import Notifier
from .persistence import DesignRepository, ProcessedOrderRepository
from .unit_of_work import (
    ReconciliationRepositories,
    ReconciliationUnitOfWork,
    RepositoryCollection,
    UnitOfWork,
)

__all__ = [
    "DesignRepository",
    "Notifier",
    "OrderFetchResult",
    "OrderSource",
    "ProcessedOrderRepository",
    "ReconciliationRepositories",
    "ReconciliationUnitOfWork",
    "RepositoryCollection",
    "UnitOfWork",
]
