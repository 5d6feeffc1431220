"""Ports for persisting domain records."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from designrelay.domain.model import Design


@runtime_checkable
class ProcessedOrderRepository(Protocol):
    """Ledger of orders that must not be notified again."""

    def exists(self, order_id: str) -> bool: ...

    def record(self, order_id: str) -> None:
        """Persist a marker; raises ``DuplicateKey`` if one already exists."""
        ...


@runtime_checkable
class DesignRepository(Protocol):
    """Lookup and storage of submitted designs."""

    def find(self, design_id: str) -> Design | None: ...

    def get(self, design_id: str) -> Design:
        """Return the design or raise ``DesignNotFound``."""
        ...

    def add(self, design: Design) -> None:
        """Store a new design; raises ``DuplicateKey`` if the id is taken."""
        ...
