"""Reconcile recently modified orders with stored designs and notify once per order."""

from __future__ import annotations

import threading
from collections import Counter
from dataclasses import dataclass, field
from datetime import timedelta
from enum import StrEnum
from logging import getLogger
from typing import TYPE_CHECKING

from designrelay.domain.errors import (
    DeliveryFailed,
    DuplicateKey,
    InvalidDesignPayload,
    SourceUnavailable,
)
from designrelay.domain.model import DESIGN_REFERENCE_LABEL
from designrelay.domain.time_windows import TimeWindow, utcnow

if TYPE_CHECKING:
    from collections.abc import Callable
    from datetime import datetime

    from designrelay.domain.model import Order
    from designrelay.domain.ports import Notifier, OrderSource, ReconciliationUnitOfWork
    from designrelay.domain.time_windows import Clock

log = getLogger(__name__)

DEFAULT_LOOKBACK = timedelta(minutes=10)


class OrderOutcome(StrEnum):
    NOTIFIED = "notified"
    ALREADY_PROCESSED = "already_processed"
    MISSING_REFERENCE = "missing_reference"
    MISSING_DESIGN = "missing_design"
    INVALID_DESIGN = "invalid_design"
    DELIVERY_FAILED = "delivery_failed"
    FAILED = "failed"

    @property
    def marks_processed(self) -> bool:
        return self not in {
            OrderOutcome.ALREADY_PROCESSED,
            OrderOutcome.DELIVERY_FAILED,
            OrderOutcome.FAILED,
        }


@dataclass(frozen=True, slots=True)
class OrderReport:
    order_id: str
    order_number: str
    outcome: OrderOutcome


@dataclass(slots=True)
class CycleResult:
    """Outcome of one polling cycle.

    ``success`` is False only when the order source could not be queried; per-order
    problems are reported in ``reports`` and never fail the cycle.
    """

    success: bool
    window_start: datetime | None = None
    window_end: datetime | None = None
    fetched: int = 0
    reports: list[OrderReport] = field(default_factory=list["OrderReport"])
    error: str | None = None

    def count(self, outcome: OrderOutcome) -> int:
        return sum(1 for report in self.reports if report.outcome is outcome)

    def summary(self) -> dict[str, int]:
        return dict(Counter(report.outcome.value for report in self.reports))


class CycleAlreadyRunning(RuntimeError):
    """Raised when a cycle is started while another one is still in flight."""


class OrderReconciler:
    """Runs polling cycles: fetch, dedup, resolve design, notify, record."""

    def __init__(
        self,
        *,
        source: OrderSource,
        unit_of_work_factory: Callable[[], ReconciliationUnitOfWork],
        notifier: Notifier,
        lookback: timedelta = DEFAULT_LOOKBACK,
        clock: Clock = utcnow,
    ) -> None:
        self.source = source
        self.unit_of_work_factory = unit_of_work_factory
        self.notifier = notifier
        self.window = TimeWindow(lookback=lookback)
        self.clock = clock
        self._cycle_lock = threading.Lock()

    def run_cycle(self) -> CycleResult:
        if not self._cycle_lock.acquire(blocking=False):
            raise CycleAlreadyRunning("A reconciliation cycle is already running")
        try:
            return self._run_cycle()
        finally:
            self._cycle_lock.release()

    def _run_cycle(self) -> CycleResult:
        start, end = self.window.resolve(clock=self.clock)
        try:
            fetched = self.source(start=start, end=end)
        except SourceUnavailable as exc:
            log.error("Polling error: %s", exc)
            return CycleResult(success=False, window_start=start, window_end=end, error=str(exc))

        orders = list(fetched.orders)
        log.info(
            "Polled %s orders modified between %s and %s",
            len(orders),
            start.isoformat(),
            end.isoformat(),
        )

        result = CycleResult(success=True, window_start=start, window_end=end, fetched=len(orders))
        for order in orders:
            try:
                outcome = self.process_order(order)
            except Exception:  # noqa: BLE001
                # left unmarked, so it is retried while still inside the window
                log.exception("Failed to process order %s", order.label)
                outcome = OrderOutcome.FAILED
            result.reports.append(OrderReport(order.id, order.order_number, outcome))
        return result

    def process_order(self, order: Order) -> OrderOutcome:
        with self.unit_of_work_factory() as uow:
            repositories = uow.repositories
            if repositories.processed_orders.exists(order.id):
                log.info("Skipping processed order %s", order.label)
                return OrderOutcome.ALREADY_PROCESSED

            design_id = order.design_id
            if design_id is None:
                log.warning(
                    "No %s customization found for order %s", DESIGN_REFERENCE_LABEL, order.label
                )
                return self._mark_processed(uow, order, OrderOutcome.MISSING_REFERENCE)

            design = repositories.designs.find(design_id)
            if design is None:
                log.error(
                    "Design not found for %s: %s in order %s",
                    DESIGN_REFERENCE_LABEL,
                    design_id,
                    order.order_number,
                )
                return self._mark_processed(uow, order, OrderOutcome.MISSING_DESIGN)

            try:
                design.decode_image()
            except InvalidDesignPayload as exc:
                log.error("Unusable design for order %s: %s", order.order_number, exc)
                return self._mark_processed(uow, order, OrderOutcome.INVALID_DESIGN)

            try:
                self.notifier.send(order, design)
            except DeliveryFailed as exc:
                # left unmarked: only retried while still inside the lookback window
                log.error("Email sending failed for order %s: %s", order.order_number, exc)
                return OrderOutcome.DELIVERY_FAILED

            log.info("Email sent for order %s with attached design %s", order.label, design_id)
            return self._mark_processed(uow, order, OrderOutcome.NOTIFIED)

    @staticmethod
    def _mark_processed(
        uow: ReconciliationUnitOfWork,
        order: Order,
        outcome: OrderOutcome,
    ) -> OrderOutcome:
        try:
            uow.repositories.processed_orders.record(order.id)
            uow.commit()
        except DuplicateKey:
            uow.rollback()
            log.info("Order %s was already recorded as processed", order.label)
        return outcome


__all__ = [
    "DEFAULT_LOOKBACK",
    "CycleAlreadyRunning",
    "CycleResult",
    "OrderOutcome",
    "OrderReconciler",
    "OrderReport",
]
