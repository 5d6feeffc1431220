"""Application orchestration entry points."""

from __future__ import annotations

from collections.abc import Callable
from logging import getLogger
from typing import TYPE_CHECKING

from designrelay.adapters.mail import SmtpNotifier
from designrelay.adapters.orders import HttpOrderSource
from designrelay.adapters.sqlalchemy.unit_of_work import SqlAlchemyUnitOfWork, is_started, startup
from designrelay.config import PollingConfig, get_polling_config
from designrelay.domain.model import new_design
from designrelay.domain.ports.unit_of_work import ReconciliationUnitOfWork
from designrelay.domain.reconciliation import OrderReconciler
from designrelay.domain.scheduling import BackoffPolicy, PollingScheduler
from designrelay.domain.time_windows import utcnow

if TYPE_CHECKING:
    import threading

    from designrelay.domain.model import Design
    from designrelay.domain.ports import Notifier, OrderSource
    from designrelay.domain.reconciliation import CycleResult
    from designrelay.domain.time_windows import Clock

UnitOfWorkFactory = Callable[[], ReconciliationUnitOfWork]


log = getLogger(__name__)


def _ensure_storage(unit_of_work_factory: UnitOfWorkFactory | None) -> UnitOfWorkFactory:
    if unit_of_work_factory is not None:
        return unit_of_work_factory
    if not is_started():
        startup()
    return SqlAlchemyUnitOfWork


def build_reconciler(
    *,
    source: OrderSource | None = None,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
    notifier: Notifier | None = None,
    polling: PollingConfig | None = None,
    clock: Clock = utcnow,
) -> OrderReconciler:
    """Wire the reconciliation engine from configuration, honouring overrides."""

    effective_polling = polling or get_polling_config()
    return OrderReconciler(
        source=source or HttpOrderSource(),
        unit_of_work_factory=_ensure_storage(unit_of_work_factory),
        notifier=notifier or SmtpNotifier(),
        lookback=effective_polling.lookback,
        clock=clock,
    )


def poll_once(*, reconciler: OrderReconciler | None = None) -> CycleResult:
    """Run a single polling cycle and return its outcome."""

    effective_reconciler = reconciler or build_reconciler()
    result = effective_reconciler.run_cycle()
    log.info(
        "Finished polling cycle: success=%s, fetched=%s, outcomes=%s",
        result.success,
        result.fetched,
        result.summary(),
    )
    return result


def run_poller(
    *,
    reconciler: OrderReconciler | None = None,
    polling: PollingConfig | None = None,
    stop_event: threading.Event | None = None,
) -> PollingScheduler:
    """Poll until ``stop_event`` is set; returns the scheduler for inspection."""

    effective_polling = polling or get_polling_config()
    effective_reconciler = reconciler or build_reconciler(polling=effective_polling)
    scheduler = PollingScheduler(
        lambda: poll_once(reconciler=effective_reconciler),
        BackoffPolicy.from_config(effective_polling),
        stop_event=stop_event,
    )
    scheduler.run_forever()
    return scheduler


def save_design(
    *,
    design_id: str,
    image: str,
    template: str,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
) -> Design:
    """Validate and store a new design; raises ``DuplicateKey`` for a taken id."""

    design = new_design(design_id=design_id, image=image, template=template)
    with _ensure_storage(unit_of_work_factory)() as uow:
        uow.repositories.designs.add(design)
        uow.commit()
    log.info("Design saved successfully: %s", design.design_id)
    return design


def get_design(
    design_id: str,
    *,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
) -> Design:
    """Return a stored design or raise ``DesignNotFound``."""

    with _ensure_storage(unit_of_work_factory)() as uow:
        return uow.repositories.designs.get(design_id)
