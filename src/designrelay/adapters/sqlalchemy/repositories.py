"""Repository implementations backed by SQLAlchemy sessions."""

from __future__ import annotations

from typing import TYPE_CHECKING, cast

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError

from designrelay.adapters.sqlalchemy.mappings import design_table, processed_order_table
from designrelay.domain.errors import DesignNotFound, DuplicateKey
from designrelay.domain.model import Design, ProcessedOrder

if TYPE_CHECKING:
    from sqlalchemy.orm import Session


class SqlAlchemyProcessedOrderRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def exists(self, order_id: str) -> bool:
        stmt = (
            select(processed_order_table.c.id)
            .where(processed_order_table.c.order_id == order_id)
            .limit(1)
        )
        return self.session.execute(stmt).first() is not None

    def record(self, order_id: str) -> None:
        self.session.add(ProcessedOrder(order_id=order_id))
        try:
            self.session.flush()
        except IntegrityError as exc:
            raise DuplicateKey(order_id) from exc


class SqlAlchemyDesignRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def find(self, design_id: str) -> Design | None:
        stmt = select(Design).where(design_table.c.design_id == design_id).limit(1)
        return self.session.execute(stmt).scalar_one_or_none()

    def get(self, design_id: str) -> Design:
        design = self.find(design_id)
        if design is None:
            raise DesignNotFound(design_id)
        return design

    def add(self, design: Design) -> None:
        if self.find(design.design_id) is not None:
            raise DuplicateKey(design.design_id)
        self.session.add(design)
        try:
            self.session.flush()
        except IntegrityError as exc:
            raise DuplicateKey(design.design_id) from exc


if TYPE_CHECKING:
    from designrelay.domain.ports.persistence import DesignRepository, ProcessedOrderRepository

    _session_stub = cast("Session", object())
    _ledger_check: ProcessedOrderRepository = SqlAlchemyProcessedOrderRepository(_session_stub)
    _design_check: DesignRepository = SqlAlchemyDesignRepository(_session_stub)
