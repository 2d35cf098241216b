from __future__ import annotations

from collections.abc import Sequence
from typing import Any, ClassVar, Generic, TypeVar

from sqlalchemy import ColumnElement, select
from sqlalchemy.orm import Session
from sqlalchemy.sql import Select


ModelT = TypeVar("ModelT")


class DealershipScopedRepository(Generic[ModelT]):
    """Keyed storage for records owned by exactly one dealership.

    The dealership id is part of every lookup key, so a record stored under another
    dealership is indistinguishable from a missing one.
    """

    resource: ClassVar[str] = ""
    model: ClassVar[type[Any]]

    def scoped_query(self, dealership_id: str) -> Select[Any]:
        return select(self.model).where(self.model.dealership_id == dealership_id)

    def get(self, session: Session, record_id: str, dealership_id: str) -> ModelT | None:
        return session.scalar(self.scoped_query(dealership_id).where(self.model.id == record_id))

    def find(
        self,
        session: Session,
        dealership_id: str,
        *criteria: ColumnElement[bool],
        order_by: Sequence[Any] = (),
    ) -> list[ModelT]:
        stmt = self.scoped_query(dealership_id)
        for criterion in criteria:
            stmt = stmt.where(criterion)
        if order_by:
            stmt = stmt.order_by(*order_by)
        return list(session.scalars(stmt).all())

    def add(self, session: Session, record: ModelT) -> ModelT:
        session.add(record)
        session.flush()
        return record

    def update(self, session: Session, record_id: str, dealership_id: str, values: dict[str, Any]) -> ModelT | None:
        record = self.get(session, record_id, dealership_id)
        if record is None:
            return None
        for field_name, value in values.items():
            setattr(record, field_name, value)
        session.flush()
        return record

    def delete(self, session: Session, record_id: str, dealership_id: str) -> ModelT | None:
        record = self.get(session, record_id, dealership_id)
        if record is None:
            return None
        session.delete(record)
        return record
