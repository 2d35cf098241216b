from __future__ import annotations

import logging
from dataclasses import dataclass

from fastapi import HTTPException, status
from sqlalchemy.orm import Session

from app.business.customers.repository import CustomerRepository
from app.business.sales.models import Sale
from app.business.sales.repository import SaleRepository
from app.business.sales.schemas import SaleCreate, SaleRead, SaleUpdate
from app.business.scoping import commit_or_conflict, run_scoped
from app.business.vehicles.repository import VehicleRepository
from app.platform.security.access import ScopedAccess, scoped_access
from app.platform.security.context import AuthContext


logger = logging.getLogger("app.sales")


@dataclass(slots=True)
class SaleService:
    repository: SaleRepository = SaleRepository()
    vehicle_repository: VehicleRepository = VehicleRepository()
    customer_repository: CustomerRepository = CustomerRepository()
    access: ScopedAccess = scoped_access

    def _ensure_references(self, session: Session, dealership_id: str, dto: SaleCreate) -> None:
        # Sales only link records owned by the same dealership.
        if self.vehicle_repository.get(session, dto.vehicle_id, dealership_id) is None:
            raise HTTPException(status_code=422, detail="vehicle not found in dealership")
        if self.customer_repository.get(session, dto.customer_id, dealership_id) is None:
            raise HTTPException(status_code=422, detail="customer not found in dealership")

    def create_sale(
        self,
        session: Session,
        ctx: AuthContext,
        dto: SaleCreate,
        *,
        dealership_id: str | None = None,
    ) -> SaleRead:
        def _create(effective_id: str) -> Sale:
            self._ensure_references(session, effective_id, dto)
            return self.repository.add(session, Sale(dealership_id=effective_id, **dto.model_dump(mode="python")))

        sale = run_scoped(
            self.access,
            session,
            ctx,
            dealership_id,
            _create,
            resource=self.repository.resource,
            action="create",
        )
        commit_or_conflict(session, "sale conflict")
        session.refresh(sale)

        logger.info("sale.created", extra={"dealership_id": sale.dealership_id})
        return SaleRead.model_validate(sale)

    def get_sale(
        self,
        session: Session,
        ctx: AuthContext,
        sale_id: str,
        *,
        dealership_id: str | None = None,
    ) -> SaleRead:
        sale = run_scoped(
            self.access,
            session,
            ctx,
            dealership_id,
            lambda effective_id: self.repository.get(session, sale_id, effective_id),
            resource=self.repository.resource,
            action="read",
        )
        if sale is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="sale not found")
        return SaleRead.model_validate(sale)

    def list_sales_by_dealership(self, session: Session, ctx: AuthContext, dealership_id: str) -> list[SaleRead]:
        rows = run_scoped(
            self.access,
            session,
            ctx,
            dealership_id,
            lambda effective_id: self.repository.find_by_dealership(session, effective_id),
            resource=self.repository.resource,
            action="list",
            explicit=True,
        )
        return [SaleRead.model_validate(row) for row in rows]

    def update_sale(
        self,
        session: Session,
        ctx: AuthContext,
        sale_id: str,
        dto: SaleUpdate,
        *,
        dealership_id: str | None = None,
    ) -> SaleRead:
        def _update(effective_id: str) -> Sale | None:
            if self.repository.get(session, sale_id, effective_id) is None:
                return None
            self._ensure_references(session, effective_id, dto)
            return self.repository.update(session, sale_id, effective_id, dto.model_dump(mode="python"))

        sale = run_scoped(
            self.access,
            session,
            ctx,
            dealership_id,
            _update,
            resource=self.repository.resource,
            action="update",
        )
        if sale is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="sale not found")
        commit_or_conflict(session, "sale conflict")
        session.refresh(sale)

        logger.info("sale.updated", extra={"dealership_id": sale.dealership_id})
        return SaleRead.model_validate(sale)

    def delete_sale(
        self,
        session: Session,
        ctx: AuthContext,
        sale_id: str,
        *,
        dealership_id: str | None = None,
    ) -> SaleRead:
        sale = run_scoped(
            self.access,
            session,
            ctx,
            dealership_id,
            lambda effective_id: self.repository.delete(session, sale_id, effective_id),
            resource=self.repository.resource,
            action="delete",
        )
        if sale is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="sale not found")

        deleted = SaleRead.model_validate(sale)
        commit_or_conflict(session, "sale conflict")

        logger.info("sale.deleted", extra={"dealership_id": deleted.dealership_id})
        return deleted


sale_service = SaleService()
