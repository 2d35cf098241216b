from __future__ import annotations

import logging
from dataclasses import dataclass

from fastapi import HTTPException, status
from sqlalchemy.orm import Session

from app import audit
from app.business.customers.repository import CustomerRepository
from app.business.customers.schemas import CustomerRead
from app.business.sales.repository import SaleRepository
from app.business.sales.schemas import SaleRead
from app.business.vehicles.repository import VehicleRepository
from app.business.vehicles.schemas import VehicleRead
from app.core.config import get_settings
from app.platform.dealership.detail import DealershipDetailRead
from app.platform.dealership.models import Dealership
from app.platform.dealership.repository import DealershipRepository
from app.platform.dealership.schemas import (
    DealershipCreate,
    DealershipRead,
    DealershipSummary,
    DealershipUpdate,
)
from app.platform.security.access import ScopedAccess, scoped_access
from app.platform.security.context import AuthContext
from app.platform.security.errors import AuthorizationError
from app.platform.security.hierarchy import HierarchyResolver


logger = logging.getLogger("app.dealership")

RESOURCE = "dealership"


def _forbidden(exc: AuthorizationError) -> HTTPException:
    return HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=str(exc))


def _snapshot(dealership: Dealership) -> dict[str, str | None]:
    return {
        "name": dealership.name,
        "address": dealership.address,
        "parent_dealership_id": dealership.parent_dealership_id,
    }


@dataclass(slots=True)
class DealershipService:
    repository: DealershipRepository = DealershipRepository()
    resolver: HierarchyResolver = HierarchyResolver()
    access: ScopedAccess = scoped_access
    customers: CustomerRepository = CustomerRepository()
    vehicles: VehicleRepository = VehicleRepository()
    sales: SaleRepository = SaleRepository()

    def list_dealerships(
        self,
        session: Session,
        ctx: AuthContext,
        *,
        dealership_id: str | None = None,
    ) -> list[DealershipRead]:
        """Return the target dealership and every dealership below it."""

        target = dealership_id or ctx.dealership_id
        try:
            rows = self.access.run_explicit(
                session,
                ctx,
                target,
                lambda effective_id: self.repository.list_by_ids(
                    session,
                    self.resolver.descendants_of(session, effective_id),
                ),
                resource=RESOURCE,
                action="list",
            )
        except AuthorizationError as exc:
            raise _forbidden(exc)

        logger.info(
            "dealership.listed",
            extra={"dealership_id": ctx.dealership_id, "target_dealership_id": target, "result_count": len(rows)},
        )
        return [DealershipRead.model_validate(row) for row in rows]

    def get_dealership(self, session: Session, ctx: AuthContext, dealership_id: str) -> DealershipDetailRead:
        """Return one dealership with its direct sub-dealerships and its own customers, vehicles and sales."""

        try:
            detail = self.access.run_explicit(
                session,
                ctx,
                dealership_id,
                lambda effective_id: self._load_detail(session, effective_id),
                resource=RESOURCE,
                action="read",
            )
        except AuthorizationError as exc:
            raise _forbidden(exc)

        if detail is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="dealership not found")
        return detail

    def _load_detail(self, session: Session, dealership_id: str) -> DealershipDetailRead | None:
        dealership = self.repository.get_by_id(session, dealership_id)
        if dealership is None:
            return None
        customers = self.customers.find_by_dealership(session, dealership_id)
        vehicles = self.vehicles.find_by_criteria(session, dealership_id)
        sales = self.sales.find_by_dealership(session, dealership_id)
        return DealershipDetailRead.model_validate(dealership).model_copy(
            update={
                "customers": [CustomerRead.model_validate(row) for row in customers],
                "vehicles": [VehicleRead.model_validate(row) for row in vehicles],
                "sales": [SaleRead.model_validate(row) for row in sales],
            }
        )

    def get_dealership_path(self, session: Session, ctx: AuthContext, dealership_id: str) -> list[DealershipSummary]:
        """Return the chain from ``dealership_id`` up to, and including, the caller's dealership.

        Ancestors above the caller are never exposed.
        """

        try:
            chain = self.access.run_explicit(
                session,
                ctx,
                dealership_id,
                lambda effective_id: self.resolver.ancestor_chain(session, effective_id),
                resource=RESOURCE,
                action="read",
            )
        except AuthorizationError as exc:
            raise _forbidden(exc)

        if not chain:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="dealership not found")

        path: list[DealershipSummary] = []
        for dealership in chain:
            path.append(DealershipSummary.model_validate(dealership))
            if dealership.id == ctx.dealership_id:
                break
        return path

    def create_dealership(self, session: Session, ctx: AuthContext, dto: DealershipCreate) -> DealershipRead:
        try:
            parent_id = self.access.resolve_dealership_id(
                session,
                ctx,
                dto.parent_dealership_id,
                resource=RESOURCE,
                action="create",
            )
        except AuthorizationError as exc:
            raise _forbidden(exc)

        if get_settings().dealership_enforce_tree_integrity and self.repository.get_by_id(session, parent_id) is None:
            raise HTTPException(status_code=422, detail="parent dealership not found")

        dealership = self.repository.create(session, name=dto.name, address=dto.address, parent_dealership_id=parent_id)
        audit.record(
            actor_dealership_id=ctx.dealership_id,
            entity_type="dealership",
            entity_id=dealership.id,
            action="dealership.created",
            before=None,
            after=_snapshot(dealership),
            correlation_id=ctx.correlation_id,
        )
        session.commit()
        session.refresh(dealership)

        logger.info(
            "dealership.created",
            extra={"dealership_id": dealership.id, "parent_dealership_id": parent_id},
        )
        return DealershipRead.model_validate(dealership)

    def update_dealership(
        self,
        session: Session,
        ctx: AuthContext,
        dealership_id: str,
        dto: DealershipUpdate,
    ) -> DealershipRead:
        try:
            self.access.validator.ensure_access(session, ctx, dealership_id, resource=RESOURCE, action="update")
        except AuthorizationError as exc:
            raise _forbidden(exc)

        existing = self.repository.get_by_id(session, dealership_id)
        if existing is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="dealership not found")
        before = _snapshot(existing)

        new_parent_id = dto.parent_dealership_id
        if new_parent_id is not None and new_parent_id != existing.parent_dealership_id:
            self._validate_reparent(session, ctx, dealership_id, new_parent_id)

        dealership = self.repository.update(
            session,
            dealership_id,
            name=dto.name,
            address=dto.address,
            parent_dealership_id=new_parent_id,
        )
        if dealership is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="dealership not found")

        after = _snapshot(dealership)
        audit.record(
            actor_dealership_id=ctx.dealership_id,
            entity_type="dealership",
            entity_id=dealership_id,
            action="dealership.reparented" if before["parent_dealership_id"] != after["parent_dealership_id"] else "dealership.updated",
            before=before,
            after=after,
            correlation_id=ctx.correlation_id,
        )
        session.commit()
        session.refresh(dealership)

        logger.info(
            "dealership.updated",
            extra={"dealership_id": dealership_id, "parent_dealership_id": dealership.parent_dealership_id},
        )
        return DealershipRead.model_validate(dealership)

    def _validate_reparent(self, session: Session, ctx: AuthContext, dealership_id: str, new_parent_id: str) -> None:
        try:
            self.access.validator.ensure_access(session, ctx, new_parent_id, resource=RESOURCE, action="reparent")
        except AuthorizationError as exc:
            raise _forbidden(exc)

        if not get_settings().dealership_enforce_tree_integrity:
            return

        if self.repository.get_by_id(session, new_parent_id) is None:
            raise HTTPException(status_code=422, detail="parent dealership not found")
        if new_parent_id in self.resolver.descendants_of(session, dealership_id):
            raise HTTPException(
                status_code=422,
                detail="dealership cannot be moved below itself or one of its sub-dealerships",
            )


dealership_service = DealershipService()
