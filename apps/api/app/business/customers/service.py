from __future__ import annotations

import logging
from dataclasses import dataclass

from fastapi import HTTPException, status
from sqlalchemy.orm import Session

from app.business.customers.models import Customer
from app.business.customers.repository import CustomerRepository
from app.business.customers.schemas import CustomerCreate, CustomerRead, CustomerUpdate
from app.business.scoping import commit_or_conflict, run_scoped
from app.platform.security.access import ScopedAccess, scoped_access
from app.platform.security.context import AuthContext


logger = logging.getLogger("app.customers")


@dataclass(slots=True)
class CustomerService:
    repository: CustomerRepository = CustomerRepository()
    access: ScopedAccess = scoped_access

    def create_customer(
        self,
        session: Session,
        ctx: AuthContext,
        dto: CustomerCreate,
        *,
        dealership_id: str | None = None,
    ) -> CustomerRead:
        customer = run_scoped(
            self.access,
            session,
            ctx,
            dealership_id,
            lambda effective_id: self.repository.add(
                session,
                Customer(dealership_id=effective_id, **dto.model_dump(mode="python")),
            ),
            resource=self.repository.resource,
            action="create",
        )
        commit_or_conflict(session, "customer conflict")
        session.refresh(customer)

        logger.info("customer.created", extra={"dealership_id": customer.dealership_id})
        return CustomerRead.model_validate(customer)

    def get_customer(
        self,
        session: Session,
        ctx: AuthContext,
        customer_id: str,
        *,
        dealership_id: str | None = None,
    ) -> CustomerRead:
        customer = run_scoped(
            self.access,
            session,
            ctx,
            dealership_id,
            lambda effective_id: self.repository.get(session, customer_id, effective_id),
            resource=self.repository.resource,
            action="read",
        )
        if customer is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="customer not found")
        return CustomerRead.model_validate(customer)

    def list_customers_by_last_name(
        self,
        session: Session,
        ctx: AuthContext,
        last_name: str,
        *,
        dealership_id: str | None = None,
    ) -> list[CustomerRead]:
        rows = run_scoped(
            self.access,
            session,
            ctx,
            dealership_id,
            lambda effective_id: self.repository.find_by_last_name(session, effective_id, last_name),
            resource=self.repository.resource,
            action="list",
        )
        return [CustomerRead.model_validate(row) for row in rows]

    def update_customer(
        self,
        session: Session,
        ctx: AuthContext,
        customer_id: str,
        dto: CustomerUpdate,
        *,
        dealership_id: str | None = None,
    ) -> CustomerRead:
        customer = run_scoped(
            self.access,
            session,
            ctx,
            dealership_id,
            lambda effective_id: self.repository.update(
                session,
                customer_id,
                effective_id,
                dto.model_dump(mode="python"),
            ),
            resource=self.repository.resource,
            action="update",
        )
        if customer is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="customer not found")
        commit_or_conflict(session, "customer conflict")
        session.refresh(customer)

        logger.info("customer.updated", extra={"dealership_id": customer.dealership_id})
        return CustomerRead.model_validate(customer)

    def delete_customer(
        self,
        session: Session,
        ctx: AuthContext,
        customer_id: str,
        *,
        dealership_id: str | None = None,
    ) -> CustomerRead:
        customer = run_scoped(
            self.access,
            session,
            ctx,
            dealership_id,
            lambda effective_id: self.repository.delete(session, customer_id, effective_id),
            resource=self.repository.resource,
            action="delete",
        )
        if customer is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="customer not found")

        deleted = CustomerRead.model_validate(customer)
        commit_or_conflict(session, "customer has sales and cannot be deleted")

        logger.info("customer.deleted", extra={"dealership_id": deleted.dealership_id})
        return deleted


customer_service = CustomerService()
