from __future__ import annotations

from sqlalchemy.orm import Session

from app.business.customers.models import Customer
from app.platform.security.repository import DealershipScopedRepository


class CustomerRepository(DealershipScopedRepository[Customer]):
    resource = "customer"
    model = Customer

    def find_by_last_name(self, session: Session, dealership_id: str, last_name: str) -> list[Customer]:
        return self.find(
            session,
            dealership_id,
            Customer.last_name.contains(last_name, autoescape=True),
            order_by=(Customer.last_name.asc(), Customer.first_name.asc()),
        )

    def find_by_dealership(self, session: Session, dealership_id: str) -> list[Customer]:
        return self.find(session, dealership_id, order_by=(Customer.last_name.asc(), Customer.first_name.asc()))
