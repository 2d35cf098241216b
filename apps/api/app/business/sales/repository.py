from __future__ import annotations

from sqlalchemy.orm import Session

from app.business.sales.models import Sale
from app.platform.security.repository import DealershipScopedRepository


class SaleRepository(DealershipScopedRepository[Sale]):
    resource = "sale"
    model = Sale

    def find_by_dealership(self, session: Session, dealership_id: str) -> list[Sale]:
        return self.find(session, dealership_id, order_by=(Sale.sale_date.desc(), Sale.created_at.desc()))
