from __future__ import annotations

from sqlalchemy import ColumnElement
from sqlalchemy.orm import Session

from app.business.vehicles.models import Vehicle
from app.platform.security.repository import DealershipScopedRepository


class VehicleRepository(DealershipScopedRepository[Vehicle]):
    resource = "vehicle"
    model = Vehicle

    def find_by_criteria(
        self,
        session: Session,
        dealership_id: str,
        *,
        make: str | None = None,
        model: str | None = None,
        year: int | None = None,
    ) -> list[Vehicle]:
        criteria: list[ColumnElement[bool]] = []
        if make:
            criteria.append(Vehicle.make.contains(make, autoescape=True))
        if model:
            criteria.append(Vehicle.model.contains(model, autoescape=True))
        if year is not None:
            criteria.append(Vehicle.year == year)

        return self.find(
            session,
            dealership_id,
            *criteria,
            order_by=(Vehicle.make.asc(), Vehicle.model.asc(), Vehicle.year.desc()),
        )
