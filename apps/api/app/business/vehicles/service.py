from __future__ import annotations

import logging
from dataclasses import dataclass

from fastapi import HTTPException, status
from sqlalchemy.orm import Session

from app.business.scoping import commit_or_conflict, run_scoped
from app.business.vehicles.models import Vehicle
from app.business.vehicles.repository import VehicleRepository
from app.business.vehicles.schemas import VehicleCreate, VehicleRead, VehicleUpdate
from app.platform.security.access import ScopedAccess, scoped_access
from app.platform.security.context import AuthContext


logger = logging.getLogger("app.vehicles")


@dataclass(slots=True)
class VehicleService:
    repository: VehicleRepository = VehicleRepository()
    access: ScopedAccess = scoped_access

    def create_vehicle(
        self,
        session: Session,
        ctx: AuthContext,
        dto: VehicleCreate,
        *,
        dealership_id: str | None = None,
    ) -> VehicleRead:
        vehicle = run_scoped(
            self.access,
            session,
            ctx,
            dealership_id,
            lambda effective_id: self.repository.add(
                session,
                Vehicle(dealership_id=effective_id, **dto.model_dump(mode="python")),
            ),
            resource=self.repository.resource,
            action="create",
        )
        commit_or_conflict(session, "vehicle conflict")
        session.refresh(vehicle)

        logger.info("vehicle.created", extra={"dealership_id": vehicle.dealership_id})
        return VehicleRead.model_validate(vehicle)

    def get_vehicle(
        self,
        session: Session,
        ctx: AuthContext,
        vehicle_id: str,
        *,
        dealership_id: str | None = None,
    ) -> VehicleRead:
        vehicle = run_scoped(
            self.access,
            session,
            ctx,
            dealership_id,
            lambda effective_id: self.repository.get(session, vehicle_id, effective_id),
            resource=self.repository.resource,
            action="read",
        )
        if vehicle is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="vehicle not found")
        return VehicleRead.model_validate(vehicle)

    def list_vehicles_by_criteria(
        self,
        session: Session,
        ctx: AuthContext,
        *,
        make: str | None = None,
        model: str | None = None,
        year: int | None = None,
        dealership_id: str | None = None,
    ) -> list[VehicleRead]:
        rows = run_scoped(
            self.access,
            session,
            ctx,
            dealership_id,
            lambda effective_id: self.repository.find_by_criteria(
                session,
                effective_id,
                make=make,
                model=model,
                year=year,
            ),
            resource=self.repository.resource,
            action="list",
        )
        return [VehicleRead.model_validate(row) for row in rows]

    def update_vehicle(
        self,
        session: Session,
        ctx: AuthContext,
        vehicle_id: str,
        dto: VehicleUpdate,
        *,
        dealership_id: str | None = None,
    ) -> VehicleRead:
        vehicle = run_scoped(
            self.access,
            session,
            ctx,
            dealership_id,
            lambda effective_id: self.repository.update(
                session,
                vehicle_id,
                effective_id,
                dto.model_dump(mode="python"),
            ),
            resource=self.repository.resource,
            action="update",
        )
        if vehicle is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="vehicle not found")
        commit_or_conflict(session, "vehicle conflict")
        session.refresh(vehicle)

        logger.info("vehicle.updated", extra={"dealership_id": vehicle.dealership_id})
        return VehicleRead.model_validate(vehicle)

    def delete_vehicle(
        self,
        session: Session,
        ctx: AuthContext,
        vehicle_id: str,
        *,
        dealership_id: str | None = None,
    ) -> VehicleRead:
        vehicle = run_scoped(
            self.access,
            session,
            ctx,
            dealership_id,
            lambda effective_id: self.repository.delete(session, vehicle_id, effective_id),
            resource=self.repository.resource,
            action="delete",
        )
        if vehicle is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="vehicle not found")

        deleted = VehicleRead.model_validate(vehicle)
        commit_or_conflict(session, "vehicle has sales and cannot be deleted")

        logger.info("vehicle.deleted", extra={"dealership_id": deleted.dealership_id})
        return deleted


vehicle_service = VehicleService()
