from __future__ import annotations

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from app.business.vehicles.schemas import VehicleCreate, VehicleRead, VehicleUpdate
from app.business.vehicles.service import vehicle_service
from app.core.auth import get_auth_context
from app.core.database import get_db
from app.platform.security.context import AuthContext


router = APIRouter(prefix="/api/vehicles", tags=["vehicles"])


@router.get("", response_model=list[VehicleRead])
def list_vehicles_by_criteria(
    make: str | None = Query(default=None),
    model: str | None = Query(default=None),
    year: int | None = Query(default=None),
    dealership_id: str | None = Query(default=None),
    db: Session = Depends(get_db),
    ctx: AuthContext = Depends(get_auth_context),
) -> list[VehicleRead]:
    return vehicle_service.list_vehicles_by_criteria(
        db,
        ctx,
        make=make,
        model=model,
        year=year,
        dealership_id=dealership_id,
    )


@router.get("/{vehicle_id}", response_model=VehicleRead)
def get_vehicle(
    vehicle_id: str,
    dealership_id: str | None = Query(default=None),
    db: Session = Depends(get_db),
    ctx: AuthContext = Depends(get_auth_context),
) -> VehicleRead:
    return vehicle_service.get_vehicle(db, ctx, vehicle_id, dealership_id=dealership_id)


@router.post("", response_model=VehicleRead, status_code=status.HTTP_201_CREATED)
def create_vehicle(
    payload: VehicleCreate,
    dealership_id: str | None = Query(default=None),
    db: Session = Depends(get_db),
    ctx: AuthContext = Depends(get_auth_context),
) -> VehicleRead:
    return vehicle_service.create_vehicle(db, ctx, payload, dealership_id=dealership_id)


@router.put("/{vehicle_id}", response_model=VehicleRead)
def update_vehicle(
    vehicle_id: str,
    payload: VehicleUpdate,
    dealership_id: str | None = Query(default=None),
    db: Session = Depends(get_db),
    ctx: AuthContext = Depends(get_auth_context),
) -> VehicleRead:
    return vehicle_service.update_vehicle(db, ctx, vehicle_id, payload, dealership_id=dealership_id)


@router.delete("/{vehicle_id}", response_model=VehicleRead)
def delete_vehicle(
    vehicle_id: str,
    dealership_id: str | None = Query(default=None),
    db: Session = Depends(get_db),
    ctx: AuthContext = Depends(get_auth_context),
) -> VehicleRead:
    return vehicle_service.delete_vehicle(db, ctx, vehicle_id, dealership_id=dealership_id)
