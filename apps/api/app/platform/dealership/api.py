from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from app.core.auth import create_access_token, get_auth_context
from app.core.database import get_db
from app.platform.dealership.detail import DealershipDetailRead
from app.platform.dealership.repository import DealershipRepository
from app.platform.dealership.schemas import (
    DealershipCreate,
    DealershipRead,
    DealershipSummary,
    DealershipTokenRead,
    DealershipUpdate,
)
from app.platform.dealership.service import dealership_service
from app.platform.security.context import AuthContext


router = APIRouter(prefix="/api/dealerships", tags=["dealerships"])
auth_router = APIRouter(prefix="/api/auth", tags=["auth"])


@auth_router.post("/token/{dealership_id}", response_model=DealershipTokenRead)
def issue_token(dealership_id: str, db: Session = Depends(get_db)) -> DealershipTokenRead:
    if DealershipRepository().get_by_id(db, dealership_id) is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="dealership not found")
    return DealershipTokenRead(token=create_access_token(dealership_id), dealership_id=dealership_id)


@router.get("", response_model=list[DealershipRead])
def list_dealerships(
    dealership_id: str | None = Query(default=None),
    db: Session = Depends(get_db),
    ctx: AuthContext = Depends(get_auth_context),
) -> list[DealershipRead]:
    return dealership_service.list_dealerships(db, ctx, dealership_id=dealership_id)


@router.get("/{dealership_id}", response_model=DealershipDetailRead)
def get_dealership(
    dealership_id: str,
    db: Session = Depends(get_db),
    ctx: AuthContext = Depends(get_auth_context),
) -> DealershipDetailRead:
    return dealership_service.get_dealership(db, ctx, dealership_id)


@router.get("/{dealership_id}/path", response_model=list[DealershipSummary])
def get_dealership_path(
    dealership_id: str,
    db: Session = Depends(get_db),
    ctx: AuthContext = Depends(get_auth_context),
) -> list[DealershipSummary]:
    return dealership_service.get_dealership_path(db, ctx, dealership_id)


@router.post("", response_model=DealershipRead, status_code=status.HTTP_201_CREATED)
def create_dealership(
    payload: DealershipCreate,
    db: Session = Depends(get_db),
    ctx: AuthContext = Depends(get_auth_context),
) -> DealershipRead:
    return dealership_service.create_dealership(db, ctx, payload)


@router.put("/{dealership_id}", response_model=DealershipRead)
def update_dealership(
    dealership_id: str,
    payload: DealershipUpdate,
    db: Session = Depends(get_db),
    ctx: AuthContext = Depends(get_auth_context),
) -> DealershipRead:
    return dealership_service.update_dealership(db, ctx, dealership_id, payload)
