from __future__ import annotations

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from app.business.sales.schemas import SaleCreate, SaleRead, SaleUpdate
from app.business.sales.service import sale_service
from app.core.auth import get_auth_context
from app.core.database import get_db
from app.platform.security.context import AuthContext


router = APIRouter(prefix="/api/sales", tags=["sales"])


@router.get("", response_model=list[SaleRead])
def list_sales_by_dealership(
    dealership_id: str = Query(min_length=1),
    db: Session = Depends(get_db),
    ctx: AuthContext = Depends(get_auth_context),
) -> list[SaleRead]:
    return sale_service.list_sales_by_dealership(db, ctx, dealership_id)


@router.get("/{sale_id}", response_model=SaleRead)
def get_sale(
    sale_id: str,
    dealership_id: str | None = Query(default=None),
    db: Session = Depends(get_db),
    ctx: AuthContext = Depends(get_auth_context),
) -> SaleRead:
    return sale_service.get_sale(db, ctx, sale_id, dealership_id=dealership_id)


@router.post("", response_model=SaleRead, status_code=status.HTTP_201_CREATED)
def create_sale(
    payload: SaleCreate,
    dealership_id: str | None = Query(default=None),
    db: Session = Depends(get_db),
    ctx: AuthContext = Depends(get_auth_context),
) -> SaleRead:
    return sale_service.create_sale(db, ctx, payload, dealership_id=dealership_id)


@router.put("/{sale_id}", response_model=SaleRead)
def update_sale(
    sale_id: str,
    payload: SaleUpdate,
    dealership_id: str | None = Query(default=None),
    db: Session = Depends(get_db),
    ctx: AuthContext = Depends(get_auth_context),
) -> SaleRead:
    return sale_service.update_sale(db, ctx, sale_id, payload, dealership_id=dealership_id)


@router.delete("/{sale_id}", response_model=SaleRead)
def delete_sale(
    sale_id: str,
    dealership_id: str | None = Query(default=None),
    db: Session = Depends(get_db),
    ctx: AuthContext = Depends(get_auth_context),
) -> SaleRead:
    return sale_service.delete_sale(db, ctx, sale_id, dealership_id=dealership_id)
