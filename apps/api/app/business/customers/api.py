from __future__ import annotations

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from app.business.customers.schemas import CustomerCreate, CustomerRead, CustomerUpdate
from app.business.customers.service import customer_service
from app.core.auth import get_auth_context
from app.core.database import get_db
from app.platform.security.context import AuthContext


router = APIRouter(prefix="/api/customers", tags=["customers"])


@router.get("", response_model=list[CustomerRead])
def list_customers_by_last_name(
    last_name: str = Query(min_length=1),
    dealership_id: str | None = Query(default=None),
    db: Session = Depends(get_db),
    ctx: AuthContext = Depends(get_auth_context),
) -> list[CustomerRead]:
    return customer_service.list_customers_by_last_name(db, ctx, last_name, dealership_id=dealership_id)


@router.get("/{customer_id}", response_model=CustomerRead)
def get_customer(
    customer_id: str,
    dealership_id: str | None = Query(default=None),
    db: Session = Depends(get_db),
    ctx: AuthContext = Depends(get_auth_context),
) -> CustomerRead:
    return customer_service.get_customer(db, ctx, customer_id, dealership_id=dealership_id)


@router.post("", response_model=CustomerRead, status_code=status.HTTP_201_CREATED)
def create_customer(
    payload: CustomerCreate,
    dealership_id: str | None = Query(default=None),
    db: Session = Depends(get_db),
    ctx: AuthContext = Depends(get_auth_context),
) -> CustomerRead:
    return customer_service.create_customer(db, ctx, payload, dealership_id=dealership_id)


@router.put("/{customer_id}", response_model=CustomerRead)
def update_customer(
    customer_id: str,
    payload: CustomerUpdate,
    dealership_id: str | None = Query(default=None),
    db: Session = Depends(get_db),
    ctx: AuthContext = Depends(get_auth_context),
) -> CustomerRead:
    return customer_service.update_customer(db, ctx, customer_id, payload, dealership_id=dealership_id)


@router.delete("/{customer_id}", response_model=CustomerRead)
def delete_customer(
    customer_id: str,
    dealership_id: str | None = Query(default=None),
    db: Session = Depends(get_db),
    ctx: AuthContext = Depends(get_auth_context),
) -> CustomerRead:
    return customer_service.delete_customer(db, ctx, customer_id, dealership_id=dealership_id)
