from __future__ import annotations

import datetime as dt
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field

from app.business.customers.schemas import CustomerRead
from app.business.vehicles.schemas import VehicleRead


class SaleCreate(BaseModel):
    sale_date: dt.date
    purchase_net_amount: Decimal = Field(ge=Decimal("0"), max_digits=14, decimal_places=2)
    vehicle_id: str = Field(min_length=1)
    customer_id: str = Field(min_length=1)


class SaleUpdate(SaleCreate):
    pass


class SaleRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    dealership_id: str
    vehicle_id: str
    customer_id: str
    sale_date: dt.date
    purchase_net_amount: Decimal
    created_at: dt.datetime
    updated_at: dt.datetime
    vehicle: VehicleRead | None = None
    customer: CustomerRead | None = None
