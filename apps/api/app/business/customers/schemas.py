from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class CustomerCreate(BaseModel):
    first_name: str = Field(min_length=1, max_length=128)
    last_name: str = Field(min_length=1, max_length=128)
    email: str = Field(min_length=3, max_length=255)
    phone: str = Field(min_length=1, max_length=64)


class CustomerUpdate(CustomerCreate):
    pass


class CustomerRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    dealership_id: str
    first_name: str
    last_name: str
    email: str
    phone: str
    created_at: datetime
    updated_at: datetime
