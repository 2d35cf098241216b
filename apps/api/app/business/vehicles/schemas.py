from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class VehicleCreate(BaseModel):
    make: str = Field(min_length=1, max_length=128)
    model: str = Field(min_length=1, max_length=128)
    year: int = Field(ge=1886, le=2100)


class VehicleUpdate(VehicleCreate):
    pass


class VehicleRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    dealership_id: str
    make: str
    model: str
    year: int
    created_at: datetime
    updated_at: datetime
