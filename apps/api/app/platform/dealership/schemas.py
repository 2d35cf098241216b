from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class DealershipCreate(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    address: str = Field(min_length=1, max_length=512)
    parent_dealership_id: str | None = None


class DealershipUpdate(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    address: str = Field(min_length=1, max_length=512)
    parent_dealership_id: str | None = None


class DealershipSummary(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    address: str
    parent_dealership_id: str | None


class DealershipRead(DealershipSummary):
    created_at: datetime
    updated_at: datetime
    sub_dealerships: list[DealershipSummary] = Field(default_factory=list)


class DealershipTokenRead(BaseModel):
    token: str
    dealership_id: str
