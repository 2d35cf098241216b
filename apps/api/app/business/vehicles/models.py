from __future__ import annotations

from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, Index, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from app.core.database import Base
from app.platform.dealership.models import new_id, utcnow


class Vehicle(Base):
    __tablename__ = "vehicle"

    id: Mapped[str] = mapped_column(String(64), primary_key=True, default=new_id)
    dealership_id: Mapped[str] = mapped_column(
        String(64),
        ForeignKey("dealership.id", ondelete="RESTRICT"),
        nullable=False,
    )
    make: Mapped[str] = mapped_column(String(128), nullable=False)
    model: Mapped[str] = mapped_column(String(128), nullable=False)
    year: Mapped[int] = mapped_column(Integer, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)

    __table_args__ = (
        Index("ix_vehicle_dealership_id", "dealership_id", "id"),
        Index("ix_vehicle_dealership_make_model", "dealership_id", "make", "model"),
    )
