from __future__ import annotations

import uuid
from datetime import datetime, timezone

from sqlalchemy import DateTime, ForeignKey, Index, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.core.database import Base


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def new_id() -> str:
    return str(uuid.uuid4())


class Dealership(Base):
    __tablename__ = "dealership"

    id: Mapped[str] = mapped_column(String(64), primary_key=True, default=new_id)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    address: Mapped[str] = mapped_column(String(512), nullable=False)
    parent_dealership_id: Mapped[str | None] = mapped_column(
        String(64),
        ForeignKey("dealership.id", ondelete="RESTRICT"),
        nullable=True,
    )
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)

    parent_dealership: Mapped[Dealership | None] = relationship(
        "Dealership",
        remote_side=[id],
        back_populates="sub_dealerships",
    )
    sub_dealerships: Mapped[list[Dealership]] = relationship(
        "Dealership",
        back_populates="parent_dealership",
        order_by="Dealership.name",
    )

    __table_args__ = (Index("ix_dealership_parent", "parent_dealership_id"),)
