from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal

from sqlalchemy import Date, DateTime, ForeignKey, Index, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.business.customers.models import Customer
from app.business.vehicles.models import Vehicle
from app.core.database import Base
from app.platform.dealership.models import new_id, utcnow


class Sale(Base):
    __tablename__ = "sale"

    id: Mapped[str] = mapped_column(String(64), primary_key=True, default=new_id)
    dealership_id: Mapped[str] = mapped_column(
        String(64),
        ForeignKey("dealership.id", ondelete="RESTRICT"),
        nullable=False,
    )
    vehicle_id: Mapped[str] = mapped_column(
        String(64),
        ForeignKey("vehicle.id", ondelete="RESTRICT"),
        nullable=False,
    )
    customer_id: Mapped[str] = mapped_column(
        String(64),
        ForeignKey("customer.id", ondelete="RESTRICT"),
        nullable=False,
    )
    sale_date: Mapped[date] = mapped_column(Date(), nullable=False)
    purchase_net_amount: Mapped[Decimal] = mapped_column(Numeric(14, 2), nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)

    vehicle: Mapped[Vehicle] = relationship(Vehicle)
    customer: Mapped[Customer] = relationship(Customer)

    __table_args__ = (
        Index("ix_sale_dealership_id", "dealership_id", "id"),
        Index("ix_sale_dealership_date", "dealership_id", "sale_date"),
    )
