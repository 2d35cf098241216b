from __future__ import annotations

from pydantic import Field

from app.business.customers.schemas import CustomerRead
from app.business.sales.schemas import SaleRead
from app.business.vehicles.schemas import VehicleRead
from app.platform.dealership.schemas import DealershipRead


# Not re-exported from the package: the business schemas import the security layer,
# which imports this package.
class DealershipDetailRead(DealershipRead):
    customers: list[CustomerRead] = Field(default_factory=list)
    vehicles: list[VehicleRead] = Field(default_factory=list)
    sales: list[SaleRead] = Field(default_factory=list)
