from app.business.customers.models import Customer
from app.business.sales.models import Sale
from app.business.vehicles.models import Vehicle
from app.platform.dealership.models import Dealership

__all__ = [
	"Customer",
	"Dealership",
	"Sale",
	"Vehicle",
]
