from app.business.vehicles.api import router
from app.business.vehicles.models import Vehicle
from app.business.vehicles.repository import VehicleRepository
from app.business.vehicles.schemas import VehicleCreate, VehicleRead, VehicleUpdate
from app.business.vehicles.service import VehicleService, vehicle_service

__all__ = [
    "router",
    "Vehicle",
    "VehicleRepository",
    "VehicleCreate",
    "VehicleRead",
    "VehicleUpdate",
    "VehicleService",
    "vehicle_service",
]
