from app.platform.dealership.models import Dealership
from app.platform.dealership.repository import DealershipRepository
from app.platform.dealership.schemas import (
    DealershipCreate,
    DealershipRead,
    DealershipSummary,
    DealershipTokenRead,
    DealershipUpdate,
)

__all__ = [
    "Dealership",
    "DealershipRepository",
    "DealershipCreate",
    "DealershipRead",
    "DealershipSummary",
    "DealershipTokenRead",
    "DealershipUpdate",
]
