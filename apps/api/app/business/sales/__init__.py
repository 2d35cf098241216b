from app.business.sales.api import router
from app.business.sales.models import Sale
from app.business.sales.repository import SaleRepository
from app.business.sales.schemas import SaleCreate, SaleRead, SaleUpdate
from app.business.sales.service import SaleService, sale_service

__all__ = [
    "router",
    "Sale",
    "SaleRepository",
    "SaleCreate",
    "SaleRead",
    "SaleUpdate",
    "SaleService",
    "sale_service",
]
