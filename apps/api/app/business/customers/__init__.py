from app.business.customers.api import router
from app.business.customers.models import Customer
from app.business.customers.repository import CustomerRepository
from app.business.customers.schemas import CustomerCreate, CustomerRead, CustomerUpdate
from app.business.customers.service import CustomerService, customer_service

__all__ = [
    "router",
    "Customer",
    "CustomerRepository",
    "CustomerCreate",
    "CustomerRead",
    "CustomerUpdate",
    "CustomerService",
    "customer_service",
]
