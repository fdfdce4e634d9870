"""
Domain package - Pure business logic layer.

This package contains:
- entities.py: Domain entities and the status/role vocabularies
- interfaces.py: Repository contracts
"""

from .entities import (
    Category,
    Customer,
    OrderLine,
    Product,
    ProductReturn,
    PurchaseOrder,
    SalesOrder,
    User,
    Vendor,
)
from .interfaces import (
    ICategoryRepository,
    ICustomerRepository,
    IProductRepository,
    IPurchaseOrderRepository,
    IReportRepository,
    IReturnRepository,
    ISalesOrderRepository,
    ISettingsRepository,
    IUserRepository,
    IVendorRepository,
)

__all__ = [
    # Domain entities
    "Category",
    "Customer",
    "OrderLine",
    "Product",
    "ProductReturn",
    "PurchaseOrder",
    "SalesOrder",
    "User",
    "Vendor",
    # Repository interfaces
    "ICategoryRepository",
    "ICustomerRepository",
    "IProductRepository",
    "IPurchaseOrderRepository",
    "IReportRepository",
    "IReturnRepository",
    "ISalesOrderRepository",
    "ISettingsRepository",
    "IUserRepository",
    "IVendorRepository",
]
