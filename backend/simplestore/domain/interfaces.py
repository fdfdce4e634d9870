"""
Repository contracts.

Services depend on these abstractions, never on SQLAlchemy directly, so unit
tests can substitute ``Mock(spec=...)`` doubles for the concrete repositories.
"""

import datetime as dt
from abc import ABC, abstractmethod
from decimal import Decimal
from typing import Any, Dict, List, Optional

from .entities import Category, OrderLine, Product, User


# ------------------- USERS -------------------
class IUserReader(ABC):
    """Read operations for users."""

    @abstractmethod
    def get_by_id(self, user_id: int) -> Optional[User]:
        pass

    @abstractmethod
    def get_by_username(self, username: str) -> Optional[User]:
        pass

    @abstractmethod
    def get_password_hash(self, user_id: int) -> Optional[str]:
        pass

    @abstractmethod
    def list_notification_recipients(self) -> List[str]:
        """Email addresses of active admin/owner users."""
        pass


class IUserWriter(ABC):
    """Write operations for users."""

    @abstractmethod
    def create(self, user: User, password_hash: str) -> User:
        pass

    @abstractmethod
    def update(self, user: User) -> User:
        pass

    @abstractmethod
    def set_password_hash(self, user_id: int, password_hash: str) -> None:
        pass


class IUserRepository(IUserReader, IUserWriter):
    """Complete user repository interface."""


# ------------------- CATALOGUE -------------------
class ICategoryRepository(ABC):
    @abstractmethod
    def list_all(self) -> List[Category]:
        pass

    @abstractmethod
    def get_by_id(self, category_id: int) -> Optional[Category]:
        pass

    @abstractmethod
    def create(self, category: Category) -> Category:
        pass

    @abstractmethod
    def update(self, category: Category) -> Category:
        pass

    @abstractmethod
    def delete(self, category_id: int) -> None:
        pass


class IProductReader(ABC):
    """Read operations for products."""

    @abstractmethod
    def list_all(self) -> List[Product]:
        """Products with their category name, ordered by name."""
        pass

    @abstractmethod
    def get_by_id(self, product_id: int) -> Optional[Product]:
        pass

    @abstractmethod
    def list_low_stock(self, threshold: int) -> List[Product]:
        """Products with stock below ``threshold``, lowest stock first."""
        pass


class IProductWriter(ABC):
    """Write operations for products."""

    @abstractmethod
    def create(self, product: Product) -> Product:
        pass

    @abstractmethod
    def update(self, product: Product) -> Product:
        pass

    @abstractmethod
    def delete(self, product_id: int) -> None:
        pass


class IProductRepository(IProductReader, IProductWriter):
    """Complete product repository interface."""


class IContactRepository(ABC):
    """Shared contract of the customer and vendor repositories."""

    @abstractmethod
    def list_all(self) -> list:
        pass

    @abstractmethod
    def get_by_id(self, contact_id: int):
        pass

    @abstractmethod
    def create(self, contact):
        pass

    @abstractmethod
    def update(self, contact):
        pass

    @abstractmethod
    def delete(self, contact_id: int) -> None:
        pass


class ICustomerRepository(IContactRepository):
    """Customer persistence; entities are ``Customer``."""


class IVendorRepository(IContactRepository):
    """Vendor persistence; entities are ``Vendor``."""


# ------------------- STOCK DOCUMENTS -------------------
class IStockDocumentRepository(ABC):
    """Purchase orders, sales orders and returns.

    ``create`` and ``delete`` apply the document's stock movement in the same
    transaction as the document rows.
    """

    @abstractmethod
    def list_all(self) -> list:
        pass

    @abstractmethod
    def get_by_id(self, document_id: int):
        """Document with party and item products loaded, or None."""
        pass

    @abstractmethod
    def create(self, document, lines: List[OrderLine]):
        pass

    @abstractmethod
    def update_status(self, document_id: int, status: str):
        pass

    @abstractmethod
    def delete(self, document_id: int) -> None:
        pass


class IPurchaseOrderRepository(IStockDocumentRepository):
    """Entities are ``PurchaseOrder``; stock moves +qty on create."""


class ISalesOrderRepository(IStockDocumentRepository):
    """Entities are ``SalesOrder``; stock moves -qty on create."""


class IReturnRepository(IStockDocumentRepository):
    """Entities are ``ProductReturn``; stock moves +qty on create."""


# ------------------- REPORTING -------------------
class IReportRepository(ABC):
    """Aggregate queries backing reports and the dashboard."""

    @abstractmethod
    def open_purchase_orders(
        self, start: Optional[dt.date] = None, end: Optional[dt.date] = None
    ) -> List[Dict[str, Any]]:
        pass

    @abstractmethod
    def open_sales_orders(
        self, start: Optional[dt.date] = None, end: Optional[dt.date] = None
    ) -> List[Dict[str, Any]]:
        pass

    @abstractmethod
    def inventory_rows(self) -> List[Dict[str, Any]]:
        pass

    @abstractmethod
    def sales_total(self, start: dt.date, end: dt.date) -> Decimal:
        """Sum of sales totals with ``start <= date < end``."""
        pass

    @abstractmethod
    def cost_of_goods_sold(self, start: dt.date, end: dt.date) -> Decimal:
        pass

    @abstractmethod
    def returns_total(self, start: dt.date, end: dt.date) -> Decimal:
        pass

    @abstractmethod
    def monthly_sales(self, year: int) -> Dict[int, Decimal]:
        pass

    @abstractmethod
    def stock_summary(self) -> Dict[str, Any]:
        """``{"items": total units, "value": total cost value}``."""
        pass

    @abstractmethod
    def count_customers(self) -> int:
        pass

    @abstractmethod
    def count_vendors(self) -> int:
        pass

    @abstractmethod
    def recent_transactions(self, limit: int) -> List[Dict[str, Any]]:
        pass


# ------------------- SETTINGS -------------------
class ISettingsRepository(ABC):
    @abstractmethod
    def get(self, key: str) -> Optional[Dict[str, Any]]:
        pass

    @abstractmethod
    def save(self, key: str, value: Dict[str, Any]) -> Dict[str, Any]:
        pass


__all__ = [
    "IUserReader",
    "IUserWriter",
    "IUserRepository",
    "ICategoryRepository",
    "IProductReader",
    "IProductWriter",
    "IProductRepository",
    "IContactRepository",
    "ICustomerRepository",
    "IVendorRepository",
    "IStockDocumentRepository",
    "IPurchaseOrderRepository",
    "ISalesOrderRepository",
    "IReturnRepository",
    "IReportRepository",
    "ISettingsRepository",
]
