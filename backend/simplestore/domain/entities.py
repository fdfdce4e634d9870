"""
Domain entities - Pure business logic, no framework dependencies.

Repositories map SQLAlchemy rows to these dataclasses; services and
controllers only ever see the domain representation.
"""

import datetime as dt
from dataclasses import dataclass, field
from decimal import Decimal
from typing import List, Optional

USER_ROLES = ("admin", "cashier", "warehouse", "owner")
LANGUAGES = ("en", "id")
PURCHASE_STATUSES = ("pending", "partial", "completed", "cancelled")
PAYMENT_STATUSES = ("unpaid", "partial", "paid")
RETURN_STATUSES = ("pending", "processing", "completed", "rejected")

# Statuses that still carry an outstanding balance
OPEN_PURCHASE_STATUSES = ("pending", "partial")
OPEN_PAYMENT_STATUSES = ("unpaid", "partial")


@dataclass
class User:
    """Domain entity representing a staff account (password hash excluded)."""

    id: Optional[int] = None
    username: str = ""
    full_name: str = ""
    email: Optional[str] = None
    role: str = "cashier"
    language: str = "en"
    is_active: bool = True
    created_at: Optional[dt.datetime] = None

    def __post_init__(self):
        """Validate domain rules."""
        if not self.username:
            raise ValueError("Username is required")
        if self.role not in USER_ROLES:
            raise ValueError(f"Invalid role: {self.role}")
        if self.language not in LANGUAGES:
            raise ValueError(f"Invalid language: {self.language}")


@dataclass
class Category:
    id: Optional[int] = None
    name: str = ""
    description: Optional[str] = None
    created_at: Optional[dt.datetime] = None

    def __post_init__(self):
        if not self.name:
            raise ValueError("Category name is required")


@dataclass
class Product:
    """Domain entity for a stocked product."""

    id: Optional[int] = None
    code: str = ""
    name: str = ""
    category_id: Optional[int] = None
    cost_price: Decimal = Decimal("0.00")
    sell_price: Decimal = Decimal("0.00")
    stock: int = 0
    category_name: Optional[str] = None
    last_updated: Optional[dt.datetime] = None
    created_at: Optional[dt.datetime] = None

    def __post_init__(self):
        """Validate business rules."""
        if not self.code:
            raise ValueError("Product code is required")
        if not self.name:
            raise ValueError("Product name is required")
        if self.stock < 0:
            raise ValueError("Stock cannot be negative")
        if self.cost_price < 0 or self.sell_price < 0:
            raise ValueError("Prices cannot be negative")


@dataclass
class Contact:
    """Shared shape of customers and vendors."""

    id: Optional[int] = None
    code: str = ""
    name: str = ""
    phone: Optional[str] = None
    address: Optional[str] = None
    created_at: Optional[dt.datetime] = None

    def __post_init__(self):
        if not self.code:
            raise ValueError("Code is required")
        if not self.name:
            raise ValueError("Name is required")


@dataclass
class Customer(Contact):
    pass


@dataclass
class Vendor(Contact):
    pass


@dataclass
class OrderLine:
    """One product line of a purchase order, sales order or return."""

    product_id: int = 0
    quantity: int = 0
    price: Decimal = Decimal("0.00")
    id: Optional[int] = None
    product: Optional[Product] = None

    def __post_init__(self):
        if self.quantity <= 0:
            raise ValueError("Quantity must be positive")
        if self.price < 0:
            raise ValueError("Price cannot be negative")

    @property
    def total(self) -> Decimal:
        return (self.price * self.quantity).quantize(Decimal("0.01"))


def lines_total(lines: List[OrderLine]) -> Decimal:
    return sum((line.total for line in lines), Decimal("0.00"))


@dataclass
class PurchaseOrder:
    id: Optional[int] = None
    order_number: Optional[str] = None
    vendor_id: int = 0
    date: Optional[dt.date] = None
    total_amount: Decimal = Decimal("0.00")
    status: str = "pending"
    due_date: Optional[dt.date] = None
    notes: Optional[str] = None
    created_by: Optional[int] = None
    created_at: Optional[dt.datetime] = None
    vendor: Optional[Vendor] = None
    items: List[OrderLine] = field(default_factory=list)

    def __post_init__(self):
        if self.status not in PURCHASE_STATUSES:
            raise ValueError(f"Invalid purchase status: {self.status}")


@dataclass
class SalesOrder:
    id: Optional[int] = None
    order_number: Optional[str] = None
    customer_id: int = 0
    date: Optional[dt.date] = None
    total_amount: Decimal = Decimal("0.00")
    payment_status: str = "unpaid"
    due_date: Optional[dt.date] = None
    notes: Optional[str] = None
    created_by: Optional[int] = None
    created_at: Optional[dt.datetime] = None
    customer: Optional[Customer] = None
    items: List[OrderLine] = field(default_factory=list)

    def __post_init__(self):
        if self.payment_status not in PAYMENT_STATUSES:
            raise ValueError(f"Invalid payment status: {self.payment_status}")


@dataclass
class ProductReturn:
    id: Optional[int] = None
    return_number: Optional[str] = None
    customer_id: int = 0
    sales_order_id: Optional[int] = None
    date: Optional[dt.date] = None
    total_amount: Decimal = Decimal("0.00")
    status: str = "pending"
    notes: Optional[str] = None
    created_by: Optional[int] = None
    created_at: Optional[dt.datetime] = None
    customer: Optional[Customer] = None
    items: List[OrderLine] = field(default_factory=list)

    def __post_init__(self):
        if self.status not in RETURN_STATUSES:
            raise ValueError(f"Invalid return status: {self.status}")
