"""
Data Transfer Objects (DTOs) and validation schemas.

Request DTOs are built with ``from_dict`` which validates the camelCase JSON
payload, collects every problem in a ``ValidationResult`` and raises
``ValidationError`` (HTTP 400) when anything is wrong. Update requests are
partial: only the keys present in the payload end up in ``changes()``.

Response helpers turn domain entities into camelCase dicts with JSON-native
values (money as numbers, dates as ISO strings).
"""

import dataclasses
import datetime as dt
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Dict, List, Optional, Set

from simplestore.core.config import today
from simplestore.core.validation import BaseValidator, ValidationResult
from simplestore.domain.entities import (
    LANGUAGES,
    PAYMENT_STATUSES,
    PURCHASE_STATUSES,
    RETURN_STATUSES,
    USER_ROLES,
    OrderLine,
    ProductReturn,
    PurchaseOrder,
    SalesOrder,
)

MAX_MONEY = Decimal("9999999999.99")
BACKUP_FREQUENCIES = ("daily", "weekly", "monthly")

V = BaseValidator


# ------------------- serialisation helpers -------------------


def to_camel(name: str) -> str:
    head, *tail = name.split("_")
    return head + "".join(part.title() for part in tail)


def to_json_value(value: Any) -> Any:
    """Convert Decimal/date/datetime (recursively) to JSON-native values."""
    if isinstance(value, Decimal):
        return float(value)
    if isinstance(value, (dt.datetime, dt.date)):
        return value.isoformat()
    if isinstance(value, dict):
        return {to_camel(str(k)): to_json_value(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [to_json_value(v) for v in value]
    return value


def camelize(data: Dict[str, Any]) -> Dict[str, Any]:
    return to_json_value(dict(data))


def _required(data: dict, key: str, partial: bool) -> bool:
    """A field is required on create, and may not be blanked on update."""
    return not partial or key in data


def _supplied(data: dict, mapping: Dict[str, str]) -> Set[str]:
    return {snake for camel, snake in mapping.items() if camel in data}


def _required_value(
    data: dict, key: str, result: ValidationResult, required: bool
) -> bool:
    if not required:
        return True
    return V.validate_required_field(data.get(key), key, result)


class _PartialRequest:
    """Mixin for request DTOs that support partial updates."""

    supplied: Set[str]

    def changes(self) -> Dict[str, Any]:
        return {name: getattr(self, name) for name in self.supplied}


# ------------------- catalogue -------------------

CATEGORY_FIELDS = {"name": "name", "description": "description"}


@dataclass
class CategoryRequest(_PartialRequest):
    """DTO for category create/update requests."""

    name: Optional[str] = None
    description: Optional[str] = None
    supplied: Set[str] = field(default_factory=set, repr=False)

    @classmethod
    def from_dict(cls, data: dict, partial: bool = False) -> "CategoryRequest":
        result = ValidationResult()
        dto = cls(
            name=V.validate_string(
                data.get("name"),
                "name",
                result,
                required=_required(data, "name", partial),
                max_length=100,
            ),
            description=V.validate_string(
                data.get("description"), "description", result
            ),
            supplied=_supplied(data, CATEGORY_FIELDS),
        )
        result.raise_if_invalid()
        return dto


PRODUCT_FIELDS = {
    "code": "code",
    "name": "name",
    "categoryId": "category_id",
    "costPrice": "cost_price",
    "sellPrice": "sell_price",
    "stock": "stock",
}


@dataclass
class ProductRequest(_PartialRequest):
    """DTO for product create/update requests."""

    code: Optional[str] = None
    name: Optional[str] = None
    category_id: Optional[int] = None
    cost_price: Optional[Decimal] = None
    sell_price: Optional[Decimal] = None
    stock: Optional[int] = None
    supplied: Set[str] = field(default_factory=set, repr=False)

    @classmethod
    def from_dict(cls, data: dict, partial: bool = False) -> "ProductRequest":
        result = ValidationResult()
        prices = {}
        for key in ("costPrice", "sellPrice"):
            if _required_value(data, key, result, _required(data, key, partial)):
                prices[key] = V.validate_decimal(
                    data.get(key),
                    key,
                    result,
                    min_value=Decimal("0"),
                    max_value=MAX_MONEY,
                )
        stock = V.validate_integer(data.get("stock"), "stock", result, min_value=0)
        if not partial and stock is None:
            stock = 0
        dto = cls(
            code=V.validate_string(
                data.get("code"),
                "code",
                result,
                required=_required(data, "code", partial),
                max_length=50,
            ),
            name=V.validate_string(
                data.get("name"),
                "name",
                result,
                required=_required(data, "name", partial),
                max_length=150,
            ),
            category_id=V.validate_integer(
                data.get("categoryId"), "categoryId", result, min_value=1
            ),
            cost_price=prices.get("costPrice"),
            sell_price=prices.get("sellPrice"),
            stock=stock,
            supplied=_supplied(data, PRODUCT_FIELDS),
        )
        if partial and "stock" in data and data.get("stock") is None:
            result.add_error("is required", "stock")
        result.raise_if_invalid()
        return dto


CONTACT_FIELDS = {
    "code": "code",
    "name": "name",
    "phone": "phone",
    "address": "address",
}


@dataclass
class ContactRequest(_PartialRequest):
    """DTO for customer and vendor create/update requests."""

    code: Optional[str] = None
    name: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    supplied: Set[str] = field(default_factory=set, repr=False)

    @classmethod
    def from_dict(cls, data: dict, partial: bool = False) -> "ContactRequest":
        result = ValidationResult()
        dto = cls(
            code=V.validate_string(
                data.get("code"),
                "code",
                result,
                required=_required(data, "code", partial),
                max_length=50,
            ),
            name=V.validate_string(
                data.get("name"),
                "name",
                result,
                required=_required(data, "name", partial),
                max_length=150,
            ),
            phone=V.validate_string(data.get("phone"), "phone", result, max_length=50),
            address=V.validate_string(data.get("address"), "address", result),
            supplied=_supplied(data, CONTACT_FIELDS),
        )
        result.raise_if_invalid()
        return dto


# ------------------- orders and returns -------------------


def parse_order_lines(items: Any, result: ValidationResult) -> List[OrderLine]:
    """Validate the ``items`` array shared by orders and returns.

    Client-supplied line totals are ignored; ``OrderLine.total`` is derived.
    """
    if not isinstance(items, list) or not items:
        result.add_error("at least one item is required", "items")
        return []

    lines = []
    for index, item in enumerate(items):
        prefix = f"items[{index}]"
        if not isinstance(item, dict):
            result.add_error("must be an object", prefix)
            continue
        errors_before = len(result.errors)
        product_id = quantity = price = None
        if V.validate_required_field(
            item.get("productId"), f"{prefix}.productId", result
        ):
            product_id = V.validate_integer(
                item.get("productId"), f"{prefix}.productId", result, min_value=1
            )
        if V.validate_required_field(
            item.get("quantity"), f"{prefix}.quantity", result
        ):
            quantity = V.validate_integer(
                item.get("quantity"), f"{prefix}.quantity", result, min_value=1
            )
        if V.validate_required_field(item.get("price"), f"{prefix}.price", result):
            price = V.validate_decimal(
                item.get("price"),
                f"{prefix}.price",
                result,
                min_value=Decimal("0"),
                max_value=MAX_MONEY,
            )
        if len(result.errors) == errors_before:
            lines.append(OrderLine(product_id=product_id, quantity=quantity, price=price))
    return lines


def _header(payload: dict, key: str, result: ValidationResult) -> dict:
    header = payload.get(key)
    if not isinstance(header, dict):
        result.add_error("is required", key)
        return {}
    return header


def _party_id(header: dict, key: str, result: ValidationResult) -> Optional[int]:
    if not V.validate_required_field(header.get(key), key, result):
        return None
    return V.validate_integer(header.get(key), key, result, min_value=1)


def _choice_or_default(
    header: dict, key: str, result: ValidationResult, choices, default: str
) -> Optional[str]:
    if header.get(key) in (None, ""):
        return default
    return V.validate_choice(header.get(key), key, result, choices)


@dataclass
class PurchaseOrderRequest:
    """DTO for ``{purchaseOrder: {...}, items: [...]}``."""

    vendor_id: int
    date: dt.date
    status: str
    due_date: Optional[dt.date]
    notes: Optional[str]
    lines: List[OrderLine]

    @classmethod
    def from_dict(cls, payload: dict) -> "PurchaseOrderRequest":
        result = ValidationResult()
        header = _header(payload, "purchaseOrder", result)
        dto = cls(
            vendor_id=_party_id(header, "vendorId", result),
            date=V.validate_date(header.get("date"), "date", result) or today(),
            status=_choice_or_default(
                header, "status", result, PURCHASE_STATUSES, "pending"
            ),
            due_date=V.validate_date(header.get("dueDate"), "dueDate", result),
            notes=V.validate_string(header.get("notes"), "notes", result),
            lines=parse_order_lines(payload.get("items"), result),
        )
        result.raise_if_invalid()
        return dto

    def to_entity(self, created_by: Optional[int] = None) -> PurchaseOrder:
        return PurchaseOrder(
            vendor_id=self.vendor_id,
            date=self.date,
            status=self.status,
            due_date=self.due_date,
            notes=self.notes,
            created_by=created_by,
        )


@dataclass
class SalesOrderRequest:
    """DTO for ``{salesOrder: {...}, items: [...]}``."""

    customer_id: int
    date: dt.date
    payment_status: str
    due_date: Optional[dt.date]
    notes: Optional[str]
    lines: List[OrderLine]

    @classmethod
    def from_dict(cls, payload: dict) -> "SalesOrderRequest":
        result = ValidationResult()
        header = _header(payload, "salesOrder", result)
        dto = cls(
            customer_id=_party_id(header, "customerId", result),
            date=V.validate_date(header.get("date"), "date", result) or today(),
            payment_status=_choice_or_default(
                header, "paymentStatus", result, PAYMENT_STATUSES, "unpaid"
            ),
            due_date=V.validate_date(header.get("dueDate"), "dueDate", result),
            notes=V.validate_string(header.get("notes"), "notes", result),
            lines=parse_order_lines(payload.get("items"), result),
        )
        result.raise_if_invalid()
        return dto

    def to_entity(self, created_by: Optional[int] = None) -> SalesOrder:
        return SalesOrder(
            customer_id=self.customer_id,
            date=self.date,
            payment_status=self.payment_status,
            due_date=self.due_date,
            notes=self.notes,
            created_by=created_by,
        )


@dataclass
class ProductReturnRequest:
    """DTO for ``{productReturn: {...}, items: [...]}``."""

    customer_id: int
    sales_order_id: Optional[int]
    date: dt.date
    status: str
    notes: Optional[str]
    lines: List[OrderLine]

    @classmethod
    def from_dict(cls, payload: dict) -> "ProductReturnRequest":
        result = ValidationResult()
        header = _header(payload, "productReturn", result)
        dto = cls(
            customer_id=_party_id(header, "customerId", result),
            sales_order_id=V.validate_integer(
                header.get("salesOrderId"), "salesOrderId", result, min_value=1
            ),
            date=V.validate_date(header.get("date"), "date", result) or today(),
            status=_choice_or_default(
                header, "status", result, RETURN_STATUSES, "pending"
            ),
            notes=V.validate_string(header.get("notes"), "notes", result),
            lines=parse_order_lines(payload.get("items"), result),
        )
        result.raise_if_invalid()
        return dto

    def to_entity(self, created_by: Optional[int] = None) -> ProductReturn:
        return ProductReturn(
            customer_id=self.customer_id,
            sales_order_id=self.sales_order_id,
            date=self.date,
            status=self.status,
            notes=self.notes,
            created_by=created_by,
        )


@dataclass
class StatusUpdateRequest:
    status: str

    @classmethod
    def from_dict(cls, data: dict) -> "StatusUpdateRequest":
        result = ValidationResult()
        status = V.validate_string(data.get("status"), "status", result, required=True)
        result.raise_if_invalid()
        return cls(status=status)


# ------------------- reports -------------------


@dataclass
class DateRangeQuery:
    start: Optional[dt.date] = None
    end: Optional[dt.date] = None

    @classmethod
    def from_args(cls, args) -> "DateRangeQuery":
        result = ValidationResult()
        dto = cls(
            start=V.validate_date(args.get("startDate"), "startDate", result),
            end=V.validate_date(args.get("endDate"), "endDate", result),
        )
        result.raise_if_invalid()
        return dto


@dataclass
class PeriodQuery:
    """Month/year pair of the profit & loss and monthly sales reports."""

    year: int
    month: Optional[int] = None

    @classmethod
    def from_values(
        cls, month: Any = None, year: Any = None, require_month: bool = True
    ) -> "PeriodQuery":
        result = ValidationResult()
        parsed_month = None
        if require_month and V.validate_required_field(month, "month", result):
            parsed_month = V.validate_integer(
                month, "month", result, min_value=1, max_value=12
            )
        parsed_year = None
        if V.validate_required_field(year, "year", result):
            parsed_year = V.validate_integer(
                year, "year", result, min_value=1, max_value=9998
            )
        result.raise_if_invalid()
        return cls(year=parsed_year, month=parsed_month)


# ------------------- auth and users -------------------


@dataclass
class RegisterRequest:
    username: str
    password: str
    full_name: str
    email: Optional[str] = None
    role: Optional[str] = None

    @classmethod
    def from_dict(cls, data: dict) -> "RegisterRequest":
        result = ValidationResult()
        username = V.validate_string(
            data.get("username"), "username", result, required=True, max_length=50
        )
        if username is not None and len(username) < 3:
            result.add_error("must be at least 3 characters", "username")
        password = data.get("password")
        if not isinstance(password, str) or len(password) < 6:
            result.add_error("must be at least 6 characters", "password")
        role = None
        if data.get("role") not in (None, ""):
            role = V.validate_choice(data.get("role"), "role", result, USER_ROLES)
        dto = cls(
            username=username,
            password=password,
            full_name=V.validate_string(
                data.get("fullName"), "fullName", result, required=True, max_length=100
            ),
            email=V.validate_email(data.get("email"), "email", result),
            role=role,
        )
        result.raise_if_invalid()
        return dto


@dataclass
class LoginRequest:
    username: str
    password: str

    @classmethod
    def from_dict(cls, data: dict) -> "LoginRequest":
        result = ValidationResult()
        username = V.validate_string(
            data.get("username"), "username", result, required=True
        )
        password = data.get("password")
        if not isinstance(password, str) or not password:
            result.add_error("is required", "password")
        result.raise_if_invalid()
        return cls(username=username, password=password)


@dataclass
class ProfileUpdateRequest:
    """Profile edit with an optional password change."""

    full_name: Optional[str] = None
    email: Optional[str] = None
    current_password: Optional[str] = None
    new_password: Optional[str] = None
    supplied: Set[str] = field(default_factory=set, repr=False)

    @property
    def wants_password_change(self) -> bool:
        return bool(self.new_password)

    @classmethod
    def from_dict(cls, data: dict) -> "ProfileUpdateRequest":
        result = ValidationResult()
        full_name = V.validate_string(
            data.get("fullName"),
            "fullName",
            result,
            required="fullName" in data,
            max_length=100,
        )
        email = V.validate_email(data.get("email"), "email", result)

        new_password = data.get("newPassword") or None
        current_password = data.get("currentPassword") or None
        if new_password is not None:
            if not isinstance(new_password, str) or len(new_password) < 6:
                result.add_error("must be at least 6 characters", "newPassword")
            elif new_password != data.get("confirmPassword"):
                result.add_error("passwords do not match", "confirmPassword")
            if not current_password:
                result.add_error("is required to change the password", "currentPassword")

        result.raise_if_invalid()
        return cls(
            full_name=full_name,
            email=email,
            current_password=current_password,
            new_password=new_password,
            supplied=_supplied(data, {"fullName": "full_name", "email": "email"}),
        )


@dataclass
class LanguageRequest:
    language: str

    @classmethod
    def from_dict(cls, data: dict) -> "LanguageRequest":
        result = ValidationResult()
        language = V.validate_choice(data.get("language"), "language", result, LANGUAGES)
        result.raise_if_invalid()
        return cls(language=language)


# ------------------- settings -------------------


def company_settings_from_dict(data: dict) -> Dict[str, Any]:
    """Validate a company settings PATCH; returns the supplied camelCase keys."""
    result = ValidationResult()
    cleaned = {
        "companyName": V.validate_string(
            data.get("companyName"), "companyName", result, required=True, max_length=150
        )
    }
    for key in ("address", "phone", "website", "taxId"):
        if key in data:
            cleaned[key] = V.validate_string(data.get(key), key, result, max_length=255)
    if "email" in data:
        cleaned["email"] = V.validate_email(data.get("email"), "email", result)
    result.raise_if_invalid()
    return cleaned


def system_settings_from_dict(data: dict) -> Dict[str, Any]:
    """Validate a system settings PATCH; returns the supplied camelCase keys."""
    result = ValidationResult()
    cleaned: Dict[str, Any] = {}
    if "defaultLanguage" in data:
        cleaned["defaultLanguage"] = V.validate_choice(
            data["defaultLanguage"], "defaultLanguage", result, LANGUAGES
        )
    for key in ("enableEmailNotifications", "enableStockAlerts"):
        if key in data:
            if data[key] is None:
                result.add_error("must be true or false", key)
            cleaned[key] = V.validate_bool(data[key], key, result)
    if "lowStockThreshold" in data:
        if V.validate_required_field(
            data["lowStockThreshold"], "lowStockThreshold", result
        ):
            cleaned["lowStockThreshold"] = V.validate_integer(
                data["lowStockThreshold"], "lowStockThreshold", result, min_value=1
            )
    if "defaultCurrency" in data:
        cleaned["defaultCurrency"] = V.validate_string(
            data["defaultCurrency"], "defaultCurrency", result, required=True, max_length=10
        )
    if "backupFrequency" in data:
        cleaned["backupFrequency"] = V.validate_choice(
            data["backupFrequency"], "backupFrequency", result, BACKUP_FREQUENCIES
        )
    result.raise_if_invalid()
    return cleaned


# ------------------- responses -------------------


def entity_to_dict(entity) -> Dict[str, Any]:
    """Serialise a flat domain entity (category, product, contact)."""
    return camelize(dataclasses.asdict(entity))


def line_to_dict(line: OrderLine) -> Dict[str, Any]:
    return camelize(
        {
            "id": line.id,
            "product_id": line.product_id,
            "quantity": line.quantity,
            "price": line.price,
            "total": line.total,
            "product": dataclasses.asdict(line.product) if line.product else None,
        }
    )


def document_to_dict(document, with_items: bool = False) -> Dict[str, Any]:
    """Serialise a purchase order, sales order or return.

    Lists carry the counterpart's name; detail views add the party and items.
    """
    data = {
        f.name: getattr(document, f.name)
        for f in dataclasses.fields(document)
        if f.name not in ("items", "vendor", "customer")
    }
    party_key = "vendor" if hasattr(document, "vendor") else "customer"
    party = getattr(document, party_key)
    data[f"{party_key}_name"] = party.name if party else None
    result = camelize(data)
    if with_items:
        result[party_key] = entity_to_dict(party) if party else None
        result["items"] = [line_to_dict(line) for line in document.items]
    return result
