"""
Unit tests for request DTO validation and response serialisation.
"""

import datetime as dt
from decimal import Decimal

import pytest

from simplestore.core.validation import ValidationError
from simplestore.schemas.dtos import (
    CategoryRequest,
    PeriodQuery,
    ProductRequest,
    ProfileUpdateRequest,
    PurchaseOrderRequest,
    RegisterRequest,
    SalesOrderRequest,
    camelize,
    company_settings_from_dict,
    document_to_dict,
    entity_to_dict,
    system_settings_from_dict,
)


class TestCatalogueRequests:
    def test_product_create_requires_code_name_and_prices(self):
        with pytest.raises(ValidationError) as exc:
            ProductRequest.from_dict({})

        message = exc.value.message
        for field_name in ("code", "name", "costPrice", "sellPrice"):
            assert field_name in message

    def test_product_create_defaults_stock_to_zero(self):
        dto = ProductRequest.from_dict(
            {"code": "P1", "name": "Coffee", "costPrice": "5", "sellPrice": 8}
        )

        assert dto.stock == 0
        assert dto.cost_price == Decimal("5.00")
        assert dto.sell_price == Decimal("8.00")

    def test_product_rejects_negative_values(self):
        with pytest.raises(ValidationError) as exc:
            ProductRequest.from_dict(
                {
                    "code": "P1",
                    "name": "Coffee",
                    "costPrice": -1,
                    "sellPrice": 8,
                    "stock": -2,
                }
            )

        assert "costPrice" in exc.value.message
        assert "stock" in exc.value.message

    def test_partial_update_only_reports_supplied_fields(self):
        dto = ProductRequest.from_dict({"stock": 4}, partial=True)

        assert dto.changes() == {"stock": 4}

    def test_partial_update_cannot_blank_required_field(self):
        with pytest.raises(ValidationError):
            CategoryRequest.from_dict({"name": ""}, partial=True)


class TestOrderRequests:
    def test_sales_order_defaults(self, monkeypatch):
        monkeypatch.setattr(
            "simplestore.schemas.dtos.today", lambda: dt.date(2024, 5, 1)
        )
        dto = SalesOrderRequest.from_dict(
            {
                "salesOrder": {"customerId": 3},
                "items": [{"productId": 1, "quantity": 2, "price": "8.00"}],
            }
        )

        assert dto.date == dt.date(2024, 5, 1)
        assert dto.payment_status == "unpaid"
        assert dto.lines[0].total == Decimal("16.00")

    def test_client_supplied_line_total_is_ignored(self):
        dto = PurchaseOrderRequest.from_dict(
            {
                "purchaseOrder": {"vendorId": 1, "date": "2024-01-10"},
                "items": [
                    {"productId": 1, "quantity": 3, "price": 2.5, "total": 999}
                ],
            }
        )

        assert dto.lines[0].total == Decimal("7.50")
        assert dto.to_entity(created_by=9).created_by == 9

    @pytest.mark.parametrize(
        "items",
        [
            [],
            None,
            [{"productId": 1, "quantity": 0, "price": 1}],
            [{"productId": 1, "quantity": 1, "price": -1}],
            [{"quantity": 1, "price": 1}],
        ],
    )
    def test_invalid_items_are_rejected(self, items):
        with pytest.raises(ValidationError):
            SalesOrderRequest.from_dict(
                {"salesOrder": {"customerId": 1}, "items": items}
            )

    def test_missing_header_is_rejected(self):
        with pytest.raises(ValidationError) as exc:
            PurchaseOrderRequest.from_dict(
                {"items": [{"productId": 1, "quantity": 1, "price": 1}]}
            )

        assert "purchaseOrder" in exc.value.message

    def test_unknown_status_is_rejected(self):
        with pytest.raises(ValidationError):
            PurchaseOrderRequest.from_dict(
                {
                    "purchaseOrder": {"vendorId": 1, "status": "shipped"},
                    "items": [{"productId": 1, "quantity": 1, "price": 1}],
                }
            )


class TestPeriodQuery:
    def test_valid_period(self):
        period = PeriodQuery.from_values("3", "2024")
        assert (period.month, period.year) == (3, 2024)

    @pytest.mark.parametrize("month,year", [("13", "2024"), ("0", "2024"), ("x", "2024")])
    def test_invalid_month(self, month, year):
        with pytest.raises(ValidationError):
            PeriodQuery.from_values(month, year)

    def test_year_only(self):
        period = PeriodQuery.from_values(year=2023, require_month=False)
        assert period.month is None
        assert period.year == 2023


class TestAuthRequests:
    def test_register_requires_minimum_lengths(self):
        with pytest.raises(ValidationError) as exc:
            RegisterRequest.from_dict(
                {"username": "ab", "password": "123", "fullName": "A B"}
            )

        assert "username" in exc.value.message
        assert "password" in exc.value.message

    def test_register_rejects_unknown_role(self):
        with pytest.raises(ValidationError):
            RegisterRequest.from_dict(
                {
                    "username": "alice",
                    "password": "secret123",
                    "fullName": "Alice",
                    "role": "superuser",
                }
            )

    def test_profile_password_mismatch(self):
        with pytest.raises(ValidationError) as exc:
            ProfileUpdateRequest.from_dict(
                {
                    "currentPassword": "secret123",
                    "newPassword": "newpass1",
                    "confirmPassword": "newpass2",
                }
            )

        assert "confirmPassword" in exc.value.message

    def test_profile_password_change_needs_current_password(self):
        with pytest.raises(ValidationError) as exc:
            ProfileUpdateRequest.from_dict(
                {"newPassword": "newpass1", "confirmPassword": "newpass1"}
            )

        assert "currentPassword" in exc.value.message

    def test_profile_without_password_change(self):
        dto = ProfileUpdateRequest.from_dict({"fullName": "New Name"})

        assert not dto.wants_password_change
        assert dto.supplied == {"full_name"}


class TestSettingsValidation:
    def test_company_name_is_required(self):
        with pytest.raises(ValidationError):
            company_settings_from_dict({"address": "Somewhere"})

    def test_company_settings_keep_supplied_keys(self):
        cleaned = company_settings_from_dict(
            {"companyName": "Shop", "phone": "123", "email": "a@b.co"}
        )

        assert cleaned == {"companyName": "Shop", "phone": "123", "email": "a@b.co"}

    @pytest.mark.parametrize(
        "payload",
        [
            {"lowStockThreshold": 0},
            {"backupFrequency": "hourly"},
            {"defaultLanguage": "fr"},
            {"enableStockAlerts": "yes"},
        ],
    )
    def test_invalid_system_settings(self, payload):
        with pytest.raises(ValidationError):
            system_settings_from_dict(payload)

    def test_system_settings_partial(self):
        assert system_settings_from_dict({"lowStockThreshold": 10}) == {
            "lowStockThreshold": 10
        }


class TestSerialisation:
    def test_camelize_converts_keys_and_values(self):
        data = camelize(
            {
                "total_amount": Decimal("12.50"),
                "due_date": dt.date(2024, 2, 1),
                "vendor_name": "Bean Supply",
            }
        )

        assert data == {
            "totalAmount": 12.5,
            "dueDate": "2024-02-01",
            "vendorName": "Bean Supply",
        }

    def test_entity_to_dict(self, domain_product):
        data = entity_to_dict(domain_product)

        assert data["categoryName"] == "Beverages"
        assert data["costPrice"] == 5.0
        assert data["stock"] == 20

    def test_document_list_and_detail_shapes(self, domain_sales_order):
        summary = document_to_dict(domain_sales_order)
        detail = document_to_dict(domain_sales_order, with_items=True)

        assert summary["orderNumber"] == "SO20240115001"
        assert summary["customerName"] == "Acme Corp"
        assert summary["paymentStatus"] == "unpaid"
        assert "items" not in summary
        assert detail["customer"]["code"] == "C001"
        assert detail["items"][0]["total"] == 16.0
        assert detail["items"][0]["productId"] == 1
