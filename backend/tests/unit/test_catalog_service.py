"""
Unit tests for CategoryService, ProductService and the contact services.

Tests use the repository mock factories so no database is involved.
"""

from dataclasses import replace
from decimal import Decimal
from unittest.mock import Mock

import pytest

from simplestore.core.exceptions import NotFoundError
from simplestore.core.validation import ValidationError
from simplestore.domain.entities import Category, Customer, Vendor
from simplestore.schemas.dtos import CategoryRequest, ContactRequest, ProductRequest
from simplestore.services.catalog_service import CategoryService, ProductService
from simplestore.services.contact_service import CustomerService, VendorService
from simplestore.services.notification_service import LOW_STOCK, NotificationService
from simplestore.services.settings_service import SettingsService
from tests.factories.repository_factories import (
    CategoryRepositoryFactory,
    ContactRepositoryFactory,
    ProductRepositoryFactory,
    SettingsRepositoryFactory,
)


@pytest.fixture
def product_repo() -> Mock:
    return ProductRepositoryFactory.create_mock_full()


@pytest.fixture
def settings_service() -> SettingsService:
    return SettingsService(SettingsRepositoryFactory.create_in_memory())


@pytest.fixture
def notifier() -> Mock:
    return Mock(spec=NotificationService)


@pytest.fixture
def product_service(product_repo, settings_service, notifier) -> ProductService:
    return ProductService(product_repo, settings_service, notifier)


class TestCategoryService:
    def test_get_missing_category_raises_not_found(self):
        repo = CategoryRepositoryFactory.create_mock_full()

        with pytest.raises(NotFoundError):
            CategoryService(repo).get_category(99)

    def test_create_category(self):
        repo = CategoryRepositoryFactory.create_mock_full()
        request = CategoryRequest.from_dict({"name": "Snacks"})

        created = CategoryService(repo).create_category(request)

        assert created.name == "Snacks"
        repo.create.assert_called_once()

    def test_update_applies_only_supplied_fields(self):
        repo = CategoryRepositoryFactory.create_mock_full()
        repo.get_by_id.return_value = Category(id=1, name="Old", description="Keep me")
        request = CategoryRequest.from_dict({"name": "New"}, partial=True)

        updated = CategoryService(repo).update_category(1, request)

        assert updated.name == "New"
        assert updated.description == "Keep me"


class TestProductService:
    def test_create_product(self, product_service, product_repo):
        request = ProductRequest.from_dict(
            {"code": "P9", "name": "Cocoa", "costPrice": 3, "sellPrice": 6, "stock": 10}
        )

        created = product_service.create_product(request)

        assert created.code == "P9"
        assert created.sell_price == Decimal("6.00")
        product_repo.create.assert_called_once()

    def test_get_missing_product_raises_not_found(self, product_service):
        with pytest.raises(NotFoundError):
            product_service.get_product(404)

    def test_update_below_threshold_sends_low_stock_alert(
        self, product_service, product_repo, notifier, domain_product
    ):
        product_repo.get_by_id.return_value = domain_product

        updated = product_service.update_product(
            1, ProductRequest.from_dict({"stock": 2}, partial=True)
        )

        assert updated.stock == 2
        notifier.notify.assert_called_once_with(
            LOW_STOCK, {"name": "Coffee", "code": "P001", "stock": 2}
        )

    def test_update_above_threshold_sends_nothing(
        self, product_service, product_repo, notifier, domain_product
    ):
        product_repo.get_by_id.return_value = domain_product

        product_service.update_product(
            1, ProductRequest.from_dict({"stock": 50}, partial=True)
        )

        notifier.notify.assert_not_called()

    def test_threshold_comes_from_system_settings(
        self, product_service, product_repo, notifier, settings_service, domain_product
    ):
        settings_service.update_system({"lowStockThreshold": 30})
        product_repo.get_by_id.return_value = replace(domain_product, stock=40)

        product_service.update_product(
            1, ProductRequest.from_dict({"stock": 25}, partial=True)
        )

        notifier.notify.assert_called_once()

    def test_list_low_stock_uses_configured_threshold(
        self, product_service, product_repo, settings_service
    ):
        settings_service.update_system({"lowStockThreshold": 8})

        product_service.list_low_stock()
        product_service.list_low_stock(3)
        product_service.list_low_stock(0)

        assert [c.args for c in product_repo.list_low_stock.call_args_list] == [
            (8,),
            (3,),
            (8,),
        ]

    def test_update_rejects_negative_stock_from_entity_rules(
        self, product_service, product_repo, domain_product
    ):
        product_repo.get_by_id.return_value = domain_product
        request = ProductRequest(stock=-1, supplied={"stock"})

        with pytest.raises(ValidationError):
            product_service.update_product(1, request)


class TestContactServices:
    def test_customer_crud_uses_customer_entity(self):
        repo = ContactRepositoryFactory.create_customer_mock()
        request = ContactRequest.from_dict({"code": "C9", "name": "Zed"})

        created = CustomerService(repo).create(request)

        assert isinstance(created, Customer)
        assert created.code == "C9"

    def test_vendor_update_keeps_untouched_fields(self):
        repo = ContactRepositoryFactory.create_vendor_mock()
        repo.get_by_id.return_value = Vendor(
            id=2, code="V1", name="Old", phone="111", address="Dock 4"
        )

        updated = VendorService(repo).update(
            2, ContactRequest.from_dict({"phone": "222"}, partial=True)
        )

        assert updated.phone == "222"
        assert updated.address == "Dock 4"
        assert updated.name == "Old"

    def test_missing_vendor_message(self):
        repo = ContactRepositoryFactory.create_vendor_mock()

        with pytest.raises(NotFoundError) as exc:
            VendorService(repo).get(1)

        assert exc.value.message == "Vendor not found"
