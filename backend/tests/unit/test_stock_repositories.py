"""
SQLite-backed tests for stock documents and report aggregates.

These exercise the SQL repositories directly: stock movements, rollback on
insufficient stock, reversal on delete and the aggregate queries.
"""

import datetime as dt
from decimal import Decimal

import pytest

from simplestore.core.exceptions import (
    ConflictError,
    InsufficientStockError,
    NotFoundError,
    OrderNumberExhaustedError,
)
from simplestore.core.validation import ValidationError
from simplestore.domain.entities import (
    OrderLine,
    ProductReturn,
    PurchaseOrder,
    SalesOrder,
)
from simplestore.repositories import stock_document_repository
from simplestore.repositories.product_repository import ProductRepository
from simplestore.repositories.purchase_order_repository import PurchaseOrderRepository
from simplestore.repositories.report_repository import ReportRepository
from simplestore.repositories.return_repository import ReturnRepository
from simplestore.repositories.sales_order_repository import SalesOrderRepository
from tests.fixtures.data_fixtures import product_stock

ORDER_DAY = dt.date(2024, 3, 7)


@pytest.fixture(autouse=True)
def fixed_today(monkeypatch):
    monkeypatch.setattr(stock_document_repository, "today", lambda: ORDER_DAY)


def _sale(catalogue, quantity, product_id=None, date=ORDER_DAY, status="unpaid"):
    return (
        SalesOrder(customer_id=catalogue.customer_id, date=date, payment_status=status),
        [
            OrderLine(
                product_id=product_id or catalogue.coffee_id,
                quantity=quantity,
                price=Decimal("8.00"),
            )
        ],
    )


class TestSalesOrders:
    def test_create_removes_stock_and_numbers_the_order(self, db_session, catalogue):
        repo = SalesOrderRepository(db_session)

        order = repo.create(*_sale(catalogue, 3))

        assert order.order_number == "SO20240307001"
        assert order.total_amount == Decimal("24.00")
        assert order.customer.name == "Acme Corp"
        assert order.items[0].product.code == "P001"
        assert product_stock(catalogue.coffee_id) == 17

    def test_sequence_increments_within_the_day(self, db_session, catalogue):
        repo = SalesOrderRepository(db_session)

        repo.create(*_sale(catalogue, 1))
        second = repo.create(*_sale(catalogue, 1))

        assert second.order_number == "SO20240307002"

    def test_number_collision_is_retried_then_refused(
        self, db_session, catalogue, monkeypatch
    ):
        repo = SalesOrderRepository(db_session)
        repo.create(*_sale(catalogue, 1))
        attempts = []

        def taken_number(session, column, prefix, on_date):
            attempts.append(prefix)
            return "SO20240307001"

        monkeypatch.setattr(stock_document_repository, "next_order_number", taken_number)

        with pytest.raises(OrderNumberExhaustedError) as exc:
            repo.create(*_sale(catalogue, 2))

        assert len(attempts) == stock_document_repository.MAX_NUMBER_ATTEMPTS == 3
        assert exc.value.status_code == 409
        assert "Could not allocate a unique sales order number" in str(exc.value)
        assert isinstance(exc.value, ConflictError)
        assert product_stock(catalogue.coffee_id) == 19
        assert len(repo.list_all()) == 1

    def test_insufficient_stock_writes_nothing(self, db_session, catalogue):
        repo = SalesOrderRepository(db_session)
        order = SalesOrder(customer_id=catalogue.customer_id, date=ORDER_DAY)
        lines = [
            OrderLine(product_id=catalogue.coffee_id, quantity=2, price=Decimal("8.00")),
            OrderLine(product_id=catalogue.tea_id, quantity=4, price=Decimal("4.00")),
        ]

        with pytest.raises(InsufficientStockError) as exc:
            repo.create(order, lines)

        assert exc.value.product_code == "P002"
        assert exc.value.available == 3
        assert repo.list_all() == []
        assert product_stock(catalogue.coffee_id) == 20
        assert product_stock(catalogue.tea_id) == 3

    def test_unknown_customer_or_product(self, db_session, catalogue):
        repo = SalesOrderRepository(db_session)

        with pytest.raises(ValidationError):
            repo.create(
                SalesOrder(customer_id=999, date=ORDER_DAY),
                [OrderLine(product_id=catalogue.coffee_id, quantity=1, price=Decimal("1"))],
            )
        with pytest.raises(ValidationError):
            repo.create(*_sale(catalogue, 1, product_id=999))

    def test_delete_restores_stock(self, db_session, catalogue):
        repo = SalesOrderRepository(db_session)
        order = repo.create(*_sale(catalogue, 5))

        repo.delete(order.id)

        assert repo.get_by_id(order.id) is None
        assert product_stock(catalogue.coffee_id) == 20

    def test_update_status(self, db_session, catalogue):
        repo = SalesOrderRepository(db_session)
        order = repo.create(*_sale(catalogue, 1))

        assert repo.update_status(order.id, "paid").payment_status == "paid"
        with pytest.raises(ValidationError):
            repo.update_status(order.id, "completed")
        with pytest.raises(NotFoundError):
            repo.update_status(999, "paid")


class TestPurchaseOrdersAndReturns:
    def test_purchase_adds_stock_and_delete_removes_it(self, db_session, catalogue):
        repo = PurchaseOrderRepository(db_session)
        order = repo.create(
            PurchaseOrder(vendor_id=catalogue.vendor_id, date=ORDER_DAY),
            [OrderLine(product_id=catalogue.tea_id, quantity=10, price=Decimal("2.50"))],
        )

        assert order.order_number == "PO20240307001"
        assert product_stock(catalogue.tea_id) == 13

        repo.delete(order.id)
        assert product_stock(catalogue.tea_id) == 3

    def test_purchase_delete_refused_when_stock_already_sold(self, db_session, catalogue):
        purchases = PurchaseOrderRepository(db_session)
        order = purchases.create(
            PurchaseOrder(vendor_id=catalogue.vendor_id, date=ORDER_DAY),
            [OrderLine(product_id=catalogue.tea_id, quantity=5, price=Decimal("2.50"))],
        )
        SalesOrderRepository(db_session).create(*_sale(catalogue, 7, catalogue.tea_id))

        with pytest.raises(InsufficientStockError):
            purchases.delete(order.id)

        assert product_stock(catalogue.tea_id) == 1
        assert purchases.get_by_id(order.id) is not None

    def test_return_adds_stock_and_checks_sales_order(self, db_session, catalogue):
        sale = SalesOrderRepository(db_session).create(*_sale(catalogue, 4))
        repo = ReturnRepository(db_session)

        created = repo.create(
            ProductReturn(
                customer_id=catalogue.customer_id,
                sales_order_id=sale.id,
                date=ORDER_DAY,
            ),
            [OrderLine(product_id=catalogue.coffee_id, quantity=1, price=Decimal("8.00"))],
        )

        assert created.return_number == "RET20240307001"
        assert product_stock(catalogue.coffee_id) == 17

        with pytest.raises(ValidationError):
            repo.create(
                ProductReturn(customer_id=catalogue.customer_id, sales_order_id=999),
                [OrderLine(product_id=catalogue.coffee_id, quantity=1, price=Decimal("1"))],
            )


def test_product_referenced_by_an_order_cannot_be_deleted(db_session, catalogue):
    SalesOrderRepository(db_session).create(*_sale(catalogue, 1))

    with pytest.raises(ConflictError):
        ProductRepository(db_session).delete(catalogue.coffee_id)


class TestReportRepository:
    @pytest.fixture
    def sales(self, db_session, catalogue):
        repo = SalesOrderRepository(db_session)
        repo.create(*_sale(catalogue, 2, date=dt.date(2024, 3, 2)))
        repo.create(*_sale(catalogue, 1, date=dt.date(2024, 5, 9), status="partial"))
        repo.create(*_sale(catalogue, 1, date=dt.date(2024, 5, 10), status="paid"))
        return repo

    def test_period_totals(self, db_session, sales):
        reports = ReportRepository(db_session)
        march = (dt.date(2024, 3, 1), dt.date(2024, 4, 1))

        assert reports.sales_total(*march) == Decimal("16.00")
        assert reports.cost_of_goods_sold(*march) == Decimal("10.00")
        assert reports.returns_total(*march) == Decimal("0.00")

    def test_monthly_sales(self, db_session, sales):
        assert ReportRepository(db_session).monthly_sales(2024) == {
            3: Decimal("16.00"),
            5: Decimal("16.00"),
        }

    def test_open_sales_orders_exclude_paid(self, db_session, sales):
        rows = ReportRepository(db_session).open_sales_orders()

        assert [row["status"] for row in rows] == ["unpaid", "partial"]
        assert rows[0]["customer_name"] == "Acme Corp"

    def test_stock_summary_and_counts(self, db_session, sales):
        reports = ReportRepository(db_session)

        summary = reports.stock_summary()

        # Two products; 16 coffee at 5.00 plus 3 tea at 2.50
        assert summary == {"items": 2, "value": Decimal("87.50")}
        assert reports.count_customers() == 1
        assert reports.count_vendors() == 1

    def test_recent_transactions_newest_first(self, db_session, sales):
        rows = ReportRepository(db_session).recent_transactions(2)

        assert [row["date"] for row in rows] == [dt.date(2024, 5, 10), dt.date(2024, 5, 9)]
        assert {row["type"] for row in rows} == {"sale"}
