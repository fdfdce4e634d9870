"""
Aggregate queries for the financial reports and the dashboard.

Rows are returned as plain dicts with snake_case keys; the report service
adds derived columns (remaining amount, age) and the schema layer renames
keys for the wire.
"""

import datetime as dt
from decimal import Decimal
from typing import Any, Dict, List, Optional

from sqlalchemy import extract, func

from simplestore.db.base import Category as DbCategory
from simplestore.db.base import Customer as DbCustomer
from simplestore.db.base import Product as DbProduct
from simplestore.db.base import ProductReturn as DbProductReturn
from simplestore.db.base import PurchaseOrder as DbPurchaseOrder
from simplestore.db.base import SalesOrder as DbSalesOrder
from simplestore.db.base import SalesOrderItem as DbSalesOrderItem
from simplestore.db.base import Vendor as DbVendor
from simplestore.domain.entities import OPEN_PAYMENT_STATUSES, OPEN_PURCHASE_STATUSES
from simplestore.domain.interfaces import IReportRepository

ZERO = Decimal("0.00")


def _money(value) -> Decimal:
    """Normalise a SUM() result (None, float on SQLite, Decimal) to 2dp."""
    if value is None:
        return ZERO
    return Decimal(str(value)).quantize(Decimal("0.01"))


class ReportRepository(IReportRepository):
    def __init__(self, db_session):
        self.db = db_session

    # ---------------- accounts payable / receivable ----------------

    def open_purchase_orders(
        self, start: Optional[dt.date] = None, end: Optional[dt.date] = None
    ) -> List[Dict[str, Any]]:
        query = (
            self.db.query(
                DbPurchaseOrder.id,
                DbPurchaseOrder.order_number,
                DbPurchaseOrder.date,
                DbPurchaseOrder.vendor_id,
                DbVendor.name.label("vendor_name"),
                DbPurchaseOrder.total_amount,
                DbPurchaseOrder.due_date,
                DbPurchaseOrder.status,
            )
            .outerjoin(DbVendor, DbPurchaseOrder.vendor_id == DbVendor.id)
            .filter(DbPurchaseOrder.status.in_(OPEN_PURCHASE_STATUSES))
        )
        if start:
            query = query.filter(DbPurchaseOrder.date >= start)
        if end:
            query = query.filter(DbPurchaseOrder.date <= end)
        rows = query.order_by(DbPurchaseOrder.due_date, DbPurchaseOrder.id).all()
        return [dict(row._mapping) for row in rows]

    def open_sales_orders(
        self, start: Optional[dt.date] = None, end: Optional[dt.date] = None
    ) -> List[Dict[str, Any]]:
        query = (
            self.db.query(
                DbSalesOrder.id,
                DbSalesOrder.order_number,
                DbSalesOrder.date,
                DbSalesOrder.customer_id,
                DbCustomer.name.label("customer_name"),
                DbSalesOrder.total_amount,
                DbSalesOrder.due_date,
                DbSalesOrder.payment_status.label("status"),
            )
            .outerjoin(DbCustomer, DbSalesOrder.customer_id == DbCustomer.id)
            .filter(DbSalesOrder.payment_status.in_(OPEN_PAYMENT_STATUSES))
        )
        if start:
            query = query.filter(DbSalesOrder.date >= start)
        if end:
            query = query.filter(DbSalesOrder.date <= end)
        rows = query.order_by(DbSalesOrder.due_date, DbSalesOrder.id).all()
        return [dict(row._mapping) for row in rows]

    # ---------------- inventory ----------------

    def inventory_rows(self) -> List[Dict[str, Any]]:
        rows = (
            self.db.query(
                DbProduct.id,
                DbProduct.code,
                DbProduct.name,
                DbProduct.category_id,
                DbCategory.name.label("category_name"),
                DbProduct.stock,
                DbProduct.cost_price,
            )
            .outerjoin(DbCategory, DbProduct.category_id == DbCategory.id)
            .order_by(DbCategory.name, DbProduct.name)
            .all()
        )
        return [dict(row._mapping) for row in rows]

    def stock_summary(self) -> Dict[str, Any]:
        items, value = self.db.query(
            func.count(DbProduct.id),
            func.sum(DbProduct.stock * DbProduct.cost_price),
        ).one()
        return {"items": int(items or 0), "value": _money(value)}

    # ---------------- profit & loss ----------------

    def sales_total(self, start: dt.date, end: dt.date) -> Decimal:
        total = (
            self.db.query(func.sum(DbSalesOrder.total_amount))
            .filter(DbSalesOrder.date >= start, DbSalesOrder.date < end)
            .scalar()
        )
        return _money(total)

    def cost_of_goods_sold(self, start: dt.date, end: dt.date) -> Decimal:
        # Valued at the product's current cost price
        total = (
            self.db.query(func.sum(DbSalesOrderItem.quantity * DbProduct.cost_price))
            .join(DbSalesOrder, DbSalesOrderItem.sales_order_id == DbSalesOrder.id)
            .join(DbProduct, DbSalesOrderItem.product_id == DbProduct.id)
            .filter(DbSalesOrder.date >= start, DbSalesOrder.date < end)
            .scalar()
        )
        return _money(total)

    def returns_total(self, start: dt.date, end: dt.date) -> Decimal:
        total = (
            self.db.query(func.sum(DbProductReturn.total_amount))
            .filter(DbProductReturn.date >= start, DbProductReturn.date < end)
            .scalar()
        )
        return _money(total)

    def monthly_sales(self, year: int) -> Dict[int, Decimal]:
        month = extract("month", DbSalesOrder.date)
        rows = (
            self.db.query(month, func.sum(DbSalesOrder.total_amount))
            .filter(
                DbSalesOrder.date >= dt.date(year, 1, 1),
                DbSalesOrder.date < dt.date(year + 1, 1, 1),
            )
            .group_by(month)
            .all()
        )
        return {int(m): _money(total) for m, total in rows}

    # ---------------- dashboard ----------------

    def count_customers(self) -> int:
        return self.db.query(func.count(DbCustomer.id)).scalar() or 0

    def count_vendors(self) -> int:
        return self.db.query(func.count(DbVendor.id)).scalar() or 0

    def recent_transactions(self, limit: int) -> List[Dict[str, Any]]:
        """Newest sales, purchases and returns merged, newest first."""
        sales = (
            self.db.query(
                DbSalesOrder.id,
                DbSalesOrder.order_number.label("transaction_id"),
                DbSalesOrder.date,
                DbCustomer.name.label("entity_name"),
                DbSalesOrder.total_amount.label("amount"),
                DbSalesOrder.payment_status.label("status"),
            )
            .outerjoin(DbCustomer, DbSalesOrder.customer_id == DbCustomer.id)
            .order_by(DbSalesOrder.date.desc(), DbSalesOrder.id.desc())
            .limit(limit)
            .all()
        )
        purchases = (
            self.db.query(
                DbPurchaseOrder.id,
                DbPurchaseOrder.order_number.label("transaction_id"),
                DbPurchaseOrder.date,
                DbVendor.name.label("entity_name"),
                DbPurchaseOrder.total_amount.label("amount"),
                DbPurchaseOrder.status,
            )
            .outerjoin(DbVendor, DbPurchaseOrder.vendor_id == DbVendor.id)
            .order_by(DbPurchaseOrder.date.desc(), DbPurchaseOrder.id.desc())
            .limit(limit)
            .all()
        )
        returns = (
            self.db.query(
                DbProductReturn.id,
                DbProductReturn.return_number.label("transaction_id"),
                DbProductReturn.date,
                DbCustomer.name.label("entity_name"),
                DbProductReturn.total_amount.label("amount"),
                DbProductReturn.status,
            )
            .outerjoin(DbCustomer, DbProductReturn.customer_id == DbCustomer.id)
            .order_by(DbProductReturn.date.desc(), DbProductReturn.id.desc())
            .limit(limit)
            .all()
        )

        merged = []
        for kind, rows in (("sale", sales), ("purchase", purchases), ("return", returns)):
            for row in rows:
                entry = dict(row._mapping)
                entry["type"] = kind
                merged.append(entry)
        merged.sort(key=lambda r: r["date"], reverse=True)
        return merged[:limit]
