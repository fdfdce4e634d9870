"""
Financial reports: accounts payable/receivable, inventory valuation,
profit & loss and monthly sales.

Outstanding balances follow the store's convention that a ``partial``
document is half paid.
"""

import datetime as dt
import time
from decimal import Decimal
from typing import Any, Dict, List, Optional, Tuple

from simplestore.core.config import today
from simplestore.core.logging_config import log_performance
from simplestore.domain.interfaces import IReportRepository

PARTIAL_PAID_RATIO = Decimal("0.5")
CENT = Decimal("0.01")


def month_bounds(year: int, month: int) -> Tuple[dt.date, dt.date]:
    """First day of the month and first day of the following month."""
    start = dt.date(year, month, 1)
    if month == 12:
        return start, dt.date(year + 1, 1, 1)
    return start, dt.date(year, month + 1, 1)


def previous_month(year: int, month: int) -> Tuple[int, int]:
    if month == 1:
        return year - 1, 12
    return year, month - 1


def remaining_amount(total: Decimal, status: str) -> Decimal:
    if status == "partial":
        return (total * PARTIAL_PAID_RATIO).quantize(CENT)
    return total


def age_days(due_date: Optional[dt.date], on_date: dt.date) -> int:
    return max(0, (on_date - (due_date or on_date)).days)


class ReportService:
    def __init__(self, repo: IReportRepository) -> None:
        self.repo = repo

    def _with_balance(self, rows: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
        current = today()
        for row in rows:
            row["remaining_amount"] = remaining_amount(row["total_amount"], row["status"])
            row["age_days"] = age_days(row["due_date"], current)
        return rows

    def accounts_payable(
        self, start: Optional[dt.date] = None, end: Optional[dt.date] = None
    ) -> List[Dict[str, Any]]:
        return self._with_balance(self.repo.open_purchase_orders(start, end))

    def accounts_receivable(
        self, start: Optional[dt.date] = None, end: Optional[dt.date] = None
    ) -> List[Dict[str, Any]]:
        return self._with_balance(self.repo.open_sales_orders(start, end))

    def inventory(self) -> List[Dict[str, Any]]:
        rows = self.repo.inventory_rows()
        for row in rows:
            row["total_value"] = (row["cost_price"] * row["stock"]).quantize(CENT)
        return rows

    def profit_loss(self, month: int, year: int) -> Dict[str, Any]:
        started = time.perf_counter()
        start, end = month_bounds(year, month)
        total_sales = self.repo.sales_total(start, end)
        total_cogs = self.repo.cost_of_goods_sold(start, end)
        total_returns = self.repo.returns_total(start, end)
        gross_profit = total_sales - total_cogs
        report = {
            "month": month,
            "year": year,
            "total_sales": total_sales,
            "total_cogs": total_cogs,
            "gross_profit": gross_profit,
            "total_returns": total_returns,
            "net_profit": gross_profit - total_returns,
        }
        log_performance(
            "profit_loss_report",
            (time.perf_counter() - started) * 1000,
            month=month,
            year=year,
        )
        return report

    def monthly_sales(self, year: int) -> List[Dict[str, Any]]:
        totals = self.repo.monthly_sales(year)
        return [
            {"month": month, "total": totals.get(month, Decimal("0.00"))}
            for month in range(1, 13)
        ]
