from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Dict, List

from simplestore.core.config import today
from simplestore.domain.interfaces import IReportRepository
from simplestore.services.report_service import (
    ReportService,
    month_bounds,
    previous_month,
)

MAX_RECENT_TRANSACTIONS = 50


def sales_change_percent(current: Decimal, previous: Decimal) -> int:
    """Percent change versus the previous month, rounded half up."""
    if previous == 0:
        return 0 if current == 0 else 100
    change = (current - previous) / previous * 100
    return int(change.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def clamp_limit(limit: int) -> int:
    return max(1, min(limit, MAX_RECENT_TRANSACTIONS))


class DashboardService:
    """Headline figures for the landing page."""

    def __init__(self, repo: IReportRepository, report_service: ReportService) -> None:
        self.repo = repo
        self.report_service = report_service

    def stats(self) -> Dict[str, Any]:
        current = today()
        this_month = month_bounds(current.year, current.month)
        prev_year, prev_month = previous_month(current.year, current.month)
        last_month = month_bounds(prev_year, prev_month)

        monthly_sales = self.repo.sales_total(*this_month)
        previous_sales = self.repo.sales_total(*last_month)
        stock = self.repo.stock_summary()
        profit_loss = self.report_service.profit_loss(current.month, current.year)

        return {
            "total_monthly_sales": monthly_sales,
            "sales_change": sales_change_percent(monthly_sales, previous_sales),
            "total_payables": sum(
                (row["remaining_amount"] for row in self.report_service.accounts_payable()),
                Decimal("0.00"),
            ),
            "total_receivables": sum(
                (
                    row["remaining_amount"]
                    for row in self.report_service.accounts_receivable()
                ),
                Decimal("0.00"),
            ),
            "monthly_profit": profit_loss["net_profit"],
            "total_inventory_items": stock["items"],
            "total_inventory_value": stock["value"],
            "customer_count": self.repo.count_customers(),
            "vendor_count": self.repo.count_vendors(),
        }

    def recent_transactions(self, limit: int = 5) -> List[Dict[str, Any]]:
        return self.repo.recent_transactions(clamp_limit(limit))
