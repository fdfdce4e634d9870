"""
Financial report endpoints.

Provides:
- Accounts payable / receivable with optional date range
- Inventory valuation
- Profit & loss for a month (path or query parameters)
- Monthly sales for a year (path or query parameters)
"""

from flask import Blueprint, request

from simplestore.core.api_utils import api_response
from simplestore.core.auth_decorators import (
    ADMIN,
    CASHIER,
    MANAGERS,
    OWNER,
    WAREHOUSE,
    require_roles,
)
from simplestore.core.limiter_config import READ_LIMIT, limiter
from simplestore.db.session import SessionLocal
from simplestore.repositories.report_repository import ReportRepository
from simplestore.schemas.dtos import DateRangeQuery, PeriodQuery, camelize
from simplestore.services.report_service import ReportService

reports_bp = Blueprint("reports", __name__, url_prefix="/api/reports")


@reports_bp.route("/accounts-payable", methods=["GET"])
@limiter.limit(READ_LIMIT)
@require_roles(*MANAGERS)
def accounts_payable():
    query = DateRangeQuery.from_args(request.args)
    db = SessionLocal()
    try:
        rows = ReportService(ReportRepository(db)).accounts_payable(query.start, query.end)
        return api_response(
            True, "Accounts payable retrieved", [camelize(r) for r in rows]
        )
    finally:
        db.close()


@reports_bp.route("/accounts-receivable", methods=["GET"])
@limiter.limit(READ_LIMIT)
@require_roles(ADMIN, OWNER, CASHIER)
def accounts_receivable():
    query = DateRangeQuery.from_args(request.args)
    db = SessionLocal()
    try:
        rows = ReportService(ReportRepository(db)).accounts_receivable(
            query.start, query.end
        )
        return api_response(
            True, "Accounts receivable retrieved", [camelize(r) for r in rows]
        )
    finally:
        db.close()


@reports_bp.route("/inventory", methods=["GET"])
@limiter.limit(READ_LIMIT)
@require_roles(ADMIN, OWNER, WAREHOUSE)
def inventory_report():
    db = SessionLocal()
    try:
        rows = ReportService(ReportRepository(db)).inventory()
        return api_response(True, "Inventory report retrieved", [camelize(r) for r in rows])
    finally:
        db.close()


@reports_bp.route("/profit-loss", methods=["GET"])
@reports_bp.route("/profit-loss/<month>/<year>", methods=["GET"])
@limiter.limit(READ_LIMIT)
@require_roles(*MANAGERS)
def profit_loss(month=None, year=None):
    if month is None:
        month, year = request.args.get("month"), request.args.get("year")
    period = PeriodQuery.from_values(month, year)
    db = SessionLocal()
    try:
        report = ReportService(ReportRepository(db)).profit_loss(
            period.month, period.year
        )
        return api_response(True, "Profit and loss retrieved", camelize(report))
    finally:
        db.close()


@reports_bp.route("/monthly-sales", methods=["GET"])
@reports_bp.route("/monthly-sales/<year>", methods=["GET"])
@limiter.limit(READ_LIMIT)
@require_roles(ADMIN, OWNER, CASHIER)
def monthly_sales(year=None):
    if year is None:
        year = request.args.get("year")
    period = PeriodQuery.from_values(year=year, require_month=False)
    db = SessionLocal()
    try:
        rows = ReportService(ReportRepository(db)).monthly_sales(period.year)
        return api_response(True, "Monthly sales retrieved", [camelize(r) for r in rows])
    finally:
        db.close()
