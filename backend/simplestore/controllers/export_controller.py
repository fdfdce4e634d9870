"""
PDF export endpoints for documents and reports.
"""

import logging

from flask import Blueprint, request

from simplestore.controllers.controller_helpers import pdf_response, settings_service_for
from simplestore.core.api_utils import api_response
from simplestore.core.auth_decorators import (
    ADMIN,
    CASHIER,
    MANAGERS,
    OWNER,
    WAREHOUSE,
    require_roles,
)
from simplestore.core.config import today
from simplestore.core.limiter_config import READ_LIMIT, limiter
from simplestore.db.session import SessionLocal
from simplestore.repositories.purchase_order_repository import PurchaseOrderRepository
from simplestore.repositories.report_repository import ReportRepository
from simplestore.repositories.return_repository import ReturnRepository
from simplestore.repositories.sales_order_repository import SalesOrderRepository
from simplestore.schemas.dtos import PeriodQuery
from simplestore.services import pdf_service
from simplestore.services.order_service import (
    PurchaseOrderService,
    ReturnService,
    SalesOrderService,
)
from simplestore.services.pdf_service import PdfService
from simplestore.services.report_service import ReportService

logger = logging.getLogger(__name__)

export_bp = Blueprint("export", __name__, url_prefix="/api/export")

REPORT_TYPES = (
    "inventory",
    "accounts-payable",
    "accounts-receivable",
    "profit-loss",
    "sales",
)


def _pdf_service(db) -> PdfService:
    return PdfService(settings_service_for(db).company_name())


@export_bp.route("/invoice/<int:order_id>", methods=["GET"])
@limiter.limit(READ_LIMIT)
@require_roles(ADMIN, CASHIER, OWNER)
def export_invoice(order_id: int):
    db = SessionLocal()
    try:
        order = SalesOrderService(SalesOrderRepository(db)).get(order_id)
        content = _pdf_service(db).render_document_for("INVOICE", "Customer", order)
        return pdf_response(content, f"invoice-{order.order_number}.pdf")
    finally:
        db.close()


@export_bp.route("/purchase-order/<int:order_id>", methods=["GET"])
@limiter.limit(READ_LIMIT)
@require_roles(ADMIN, WAREHOUSE, OWNER)
def export_purchase_order(order_id: int):
    db = SessionLocal()
    try:
        order = PurchaseOrderService(PurchaseOrderRepository(db)).get(order_id)
        content = _pdf_service(db).render_document_for("PURCHASE ORDER", "Vendor", order)
        return pdf_response(content, f"po-{order.order_number}.pdf")
    finally:
        db.close()


@export_bp.route("/return/<int:return_id>", methods=["GET"])
@limiter.limit(READ_LIMIT)
@require_roles(ADMIN, CASHIER, WAREHOUSE, OWNER)
def export_return(return_id: int):
    db = SessionLocal()
    try:
        product_return = ReturnService(ReturnRepository(db)).get(return_id)
        content = _pdf_service(db).render_document_for(
            "RETURN RECEIPT", "Customer", product_return
        )
        return pdf_response(content, f"return-{product_return.return_number}.pdf")
    finally:
        db.close()


@export_bp.route("/report/<report_type>", methods=["GET"])
@limiter.limit(READ_LIMIT)
@require_roles(*MANAGERS)
def export_report(report_type: str):
    if report_type not in REPORT_TYPES:
        return api_response(False, "Invalid report type", None, 400)

    db = SessionLocal()
    try:
        reports = ReportService(ReportRepository(db))
        pdf = _pdf_service(db)
        chart = None

        if report_type == "inventory":
            title = "INVENTORY REPORT"
            rows = pdf_service.inventory_rows(reports.inventory())
        elif report_type == "accounts-payable":
            title = "ACCOUNTS PAYABLE REPORT"
            rows = pdf_service.balance_rows(
                reports.accounts_payable(), "Vendor", "vendor_name"
            )
        elif report_type == "accounts-receivable":
            title = "ACCOUNTS RECEIVABLE REPORT"
            rows = pdf_service.balance_rows(
                reports.accounts_receivable(), "Customer", "customer_name"
            )
        elif report_type == "profit-loss":
            current = today()
            period = PeriodQuery.from_values(
                request.args.get("month", current.month),
                request.args.get("year", current.year),
            )
            title = "PROFIT & LOSS REPORT"
            rows = pdf_service.profit_loss_rows(
                reports.profit_loss(period.month, period.year)
            )
        else:
            period = PeriodQuery.from_values(
                year=request.args.get("year", today().year), require_month=False
            )
            monthly = reports.monthly_sales(period.year)
            title = "SALES REPORT"
            rows = pdf_service.monthly_sales_rows(period.year, monthly)
            chart = pdf.monthly_sales_chart(period.year, monthly)

        content = pdf.render_report(title, rows, chart)
        logger.info(
            "Report exported",
            extra={"context": {"type": report_type, "rows": len(rows)}},
        )
        return pdf_response(content, f"{report_type}-report.pdf")
    finally:
        db.close()
