from flask import Blueprint, request

from simplestore.core.api_utils import api_response
from simplestore.core.auth_decorators import require_login
from simplestore.core.limiter_config import READ_LIMIT, limiter
from simplestore.core.validation import BaseValidator, ValidationResult
from simplestore.db.session import SessionLocal
from simplestore.repositories.report_repository import ReportRepository
from simplestore.schemas.dtos import camelize
from simplestore.services.dashboard_service import DashboardService
from simplestore.services.report_service import ReportService

dashboard_bp = Blueprint("dashboard", __name__, url_prefix="/api/dashboard")


def _service(db) -> DashboardService:
    repo = ReportRepository(db)
    return DashboardService(repo, ReportService(repo))


@dashboard_bp.route("/stats", methods=["GET"])
@limiter.limit(READ_LIMIT)
@require_login
def dashboard_stats():
    db = SessionLocal()
    try:
        return api_response(True, "Dashboard stats retrieved", camelize(_service(db).stats()))
    finally:
        db.close()


@dashboard_bp.route("/recent-transactions", methods=["GET"])
@limiter.limit(READ_LIMIT)
@require_login
def recent_transactions():
    result = ValidationResult()
    limit = BaseValidator.validate_integer(request.args.get("limit"), "limit", result)
    result.raise_if_invalid()

    db = SessionLocal()
    try:
        rows = _service(db).recent_transactions(5 if limit is None else limit)
        return api_response(
            True, "Recent transactions retrieved", [camelize(r) for r in rows]
        )
    finally:
        db.close()
