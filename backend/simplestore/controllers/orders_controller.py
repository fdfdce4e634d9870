"""
Purchase order, sales order and return endpoints.

The three documents share list/detail/create/status/delete routes; each
blueprint is wired by ``_register_document_routes`` with its own roles,
payload DTO and service.
"""

from flask import Blueprint

from simplestore.controllers.controller_helpers import (
    current_user_id,
    notifier_for,
    view_name,
)
from simplestore.core.api_utils import api_response, get_json_body
from simplestore.core.auth_decorators import (
    ADMIN,
    CASHIER,
    MANAGERS,
    OWNER,
    WAREHOUSE,
    require_login,
    require_roles,
)
from simplestore.core.limiter_config import READ_LIMIT, WRITE_LIMIT, limiter
from simplestore.db.session import SessionLocal
from simplestore.repositories.purchase_order_repository import PurchaseOrderRepository
from simplestore.repositories.return_repository import ReturnRepository
from simplestore.repositories.sales_order_repository import SalesOrderRepository
from simplestore.schemas.dtos import (
    ProductReturnRequest,
    PurchaseOrderRequest,
    SalesOrderRequest,
    StatusUpdateRequest,
    document_to_dict,
)
from simplestore.services.order_service import (
    PurchaseOrderService,
    ReturnService,
    SalesOrderService,
)

purchase_orders_bp = Blueprint(
    "purchase_orders", __name__, url_prefix="/api/purchase-orders"
)
sales_orders_bp = Blueprint("sales_orders", __name__, url_prefix="/api/sales-orders")
returns_bp = Blueprint("returns", __name__, url_prefix="/api/returns")


def _register_document_routes(
    bp,
    build_service,
    request_cls,
    label,
    read_roles,
    create_roles,
    status_roles,
):
    read_guard = require_roles(*read_roles) if read_roles else require_login

    @bp.route("", methods=["GET"])
    @limiter.limit(READ_LIMIT)
    @read_guard
    @view_name(f"list_documents_{bp.name}")
    def list_documents():
        db = SessionLocal()
        try:
            documents = build_service(db).list_all()
            return api_response(
                True, f"{label}s retrieved", [document_to_dict(d) for d in documents]
            )
        finally:
            db.close()

    @bp.route("/<int:document_id>", methods=["GET"])
    @limiter.limit(READ_LIMIT)
    @read_guard
    @view_name(f"get_document_{bp.name}")
    def get_document(document_id: int):
        db = SessionLocal()
        try:
            document = build_service(db).get(document_id)
            return api_response(
                True, f"{label} retrieved", document_to_dict(document, with_items=True)
            )
        finally:
            db.close()

    @bp.route("", methods=["POST"])
    @limiter.limit(WRITE_LIMIT)
    @require_roles(*create_roles)
    @view_name(f"create_document_{bp.name}")
    def create_document():
        request_dto = request_cls.from_dict(get_json_body())
        db = SessionLocal()
        try:
            document = build_service(db).create(request_dto, current_user_id())
            return api_response(
                True,
                f"{label} created",
                document_to_dict(document, with_items=True),
                201,
            )
        finally:
            db.close()

    @bp.route("/<int:document_id>/status", methods=["PUT", "PATCH"])
    @limiter.limit(WRITE_LIMIT)
    @require_roles(*status_roles)
    @view_name(f"update_document_status_{bp.name}")
    def update_document_status(document_id: int):
        request_dto = StatusUpdateRequest.from_dict(get_json_body())
        db = SessionLocal()
        try:
            document = build_service(db).update_status(document_id, request_dto.status)
            return api_response(
                True,
                f"{label} status updated",
                document_to_dict(document, with_items=True),
            )
        finally:
            db.close()

    @bp.route("/<int:document_id>", methods=["DELETE"])
    @limiter.limit(WRITE_LIMIT)
    @require_roles(*MANAGERS)
    @view_name(f"delete_document_{bp.name}")
    def delete_document(document_id: int):
        db = SessionLocal()
        try:
            build_service(db).delete(document_id)
            return "", 204
        finally:
            db.close()


_register_document_routes(
    purchase_orders_bp,
    lambda db: PurchaseOrderService(PurchaseOrderRepository(db)),
    PurchaseOrderRequest,
    "Purchase order",
    read_roles=(ADMIN, WAREHOUSE, OWNER),
    create_roles=(ADMIN, WAREHOUSE, OWNER),
    status_roles=(ADMIN, WAREHOUSE, OWNER),
)
_register_document_routes(
    sales_orders_bp,
    lambda db: SalesOrderService(SalesOrderRepository(db), notifier_for(db)),
    SalesOrderRequest,
    "Sales order",
    read_roles=None,
    create_roles=(ADMIN, CASHIER, OWNER),
    status_roles=(ADMIN, CASHIER, OWNER),
)
_register_document_routes(
    returns_bp,
    lambda db: ReturnService(ReturnRepository(db), notifier_for(db)),
    ProductReturnRequest,
    "Return",
    read_roles=(ADMIN, CASHIER, WAREHOUSE, OWNER),
    create_roles=(ADMIN, CASHIER, WAREHOUSE, OWNER),
    status_roles=(ADMIN, WAREHOUSE, OWNER),
)
