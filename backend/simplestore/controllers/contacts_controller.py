"""
Customer and vendor endpoints.

Both resources share the same CRUD shape; ``_register_contact_routes`` wires
one blueprint per resource with its own write roles.
"""

from flask import Blueprint

from simplestore.controllers.controller_helpers import view_name
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
from simplestore.repositories.customer_repository import CustomerRepository
from simplestore.repositories.vendor_repository import VendorRepository
from simplestore.schemas.dtos import ContactRequest, entity_to_dict
from simplestore.services.contact_service import CustomerService, VendorService

customers_bp = Blueprint("customers", __name__, url_prefix="/api/customers")
vendors_bp = Blueprint("vendors", __name__, url_prefix="/api/vendors")


def _register_contact_routes(bp, repo_cls, service_cls, write_roles, label):
    def build_service(db):
        return service_cls(repo_cls(db))

    @bp.route("", methods=["GET"])
    @limiter.limit(READ_LIMIT)
    @require_login
    @view_name(f"list_contacts_{bp.name}")
    def list_contacts():
        db = SessionLocal()
        try:
            contacts = build_service(db).list_all()
            return api_response(
                True, f"{label}s retrieved", [entity_to_dict(c) for c in contacts]
            )
        finally:
            db.close()

    @bp.route("/<int:contact_id>", methods=["GET"])
    @limiter.limit(READ_LIMIT)
    @require_login
    @view_name(f"get_contact_{bp.name}")
    def get_contact(contact_id: int):
        db = SessionLocal()
        try:
            contact = build_service(db).get(contact_id)
            return api_response(True, f"{label} retrieved", entity_to_dict(contact))
        finally:
            db.close()

    @bp.route("", methods=["POST"])
    @limiter.limit(WRITE_LIMIT)
    @require_roles(*write_roles)
    @view_name(f"create_contact_{bp.name}")
    def create_contact():
        request_dto = ContactRequest.from_dict(get_json_body())
        db = SessionLocal()
        try:
            contact = build_service(db).create(request_dto)
            return api_response(True, f"{label} created", entity_to_dict(contact), 201)
        finally:
            db.close()

    @bp.route("/<int:contact_id>", methods=["PUT", "PATCH"])
    @limiter.limit(WRITE_LIMIT)
    @require_roles(*write_roles)
    @view_name(f"update_contact_{bp.name}")
    def update_contact(contact_id: int):
        request_dto = ContactRequest.from_dict(get_json_body(), partial=True)
        db = SessionLocal()
        try:
            contact = build_service(db).update(contact_id, request_dto)
            return api_response(True, f"{label} updated", entity_to_dict(contact))
        finally:
            db.close()

    @bp.route("/<int:contact_id>", methods=["DELETE"])
    @limiter.limit(WRITE_LIMIT)
    @require_roles(*MANAGERS)
    @view_name(f"delete_contact_{bp.name}")
    def delete_contact(contact_id: int):
        db = SessionLocal()
        try:
            build_service(db).delete(contact_id)
            return "", 204
        finally:
            db.close()


_register_contact_routes(
    customers_bp,
    CustomerRepository,
    CustomerService,
    (ADMIN, CASHIER, OWNER),
    "Customer",
)
_register_contact_routes(
    vendors_bp,
    VendorRepository,
    VendorService,
    (ADMIN, WAREHOUSE, OWNER),
    "Vendor",
)
