"""
Product endpoints, including the low-stock listing.
"""

import logging

from flask import Blueprint

from simplestore.controllers.controller_helpers import (
    notifier_for,
    settings_service_for,
)
from simplestore.core.api_utils import api_response, get_json_body
from simplestore.core.auth_decorators import (
    ADMIN,
    MANAGERS,
    OWNER,
    WAREHOUSE,
    require_login,
    require_roles,
)
from simplestore.core.limiter_config import READ_LIMIT, WRITE_LIMIT, limiter
from simplestore.db.session import SessionLocal
from simplestore.repositories.product_repository import ProductRepository
from simplestore.schemas.dtos import ProductRequest, entity_to_dict
from simplestore.services.catalog_service import ProductService

logger = logging.getLogger(__name__)

products_bp = Blueprint("products", __name__, url_prefix="/api/products")

STOCK_ROLES = (ADMIN, WAREHOUSE, OWNER)


def _service(db) -> ProductService:
    return ProductService(
        ProductRepository(db), settings_service_for(db), notifier_for(db)
    )


@products_bp.route("", methods=["GET"])
@limiter.limit(READ_LIMIT)
@require_login
def list_products():
    db = SessionLocal()
    try:
        products = _service(db).list_products()
        return api_response(
            True, "Products retrieved", [entity_to_dict(p) for p in products]
        )
    finally:
        db.close()


@products_bp.route("/<int:product_id>", methods=["GET"])
@limiter.limit(READ_LIMIT)
@require_login
def get_product(product_id: int):
    db = SessionLocal()
    try:
        product = _service(db).get_product(product_id)
        return api_response(True, "Product retrieved", entity_to_dict(product))
    finally:
        db.close()


@products_bp.route("/low-stock", methods=["GET"])
@products_bp.route("/low-stock/<int:threshold>", methods=["GET"])
@limiter.limit(READ_LIMIT)
@require_roles(*STOCK_ROLES)
def list_low_stock(threshold=None):
    """Products with stock below ``threshold``; 0 or none means the configured value."""
    db = SessionLocal()
    try:
        products = _service(db).list_low_stock(threshold)
        return api_response(
            True, "Low stock products retrieved", [entity_to_dict(p) for p in products]
        )
    finally:
        db.close()


@products_bp.route("", methods=["POST"])
@limiter.limit(WRITE_LIMIT)
@require_roles(*STOCK_ROLES)
def create_product():
    request_dto = ProductRequest.from_dict(get_json_body())
    db = SessionLocal()
    try:
        product = _service(db).create_product(request_dto)
        logger.info(
            "Product created",
            extra={"context": {"product_id": product.id, "code": product.code}},
        )
        return api_response(True, "Product created", entity_to_dict(product), 201)
    finally:
        db.close()


@products_bp.route("/<int:product_id>", methods=["PUT", "PATCH"])
@limiter.limit(WRITE_LIMIT)
@require_roles(*STOCK_ROLES)
def update_product(product_id: int):
    request_dto = ProductRequest.from_dict(get_json_body(), partial=True)
    db = SessionLocal()
    try:
        product = _service(db).update_product(product_id, request_dto)
        return api_response(True, "Product updated", entity_to_dict(product))
    finally:
        db.close()


@products_bp.route("/<int:product_id>", methods=["DELETE"])
@limiter.limit(WRITE_LIMIT)
@require_roles(*MANAGERS)
def delete_product(product_id: int):
    db = SessionLocal()
    try:
        _service(db).delete_product(product_id)
        return "", 204
    finally:
        db.close()
