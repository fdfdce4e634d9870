from flask import Blueprint

from simplestore.core.api_utils import api_response, get_json_body
from simplestore.core.auth_decorators import MANAGERS, require_login, require_roles
from simplestore.core.limiter_config import READ_LIMIT, WRITE_LIMIT, limiter
from simplestore.db.session import SessionLocal
from simplestore.repositories.category_repository import CategoryRepository
from simplestore.schemas.dtos import CategoryRequest, entity_to_dict
from simplestore.services.catalog_service import CategoryService

categories_bp = Blueprint("categories", __name__, url_prefix="/api/categories")


@categories_bp.route("", methods=["GET"])
@limiter.limit(READ_LIMIT)
@require_login
def list_categories():
    db = SessionLocal()
    try:
        service = CategoryService(CategoryRepository(db))
        categories = service.list_categories()
        return api_response(
            True, "Categories retrieved", [entity_to_dict(c) for c in categories]
        )
    finally:
        db.close()


@categories_bp.route("/<int:category_id>", methods=["GET"])
@limiter.limit(READ_LIMIT)
@require_login
def get_category(category_id: int):
    db = SessionLocal()
    try:
        service = CategoryService(CategoryRepository(db))
        category = service.get_category(category_id)
        return api_response(True, "Category retrieved", entity_to_dict(category))
    finally:
        db.close()


@categories_bp.route("", methods=["POST"])
@limiter.limit(WRITE_LIMIT)
@require_roles(*MANAGERS)
def create_category():
    request_dto = CategoryRequest.from_dict(get_json_body())
    db = SessionLocal()
    try:
        service = CategoryService(CategoryRepository(db))
        category = service.create_category(request_dto)
        return api_response(True, "Category created", entity_to_dict(category), 201)
    finally:
        db.close()


@categories_bp.route("/<int:category_id>", methods=["PUT", "PATCH"])
@limiter.limit(WRITE_LIMIT)
@require_roles(*MANAGERS)
def update_category(category_id: int):
    request_dto = CategoryRequest.from_dict(get_json_body(), partial=True)
    db = SessionLocal()
    try:
        service = CategoryService(CategoryRepository(db))
        category = service.update_category(category_id, request_dto)
        return api_response(True, "Category updated", entity_to_dict(category))
    finally:
        db.close()


@categories_bp.route("/<int:category_id>", methods=["DELETE"])
@limiter.limit(WRITE_LIMIT)
@require_roles(*MANAGERS)
def delete_category(category_id: int):
    db = SessionLocal()
    try:
        CategoryService(CategoryRepository(db)).delete_category(category_id)
        return "", 204
    finally:
        db.close()
