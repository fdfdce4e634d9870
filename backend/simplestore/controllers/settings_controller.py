from flask import Blueprint

from simplestore.controllers.controller_helpers import settings_service_for
from simplestore.core.api_utils import api_response, get_json_body
from simplestore.core.auth_decorators import MANAGERS, require_login, require_roles
from simplestore.core.limiter_config import READ_LIMIT, WRITE_LIMIT, limiter
from simplestore.db.session import SessionLocal
from simplestore.schemas.dtos import (
    company_settings_from_dict,
    system_settings_from_dict,
)

settings_bp = Blueprint("settings", __name__, url_prefix="/api/settings")


@settings_bp.route("/company", methods=["GET"])
@limiter.limit(READ_LIMIT)
@require_login
def get_company_settings():
    db = SessionLocal()
    try:
        return api_response(
            True, "Company settings retrieved", settings_service_for(db).get_company()
        )
    finally:
        db.close()


@settings_bp.route("/company", methods=["PATCH", "PUT"])
@limiter.limit(WRITE_LIMIT)
@require_roles(*MANAGERS)
def update_company_settings():
    changes = company_settings_from_dict(get_json_body())
    db = SessionLocal()
    try:
        settings = settings_service_for(db).update_company(changes)
        return api_response(True, "Company settings updated", settings)
    finally:
        db.close()


@settings_bp.route("/system", methods=["GET"])
@limiter.limit(READ_LIMIT)
@require_login
def get_system_settings():
    db = SessionLocal()
    try:
        return api_response(
            True, "System settings retrieved", settings_service_for(db).get_system()
        )
    finally:
        db.close()


@settings_bp.route("/system", methods=["PATCH", "PUT"])
@limiter.limit(WRITE_LIMIT)
@require_roles(*MANAGERS)
def update_system_settings():
    changes = system_settings_from_dict(get_json_body())
    db = SessionLocal()
    try:
        settings = settings_service_for(db).update_system(changes)
        return api_response(True, "System settings updated", settings)
    finally:
        db.close()
