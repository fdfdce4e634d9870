"""
Helpers shared by the API controllers: service wiring on a request-scoped
session, and access to the signed-in user.
"""

from typing import Optional

from flask import send_file
from flask_login import current_user
from io import BytesIO

from simplestore.repositories.settings_repository import SettingsRepository
from simplestore.repositories.user_repository import UserRepository
from simplestore.services.notification_service import NotificationService
from simplestore.services.settings_service import SettingsService


def settings_service_for(db) -> SettingsService:
    return SettingsService(SettingsRepository(db))


def notifier_for(db) -> NotificationService:
    return NotificationService(UserRepository(db), settings_service_for(db))


def current_user_id() -> Optional[int]:
    return getattr(current_user, "id", None)


def pdf_response(content: bytes, filename: str):
    return send_file(
        BytesIO(content),
        mimetype="application/pdf",
        as_attachment=True,
        download_name=filename,
    )


def view_name(name: str):
    """Rename a generated view so endpoints and rate-limit scopes stay unique."""

    def rename(f):
        f.__name__ = name
        f.__qualname__ = name
        return f

    return rename
