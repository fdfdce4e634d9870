# Services package initialization
# This file makes the services directory a Python package
# and allows importing service modules

from . import catalog_service
from . import contact_service
from . import dashboard_service
from . import notification_service
from . import order_service
from . import pdf_service
from . import report_service
from . import settings_service
from . import user_service

__all__ = [
    "catalog_service",
    "contact_service",
    "dashboard_service",
    "notification_service",
    "order_service",
    "pdf_service",
    "report_service",
    "settings_service",
    "user_service",
]
