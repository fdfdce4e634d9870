"""
Company and system settings.

Both documents live in the key/value ``settings`` table. Reads overlay the
stored document on the defaults, so keys added later still get a value;
updates merge the supplied keys into the stored document.
"""

import logging
from typing import Any, Dict

from simplestore.core.config import LOW_STOCK_DEFAULT_THRESHOLD
from simplestore.domain.interfaces import ISettingsRepository

logger = logging.getLogger(__name__)

COMPANY_KEY = "company"
SYSTEM_KEY = "system"

DEFAULT_COMPANY_NAME = "SimpleStore - Inventory Management System"

COMPANY_DEFAULTS: Dict[str, Any] = {
    "companyName": "",
    "address": "",
    "phone": "",
    "email": "",
    "website": "",
    "taxId": "",
}

SYSTEM_DEFAULTS: Dict[str, Any] = {
    "defaultLanguage": "en",
    "enableEmailNotifications": False,
    "enableStockAlerts": True,
    "lowStockThreshold": LOW_STOCK_DEFAULT_THRESHOLD,
    "defaultCurrency": "USD",
    "backupFrequency": "daily",
}


class SettingsService:
    def __init__(self, repo: ISettingsRepository) -> None:
        self.repo = repo

    def _load(self, key: str, defaults: Dict[str, Any]) -> Dict[str, Any]:
        return {**defaults, **(self.repo.get(key) or {})}

    def _merge(self, key: str, defaults: Dict[str, Any], changes: Dict[str, Any]):
        stored = self.repo.get(key) or {}
        saved = self.repo.save(key, {**stored, **changes})
        logger.info(
            "Settings updated",
            extra={"context": {"key": key, "fields": sorted(changes)}},
        )
        return {**defaults, **saved}

    def get_company(self) -> Dict[str, Any]:
        return self._load(COMPANY_KEY, COMPANY_DEFAULTS)

    def update_company(self, changes: Dict[str, Any]) -> Dict[str, Any]:
        return self._merge(COMPANY_KEY, COMPANY_DEFAULTS, changes)

    def get_system(self) -> Dict[str, Any]:
        return self._load(SYSTEM_KEY, SYSTEM_DEFAULTS)

    def update_system(self, changes: Dict[str, Any]) -> Dict[str, Any]:
        return self._merge(SYSTEM_KEY, SYSTEM_DEFAULTS, changes)

    def company_name(self) -> str:
        """Name printed in PDF headers."""
        return self.get_company().get("companyName") or DEFAULT_COMPANY_NAME

    def low_stock_threshold(self) -> int:
        return int(self.get_system()["lowStockThreshold"])

    def notifications_enabled(self) -> bool:
        return bool(self.get_system()["enableEmailNotifications"])

    def stock_alerts_enabled(self) -> bool:
        return bool(self.get_system()["enableStockAlerts"])
