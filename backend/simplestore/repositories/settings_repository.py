from typing import Any, Dict, Optional

from simplestore.db.base import Setting
from simplestore.domain.interfaces import ISettingsRepository
from simplestore.repositories.sql_helpers import commit_or_conflict


class SettingsRepository(ISettingsRepository):
    """Key/value storage of JSON settings documents."""

    def __init__(self, db_session):
        self.db = db_session

    def get(self, key: str) -> Optional[Dict[str, Any]]:
        row = self.db.get(Setting, key)
        return dict(row.value) if row else None

    def save(self, key: str, value: Dict[str, Any]) -> Dict[str, Any]:
        row = self.db.get(Setting, key)
        if row is None:
            row = Setting(key=key, value=dict(value))
            self.db.add(row)
        else:
            # Reassign so the JSON column is flagged as modified
            row.value = dict(value)
        commit_or_conflict(self.db, f"Setting '{key}' could not be saved")
        return dict(row.value)
