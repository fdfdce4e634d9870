from typing import List, Optional

from simplestore.core.exceptions import NotFoundError
from simplestore.repositories.sql_helpers import commit_or_conflict


class ContactRepository:
    """CRUD shared by customers and vendors, which have identical columns.

    Subclasses set ``model`` (SQLAlchemy class), ``entity`` (domain class)
    and ``label`` (used in error messages).
    """

    model = None
    entity = None
    label = "Contact"

    def __init__(self, db_session):
        self.db = db_session

    def list_all(self) -> List:
        rows = self.db.query(self.model).order_by(self.model.name, self.model.id).all()
        return [self._to_domain(row) for row in rows]

    def get_by_id(self, contact_id: int) -> Optional[object]:
        row = self.db.get(self.model, contact_id)
        return self._to_domain(row) if row else None

    def create(self, contact):
        row = self.model(
            code=contact.code,
            name=contact.name,
            phone=contact.phone,
            address=contact.address,
        )
        self.db.add(row)
        commit_or_conflict(self.db, f"{self.label} code '{contact.code}' already exists")
        self.db.refresh(row)
        return self._to_domain(row)

    def update(self, contact):
        row = self.db.get(self.model, contact.id)
        if not row:
            raise NotFoundError(f"{self.label} not found")
        row.code = contact.code
        row.name = contact.name
        row.phone = contact.phone
        row.address = contact.address
        commit_or_conflict(self.db, f"{self.label} code '{contact.code}' already exists")
        self.db.refresh(row)
        return self._to_domain(row)

    def delete(self, contact_id: int) -> None:
        row = self.db.get(self.model, contact_id)
        if not row:
            raise NotFoundError(f"{self.label} not found")
        self.db.delete(row)
        commit_or_conflict(self.db, f"{self.label} is referenced by existing orders")

    def _to_domain(self, row):
        return contact_to_domain(self.entity, row)


def contact_to_domain(entity_cls, row):
    return entity_cls(
        id=row.id,
        code=row.code,
        name=row.name,
        phone=row.phone,
        address=row.address,
        created_at=row.created_at,
    )
