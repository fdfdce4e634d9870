from typing import List, Optional

from simplestore.core.exceptions import NotFoundError
from simplestore.db.base import Category as DbCategory
from simplestore.domain.entities import Category
from simplestore.domain.interfaces import ICategoryRepository

from simplestore.repositories.sql_helpers import commit_or_conflict


class CategoryRepository(ICategoryRepository):
    def __init__(self, db_session):
        self.db = db_session

    def list_all(self) -> List[Category]:
        rows = self.db.query(DbCategory).order_by(DbCategory.name).all()
        return [self._to_domain(row) for row in rows]

    def get_by_id(self, category_id: int) -> Optional[Category]:
        row = self.db.get(DbCategory, category_id)
        return self._to_domain(row) if row else None

    def create(self, category: Category) -> Category:
        row = DbCategory(name=category.name, description=category.description)
        self.db.add(row)
        commit_or_conflict(self.db, "Category could not be saved")
        self.db.refresh(row)
        return self._to_domain(row)

    def update(self, category: Category) -> Category:
        row = self.db.get(DbCategory, category.id)
        if not row:
            raise NotFoundError("Category not found")
        row.name = category.name
        row.description = category.description
        commit_or_conflict(self.db, "Category could not be saved")
        self.db.refresh(row)
        return self._to_domain(row)

    def delete(self, category_id: int) -> None:
        row = self.db.get(DbCategory, category_id)
        if not row:
            raise NotFoundError("Category not found")
        self.db.delete(row)
        commit_or_conflict(self.db, "Category is still used by products")

    def _to_domain(self, row: DbCategory) -> Category:
        return Category(
            id=row.id,
            name=row.name,
            description=row.description,
            created_at=row.created_at,
        )
