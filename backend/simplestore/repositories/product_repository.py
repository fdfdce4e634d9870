from datetime import datetime, timezone
from typing import List, Optional

from sqlalchemy import select

from simplestore.core.exceptions import NotFoundError
from simplestore.core.validation import ValidationError
from simplestore.db.base import Category as DbCategory
from simplestore.db.base import Product as DbProduct
from simplestore.domain.entities import Product
from simplestore.domain.interfaces import IProductRepository

from simplestore.repositories.sql_helpers import commit_or_conflict


class ProductRepository(IProductRepository):
    """Product persistence. Listings carry the category name through a
    left outer join so uncategorised products are included."""

    def __init__(self, db_session):
        self.db = db_session

    def _select_with_category(self):
        return select(DbProduct, DbCategory.name).outerjoin(
            DbCategory, DbProduct.category_id == DbCategory.id
        )

    def list_all(self) -> List[Product]:
        rows = self.db.execute(
            self._select_with_category().order_by(DbProduct.name, DbProduct.id)
        ).all()
        return [self._to_domain(product, category_name) for product, category_name in rows]

    def get_by_id(self, product_id: int) -> Optional[Product]:
        row = self.db.execute(
            self._select_with_category().where(DbProduct.id == product_id)
        ).first()
        if row is None:
            return None
        product, category_name = row
        return self._to_domain(product, category_name)

    def list_low_stock(self, threshold: int) -> List[Product]:
        rows = self.db.execute(
            self._select_with_category()
            .where(DbProduct.stock < threshold)
            .order_by(DbProduct.stock, DbProduct.name)
        ).all()
        return [self._to_domain(product, category_name) for product, category_name in rows]

    def create(self, product: Product) -> Product:
        self._ensure_category(product.category_id)
        row = DbProduct(
            code=product.code,
            name=product.name,
            category_id=product.category_id,
            cost_price=product.cost_price,
            sell_price=product.sell_price,
            stock=product.stock,
            last_updated=datetime.now(timezone.utc),
        )
        self.db.add(row)
        commit_or_conflict(self.db, f"Product code '{product.code}' already exists")
        return self.get_by_id(row.id)

    def update(self, product: Product) -> Product:
        row = self.db.get(DbProduct, product.id)
        if not row:
            raise NotFoundError("Product not found")
        self._ensure_category(product.category_id)
        row.code = product.code
        row.name = product.name
        row.category_id = product.category_id
        row.cost_price = product.cost_price
        row.sell_price = product.sell_price
        if row.stock != product.stock:
            row.stock = product.stock
            row.last_updated = datetime.now(timezone.utc)
        commit_or_conflict(self.db, f"Product code '{product.code}' already exists")
        return self.get_by_id(row.id)

    def delete(self, product_id: int) -> None:
        row = self.db.get(DbProduct, product_id)
        if not row:
            raise NotFoundError("Product not found")
        self.db.delete(row)
        commit_or_conflict(self.db, "Product is referenced by orders or returns")

    def _ensure_category(self, category_id: Optional[int]) -> None:
        if category_id is not None and self.db.get(DbCategory, category_id) is None:
            raise ValidationError(f"Category {category_id} does not exist", "categoryId")

    def _to_domain(self, row: DbProduct, category_name: Optional[str] = None) -> Product:
        return product_to_domain(row, category_name)


def product_to_domain(row: DbProduct, category_name: Optional[str] = None) -> Product:
    return Product(
        id=row.id,
        code=row.code,
        name=row.name,
        category_id=row.category_id,
        cost_price=row.cost_price,
        sell_price=row.sell_price,
        stock=row.stock,
        category_name=category_name,
        last_updated=row.last_updated,
        created_at=row.created_at,
    )
