"""
Category and product use-cases.

Updating a product that ends below the configured low-stock threshold
triggers a ``low_stock`` notification.
"""

import logging
from typing import List, Optional

from simplestore.core.exceptions import NotFoundError
from simplestore.domain.entities import Category, Product
from simplestore.domain.interfaces import ICategoryRepository, IProductRepository
from simplestore.schemas.dtos import CategoryRequest, ProductRequest
from simplestore.services.entity_helpers import apply_changes, build_entity
from simplestore.services.notification_service import LOW_STOCK, NotificationService
from simplestore.services.settings_service import SettingsService

logger = logging.getLogger(__name__)


class CategoryService:
    def __init__(self, repo: ICategoryRepository) -> None:
        self.repo = repo

    def list_categories(self) -> List[Category]:
        return self.repo.list_all()

    def get_category(self, category_id: int) -> Category:
        category = self.repo.get_by_id(category_id)
        if not category:
            raise NotFoundError("Category not found")
        return category

    def create_category(self, request: CategoryRequest) -> Category:
        category = build_entity(
            Category, name=request.name, description=request.description
        )
        return self.repo.create(category)

    def update_category(self, category_id: int, request: CategoryRequest) -> Category:
        category = apply_changes(self.get_category(category_id), request.changes())
        return self.repo.update(category)

    def delete_category(self, category_id: int) -> None:
        self.repo.delete(category_id)


class ProductService:
    """Application service for products."""

    def __init__(
        self,
        repo: IProductRepository,
        settings_service: Optional[SettingsService] = None,
        notifier: Optional[NotificationService] = None,
    ) -> None:
        self.repo = repo
        self.settings_service = settings_service
        self.notifier = notifier

    def list_products(self) -> List[Product]:
        return self.repo.list_all()

    def get_product(self, product_id: int) -> Product:
        product = self.repo.get_by_id(product_id)
        if not product:
            raise NotFoundError("Product not found")
        return product

    def create_product(self, request: ProductRequest) -> Product:
        product = build_entity(
            Product,
            code=request.code,
            name=request.name,
            category_id=request.category_id,
            cost_price=request.cost_price,
            sell_price=request.sell_price,
            stock=request.stock,
        )
        return self.repo.create(product)

    def update_product(self, product_id: int, request: ProductRequest) -> Product:
        product = apply_changes(self.get_product(product_id), request.changes())
        updated = self.repo.update(product)
        self._check_low_stock(updated)
        return updated

    def delete_product(self, product_id: int) -> None:
        self.repo.delete(product_id)

    def low_stock_threshold(self) -> int:
        return self.settings_service.low_stock_threshold()

    def list_low_stock(self, threshold: Optional[int] = None) -> List[Product]:
        if threshold is None or threshold < 1:
            threshold = self.low_stock_threshold()
        return self.repo.list_low_stock(threshold)

    def _check_low_stock(self, product: Product) -> None:
        if not (self.settings_service and self.notifier):
            return
        threshold = self.low_stock_threshold()
        if product.stock < threshold:
            logger.warning(
                "Product below low-stock threshold",
                extra={
                    "context": {
                        "product_id": product.id,
                        "code": product.code,
                        "stock": product.stock,
                        "threshold": threshold,
                    }
                },
            )
            self.notifier.notify(
                LOW_STOCK,
                {"name": product.name, "code": product.code, "stock": product.stock},
            )
