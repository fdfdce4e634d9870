"""
Shared persistence for documents that move stock: purchase orders, sales
orders and product returns.

Creating a document and applying its stock movement happen in one
transaction, as does reversing the movement when the document is deleted.
Stock can never end up negative: the offending line raises
``InsufficientStockError`` and the whole transaction is rolled back.
"""

import logging
from datetime import datetime, timezone
from typing import List

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import selectinload

from simplestore.core.config import today
from simplestore.core.exceptions import (
    InsufficientStockError,
    NotFoundError,
    OrderNumberExhaustedError,
)
from simplestore.core.validation import ValidationError
from simplestore.db.base import Product as DbProduct
from simplestore.domain.entities import OrderLine, lines_total
from simplestore.repositories.order_numbers import next_order_number
from simplestore.repositories.product_repository import product_to_domain
from simplestore.repositories.sql_helpers import commit_or_conflict

logger = logging.getLogger(__name__)

MAX_NUMBER_ATTEMPTS = 3


class StockDocumentRepository:
    """Base class; subclasses describe their tables through class attributes.

    Attributes:
        model: Header ORM class
        item_model: Line ORM class
        number_attr: Header column holding the document number
        prefix: Document number prefix (PO, SO, RET)
        party_model: ORM class of the counterpart (Vendor or Customer)
        party_attr: Relationship name of the counterpart on the header
        party_id_attr: Foreign key name of the counterpart on the header
        status_attr: Header column updated by ``update_status``
        allowed_statuses: Accepted values for ``status_attr``
        stock_direction: +1 when creation adds stock, -1 when it removes it
        label: Human-readable name for messages
    """

    model = None
    item_model = None
    number_attr = "order_number"
    prefix = ""
    party_model = None
    party_attr = ""
    party_id_attr = ""
    status_attr = "status"
    allowed_statuses: tuple = ()
    stock_direction = 1
    label = "Document"

    def __init__(self, db_session):
        self.db = db_session

    # ---------------- reads ----------------

    def list_all(self) -> List:
        rows = (
            self.db.query(self.model)
            .options(selectinload(getattr(self.model, self.party_attr)))
            .order_by(self.model.date.desc(), self.model.id.desc())
            .all()
        )
        return [self._to_domain(row) for row in rows]

    def get_by_id(self, document_id: int):
        row = self._load(document_id)
        return self._to_domain(row, with_items=True) if row else None

    def _load(self, document_id: int):
        return (
            self.db.query(self.model)
            .options(
                selectinload(getattr(self.model, self.party_attr)),
                selectinload(self.model.items).selectinload(self.item_model.product),
            )
            .filter(self.model.id == document_id)
            .first()
        )

    # ---------------- writes ----------------

    def create(self, document, lines: List[OrderLine]):
        """Persist ``document`` with ``lines`` and apply the stock movement.

        The number is allocated inside the transaction; a unique-constraint
        collision with a concurrent writer is retried with a fresh number.
        """
        if not lines:
            raise ValidationError("At least one item is required", "items")
        self._validate_references(document)

        for attempt in range(1, MAX_NUMBER_ATTEMPTS + 1):
            try:
                row = self._new_row(document)
                setattr(
                    row,
                    self.number_attr,
                    next_order_number(
                        self.db,
                        getattr(self.model, self.number_attr),
                        self.prefix,
                        today(),
                    ),
                )
                row.total_amount = lines_total(lines)
                for line in lines:
                    product = self._lock_product(line.product_id)
                    self._move_stock(product, self.stock_direction * line.quantity)
                    row.items.append(
                        self.item_model(
                            product_id=line.product_id,
                            quantity=line.quantity,
                            price=line.price,
                            total=line.total,
                        )
                    )
                self.db.add(row)
                self.db.commit()
            except IntegrityError as e:
                self.db.rollback()
                logger.warning(
                    f"{self.label} number collision, retrying",
                    extra={"context": {"attempt": attempt, "error": str(e.orig)}},
                )
                continue
            except Exception:
                self.db.rollback()
                raise

            logger.info(
                f"{self.label} created",
                extra={
                    "context": {
                        "id": row.id,
                        "number": getattr(row, self.number_attr),
                        "total_amount": str(row.total_amount),
                        "lines": len(lines),
                    }
                },
            )
            return self.get_by_id(row.id)

        raise OrderNumberExhaustedError(
            f"Could not allocate a unique {self.label.lower()} number"
        )

    def update_status(self, document_id: int, status: str):
        if status not in self.allowed_statuses:
            raise ValidationError(
                f"must be one of {', '.join(self.allowed_statuses)}", "status"
            )
        row = self.db.get(self.model, document_id)
        if not row:
            raise NotFoundError(f"{self.label} not found")
        setattr(row, self.status_attr, status)
        commit_or_conflict(self.db, f"{self.label} could not be updated")
        return self.get_by_id(document_id)

    def delete(self, document_id: int) -> None:
        """Reverse the stock movement, then delete lines and header."""
        row = self._load(document_id)
        if not row:
            raise NotFoundError(f"{self.label} not found")
        try:
            for item in row.items:
                product = self._lock_product(item.product_id)
                self._move_stock(product, -self.stock_direction * item.quantity)
            self.db.delete(row)
        except Exception:
            self.db.rollback()
            raise
        commit_or_conflict(self.db, f"{self.label} could not be deleted")
        logger.info(
            f"{self.label} deleted",
            extra={"context": {"id": document_id, "lines": len(row.items)}},
        )

    # ---------------- helpers ----------------

    def _validate_references(self, document) -> None:
        party_id = getattr(document, self.party_id_attr)
        if not party_id or self.db.get(self.party_model, party_id) is None:
            raise ValidationError(
                f"{self.party_model.__name__} {party_id} does not exist",
                f"{self.party_model.__name__.lower()}Id",
            )

    def _lock_product(self, product_id: int) -> DbProduct:
        product = self.db.get(DbProduct, product_id, with_for_update=True)
        if product is None:
            raise ValidationError(f"Product {product_id} does not exist", "productId")
        return product

    def _move_stock(self, product: DbProduct, delta: int) -> None:
        new_stock = product.stock + delta
        if new_stock < 0:
            raise InsufficientStockError(product.code, product.stock, -delta)
        product.stock = new_stock
        product.last_updated = datetime.now(timezone.utc)

    def _lines_to_domain(self, row) -> List[OrderLine]:
        return [
            OrderLine(
                id=item.id,
                product_id=item.product_id,
                quantity=item.quantity,
                price=item.price,
                product=product_to_domain(item.product) if item.product else None,
            )
            for item in row.items
        ]

    def _new_row(self, document):  # pragma: no cover - subclass hook
        raise NotImplementedError

    def _to_domain(self, row, with_items: bool = False):  # pragma: no cover
        raise NotImplementedError
