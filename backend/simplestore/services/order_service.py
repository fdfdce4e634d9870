"""
Purchase order, sales order and return use-cases.

Stock bookkeeping and numbering happen in the repositories inside one
transaction; this layer adds the notifications that follow a sale or a
return.
"""

import logging
from typing import List, Optional

from simplestore.core.exceptions import NotFoundError
from simplestore.domain.entities import ProductReturn, SalesOrder
from simplestore.domain.interfaces import (
    IPurchaseOrderRepository,
    IReturnRepository,
    ISalesOrderRepository,
)
from simplestore.services.notification_service import (
    RETURN,
    SALE,
    NotificationService,
)

logger = logging.getLogger(__name__)


class StockDocumentService:
    label = "Document"

    def __init__(self, repo, notifier: Optional[NotificationService] = None) -> None:
        self.repo = repo
        self.notifier = notifier

    def list_all(self) -> List:
        return self.repo.list_all()

    def get(self, document_id: int):
        document = self.repo.get_by_id(document_id)
        if not document:
            raise NotFoundError(f"{self.label} not found")
        return document

    def create(self, request, created_by: Optional[int] = None):
        document = self.repo.create(request.to_entity(created_by), request.lines)
        self._after_create(document)
        return document

    def update_status(self, document_id: int, status: str):
        document = self.repo.update_status(document_id, status)
        logger.info(
            f"{self.label} status changed",
            extra={"context": {"id": document_id, "status": status}},
        )
        return document

    def delete(self, document_id: int) -> None:
        self.repo.delete(document_id)

    def _after_create(self, document) -> None:
        pass


class PurchaseOrderService(StockDocumentService):
    label = "Purchase order"

    def __init__(self, repo: IPurchaseOrderRepository) -> None:
        super().__init__(repo)


class SalesOrderService(StockDocumentService):
    label = "Sales order"

    def __init__(
        self, repo: ISalesOrderRepository, notifier: Optional[NotificationService] = None
    ) -> None:
        super().__init__(repo, notifier)

    def _after_create(self, order: SalesOrder) -> None:
        if self.notifier and order.customer:
            self.notifier.notify(
                SALE,
                {
                    "orderNumber": order.order_number,
                    "customerName": order.customer.name,
                    "totalAmount": order.total_amount,
                },
            )


class ReturnService(StockDocumentService):
    label = "Return"

    def __init__(
        self, repo: IReturnRepository, notifier: Optional[NotificationService] = None
    ) -> None:
        super().__init__(repo, notifier)

    def _after_create(self, product_return: ProductReturn) -> None:
        if self.notifier and product_return.customer:
            self.notifier.notify(
                RETURN,
                {
                    "returnNumber": product_return.return_number,
                    "customerName": product_return.customer.name,
                    "totalAmount": product_return.total_amount,
                },
            )
