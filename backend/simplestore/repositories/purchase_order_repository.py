from simplestore.db.base import PurchaseOrder as DbPurchaseOrder
from simplestore.db.base import PurchaseOrderItem as DbPurchaseOrderItem
from simplestore.db.base import Vendor as DbVendor
from simplestore.domain.entities import PURCHASE_STATUSES, PurchaseOrder, Vendor
from simplestore.domain.interfaces import IPurchaseOrderRepository
from simplestore.repositories.contact_repository import contact_to_domain
from simplestore.repositories.order_numbers import PURCHASE_ORDER_PREFIX
from simplestore.repositories.stock_document_repository import StockDocumentRepository


class PurchaseOrderRepository(StockDocumentRepository, IPurchaseOrderRepository):
    """Purchase orders receive goods: creation adds stock."""

    model = DbPurchaseOrder
    item_model = DbPurchaseOrderItem
    prefix = PURCHASE_ORDER_PREFIX
    party_model = DbVendor
    party_attr = "vendor"
    party_id_attr = "vendor_id"
    allowed_statuses = PURCHASE_STATUSES
    stock_direction = 1
    label = "Purchase order"

    def _new_row(self, document: PurchaseOrder) -> DbPurchaseOrder:
        return DbPurchaseOrder(
            vendor_id=document.vendor_id,
            date=document.date,
            status=document.status,
            due_date=document.due_date,
            notes=document.notes,
            created_by=document.created_by,
        )

    def _to_domain(self, row: DbPurchaseOrder, with_items: bool = False) -> PurchaseOrder:
        return PurchaseOrder(
            id=row.id,
            order_number=row.order_number,
            vendor_id=row.vendor_id,
            date=row.date,
            total_amount=row.total_amount,
            status=row.status,
            due_date=row.due_date,
            notes=row.notes,
            created_by=row.created_by,
            created_at=row.created_at,
            vendor=contact_to_domain(Vendor, row.vendor) if row.vendor else None,
            items=self._lines_to_domain(row) if with_items else [],
        )
