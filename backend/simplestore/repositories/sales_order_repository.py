from simplestore.db.base import Customer as DbCustomer
from simplestore.db.base import SalesOrder as DbSalesOrder
from simplestore.db.base import SalesOrderItem as DbSalesOrderItem
from simplestore.domain.entities import PAYMENT_STATUSES, Customer, SalesOrder
from simplestore.domain.interfaces import ISalesOrderRepository
from simplestore.repositories.contact_repository import contact_to_domain
from simplestore.repositories.order_numbers import SALES_ORDER_PREFIX
from simplestore.repositories.stock_document_repository import StockDocumentRepository


class SalesOrderRepository(StockDocumentRepository, ISalesOrderRepository):
    """Sales orders ship goods: creation removes stock and is refused
    when a line asks for more than is on hand."""

    model = DbSalesOrder
    item_model = DbSalesOrderItem
    prefix = SALES_ORDER_PREFIX
    party_model = DbCustomer
    party_attr = "customer"
    party_id_attr = "customer_id"
    status_attr = "payment_status"
    allowed_statuses = PAYMENT_STATUSES
    stock_direction = -1
    label = "Sales order"

    def _new_row(self, document: SalesOrder) -> DbSalesOrder:
        return DbSalesOrder(
            customer_id=document.customer_id,
            date=document.date,
            payment_status=document.payment_status,
            due_date=document.due_date,
            notes=document.notes,
            created_by=document.created_by,
        )

    def _to_domain(self, row: DbSalesOrder, with_items: bool = False) -> SalesOrder:
        return SalesOrder(
            id=row.id,
            order_number=row.order_number,
            customer_id=row.customer_id,
            date=row.date,
            total_amount=row.total_amount,
            payment_status=row.payment_status,
            due_date=row.due_date,
            notes=row.notes,
            created_by=row.created_by,
            created_at=row.created_at,
            customer=contact_to_domain(Customer, row.customer) if row.customer else None,
            items=self._lines_to_domain(row) if with_items else [],
        )
