from simplestore.core.validation import ValidationError
from simplestore.db.base import Customer as DbCustomer
from simplestore.db.base import ProductReturn as DbProductReturn
from simplestore.db.base import ReturnItem as DbReturnItem
from simplestore.db.base import SalesOrder as DbSalesOrder
from simplestore.domain.entities import RETURN_STATUSES, Customer, ProductReturn
from simplestore.domain.interfaces import IReturnRepository
from simplestore.repositories.contact_repository import contact_to_domain
from simplestore.repositories.order_numbers import RETURN_PREFIX
from simplestore.repositories.stock_document_repository import StockDocumentRepository


class ReturnRepository(StockDocumentRepository, IReturnRepository):
    """Customer returns put goods back on the shelf: creation adds stock."""

    model = DbProductReturn
    item_model = DbReturnItem
    number_attr = "return_number"
    prefix = RETURN_PREFIX
    party_model = DbCustomer
    party_attr = "customer"
    party_id_attr = "customer_id"
    allowed_statuses = RETURN_STATUSES
    stock_direction = 1
    label = "Return"

    def _validate_references(self, document: ProductReturn) -> None:
        super()._validate_references(document)
        if document.sales_order_id is None:
            return
        sales_order = self.db.get(DbSalesOrder, document.sales_order_id)
        if sales_order is None:
            raise ValidationError(
                f"Sales order {document.sales_order_id} does not exist",
                "salesOrderId",
            )
        if sales_order.customer_id != document.customer_id:
            raise ValidationError(
                "Sales order belongs to a different customer", "salesOrderId"
            )

    def _new_row(self, document: ProductReturn) -> DbProductReturn:
        return DbProductReturn(
            customer_id=document.customer_id,
            sales_order_id=document.sales_order_id,
            date=document.date,
            status=document.status,
            notes=document.notes,
            created_by=document.created_by,
        )

    def _to_domain(self, row: DbProductReturn, with_items: bool = False) -> ProductReturn:
        return ProductReturn(
            id=row.id,
            return_number=row.return_number,
            customer_id=row.customer_id,
            sales_order_id=row.sales_order_id,
            date=row.date,
            total_amount=row.total_amount,
            status=row.status,
            notes=row.notes,
            created_by=row.created_by,
            created_at=row.created_at,
            customer=contact_to_domain(Customer, row.customer) if row.customer else None,
            items=self._lines_to_domain(row) if with_items else [],
        )
