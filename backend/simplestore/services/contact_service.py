from typing import List

from simplestore.core.exceptions import NotFoundError
from simplestore.domain.entities import Customer, Vendor
from simplestore.domain.interfaces import ICustomerRepository, IVendorRepository
from simplestore.schemas.dtos import ContactRequest
from simplestore.services.entity_helpers import apply_changes, build_entity


class ContactService:
    """CRUD use-cases shared by customers and vendors."""

    entity = None
    label = "Contact"

    def __init__(self, repo) -> None:
        self.repo = repo

    def list_all(self) -> List:
        return self.repo.list_all()

    def get(self, contact_id: int):
        contact = self.repo.get_by_id(contact_id)
        if not contact:
            raise NotFoundError(f"{self.label} not found")
        return contact

    def create(self, request: ContactRequest):
        contact = build_entity(
            self.entity,
            code=request.code,
            name=request.name,
            phone=request.phone,
            address=request.address,
        )
        return self.repo.create(contact)

    def update(self, contact_id: int, request: ContactRequest):
        contact = apply_changes(self.get(contact_id), request.changes())
        return self.repo.update(contact)

    def delete(self, contact_id: int) -> None:
        self.repo.delete(contact_id)


class CustomerService(ContactService):
    entity = Customer
    label = "Customer"

    def __init__(self, repo: ICustomerRepository) -> None:
        super().__init__(repo)


class VendorService(ContactService):
    entity = Vendor
    label = "Vendor"

    def __init__(self, repo: IVendorRepository) -> None:
        super().__init__(repo)
