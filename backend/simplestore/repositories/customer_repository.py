from simplestore.db.base import Customer as DbCustomer
from simplestore.domain.entities import Customer
from simplestore.domain.interfaces import ICustomerRepository
from simplestore.repositories.contact_repository import ContactRepository


class CustomerRepository(ContactRepository, ICustomerRepository):
    model = DbCustomer
    entity = Customer
    label = "Customer"
