from simplestore.db.base import Vendor as DbVendor
from simplestore.domain.entities import Vendor
from simplestore.domain.interfaces import IVendorRepository
from simplestore.repositories.contact_repository import ContactRepository


class VendorRepository(ContactRepository, IVendorRepository):
    model = DbVendor
    entity = Vendor
    label = "Vendor"
