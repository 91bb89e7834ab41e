# import every model so that SQLAlchemy registers it in Base.metadata

from warranty_hub.data.models.category import CategoryModel
from warranty_hub.data.models.subcategory import SubcategoryModel
from warranty_hub.data.models.product import ProductModel, ProductImageModel
from warranty_hub.data.models.serial_number import SerialNumberModel
from warranty_hub.data.models.warranty_registration import WarrantyRegistrationModel
from warranty_hub.data.models.contact_message import ContactMessageModel
from warranty_hub.data.models.admin_user import AdminUserModel

__all__ = [
    "CategoryModel",
    "SubcategoryModel",
    "ProductModel",
    "ProductImageModel",
    "SerialNumberModel",
    "WarrantyRegistrationModel",
    "ContactMessageModel",
    "AdminUserModel",
]
