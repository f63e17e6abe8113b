# Import all models so they're registered with Base.metadata
from app.models.user import AdminUser
from app.models.category import Category
from app.models.property import Property
from app.models.property_images import PropertyImage
from app.models.image import Image
from app.models.contact import ContactInfo, Company

__all__ = [
    "AdminUser",
    "Category",
    "Property",
    "PropertyImage",
    "Image",
    "ContactInfo",
    "Company",
]
