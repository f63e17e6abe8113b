import logging
from typing import List

from fastapi import HTTPException, status
from sqlalchemy.orm import Session

from app.models.category import Category
from app.models.property import Property
from app.models.property_images import PropertyImage
from app.schemas.property import PropertyCreate, PropertyImageIn, PropertyUpdate
from app.services.cache_service import CategoryCache

logger = logging.getLogger(__name__)

# Columns that may not be cleared through a partial update
NON_NULLABLE_FIELDS = ("category_id", "featured")


def _build_images(images: List[PropertyImageIn]) -> List[PropertyImage]:
    return [
        PropertyImage(
            image_url=image.image_url,
            title_en=image.title_en,
            title_ar=image.title_ar,
            sort_order=index,
        )
        for index, image in enumerate(images)
    ]


class PropertyService:
    def __init__(self, db: Session, cache: CategoryCache):
        self.db = db
        self.cache = cache

    def _ensure_category(self, category_id: int):
        if self.db.get(Category, category_id) is None:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail=f"Category with ID {category_id} not found",
            )

    def get_property(self, property_id: int) -> Property:
        property = self.db.get(Property, property_id)
        if not property:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail=f"Property with ID {property_id} not found",
            )
        return property

    def create_property(self, property_data: PropertyCreate) -> Property:
        self._ensure_category(property_data.category_id)

        new_property = Property(**property_data.model_dump(exclude={"images"}))
        new_property.images = _build_images(property_data.images)

        self.db.add(new_property)
        self.db.commit()
        self.db.refresh(new_property)

        self.cache.clear()
        logger.info(
            f"Property {new_property.id} created with {len(property_data.images)} image(s)"
        )
        return new_property

    def update_property(
        self, property_id: int, property_data: PropertyUpdate
    ) -> Property:
        property = self.get_property(property_id)

        update_data = property_data.model_dump(exclude_unset=True, exclude={"images"})
        for key in NON_NULLABLE_FIELDS:
            if key in update_data and update_data[key] is None:
                update_data.pop(key)
        if "category_id" in update_data:
            self._ensure_category(update_data["category_id"])

        for key, value in update_data.items():
            setattr(property, key, value)

        if property_data.images is not None:
            # delete-orphan drops the previous rows
            property.images = _build_images(property_data.images)

        self.db.commit()
        self.db.refresh(property)

        self.cache.clear()
        logger.info(f"Property {property_id} updated")
        return property

    def delete_property(self, property_id: int) -> dict:
        property = self.get_property(property_id)

        self.db.delete(property)
        self.db.commit()

        self.cache.clear()
        logger.info(f"Property {property_id} deleted")
        return {"detail": "Property deleted successfully"}
