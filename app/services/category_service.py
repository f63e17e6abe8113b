import logging
from collections import defaultdict
from typing import Dict, Iterable, List, Optional

from fastapi import HTTPException, status
from sqlalchemy import select, func
from sqlalchemy.orm import Session

from app.models.category import Category
from app.models.image import Image
from app.models.property import Property
from app.models.property_images import PropertyImage
from app.schemas.category import (
    CategoryCreate,
    CategoryUpdate,
    CategoryView,
    MediaItem,
    MediaSource,
)
from app.services.cache_service import CategoryCache
from app.services.upload_service import UploadService

logger = logging.getLogger(__name__)


def _direct_item(image: Image, upload_service: UploadService) -> MediaItem:
    image_url = image.image_url
    if not image_url and image.filename:
        image_url = upload_service.get_file_url(image.filename)
    return MediaItem(
        id=image.id,
        source=MediaSource.DIRECT,
        title=image.title,
        title_en=image.title,
        title_ar=image.title_ar,
        filename=image.filename,
        original_name=image.original_name,
        image_url=image_url,
        video_url=image.video_url,
        created_at=image.created_at,
    )


def _property_items(
    prop: Property, images: List[PropertyImage]
) -> Iterable[MediaItem]:
    shared = dict(
        source=MediaSource.PROPERTY,
        title=prop.title_en,
        title_en=prop.title_en,
        title_ar=prop.title_ar,
        description_en=prop.description_en,
        description_ar=prop.description_ar,
        video_url=prop.video_url,
        location=prop.location,
        featured=bool(prop.featured),
        property_id=prop.id,
    )
    if not images:
        # Keep image-less properties visible in the listing
        yield MediaItem(
            id=f"property_{prop.id}",
            image_url=None,
            sort_order=None,
            created_at=prop.created_at,
            **shared,
        )
        return
    for img in images:
        yield MediaItem(
            id=f"prop_{img.id}",
            image_url=img.image_url,
            sort_order=img.sort_order,
            created_at=img.created_at,
            **shared,
        )


def _category_view(category: Category, images: List[MediaItem]) -> CategoryView:
    return CategoryView(
        id=category.id,
        name=category.name,
        name_en=category.name,
        name_ar=category.name_ar,
        description=category.description,
        description_en=category.description,
        description_ar=category.description_ar,
        created_at=category.created_at,
        updated_at=category.updated_at,
        images=images,
    )


class CategoryService:
    def __init__(
        self,
        db: Session,
        cache: CategoryCache,
        upload_service: Optional[UploadService] = None,
    ):
        self.db = db
        self.cache = cache
        self.upload_service = upload_service or UploadService()

    def list_categories(self, refresh: bool = False) -> List[CategoryView]:
        """Categories with media, served from the cache unless ``refresh``."""
        if not refresh:
            cached = self.cache.get()
            if cached is not None:
                logger.info("Serving categories from cache")
                return cached

        generation = self.cache.generation
        result = self.get_categories_with_media()
        self.cache.set(result, generation)
        return result

    def get_categories_with_media(self) -> List[CategoryView]:
        """Assemble category -> property -> image into one flat listing.

        Categories come newest first. A category that owns properties gets one
        virtual image per property image (featured properties first, images in
        ``sort_order``), or a single placeholder for a property with no images.
        A category without properties falls back to its legacy direct images.
        Storage errors propagate; nothing partial is returned.
        """
        categories = (
            self.db.execute(
                select(Category).order_by(
                    Category.created_at.desc(), Category.id.desc()
                )
            )
            .scalars()
            .all()
        )
        logger.info(f"Categories found: {len(categories)}")
        if not categories:
            return []

        category_ids = [category.id for category in categories]
        properties = (
            self.db.execute(
                select(Property)
                .where(Property.category_id.in_(category_ids))
                .order_by(
                    Property.featured.desc(),
                    Property.created_at.desc(),
                    Property.id.desc(),
                )
            )
            .scalars()
            .all()
        )
        logger.info(f"Properties found: {len(properties)}")

        images_by_category: Dict[int, List[MediaItem]] = defaultdict(list)

        if properties:
            images_by_property = self._property_images_by_property(
                [prop.id for prop in properties]
            )
            for prop in properties:
                images_by_category[prop.category_id].extend(
                    _property_items(prop, images_by_property.get(prop.id, []))
                )

        legacy_ids = [cid for cid in category_ids if cid not in images_by_category]
        if legacy_ids:
            for image in self._legacy_images(legacy_ids):
                images_by_category[image.category_id].append(
                    _direct_item(image, self.upload_service)
                )

        return [
            _category_view(category, images_by_category.get(category.id, []))
            for category in categories
        ]

    def _property_images_by_property(
        self, property_ids: List[int]
    ) -> Dict[int, List[PropertyImage]]:
        # Grouping keeps row order, so the query order is the display order
        rows = (
            self.db.execute(
                select(PropertyImage)
                .where(PropertyImage.property_id.in_(property_ids))
                .order_by(
                    PropertyImage.property_id,
                    PropertyImage.sort_order.asc(),
                    PropertyImage.id.asc(),
                )
            )
            .scalars()
            .all()
        )
        logger.info(f"Property images found: {len(rows)}")
        grouped: Dict[int, List[PropertyImage]] = defaultdict(list)
        for row in rows:
            grouped[row.property_id].append(row)
        return grouped

    def _legacy_images(self, category_ids: List[int]) -> List[Image]:
        rows = (
            self.db.execute(
                select(Image)
                .where(Image.category_id.in_(category_ids))
                .order_by(Image.created_at.desc(), Image.id.desc())
            )
            .scalars()
            .all()
        )
        logger.info(f"Direct images found: {len(rows)}")
        return rows

    def _get_or_404(self, category_id: int) -> Category:
        category = self.db.get(Category, category_id)
        if not category:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Category not found",
            )
        return category

    def create_category(self, category_data: CategoryCreate) -> Category:
        category = Category(**category_data.model_dump())
        self.db.add(category)
        self.db.commit()
        self.db.refresh(category)

        self.cache.clear()
        logger.info(f"Category {category.id} created")
        return category

    def update_category(
        self, category_id: int, category_data: CategoryUpdate
    ) -> Category:
        category = self._get_or_404(category_id)
        for key, value in category_data.model_dump().items():
            setattr(category, key, value)
        category.updated_at = func.now()
        self.db.commit()
        self.db.refresh(category)

        self.cache.clear()
        logger.info(f"Category {category_id} updated")
        return category

    def delete_category(self, category_id: int) -> dict:
        category = self._get_or_404(category_id)
        filenames = (
            self.db.execute(
                select(Image.filename).where(
                    Image.category_id == category_id, Image.filename.isnot(None)
                )
            )
            .scalars()
            .all()
        )

        # Properties, property images and legacy images go with it (ON DELETE CASCADE)
        self.db.delete(category)
        self.db.commit()

        for filename in filenames:
            self.upload_service.delete_file(filename)

        self.cache.clear()
        logger.info(
            f"Category {category_id} deleted with {len(filenames)} stored file(s)"
        )
        return {"detail": "Category and associated images deleted successfully"}
