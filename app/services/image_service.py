import logging
from typing import Optional

from fastapi import HTTPException, UploadFile, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.models.category import Category
from app.models.image import Image
from app.schemas.image import ImageUpdate
from app.services.cache_service import CategoryCache
from app.services.upload_service import UploadService

logger = logging.getLogger(__name__)


class ImageService:
    """Create, update and delete category-owned (legacy) images."""

    def __init__(
        self,
        db: Session,
        cache: CategoryCache,
        upload_service: Optional[UploadService] = None,
    ):
        self.db = db
        self.cache = cache
        self.upload_service = upload_service or UploadService()

    def _get_or_404(self, image_id: int) -> Image:
        image = self.db.get(Image, image_id)
        if not image:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Image not found",
            )
        return image

    async def create_image(
        self,
        file: Optional[UploadFile],
        category_id: Optional[int],
        title: Optional[str] = None,
        title_ar: Optional[str] = None,
        video_url: Optional[str] = None,
        image_url: Optional[str] = None,
    ) -> Image:
        has_file = file is not None and bool(file.filename)
        if not has_file and not image_url:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="No file uploaded or image URL provided",
            )
        if category_id is None:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Category ID is required",
            )
        if self.db.get(Category, category_id) is None:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Category not found",
            )

        stored = (
            await self.upload_service.save_file(file, category_id) if has_file else {}
        )

        image = Image(
            category_id=category_id,
            filename=stored.get("filename"),
            original_name=stored.get("original_name"),
            file_size=stored.get("file_size"),
            mime_type=stored.get("mime_type"),
            title=title,
            title_ar=title_ar,
            video_url=video_url,
            image_url=image_url or None,
        )
        self.db.add(image)
        try:
            self.db.commit()
        except SQLAlchemyError:
            self.db.rollback()
            self.upload_service.delete_file(stored.get("filename"))
            raise
        self.db.refresh(image)

        self.cache.clear()
        logger.info(f"Image {image.id} added to category {category_id}")
        return image

    def update_image(self, image_id: int, image_data: ImageUpdate) -> Image:
        image = self._get_or_404(image_id)
        for key, value in image_data.model_dump(exclude_unset=True).items():
            setattr(image, key, value)
        self.db.commit()
        self.db.refresh(image)

        self.cache.clear()
        logger.info(f"Image {image_id} updated")
        return image

    def delete_image(self, image_id: int) -> dict:
        image = self._get_or_404(image_id)
        filename = image.filename

        self.db.delete(image)
        self.db.commit()
        self.upload_service.delete_file(filename)

        self.cache.clear()
        logger.info(f"Image {image_id} deleted")
        return {"detail": "Image deleted successfully"}

    def public_url(self, image: Image) -> Optional[str]:
        if image.image_url:
            return image.image_url
        if image.filename:
            return self.upload_service.get_file_url(image.filename)
        return None
