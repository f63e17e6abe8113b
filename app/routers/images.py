from typing import Annotated, Optional

from fastapi import APIRouter, Depends, File, Form, UploadFile, status

from app.dependencies import (
    cache_dependency,
    db_dependency,
    require_permission,
    Permission,
)
from app.schemas.image import ImageResponse, ImageUpdate
from app.services.image_service import ImageService

router = APIRouter(prefix="/images", tags=["images"])

user_dependency = Annotated[dict, Depends(require_permission(Permission.MANAGE_MEDIA))]


def _to_response(service: ImageService, image) -> ImageResponse:
    return ImageResponse.model_validate(image).model_copy(
        update={"url": service.public_url(image)}
    )


@router.post("", response_model=ImageResponse, status_code=status.HTTP_201_CREATED)
async def upload_image(
    db: db_dependency,
    cache: cache_dependency,
    current_user: user_dependency,
    image: Optional[UploadFile] = File(None),
    category_id: Optional[int] = Form(None),
    title: Optional[str] = Form(None),
    title_ar: Optional[str] = Form(None),
    video_url: Optional[str] = Form(None),
    image_url: Optional[str] = Form(None),
):
    service = ImageService(db, cache)
    created = await service.create_image(
        file=image,
        category_id=category_id,
        title=title,
        title_ar=title_ar,
        video_url=video_url,
        image_url=image_url,
    )
    return _to_response(service, created)


@router.put("/{image_id}", response_model=ImageResponse, status_code=status.HTTP_200_OK)
def update_image(
    db: db_dependency,
    cache: cache_dependency,
    current_user: user_dependency,
    image_id: int,
    image_data: ImageUpdate,
):
    service = ImageService(db, cache)
    return _to_response(service, service.update_image(image_id, image_data))


@router.delete("/{image_id}", status_code=status.HTTP_200_OK)
def delete_image(
    db: db_dependency,
    cache: cache_dependency,
    current_user: user_dependency,
    image_id: int,
):
    return ImageService(db, cache).delete_image(image_id)
