from typing import Annotated

from fastapi import APIRouter, Depends
from starlette import status

from app.dependencies import (
    cache_dependency,
    db_dependency,
    require_permission,
    Permission,
)
from app.schemas.property import PropertyCreate, PropertyResponse, PropertyUpdate
from app.services.property_service import PropertyService

router = APIRouter(prefix="/properties", tags=["properties"])

user_dependency = Annotated[
    dict, Depends(require_permission(Permission.MANAGE_PROPERTIES))
]


@router.post("", response_model=PropertyResponse, status_code=status.HTTP_201_CREATED)
def create_property(
    db: db_dependency,
    cache: cache_dependency,
    current_user: user_dependency,
    property: PropertyCreate,
):
    """
    Create a property under a category.

    ``images`` is an optional list of ``{image_url, title_en, title_ar}``;
    entries are stored in the given order.
    """
    return PropertyService(db, cache).create_property(property)


@router.get(
    "/{property_id}", response_model=PropertyResponse, status_code=status.HTTP_200_OK
)
def get_property(db: db_dependency, cache: cache_dependency, property_id: int):
    return PropertyService(db, cache).get_property(property_id)


@router.put(
    "/{property_id}", response_model=PropertyResponse, status_code=status.HTTP_200_OK
)
def update_property(
    db: db_dependency,
    cache: cache_dependency,
    current_user: user_dependency,
    property_id: int,
    property: PropertyUpdate,
):
    return PropertyService(db, cache).update_property(property_id, property)


@router.delete("/{property_id}", status_code=status.HTTP_200_OK)
def delete_property(
    db: db_dependency,
    cache: cache_dependency,
    current_user: user_dependency,
    property_id: int,
):
    return PropertyService(db, cache).delete_property(property_id)
