from typing import Annotated, List, Optional

from fastapi import APIRouter, Depends, Query
from starlette import status

from app.dependencies import (
    cache_dependency,
    db_dependency,
    require_permission,
    Permission,
)
from app.schemas.category import (
    CategoryCreate,
    CategoryResponse,
    CategoryUpdate,
    CategoryView,
)
from app.services.category_service import CategoryService

router = APIRouter(prefix="/categories", tags=["categories"])

admin_dependency = Annotated[
    dict, Depends(require_permission(Permission.MANAGE_CATEGORIES))
]


@router.get("", response_model=List[CategoryView], status_code=status.HTTP_200_OK)
def get_categories(
    db: db_dependency,
    cache: cache_dependency,
    refresh: bool = Query(False, description="Skip the cache and recompute"),
    t: Optional[str] = Query(None, description="Cache-busting timestamp"),
):
    """
    All categories, newest first, each with its flattened ``images`` list.

    Served from a short-lived snapshot; ``refresh=true`` or any ``t`` value
    forces a fresh read (the result still replaces the snapshot).
    """
    return CategoryService(db, cache).list_categories(refresh=refresh or bool(t))


@router.post("", response_model=CategoryResponse, status_code=status.HTTP_201_CREATED)
def create_category(
    db: db_dependency,
    cache: cache_dependency,
    current_user: admin_dependency,
    category: CategoryCreate,
):
    return CategoryService(db, cache).create_category(category)


@router.put(
    "/{category_id}", response_model=CategoryResponse, status_code=status.HTTP_200_OK
)
def update_category(
    db: db_dependency,
    cache: cache_dependency,
    current_user: admin_dependency,
    category_id: int,
    category: CategoryUpdate,
):
    return CategoryService(db, cache).update_category(category_id, category)


@router.delete("/{category_id}", status_code=status.HTTP_200_OK)
def delete_category(
    db: db_dependency,
    cache: cache_dependency,
    current_user: admin_dependency,
    category_id: int,
):
    return CategoryService(db, cache).delete_category(category_id)
