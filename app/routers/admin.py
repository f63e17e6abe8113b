from typing import Annotated

from fastapi import APIRouter, Depends
from starlette import status

from app.dependencies import cache_dependency, require_permission, Permission

router = APIRouter(prefix="/cache", tags=["admin"])

admin_dependency = Annotated[dict, Depends(require_permission(Permission.MANAGE_CACHE))]


@router.post("/clear", status_code=status.HTTP_200_OK)
def clear_cache(cache: cache_dependency, current_user: admin_dependency):
    cache.clear()
    return {"detail": "Cache cleared successfully"}
