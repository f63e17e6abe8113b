from enum import Enum
from typing import Annotated, Callable

from fastapi import Depends, HTTPException
from starlette import status
from sqlalchemy.orm import Session

from app.database import SessionLocal
from app.services.auth_service import get_current_user
from app.services.cache_service import CategoryCache, get_category_cache


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


db_dependency = Annotated[Session, Depends(get_db)]
cache_dependency = Annotated[CategoryCache, Depends(get_category_cache)]
CurrentUser = Annotated[dict, Depends(get_current_user)]


class Permission(str, Enum):
    MANAGE_CATEGORIES = "manage:categories"
    MANAGE_PROPERTIES = "manage:properties"
    MANAGE_MEDIA = "manage:media"
    MANAGE_CONTACT = "manage:contact"
    MANAGE_CACHE = "manage:cache"


# Map role strings (as embedded in JWT) to allowed permissions
ROLE_PERMISSIONS: dict[str, list[Permission]] = {
    "admin": [
        Permission.MANAGE_CATEGORIES,
        Permission.MANAGE_PROPERTIES,
        Permission.MANAGE_MEDIA,
        Permission.MANAGE_CONTACT,
        Permission.MANAGE_CACHE,
    ],
}


def require_permission(required: Permission) -> Callable[..., dict]:
    def dependency(current_user: CurrentUser) -> dict:
        if not current_user:
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Could not authenticate user",
            )

        role = current_user.get("role")
        if role is None:
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Could not authenticate user",
            )

        allowed = ROLE_PERMISSIONS.get(role, [])
        if required not in allowed:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Insufficient permissions",
            )

        return current_user

    return dependency
