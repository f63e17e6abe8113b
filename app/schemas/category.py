from datetime import datetime
from enum import Enum
from typing import List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator


class CategoryBase(BaseModel):
    name: str = Field(..., max_length=200)
    name_ar: Optional[str] = Field(None, max_length=200)
    description: Optional[str] = None
    description_ar: Optional[str] = None

    @field_validator("name")
    @classmethod
    def name_not_blank(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("Category name is required")
        return v.strip()


class CategoryCreate(CategoryBase):
    pass


class CategoryUpdate(CategoryBase):
    pass


class CategoryResponse(CategoryBase):
    id: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class MediaSource(str, Enum):
    DIRECT = "direct"
    PROPERTY = "property"


class MediaItem(BaseModel):
    """One entry of a category's ``images`` list.

    Direct (legacy) images and property-derived virtual images share this
    shape; fields that do not apply to a source are left as ``None``.
    """

    id: Union[int, str]
    source: MediaSource
    title: Optional[str] = None
    title_en: Optional[str] = None
    title_ar: Optional[str] = None
    description_en: Optional[str] = None
    description_ar: Optional[str] = None
    filename: Optional[str] = None
    original_name: Optional[str] = None
    image_url: Optional[str] = None
    video_url: Optional[str] = None
    location: Optional[str] = None
    featured: bool = False
    property_id: Optional[int] = None
    sort_order: Optional[int] = None
    created_at: Optional[datetime] = None

    model_config = ConfigDict(frozen=True)


class CategoryView(BaseModel):
    id: int
    name: str
    name_en: str
    name_ar: Optional[str] = None
    description: Optional[str] = None
    description_en: Optional[str] = None
    description_ar: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    images: List[MediaItem] = Field(default_factory=list)

    model_config = ConfigDict(frozen=True)
