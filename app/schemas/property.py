from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import List, Optional
from datetime import datetime


class PropertyImageIn(BaseModel):
    image_url: str = Field(..., min_length=1, max_length=1000)
    title_en: Optional[str] = Field(None, max_length=200)
    title_ar: Optional[str] = Field(None, max_length=200)


def _image_entries(value):
    # A bare string is shorthand for {"image_url": <string>}
    if isinstance(value, list):
        return [{"image_url": v} if isinstance(v, str) else v for v in value]
    return value


class PropertyBase(BaseModel):
    title_en: str = Field(..., max_length=200)
    title_ar: Optional[str] = Field(None, max_length=200)
    description_en: Optional[str] = None
    description_ar: Optional[str] = None
    location: Optional[str] = Field(None, max_length=500)
    video_url: Optional[str] = Field(None, max_length=1000)
    featured: bool = False

    @field_validator("title_en")
    @classmethod
    def title_not_blank(cls, v):
        if v is None:
            return v
        if not v.strip():
            raise ValueError("Property title is required")
        return v.strip()


class PropertyCreate(PropertyBase):
    category_id: int
    images: List[PropertyImageIn] = Field(default_factory=list)

    @field_validator("images", mode="before")
    @classmethod
    def expand_image_urls(cls, v):
        return _image_entries(v)


class PropertyUpdate(BaseModel):
    category_id: Optional[int] = None
    title_en: Optional[str] = Field(None, max_length=200)
    title_ar: Optional[str] = Field(None, max_length=200)
    description_en: Optional[str] = None
    description_ar: Optional[str] = None
    location: Optional[str] = Field(None, max_length=500)
    video_url: Optional[str] = Field(None, max_length=1000)
    featured: Optional[bool] = None
    # When present, replaces every image of the property in the given order
    images: Optional[List[PropertyImageIn]] = None

    @field_validator("title_en")
    @classmethod
    def title_not_blank(cls, v):
        if v is None or not v.strip():
            raise ValueError("Property title is required")
        return v.strip()

    @field_validator("images", mode="before")
    @classmethod
    def expand_image_urls(cls, v):
        return _image_entries(v)


class PropertyImageResponse(BaseModel):
    id: int
    image_url: str
    title_en: Optional[str] = None
    title_ar: Optional[str] = None
    sort_order: int

    model_config = ConfigDict(from_attributes=True)


class PropertyResponse(PropertyBase):
    id: int
    category_id: int
    created_at: Optional[datetime] = None
    images: List[PropertyImageResponse] = Field(default_factory=list)

    model_config = ConfigDict(from_attributes=True)
