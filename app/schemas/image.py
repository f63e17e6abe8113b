from pydantic import BaseModel, ConfigDict, Field
from datetime import datetime
from typing import Optional


class ImageUpdate(BaseModel):
    title: Optional[str] = Field(None, max_length=200)
    title_ar: Optional[str] = Field(None, max_length=200)
    video_url: Optional[str] = Field(None, max_length=1000)
    image_url: Optional[str] = Field(None, max_length=1000)


class ImageResponse(BaseModel):
    id: int
    category_id: int
    filename: Optional[str] = None
    original_name: Optional[str] = None
    title: Optional[str] = None
    title_ar: Optional[str] = None
    video_url: Optional[str] = None
    image_url: Optional[str] = None
    file_size: Optional[int] = None
    mime_type: Optional[str] = None
    url: Optional[str] = None
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)
