from datetime import datetime
from pydantic import BaseModel
from typing import Optional, List

from studio.models.image import GenerationType, ImageStatus


class ImageBase(BaseModel):
    url: str
    prompt: str
    translated_prompt: Optional[str] = None
    aspect_ratio: Optional[str] = None
    width: Optional[int] = None
    height: Optional[int] = None
    generation_type: Optional[GenerationType] = None
    model_id: Optional[str] = None
    parent_image_id: Optional[int] = None
    seed: Optional[int] = None
    file_name: Optional[str] = None
    mime_type: Optional[str] = None


class ImageCreate(ImageBase):
    session_id: int


class ImageUpdate(BaseModel):
    url: Optional[str] = None
    prompt: Optional[str] = None
    translated_prompt: Optional[str] = None
    aspect_ratio: Optional[str] = None
    width: Optional[int] = None
    height: Optional[int] = None
    status: Optional[ImageStatus] = None
    parent_image_id: Optional[int] = None


class ImageSummary(BaseModel):
    id: int
    url: str
    prompt: str

    class Config:
        from_attributes = True


class ChildImageSummary(ImageSummary):
    created_at: datetime


class Image(BaseModel):
    id: int
    session_id: int
    url: str
    prompt: str
    translated_prompt: Optional[str] = None
    aspect_ratio: str
    width: Optional[int] = None
    height: Optional[int] = None
    generation_type: str
    model_id: str
    parent_image_id: Optional[int] = None
    seed: Optional[int] = None
    file_name: Optional[str] = None
    mime_type: Optional[str] = None
    status: str
    created_at: datetime

    class Config:
        from_attributes = True


class ImageDetail(Image):
    parent_image: Optional[ImageSummary] = None
    child_images: List[ChildImageSummary] = []


class ImageResponse(BaseModel):
    image: Image


class ImageDetailResponse(BaseModel):
    image: ImageDetail


class ImageListResponse(BaseModel):
    images: List[Image]
