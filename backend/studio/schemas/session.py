from datetime import datetime
from pydantic import BaseModel
from typing import Optional, List

from .image import ImageSummary, Image


class SessionBase(BaseModel):
    name: Optional[str] = None
    aspect_ratio: Optional[str] = None
    original_image_url: Optional[str] = None
    original_image_description: Optional[str] = None
    current_image_description: Optional[str] = None


class SessionCreate(SessionBase):
    pass


class SessionUpdate(SessionBase):
    is_active: Optional[bool] = None


class Session(BaseModel):
    id: int
    user_id: str
    name: str
    aspect_ratio: str
    original_image_url: Optional[str] = None
    original_image_description: Optional[str] = None
    current_image_description: Optional[str] = None
    is_active: bool
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class SessionListItem(Session):
    image_count: int = 0


class SessionImage(Image):
    parent_image: Optional[ImageSummary] = None


class SessionDetail(Session):
    images: List[SessionImage] = []


class SessionResponse(BaseModel):
    session: Session


class SessionDetailResponse(BaseModel):
    session: SessionDetail


class SessionListResponse(BaseModel):
    sessions: List[SessionListItem]
