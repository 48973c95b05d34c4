from datetime import datetime
from pydantic import BaseModel
from typing import Optional, List


class Video(BaseModel):
    id: int
    session_id: int
    source_image_id: Optional[int] = None
    url: str
    prompt: Optional[str] = None
    model_id: Optional[str] = None
    duration_seconds: Optional[int] = None
    created_at: datetime

    class Config:
        from_attributes = True


class VideoListResponse(BaseModel):
    videos: List[Video]
