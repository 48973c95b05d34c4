from datetime import datetime
from pydantic import BaseModel, Field
from typing import Optional, List

from studio.models.shot import CameraAngle, CameraMovement, GenerationStatus
from .character import CharacterBrief


class ShotUpdate(BaseModel):
    sequence_number: Optional[int] = None
    scene_description: Optional[str] = None
    camera_angle: Optional[CameraAngle] = None
    camera_movement: Optional[CameraMovement] = None
    duration_seconds: Optional[int] = Field(default=None, ge=1)
    notes: Optional[str] = None
    characters_in_shot: Optional[List[int]] = None
    image_url: Optional[str] = None
    video_url: Optional[str] = None
    generation_status: Optional[GenerationStatus] = None


class Shot(BaseModel):
    id: int
    project_id: int
    script_id: Optional[int] = None
    sequence_number: int
    scene_description: str
    camera_angle: Optional[str] = None
    camera_movement: Optional[str] = None
    duration_seconds: Optional[int] = None
    notes: Optional[str] = None
    characters_in_shot: List[int] = []
    image_url: Optional[str] = None
    video_url: Optional[str] = None
    generation_status: str
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class ShotResponse(BaseModel):
    shot: Shot


class ShotListResponse(BaseModel):
    shots: List[Shot]


class ShotPlanRequest(BaseModel):
    project_id: Optional[int] = None
    script_content: Optional[str] = None
    script_id: Optional[int] = None
    characters: List[CharacterBrief] = []
    target_shot_count: int = Field(default=20, ge=1, le=200)


class ShotBreakdownRequest(BaseModel):
    script_content: str
    characters: List[CharacterBrief] = []
    target_shot_count: int = Field(default=20, ge=1, le=200)
    include_character_close_ups: bool = True


class BreakdownShot(BaseModel):
    sequence_number: int
    scene_description: str
    suggested_camera_angle: str
    suggested_duration: int
    characters_mentioned: List[int] = []
    dialogue_snippet: Optional[str] = None


class ShotBreakdownResponse(BaseModel):
    shots: List[BreakdownShot]


class ShotImageRequest(BaseModel):
    shot_id: Optional[int] = None
    scene_description: Optional[str] = None
    camera_angle: Optional[CameraAngle] = None
    camera_movement: Optional[CameraMovement] = None
    characters: List[CharacterBrief] = []


class ShotImageResponse(BaseModel):
    image_url: str


class ShotAnimateResponse(BaseModel):
    shot_id: int
    job_id: str
    status: str
