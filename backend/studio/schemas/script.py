from datetime import datetime
from pydantic import BaseModel, Field
from typing import Optional, List

from .character import CharacterBrief


class ScriptCreate(BaseModel):
    project_id: int
    title: str
    content: str


class ScriptUpdate(BaseModel):
    title: Optional[str] = None
    content: Optional[str] = None
    version: Optional[int] = None


class ScriptGenerateRequest(BaseModel):
    project_id: Optional[int] = None
    prompt: Optional[str] = None
    characters: List[CharacterBrief] = []
    genre: Optional[str] = None
    target_duration: Optional[int] = Field(default=None, ge=1)


class Script(BaseModel):
    id: int
    project_id: int
    title: str
    content: str
    version: int
    character_count: Optional[int] = None
    estimated_duration: Optional[int] = None
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class ScriptResponse(BaseModel):
    script: Script


class ScriptListResponse(BaseModel):
    scripts: List[Script]
