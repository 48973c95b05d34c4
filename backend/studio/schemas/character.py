from datetime import datetime
from pydantic import BaseModel
from typing import Optional, List


class CharacterCreate(BaseModel):
    # optional so the route can answer with its own 400 message
    project_id: Optional[int] = None
    name: Optional[str] = None
    description: Optional[str] = None
    visual_description: Optional[str] = None
    personality_traits: List[str] = []
    backstory: Optional[str] = None


class CharacterUpdate(BaseModel):
    name: Optional[str] = None
    description: Optional[str] = None
    visual_description: Optional[str] = None
    personality_traits: Optional[List[str]] = None
    backstory: Optional[str] = None
    image_url: Optional[str] = None


class Character(BaseModel):
    id: int
    project_id: int
    name: str
    description: str
    visual_description: str
    image_url: Optional[str] = None
    personality_traits: List[str] = []
    backstory: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class CharacterResponse(BaseModel):
    character: Character


class CharacterListResponse(BaseModel):
    characters: List[Character]


class CharacterEnhanceRequest(BaseModel):
    name: Optional[str] = None
    description: Optional[str] = None
    genre: Optional[str] = None
    project_context: Optional[str] = None


class CharacterEnhanceResponse(BaseModel):
    visual_description: str
    personality_traits: List[str]
    backstory: str


class CharacterBrief(BaseModel):
    """Character context a client passes along with script or shot requests."""

    id: Optional[int] = None
    name: str
    description: Optional[str] = None
    personality_traits: List[str] = []
