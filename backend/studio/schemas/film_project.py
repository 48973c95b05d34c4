from datetime import datetime
from pydantic import BaseModel
from typing import Optional, List

from studio.models.film_project import ProjectStatus


class FilmProjectCreate(BaseModel):
    title: Optional[str] = None
    description: Optional[str] = None
    genre: Optional[str] = None


class FilmProjectUpdate(BaseModel):
    title: Optional[str] = None
    description: Optional[str] = None
    genre: Optional[str] = None
    status: Optional[ProjectStatus] = None
    thumbnail_url: Optional[str] = None


class FilmProject(BaseModel):
    id: int
    user_id: str
    title: str
    description: Optional[str] = None
    genre: Optional[str] = None
    thumbnail_url: Optional[str] = None
    status: str
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class FilmProjectResponse(BaseModel):
    project: FilmProject


class FilmProjectListResponse(BaseModel):
    projects: List[FilmProject]


class ProjectStats(BaseModel):
    characters: int
    scripts: int
    shots: int
    totalDuration: int


class ProjectStatsResponse(BaseModel):
    stats: ProjectStats
