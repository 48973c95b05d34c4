from studio.db.base import Base
from .session import Session
from .image import Image, GenerationType, ImageStatus, DEFAULT_IMAGE_MODEL
from .video import Video
from .film_project import FilmProject, ProjectStatus
from .character import Character
from .script import Script
from .shot import Shot, CameraAngle, CameraMovement, GenerationStatus

__all__ = [
    "Base",
    "Session",
    "Image",
    "GenerationType",
    "ImageStatus",
    "DEFAULT_IMAGE_MODEL",
    "Video",
    "FilmProject",
    "ProjectStatus",
    "Character",
    "Script",
    "Shot",
    "CameraAngle",
    "CameraMovement",
    "GenerationStatus",
]
