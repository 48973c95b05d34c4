import enum
from datetime import datetime
from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, Text, JSON
from sqlalchemy.orm import relationship

from studio.db.base import Base


class CameraAngle(str, enum.Enum):
    wide = "wide"
    medium = "medium"
    close_up = "close-up"
    extreme_close_up = "extreme-close-up"
    overhead = "overhead"
    low_angle = "low-angle"
    high_angle = "high-angle"


class CameraMovement(str, enum.Enum):
    static = "static"
    pan = "pan"
    tilt = "tilt"
    zoom = "zoom"
    dolly = "dolly"
    handheld = "handheld"


class GenerationStatus(str, enum.Enum):
    pending = "pending"
    generating = "generating"
    completed = "completed"
    failed = "failed"


class Shot(Base):
    __tablename__ = "shots"

    id = Column(Integer, primary_key=True, index=True)

    project_id = Column(
        Integer,
        ForeignKey("film_projects.id", ondelete="CASCADE"),
        index=True,
        nullable=False
    )

    script_id = Column(
        Integer,
        ForeignKey("scripts.id", ondelete="CASCADE"),
        index=True,
        nullable=True
    )

    sequence_number = Column(Integer, nullable=False)
    scene_description = Column(Text, nullable=False)
    camera_angle = Column(String(32), nullable=True)
    camera_movement = Column(String(32), nullable=True)
    duration_seconds = Column(Integer, nullable=True)
    notes = Column(Text, nullable=True)
    characters_in_shot = Column(JSON, default=list)  # list of character ids

    image_url = Column(Text, nullable=True)
    video_url = Column(Text, nullable=True)
    generation_status = Column(String(16), default=GenerationStatus.pending.value, index=True)

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    project = relationship("FilmProject", back_populates="shots")
    script = relationship("Script", back_populates="shots")
