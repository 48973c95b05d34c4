import enum
from datetime import datetime
from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, Text
from sqlalchemy.orm import relationship

from studio.db.base import Base


class GenerationType(str, enum.Enum):
    generate = "generate"
    edit = "edit"


class ImageStatus(str, enum.Enum):
    pending = "pending"
    processing = "processing"
    completed = "completed"
    failed = "failed"


DEFAULT_IMAGE_MODEL = "fal-ai/flux-pro/kontext"


class Image(Base):
    __tablename__ = "images"

    id = Column(Integer, primary_key=True, index=True)
    session_id = Column(
        Integer,
        ForeignKey("sessions.id", ondelete="CASCADE"),
        index=True,
        nullable=False,
    )

    url = Column(Text, nullable=False)
    file_name = Column(String(255), nullable=True)
    mime_type = Column(String(64), default="image/jpeg")
    width = Column(Integer, nullable=True)
    height = Column(Integer, nullable=True)
    aspect_ratio = Column(String(8), default="1:1")

    prompt = Column(Text, nullable=False)
    translated_prompt = Column(Text, nullable=True)
    model_id = Column(String(255), nullable=False, default=DEFAULT_IMAGE_MODEL)
    generation_type = Column(String(16), nullable=False, default=GenerationType.generate.value, index=True)
    seed = Column(Integer, nullable=True)

    # lineage: an edit points at the image it was made from
    parent_image_id = Column(
        Integer,
        ForeignKey("images.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )

    status = Column(String(16), default=ImageStatus.completed.value, index=True)
    created_at = Column(DateTime, default=datetime.utcnow)

    session = relationship("Session", back_populates="images")
    parent_image = relationship("Image", remote_side=[id], back_populates="child_images")
    child_images = relationship("Image", back_populates="parent_image")
