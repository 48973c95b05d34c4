from datetime import datetime
from sqlalchemy import Column, Integer, String, DateTime, Boolean, Text
from sqlalchemy.orm import relationship

from studio.db.base import Base


class Session(Base):
    """A user's working context: the images and clips produced while editing one picture."""

    __tablename__ = "sessions"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(String(64), index=True, nullable=False)

    name = Column(String(255), nullable=False, default="Untitled Session")
    aspect_ratio = Column(String(8), nullable=False, default="1:1")

    original_image_url = Column(Text, nullable=True)
    original_image_description = Column(Text, nullable=True)
    current_image_description = Column(Text, nullable=True)

    is_active = Column(Boolean, default=False, index=True)

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    images = relationship(
        "Image",
        back_populates="session",
        cascade="all, delete-orphan",
        order_by="Image.created_at.desc()",
    )
    videos = relationship("Video", back_populates="session", cascade="all, delete-orphan")
