from datetime import datetime
from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, Text
from sqlalchemy.orm import relationship

from studio.db.base import Base


class Script(Base):
    __tablename__ = "scripts"

    id = Column(Integer, primary_key=True, index=True)
    project_id = Column(Integer, ForeignKey("film_projects.id", ondelete="CASCADE"), index=True, nullable=False)

    title = Column(String(255), nullable=False)
    content = Column(Text, nullable=False)
    version = Column(Integer, default=1)

    # derived from content on every write (see services.film_utils.compute_script_metadata)
    character_count = Column(Integer, nullable=True)
    estimated_duration = Column(Integer, nullable=True)  # seconds

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    project = relationship("FilmProject", back_populates="scripts")
    shots = relationship("Shot", back_populates="script", cascade="all, delete-orphan")
