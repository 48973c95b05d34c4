from datetime import datetime
from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, Text, JSON
from sqlalchemy.orm import relationship

from studio.db.base import Base


class Character(Base):
    __tablename__ = "characters"

    id = Column(Integer, primary_key=True, index=True)
    project_id = Column(Integer, ForeignKey("film_projects.id", ondelete="CASCADE"), index=True, nullable=False)

    name = Column(String(255), nullable=False, index=True)
    description = Column(Text, nullable=False)
    visual_description = Column(Text, nullable=False)

    # portrait used as the identity reference when rendering shots
    image_url = Column(Text, nullable=True)

    personality_traits = Column(JSON, default=list)  # list[str]
    backstory = Column(Text, nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    project = relationship("FilmProject", back_populates="characters")
