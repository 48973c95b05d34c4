from studio.db.base import Base
from studio.db.session import SessionLocal, engine

__all__ = ["Base", "SessionLocal", "engine"]
