from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker

from studio.core.config import settings


def make_engine(url: str, **kwargs):
    is_sqlite = url.startswith("sqlite")
    if is_sqlite:
        kwargs.setdefault("connect_args", {"check_same_thread": False})

    eng = create_engine(url, **kwargs)

    if is_sqlite:
        # ON DELETE CASCADE / SET NULL are only honoured with this pragma
        @event.listens_for(eng, "connect")
        def _enable_foreign_keys(dbapi_connection, connection_record):
            cursor = dbapi_connection.cursor()
            cursor.execute("PRAGMA foreign_keys=ON")
            cursor.close()

    return eng


engine = make_engine(settings.SQLALCHEMY_DATABASE_URI)

SessionLocal = sessionmaker(bind=engine, autoflush=False, autocommit=False)
