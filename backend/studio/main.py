import os

from fastapi import FastAPI
from fastapi.staticfiles import StaticFiles

from studio.core.config import settings
from studio.core.errors import register_exception_handlers
from studio.core.logging import configure_logging
from studio.db import Base, engine
from studio.api.routes import (
    health,
    speech,
    prompts,
    generation,
    uploads,
    sessions,
    images,
    videos,
    film_projects,
    characters,
    scripts,
    shots,
)

configure_logging()

# Create DB tables on startup (for dev; later replace with Alembic)
Base.metadata.create_all(bind=engine)

app = FastAPI(title=settings.PROJECT_NAME)
register_exception_handlers(app)

for module in (
    health,
    speech,
    prompts,
    generation,
    uploads,
    sessions,
    images,
    videos,
    film_projects,
    characters,
    scripts,
    shots,
):
    app.include_router(module.router, prefix=settings.API_PREFIX)

os.makedirs(settings.MEDIA_ROOT, exist_ok=True)
app.mount("/media", StaticFiles(directory=settings.MEDIA_ROOT), name="media")
