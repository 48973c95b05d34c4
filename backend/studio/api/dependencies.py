from typing import Generator, Optional

from fastapi import Header

from studio.core.config import settings
from studio.db.session import SessionLocal
from studio.services.fal import FalService
from studio.services.inpaint import InpaintService
from studio.services.llm import GeminiService

fal_service = FalService()
llm_service = GeminiService()
inpaint_service = InpaintService()


def get_db() -> Generator:
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def get_current_user_id(x_user_id: Optional[str] = Header(default=None)) -> str:
    # auth lives in front of this service; without a header we act as the dev user
    return x_user_id or settings.DEV_USER_ID


def get_fal_service() -> FalService:
    return fal_service


def get_llm_service() -> GeminiService:
    return llm_service


def get_inpaint_service() -> InpaintService:
    return inpaint_service
