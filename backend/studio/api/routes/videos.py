from typing import Optional

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from studio import models, schemas
from studio.api.dependencies import get_current_user_id, get_db

router = APIRouter(prefix="/videos", tags=["videos"])


@router.get("", response_model=schemas.VideoListResponse)
def list_videos(
    session_id: Optional[int] = None,
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
):
    query = (
        db.query(models.Video)
        .join(models.Session, models.Video.session_id == models.Session.id)
        .filter(models.Session.user_id == user_id)
    )
    if session_id is not None:
        query = query.filter(models.Video.session_id == session_id)

    return {"videos": query.order_by(models.Video.created_at.desc()).all()}
