from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy import func
from sqlalchemy.orm import Session

from studio import models, schemas
from studio.api.dependencies import get_current_user_id, get_db

router = APIRouter(prefix="/sessions", tags=["sessions"])


def _get_owned_session(db: Session, session_id: int, user_id: str) -> models.Session:
    session = (
        db.query(models.Session)
        .filter(models.Session.id == session_id, models.Session.user_id == user_id)
        .first()
    )
    if not session:
        raise HTTPException(status_code=404, detail="Session not found")
    return session


def _deactivate_others(db: Session, user_id: str, keep_id: int) -> None:
    (
        db.query(models.Session)
        .filter(models.Session.user_id == user_id, models.Session.id != keep_id)
        .update({models.Session.is_active: False}, synchronize_session=False)
    )


@router.get("", response_model=schemas.SessionListResponse)
def list_sessions(
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
):
    rows = (
        db.query(models.Session, func.count(models.Image.id))
        .outerjoin(models.Image, models.Image.session_id == models.Session.id)
        .filter(models.Session.user_id == user_id)
        .group_by(models.Session.id)
        .order_by(models.Session.updated_at.desc(), models.Session.id.desc())
        .all()
    )

    sessions = []
    for session, image_count in rows:
        item = schemas.SessionListItem.model_validate(session)
        item.image_count = image_count
        sessions.append(item)
    return {"sessions": sessions}


@router.post("", response_model=schemas.SessionResponse)
def create_session(
    session_in: schemas.SessionCreate,
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
):
    session = models.Session(
        user_id=user_id,
        name=session_in.name or "Untitled Session",
        aspect_ratio=session_in.aspect_ratio or "1:1",
        original_image_url=session_in.original_image_url,
        original_image_description=session_in.original_image_description,
        current_image_description=session_in.current_image_description,
        is_active=True,
    )
    db.add(session)
    db.flush()

    _deactivate_others(db, user_id, session.id)
    db.commit()
    db.refresh(session)
    return {"session": session}


@router.get("/{session_id}", response_model=schemas.SessionDetailResponse)
def get_session(
    session_id: int,
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
):
    return {"session": _get_owned_session(db, session_id, user_id)}


@router.put("/{session_id}", response_model=schemas.SessionResponse)
def update_session(
    session_id: int,
    session_in: schemas.SessionUpdate,
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
):
    session = _get_owned_session(db, session_id, user_id)

    data = session_in.model_dump(exclude_unset=True)
    for field, value in data.items():
        if value is not None:
            setattr(session, field, value)

    db.add(session)
    db.commit()
    db.refresh(session)
    return {"session": session}


@router.delete("/{session_id}")
def delete_session(
    session_id: int,
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
):
    session = _get_owned_session(db, session_id, user_id)
    db.delete(session)
    db.commit()
    return {"success": True}


@router.post("/{session_id}/activate", response_model=schemas.SessionResponse)
def activate_session(
    session_id: int,
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
):
    session = _get_owned_session(db, session_id, user_id)
    _deactivate_others(db, user_id, session.id)
    session.is_active = True

    db.add(session)
    db.commit()
    db.refresh(session)
    return {"session": session}
