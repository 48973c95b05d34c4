from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from studio import models, schemas
from studio.api.dependencies import get_current_user_id, get_db
from studio.models.image import GenerationType

router = APIRouter(prefix="/images", tags=["images"])

# fields a PUT may clear with an explicit null
NULLABLE_IMAGE_FIELDS = ("translated_prompt", "width", "height", "parent_image_id")


def _get_accessible_image(db: Session, image_id: int, user_id: str) -> models.Image:
    image = db.query(models.Image).filter(models.Image.id == image_id).first()
    if not image:
        raise HTTPException(status_code=404, detail="Image not found")
    if image.session.user_id != user_id:
        raise HTTPException(status_code=403, detail="Unauthorized")
    return image


def _check_parent_image(db: Session, parent_image_id: Optional[int], user_id: str) -> None:
    if parent_image_id is None:
        return
    parent = (
        db.query(models.Image)
        .join(models.Session, models.Image.session_id == models.Session.id)
        .filter(models.Image.id == parent_image_id, models.Session.user_id == user_id)
        .first()
    )
    if not parent:
        raise HTTPException(status_code=404, detail="Parent image not found")


@router.get("", response_model=schemas.ImageListResponse)
def list_images(
    session_id: Optional[int] = None,
    generation_type: Optional[GenerationType] = None,
    model_id: Optional[str] = None,
    limit: int = Query(default=50, ge=1, le=500),
    offset: int = Query(default=0, ge=0),
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
):
    query = (
        db.query(models.Image)
        .join(models.Session, models.Image.session_id == models.Session.id)
        .filter(models.Session.user_id == user_id)
    )
    if session_id is not None:
        query = query.filter(models.Image.session_id == session_id)
    if generation_type is not None:
        query = query.filter(models.Image.generation_type == generation_type.value)
    if model_id:
        query = query.filter(models.Image.model_id == model_id)

    images = (
        query.order_by(models.Image.created_at.desc(), models.Image.id.desc())
        .offset(offset)
        .limit(limit)
        .all()
    )
    return {"images": images}


@router.post("", response_model=schemas.ImageResponse)
def create_image(
    image_in: schemas.ImageCreate,
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
):
    session = (
        db.query(models.Session)
        .filter(models.Session.id == image_in.session_id, models.Session.user_id == user_id)
        .first()
    )
    if not session:
        raise HTTPException(status_code=404, detail="Session not found or unauthorized")
    _check_parent_image(db, image_in.parent_image_id, user_id)

    data = image_in.model_dump(exclude_none=True)
    if "generation_type" in data:
        data["generation_type"] = data["generation_type"].value

    image = models.Image(**data)
    db.add(image)
    db.commit()
    db.refresh(image)
    return {"image": image}


@router.get("/{image_id}", response_model=schemas.ImageDetailResponse)
def get_image(
    image_id: int,
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
):
    return {"image": _get_accessible_image(db, image_id, user_id)}


@router.put("/{image_id}", response_model=schemas.ImageResponse)
def update_image(
    image_id: int,
    image_in: schemas.ImageUpdate,
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
):
    image = _get_accessible_image(db, image_id, user_id)

    data = image_in.model_dump(exclude_unset=True)
    if data.get("parent_image_id") == image.id:
        raise HTTPException(status_code=400, detail="An image cannot be its own parent")
    _check_parent_image(db, data.get("parent_image_id"), user_id)
    if data.get("status") is not None:
        data["status"] = data["status"].value

    for field, value in data.items():
        if value is None and field not in NULLABLE_IMAGE_FIELDS:
            continue
        setattr(image, field, value)

    db.add(image)
    db.commit()
    db.refresh(image)
    return {"image": image}


@router.delete("/{image_id}")
def delete_image(
    image_id: int,
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
):
    image = _get_accessible_image(db, image_id, user_id)
    db.delete(image)
    db.commit()
    return {"success": True}
