import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from studio import models, schemas
from studio.api.dependencies import get_current_user_id, get_db, get_fal_service, get_llm_service
from studio.api.routes.film_projects import get_owned_project
from studio.core.errors import UpstreamError
from studio.core.queue import render_queue
from studio.models.shot import CameraAngle, CameraMovement, GenerationStatus
from studio.services.fal import FalService
from studio.services.film_utils import build_consistency_prompt
from studio.services.llm import GeminiService
from studio.services.shot_breakdown import break_script_into_shots
from studio.workers.tasks import animate_shot_task

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/film/shots", tags=["shots"])

SHOT_ASPECT_RATIO = "16:9"
DEFAULT_SHOT_DURATION = 5
ANIMATION_JOB_TIMEOUT = 900

_ANGLES = {a.value for a in CameraAngle}


def _get_owned_shot(db: Session, shot_id: int, user_id: str) -> Optional[models.Shot]:
    return (
        db.query(models.Shot)
        .join(models.FilmProject, models.Shot.project_id == models.FilmProject.id)
        .filter(models.Shot.id == shot_id, models.FilmProject.user_id == user_id)
        .first()
    )


def apply_thumbnail_rule(shot: models.Shot) -> None:
    """The first shot's still doubles as the project thumbnail."""
    if shot.sequence_number == 1 and shot.image_url:
        shot.project.thumbnail_url = shot.image_url


@router.get("", response_model=schemas.ShotListResponse)
def list_shots(
    project_id: Optional[int] = None,
    script_id: Optional[int] = None,
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
):
    if project_id is None:
        raise HTTPException(status_code=400, detail="Project ID is required")
    get_owned_project(db, project_id, user_id)

    query = db.query(models.Shot).filter(models.Shot.project_id == project_id)
    if script_id is not None:
        query = query.filter(models.Shot.script_id == script_id)

    return {"shots": query.order_by(models.Shot.sequence_number.asc(), models.Shot.id.asc()).all()}


@router.post("/plan", response_model=schemas.ShotListResponse)
def plan_shots(
    body: schemas.ShotPlanRequest,
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
    llm: GeminiService = Depends(get_llm_service),
):
    content = (body.script_content or "").strip()
    if body.project_id is None or not content:
        raise HTTPException(status_code=400, detail="Project ID and script content are required")

    project = get_owned_project(db, body.project_id, user_id)

    if body.script_id is not None:
        script = (
            db.query(models.Script)
            .filter(models.Script.id == body.script_id, models.Script.project_id == project.id)
            .first()
        )
        if not script:
            raise HTTPException(status_code=404, detail="Script not found")

    characters = body.characters or project.characters
    planned = llm.plan_shots(content, characters, target_shot_count=body.target_shot_count)

    shots = []
    for index, planned_shot in enumerate(planned, start=1):
        angle = planned_shot.suggested_camera_angle
        shot = models.Shot(
            project_id=project.id,
            script_id=body.script_id,
            sequence_number=index,
            scene_description=planned_shot.scene_description or f"Shot {index}",
            camera_angle=angle if angle in _ANGLES else CameraAngle.medium.value,
            camera_movement=CameraMovement.static.value,
            duration_seconds=planned_shot.suggested_duration or DEFAULT_SHOT_DURATION,
            notes=planned_shot.dialogue_snippet,
            characters_in_shot=list(planned_shot.characters_mentioned),
            generation_status=GenerationStatus.pending.value,
        )
        db.add(shot)
        shots.append(shot)

    db.commit()
    for shot in shots:
        db.refresh(shot)

    logger.info("Planned %d shots for project %s", len(shots), project.id)
    return {"shots": shots}


@router.post("/breakdown", response_model=schemas.ShotBreakdownResponse)
def breakdown_shots(body: schemas.ShotBreakdownRequest):
    if not body.script_content.strip():
        raise HTTPException(status_code=400, detail="Script content is required")

    shots = break_script_into_shots(
        body.script_content,
        body.characters,
        target_shot_count=body.target_shot_count,
        include_character_close_ups=body.include_character_close_ups,
    )
    return {"shots": [s.to_dict() for s in shots]}


@router.post("/generate-image", response_model=schemas.ShotImageResponse)
def generate_shot_image(
    body: schemas.ShotImageRequest,
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
    fal: FalService = Depends(get_fal_service),
    llm: GeminiService = Depends(get_llm_service),
):
    description = (body.scene_description or "").strip()
    if body.shot_id is None or not description:
        raise HTTPException(status_code=400, detail="Shot ID and scene description are required")

    angle = body.camera_angle.value if body.camera_angle else None
    movement = body.camera_movement.value if body.camera_movement else None
    if body.characters:
        description = build_consistency_prompt(description, body.characters, angle, movement)

    prompt = description
    try:
        prompt = llm.translate_prompt(
            f"Generate a cinematic {angle or 'medium'} shot image: {description}"
        ) or description
    except Exception as e:
        logger.warning("[Gemini] Shot prompt translation failed, using raw description: %s", e)

    try:
        image_url = fal.text_to_image(prompt, SHOT_ASPECT_RATIO)
    except Exception as e:
        logger.exception("[FAL] Shot still failed for shot %s", body.shot_id)
        raise UpstreamError("Failed to generate shot image", details=str(e))

    try:
        shot = _get_owned_shot(db, body.shot_id, user_id)
        if shot is None:
            logger.warning("Shot %s not found, image generated but not stored", body.shot_id)
        else:
            shot.image_url = image_url
            shot.generation_status = GenerationStatus.completed.value
            apply_thumbnail_rule(shot)
            db.commit()
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Shot %s update failed, image generated successfully", body.shot_id)

    return {"image_url": image_url}


@router.patch("/{shot_id}", response_model=schemas.ShotResponse)
def update_shot(
    shot_id: int,
    shot_in: schemas.ShotUpdate,
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
):
    shot = _get_owned_shot(db, shot_id, user_id)
    if not shot:
        raise HTTPException(status_code=404, detail="Shot not found")

    data = shot_in.model_dump(exclude_unset=True)
    for field, value in data.items():
        if value is None:
            if field in ("sequence_number", "scene_description", "generation_status"):
                continue
            if field == "characters_in_shot":
                value = []
        elif hasattr(value, "value"):
            value = value.value
        setattr(shot, field, value)
    apply_thumbnail_rule(shot)

    db.add(shot)
    db.commit()
    db.refresh(shot)
    return {"shot": shot}


@router.delete("/{shot_id}")
def delete_shot(
    shot_id: int,
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
):
    shot = _get_owned_shot(db, shot_id, user_id)
    if not shot:
        raise HTTPException(status_code=404, detail="Shot not found")
    db.delete(shot)
    db.commit()
    return {"success": True}


@router.post("/{shot_id}/animate", response_model=schemas.ShotAnimateResponse)
def animate_shot(
    shot_id: int,
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
):
    shot = _get_owned_shot(db, shot_id, user_id)
    if not shot:
        raise HTTPException(status_code=404, detail="Shot not found")
    if not shot.image_url:
        raise HTTPException(status_code=400, detail="Shot has no image to animate")

    shot.generation_status = GenerationStatus.generating.value
    db.commit()

    try:
        job = render_queue.enqueue(animate_shot_task, shot.id, job_timeout=ANIMATION_JOB_TIMEOUT)
    except Exception as e:
        logger.exception("Failed to enqueue animation for shot %s", shot.id)
        shot.generation_status = GenerationStatus.failed.value
        db.commit()
        raise UpstreamError("Failed to queue shot animation", details=str(e))

    return {"shot_id": shot.id, "job_id": job.id, "status": GenerationStatus.generating.value}
