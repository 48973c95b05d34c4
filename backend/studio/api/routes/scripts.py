import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from studio import models, schemas
from studio.api.dependencies import get_current_user_id, get_db, get_llm_service
from studio.api.routes.film_projects import get_owned_project
from studio.core.errors import UpstreamError
from studio.services.film_utils import compute_script_metadata
from studio.services.llm import GeminiService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/film/scripts", tags=["scripts"])


def _get_owned_script(db: Session, script_id: int, user_id: str) -> models.Script:
    script = (
        db.query(models.Script)
        .join(models.FilmProject, models.Script.project_id == models.FilmProject.id)
        .filter(models.Script.id == script_id, models.FilmProject.user_id == user_id)
        .first()
    )
    if not script:
        raise HTTPException(status_code=404, detail="Script not found")
    return script


def _apply_metadata(script: models.Script, project: models.FilmProject) -> None:
    metadata = compute_script_metadata(script.content, project.characters)
    script.character_count = metadata["character_count"]
    script.estimated_duration = metadata["estimated_duration"]


@router.get("", response_model=schemas.ScriptListResponse)
def list_scripts(
    project_id: Optional[int] = None,
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
):
    if project_id is None:
        raise HTTPException(status_code=400, detail="Project ID is required")
    get_owned_project(db, project_id, user_id)

    scripts = (
        db.query(models.Script)
        .filter(models.Script.project_id == project_id)
        .order_by(models.Script.created_at.desc(), models.Script.id.desc())
        .all()
    )
    return {"scripts": scripts}


@router.post("", response_model=schemas.ScriptResponse)
def create_script(
    script_in: schemas.ScriptCreate,
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
):
    project = get_owned_project(db, script_in.project_id, user_id)

    script = models.Script(
        project_id=project.id,
        title=script_in.title.strip() or "Untitled Script",
        content=script_in.content,
        version=1,
    )
    _apply_metadata(script, project)

    db.add(script)
    db.commit()
    db.refresh(script)
    return {"script": script}


@router.post("/generate", response_model=schemas.ScriptResponse)
def generate_script(
    body: schemas.ScriptGenerateRequest,
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
    llm: GeminiService = Depends(get_llm_service),
):
    prompt = (body.prompt or "").strip()
    if body.project_id is None or not prompt:
        raise HTTPException(status_code=400, detail="Project ID and prompt are required")

    project = get_owned_project(db, body.project_id, user_id)

    try:
        generated = llm.generate_script(
            prompt,
            body.characters,
            genre=body.genre or project.genre,
            target_duration=body.target_duration,
        )
    except Exception as e:
        logger.exception("[Gemini] Script generation failed")
        raise UpstreamError("Failed to generate script", details=str(e))

    script = models.Script(
        project_id=project.id,
        title=generated["title"],
        content=generated["content"],
        version=1,
    )
    _apply_metadata(script, project)
    db.add(script)
    db.commit()
    db.refresh(script)
    return {"script": script}


@router.patch("/{script_id}", response_model=schemas.ScriptResponse)
def update_script(
    script_id: int,
    script_in: schemas.ScriptUpdate,
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
):
    script = _get_owned_script(db, script_id, user_id)

    data = script_in.model_dump(exclude_unset=True)
    for field, value in data.items():
        if value is not None:
            setattr(script, field, value)
    _apply_metadata(script, script.project)

    db.add(script)
    db.commit()
    db.refresh(script)
    return {"script": script}


@router.delete("/{script_id}")
def delete_script(
    script_id: int,
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
):
    script = _get_owned_script(db, script_id, user_id)
    db.delete(script)
    db.commit()
    return {"success": True}
