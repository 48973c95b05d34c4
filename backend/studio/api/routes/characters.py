import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from studio import models, schemas
from studio.api.dependencies import get_current_user_id, get_db, get_fal_service, get_llm_service
from studio.api.routes.film_projects import get_owned_project
from studio.core.errors import UpstreamError
from studio.services.fal import FalService
from studio.services.film_utils import character_portrait_prompt
from studio.services.llm import GeminiService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/film/characters", tags=["characters"])

PORTRAIT_ASPECT_RATIO = "3:4"


def _get_owned_character(db: Session, character_id: int, user_id: str) -> models.Character:
    character = (
        db.query(models.Character)
        .join(models.FilmProject, models.Character.project_id == models.FilmProject.id)
        .filter(models.Character.id == character_id, models.FilmProject.user_id == user_id)
        .first()
    )
    if not character:
        raise HTTPException(status_code=404, detail="Character not found")
    return character


@router.get("", response_model=schemas.CharacterListResponse)
def list_characters(
    project_id: Optional[int] = None,
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
):
    if project_id is None:
        raise HTTPException(status_code=400, detail="Project ID is required")
    get_owned_project(db, project_id, user_id)

    characters = (
        db.query(models.Character)
        .filter(models.Character.project_id == project_id)
        .order_by(models.Character.created_at.desc(), models.Character.id.desc())
        .all()
    )
    return {"characters": characters}


@router.post("", response_model=schemas.CharacterResponse)
def create_character(
    character_in: schemas.CharacterCreate,
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
    fal: FalService = Depends(get_fal_service),
):
    name = (character_in.name or "").strip()
    description = (character_in.description or "").strip()
    if character_in.project_id is None or not name or not description:
        raise HTTPException(status_code=400, detail="Project ID, name, and description are required")

    project = get_owned_project(db, character_in.project_id, user_id)

    visual_description = (character_in.visual_description or "").strip() or description
    backstory = (character_in.backstory or "").strip() or None
    prompt = character_portrait_prompt(
        name,
        description,
        visual_description,
        character_in.personality_traits,
        backstory,
    )

    try:
        image_url = fal.text_to_image(prompt, PORTRAIT_ASPECT_RATIO)
    except Exception as e:
        logger.exception("[FAL] Character portrait failed for %s", name)
        raise UpstreamError("Failed to create character", details=str(e))

    character = models.Character(
        project_id=project.id,
        name=name,
        description=description,
        visual_description=visual_description,
        image_url=image_url,
        personality_traits=list(character_in.personality_traits),
        backstory=backstory,
    )
    db.add(character)
    db.commit()
    db.refresh(character)
    return {"character": character}


@router.post("/enhance", response_model=schemas.CharacterEnhanceResponse)
def enhance_character(
    body: schemas.CharacterEnhanceRequest,
    llm: GeminiService = Depends(get_llm_service),
):
    name = (body.name or "").strip()
    description = (body.description or "").strip()
    if not name or not description:
        raise HTTPException(status_code=400, detail="Name and description are required")

    try:
        return llm.generate_character_description(
            name,
            description,
            project_context=(body.project_context or "").strip() or None,
            genre=(body.genre or "").strip() or None,
        )
    except Exception as e:
        logger.exception("[Gemini] Character enhancement failed")
        raise UpstreamError("Failed to enhance character", details=str(e))


@router.patch("/{character_id}", response_model=schemas.CharacterResponse)
def update_character(
    character_id: int,
    character_in: schemas.CharacterUpdate,
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
):
    character = _get_owned_character(db, character_id, user_id)

    data = character_in.model_dump(exclude_unset=True)
    for field, value in data.items():
        if value is None:
            if field in ("name", "description", "visual_description"):
                continue
            if field == "personality_traits":
                value = []
        setattr(character, field, value)

    db.add(character)
    db.commit()
    db.refresh(character)
    return {"character": character}


@router.delete("/{character_id}")
def delete_character(
    character_id: int,
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
):
    character = _get_owned_character(db, character_id, user_id)
    db.delete(character)
    db.commit()
    return {"success": True}
