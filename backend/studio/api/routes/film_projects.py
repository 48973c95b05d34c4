from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from studio import models, schemas
from studio.api.dependencies import get_current_user_id, get_db
from studio.models.film_project import ProjectStatus
from studio.services.film_utils import calculate_project_duration

router = APIRouter(prefix="/film/projects", tags=["film-projects"])


def get_owned_project(db: Session, project_id: int, user_id: str) -> models.FilmProject:
    project = (
        db.query(models.FilmProject)
        .filter(models.FilmProject.id == project_id, models.FilmProject.user_id == user_id)
        .first()
    )
    if not project:
        raise HTTPException(status_code=404, detail="Project not found")
    return project


def _clean(value):
    if value is None:
        return None
    return value.strip() or None


@router.get("", response_model=schemas.FilmProjectListResponse)
def list_projects(
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
):
    projects = (
        db.query(models.FilmProject)
        .filter(models.FilmProject.user_id == user_id)
        .order_by(models.FilmProject.created_at.desc(), models.FilmProject.id.desc())
        .all()
    )
    return {"projects": projects}


@router.post("", response_model=schemas.FilmProjectResponse)
def create_project(
    project_in: schemas.FilmProjectCreate,
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
):
    title = _clean(project_in.title)
    if not title:
        raise HTTPException(status_code=400, detail="Title is required")

    project = models.FilmProject(
        user_id=user_id,
        title=title,
        description=_clean(project_in.description),
        genre=_clean(project_in.genre),
        status=ProjectStatus.draft.value,
    )
    db.add(project)
    db.commit()
    db.refresh(project)
    return {"project": project}


@router.get("/{project_id}", response_model=schemas.FilmProjectResponse)
def get_project(
    project_id: int,
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
):
    return {"project": get_owned_project(db, project_id, user_id)}


@router.patch("/{project_id}", response_model=schemas.FilmProjectResponse)
def update_project(
    project_id: int,
    project_in: schemas.FilmProjectUpdate,
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
):
    project = get_owned_project(db, project_id, user_id)

    data = project_in.model_dump(exclude_unset=True)
    if "title" in data and not _clean(data["title"]):
        raise HTTPException(status_code=400, detail="Title is required")
    for field, value in data.items():
        if value is None and field == "status":
            continue
        if isinstance(value, ProjectStatus):
            value = value.value
        elif isinstance(value, str):
            value = value.strip()
        setattr(project, field, value)

    db.add(project)
    db.commit()
    db.refresh(project)
    return {"project": project}


@router.delete("/{project_id}")
def delete_project(
    project_id: int,
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
):
    project = get_owned_project(db, project_id, user_id)
    db.delete(project)
    db.commit()
    return {"success": True}


@router.get("/{project_id}/stats", response_model=schemas.ProjectStatsResponse)
def project_stats(
    project_id: int,
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
):
    project = get_owned_project(db, project_id, user_id)
    return {
        "stats": {
            "characters": len(project.characters),
            "scripts": len(project.scripts),
            "shots": len(project.shots),
            "totalDuration": calculate_project_duration(project.shots),
        }
    }
