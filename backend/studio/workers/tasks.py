# studio/workers/tasks.py

import logging

from studio import models
from studio.db.session import SessionLocal
from studio.models.shot import GenerationStatus
from studio.services.fal import FalService
from studio.services.prompt_builder import PromptBuilder

logger = logging.getLogger(__name__)

fal_service = FalService()
prompt_builder = PromptBuilder()


def animate_shot_task(shot_id: int) -> str:
    """
    Worker entry point: turn a shot's still into a Kling clip and store the
    video URL on the shot.
    """
    db = SessionLocal()

    try:
        shot = db.query(models.Shot).filter(models.Shot.id == shot_id).first()
        if not shot:
            return f"shot_id={shot_id} not found"

        if not shot.image_url:
            shot.generation_status = GenerationStatus.failed.value
            db.commit()
            return f"shot {shot_id} has no image"

        shot.generation_status = GenerationStatus.generating.value
        db.commit()

        prompt = prompt_builder.build_shot_prompt(db, shot)
        logger.info("[Worker] Animating shot %s: %s...", shot.id, prompt[:100])

        try:
            video_url = fal_service.animate_image(shot.image_url, prompt)
        except Exception as e:
            logger.exception("[Worker] Animation failed for shot %s", shot.id)
            shot.generation_status = GenerationStatus.failed.value
            db.commit()
            return f"failed: {e}"

        shot.video_url = video_url
        shot.generation_status = GenerationStatus.completed.value
        db.commit()

        logger.info("[Worker] Shot %s animated: %s", shot.id, video_url)
        return f"animated shot {shot.id} (project {shot.project_id})"
    finally:
        db.close()
