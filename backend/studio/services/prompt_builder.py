from studio import models
from studio.services.film_utils import build_consistency_prompt


class PromptBuilder:

    @staticmethod
    def shot_characters(db, shot: models.Shot):
        ids = shot.characters_in_shot or []
        if not ids:
            return []
        return (
            db.query(models.Character)
            .filter(models.Character.project_id == shot.project_id)
            .filter(models.Character.id.in_(ids))
            .all()
        )

    @staticmethod
    def build_shot_prompt(db, shot: models.Shot) -> str:
        """
        Scene text plus the reference description of every character the shot
        lists, so each render of a character is described the same way.
        """
        characters = PromptBuilder.shot_characters(db, shot)
        if not characters:
            base = (shot.scene_description or "A cinematic shot").strip().rstrip(".")
            angle = f" Shot as {shot.camera_angle} angle." if shot.camera_angle else ""
            return f"{base}.{angle} Cinematic, professional lighting, film quality."

        return build_consistency_prompt(
            shot.scene_description,
            characters,
            camera_angle=shot.camera_angle,
            camera_movement=shot.camera_movement,
            scene_context=shot.notes,
        )
