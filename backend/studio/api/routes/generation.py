import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from studio import models, schemas
from studio.api.dependencies import (
    get_current_user_id,
    get_db,
    get_fal_service,
    get_inpaint_service,
)
from studio.core.errors import UpstreamError
from studio.services.fal import (
    ANIMATION_DURATION,
    KLING_IMAGE_TO_VIDEO_MODEL,
    KONTEXT_EDIT_MODEL,
    KONTEXT_TEXT_TO_IMAGE_MODEL,
    FalService,
    ImageSourceError,
)
from studio.services.inpaint import InpaintService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["generation"])

ASPECT_RATIOS = (
    "1:1", "16:9", "9:16", "4:3", "3:4", "3:2", "2:3",
    "4:5", "5:4", "21:9", "9:21", "2:1", "1:2",
)

GENERATION_MODELS = (KONTEXT_TEXT_TO_IMAGE_MODEL, KONTEXT_EDIT_MODEL)


def _check_aspect_ratio(aspect_ratio: Optional[str]) -> None:
    if aspect_ratio and aspect_ratio not in ASPECT_RATIOS:
        raise HTTPException(status_code=400, detail=f"Unsupported aspect ratio: {aspect_ratio}")


@router.post("/edit-image")
def edit_image(
    body: schemas.EditImageRequest,
    fal: FalService = Depends(get_fal_service),
):
    if not body.image_url or not body.prompt:
        raise HTTPException(status_code=400, detail="Image URL and prompt are required")
    _check_aspect_ratio(body.aspect_ratio)

    try:
        urls = fal.edit_image(body.image_url, body.prompt, body.num_images, body.aspect_ratio)
    except ImageSourceError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.exception("[FAL] Kontext edit failed")
        raise UpstreamError("Failed to edit image", details=str(e))

    if not urls:
        raise UpstreamError("Failed to edit image", details="No images returned from Kontext", status_code=502)

    if body.num_images == 1:
        return {"editedImageUrl": urls[0], "message": "Image edited successfully"}
    return {"editedImageUrls": urls, "message": f"{len(urls)} image variations generated"}


@router.post("/generate-image")
def generate_image(
    body: schemas.GenerateImageRequest,
    fal: FalService = Depends(get_fal_service),
):
    if not body.prompt or not body.prompt.strip():
        raise HTTPException(status_code=400, detail="Missing prompt")
    _check_aspect_ratio(body.aspect_ratio)

    try:
        request_id, model = fal.submit_generation(
            body.prompt.strip(),
            aspect_ratio=body.aspect_ratio,
            num_images=body.num_images,
            identity_image_url=body.identity_image_url,
            seed=body.seed,
        )
    except ImageSourceError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.exception("[FAL] Generation submit failed")
        raise UpstreamError("Failed to start image generation", details=str(e))

    return {"requestId": request_id, "status": "IN_QUEUE", "model": model}


@router.get("/generate-image/status")
def generation_status(
    request_id: Optional[str] = Query(default=None, alias="requestId"),
    model: str = Query(default=KONTEXT_TEXT_TO_IMAGE_MODEL),
    fal: FalService = Depends(get_fal_service),
):
    if not request_id:
        raise HTTPException(status_code=400, detail="Missing requestId")
    if model not in GENERATION_MODELS:
        raise HTTPException(status_code=400, detail=f"Unsupported model: {model}")

    try:
        status = fal.generation_status(model, request_id)
        if status != "COMPLETED":
            if status == "FAILED":
                return JSONResponse(
                    status_code=500,
                    content={"status": "FAILED", "error": "Image generation failed", "requestId": request_id},
                )
            return {"status": status, "requestId": request_id}

        images = fal.generation_result(model, request_id)
    except Exception as e:
        logger.exception("[FAL] Status check failed for %s", request_id)
        raise UpstreamError("Failed to check generation status", details=str(e))

    if not images:
        logger.error("[FAL] %s completed with no images", request_id)
        return JSONResponse(
            status_code=500,
            content={"status": "ERROR", "error": "No images returned from FLUX", "requestId": request_id},
        )

    logger.info("[FAL] Retrieved %d generated images for %s", len(images), request_id)
    return {"status": "COMPLETED", "generatedImageUrls": images, "requestId": request_id}


def _store_video(db: Session, user_id: str, body: schemas.AnimateImageRequest, video_url: str) -> None:
    session = (
        db.query(models.Session)
        .filter(models.Session.id == body.session_id, models.Session.user_id == user_id)
        .first()
    )
    if not session:
        logger.warning("Session %s not found for user, video not stored", body.session_id)
        return

    source_image_id = None
    if body.source_image_id is not None:
        source = (
            db.query(models.Image)
            .join(models.Session, models.Image.session_id == models.Session.id)
            .filter(models.Image.id == body.source_image_id, models.Session.user_id == user_id)
            .first()
        )
        if source:
            source_image_id = source.id
        else:
            logger.warning("Source image %s not found for user, video stored unlinked", body.source_image_id)

    video = models.Video(
        session_id=session.id,
        source_image_id=source_image_id,
        url=video_url,
        prompt=body.prompt,
        model_id=KLING_IMAGE_TO_VIDEO_MODEL,
        duration_seconds=int(ANIMATION_DURATION),
    )
    db.add(video)
    db.commit()


@router.post("/animate-image")
def animate_image(
    body: schemas.AnimateImageRequest,
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
    fal: FalService = Depends(get_fal_service),
):
    if not body.image_url:
        raise HTTPException(status_code=400, detail="Missing image URL")
    if not fal.configured:
        raise UpstreamError("FAL_KEY not configured")

    try:
        video_url = fal.animate_image(body.image_url, body.prompt)
    except Exception as e:
        logger.exception("[FAL] Kling image-to-video failed")
        raise UpstreamError("Failed to animate image", details=str(e))

    if body.session_id is not None:
        try:
            _store_video(db, user_id, body, video_url)
        except SQLAlchemyError:
            db.rollback()
            logger.exception("Video generated but could not be stored")

    return {"videoUrls": [video_url]}


@router.post("/inpaint-image")
def inpaint_image(
    body: schemas.InpaintImageRequest,
    inpainter: InpaintService = Depends(get_inpaint_service),
):
    if not body.image_url or not body.mask_data_url or not body.prompt:
        raise HTTPException(
            status_code=400,
            detail="Missing required parameters: imageUrl, maskDataUrl, and prompt",
        )

    try:
        url = inpainter.inpaint(body.image_url, body.mask_data_url, body.prompt)
    except UpstreamError:
        raise
    except Exception as e:
        logger.exception("[Replicate] Inpainting failed")
        raise UpstreamError("Failed to process inpainting request", details=str(e))

    return {
        "success": True,
        "inpaintedImageUrl": url,
        "message": "Inpainting completed successfully",
    }
