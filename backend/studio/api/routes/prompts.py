import binascii
import logging

from fastapi import APIRouter, Depends, HTTPException

from studio import schemas
from studio.api.dependencies import get_llm_service
from studio.core.errors import UpstreamError
from studio.services.llm import GeminiService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["prompts"])


@router.post("/translate-prompt")
def translate_prompt(
    body: schemas.TranslatePromptRequest,
    llm: GeminiService = Depends(get_llm_service),
):
    if not body.user_command or not body.user_command.strip():
        raise HTTPException(status_code=400, detail="No user command provided")

    try:
        translated = llm.translate_prompt(body.user_command.strip(), body.image_description)
    except UpstreamError:
        raise
    except Exception as e:
        logger.exception("[Gemini] Prompt translation failed")
        raise UpstreamError("Failed to translate prompt", details=str(e))

    if not translated:
        raise UpstreamError("Failed to translate prompt", details="Empty response from Gemini")
    return {"translatedPrompt": translated}


@router.post("/describe-image")
def describe_image(
    body: schemas.DescribeImageRequest,
    llm: GeminiService = Depends(get_llm_service),
):
    if not body.image_base64:
        raise HTTPException(status_code=400, detail="Missing image data")
    if not llm.configured:
        raise UpstreamError("Gemini API not configured")

    try:
        description = llm.describe_image(body.image_base64)
    except binascii.Error:
        raise HTTPException(status_code=400, detail="Image data is not valid base64")
    except Exception as e:
        logger.exception("[Gemini] Image description failed")
        raise UpstreamError("Failed to describe image", details=str(e))

    if not description:
        raise UpstreamError("Failed to describe image", details="Empty response from Gemini")

    logger.info("[Gemini] Image description length %d", len(description))
    return {"description": description}
