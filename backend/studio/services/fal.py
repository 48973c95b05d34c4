import base64
import logging
import random
from typing import Dict, List, Optional, Tuple

import fal_client
import requests

from studio.core.config import settings

logger = logging.getLogger(__name__)

WHISPER_MODEL = "fal-ai/whisper"
KONTEXT_EDIT_MODEL = "fal-ai/flux-pro/kontext"
KONTEXT_TEXT_TO_IMAGE_MODEL = "fal-ai/flux-pro/kontext/text-to-image"
KLING_IMAGE_TO_VIDEO_MODEL = "fal-ai/kling-video/v2.1/pro/image-to-video"

DEFAULT_ANIMATION_PROMPT = "Bring this image to life with natural, realistic motion"
ANIMATION_NEGATIVE_PROMPT = "blur, distort, and low quality"
ANIMATION_DURATION = "5"

FAL_MEDIA_HOST = "fal.media"


class ImageSourceError(ValueError):
    """The image URL handed to us can't be turned into uploadable bytes."""


def _log_queue_update(update) -> None:
    if isinstance(update, fal_client.InProgress) and update.logs:
        for log in update.logs:
            logger.debug("[FAL] %s", log.get("message", log))


def _random_seed() -> int:
    return random.randint(0, 999_999)


def load_image_bytes(image_url: str) -> Tuple[bytes, str, str]:
    """
    Resolve an http(s) or data: URL to (bytes, content_type, file_name).
    Raises ImageSourceError for anything else, or for empty / non-image payloads.
    """
    if image_url.startswith(("http://", "https://")):
        resp = requests.get(image_url, timeout=60)
        if resp.status_code != 200:
            raise ImageSourceError(f"Failed to fetch image: {resp.status_code}")
        data = resp.content
        content_type = resp.headers.get("content-type", "image/jpeg").split(";")[0].strip()
    elif image_url.startswith("data:"):
        header, _, encoded = image_url.partition(",")
        content_type = header[len("data:"):].split(";")[0] or "application/octet-stream"
        try:
            data = base64.b64decode(encoded, validate=False)
        except (ValueError, TypeError) as e:
            raise ImageSourceError(f"Malformed data URL: {e}")
    else:
        raise ImageSourceError("Unsupported image URL format: " + image_url[:50])

    if not data:
        raise ImageSourceError("Empty image payload")
    if not content_type.startswith("image/"):
        raise ImageSourceError("Invalid image type: " + content_type)

    extension = content_type.split("/")[1] or "jpg"
    return data, content_type, f"image.{extension}"


def status_name(status) -> str:
    if isinstance(status, fal_client.Queued):
        return "IN_QUEUE"
    if isinstance(status, fal_client.InProgress):
        return "IN_PROGRESS"
    if isinstance(status, fal_client.Completed):
        # newer clients report a failed run as Completed with an error attached
        return "FAILED" if getattr(status, "error", None) else "COMPLETED"
    return str(status).upper()


class FalService:
    """
    FAL.ai calls used by the studio: Whisper, FLUX Kontext (edit + generate)
    and Kling image-to-video. The client library reads FAL_KEY from the env.
    """

    @property
    def configured(self) -> bool:
        return bool(settings.FAL_KEY)

    # --- speech ---

    def transcribe(self, audio_base64: str) -> str:
        data_url = f"data:audio/webm;base64,{audio_base64}"
        logger.info("[STT] Calling Fal Whisper (%d base64 chars)", len(audio_base64))
        result = fal_client.subscribe(
            WHISPER_MODEL,
            arguments={
                "audio_url": data_url,
                "task": "transcribe",
                "language": "en",
                "chunk_level": "segment",
                "version": "3",
            },
            with_logs=True,
            on_queue_update=_log_queue_update,
        )
        return (result or {}).get("text") or ""

    # --- images ---

    def ensure_fal_url(self, image_url: str) -> str:
        """Kontext only reads from FAL storage; upload anything hosted elsewhere."""
        if FAL_MEDIA_HOST in image_url:
            return image_url

        data, content_type, file_name = load_image_bytes(image_url)
        logger.info("[FAL] Uploading %s (%d bytes) to FAL storage", content_type, len(data))
        return fal_client.upload(data, content_type, file_name=file_name)

    def edit_image(
        self,
        image_url: str,
        prompt: str,
        num_images: int = 1,
        aspect_ratio: Optional[str] = None,
    ) -> List[str]:
        arguments = {
            "prompt": prompt,
            "image_url": self.ensure_fal_url(image_url),
            "num_images": num_images,
        }
        if aspect_ratio:
            arguments["aspect_ratio"] = aspect_ratio

        logger.info("[FAL] Kontext edit: %s...", prompt[:100])
        result = fal_client.subscribe(
            KONTEXT_EDIT_MODEL,
            arguments=arguments,
            with_logs=True,
            on_queue_update=_log_queue_update,
        )
        return [img["url"] for img in result.get("images", [])]

    def submit_generation(
        self,
        prompt: str,
        aspect_ratio: str = "1:1",
        num_images: int = 1,
        identity_image_url: Optional[str] = None,
        seed: Optional[int] = None,
    ) -> Tuple[str, str]:
        """Queue a FLUX Kontext job. Returns (request_id, model) for polling."""
        arguments = {
            "prompt": prompt,
            "aspect_ratio": aspect_ratio,
            "num_images": num_images,
            "output_format": "jpeg",
            "safety_tolerance": 2,
            "seed": seed if seed is not None else _random_seed(),
        }

        model = KONTEXT_TEXT_TO_IMAGE_MODEL
        if identity_image_url:
            # identity photo steers the subject, so go through image-to-image
            model = KONTEXT_EDIT_MODEL
            arguments["image_url"] = self.ensure_fal_url(identity_image_url)

        handle = fal_client.submit(model, arguments=arguments)
        logger.info("[FAL] Submitted %s request %s", model, handle.request_id)
        return handle.request_id, model

    def generation_status(self, model: str, request_id: str) -> str:
        return status_name(fal_client.status(model, request_id, with_logs=True))

    def generation_result(self, model: str, request_id: str) -> List[Dict]:
        result = fal_client.result(model, request_id)
        return [
            {"url": img["url"], "width": img.get("width"), "height": img.get("height")}
            for img in result.get("images", [])
        ]

    def text_to_image(self, prompt: str, aspect_ratio: str) -> str:
        result = fal_client.subscribe(
            KONTEXT_TEXT_TO_IMAGE_MODEL,
            arguments={
                "prompt": prompt,
                "aspect_ratio": aspect_ratio,
                "output_format": "jpeg",
                "safety_tolerance": 2,
                "num_images": 1,
                "seed": _random_seed(),
            },
        )
        images = result.get("images", [])
        if not images:
            raise RuntimeError("No images generated")
        return images[0]["url"]

    def reference_to_image(self, prompt: str, reference_url: str, aspect_ratio: str) -> str:
        """Render with a character portrait as the identity reference."""
        result = fal_client.subscribe(
            KONTEXT_EDIT_MODEL,
            arguments={
                "prompt": prompt,
                "image_url": self.ensure_fal_url(reference_url),
                "aspect_ratio": aspect_ratio,
                "output_format": "jpeg",
                "safety_tolerance": 2,
                "num_images": 1,
            },
        )
        images = result.get("images", [])
        if not images:
            raise RuntimeError("No images generated")
        return images[0]["url"]

    # --- video ---

    def animate_image(self, image_url: str, prompt: Optional[str] = None) -> str:
        logger.info("[FAL] Kling image-to-video for %s...", image_url[:50])
        result = fal_client.subscribe(
            KLING_IMAGE_TO_VIDEO_MODEL,
            arguments={
                "prompt": prompt or DEFAULT_ANIMATION_PROMPT,
                "image_url": image_url,
                "duration": ANIMATION_DURATION,
                "negative_prompt": ANIMATION_NEGATIVE_PROMPT,
                "cfg_scale": 0.5,
            },
            with_logs=True,
            on_queue_update=_log_queue_update,
        )
        video_url = ((result or {}).get("video") or {}).get("url")
        if not video_url:
            raise RuntimeError("No video URL returned from Kling API")
        return video_url
