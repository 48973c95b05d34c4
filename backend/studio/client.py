"""
Thin HTTP client for the studio API, used by scripts and the generate flow:
translate the command, queue the job, show a placeholder, poll, swap in results.
"""

import logging
from typing import Callable, Dict, List, Optional

import requests

from studio.core.config import settings
from studio.services.generation_poller import (
    FeedEntry,
    GenerationFeed,
    poll_generation,
)

logger = logging.getLogger(__name__)


class StudioAPIError(Exception):
    def __init__(self, status_code: int, payload: dict):
        self.status_code = status_code
        self.payload = payload
        super().__init__(f"{status_code}: {payload.get('error', payload)}")


class StudioClient:

    def __init__(
        self,
        base_url: Optional[str] = None,
        *,
        user_id: Optional[str] = None,
        session: Optional[requests.Session] = None,
        timeout: float = 120,
    ):
        self.base_url = (base_url or settings.PUBLIC_BASE_URL).rstrip("/")
        self.http = session or requests.Session()
        self.timeout = timeout
        if user_id:
            self.http.headers["X-User-Id"] = user_id

    def _url(self, path: str) -> str:
        return f"{self.base_url}{settings.API_PREFIX}{path}"

    def _request(self, method: str, path: str, *, allow_error: bool = False, **kwargs) -> dict:
        resp = self.http.request(method, self._url(path), timeout=self.timeout, **kwargs)
        try:
            payload = resp.json()
        except ValueError:
            payload = {"error": resp.text}

        if resp.status_code >= 400 and not (allow_error and "status" in payload):
            raise StudioAPIError(resp.status_code, payload)
        return payload

    # --- single calls ---

    def translate_prompt(self, user_command: str, image_description: Optional[str] = None) -> str:
        data = self._request(
            "POST",
            "/translate-prompt",
            json={"userCommand": user_command, "imageDescription": image_description},
        )
        return data["translatedPrompt"]

    def submit_generation(
        self,
        prompt: str,
        *,
        aspect_ratio: str = "1:1",
        num_images: int = 1,
        identity_image_url: Optional[str] = None,
    ) -> dict:
        body = {"prompt": prompt, "aspectRatio": aspect_ratio, "numImages": num_images}
        if identity_image_url:
            body["identityImageUrl"] = identity_image_url
        return self._request("POST", "/generate-image", json=body)

    def generation_status(self, request_id: str, model: Optional[str] = None) -> dict:
        params = {"requestId": request_id}
        if model:
            params["model"] = model
        # FAILED / ERROR come back as 500 with a status field; the poller decides
        return self._request("GET", "/generate-image/status", params=params, allow_error=True)

    def edit_image(self, image_url: str, prompt: str, num_images: int = 1) -> List[str]:
        data = self._request(
            "POST",
            "/edit-image",
            json={"imageUrl": image_url, "prompt": prompt, "numImages": num_images},
        )
        return data.get("editedImageUrls") or [data["editedImageUrl"]]

    def animate_image(self, image_url: str, prompt: Optional[str] = None, session_id: Optional[int] = None) -> str:
        data = self._request(
            "POST",
            "/animate-image",
            json={"imageUrl": image_url, "prompt": prompt, "sessionId": session_id},
        )
        return data["videoUrls"][0]

    # --- generate flow ---

    def generate_images(
        self,
        user_command: str,
        feed: GenerationFeed,
        *,
        aspect_ratio: str = "1:1",
        num_images: int = 1,
        identity_image_url: Optional[str] = None,
        interval: Optional[float] = None,
        max_attempts: Optional[int] = None,
        sleep: Optional[Callable[[float], None]] = None,
    ) -> List[FeedEntry]:
        """
        Full text-to-image round trip. The feed gets a loading placeholder
        while the job runs; on success it is replaced by one entry per image,
        on any failure it is removed and the error propagates.
        """
        prompt = self.translate_prompt(user_command)
        submitted = self.submit_generation(
            prompt,
            aspect_ratio=aspect_ratio,
            num_images=num_images,
            identity_image_url=identity_image_url,
        )
        request_id = submitted["requestId"]
        model = submitted.get("model")
        feed.add_placeholder(request_id, prompt=user_command)

        poll_kwargs: Dict = {"interval": interval, "max_attempts": max_attempts}
        if sleep is not None:
            poll_kwargs["sleep"] = sleep

        try:
            result = poll_generation(
                lambda rid: self.generation_status(rid, model),
                request_id,
                **poll_kwargs,
            )
        except Exception:
            logger.warning("Generation %s did not complete, dropping placeholder", request_id)
            feed.discard(request_id)
            raise

        return feed.resolve(request_id, result.get("generatedImageUrls") or [])
