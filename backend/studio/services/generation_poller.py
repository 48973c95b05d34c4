"""
Queue-based generation: submit a job, poll its status, swap the loading
placeholder for the real images.
"""

import logging
import time
import uuid
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional

from studio.core.config import settings

logger = logging.getLogger(__name__)

TERMINAL_OK = "COMPLETED"
TERMINAL_FAILED = ("FAILED", "ERROR")


class GenerationFailed(Exception):
    def __init__(self, request_id: str, message: str):
        super().__init__(f"Generation {request_id} failed: {message}")
        self.request_id = request_id
        self.message = message


class GenerationTimeout(Exception):
    def __init__(self, request_id: str, attempts: int):
        super().__init__(f"Generation {request_id} still running after {attempts} polls")
        self.request_id = request_id
        self.attempts = attempts


def poll_generation(
    check_status: Callable[[str], dict],
    request_id: str,
    *,
    interval: Optional[float] = None,
    max_attempts: Optional[int] = None,
    sleep: Callable[[float], None] = time.sleep,
) -> dict:
    """
    Poll `check_status(request_id)` at a fixed interval until it reports a
    terminal status. Returns the COMPLETED payload.

    Raises GenerationFailed on FAILED/ERROR and GenerationTimeout once
    `max_attempts` polls have gone by without a terminal status.
    """
    interval = settings.POLL_INTERVAL_SECONDS if interval is None else interval
    max_attempts = settings.POLL_MAX_ATTEMPTS if max_attempts is None else max_attempts

    for attempt in range(1, max_attempts + 1):
        payload = check_status(request_id)
        status = str(payload.get("status", "")).upper()
        logger.debug("[Poll] %s attempt %d: %s", request_id, attempt, status)

        if status == TERMINAL_OK:
            return payload
        if status in TERMINAL_FAILED:
            raise GenerationFailed(request_id, payload.get("error") or status)

        if attempt < max_attempts:
            sleep(interval)

    raise GenerationTimeout(request_id, max_attempts)


@dataclass
class FeedEntry:
    id: str
    url: Optional[str] = None
    width: Optional[int] = None
    height: Optional[int] = None
    prompt: Optional[str] = None
    request_id: Optional[str] = None
    loading: bool = False


@dataclass
class GenerationFeed:
    """Ordered gallery of results, newest first, with loading placeholders."""

    entries: List[FeedEntry] = field(default_factory=list)

    def add_placeholder(self, request_id: str, prompt: Optional[str] = None) -> FeedEntry:
        entry = FeedEntry(id=f"loading-{request_id}", prompt=prompt, request_id=request_id, loading=True)
        self.entries.insert(0, entry)
        return entry

    def _placeholder_index(self, request_id: str) -> int:
        for i, entry in enumerate(self.entries):
            if entry.loading and entry.request_id == request_id:
                return i
        raise KeyError(request_id)

    def resolve(self, request_id: str, images: List[Dict]) -> List[FeedEntry]:
        """Replace the placeholder with one entry per returned image, in place."""
        index = self._placeholder_index(request_id)
        placeholder = self.entries[index]
        real = [
            FeedEntry(
                id=uuid.uuid4().hex,
                url=img["url"],
                width=img.get("width"),
                height=img.get("height"),
                prompt=placeholder.prompt,
                request_id=request_id,
            )
            for img in images
        ]
        self.entries[index:index + 1] = real
        return real

    def discard(self, request_id: str) -> None:
        try:
            del self.entries[self._placeholder_index(request_id)]
        except KeyError:
            pass

    @property
    def loading(self) -> List[FeedEntry]:
        return [e for e in self.entries if e.loading]
