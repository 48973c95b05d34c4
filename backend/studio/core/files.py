import io
import os
import re
import time
import uuid
from typing import Optional, Tuple

from PIL import Image as PILImage, UnidentifiedImageError

from studio.core.config import settings

ALLOWED_IMAGE_TYPES = ("image/jpeg", "image/png", "image/gif", "image/webp")
MAX_UPLOAD_BYTES = 50 * 1024 * 1024
UPLOAD_BUCKETS = (
    "images",
    "original-images",
    "character-images",
    "shot-images",
    "project-thumbnails",
    "script-exports",
    "storyboard-exports",
)

_UNSAFE = re.compile(r"[^A-Za-z0-9_.-]")


def ensure_media_dirs(*parts: str) -> str:
    path = os.path.join(settings.MEDIA_ROOT, *parts)
    os.makedirs(path, exist_ok=True)
    return path


def safe_segment(value: str) -> str:
    # no empty, "." or ".." segments
    cleaned = _UNSAFE.sub("_", value).lstrip(".")
    return cleaned or "_"


def image_dimensions(data: bytes) -> Tuple[Optional[int], Optional[int]]:
    try:
        with PILImage.open(io.BytesIO(data)) as img:
            return img.width, img.height
    except (UnidentifiedImageError, OSError):
        return None, None


def public_url(relative_path: str) -> str:
    relative_path = relative_path.replace(os.sep, "/")
    return f"{settings.PUBLIC_BASE_URL.rstrip('/')}/media/{relative_path}"


def save_upload(
    data: bytes,
    original_name: str,
    *,
    bucket: str,
    user_id: str,
    session_id: Optional[int] = None,
) -> Tuple[str, str]:
    """
    Write an uploaded file to MEDIA_ROOT/<bucket>/<user>/<session|misc>/.
    Returns (relative_path, public_url). Raises ValueError for an unknown
    bucket or a path that would land outside MEDIA_ROOT.
    """
    if bucket not in UPLOAD_BUCKETS:
        raise ValueError(f"Unknown bucket: {bucket}")

    folder = (
        bucket,
        safe_segment(user_id),
        str(session_id) if session_id is not None else "misc",
    )
    root = os.path.realpath(settings.MEDIA_ROOT)
    target = os.path.realpath(os.path.join(root, *folder))
    if os.path.commonpath([root, target]) != root:
        raise ValueError("Upload path escapes media root")
    directory = ensure_media_dirs(*folder)

    ext = os.path.splitext(original_name or "")[1].lstrip(".")
    file_name = f"{int(time.time() * 1000)}-{uuid.uuid4().hex[:8]}.{safe_segment(ext) if ext else 'jpg'}"

    with open(os.path.join(directory, file_name), "wb") as f:
        f.write(data)

    relative_path = "/".join(folder + (file_name,))
    return relative_path, public_url(relative_path)
