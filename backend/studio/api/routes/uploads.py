import logging
from typing import Optional

from fastapi import APIRouter, Depends, File, Form, HTTPException, UploadFile

from studio.api.dependencies import get_current_user_id
from studio.core.files import (
    ALLOWED_IMAGE_TYPES,
    MAX_UPLOAD_BYTES,
    image_dimensions,
    save_upload,
)

logger = logging.getLogger(__name__)

router = APIRouter(tags=["uploads"])


@router.post("/upload")
def upload_file(
    file: Optional[UploadFile] = File(default=None),
    bucket: str = Form(default="images"),
    session_id: Optional[int] = Form(default=None),
    user_id: str = Depends(get_current_user_id),
):
    if file is None:
        raise HTTPException(status_code=400, detail="No file provided")
    if file.content_type not in ALLOWED_IMAGE_TYPES:
        raise HTTPException(status_code=400, detail="Invalid file type")

    data = file.file.read()
    if len(data) > MAX_UPLOAD_BYTES:
        raise HTTPException(status_code=400, detail="File too large")

    try:
        relative_path, url = save_upload(
            data,
            file.filename,
            bucket=bucket,
            user_id=user_id,
            session_id=session_id,
        )
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    width, height = image_dimensions(data)
    logger.info("Stored upload %s (%d bytes)", relative_path, len(data))

    return {
        "url": url,
        "fileName": relative_path,
        "size": len(data),
        "type": file.content_type,
        "bucket": bucket,
        "width": width,
        "height": height,
    }
