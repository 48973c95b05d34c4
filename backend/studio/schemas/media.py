# Request bodies for the AI routes. Field aliases follow the browser client's
# camelCase contract; every field is optional so handlers can answer a missing
# value with their own 400 message.

from typing import Optional
from pydantic import BaseModel, ConfigDict, Field


class _CamelModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class SpeechToTextRequest(_CamelModel):
    audio_base64: Optional[str] = Field(default=None, alias="audioBase64")


class TranslatePromptRequest(_CamelModel):
    user_command: Optional[str] = Field(default=None, alias="userCommand")
    image_description: Optional[str] = Field(default=None, alias="imageDescription")


class DescribeImageRequest(_CamelModel):
    image_base64: Optional[str] = Field(default=None, alias="imageBase64")


class EditImageRequest(_CamelModel):
    image_url: Optional[str] = Field(default=None, alias="imageUrl")
    prompt: Optional[str] = None
    num_images: int = Field(default=1, alias="numImages", ge=1, le=4)
    aspect_ratio: Optional[str] = Field(default=None, alias="aspectRatio")


class GenerateImageRequest(_CamelModel):
    prompt: Optional[str] = None
    aspect_ratio: str = Field(default="1:1", alias="aspectRatio")
    num_images: int = Field(default=1, alias="numImages", ge=1, le=4)
    identity_image_url: Optional[str] = Field(default=None, alias="identityImageUrl")
    seed: Optional[int] = None


class AnimateImageRequest(_CamelModel):
    image_url: Optional[str] = Field(default=None, alias="imageUrl")
    prompt: Optional[str] = None
    session_id: Optional[int] = Field(default=None, alias="sessionId")
    source_image_id: Optional[int] = Field(default=None, alias="sourceImageId")


class InpaintImageRequest(_CamelModel):
    image_url: Optional[str] = Field(default=None, alias="imageUrl")
    mask_data_url: Optional[str] = Field(default=None, alias="maskDataUrl")
    prompt: Optional[str] = None
