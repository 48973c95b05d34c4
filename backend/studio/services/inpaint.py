import logging
from typing import Optional

import replicate

from studio.core.config import settings
from studio.core.errors import UpstreamError

logger = logging.getLogger(__name__)

INPAINT_MODEL = (
    "stability-ai/stable-diffusion-inpainting:"
    "95b7223104132402a9ae91cc677285bc5eb997834bd2349fa486f53910fd68b3"
)
INFERENCE_STEPS = 20
GUIDANCE_SCALE = 7.5


def _output_url(item) -> str:
    # replicate>=1.0 hands back FileOutput objects, older versions plain URLs
    return str(getattr(item, "url", item))


class InpaintService:
    """Masked repaint through Replicate's Stable Diffusion inpainting model."""

    def __init__(self, api_token: Optional[str] = None):
        self._api_token = api_token
        self._client = None

    @property
    def client(self) -> replicate.Client:
        if self._client is None:
            token = self._api_token or settings.REPLICATE_API_TOKEN
            if not token:
                raise UpstreamError("REPLICATE_API_TOKEN not configured")
            self._client = replicate.Client(api_token=token)
        return self._client

    def inpaint(self, image_url: str, mask_data_url: str, prompt: str) -> str:
        logger.info("[Replicate] Inpainting %s... with prompt %r", image_url[:50], prompt)
        output = self.client.run(
            INPAINT_MODEL,
            input={
                "image": image_url,
                "mask": mask_data_url,
                "prompt": prompt,
                "num_inference_steps": INFERENCE_STEPS,
                "guidance_scale": GUIDANCE_SCALE,
            },
        )

        outputs = list(output) if isinstance(output, (list, tuple)) else [output]
        if not outputs or outputs[0] is None:
            raise UpstreamError("Failed to process inpainting request", details="Empty output from Replicate")
        return _output_url(outputs[0])
