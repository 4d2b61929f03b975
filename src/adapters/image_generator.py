"""Adaptador de generación de imágenes.

Toma el primer resultado que traiga datos base64 inline; si no hay ninguno,
devuelve `None` (el orquestador lo trata como imagen fallida).
"""

from __future__ import annotations

import logging
from typing import Any

from openai import AsyncOpenAI

from adapters.ai_client import build_ai_client
from core.config import AppSettings
from core.domain.models import GeneratedImage
from core.interfaces.generators import ImageGenerator

logger = logging.getLogger(__name__)


def _wants_response_format(model: str) -> bool:
    # Los modelos gpt-image siempre devuelven base64 y rechazan el parámetro.
    return model.lower().startswith("dall-e")


def extract_inline_image(response: Any) -> GeneratedImage | None:
    """Primer item con `b64_json` de una respuesta de `images.generate`."""

    output_format = getattr(response, "output_format", None) or "png"
    for item in getattr(response, "data", None) or []:
        data = getattr(item, "b64_json", None)
        if data:
            return GeneratedImage(mime_type=f"image/{output_format}", data=data)
    return None


class OpenAIImageGenerator(ImageGenerator):
    def __init__(self, settings: AppSettings | None = None, *, client: AsyncOpenAI | None = None) -> None:
        self._settings = settings or AppSettings()
        self._client = client or build_ai_client(self._settings)

    async def generate_image(self, *, prompt: str) -> GeneratedImage | None:
        kwargs: dict[str, Any] = {
            "model": self._settings.image_model,
            "prompt": prompt,
            "n": 1,
            "size": self._settings.image_size,
        }
        if _wants_response_format(self._settings.image_model):
            kwargs["response_format"] = "b64_json"

        response = await self._client.images.generate(**kwargs)
        image = extract_inline_image(response)
        if image is None:
            logger.debug("Image model %s returned no inline data", self._settings.image_model)
        return image
