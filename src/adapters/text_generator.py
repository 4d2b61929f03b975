"""Adaptador de generación de texto estructurado (chat completions + JSON schema)."""

from __future__ import annotations

import logging
from typing import Any

from openai import AsyncOpenAI

from adapters.ai_client import build_ai_client
from core.config import AppSettings
from core.interfaces.generators import TextGenerator

logger = logging.getLogger(__name__)


class OpenAITextGenerator(TextGenerator):
    """Pide al modelo de texto una respuesta JSON que cumpla un schema."""

    _schema_name = "brainrot_concepts"

    def __init__(self, settings: AppSettings | None = None, *, client: AsyncOpenAI | None = None) -> None:
        self._settings = settings or AppSettings()
        self._client = client or build_ai_client(self._settings)

    async def generate_json(
        self,
        *,
        instruction: str,
        system_instruction: str,
        schema: dict[str, Any],
        temperature: float,
    ) -> str:
        response = await self._client.chat.completions.create(
            model=self._settings.text_model,
            messages=[
                {"role": "system", "content": system_instruction},
                {"role": "user", "content": instruction},
            ],
            temperature=temperature,
            response_format={
                "type": "json_schema",
                "json_schema": {
                    "name": self._schema_name,
                    "schema": schema,
                    "strict": True,
                },
            },
        )
        if not response.choices:
            return ""
        content = response.choices[0].message.content or ""
        logger.debug("Text model %s returned %d chars", self._settings.text_model, len(content))
        return content
