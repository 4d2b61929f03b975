"""Contratos de las capacidades generativas.

Por qué Protocol:
- Define un contrato estructural (duck typing) sin herencia rígida.
- Permite que adaptadores (OpenAI-compatible, fakes de test) sean
  intercambiables sin acoplar el Core a un SDK concreto.
"""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable

from core.domain.models import GeneratedImage


@runtime_checkable
class TextGenerator(Protocol):
    """Generación de texto estructurado (JSON acotado por un schema)."""

    async def generate_json(
        self,
        *,
        instruction: str,
        system_instruction: str,
        schema: dict[str, Any],
        temperature: float,
    ) -> str:
        """Devuelve el texto crudo de la respuesta (se espera JSON)."""

        ...


@runtime_checkable
class ImageGenerator(Protocol):
    """Generación de una imagen a partir de un prompt de texto."""

    async def generate_image(self, *, prompt: str) -> GeneratedImage | None:
        """Devuelve la primera imagen inline de la respuesta, o `None` si no hay."""

        ...
