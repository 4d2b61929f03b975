"""Validación estricta de la salida del modelo de texto.

En vez de `json.loads` + confianza ciega, la respuesta se valida contra el
schema de `Concept` y se devuelve un resultado etiquetado:
`ParsedConcepts` o `ConceptParseError`. El orquestador decide qué hacer con él.
"""

from __future__ import annotations

import json
import re
from dataclasses import dataclass
from typing import Any, Union

from pydantic import BaseModel, Field, ValidationError
from pydantic.config import ConfigDict

from core.domain.models import Concept
from core.domain.rarity import Rarity

_JSON_FENCE_RE = re.compile(r"```(?:json)?\s*(.*?)\s*```", re.DOTALL | re.IGNORECASE)


class _ConceptPayload(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    name: str = Field(..., min_length=1)
    lore: str = Field(..., min_length=1)
    visual_prompt: str = Field(..., min_length=1, alias="visualPrompt")


class _ConceptsEnvelope(BaseModel):
    model_config = ConfigDict(extra="ignore")

    concepts: list[_ConceptPayload]


@dataclass(frozen=True)
class ParsedConcepts:
    concepts: list[Concept]

    @property
    def ok(self) -> bool:
        return True


@dataclass(frozen=True)
class ConceptParseError:
    reason: str
    raw: str = ""

    @property
    def ok(self) -> bool:
        return False


ConceptParseResult = Union[ParsedConcepts, ConceptParseError]


def _strip_fences(text: str) -> str:
    match = _JSON_FENCE_RE.search(text)
    if match:
        return match.group(1).strip()
    return text.strip()


def _payloads_from(data: Any) -> list[_ConceptPayload]:
    # Acepta el objeto envuelto del structured output o un array suelto.
    if isinstance(data, dict):
        return _ConceptsEnvelope.model_validate(data).concepts
    if isinstance(data, list):
        return [_ConceptPayload.model_validate(item) for item in data]
    raise ValueError(f"unexpected JSON root: {type(data).__name__}")


def parse_concepts(text: str | None, *, rarity: Rarity) -> ConceptParseResult:
    """Valida la respuesta cruda y estampa la rareza pedida en cada concepto.

    El número de conceptos se acepta tal cual; solo una lista vacía es error.
    """

    raw = text or ""
    body = _strip_fences(raw)
    if not body:
        return ConceptParseError(reason="empty_response", raw=raw)

    try:
        data = json.loads(body)
    except json.JSONDecodeError as exc:
        return ConceptParseError(reason=f"invalid_json: {exc.msg}", raw=raw)

    try:
        payloads = _payloads_from(data)
        concepts = [
            Concept(
                name=p.name.strip(),
                lore=p.lore.strip(),
                visual_prompt=p.visual_prompt.strip(),
                rarity=rarity,
            )
            for p in payloads
        ]
    except (ValidationError, ValueError) as exc:
        return ConceptParseError(reason=f"schema_mismatch: {exc}", raw=raw)

    if not concepts:
        return ConceptParseError(reason="no_concepts", raw=raw)

    return ParsedConcepts(concepts=concepts)
