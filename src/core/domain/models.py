"""Modelos del dominio (Pydantic v2).

Por qué Pydantic en el dominio:
- Nos da validación estricta y documentación autocontenida (Field) sin acoplar
  el Core a librerías de I/O.
- Los modelos son inmutables (`frozen`): toda mutación pasa por el reducer de
  la colección, que produce copias.

Nota:
- Estos modelos describen *qué* es la información, no *cómo* se obtiene.
"""

from __future__ import annotations

import time
import uuid

from pydantic import BaseModel, Field
from pydantic.config import ConfigDict

from core.domain.rarity import Rarity


def _now_ms() -> int:
    return int(time.time() * 1000)


def _new_id() -> str:
    return uuid.uuid4().hex


class Concept(BaseModel):
    """Descripción textual de un personaje generada por el modelo de texto."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    name: str = Field(
        ...,
        min_length=1,
        description="Nombre del personaje/meme. Pegadizo, absurdo, original.",
    )
    lore: str = Field(
        ...,
        min_length=1,
        description="Descripción corta, graciosa y sin sentido.",
    )
    visual_prompt: str = Field(
        ...,
        min_length=1,
        alias="visualPrompt",
        description="Descripción visual detallada (inglés) para el generador de imágenes.",
    )
    rarity: Rarity = Field(
        ...,
        description="Rareza con la que se pidió el concepto.",
    )


class Entry(Concept):
    """Un `Concept` ya registrado en la colección, con sus imágenes.

    `image_url` vacío significa: la imagen falló pero la entrada se conserva.
    """

    id: str = Field(
        default_factory=_new_id,
        min_length=1,
        description="Identificador único; nunca se reutiliza.",
    )
    image_url: str = Field(
        default="",
        description="Data URI de la imagen principal ('' si la generación falló).",
    )
    model_sheet_url: str | None = Field(
        default=None,
        description="Data URI de la hoja de referencia multi-ángulo (si existe).",
    )
    timestamp: int = Field(
        default_factory=_now_ms,
        ge=0,
        description="Momento de creación (ms desde epoch).",
    )

    @classmethod
    def from_concept(cls, concept: Concept, *, image_url: str = "") -> "Entry":
        return cls(
            name=concept.name,
            lore=concept.lore,
            visual_prompt=concept.visual_prompt,
            rarity=concept.rarity,
            image_url=image_url,
        )

    @property
    def has_image(self) -> bool:
        return bool(self.image_url)

    @property
    def has_model_sheet(self) -> bool:
        return bool(self.model_sheet_url)


class GeneratedImage(BaseModel):
    """Imagen devuelta inline por el proveedor (base64 + MIME)."""

    model_config = ConfigDict(frozen=True)

    mime_type: str = Field(default="image/png", min_length=1)
    data: str = Field(..., min_length=1, description="Bytes de la imagen en base64.")

    @property
    def data_uri(self) -> str:
        return f"data:{self.mime_type};base64,{self.data}"


class CollectionState(BaseModel):
    """Estado de la colección de la sesión.

    Por qué `model_loading` vive aquí y no en `Entry`:
    - Es un flag de vista transitorio; la entrada guarda solo datos del dominio.
    """

    model_config = ConfigDict(frozen=True)

    entries: tuple[Entry, ...] = Field(
        default=(),
        description="Entradas, la más reciente primero.",
    )
    is_loading: bool = Field(
        default=False,
        description="Hay una tanda en curso.",
    )
    error: str | None = Field(
        default=None,
        description="Mensaje del último fallo de tanda (se limpia al reintentar).",
    )
    model_loading: frozenset[str] = Field(
        default_factory=frozenset,
        description="Ids de entradas con un model sheet en curso.",
    )

    def find(self, entry_id: str) -> Entry | None:
        for entry in self.entries:
            if entry.id == entry_id:
                return entry
        return None

    def is_model_loading(self, entry_id: str) -> bool:
        return entry_id in self.model_loading
