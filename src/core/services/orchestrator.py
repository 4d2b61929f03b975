"""Generation orchestration.

This module coordinates the two generative capabilities and the collection
store. It owns no state of its own: every visible change goes through
`CollectionStore.dispatch`, and a whole batch is published with a single
action so front-ends never see a half-built batch.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Awaitable, Callable

from core.config import AppSettings
from core.domain.errors import (
    GenerationFailure,
    batch_failure_message,
    model_sheet_failure_message,
)
from core.domain.language import Language
from core.domain.models import Concept, Entry
from core.domain.rarity import Rarity
from core.interfaces.generators import ImageGenerator, TextGenerator
from core.services.collection import (
    BatchFailed,
    BatchStarted,
    BatchSucceeded,
    CollectionStore,
    ModelSheetFinished,
    ModelSheetStarted,
)
from core.services.concept_parser import ConceptParseError, parse_concepts
from core.services.prompts import (
    build_concept_instruction,
    build_concept_schema,
    build_image_prompt,
    build_model_sheet_prompt,
    build_system_instruction,
)

logger = logging.getLogger(__name__)


@dataclass
class OrchestratorHooks:
    """Optional callbacks for UI layers."""

    # Aviso bloqueante (fallo del model sheet). Sin hook, solo queda el log.
    alert: Callable[[str], None] | None = None


class GenerationOrchestrator:
    """Runs batch generation and model-sheet generation against a store."""

    def __init__(
        self,
        *,
        text_generator: TextGenerator,
        image_generator: ImageGenerator,
        store: CollectionStore,
        settings: AppSettings | None = None,
        language: Language | None = None,
        hooks: OrchestratorHooks | None = None,
        on_close: Callable[[], Awaitable[None]] | None = None,
    ) -> None:
        self._text = text_generator
        self._images = image_generator
        self._store = store
        self._settings = settings or AppSettings()
        self._language = language or self._settings.default_language
        self._hooks = hooks or OrchestratorHooks()
        self._on_close = on_close

    @property
    def store(self) -> CollectionStore:
        return self._store

    @property
    def language(self) -> Language:
        return self._language

    async def aclose(self) -> None:
        """Release the provider client (its HTTP pool). Safe to call twice."""

        on_close, self._on_close = self._on_close, None
        if on_close is not None:
            await on_close()

    async def run_batch(self, rarity: Rarity) -> None:
        """Generate one batch for `rarity` and prepend it to the collection.

        Raises `BatchInProgressError` if another batch is still running; every
        other failure ends up in `state.error`.
        """

        self._store.dispatch(BatchStarted())
        try:
            concepts = await self._generate_concepts(rarity)
            entries = await self._build_entries(rarity, concepts)
        except Exception as exc:
            logger.error("Batch generation failed (%s): %s", rarity.value, exc, exc_info=True)
            self._store.dispatch(BatchFailed(message=batch_failure_message(self._language)))
            return

        self._store.dispatch(BatchSucceeded(entries=tuple(entries)))
        logger.info("Batch of %d %s entries added", len(entries), rarity.value)

    async def run_model_sheet(self, entry_id: str) -> bool:
        """Generate the multi-angle reference sheet for one entry.

        Returns `True` when the entry was patched. Unknown ids are a no-op.
        """

        entry = self._store.state.find(entry_id)
        if entry is None:
            logger.debug("Model sheet requested for unknown entry %s", entry_id)
            return False

        self._store.dispatch(ModelSheetStarted(entry_id=entry_id))
        try:
            image = await self._images.generate_image(prompt=build_model_sheet_prompt(entry))
            if image is None:
                raise GenerationFailure("Failed to generate model sheet")
        except Exception as exc:
            logger.error("Error generating model sheet for %s: %s", entry.name, exc)
            self._store.dispatch(ModelSheetFinished(entry_id=entry_id))
            if self._hooks.alert:
                self._hooks.alert(model_sheet_failure_message(self._language))
            return False

        self._store.dispatch(ModelSheetFinished(entry_id=entry_id, model_sheet_url=image.data_uri))
        return True

    async def _generate_concepts(self, rarity: Rarity) -> list[Concept]:
        count = self._settings.batch_size
        text = await self._text.generate_json(
            instruction=build_concept_instruction(count),
            system_instruction=build_system_instruction(
                rarity=rarity,
                count=count,
                language=self._language,
            ),
            schema=build_concept_schema(self._language),
            temperature=self._settings.concept_temperature,
        )
        result = parse_concepts(text, rarity=rarity)
        if isinstance(result, ConceptParseError):
            raise GenerationFailure(f"Failed to generate concepts: {result.reason}")
        if len(result.concepts) != count:
            logger.info("Provider returned %d concepts (asked for %d)", len(result.concepts), count)
        return result.concepts

    async def _build_entries(self, rarity: Rarity, concepts: list[Concept]) -> list[Entry]:
        # gather conserva el orden de los conceptos aunque terminen desordenados.
        image_urls = await asyncio.gather(
            *(self._safe_image(rarity, concept) for concept in concepts)
        )
        return [
            Entry.from_concept(concept, image_url=url)
            for concept, url in zip(concepts, image_urls)
        ]

    async def _safe_image(self, rarity: Rarity, concept: Concept) -> str:
        try:
            image = await self._images.generate_image(
                prompt=build_image_prompt(rarity=rarity, visual_prompt=concept.visual_prompt)
            )
        except Exception as exc:
            logger.warning("Error generating image for %r: %s", concept.name, exc)
            return ""
        if image is None:
            logger.warning("No image data returned for %r", concept.name)
            return ""
        return image.data_uri
