"""Shared fakes for the generator protocols."""

from __future__ import annotations

import asyncio
import base64
import json
from typing import Any

import pytest

from core.config import AppSettings
from core.domain.models import Entry, GeneratedImage
from core.domain.rarity import Rarity

PNG_BYTES = b"\x89PNG\r\n\x1a\nfake-image"


def make_image(payload: bytes = PNG_BYTES) -> GeneratedImage:
    return GeneratedImage(mime_type="image/png", data=base64.b64encode(payload).decode("ascii"))


def concepts_json(*names: str, wrapped: bool = True) -> str:
    items = [
        {"name": name, "lore": f"lore of {name}", "visualPrompt": f"visual of {name}"}
        for name in names
    ]
    return json.dumps({"concepts": items} if wrapped else items)


def make_entry(name: str, rarity: Rarity = Rarity.COMMON, **kwargs: Any) -> Entry:
    return Entry(
        name=name,
        lore=f"lore of {name}",
        visual_prompt=f"visual of {name}",
        rarity=rarity,
        **kwargs,
    )


class FakeTextGenerator:
    def __init__(self, response: str | Exception) -> None:
        self.response = response
        self.calls: list[dict[str, Any]] = []

    async def generate_json(
        self,
        *,
        instruction: str,
        system_instruction: str,
        schema: dict[str, Any],
        temperature: float,
    ) -> str:
        self.calls.append(
            {
                "instruction": instruction,
                "system_instruction": system_instruction,
                "schema": schema,
                "temperature": temperature,
            }
        )
        if isinstance(self.response, Exception):
            raise self.response
        return self.response


class FakeImageGenerator:
    """Returns an image per prompt; `outcomes` overrides by substring match.

    `delays` maps a substring to a sleep before answering, to force
    out-of-order completion.
    """

    def __init__(
        self,
        outcomes: dict[str, GeneratedImage | Exception | None] | None = None,
        delays: dict[str, float] | None = None,
    ) -> None:
        self.outcomes = outcomes or {}
        self.delays = delays or {}
        self.prompts: list[str] = []
        self.completed: list[str] = []

    async def generate_image(self, *, prompt: str) -> GeneratedImage | None:
        self.prompts.append(prompt)
        for key, delay in self.delays.items():
            if key in prompt:
                await asyncio.sleep(delay)
        self.completed.append(prompt)
        for key, outcome in self.outcomes.items():
            if key in prompt:
                if isinstance(outcome, Exception):
                    raise outcome
                return outcome
        return make_image()


@pytest.fixture
def settings(tmp_path) -> AppSettings:
    return AppSettings(_env_file=None, output_dir=tmp_path / "downloads")
