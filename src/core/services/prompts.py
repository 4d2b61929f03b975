"""Construcción de prompts para texto e imágenes.

Todo el texto que se envía al proveedor se compone aquí para que el
orquestador solo coordine llamadas.
"""

from __future__ import annotations

from typing import Any

from core.domain.language import Language
from core.domain.models import Entry
from core.domain.rarity import Rarity


def build_concept_instruction(count: int) -> str:
    return f"Generate {count} concepts."


def build_system_instruction(*, rarity: Rarity, count: int, language: Language) -> str:
    profile = rarity.profile
    return (
        'You are a creative engine for "Brainrot" memes (viral, absurd, gen z humor).\n'
        f"User wants {count} NEW concepts with rarity: {rarity.value}.\n\n"
        f"Rarity definition: {profile.description}\n"
        f"Visual Complexity Guide: {profile.complexity}\n\n"
        f"Generate names and lore in {language.label()}. Visual prompts in English."
    )


def build_concept_schema(language: Language) -> dict[str, Any]:
    """JSON schema del array de conceptos.

    El array va envuelto en un objeto (`{"concepts": [...]}`): los proveedores
    compatibles OpenAI exigen un objeto en la raíz del structured output.
    """

    lore_hint = (
        "Short, funny, nonsensical description. Use Gen Z slang (Spanish/Spanglish)."
        if language is Language.SPANISH
        else "Short, funny, nonsensical description. Use Gen Z slang (English)."
    )
    item = {
        "type": "object",
        "properties": {
            "name": {
                "type": "string",
                "description": "The name of the brainrot character/meme. Catchy, absurd, original.",
            },
            "lore": {
                "type": "string",
                "description": lore_hint,
            },
            "visualPrompt": {
                "type": "string",
                "description": "Detailed visual description for image generation (English).",
            },
        },
        "required": ["name", "lore", "visualPrompt"],
        "additionalProperties": False,
    }
    return {
        "type": "object",
        "properties": {
            "concepts": {"type": "array", "items": item},
        },
        "required": ["concepts"],
        "additionalProperties": False,
    }


def build_image_prompt(*, rarity: Rarity, visual_prompt: str) -> str:
    return (
        f"Rarity: {rarity.value}. A high quality, 3d render, surreal meme art style. "
        f"Visuals: {visual_prompt}. Complexity level: {rarity.profile.complexity}"
    )


def build_model_sheet_prompt(entry: Entry) -> str:
    return (
        "Create a professional 3D character reference sheet (T-Pose) for a video game asset. "
        "Include Front View, Side View, and Back View. "
        f"Character: {entry.name}. Description: {entry.visual_prompt}. "
        "Style: Fortnite UEFN art style, high fidelity, neutral background, "
        "flat lighting for modeling reference, orthographic projection. "
        f"Complexity: {entry.rarity.profile.complexity}"
    )
