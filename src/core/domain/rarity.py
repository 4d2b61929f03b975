"""Rarity tiers and their static metadata.

Los tiers son datos de configuración, no comportamiento: cada uno aporta texto
para dar forma al prompt y estilos para la presentación (Rich / HTML).
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class Rarity(str, Enum):
    """Closed set of rarity tiers, ordered from weakest to strongest."""

    COMMON = "Common"
    RARE = "Rare"
    EPIC = "Epic"
    LEGENDARY = "Legendary"
    MYTHIC = "Mythic"

    @classmethod
    def parse(cls, value: str) -> "Rarity":
        """Case-insensitive lookup by value (`epic` -> `Rarity.EPIC`)."""

        wanted = value.strip().lower()
        for member in cls:
            if member.value.lower() == wanted:
                return member
        raise ValueError(f"Unknown rarity: {value!r}")

    @property
    def profile(self) -> "RarityProfile":
        return RARITY_PROFILES[self]


@dataclass(frozen=True)
class RarityProfile:
    description: str
    complexity: str
    # Estilos Rich; el template HTML usa `css_color`.
    color: str
    border: str
    css_color: str


RARITY_PROFILES: dict[Rarity, RarityProfile] = {
    Rarity.COMMON: RarityProfile(
        description="Basic, everyday objects or simple creatures. Low detail.",
        complexity="Simple geometry, clean lines, basic textures, familiar objects with faces.",
        color="grey70",
        border="grey42",
        css_color="#a3a3a3",
    ),
    Rarity.RARE: RarityProfile(
        description="Uncommon, slight mutations or accessories.",
        complexity="Moderate detail, unique accessories, vibrant colors, expressive features.",
        color="dodger_blue1",
        border="blue",
        css_color="#60a5fa",
    ),
    Rarity.EPIC: RarityProfile(
        description="Impressive, glowing parts, complex lore.",
        complexity="High detail, glowing elements, particle effects, complex patterned textures.",
        color="medium_purple1",
        border="purple",
        css_color="#c084fc",
    ),
    Rarity.LEGENDARY: RarityProfile(
        description="Unique, powerful, aura effects, extremely detailed.",
        complexity=(
            "Very high complexity, floating parts, golden accents, divine or demonic aura, "
            "intricate armor or skin."
        ),
        color="gold1",
        border="dark_orange",
        css_color="#fbbf24",
    ),
    Rarity.MYTHIC: RarityProfile(
        description="Reality-breaking, glitchy, eldritch, abstract.",
        complexity=(
            "Insane complexity, glitch effects, non-euclidean geometry, multiple heads or limbs, "
            "cosmic horror elements, hyper-realistic textures."
        ),
        color="deep_pink2",
        border="red",
        css_color="#f43f5e",
    ),
}
