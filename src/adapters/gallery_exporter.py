"""Exportación de la galería a HTML.

Por qué está en adapters:
- El HTML es un detalle de infraestructura (Jinja2).
- La terminal no puede mostrar las imágenes; el snapshot HTML sí, con los
  data URIs embebidos tal cual.
"""

from __future__ import annotations

from datetime import datetime, timezone
from pathlib import Path

from jinja2 import Environment, FileSystemLoader, select_autoescape

from core.domain.language import Language
from core.domain.models import CollectionState
from core.domain.rarity import RARITY_PROFILES


_TEMPLATES_DIR = Path(__file__).resolve().parent / "templates"

_LABELS: dict[Language, dict[str, str]] = {
    Language.SPANISH: {
        "title": "Brainrot Pokedex",
        "collection": "Colección",
        "empty": "Tu Pokedex está vacía.",
        "no_image": "Sin imagen",
        "model_sheet": "Blueprint 3D (UEFN)",
        "generated_at": "Generado",
    },
    Language.ENGLISH: {
        "title": "Brainrot Pokedex",
        "collection": "Collection",
        "empty": "Your Pokedex is empty.",
        "no_image": "No image",
        "model_sheet": "3D Blueprint (UEFN)",
        "generated_at": "Generated",
    },
}


def _get_env() -> Environment:
    return Environment(
        loader=FileSystemLoader(str(_TEMPLATES_DIR)),
        autoescape=select_autoescape(["html", "xml"]),
    )


def render_gallery_html(*, state: CollectionState, language: Language = Language.SPANISH) -> str:
    """Renderiza un HTML autocontenido con todas las cartas de la colección."""

    generated_at = datetime.now(timezone.utc).isoformat(timespec="seconds")
    template = _get_env().get_template("gallery.html")
    return template.render(
        entries=state.entries,
        rarity_profiles=RARITY_PROFILES,
        labels=_LABELS[language],
        lang=language.value,
        generated_at=generated_at,
    )


def export_gallery_html(
    *,
    state: CollectionState,
    output_path: Path,
    language: Language = Language.SPANISH,
) -> Path:
    output_path.parent.mkdir(parents=True, exist_ok=True)
    html = render_gallery_html(state=state, language=language)
    output_path.write_text(html, encoding="utf-8")
    return output_path
