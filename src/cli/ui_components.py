"""Componentes de UI para CLI (Rich).

Por qué separar componentes:
- Evita mezclar lógica de comandos con detalles visuales.
- Permite reutilizar tablas/paneles en `generate` y en la sesión interactiva.
- Los textos visibles viven en `_LABELS`, igual que en el exportador HTML.
"""

from __future__ import annotations

from rich.align import Align
from rich.columns import Columns
from rich.console import Console, Group, RenderableType
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from core.domain.language import Language
from core.domain.models import CollectionState, Entry
from core.domain.rarity import Rarity

_LABELS: dict[Language, dict[str, str]] = {
    Language.SPANISH: {
        "subtitle": "Selecciona la rareza y genera assets para UEFN de los memes más curseados.",
        "art_ready": "🖼  arte listo",
        "no_image": "💀 sin imagen",
        "sheet_loading": "⏳ generando blueprint 3D...",
        "sheet_ready": "📦 blueprint 3D listo",
        "no_sheet": "📦 sin blueprint",
        "empty": "Tu Pokedex está vacía.\nSelecciona una rareza y dale al botón.",
        "collection": "Colección ",
        "help": (
            "[bold]g[/bold] generar tanda · [bold]r <tier>[/bold] cambiar rareza · "
            "[bold]m <n>[/bold] blueprint 3D · [bold]d <n>[/bold] descargar arte · "
            "[bold]s <n>[/bold] descargar blueprint · [bold]l[/bold] ver colección · "
            "[bold]h [ruta][/bold] galería HTML · [bold]c[/bold] borrar todo · [bold]q[/bold] salir"
        ),
        "cooking": "Cocinando {rarity}...",
        "batch_running": "Ya hay una tanda en marcha.",
        "rarity_selected": "Rareza",
        "sheet_in_progress": "Ese blueprint ya se está generando.",
        "sheet_exists": "{name} ya tiene blueprint. Usa 's {index}' para descargarlo.",
        "sheet_generating": "Generando Blueprint 3D para UEFN...",
        "sheet_done": "Blueprint listo para {name}.",
        "save_failed": "No se pudo guardar la imagen: {error}",
        "nothing_to_download_art": "{name} no tiene imagen para descargar.",
        "nothing_to_download_sheet": "{name} no tiene blueprint para descargar.",
        "skipped_no_image": "Sin imagen para {name}, se omite.",
        "saved": "Guardado:",
        "html_gallery": "Galería HTML:",
        "confirm_clear": "¿Estás seguro de borrar toda tu colección de brainrot?",
        "bad_card_number": "Número de carta inválido: {index}",
        "no_such_card": "No existe la carta #{position}.",
        "continue": "Enter para continuar",
    },
    Language.ENGLISH: {
        "subtitle": "Pick a rarity and generate UEFN assets for the most cursed memes.",
        "art_ready": "🖼  art ready",
        "no_image": "💀 no image",
        "sheet_loading": "⏳ generating 3D blueprint...",
        "sheet_ready": "📦 3D blueprint ready",
        "no_sheet": "📦 no blueprint",
        "empty": "Your Pokedex is empty.\nPick a rarity and hit generate.",
        "collection": "Collection ",
        "help": (
            "[bold]g[/bold] generate batch · [bold]r <tier>[/bold] change rarity · "
            "[bold]m <n>[/bold] 3D blueprint · [bold]d <n>[/bold] download art · "
            "[bold]s <n>[/bold] download blueprint · [bold]l[/bold] show collection · "
            "[bold]h [path][/bold] HTML gallery · [bold]c[/bold] clear all · [bold]q[/bold] quit"
        ),
        "cooking": "Cooking {rarity}...",
        "batch_running": "A batch is already running.",
        "rarity_selected": "Rarity",
        "sheet_in_progress": "That blueprint is already being generated.",
        "sheet_exists": "{name} already has a blueprint. Use 's {index}' to download it.",
        "sheet_generating": "Generating 3D Blueprint for UEFN...",
        "sheet_done": "Blueprint ready for {name}.",
        "save_failed": "Could not save the image: {error}",
        "nothing_to_download_art": "{name} has no image to download.",
        "nothing_to_download_sheet": "{name} has no blueprint to download.",
        "skipped_no_image": "No image for {name}, skipping.",
        "saved": "Saved:",
        "html_gallery": "HTML gallery:",
        "confirm_clear": "Are you sure you want to delete your whole brainrot collection?",
        "bad_card_number": "Invalid card number: {index}",
        "no_such_card": "Card #{position} does not exist.",
        "continue": "Press Enter to continue",
    },
}


def ui_text(language: Language, key: str, **values: object) -> str:
    """Texto visible en el idioma de la sesión, con `values` interpolados."""

    text = _LABELS[language][key]
    return text.format(**values) if values else text


def print_banner(console: Console, language: Language = Language.SPANISH) -> None:
    """Imprime el banner de bienvenida.

    Por qué aquí:
    - Evita dependencias circulares (main <-> session).
    - Permite desactivar banner en modos no interactivos.
    """

    title = Text("BRAINROT POKEDEX", style="bold magenta")
    subtitle = Text(ui_text(language, "subtitle"), style="dim")
    body = Align.center(Text.assemble(title, "\n", subtitle), vertical="middle")
    console.print(Panel(body, border_style="magenta", padding=(1, 4)))


def rarity_label(rarity: Rarity) -> Text:
    return Text(f"★ {rarity.value}", style=f"bold {rarity.profile.color}")


def build_rarity_table(selected: Rarity | None = None) -> Table:
    table = Table(title="Rarity tiers")
    table.add_column("Tier", no_wrap=True)
    table.add_column("Description", style="white")
    table.add_column("Visual complexity", style="dim")
    for rarity in Rarity:
        label = rarity_label(rarity)
        if rarity is selected:
            label.append("  ◀", style="bold")
        table.add_row(label, rarity.profile.description, rarity.profile.complexity)
    return table


def _image_status(entry: Entry, *, model_loading: bool, language: Language) -> Text:
    status = Text()
    if entry.has_image:
        status.append(ui_text(language, "art_ready"), style="green")
    else:
        status.append(ui_text(language, "no_image"), style="red")
    status.append("  ·  ")
    if model_loading:
        status.append(ui_text(language, "sheet_loading"), style="magenta")
    elif entry.has_model_sheet:
        status.append(ui_text(language, "sheet_ready"), style="green")
    else:
        status.append(ui_text(language, "no_sheet"), style="dim")
    return status


def build_entry_panel(
    entry: Entry,
    *,
    index: int,
    model_loading: bool = False,
    language: Language = Language.SPANISH,
) -> Panel:
    """Carta de una entrada: nombre, rareza, lore y estado de sus imágenes."""

    profile = entry.rarity.profile
    body = Text()
    body.append(entry.name.upper() + "\n", style="bold white")
    body.append_text(rarity_label(entry.rarity))
    body.append("\n\n")
    body.append(entry.lore.strip() + "\n\n", style="grey85")
    body.append_text(_image_status(entry, model_loading=model_loading, language=language))
    return Panel(
        body,
        title=f"#{index}",
        title_align="left",
        border_style=profile.border,
        width=48,
    )


def build_error_banner(message: str) -> Panel:
    return Panel(Text(message, style="bold red"), border_style="red")


def build_alert_panel(message: str) -> Panel:
    return Panel(Text(message, style="bold white"), title="⚠", border_style="red")


def build_gallery(state: CollectionState, language: Language = Language.SPANISH) -> RenderableType:
    """Galería completa (la más reciente primero) o el estado vacío."""

    if not state.entries:
        return Panel(
            Align.center(Text(ui_text(language, "empty"), style="dim")),
            border_style="grey23",
        )

    header = Text.assemble((ui_text(language, "collection"), "bold"), (f"[{len(state.entries)}]", "dim"))
    cards = [
        build_entry_panel(entry, index=i, model_loading=state.is_model_loading(entry.id), language=language)
        for i, entry in enumerate(state.entries, start=1)
    ]
    return Group(header, Columns(cards, equal=True))
