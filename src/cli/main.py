"""CLI principal (Typer).

Comandos:
- `rarities`: tabla de tiers.
- `generate`: una tanda no interactiva (útil para scripts).
- `play`: sesión interactiva con la galería en memoria.
- `doctor`: diagnóstico de entorno y setup del proveedor IA.
"""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path

import typer
from rich.console import Console
from rich.markup import escape
from rich.logging import RichHandler

from adapters.ai_client import build_ai_client
from adapters.gallery_exporter import export_gallery_html
from adapters.image_exporter import save_entry_image
from adapters.image_generator import OpenAIImageGenerator
from adapters.text_generator import OpenAITextGenerator
from cli import doctor
from cli.session import GallerySession
from cli.ui_components import build_error_banner, build_gallery, build_rarity_table, print_banner, ui_text
from core.config import AppSettings
from core.domain.language import Language
from core.domain.rarity import Rarity
from core.services.collection import CollectionStore
from core.services.orchestrator import GenerationOrchestrator, OrchestratorHooks

app = typer.Typer(no_args_is_help=True, help="Brainrot Pokedex: AI-generated meme characters by rarity.")
app.add_typer(doctor.app, name="doctor")

_console = Console()


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False, rich_tracebacks=True)],
        force=True,
    )
    # El SDK y httpx son muy ruidosos en DEBUG.
    for noisy in ("httpx", "httpcore", "openai"):
        logging.getLogger(noisy).setLevel(logging.WARNING)


def build_orchestrator(
    *,
    settings: AppSettings,
    language: Language,
    hooks: OrchestratorHooks | None = None,
    store: CollectionStore | None = None,
) -> GenerationOrchestrator:
    """Cablea los adaptadores OpenAI-compatibles con el orquestador."""

    client = build_ai_client(settings)
    return GenerationOrchestrator(
        text_generator=OpenAITextGenerator(settings, client=client),
        image_generator=OpenAIImageGenerator(settings, client=client),
        store=store or CollectionStore(),
        settings=settings,
        language=language,
        hooks=hooks,
        on_close=client.close,
    )


async def _run_batch_once(orchestrator: GenerationOrchestrator, rarity: Rarity) -> None:
    try:
        await orchestrator.run_batch(rarity)
    finally:
        await orchestrator.aclose()


def _resolve_language(settings: AppSettings, english: bool) -> Language:
    return Language.ENGLISH if english else settings.default_language


@app.command()
def rarities() -> None:
    """List the rarity tiers and the prompt guidance each one adds."""

    _console.print(build_rarity_table())


@app.command()
def generate(
    rarity: Rarity | None = typer.Option(
        None, "--rarity", "-r", case_sensitive=False, help="Rarity tier for the batch."
    ),
    english: bool = typer.Option(False, "--english", help="Names and lore in English instead of the default."),
    save: bool = typer.Option(False, "--save", help="Download every generated image."),
    html: Path | None = typer.Option(None, "--html", help="Write an HTML gallery snapshot to this path."),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging."),
) -> None:
    """Generate one batch of concepts and print them as cards."""

    _configure_logging(verbose)
    settings = AppSettings()
    language = _resolve_language(settings, english)
    selected = rarity or settings.default_rarity

    orchestrator = build_orchestrator(settings=settings, language=language)
    with _console.status(ui_text(language, "cooking", rarity=selected.value)):
        asyncio.run(_run_batch_once(orchestrator, selected))

    state = orchestrator.store.state
    if state.error:
        _console.print(build_error_banner(state.error))
        raise typer.Exit(code=1)

    _console.print(build_gallery(state, language))

    if save:
        for entry in state.entries:
            path = save_entry_image(entry=entry, output_dir=settings.output_dir)
            if path is None:
                _console.print(f"[yellow]{ui_text(language, 'skipped_no_image', name=escape(entry.name))}[/yellow]")
            else:
                _console.print(f"[green]{ui_text(language, 'saved')}[/green] {path}")

    if html is not None:
        out = export_gallery_html(state=state, output_path=html, language=language)
        _console.print(f"[green]{ui_text(language, 'html_gallery')}[/green] {out}")


@app.command()
def play(
    rarity: Rarity | None = typer.Option(
        None, "--rarity", "-r", case_sensitive=False, help="Initially selected rarity."
    ),
    english: bool = typer.Option(False, "--english", help="Names and lore in English instead of the default."),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging."),
) -> None:
    """Interactive session: generate batches, model sheets, downloads."""

    _configure_logging(verbose)
    settings = AppSettings()
    language = _resolve_language(settings, english)

    print_banner(_console, language)
    session = GallerySession(
        console=_console,
        settings=settings,
        rarity=rarity or settings.default_rarity,
        language=language,
        orchestrator_factory=build_orchestrator,
    )
    session.loop()


def run() -> None:
    app()
