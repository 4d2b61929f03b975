"""Interactive gallery session.

The session is the terminal counterpart of the card gallery: it keeps one
`CollectionStore` for the whole process, subscribes to it and re-renders after
any command that changed the state, and gates the actions the store itself does not (no model sheet for an entry that
already has one or is still loading, confirmation before clearing).

A single event loop is kept for the whole session so the SDK's HTTP pool is
reused between commands; `close` releases that pool before closing the loop.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Callable

import typer
from rich.console import Console
from rich.markup import escape

from adapters.gallery_exporter import export_gallery_html
from adapters.image_exporter import save_entry_image
from cli.ui_components import (
    build_alert_panel,
    build_error_banner,
    build_gallery,
    build_rarity_table,
    ui_text,
)
from core.config import AppSettings
from core.domain.errors import BatchInProgressError, ImageDecodeError
from core.domain.language import Language
from core.domain.models import CollectionState, Entry
from core.domain.rarity import Rarity
from core.services.collection import CollectionStore
from core.services.orchestrator import GenerationOrchestrator, OrchestratorHooks

logger = logging.getLogger(__name__)

OrchestratorFactory = Callable[..., GenerationOrchestrator]

_ALIASES: dict[str, str] = {
    "g": "generate",
    "generar": "generate",
    "r": "rarity",
    "rareza": "rarity",
    "m": "model_sheet",
    "d": "download",
    "s": "download_sheet",
    "l": "list",
    "h": "html",
    "c": "clear",
    "q": "quit",
    "salir": "quit",
    "?": "help",
    "help": "help",
}

_NEEDS_INDEX = {"model_sheet", "download", "download_sheet"}


@dataclass(frozen=True)
class SessionCommand:
    kind: str
    arg: str | None = None


def parse_command(text: str) -> SessionCommand:
    """`"m 2"` -> `SessionCommand("model_sheet", "2")`. Raises `ValueError`."""

    parts = text.strip().split(maxsplit=1)
    if not parts:
        raise ValueError("empty command")
    kind = _ALIASES.get(parts[0].lower())
    if kind is None:
        raise ValueError(f"unknown command: {parts[0]}")
    arg = parts[1].strip() if len(parts) > 1 else None
    if kind in _NEEDS_INDEX and not arg:
        raise ValueError(f"'{parts[0]}' needs a card number")
    return SessionCommand(kind=kind, arg=arg)


class GallerySession:
    def __init__(
        self,
        *,
        console: Console,
        settings: AppSettings,
        rarity: Rarity,
        language: Language,
        orchestrator_factory: OrchestratorFactory,
        store: CollectionStore | None = None,
    ) -> None:
        self._console = console
        self._settings = settings
        self.rarity = rarity
        self._language = language
        self._store = store or CollectionStore()
        self._orchestrator = orchestrator_factory(
            settings=settings,
            language=language,
            hooks=OrchestratorHooks(alert=self._alert),
            store=self._store,
        )
        self._loop = asyncio.new_event_loop()
        self._pending_alerts: list[str] = []
        self._dirty = False
        self._unsubscribe = self._store.subscribe(self._on_change)

    @property
    def store(self) -> CollectionStore:
        return self._store

    def _t(self, key: str, **values: object) -> str:
        return ui_text(self._language, key, **values)

    # -- loop -------------------------------------------------------------

    def loop(self) -> None:
        self._console.print(self._t("help"))
        try:
            while True:
                raw = typer.prompt(f"[{self.rarity.value}]", default="", show_default=False)
                if not raw.strip():
                    continue
                if not self.handle(raw):
                    break
        except (typer.Abort, EOFError, KeyboardInterrupt):
            self._console.print()
        finally:
            self.close()

    def close(self) -> None:
        if self._loop.is_closed():
            return
        self._unsubscribe()
        try:
            self._loop.run_until_complete(self._orchestrator.aclose())
        finally:
            self._loop.close()

    def handle(self, raw: str) -> bool:
        """Run one command line. Returns `False` when the session should end."""

        try:
            command = parse_command(raw)
        except ValueError as exc:
            self._console.print(f"[yellow]{escape(str(exc))}[/yellow]")
            return True

        if command.kind == "quit":
            return False
        if command.kind == "help":
            self._console.print(self._t("help"))
        elif command.kind == "generate":
            self.generate()
        elif command.kind == "rarity":
            self.select_rarity(command.arg)
        elif command.kind == "model_sheet":
            self.model_sheet(command.arg or "")
        elif command.kind == "download":
            self.download(command.arg or "", model_sheet=False)
        elif command.kind == "download_sheet":
            self.download(command.arg or "", model_sheet=True)
        elif command.kind == "list":
            self.render()
        elif command.kind == "html":
            self.export_html(command.arg)
        elif command.kind == "clear":
            self.clear()
        if self._dirty:
            self.render()
        return True

    # -- commands ---------------------------------------------------------

    def render(self) -> None:
        self._dirty = False
        state = self._store.state
        if state.error:
            self._console.print(build_error_banner(state.error))
        self._console.print(build_gallery(state, self._language))

    def generate(self) -> None:
        if self._store.state.is_loading:
            self._console.print(f"[yellow]{self._t('batch_running')}[/yellow]")
            return
        try:
            with self._console.status(self._t("cooking", rarity=self.rarity.value)):
                self._loop.run_until_complete(self._orchestrator.run_batch(self.rarity))
        except BatchInProgressError as exc:
            self._console.print(f"[yellow]{escape(str(exc))}[/yellow]")

    def select_rarity(self, value: str | None) -> None:
        if not value:
            self._console.print(build_rarity_table(selected=self.rarity))
            return
        try:
            self.rarity = Rarity.parse(value)
        except ValueError as exc:
            self._console.print(f"[yellow]{escape(str(exc))}[/yellow]")
            return
        self._console.print(f"{self._t('rarity_selected')}: [bold {self.rarity.profile.color}]{self.rarity.value}[/]")

    def model_sheet(self, index: str) -> None:
        entry = self._entry_at(index)
        if entry is None:
            return
        if self._store.state.is_model_loading(entry.id):
            self._console.print(f"[yellow]{self._t('sheet_in_progress')}[/yellow]")
            return
        if entry.has_model_sheet:
            self._console.print(f"[dim]{self._t('sheet_exists', name=escape(entry.name), index=escape(index))}[/dim]")
            return
        with self._console.status(self._t("sheet_generating")):
            ok = self._loop.run_until_complete(self._orchestrator.run_model_sheet(entry.id))
        self._flush_alerts()
        if ok:
            self._console.print(f"[green]{self._t('sheet_done', name=escape(entry.name))}[/green]")

    def download(self, index: str, *, model_sheet: bool) -> Path | None:
        entry = self._entry_at(index)
        if entry is None:
            return None
        try:
            path = save_entry_image(entry=entry, output_dir=self._settings.output_dir, model_sheet=model_sheet)
        except (ImageDecodeError, OSError) as exc:
            logger.error("Download failed for %s: %s", entry.name, exc)
            self._console.print(f"[red]{self._t('save_failed', error=escape(str(exc)))}[/red]")
            return None
        if path is None:
            key = "nothing_to_download_sheet" if model_sheet else "nothing_to_download_art"
            self._console.print(f"[yellow]{self._t(key, name=escape(entry.name))}[/yellow]")
            return None
        self._console.print(f"[green]{self._t('saved')}[/green] {path}")
        return path

    def export_html(self, target: str | None) -> Path:
        output_path = Path(target) if target else self._settings.output_dir / "gallery.html"
        out = export_gallery_html(state=self._store.state, output_path=output_path, language=self._language)
        self._console.print(f"[green]{self._t('html_gallery')}[/green] {out}")
        return out

    def clear(self) -> None:
        if not self._store.state.entries:
            return
        if typer.confirm(self._t("confirm_clear"), default=False):
            self._store.clear()

    # -- helpers ----------------------------------------------------------

    def _entry_at(self, index: str) -> Entry | None:
        entries = self._store.state.entries
        try:
            position = int(index)
        except ValueError:
            self._console.print(f"[yellow]{self._t('bad_card_number', index=escape(index))}[/yellow]")
            return None
        if not 1 <= position <= len(entries):
            self._console.print(f"[yellow]{self._t('no_such_card', position=position)}[/yellow]")
            return None
        return entries[position - 1]

    def _on_change(self, state: CollectionState) -> None:
        self._dirty = True

    def _alert(self, message: str) -> None:
        # Se muestra al terminar el spinner; un prompt dentro del Live se rompe.
        self._pending_alerts.append(message)

    def _flush_alerts(self) -> None:
        while self._pending_alerts:
            self._console.print(build_alert_panel(self._pending_alerts.pop(0)))
            typer.prompt(self._t("continue"), default="", show_default=False)
