"""Typer commands and the interactive session, wired to fake capabilities."""

from __future__ import annotations

import pytest
from rich.console import Console
from typer.testing import CliRunner

import cli.main as cli_main
from cli.session import GallerySession, SessionCommand, parse_command
from conftest import FakeImageGenerator, FakeTextGenerator, concepts_json, make_image
from core.domain.errors import BATCH_FAILURE_MESSAGES, MODEL_SHEET_FAILURE_MESSAGES
from core.domain.language import Language
from core.domain.rarity import Rarity
from core.services.collection import CollectionStore
from core.services.orchestrator import GenerationOrchestrator

runner = CliRunner()


def _factory(settings, text, images, closed=None):
    async def on_close() -> None:
        if closed is not None:
            closed.append(True)

    def build(*, settings=settings, language, hooks=None, store=None):
        return GenerationOrchestrator(
            text_generator=text,
            image_generator=images,
            store=store or CollectionStore(),
            settings=settings,
            language=language,
            hooks=hooks,
            on_close=on_close,
        )

    return build


# ---------------------------------------------------------------------------
# commands
# ---------------------------------------------------------------------------

def test_rarities_lists_every_tier() -> None:
    result = runner.invoke(cli_main.app, ["rarities"])

    assert result.exit_code == 0
    for rarity in Rarity:
        assert rarity.value in result.output


def test_generate_prints_cards_and_exports(monkeypatch, settings, tmp_path) -> None:
    text = FakeTextGenerator(concepts_json("Tung Tung", "Lirili"))
    monkeypatch.setattr(cli_main, "AppSettings", lambda: settings)
    monkeypatch.setattr(cli_main, "build_orchestrator", _factory(settings, text, FakeImageGenerator()))
    html = tmp_path / "gallery.html"

    result = runner.invoke(cli_main.app, ["generate", "--rarity", "epic", "--save", "--html", str(html)])

    assert result.exit_code == 0, result.output
    assert "TUNG TUNG" in result.output
    assert "rarity: Epic" in text.calls[0]["system_instruction"]
    assert (settings.output_dir / "tung-tung.png").exists()
    assert (settings.output_dir / "lirili.png").exists()
    assert "Lirili" in html.read_text(encoding="utf-8")


def test_generate_failure_shows_banner_and_exit_code(monkeypatch, settings) -> None:
    monkeypatch.setattr(cli_main, "AppSettings", lambda: settings)
    monkeypatch.setattr(
        cli_main, "build_orchestrator", _factory(settings, FakeTextGenerator(""), FakeImageGenerator())
    )

    result = runner.invoke(cli_main.app, ["generate"])

    assert result.exit_code == 1
    assert BATCH_FAILURE_MESSAGES[Language.SPANISH] in result.output


def test_generate_closes_the_provider_client(monkeypatch, settings) -> None:
    closed: list[bool] = []
    monkeypatch.setattr(cli_main, "AppSettings", lambda: settings)
    monkeypatch.setattr(
        cli_main,
        "build_orchestrator",
        _factory(settings, FakeTextGenerator(concepts_json("A")), FakeImageGenerator(), closed),
    )

    result = runner.invoke(cli_main.app, ["generate"])

    assert result.exit_code == 0, result.output
    assert closed == [True]


def test_generate_english_flag(monkeypatch, settings) -> None:
    text = FakeTextGenerator("")
    monkeypatch.setattr(cli_main, "AppSettings", lambda: settings)
    monkeypatch.setattr(cli_main, "build_orchestrator", _factory(settings, text, FakeImageGenerator()))

    result = runner.invoke(cli_main.app, ["generate", "--english"])

    assert BATCH_FAILURE_MESSAGES[Language.ENGLISH] in result.output


def test_play_quits_on_q(monkeypatch, settings) -> None:
    monkeypatch.setattr(cli_main, "AppSettings", lambda: settings)
    monkeypatch.setattr(
        cli_main, "build_orchestrator", _factory(settings, FakeTextGenerator(concepts_json("A")), FakeImageGenerator())
    )

    result = runner.invoke(cli_main.app, ["play", "--rarity", "Rare"], input="g\nq\n")

    assert result.exit_code == 0, result.output
    assert "Colección" in result.output


# ---------------------------------------------------------------------------
# session
# ---------------------------------------------------------------------------

@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("g", SessionCommand("generate")),
        ("  M 2 ", SessionCommand("model_sheet", "2")),
        ("r mythic", SessionCommand("rarity", "mythic")),
        ("h out/gallery.html", SessionCommand("html", "out/gallery.html")),
        ("salir", SessionCommand("quit")),
    ],
)
def test_parse_command(raw: str, expected: SessionCommand) -> None:
    assert parse_command(raw) == expected


@pytest.mark.parametrize("raw", ["", "zzz", "m", "d "])
def test_parse_command_rejects(raw: str) -> None:
    with pytest.raises(ValueError):
        parse_command(raw)


def _session(settings, text, images, *, language=Language.SPANISH, closed=None) -> GallerySession:
    return GallerySession(
        console=Console(record=True, width=120),
        settings=settings,
        rarity=Rarity.COMMON,
        language=language,
        orchestrator_factory=_factory(settings, text, images, closed),
    )


def test_session_generate_sheet_and_download(settings) -> None:
    sheet = make_image(b"sheet")
    images = FakeImageGenerator(outcomes={"reference sheet": sheet})
    session = _session(settings, FakeTextGenerator(concepts_json("Alpha", "Beta")), images)
    try:
        assert session.handle("r legendary")
        assert session.rarity is Rarity.LEGENDARY
        assert session.handle("g")
        assert [e.rarity for e in session.store.state.entries] == [Rarity.LEGENDARY] * 2

        session.handle("m 2")
        assert session.store.state.entries[1].model_sheet_url == sheet.data_uri

        # A second request for the same card is gated by the session.
        prompts_before = len(images.prompts)
        session.handle("m 2")
        assert len(images.prompts) == prompts_before

        session.handle("d 1")
        session.handle("s 2")
        assert (settings.output_dir / "alpha.png").exists()
        assert (settings.output_dir / "beta-uefn-ref-sheet.png").exists()

        session.handle("h")
        assert (settings.output_dir / "gallery.html").exists()

        assert session.handle("q") is False
    finally:
        session.close()


def test_session_model_sheet_failure_alerts(monkeypatch, settings) -> None:
    images = FakeImageGenerator(outcomes={"reference sheet": None})
    session = _session(settings, FakeTextGenerator(concepts_json("Gamma")), images)
    prompts: list[str] = []
    monkeypatch.setattr("cli.session.typer.prompt", lambda text, **_: prompts.append(text) or "")
    try:
        session.handle("g")
        session.handle("m 1")
    finally:
        session.close()

    assert prompts == ["Enter para continuar"]
    output = session._console.export_text()
    assert MODEL_SHEET_FAILURE_MESSAGES[Language.SPANISH] in output
    assert session.store.state.entries[0].model_sheet_url is None


def test_session_clear_requires_confirmation(monkeypatch, settings) -> None:
    session = _session(settings, FakeTextGenerator(concepts_json("A", "B")), FakeImageGenerator())
    try:
        session.handle("g")
        monkeypatch.setattr("cli.session.typer.confirm", lambda *a, **k: False)
        session.handle("c")
        assert len(session.store.state.entries) == 2

        monkeypatch.setattr("cli.session.typer.confirm", lambda *a, **k: True)
        session.handle("c")
        assert session.store.state.entries == ()
    finally:
        session.close()


def test_session_bad_card_number_is_reported(settings) -> None:
    session = _session(settings, FakeTextGenerator(concepts_json("A")), FakeImageGenerator())
    try:
        session.handle("m 9")
        session.handle("d x")
    finally:
        session.close()

    output = session._console.export_text()
    assert "No existe la carta #9." in output
    assert "Número de carta inválido: x" in output


def test_session_close_releases_client_once(settings) -> None:
    closed: list[bool] = []
    session = _session(settings, FakeTextGenerator(concepts_json("A")), FakeImageGenerator(), closed=closed)

    session.handle("g")
    session.close()
    session.close()

    assert closed == [True]


def test_session_rerenders_only_after_state_changes(settings) -> None:
    session = _session(settings, FakeTextGenerator(concepts_json("Delta")), FakeImageGenerator())
    console = session._console
    try:
        session.handle("r rare")
        assert "DELTA" not in console.export_text()

        session.handle("g")
        assert "DELTA" in console.export_text()

        session.handle("d 1")
        assert "DELTA" not in console.export_text()
    finally:
        session.close()


def test_english_session_uses_english_labels(monkeypatch, settings) -> None:
    images = FakeImageGenerator(outcomes={"visual of Echo": None, "reference sheet": None})
    session = _session(
        settings, FakeTextGenerator(concepts_json("Echo")), images, language=Language.ENGLISH
    )
    prompts: list[str] = []
    monkeypatch.setattr("cli.session.typer.prompt", lambda text, **_: prompts.append(text) or "")
    try:
        session.render()
        session.handle("g")
        session.handle("d 1")
        session.handle("m 7")
        session.handle("m 1")
    finally:
        session.close()

    output = session._console.export_text()
    assert "Your Pokedex is empty." in output
    assert "Collection [1]" in output
    assert "no image" in output
    assert "Echo has no image to download." in output
    assert "Card #7 does not exist." in output
    assert MODEL_SHEET_FAILURE_MESSAGES[Language.ENGLISH] in output
    assert prompts == ["Press Enter to continue"]
    assert "Tu Pokedex" not in output
