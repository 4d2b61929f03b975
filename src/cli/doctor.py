"""Doctor command for environment diagnostics."""

from __future__ import annotations

import asyncio

import typer
from rich.console import Console
from rich.table import Table

from adapters.gallery_exporter import render_gallery_html
from adapters.http_client import build_async_client
from core.config import AppSettings, write_user_env_vars
from core.domain.models import CollectionState

app = typer.Typer(no_args_is_help=True, help="Environment diagnostics and configuration checks.")

_console = Console()


async def _check_http(url: str, settings: AppSettings) -> tuple[bool, str]:
    try:
        async with build_async_client(settings) as client:
            response = await client.get(url)
        return True, f"HTTP {response.status_code}"
    except Exception as exc:
        return False, str(exc)


def _check_template() -> tuple[bool, str]:
    """Render an empty gallery to detect a broken template install."""

    try:
        render_gallery_html(state=CollectionState())
        return True, "OK"
    except Exception as exc:
        return False, str(exc)


@app.command()
def run() -> None:
    """Run baseline diagnostics and show recommended fixes."""

    settings = AppSettings()

    table = Table(title="Brainrot Dex Doctor")
    table.add_column("Check", style="bright_green", no_wrap=True)
    table.add_column("Status", style="white")
    table.add_column("Details", style="dim")

    # Config
    if settings.ai_api_key:
        table.add_row("AI key", "OK", "Key configured")
    else:
        table.add_row("AI key", "MISSING", "Every generation request will fail until BRAINROT_AI_API_KEY is set")
    table.add_row("AI base_url", "OK", settings.ai_base_url)
    table.add_row("Text model", "OK", settings.text_model)
    table.add_row("Image model", "OK", f"{settings.image_model} ({settings.image_size})")
    table.add_row("Output dir", "OK", str(settings.output_dir))

    # Connectivity (best-effort)
    ok_http, detail_http = asyncio.run(_check_http(settings.ai_base_url, settings))
    table.add_row("Provider connectivity", "OK" if ok_http else "FAIL", detail_http)

    ok_tpl, detail_tpl = _check_template()
    table.add_row("Gallery template", "OK" if ok_tpl else "FAIL", detail_tpl)

    _console.print(table)

    if not settings.ai_api_key:
        _console.print("\n[yellow]Tip:[/yellow] run `brainrot doctor setup-ai` to store a provider config.")


@app.command(name="setup-ai")
def setup_ai() -> None:
    """Interactive AI setup (stores config in the user config .env)."""

    provider = typer.prompt(
        "AI provider",
        default="openai",
        show_default=True,
    ).strip().lower()

    presets: dict[str, dict[str, str]] = {
        "openai": {
            "BRAINROT_AI_BASE_URL": "https://api.openai.com/v1",
            "BRAINROT_TEXT_MODEL": "gpt-4o-mini",
            "BRAINROT_IMAGE_MODEL": "gpt-image-1",
        },
        "openai-dalle": {
            "BRAINROT_AI_BASE_URL": "https://api.openai.com/v1",
            "BRAINROT_TEXT_MODEL": "gpt-4o-mini",
            "BRAINROT_IMAGE_MODEL": "dall-e-3",
        },
        "openrouter": {
            "BRAINROT_AI_BASE_URL": "https://openrouter.ai/api/v1",
            "BRAINROT_TEXT_MODEL": "openai/gpt-4o-mini",
            "BRAINROT_IMAGE_MODEL": "openai/gpt-image-1",
        },
    }

    values = presets.get(provider, {}).copy()
    if not values:
        _console.print("[yellow]Unknown provider preset. You can still enter custom values.[/yellow]")

    base_url = typer.prompt("AI base URL", default=values.get("BRAINROT_AI_BASE_URL", ""), show_default=True).strip()
    text_model = typer.prompt("Text model", default=values.get("BRAINROT_TEXT_MODEL", ""), show_default=True).strip()
    image_model = typer.prompt("Image model", default=values.get("BRAINROT_IMAGE_MODEL", ""), show_default=True).strip()
    api_key = typer.prompt("AI API key", hide_input=True, confirmation_prompt=False).strip()

    if not base_url or not text_model or not image_model:
        raise typer.BadParameter("base_url, text model and image model are required")

    env_path = write_user_env_vars(
        {
            "BRAINROT_AI_BASE_URL": base_url,
            "BRAINROT_TEXT_MODEL": text_model,
            "BRAINROT_IMAGE_MODEL": image_model,
            "BRAINROT_AI_API_KEY": api_key,
        }
    )

    _console.print(f"[green]Saved AI config to:[/green] {env_path}")
