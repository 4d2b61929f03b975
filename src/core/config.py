"""Configuración del Core.

Por qué aquí:
- Centraliza variables de entorno (pydantic-settings) sin contaminar la CLI.
- Permite que adaptadores (HTTP/IA) lean config de forma consistente.
"""

from __future__ import annotations

import os
import sys
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from core.domain.language import Language
from core.domain.rarity import Rarity


def get_user_config_dir() -> Path:
    """Directorio de configuración por usuario (cross-platform, sin dependencias)."""

    if sys.platform.startswith("win"):
        base = Path(os.environ.get("APPDATA", str(Path.home())))
        return base / "brainrot-dex"
    if sys.platform == "darwin":
        return Path.home() / "Library" / "Application Support" / "brainrot-dex"

    xdg = os.environ.get("XDG_CONFIG_HOME")
    if xdg:
        return Path(xdg) / "brainrot-dex"
    return Path.home() / ".config" / "brainrot-dex"


def get_user_env_file() -> Path:
    return get_user_config_dir() / ".env"


def _parse_env_lines(text: str) -> dict[str, str]:
    data: dict[str, str] = {}
    for raw_line in text.splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#"):
            continue
        if "=" not in line:
            continue
        key, value = line.split("=", 1)
        key = key.strip()
        value = value.strip().strip('"').strip("'")
        if key:
            data[key] = value
    return data


def write_user_env_vars(values: dict[str, str], *, env_path: Path | None = None) -> Path:
    """Escribe/actualiza variables en el .env global del usuario."""

    env_path = env_path or get_user_env_file()
    env_path.parent.mkdir(parents=True, exist_ok=True)

    existing: dict[str, str] = {}
    if env_path.exists():
        existing = _parse_env_lines(env_path.read_text(encoding="utf-8"))

    existing.update({k: v for k, v in values.items() if v is not None})

    lines = ["# Brainrot Dex user config (.env)"]
    for key in sorted(existing.keys()):
        lines.append(f"{key}={existing[key]}")
    env_path.write_text("\n".join(lines) + "\n", encoding="utf-8")
    return env_path


class AppSettings(BaseSettings):
    """Configuración central de la aplicación.

    Por qué pydantic-settings:
    - Tipado + validación en el borde (env vars) sin ensuciar el Core con lógica.
    - Un único contrato de configuración para CLI/adapters.
    """

    model_config = SettingsConfigDict(
        env_prefix="BRAINROT_",
        extra="ignore",
        case_sensitive=False,
        # Orden: proyecto primero (dev), luego config global de usuario.
        env_file=(".env", str(get_user_env_file())),
        env_file_encoding="utf-8",
    )

    ai_api_key: str | None = Field(
        default=None,
        description="API key del proveedor IA. Sin key, las peticiones fallan (no hay chequeo al arrancar).",
    )
    ai_base_url: str = Field(
        default="https://api.openai.com/v1",
        min_length=8,
        description="Base URL compatible OpenAI.",
    )
    text_model: str = Field(
        default="gpt-4o-mini",
        min_length=1,
        description="Modelo para generar los conceptos (JSON estructurado).",
    )
    image_model: str = Field(
        default="gpt-image-1",
        min_length=1,
        description="Modelo para generar imágenes y model sheets.",
    )
    image_size: str = Field(
        default="1024x1024",
        min_length=3,
        description="Tamaño solicitado al proveedor de imágenes.",
    )

    ai_timeout_seconds: float = Field(
        default=120.0,
        gt=0,
        description="Timeout para llamadas al proveedor IA (segundos). Las imágenes tardan.",
    )
    http_timeout_seconds: float = Field(
        default=20.0,
        gt=0,
        description="Timeout para peticiones HTTP auxiliares (doctor).",
    )
    user_agent: str = Field(
        default="brainrot-dex/0.1 (+https://local)",
        min_length=1,
        description="User-Agent para peticiones HTTP.",
    )

    batch_size: int = Field(
        default=3,
        ge=1,
        le=10,
        description="Conceptos solicitados por tanda.",
    )
    concept_temperature: float = Field(
        default=1.4,
        ge=0.0,
        le=2.0,
        description="Temperatura alta: favorece conceptos absurdos/novedosos.",
    )

    default_rarity: Rarity = Field(
        default=Rarity.COMMON,
        description="Rareza seleccionada al iniciar una sesión.",
    )
    default_language: Language = Field(
        default_factory=Language.default,
        description="Idioma de nombres/lore y mensajes (es/en).",
    )
    output_dir: Path = Field(
        default=Path("downloads"),
        description="Carpeta de descargas (imágenes y galería HTML).",
    )
