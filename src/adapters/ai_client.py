"""Cliente del proveedor IA (SDK OpenAI, cualquier base URL compatible).

Sin reintentos (`max_retries=0`): un fallo se propaga tal cual al orquestador.
"""

from __future__ import annotations

from openai import AsyncOpenAI

from adapters.http_client import build_async_client
from core.config import AppSettings

# La ausencia de key no se valida al arrancar: el proveedor la rechaza por request.
_MISSING_KEY = "missing-api-key"


def build_ai_client(settings: AppSettings | None = None) -> AsyncOpenAI:
    settings = settings or AppSettings()
    api_key = (settings.ai_api_key or "").strip() or _MISSING_KEY
    return AsyncOpenAI(
        api_key=api_key,
        base_url=settings.ai_base_url,
        timeout=settings.ai_timeout_seconds,
        max_retries=0,
        http_client=build_async_client(settings, timeout_seconds=settings.ai_timeout_seconds),
    )
