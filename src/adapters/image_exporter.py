"""Descarga de imágenes (data URI -> fichero).

Por qué en adapters:
- Escribir en disco es infraestructura; el Core solo maneja data URIs.
"""

from __future__ import annotations

import base64
import binascii
import re
from pathlib import Path

from core.domain.errors import ImageDecodeError
from core.domain.models import Entry

MODEL_SHEET_SUFFIX = "-uefn-ref-sheet"
IMAGE_EXTENSION = ".png"

_NON_ALNUM_RE = re.compile(r"[^A-Za-z0-9]")
_DATA_URI_RE = re.compile(r"^data:(?P<mime>[\w.+-]+/[\w.+-]+)?;base64,(?P<data>.*)$", re.DOTALL)


def sanitize_name_for_filename(name: str) -> str:
    """Cada carácter no alfanumérico pasa a '-', todo en minúsculas."""

    return _NON_ALNUM_RE.sub("-", name).lower()


def download_filename(name: str) -> str:
    return f"{sanitize_name_for_filename(name)}{IMAGE_EXTENSION}"


def decode_data_uri(data_uri: str) -> bytes:
    match = _DATA_URI_RE.match(data_uri.strip())
    if not match:
        raise ImageDecodeError("Not a base64 data URI.")
    try:
        return base64.b64decode(match.group("data"), validate=True)
    except (binascii.Error, ValueError) as exc:
        raise ImageDecodeError(f"Invalid base64 payload: {exc}") from exc


def save_data_uri(*, data_uri: str, name: str, output_dir: Path) -> Path:
    """Escribe la imagen como `<nombre-saneado>.png` dentro de `output_dir`."""

    payload = decode_data_uri(data_uri)
    output_dir.mkdir(parents=True, exist_ok=True)
    output_path = output_dir / download_filename(name)
    output_path.write_bytes(payload)
    return output_path


def save_entry_image(*, entry: Entry, output_dir: Path, model_sheet: bool = False) -> Path | None:
    """Descarga el arte (o el model sheet) de una entrada.

    Devuelve `None` si la imagen pedida no existe (p.ej. sin model sheet).
    """

    if model_sheet:
        if not entry.model_sheet_url:
            return None
        return save_data_uri(
            data_uri=entry.model_sheet_url,
            name=entry.name + MODEL_SHEET_SUFFIX,
            output_dir=output_dir,
        )

    if not entry.image_url:
        return None
    return save_data_uri(data_uri=entry.image_url, name=entry.name, output_dir=output_dir)
