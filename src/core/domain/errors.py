"""Errores del dominio y mensajes fijos para el usuario.

Cada tier de fallo tiene un único mensaje legible; no hay códigos de error.
"""

from __future__ import annotations

from core.domain.language import Language


class BrainrotError(Exception):
    """Base de los errores propios de la aplicación."""


class GenerationFailure(BrainrotError):
    """El modelo de texto no devolvió conceptos utilizables."""


class BatchInProgressError(BrainrotError):
    """Se intentó lanzar una tanda mientras otra seguía en curso."""


class ImageDecodeError(BrainrotError):
    """Un data URI no se pudo decodificar a bytes de imagen."""


BATCH_FAILURE_MESSAGES: dict[Language, str] = {
    Language.SPANISH: "Algo explotó en la fábrica de memes. Intenta de nuevo.",
    Language.ENGLISH: "Something exploded in the meme factory. Try again.",
}

MODEL_SHEET_FAILURE_MESSAGES: dict[Language, str] = {
    Language.SPANISH: "No se pudo generar la referencia 3D. Intenta de nuevo.",
    Language.ENGLISH: "Could not generate the 3D reference. Try again.",
}


def batch_failure_message(language: Language) -> str:
    return BATCH_FAILURE_MESSAGES[language]


def model_sheet_failure_message(language: Language) -> str:
    return MODEL_SHEET_FAILURE_MESSAGES[language]
