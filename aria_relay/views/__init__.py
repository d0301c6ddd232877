"""Pydantic schemas used as views in the MVC architecture."""

from .common import ErrorResponse
from .personas import PersonaResponse, VoiceDefaults
from .transform import TransformResponse

__all__ = [
    "ErrorResponse",
    "PersonaResponse",
    "TransformResponse",
    "VoiceDefaults",
]
