"""Request ingestion helpers (Stage 01 of the transform pipeline)."""

from __future__ import annotations

import math
import mimetypes
from typing import Any, Final, Mapping, Optional

from starlette.datastructures import UploadFile

from aria_relay.domain.models import (
    SPEAKING_RATE_RANGE,
    STABILITY_RANGE,
    STYLE_RANGE,
    Accent,
    Persona,
    VoiceOverrides,
)
from aria_relay.domain.personas import get_persona, persona_ids

from .types import DEFAULT_MIME_TYPE, AudioPayload, TransformRequest, TransformValidationError

_ACCENTS: Final[dict[str, Accent]] = {accent.value: accent for accent in Accent}


def clamp(value: float, lower: float, upper: float) -> float:
    return min(max(value, lower), upper)


def resolve_persona(persona_id: Any) -> Persona:
    """Look up the persona or fail with the list of valid identifiers."""

    persona = get_persona(persona_id) if isinstance(persona_id, str) else None
    if persona is None:
        raise TransformValidationError(
            f"Unknown personaId. Valid values: {', '.join(persona_ids())}"
        )
    return persona


def resolve_accent(raw: Any) -> Accent:
    """Unknown or missing accents fall back to the baseline accent."""

    if isinstance(raw, str):
        return _ACCENTS.get(raw.strip().lower(), Accent.default())
    return Accent.default()


def parse_override(raw: Any, bounds: tuple[float, float]) -> Optional[float]:
    """Parse a string-encoded override and clamp it, or return None."""

    if not isinstance(raw, str) or not raw.strip():
        return None
    try:
        value = float(raw)
    except ValueError:
        return None
    if math.isnan(value):
        return None
    return clamp(value, *bounds)


def parse_overrides(form: Mapping[str, Any]) -> VoiceOverrides:
    return VoiceOverrides(
        style=parse_override(form.get("style"), STYLE_RANGE),
        stability=parse_override(form.get("stability"), STABILITY_RANGE),
        speaking_rate=parse_override(form.get("speakingRate"), SPEAKING_RATE_RANGE),
    )


def normalize_mime_type(content_type: Optional[str], filename: Optional[str] = None) -> str:
    """Strip codec parameters (``audio/webm;codecs=opus`` -> ``audio/webm``)."""

    if not content_type and filename:
        content_type, _ = mimetypes.guess_type(filename)

    bare = (content_type or "").split(";", 1)[0].strip().lower()
    return bare or DEFAULT_MIME_TYPE


def resolve_transcript_override(raw: Any) -> Optional[str]:
    if not isinstance(raw, str):
        return None
    trimmed = raw.strip()
    return trimmed or None


async def read_audio_payload(audio_file: Any) -> Optional[AudioPayload]:
    """Load the upload fully into memory; empty or missing uploads yield None."""

    if not isinstance(audio_file, UploadFile):
        return None

    audio_bytes = await audio_file.read()
    if not audio_bytes:
        return None

    return AudioPayload(
        data=audio_bytes,
        mime_type=normalize_mime_type(audio_file.content_type, audio_file.filename),
    )


async def build_transform_request(form: Mapping[str, Any]) -> TransformRequest:
    """Validate a multipart submission into a ``TransformRequest``.

    The uploaded file is closed on every path, including rejection.
    """

    audio_file = form.get("audio")
    try:
        persona = resolve_persona(form.get("personaId"))
        transcript_override = resolve_transcript_override(form.get("transcript"))
        audio = await read_audio_payload(audio_file)
    finally:
        if isinstance(audio_file, UploadFile):
            await audio_file.close()

    if audio is None and transcript_override is None:
        raise TransformValidationError(
            "Missing or invalid 'audio' field (or provide a non-empty 'transcript')."
        )

    return TransformRequest(
        persona_id=persona.id,
        accent=resolve_accent(form.get("accent")),
        audio=audio,
        transcript_override=transcript_override,
        overrides=parse_overrides(form),
    )


__all__ = [
    "build_transform_request",
    "clamp",
    "normalize_mime_type",
    "parse_override",
    "parse_overrides",
    "read_audio_payload",
    "resolve_accent",
    "resolve_persona",
    "resolve_transcript_override",
]
