"""Typed containers and errors shared across the transform pipeline.

These live in their own module so the stages (`ingestion`,
`voice_settings`, `transcription`, `rewrite`, `synthesis`) and the
orchestrator can import them without circular dependencies.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional

from aria_relay.domain.models import Accent, VoiceOverrides
from aria_relay.services.llm_client import ConfigurationError

DEFAULT_MIME_TYPE = "audio/webm"


class TransformValidationError(ValueError):
    """Malformed or missing required input; reported with a 400 status."""


class StageError(RuntimeError):
    """A named collaborator stage failed; reported inside a 200 envelope."""

    def __init__(self, stage: str, message: str) -> None:
        super().__init__(message)
        self.stage = stage
        self.message = message


@dataclass(frozen=True)
class AudioPayload:
    """Uploaded audio bytes plus a bare MIME type."""

    data: bytes
    mime_type: str = DEFAULT_MIME_TYPE


@dataclass(frozen=True)
class TransformRequest:
    """Validated inbound request for one transform call."""

    persona_id: str
    accent: Accent = Accent.AMERICAN
    audio: Optional[AudioPayload] = None
    transcript_override: Optional[str] = None
    overrides: VoiceOverrides = field(default_factory=VoiceOverrides)


@dataclass(frozen=True)
class TransformResult:
    """The single response contract: success or error, never both."""

    transcript: Optional[str] = None
    persona_id: Optional[str] = None
    audio_base64: Optional[str] = None
    error: Optional[str] = None

    @classmethod
    def success(cls, transcript: str, persona_id: str, audio_base64: str) -> "TransformResult":
        return cls(transcript=transcript, persona_id=persona_id, audio_base64=audio_base64)

    @classmethod
    def failure(cls, message: str, *, transcript: Optional[str] = None) -> "TransformResult":
        return cls(error=message, transcript=transcript)

    @property
    def ok(self) -> bool:
        return self.error is None

    def to_payload(self) -> dict[str, Any]:
        if self.error is not None:
            payload: dict[str, Any] = {"error": self.error}
            if self.transcript is not None:
                payload["transcript"] = self.transcript
            return payload
        return {
            "transcript": self.transcript,
            "personaId": self.persona_id,
            "audioBase64": self.audio_base64,
        }


@dataclass(frozen=True)
class TransformOutcome:
    """Result payload paired with the HTTP status it should travel with."""

    result: TransformResult
    status_code: int = 200


__all__ = [
    "AudioPayload",
    "ConfigurationError",
    "DEFAULT_MIME_TYPE",
    "StageError",
    "TransformOutcome",
    "TransformRequest",
    "TransformResult",
    "TransformValidationError",
]
