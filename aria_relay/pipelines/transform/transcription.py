"""Transcription stage (Stage 03) of the transform pipeline."""

from __future__ import annotations

import logging
from typing import Protocol

from aria_relay.services import TranscriptionError, TranscriptionResult

from .types import StageError, TransformRequest

logger = logging.getLogger("aria_relay.services.transform_pipeline")

TRANSCRIPTION_FAILED = "Transcription failed. Please try recording again."


class Transcriber(Protocol):
    async def transcribe(self, audio_bytes: bytes, mime_type: str) -> TranscriptionResult: ...


async def transcribe_request(request: TransformRequest, transcriber: Transcriber) -> str:
    """Use the transcript override verbatim, otherwise call the transcriber."""

    if request.transcript_override is not None:
        logger.info("Transcript override supplied persona=%s; skipping transcription", request.persona_id)
        return request.transcript_override

    if request.audio is None:
        raise StageError("transcription", TRANSCRIPTION_FAILED)

    try:
        result = await transcriber.transcribe(request.audio.data, request.audio.mime_type)
    except TranscriptionError as exc:
        logger.error(
            "Transcription failed persona=%s stage=transcription mime=%s: %s",
            request.persona_id,
            request.audio.mime_type,
            exc,
        )
        raise StageError("transcription", TRANSCRIPTION_FAILED) from exc
    except Exception as exc:
        logger.exception(
            "Unexpected transcription error persona=%s stage=transcription",
            request.persona_id,
        )
        raise StageError("transcription", TRANSCRIPTION_FAILED) from exc

    return result.transcript.strip()


__all__ = ["TRANSCRIPTION_FAILED", "Transcriber", "transcribe_request"]
