"""Sequences the transform stages and maps failures onto the response contract.

Ingestion -> voice settings -> transcription -> (rewrite) -> synthesis.
The first failure short-circuits; nothing is retried and no exception
leaves ``process_transform``.
"""

from __future__ import annotations

import logging
from typing import Any, Mapping, Optional

from aria_relay.telemetry import observe_transform, record_stage_failure

from .ingestion import build_transform_request, resolve_persona
from .rewrite import Rewriter, rewrite_transcript
from .synthesis import Synthesizer, synthesize_persona_audio
from .transcription import Transcriber, transcribe_request
from .types import (
    StageError,
    TransformOutcome,
    TransformRequest,
    TransformResult,
    TransformValidationError,
)
from .voice_settings import resolve_voice_id, resolve_voice_settings

logger = logging.getLogger("aria_relay.services.transform_pipeline")
transcript_logger = logging.getLogger("aria_relay.logs.transcript")

TRANSFORM_FAILED = "Voice transformation failed."


async def run_transform(
    request: TransformRequest,
    transcriber: Transcriber,
    synthesizer: Synthesizer,
    rewriter: Optional[Rewriter] = None,
    *,
    include_transcript_on_synthesis_failure: bool = False,
) -> TransformOutcome:
    """Run stages 02-05 for an already validated request."""

    persona = resolve_persona(request.persona_id)
    voice_id = resolve_voice_id(persona, request.accent)
    voice = resolve_voice_settings(persona, request.accent, request.overrides)
    logger.info(
        "Resolved voice persona=%s accent=%s voice=%s settings=%s",
        persona.id,
        request.accent.value,
        voice_id,
        voice,
    )

    transcript: Optional[str] = None
    try:
        transcript = await transcribe_request(request, transcriber)
        transcript_logger.info("source | persona=%s | text=%s", persona.id, transcript)

        transcript = await rewrite_transcript(transcript, persona, rewriter)
        logger.info("[transform] personaId=%s transcript=%r", persona.id, transcript[:50])

        audio_base64 = await synthesize_persona_audio(
            persona.id, transcript, voice_id, voice, synthesizer
        )
    except StageError as exc:
        record_stage_failure(exc.stage)
        observe_transform(persona.id, f"{exc.stage}_failed")
        keep_transcript = exc.stage == "synthesis" and include_transcript_on_synthesis_failure
        return TransformOutcome(
            TransformResult.failure(exc.message, transcript=transcript if keep_transcript else None)
        )

    observe_transform(persona.id, "success")
    return TransformOutcome(TransformResult.success(transcript, persona.id, audio_base64))


async def process_transform(
    form: Mapping[str, Any],
    transcriber: Transcriber,
    synthesizer: Synthesizer,
    rewriter: Optional[Rewriter] = None,
    *,
    include_transcript_on_synthesis_failure: bool = False,
) -> TransformOutcome:
    """Validate a multipart submission and run the full pipeline."""

    try:
        request = await build_transform_request(form)
    except TransformValidationError as exc:
        logger.info("Rejected transform request: %s", exc)
        observe_transform("invalid", "rejected")
        return TransformOutcome(TransformResult.failure(str(exc)), status_code=400)

    try:
        return await run_transform(
            request,
            transcriber,
            synthesizer,
            rewriter,
            include_transcript_on_synthesis_failure=include_transcript_on_synthesis_failure,
        )
    except Exception:
        logger.exception("Unhandled transform failure persona=%s", request.persona_id)
        observe_transform(request.persona_id, "internal_error")
        return TransformOutcome(TransformResult.failure(TRANSFORM_FAILED))


__all__ = ["TRANSFORM_FAILED", "process_transform", "run_transform"]
