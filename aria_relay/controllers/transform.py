"""Voice transform endpoint.

For a stage-by-stage map see `aria_relay.pipelines.transform.flow.TransformPipeline`.
The POST `/api/transform` pipeline performs:

1. Validation of the multipart form (persona, accent, overrides, audio).
2. Voice id and voice settings resolution for the persona.
3. Transcription of the recording, unless a transcript override was sent.
4. Optional persona rewrite and ElevenLabs synthesis.

Malformed input returns 400 with ``{"error": ...}``; collaborator failures
return 200 with ``{"error": ...}`` so the client can show a friendly message.
"""

import logging
from typing import Optional

from fastapi import APIRouter, File, Form, UploadFile
from fastapi.responses import JSONResponse

from aria_relay.config.settings import settings
from aria_relay.controllers.dependencies import RewriterDep, SynthesizerDep, TranscriberDep
from aria_relay.pipelines.transform import TransformPipeline, process_transform
from aria_relay.views import ErrorResponse, TransformResponse

router = APIRouter(prefix="/api", tags=["transform"])

logger = logging.getLogger(__name__)

PIPELINE_STAGES = tuple(TransformPipeline.describe())
"""Ordered pipeline metadata used for quick reference and debugging."""

# Everything is optional at the HTTP layer; the input resolver decides what
# is missing so every rejection carries the same ``{"error": ...}`` body.
# Numeric overrides stay strings so unparseable values are ignored, not 422s.
_PERSONA_FORM = Form(None, alias="personaId")
_ACCENT_FORM = Form(None)
_TRANSCRIPT_FORM = Form(None)
_STYLE_FORM = Form(None)
_STABILITY_FORM = Form(None)
_SPEAKING_RATE_FORM = Form(None, alias="speakingRate")
_AUDIO_FILE_UPLOAD = File(None)


@router.post(
    "/transform",
    response_model=None,
    responses={
        200: {"model": TransformResponse},
        400: {"model": ErrorResponse},
    },
)
async def transform_voice(
    transcriber: TranscriberDep,
    synthesizer: SynthesizerDep,
    rewriter: RewriterDep,
    persona_id: Optional[str] = _PERSONA_FORM,
    accent: Optional[str] = _ACCENT_FORM,
    transcript: Optional[str] = _TRANSCRIPT_FORM,
    style: Optional[str] = _STYLE_FORM,
    stability: Optional[str] = _STABILITY_FORM,
    speaking_rate: Optional[str] = _SPEAKING_RATE_FORM,
    audio: Optional[UploadFile] = _AUDIO_FILE_UPLOAD,
) -> JSONResponse:
    """Transcribe an uploaded recording and re-voice it as the chosen persona."""

    form = {
        "personaId": persona_id,
        "accent": accent,
        "transcript": transcript,
        "style": style,
        "stability": stability,
        "speakingRate": speaking_rate,
        "audio": audio,
    }
    outcome = await process_transform(
        form,
        transcriber,
        synthesizer,
        rewriter,
        include_transcript_on_synthesis_failure=settings.pipeline.include_transcript_on_synthesis_failure,
    )
    if not outcome.result.ok:
        logger.info("Transform for persona=%s ended with: %s", persona_id, outcome.result.error)
    return JSONResponse(status_code=outcome.status_code, content=outcome.result.to_payload())
