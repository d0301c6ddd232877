"""TTS synthesis stage (Stage 05) of the transform pipeline."""

from __future__ import annotations

import base64
import logging
from typing import Protocol

from aria_relay.domain.models import ResolvedVoiceSettings
from aria_relay.services import SynthesisError, VoiceTtsResult

from .types import StageError

logger = logging.getLogger("aria_relay.services.transform_pipeline")

SYNTHESIS_FAILED = "Voice synthesis failed. Please try again."


class Synthesizer(Protocol):
    async def synthesize(
        self,
        text: str,
        voice_id: str,
        voice: ResolvedVoiceSettings,
    ) -> VoiceTtsResult: ...


async def synthesize_persona_audio(
    persona_id: str,
    transcript: str,
    voice_id: str,
    voice: ResolvedVoiceSettings,
    synthesizer: Synthesizer,
) -> str:
    """Generate persona audio and return it base64 encoded."""

    try:
        result = await synthesizer.synthesize(transcript, voice_id, voice)
    except SynthesisError as exc:
        logger.error(
            "Synthesis failed persona=%s stage=synthesis voice=%s transcript=%r: %s",
            persona_id,
            voice_id,
            transcript[:50],
            exc,
        )
        raise StageError("synthesis", SYNTHESIS_FAILED) from exc
    except Exception as exc:
        logger.exception(
            "Unexpected synthesis error persona=%s stage=synthesis voice=%s transcript=%r",
            persona_id,
            voice_id,
            transcript[:50],
        )
        raise StageError("synthesis", SYNTHESIS_FAILED) from exc

    return base64.b64encode(result.audio_bytes).decode("ascii")


__all__ = ["SYNTHESIS_FAILED", "Synthesizer", "synthesize_persona_audio"]
