"""Optional persona rewrite stage (Stage 04) of the transform pipeline."""

from __future__ import annotations

import logging
from typing import Optional, Protocol

from aria_relay.domain.models import Persona

logger = logging.getLogger("aria_relay.services.transform_pipeline")


class Rewriter(Protocol):
    async def rewrite(self, transcript: str, persona: Persona) -> str: ...


async def rewrite_transcript(
    transcript: str,
    persona: Persona,
    rewriter: Optional[Rewriter],
) -> str:
    """Restyle the transcript when a rewriter is wired in; never raises."""

    if rewriter is None:
        return transcript

    try:
        rewritten = await rewriter.rewrite(transcript, persona)
    except Exception:
        logger.exception("Persona rewrite raised persona=%s; using original transcript", persona.id)
        return transcript

    if rewritten != transcript:
        logger.info("Persona rewrite applied persona=%s text=%s", persona.id, rewritten[:50])
    return rewritten or transcript


__all__ = ["Rewriter", "rewrite_transcript"]
