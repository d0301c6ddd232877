"""Common FastAPI dependencies reused across controllers."""

from __future__ import annotations

from typing import Annotated, Optional

from fastapi import Depends

from aria_relay.config.settings import settings
from aria_relay.services import (
    GeminiTranscribeService,
    PersonaRewriter,
    VoiceTtsService,
    get_persona_rewriter,
    get_transcribe_service,
    get_voice_tts_service,
)


def get_optional_rewriter() -> Optional[PersonaRewriter]:
    """Return the persona rewriter only when the rewrite stage is enabled."""

    if not settings.rewrite.enabled:
        return None
    return get_persona_rewriter()


TranscriberDep = Annotated[GeminiTranscribeService, Depends(get_transcribe_service)]
SynthesizerDep = Annotated[VoiceTtsService, Depends(get_voice_tts_service)]
RewriterDep = Annotated[Optional[PersonaRewriter], Depends(get_optional_rewriter)]
