"""Service layer helpers for external integrations."""

from .llm_client import BedrockLlmClient, ConfigurationError, LlmInvocationError
from .persona_rewriter import PersonaRewriter, get_persona_rewriter
from .transcribe import (
    GeminiTranscribeService,
    TranscriptionError,
    TranscriptionResult,
    get_transcribe_service,
)
from .voice_tts import (
    SynthesisError,
    VoiceTtsResult,
    VoiceTtsService,
    get_voice_tts_service,
)

__all__ = [
    "BedrockLlmClient",
    "ConfigurationError",
    "LlmInvocationError",
    "PersonaRewriter",
    "get_persona_rewriter",
    "GeminiTranscribeService",
    "TranscriptionError",
    "TranscriptionResult",
    "get_transcribe_service",
    "VoiceTtsService",
    "VoiceTtsResult",
    "SynthesisError",
    "get_voice_tts_service",
]
