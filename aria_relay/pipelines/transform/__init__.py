"""Transform pipeline package.

Modules are organised by the order in which `/api/transform` executes:

1. `ingestion` – validate the multipart form into a `TransformRequest`.
2. `voice_settings` – resolve the voice id and final voice settings.
3. `transcription` – obtain transcript text.
4. `rewrite` – optional persona restyling.
5. `synthesis` – produce persona audio.

`orchestrator` sequences the stages; `flow` documents them.
"""

from .flow import PipelineStage, TransformPipeline
from .ingestion import (
    build_transform_request,
    normalize_mime_type,
    parse_override,
    resolve_accent,
    resolve_persona,
)
from .orchestrator import TRANSFORM_FAILED, process_transform, run_transform
from .rewrite import rewrite_transcript
from .synthesis import SYNTHESIS_FAILED, synthesize_persona_audio
from .transcription import TRANSCRIPTION_FAILED, transcribe_request
from .types import (
    AudioPayload,
    ConfigurationError,
    StageError,
    TransformOutcome,
    TransformRequest,
    TransformResult,
    TransformValidationError,
)
from .voice_settings import (
    SMOOTHING_RULES,
    SmoothingRule,
    resolve_voice_id,
    resolve_voice_settings,
)

__all__ = [
    "AudioPayload",
    "ConfigurationError",
    "PipelineStage",
    "SMOOTHING_RULES",
    "SYNTHESIS_FAILED",
    "SmoothingRule",
    "StageError",
    "TRANSCRIPTION_FAILED",
    "TRANSFORM_FAILED",
    "TransformOutcome",
    "TransformPipeline",
    "TransformRequest",
    "TransformResult",
    "TransformValidationError",
    "build_transform_request",
    "normalize_mime_type",
    "parse_override",
    "process_transform",
    "resolve_accent",
    "resolve_persona",
    "resolve_voice_id",
    "resolve_voice_settings",
    "rewrite_transcript",
    "run_transform",
    "synthesize_persona_audio",
    "transcribe_request",
]
