"""High-level map of the transform pipeline.

``orchestrator.process_transform`` ties everything together; this module
documents the canonical execution order so contributors can jump straight
to the relevant stage:

1. ``ingestion`` – validate the form, persona, accent, overrides and audio.
2. ``voice_settings`` – resolve the voice id and final voice settings.
3. ``transcription`` – call Gemini, unless a transcript override was sent.
4. ``rewrite`` – optionally restyle the transcript for the persona.
5. ``synthesis`` – generate persona audio with ElevenLabs.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List


@dataclass(frozen=True)
class PipelineStage:
    """Human-readable description of one stage in the transform pipeline."""

    order: int
    name: str
    module: str
    summary: str


class TransformPipeline:
    """Utility wrapper for documenting the `/api/transform` flow."""

    _STAGES: List[PipelineStage] = [
        PipelineStage(
            1,
            "Input Resolver",
            "aria_relay.pipelines.transform.ingestion",
            "Validate persona, accent, numeric overrides and the audio or transcript override.",
        ),
        PipelineStage(
            2,
            "Voice Settings",
            "aria_relay.pipelines.transform.voice_settings",
            "Merge persona defaults, overrides and smoothing exceptions; pick the accent voice.",
        ),
        PipelineStage(
            3,
            "Transcription",
            "aria_relay.pipelines.transform.transcription",
            "Forward the audio bytes to Gemini or use the transcript override verbatim.",
        ),
        PipelineStage(
            4,
            "Persona Rewrite",
            "aria_relay.pipelines.transform.rewrite",
            "Optionally restyle the transcript with Bedrock, falling back to the original.",
        ),
        PipelineStage(
            5,
            "Synthesis",
            "aria_relay.pipelines.transform.synthesis",
            "Synthesize the transcript with the persona voice on ElevenLabs.",
        ),
    ]

    @classmethod
    def describe(cls) -> Iterable[PipelineStage]:
        """Expose the ordered list of stages for debugging and documentation."""

        return tuple(cls._STAGES)


__all__ = ["PipelineStage", "TransformPipeline"]
