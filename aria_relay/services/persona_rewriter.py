"""Persona-styled transcript rewriting backed by Bedrock.

The rewriter never fails outward: missing credentials, timeouts, provider
errors and empty replies all fall back to the original transcript.
"""

from __future__ import annotations

import logging
from functools import lru_cache
from typing import Any

from aria_relay.domain.models import Persona
from aria_relay.services.llm_client import (
    BedrockLlmClient,
    ConfigurationError,
    LlmInvocationError,
)

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = (
    "You are a voice persona director for an app called Aria. Rewrite the "
    "transcript to match the persona identity. Keep the exact same meaning. "
    "Only change phrasing, energy, word choice and sentence structure. The "
    "output must not be identical to the input unless the input is a single "
    "short fragment. Return ONLY the rewritten text. No explanations, no "
    "labels, no quotes."
)


def build_user_prompt(transcript: str, persona: Persona) -> str:
    return (
        f"Persona: {persona.name}\n"
        f"Character: {persona.description}\n\n"
        f"Original: {transcript}\n\n"
        "Rewrite to sound natural for this persona. Same meaning, same length, "
        "different voice identity."
    )


class PersonaRewriter:
    """Restyle a transcript for a persona, returning the input on any failure."""

    def __init__(self, llm_client: Any | None = None) -> None:
        self._llm = llm_client or BedrockLlmClient()

    async def rewrite(self, transcript: str, persona: Persona) -> str:
        if not transcript.strip():
            return transcript

        try:
            rewritten = await self._llm.invoke(
                system_prompt=SYSTEM_PROMPT,
                user_prompt=build_user_prompt(transcript, persona),
            )
        except ConfigurationError as exc:
            logger.warning("Persona rewrite unavailable, falling back: %s", exc)
            return transcript
        except LlmInvocationError as exc:
            logger.warning("Persona rewrite failed, falling back to original: %s", exc)
            return transcript

        cleaned = (rewritten or "").strip()
        if not cleaned:
            logger.warning("Persona rewrite returned an empty response, falling back")
            return transcript
        return cleaned


@lru_cache(maxsize=1)
def get_persona_rewriter() -> PersonaRewriter:
    return PersonaRewriter()


__all__ = ["PersonaRewriter", "SYSTEM_PROMPT", "build_user_prompt", "get_persona_rewriter"]
