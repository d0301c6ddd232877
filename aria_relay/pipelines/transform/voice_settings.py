"""Voice settings resolution (Stage 02 of the transform pipeline).

Settings are layered in a fixed order:

1. persona defaults,
2. request overrides (already clamped during ingestion),
3. smoothing exceptions for specific persona/accent pairs.

Smoothing exceptions always win, even over an explicit override, because
they exist to keep known-bad audio characteristics away from a voice.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Callable, Sequence

from aria_relay.domain.models import (
    Accent,
    Persona,
    ResolvedVoiceSettings,
    VoiceOverrides,
)


def resolve_voice_id(persona: Persona, accent: Accent) -> str:
    """Accent-specific voice when the persona maps one, else the default voice."""

    return persona.accent_voices.get(accent, persona.voice_id)


def _pick(override: float | None, default: float | None) -> float | None:
    return default if override is None else override


@dataclass(frozen=True)
class SmoothingRule:
    """Post-override adjustment for one persona/accent combination."""

    name: str
    applies: Callable[[str, Accent], bool]
    adjust: Callable[[ResolvedVoiceSettings], ResolvedVoiceSettings]


def _for(persona_id: str, accent: Accent) -> Callable[[str, Accent], bool]:
    return lambda pid, acc: pid == persona_id and acc == accent


def _bounded(
    *,
    min_stability: float | None = None,
    max_style: float | None = None,
    max_speaking_rate: float | None = None,
) -> Callable[[ResolvedVoiceSettings], ResolvedVoiceSettings]:
    def adjust(settings: ResolvedVoiceSettings) -> ResolvedVoiceSettings:
        stability = settings.stability
        style = settings.style
        speaking_rate = settings.speaking_rate
        if min_stability is not None:
            stability = max(stability, min_stability)
        if max_style is not None:
            style = min(style, max_style)
        if max_speaking_rate is not None and speaking_rate is not None:
            speaking_rate = min(speaking_rate, max_speaking_rate)
        return replace(settings, stability=stability, style=style, speaking_rate=speaking_rate)

    return adjust


# The American radio host voice crackles and rushes at low stability/high style.
SMOOTHING_RULES: tuple[SmoothingRule, ...] = (
    SmoothingRule(
        name="radio_host_american",
        applies=_for("radio_host", Accent.AMERICAN),
        adjust=_bounded(min_stability=0.62, max_style=0.15, max_speaking_rate=1.0),
    ),
)


def apply_smoothing(
    persona_id: str,
    accent: Accent,
    settings: ResolvedVoiceSettings,
    rules: Sequence[SmoothingRule] = SMOOTHING_RULES,
) -> ResolvedVoiceSettings:
    for rule in rules:
        if rule.applies(persona_id, accent):
            settings = rule.adjust(settings)
    return settings


def resolve_voice_settings(
    persona: Persona,
    accent: Accent,
    overrides: VoiceOverrides,
    rules: Sequence[SmoothingRule] = SMOOTHING_RULES,
) -> ResolvedVoiceSettings:
    """Merge defaults, overrides and smoothing exceptions into final settings."""

    merged = ResolvedVoiceSettings(
        stability=_pick(overrides.stability, persona.stability),
        similarity_boost=persona.similarity_boost,
        style=_pick(overrides.style, persona.style),
        speaking_rate=_pick(overrides.speaking_rate, persona.speaking_rate),
    )
    return apply_smoothing(persona.id, accent, merged, rules)


__all__ = [
    "SMOOTHING_RULES",
    "SmoothingRule",
    "apply_smoothing",
    "resolve_voice_id",
    "resolve_voice_settings",
]
