"""Static persona registry, loaded once and read-only for the process lifetime."""

from __future__ import annotations

from types import MappingProxyType
from typing import Mapping, Optional

from .models import Accent, Persona

PERSONAS: Mapping[str, Persona] = MappingProxyType(
    {
        "calm_narrator": Persona(
            id="calm_narrator",
            name="Calm Narrator",
            description="A measured, soothing voice ideal for storytelling and narration.",
            voice_id="wLOfTh9wT8nrLnLqxfd5",
            stability=0.80,
            similarity_boost=0.75,
            style=0.05,
        ),
        "radio_host": Persona(
            id="radio_host",
            name="Radio Host",
            description="Energetic and punchy, like a live FM broadcast.",
            voice_id="OQZFQwxzrAUxV46LjHx1",
            stability=0.55,
            similarity_boost=0.80,
            style=0.22,
            speaking_rate=1.03,
            accent_voices={
                Accent.AMERICAN: "OQZFQwxzrAUxV46LjHx1",
                Accent.BRITISH: "Om2UWRzFN17pcwpGqlL7",
                Accent.AUSTRALIAN: "gmBpaV0BNpfT1EqjI4Dx",
                Accent.INDIAN: "9yJ9vg0nUgNIvv7y2uhu",
            },
        ),
        "elder_storyteller": Persona(
            id="elder_storyteller",
            name="Elder Storyteller",
            description="Warm and unhurried, carrying decades of wisdom.",
            voice_id="aJGQwZByOI8Zm1HDZTqc",
            stability=0.65,
            similarity_boost=0.70,
            style=0.25,
            speaking_rate=0.85,
        ),
        "playful_kid": Persona(
            id="playful_kid",
            name="Playful Kid",
            description="Light, bouncy, and full of infectious enthusiasm.",
            voice_id="7J89xXY66GnQ4VvinF4Q",
            stability=0.45,
            similarity_boost=0.70,
            style=0.60,
            speaking_rate=1.10,
        ),
    }
)


def get_persona(persona_id: str) -> Optional[Persona]:
    return PERSONAS.get(persona_id)


def persona_ids() -> list[str]:
    """Valid persona identifiers in registry order."""

    return list(PERSONAS)


__all__ = ["PERSONAS", "get_persona", "persona_ids"]
