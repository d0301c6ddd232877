"""Domain models for personas and voice settings."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Mapping, Optional

STABILITY_RANGE = (0.0, 1.0)
SIMILARITY_BOOST_RANGE = (0.0, 1.0)
STYLE_RANGE = (0.0, 1.0)
SPEAKING_RATE_RANGE = (0.7, 1.3)


class Accent(str, Enum):
    """Regional voice selector keyed into a persona's accent voices."""

    AMERICAN = "american"
    BRITISH = "british"
    AUSTRALIAN = "australian"
    INDIAN = "indian"

    @classmethod
    def default(cls) -> "Accent":
        return cls.AMERICAN


@dataclass(frozen=True)
class Persona:
    """A named voice profile with default synthesis parameters."""

    id: str
    name: str
    description: str
    voice_id: str
    stability: float
    similarity_boost: float
    style: float
    speaking_rate: Optional[float] = None
    accent_voices: Mapping[Accent, str] = field(
        default_factory=lambda: MappingProxyType({})
    )

    def __post_init__(self) -> None:
        if not self.voice_id:
            raise ValueError(f"Persona '{self.id}' has no default voice id")
        # Freeze the accent mapping so the registry stays read-only.
        object.__setattr__(
            self, "accent_voices", MappingProxyType(dict(self.accent_voices))
        )


@dataclass(frozen=True)
class VoiceOverrides:
    """Request-level overrides, each already clamped into range."""

    style: Optional[float] = None
    stability: Optional[float] = None
    speaking_rate: Optional[float] = None


@dataclass(frozen=True)
class ResolvedVoiceSettings:
    """Final synthesis parameters for one request.

    ``speaking_rate`` is ``None`` when neither the persona nor the request
    supplies one; the synthesis provider then uses its own default.
    """

    stability: float
    similarity_boost: float
    style: float
    speaking_rate: Optional[float] = None


__all__ = [
    "Accent",
    "Persona",
    "ResolvedVoiceSettings",
    "VoiceOverrides",
    "SIMILARITY_BOOST_RANGE",
    "SPEAKING_RATE_RANGE",
    "STABILITY_RANGE",
    "STYLE_RANGE",
]
