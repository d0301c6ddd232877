"""Schemas for the persona catalogue."""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from aria_relay.domain.models import Persona


class VoiceDefaults(BaseModel):
    stability: float
    similarity_boost: float = Field(alias="similarityBoost")
    style: float
    speaking_rate: Optional[float] = Field(default=None, alias="speakingRate")

    model_config = ConfigDict(populate_by_name=True)


class PersonaResponse(BaseModel):
    id: str
    name: str
    description: str
    accents: list[str]
    defaults: VoiceDefaults

    @classmethod
    def from_persona(cls, persona: Persona) -> "PersonaResponse":
        return cls(
            id=persona.id,
            name=persona.name,
            description=persona.description,
            accents=[accent.value for accent in persona.accent_voices],
            defaults=VoiceDefaults(
                stability=persona.stability,
                similarity_boost=persona.similarity_boost,
                style=persona.style,
                speaking_rate=persona.speaking_rate,
            ),
        )
