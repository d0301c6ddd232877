"""Schemas for the transform endpoint."""

from pydantic import BaseModel, ConfigDict, Field


class TransformResponse(BaseModel):
    transcript: str
    persona_id: str = Field(alias="personaId")
    audio_base64: str = Field(alias="audioBase64")

    model_config = ConfigDict(populate_by_name=True)
