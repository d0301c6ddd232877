"""Persona catalogue for the client persona picker."""

from fastapi import APIRouter, HTTPException, status

from aria_relay.domain.personas import PERSONAS, get_persona
from aria_relay.views import PersonaResponse

router = APIRouter(prefix="/api/personas", tags=["personas"])


@router.get("/", response_model=list[PersonaResponse])
async def list_personas() -> list[PersonaResponse]:
    return [PersonaResponse.from_persona(persona) for persona in PERSONAS.values()]


@router.get("/{persona_id}", response_model=PersonaResponse)
async def read_persona(persona_id: str) -> PersonaResponse:
    persona = get_persona(persona_id)
    if persona is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Unknown personaId. Valid values: {', '.join(PERSONAS)}",
        )
    return PersonaResponse.from_persona(persona)
