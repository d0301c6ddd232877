"""ElevenLabs text-to-speech for persona voices."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from functools import lru_cache
from typing import Any

from elevenlabs import VoiceSettings
from elevenlabs.client import ElevenLabs
from fastapi.concurrency import run_in_threadpool

from aria_relay.config.settings import settings
from aria_relay.domain.models import ResolvedVoiceSettings

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class VoiceTtsResult:
    """Encoded audio produced for one persona voice."""

    audio_bytes: bytes
    media_type: str
    voice_id: str


class SynthesisError(RuntimeError):
    """Raised when ElevenLabs fails to synthesize speech."""


def to_provider_settings(voice: ResolvedVoiceSettings) -> VoiceSettings:
    """Map resolved settings onto ElevenLabs parameter names."""

    params: dict[str, Any] = {
        "stability": voice.stability,
        "similarity_boost": voice.similarity_boost,
        "style": voice.style,
    }
    if voice.speaking_rate is not None:
        params["speed"] = voice.speaking_rate
    return VoiceSettings(**params)


def _media_type_for(output_format: str) -> str:
    codec = output_format.split("_", 1)[0]
    return {
        "mp3": "audio/mpeg",
        "pcm": "audio/pcm",
        "ulaw": "audio/basic",
        "opus": "audio/ogg",
    }.get(codec, "application/octet-stream")


class VoiceTtsService:
    """Synthesize speech with a persona voice through ElevenLabs."""

    def __init__(
        self,
        *,
        api_key: str | None,
        model_id: str = "eleven_multilingual_v2",
        output_format: str = "mp3_44100_128",
        client: Any | None = None,
    ) -> None:
        self._api_key = api_key
        self._model_id = model_id
        self._output_format = output_format
        self._client = client

    def _get_client(self) -> Any:
        if self._client is None:
            if not self._api_key:
                raise SynthesisError("ELEVENLABS_API_KEY is not configured.")
            self._client = ElevenLabs(api_key=self._api_key)
        return self._client

    async def synthesize(
        self,
        text: str,
        voice_id: str,
        voice: ResolvedVoiceSettings,
    ) -> VoiceTtsResult:
        """Convert text to speech and return the concatenated audio bytes."""

        if not text or not text.strip():
            raise SynthesisError("Text cannot be empty.")

        client = self._get_client()
        provider_settings = to_provider_settings(voice)

        def _convert() -> bytes:
            chunks = client.text_to_speech.convert(
                voice_id=voice_id,
                text=text,
                model_id=self._model_id,
                output_format=self._output_format,
                voice_settings=provider_settings,
            )
            return b"".join(chunks)

        try:
            audio_bytes = await run_in_threadpool(_convert)
        except Exception as exc:
            logger.exception("ElevenLabs synth failed for voice '%s'", voice_id)
            raise SynthesisError(f"Failed to synthesize speech: {exc}") from exc

        if not audio_bytes:
            raise SynthesisError("ElevenLabs returned an empty audio stream.")

        return VoiceTtsResult(
            audio_bytes=audio_bytes,
            media_type=_media_type_for(self._output_format),
            voice_id=voice_id,
        )


@lru_cache(maxsize=1)
def get_voice_tts_service() -> VoiceTtsService:
    """Return the default persona TTS service instance."""

    api_key = settings.elevenlabs.api_key
    return VoiceTtsService(
        api_key=api_key.get_secret_value() if api_key else None,
        model_id=settings.elevenlabs.model_id,
        output_format=settings.elevenlabs.output_format,
    )


__all__ = [
    "SynthesisError",
    "VoiceTtsResult",
    "VoiceTtsService",
    "get_voice_tts_service",
    "to_provider_settings",
]
