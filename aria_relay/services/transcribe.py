"""Google Gemini speech-to-text integration."""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from functools import lru_cache
from typing import Any

import google.generativeai as genai
from fastapi.concurrency import run_in_threadpool
from google.api_core import exceptions as google_exceptions

from aria_relay.config.settings import settings

logger = logging.getLogger(__name__)

TRANSCRIBE_PROMPT = (
    "Transcribe this audio exactly. Return only the spoken words, "
    "no labels or timestamps."
)


@dataclass(frozen=True)
class TranscriptionResult:
    """Structured transcription outcome returned to the pipeline."""

    transcript: str
    model: str | None = None


class TranscriptionError(RuntimeError):
    """Raised when Gemini fails to produce a usable transcript."""


class GeminiTranscribeService:
    """High-level facade for sending inline audio to Gemini."""

    def __init__(
        self,
        *,
        api_key: str | None,
        model: str = "gemini-2.5-flash",
        timeout: float = 30.0,
        client: Any | None = None,
    ) -> None:
        self._api_key = api_key
        self._model = model
        self._timeout = timeout
        self._client = client
        self._lock = threading.Lock()

    def _get_model(self) -> Any:
        with self._lock:
            if self._client is None:
                if not self._api_key:
                    raise TranscriptionError("GEMINI_API_KEY is not configured.")
                genai.configure(api_key=self._api_key)
                self._client = genai.GenerativeModel(model_name=self._model)
            return self._client

    async def transcribe(self, audio_bytes: bytes, mime_type: str) -> TranscriptionResult:
        """Send the audio inline and return the trimmed transcript."""

        if not audio_bytes:
            raise TranscriptionError("The uploaded audio file is empty.")

        contents = [
            {"mime_type": mime_type, "data": audio_bytes},
            TRANSCRIBE_PROMPT,
        ]

        def _call() -> str:
            response = self._get_model().generate_content(
                contents,
                request_options={"timeout": self._timeout},
            )
            # ``text`` raises ValueError when the candidate carries no text parts.
            return (response.text or "").strip()

        logger.info("Sending %d bytes (%s) to Gemini model=%s", len(audio_bytes), mime_type, self._model)
        try:
            transcript = await run_in_threadpool(_call)
        except google_exceptions.GoogleAPIError as exc:
            raise TranscriptionError(f"Gemini request failed: {exc}") from exc
        except ValueError as exc:
            raise TranscriptionError(f"Gemini returned no usable text: {exc}") from exc

        if not transcript:
            raise TranscriptionError("Gemini returned an empty transcript.")

        logger.info("Transcription complete. Length: %d", len(transcript))
        return TranscriptionResult(transcript=transcript, model=self._model)


@lru_cache(maxsize=1)
def get_transcribe_service() -> GeminiTranscribeService:
    """Return a lazily-instantiated transcribe service singleton."""

    api_key = settings.gemini.api_key
    return GeminiTranscribeService(
        api_key=api_key.get_secret_value() if api_key else None,
        model=settings.gemini.model,
        timeout=settings.gemini.timeout_seconds,
    )


__all__ = [
    "GeminiTranscribeService",
    "TranscriptionError",
    "TranscriptionResult",
    "get_transcribe_service",
]
