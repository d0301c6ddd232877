"""Shared fixtures: fake collaborators and a test client wired to them."""

from __future__ import annotations

from pathlib import Path
import sys

import pytest
from fastapi.testclient import TestClient

ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT))

from aria_relay.controllers.dependencies import get_optional_rewriter  # noqa: E402
from aria_relay.main import app  # noqa: E402
from aria_relay.services import (  # noqa: E402
    SynthesisError,
    TranscriptionError,
    TranscriptionResult,
    VoiceTtsResult,
    get_transcribe_service,
    get_voice_tts_service,
)

FAKE_AUDIO = b"fake-mp3-bytes"


class FakeTranscriber:
    def __init__(self, transcript: str = "Hello from the booth", fail: bool = False) -> None:
        self.transcript = transcript
        self.fail = fail
        self.calls: list[tuple[bytes, str]] = []

    async def transcribe(self, audio_bytes: bytes, mime_type: str) -> TranscriptionResult:
        self.calls.append((audio_bytes, mime_type))
        if self.fail:
            raise TranscriptionError("provider exploded")
        return TranscriptionResult(transcript=self.transcript)


class FakeSynthesizer:
    def __init__(self, fail: bool = False) -> None:
        self.fail = fail
        self.calls: list[tuple] = []

    async def synthesize(self, text, voice_id, voice) -> VoiceTtsResult:
        self.calls.append((text, voice_id, voice))
        if self.fail:
            raise SynthesisError("quota exceeded")
        return VoiceTtsResult(audio_bytes=FAKE_AUDIO, media_type="audio/mpeg", voice_id=voice_id)


class FakeRewriter:
    def __init__(self, suffix: str = " (rewritten)") -> None:
        self.suffix = suffix
        self.calls: list[tuple] = []

    async def rewrite(self, transcript, persona) -> str:
        self.calls.append((transcript, persona.id))
        return transcript + self.suffix


@pytest.fixture
def transcriber() -> FakeTranscriber:
    return FakeTranscriber()


@pytest.fixture
def synthesizer() -> FakeSynthesizer:
    return FakeSynthesizer()


@pytest.fixture
def client(transcriber: FakeTranscriber, synthesizer: FakeSynthesizer):
    """Test client with external integrations replaced by fakes."""

    app.dependency_overrides[get_transcribe_service] = lambda: transcriber
    app.dependency_overrides[get_voice_tts_service] = lambda: synthesizer
    app.dependency_overrides[get_optional_rewriter] = lambda: None

    yield TestClient(app)

    app.dependency_overrides.clear()
