"""Provider adapters: Gemini transcription, ElevenLabs synthesis, Bedrock rewrite."""

from __future__ import annotations

import asyncio
import base64
import threading
import time
from types import SimpleNamespace

import pytest
from google.api_core import exceptions as google_exceptions

from aria_relay.domain.models import ResolvedVoiceSettings
from aria_relay.domain.personas import PERSONAS
from aria_relay.services import (
    BedrockLlmClient,
    ConfigurationError,
    GeminiTranscribeService,
    LlmInvocationError,
    PersonaRewriter,
    SynthesisError,
    TranscriptionError,
    VoiceTtsService,
)
from aria_relay.services.llm_client import _decode_bedrock_api_key
from aria_relay.services.persona_rewriter import SYSTEM_PROMPT, build_user_prompt
from aria_relay.services.transcribe import TRANSCRIBE_PROMPT
from aria_relay.services.voice_tts import to_provider_settings


class _FakeGeminiResponse:
    def __init__(self, text: str | None = None, error: Exception | None = None) -> None:
        self._text = text
        self._error = error

    @property
    def text(self) -> str | None:
        if self._error:
            raise self._error
        return self._text


class _FakeGeminiModel:
    def __init__(self, response=None, error: Exception | None = None) -> None:
        self.response = response
        self.error = error
        self.calls: list[tuple] = []

    def generate_content(self, contents, **kwargs):
        self.calls.append((contents, kwargs))
        if self.error:
            raise self.error
        return self.response


def _gemini(model: _FakeGeminiModel) -> GeminiTranscribeService:
    return GeminiTranscribeService(api_key="test-key", model="gemini-2.5-flash", timeout=12.0, client=model)


def test_gemini_sends_inline_audio_and_trims_text():
    model = _FakeGeminiModel(response=_FakeGeminiResponse(" Hello world. \n"))

    result = asyncio.run(_gemini(model).transcribe(b"audio", "audio/webm"))

    assert result.transcript == "Hello world."
    assert result.model == "gemini-2.5-flash"
    contents, kwargs = model.calls[0]
    assert contents == [{"mime_type": "audio/webm", "data": b"audio"}, TRANSCRIBE_PROMPT]
    assert kwargs == {"request_options": {"timeout": 12.0}}


@pytest.mark.parametrize(
    "model",
    [
        _FakeGeminiModel(error=google_exceptions.InternalServerError("boom")),
        _FakeGeminiModel(error=google_exceptions.PermissionDenied("bad key")),
        _FakeGeminiModel(response=_FakeGeminiResponse(error=ValueError("no parts"))),
        _FakeGeminiModel(response=_FakeGeminiResponse("   ")),
    ],
)
def test_gemini_failures_raise_transcription_error(model):
    with pytest.raises(TranscriptionError):
        asyncio.run(_gemini(model).transcribe(b"audio", "audio/webm"))


def test_gemini_rejects_empty_audio():
    model = _FakeGeminiModel(response=_FakeGeminiResponse("unused"))

    with pytest.raises(TranscriptionError):
        asyncio.run(_gemini(model).transcribe(b"", "audio/webm"))
    assert model.calls == []


def test_gemini_without_key_raises():
    service = GeminiTranscribeService(api_key=None)

    with pytest.raises(TranscriptionError, match="GEMINI_API_KEY"):
        asyncio.run(service.transcribe(b"audio", "audio/webm"))


def test_provider_settings_mapping():
    voice = ResolvedVoiceSettings(stability=0.62, similarity_boost=0.8, style=0.15, speaking_rate=1.0)

    mapped = to_provider_settings(voice)

    assert mapped.stability == 0.62
    assert mapped.similarity_boost == 0.8
    assert mapped.style == 0.15
    assert mapped.speed == 1.0


def test_provider_settings_omit_missing_speed():
    mapped = to_provider_settings(ResolvedVoiceSettings(0.8, 0.75, 0.05))

    assert mapped.speed is None


class _FakeTextToSpeech:
    def __init__(self, chunks=(b"ab", b"cd"), error: Exception | None = None) -> None:
        self.chunks = chunks
        self.error = error
        self.kwargs = None

    def convert(self, **kwargs):
        self.kwargs = kwargs
        if self.error:
            raise self.error
        return iter(self.chunks)


def test_voice_tts_collects_chunks():
    tts = _FakeTextToSpeech()
    service = VoiceTtsService(api_key=None, client=SimpleNamespace(text_to_speech=tts))
    voice = ResolvedVoiceSettings(0.5, 0.7, 0.2, 1.1)

    result = asyncio.run(service.synthesize("hello", "voice-123", voice))

    assert result.audio_bytes == b"abcd"
    assert result.media_type == "audio/mpeg"
    assert tts.kwargs["voice_id"] == "voice-123"
    assert tts.kwargs["model_id"] == "eleven_multilingual_v2"
    assert tts.kwargs["output_format"] == "mp3_44100_128"
    assert tts.kwargs["voice_settings"].speed == 1.1


def test_voice_tts_wraps_provider_errors():
    tts = _FakeTextToSpeech(error=RuntimeError("401 unauthorized"))
    service = VoiceTtsService(api_key=None, client=SimpleNamespace(text_to_speech=tts))

    with pytest.raises(SynthesisError):
        asyncio.run(service.synthesize("hello", "voice-123", ResolvedVoiceSettings(0.5, 0.7, 0.2)))


def test_voice_tts_rejects_empty_audio_and_text():
    service = VoiceTtsService(api_key=None, client=SimpleNamespace(text_to_speech=_FakeTextToSpeech(chunks=())))
    voice = ResolvedVoiceSettings(0.5, 0.7, 0.2)

    with pytest.raises(SynthesisError):
        asyncio.run(service.synthesize("hello", "v", voice))
    with pytest.raises(SynthesisError):
        asyncio.run(service.synthesize("   ", "v", voice))


def test_voice_tts_without_key_raises():
    service = VoiceTtsService(api_key=None)

    with pytest.raises(SynthesisError, match="ELEVENLABS_API_KEY"):
        asyncio.run(service.synthesize("hello", "v", ResolvedVoiceSettings(0.5, 0.7, 0.2)))


class _FakeLlm:
    def __init__(self, reply: str | None = None, error: Exception | None = None) -> None:
        self.reply = reply
        self.error = error
        self.prompts: list[tuple[str, str]] = []

    async def invoke(self, *, system_prompt: str, user_prompt: str):
        self.prompts.append((system_prompt, user_prompt))
        if self.error:
            raise self.error
        return self.reply


def test_rewriter_returns_trimmed_rewrite():
    llm = _FakeLlm(reply="  Good evening, listeners!  ")
    persona = PERSONAS["radio_host"]

    result = asyncio.run(PersonaRewriter(llm).rewrite("hello everyone", persona))

    assert result == "Good evening, listeners!"
    system_prompt, user_prompt = llm.prompts[0]
    assert system_prompt == SYSTEM_PROMPT
    assert user_prompt == build_user_prompt("hello everyone", persona)
    assert "Persona: Radio Host" in user_prompt


@pytest.mark.parametrize(
    "llm",
    [
        _FakeLlm(error=ConfigurationError("no credentials")),
        _FakeLlm(error=LlmInvocationError("timeout")),
        _FakeLlm(reply=None),
        _FakeLlm(reply="   "),
    ],
)
def test_rewriter_falls_back_to_original(llm):
    result = asyncio.run(PersonaRewriter(llm).rewrite("hello everyone", PERSONAS["calm_narrator"]))

    assert result == "hello everyone"


def test_rewriter_skips_blank_transcript():
    llm = _FakeLlm(reply="should not be used")

    assert asyncio.run(PersonaRewriter(llm).rewrite("  ", PERSONAS["calm_narrator"])) == "  "
    assert llm.prompts == []


def test_bedrock_client_joins_text_blocks():
    class FakeRuntime:
        def __init__(self):
            self.kwargs = None

        def converse(self, **kwargs):
            self.kwargs = kwargs
            return {"output": {"message": {"content": [{"text": "Line one"}, {"text": "Line two"}]}}}

    runtime = FakeRuntime()
    client = BedrockLlmClient(client=runtime)

    result = asyncio.run(client.invoke(system_prompt="sys", user_prompt="user"))

    assert result == "Line one\nLine two"
    assert runtime.kwargs["system"] == [{"text": "sys"}]
    assert runtime.kwargs["inferenceConfig"]["maxTokens"] == 300


def test_bedrock_client_wraps_errors():
    class FailingRuntime:
        def converse(self, **kwargs):
            raise RuntimeError("throttled")

    with pytest.raises(LlmInvocationError):
        asyncio.run(BedrockLlmClient(client=FailingRuntime()).invoke(system_prompt="s", user_prompt="u"))


def test_bedrock_client_without_credentials(monkeypatch):
    monkeypatch.setattr("aria_relay.services.llm_client.has_aws_credentials", lambda *args: False)

    with pytest.raises(ConfigurationError):
        asyncio.run(BedrockLlmClient().invoke(system_prompt="s", user_prompt="u"))


def test_missing_credentials_are_looked_up_once_off_the_event_loop(monkeypatch):
    lookups: list[int] = []

    def slow_lookup(*args):
        lookups.append(threading.get_ident())
        time.sleep(0.05)
        return False

    monkeypatch.setattr("aria_relay.services.llm_client.has_aws_credentials", slow_lookup)
    rewriter = PersonaRewriter(BedrockLlmClient())
    persona = PERSONAS["radio_host"]

    async def rewrite_repeatedly():
        loop_thread = threading.get_ident()
        ticks = 0

        async def ticker():
            nonlocal ticks
            while True:
                await asyncio.sleep(0.005)
                ticks += 1

        ticking = asyncio.create_task(ticker())
        results = [await rewriter.rewrite("hello", persona) for _ in range(3)]
        ticking.cancel()
        return loop_thread, ticks, results

    loop_thread, ticks, results = asyncio.run(rewrite_repeatedly())

    assert results == ["hello", "hello", "hello"]
    assert len(lookups) == 1
    assert lookups[0] != loop_thread
    assert ticks > 0


def test_decode_bedrock_api_key():
    encoded = base64.b64encode(b"AKIAEXAMPLE:secret/value").decode("ascii")

    assert _decode_bedrock_api_key(encoded) == ("AKIAEXAMPLE", "secret/value")
    assert _decode_bedrock_api_key("AKIA:plain") == ("AKIA", "plain")
    assert _decode_bedrock_api_key(None) is None
