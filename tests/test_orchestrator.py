"""Stage sequencing and failure mapping in the transform orchestrator."""

from __future__ import annotations

import asyncio
import base64

import pytest

from aria_relay.domain.models import Accent, VoiceOverrides
from aria_relay.pipelines.transform import (
    SYNTHESIS_FAILED,
    TRANSCRIPTION_FAILED,
    TRANSFORM_FAILED,
    AudioPayload,
    SmoothingRule,
    TransformRequest,
    process_transform,
    resolve_voice_settings,
    run_transform,
)
from conftest import FAKE_AUDIO, FakeRewriter, FakeSynthesizer, FakeTranscriber


def _audio_request(**kwargs) -> TransformRequest:
    kwargs.setdefault("persona_id", "calm_narrator")
    kwargs.setdefault("audio", AudioPayload(data=b"raw-audio", mime_type="audio/webm"))
    return TransformRequest(**kwargs)


def test_success_shape(transcriber, synthesizer):
    outcome = asyncio.run(run_transform(_audio_request(), transcriber, synthesizer))

    assert outcome.status_code == 200
    assert outcome.result.ok
    assert outcome.result.to_payload() == {
        "transcript": "Hello from the booth",
        "personaId": "calm_narrator",
        "audioBase64": base64.b64encode(FAKE_AUDIO).decode("ascii"),
    }
    assert transcriber.calls == [(b"raw-audio", "audio/webm")]
    assert len(synthesizer.calls) == 1


def test_transcript_override_skips_transcription(transcriber, synthesizer):
    request = _audio_request(transcript_override="Read this instead")

    outcome = asyncio.run(run_transform(request, transcriber, synthesizer))

    assert transcriber.calls == []
    assert outcome.result.transcript == "Read this instead"
    assert synthesizer.calls[0][0] == "Read this instead"


def test_transcription_failure_is_soft_error(synthesizer):
    transcriber = FakeTranscriber(fail=True)

    outcome = asyncio.run(run_transform(_audio_request(), transcriber, synthesizer))

    assert outcome.status_code == 200
    assert not outcome.result.ok
    assert outcome.result.to_payload() == {"error": TRANSCRIPTION_FAILED}
    assert synthesizer.calls == []


def test_synthesis_failure_discards_transcript(transcriber):
    synthesizer = FakeSynthesizer(fail=True)

    outcome = asyncio.run(run_transform(_audio_request(), transcriber, synthesizer))

    assert outcome.status_code == 200
    assert outcome.result.to_payload() == {"error": SYNTHESIS_FAILED}
    assert len(transcriber.calls) == 1


def test_synthesis_failure_can_keep_transcript(transcriber):
    synthesizer = FakeSynthesizer(fail=True)

    outcome = asyncio.run(
        run_transform(
            _audio_request(),
            transcriber,
            synthesizer,
            include_transcript_on_synthesis_failure=True,
        )
    )

    assert outcome.result.to_payload() == {
        "error": SYNTHESIS_FAILED,
        "transcript": "Hello from the booth",
    }


def test_unexpected_collaborator_exception_is_mapped(synthesizer):
    class Exploding:
        async def transcribe(self, audio_bytes, mime_type):
            raise KeyError("candidates")

    outcome = asyncio.run(run_transform(_audio_request(), Exploding(), synthesizer))

    assert outcome.result.error == TRANSCRIPTION_FAILED


def test_resolved_voice_reaches_synthesizer(transcriber, synthesizer):
    request = _audio_request(
        persona_id="radio_host",
        accent=Accent.AMERICAN,
        overrides=VoiceOverrides(stability=0.1, style=0.9),
    )

    asyncio.run(run_transform(request, transcriber, synthesizer))

    _, voice_id, voice = synthesizer.calls[0]
    assert voice_id == "OQZFQwxzrAUxV46LjHx1"
    assert voice.stability >= 0.62
    assert voice.style <= 0.15


def test_rewriter_output_is_synthesized(transcriber, synthesizer):
    rewriter = FakeRewriter()

    outcome = asyncio.run(run_transform(_audio_request(), transcriber, synthesizer, rewriter))

    assert rewriter.calls == [("Hello from the booth", "calm_narrator")]
    assert synthesizer.calls[0][0] == "Hello from the booth (rewritten)"
    assert outcome.result.transcript == "Hello from the booth (rewritten)"


def test_rewriter_exception_falls_back_to_original(transcriber, synthesizer):
    class Broken:
        async def rewrite(self, transcript, persona):
            raise TimeoutError

    outcome = asyncio.run(run_transform(_audio_request(), transcriber, synthesizer, Broken()))

    assert outcome.result.transcript == "Hello from the booth"


@pytest.mark.parametrize(
    "form",
    [
        {"personaId": "ghost", "transcript": "hi"},
        {"transcript": "hi"},
        {"personaId": "calm_narrator"},
    ],
)
def test_validation_failure_invokes_no_collaborator(form, transcriber, synthesizer):
    outcome = asyncio.run(process_transform(form, transcriber, synthesizer))

    assert outcome.status_code == 400
    assert set(outcome.result.to_payload()) == {"error"}
    assert transcriber.calls == []
    assert synthesizer.calls == []


def test_process_transform_with_transcript_form(transcriber, synthesizer):
    form = {"personaId": "playful_kid", "transcript": "  let's go!  ", "speakingRate": "3"}

    outcome = asyncio.run(process_transform(form, transcriber, synthesizer))

    assert outcome.status_code == 200
    assert outcome.result.transcript == "let's go!"
    assert synthesizer.calls[0][2].speaking_rate == 1.3


def test_unexpected_error_outside_stages_is_contained(monkeypatch, transcriber, synthesizer):
    def explode(settings):
        raise ArithmeticError("bad smoothing rule")

    broken = (SmoothingRule(name="broken", applies=lambda pid, acc: True, adjust=explode),)
    monkeypatch.setattr(
        "aria_relay.pipelines.transform.orchestrator.resolve_voice_settings",
        lambda persona, accent, overrides: resolve_voice_settings(persona, accent, overrides, broken),
    )
    form = {"personaId": "calm_narrator", "transcript": "hello"}

    outcome = asyncio.run(process_transform(form, transcriber, synthesizer))

    assert outcome.status_code == 200
    assert not outcome.result.ok
    assert outcome.result.to_payload() == {"error": TRANSFORM_FAILED}
    assert synthesizer.calls == []
