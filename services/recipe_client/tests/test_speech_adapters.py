"""Tests for voice selection and the on-device speech adapters, driven by faked engines."""
import asyncio
import threading
from types import SimpleNamespace
from unittest.mock import MagicMock

import pytest

from recipe_client.speech import (
    QueueRecognitionSession,
    RecognitionAlternative,
    RecognitionConfig,
    RecognitionResult,
    SpeechEnded,
    Utterance,
    Voice,
    select_voice,
)
from recipe_client.speech.microphone_recognizer import MicrophoneRecognizer, parse_google_response
from recipe_client.speech.pyttsx3_synthesizer import Pyttsx3Synthesizer, _decode_lang


def test_select_voice_prefers_exact_hindi_tag() -> None:
    voices = [
        Voice("en", "Samantha", "en-US", default=True),
        Voice("hi-generic", "eSpeak Hindi", "hi"),
        Voice("hi-in", "Lekha", "hi-IN"),
    ]
    assert select_voice(voices).id == "hi-in"


def test_select_voice_falls_back_to_any_hindi() -> None:
    voices = [Voice("en", "Samantha", "en-US"), Voice("hi-generic", "eSpeak Hindi", "hi")]
    assert select_voice(voices).id == "hi-generic"


def test_select_voice_normalizes_underscore_tags() -> None:
    assert select_voice([Voice("x", "Kalpana", "hi_IN")]).id == "x"


def test_select_voice_none_means_platform_default() -> None:
    assert select_voice([Voice("en", "Samantha", "en-US")]) is None
    assert select_voice([]) is None


@pytest.mark.parametrize(
    ("raw", "expected"),
    [(b"\x05hi", "hi"), ("hi_IN", "hi-IN"), ("en-US", "en-US"), (bytearray(b"\x02en-gb"), "en-gb")],
)
def test_decode_lang(raw: object, expected: str) -> None:
    assert _decode_lang(raw) == expected


def _fake_engine(voices: list[SimpleNamespace]) -> MagicMock:
    props = {"voices": voices, "voice": voices[0].id if voices else None, "rate": 200}
    engine = MagicMock()
    engine.getProperty.side_effect = props.get
    return engine


@pytest.mark.asyncio
async def test_pyttsx3_voices_arrive_after_load() -> None:
    engine = _fake_engine(
        [
            SimpleNamespace(id="english", name="English", languages=[b"\x05en"]),
            SimpleNamespace(id="hindi", name="Hindi", languages=[b"\x05hi"]),
        ]
    )
    synth = Pyttsx3Synthesizer()
    synth._init_engine = lambda: engine
    assert synth.get_voices() == []

    waiter = asyncio.create_task(synth.voices_changed())
    await asyncio.sleep(0)
    voices = await synth.load_voices()
    await asyncio.wait_for(waiter, timeout=1)

    assert voices == [Voice("english", "English", "en", default=True), Voice("hindi", "Hindi", "hi")]
    assert synth.get_voices() == voices


@pytest.mark.asyncio
async def test_pyttsx3_speak_configures_engine_and_resolves_on_end() -> None:
    engine = _fake_engine([SimpleNamespace(id="hindi", name="Hindi", languages=["hi"])])
    synth = Pyttsx3Synthesizer()
    synth._init_engine = lambda: engine
    await synth.load_voices()

    voice = synth.get_voices()[0]
    ended = synth.speak(Utterance("2 कप चीनी", voice=voice, pitch=1.0, rate=0.95, volume=1.0))
    await asyncio.wait_for(ended, timeout=5)

    engine.setProperty.assert_any_call("voice", "hindi")
    engine.setProperty.assert_any_call("rate", 190)
    engine.setProperty.assert_any_call("volume", 1.0)
    engine.say.assert_called_once_with("2 कप चीनी")
    engine.runAndWait.assert_called_once()


def test_parse_google_response() -> None:
    response = {
        "alternative": [
            {"transcript": "पनीर बटर मसाला", "confidence": 0.93},
            {"transcript": "पनीर बटर"},
        ],
        "final": True,
    }
    assert [a.transcript for a in parse_google_response(response, 1)] == ["पनीर बटर मसाला"]
    assert len(parse_google_response(response, 5)) == 2
    assert parse_google_response([], 1) == []


@pytest.mark.asyncio
async def test_queue_session_delivers_events_after_stop_until_finished() -> None:
    stops: list[bool] = []
    session = QueueRecognitionSession(on_stop=lambda: stops.append(True))
    session.emit(SpeechEnded())
    session.stop()
    session.stop()
    session.emit(SpeechEnded())
    session.finish()
    session.emit(SpeechEnded())

    events = [event async for event in session]

    assert events == [SpeechEnded(), SpeechEnded()]
    assert stops == [True]
    assert session.stop_requested is True


async def _until(condition, timeout: float = 5.0) -> None:
    async def _poll() -> None:
        while not condition():
            await asyncio.sleep(0.01)

    await asyncio.wait_for(_poll(), timeout=timeout)


def _blocking_engine() -> tuple[MagicMock, threading.Event, list[int]]:
    """Engine whose runAndWait blocks until released; records how many run loops overlap."""
    engine = _fake_engine([])
    release = threading.Event()
    running: list[int] = []
    peaks: list[int] = []
    guard = threading.Lock()

    def run_and_wait() -> None:
        with guard:
            running.append(1)
            peaks.append(len(running))
        release.wait(timeout=5)
        with guard:
            running.pop()

    engine.runAndWait.side_effect = run_and_wait
    return engine, release, peaks


def _utterance(text: str) -> Utterance:
    return Utterance(text, voice=None, pitch=1.0, rate=1.0, volume=1.0)


@pytest.mark.asyncio
async def test_pyttsx3_next_utterance_waits_for_previous_run_loop() -> None:
    engine, release, peaks = _blocking_engine()
    synth = Pyttsx3Synthesizer()
    synth._init_engine = lambda: engine

    first = synth.speak(_utterance("पहली"))
    await _until(lambda: peaks)
    second = synth.speak(_utterance("दूसरी"))
    await asyncio.sleep(0.05)
    assert engine.runAndWait.call_count == 1

    release.set()
    await asyncio.wait_for(asyncio.gather(first, second), timeout=5)

    assert engine.runAndWait.call_count == 2
    assert max(peaks) == 1


@pytest.mark.asyncio
async def test_pyttsx3_cancel_drops_utterance_still_waiting_to_play() -> None:
    engine, release, _ = _blocking_engine()
    synth = Pyttsx3Synthesizer()
    synth._init_engine = lambda: engine

    first = synth.speak(_utterance("पहली"))
    await _until(lambda: engine.runAndWait.called)
    second = synth.speak(_utterance("दूसरी"))
    synth.cancel()
    release.set()
    await asyncio.wait_for(asyncio.gather(first, second), timeout=5)

    engine.stop.assert_called_once()
    engine.say.assert_called_once_with("पहली")


class _SrError(Exception):
    pass


def _speech_backend(recognizer: MagicMock) -> SimpleNamespace:
    return SimpleNamespace(
        Recognizer=lambda: recognizer,
        Microphone=MagicMock,
        WaitTimeoutError=type("WaitTimeoutError", (_SrError,), {}),
        UnknownValueError=type("UnknownValueError", (_SrError,), {}),
        RequestError=type("RequestError", (_SrError,), {}),
    )


async def _events(session) -> list:
    return [event async for event in session]


@pytest.mark.asyncio
async def test_microphone_session_reports_speech_end_then_result() -> None:
    recognizer = MagicMock()
    recognizer.listen.return_value = "audio"
    recognizer.recognize_google.return_value = {"alternative": [{"transcript": "जलेबी", "confidence": 0.9}]}
    mic = MicrophoneRecognizer()
    mic._load_backend = lambda: _speech_backend(recognizer)

    session = mic.start(RecognitionConfig())
    events = await asyncio.wait_for(_events(session), timeout=5)

    assert events == [SpeechEnded(), RecognitionResult([[RecognitionAlternative("जलेबी", 0.9)]])]
    recognizer.recognize_google.assert_called_once_with("audio", language="hi-IN", show_all=True)


@pytest.mark.asyncio
async def test_microphone_session_stopped_before_capture_does_not_listen() -> None:
    gate = threading.Event()
    recognizer = MagicMock()
    recognizer.adjust_for_ambient_noise.side_effect = lambda source, duration: gate.wait(timeout=5)
    mic = MicrophoneRecognizer()
    mic._load_backend = lambda: _speech_backend(recognizer)

    session = mic.start(RecognitionConfig())
    session.stop()
    gate.set()
    events = await asyncio.wait_for(_events(session), timeout=5)

    assert events == []
    recognizer.listen.assert_not_called()
