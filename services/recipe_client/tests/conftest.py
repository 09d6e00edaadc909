"""Fakes for the platform capabilities the client drives."""
import asyncio
from unittest.mock import AsyncMock, MagicMock

import pytest

from recipe_client.app import RecipeClient
from recipe_client.notifier import Notifier
from recipe_client.speech import (
    QueueRecognitionSession,
    RecognitionConfig,
    RecognitionEvent,
    RecognitionSession,
    SpeechRecognizer,
    SpeechSynthesizer,
    Utterance,
    Voice,
)

HINDI = Voice(id="hi", name="Lekha", lang="hi-IN")
ENGLISH = Voice(id="en", name="Samantha", lang="en-US", default=True)


class FakeSynthesizer(SpeechSynthesizer):
    def __init__(self, voices: list[Voice] | None = None) -> None:
        super().__init__()
        self.voices = list(voices or [])
        self.spoken: list[Utterance] = []
        self.cancel_calls = 0
        self._playing: list[asyncio.Future[None]] = []

    def get_voices(self) -> list[Voice]:
        return list(self.voices)

    def speak(self, utterance: Utterance) -> "asyncio.Future[None]":
        fut = asyncio.get_running_loop().create_future()
        self.spoken.append(utterance)
        self._playing.append(fut)
        return fut

    def cancel(self) -> None:
        # like browsers, a cancelled utterance still reports that it ended
        self.cancel_calls += 1
        self.finish_playback()

    def finish_playback(self) -> None:
        playing, self._playing = self._playing, []
        for fut in playing:
            if not fut.done():
                fut.set_result(None)

    def publish_voices(self, voices: list[Voice]) -> None:
        self.voices = list(voices)
        self._notify_voices_changed()


class FakeRecognizer(SpeechRecognizer):
    def __init__(self, events: list[RecognitionEvent]) -> None:
        self.events = events
        self.configs: list[RecognitionConfig] = []
        self.stop_calls = 0

    def _on_stop(self) -> None:
        self.stop_calls += 1

    def start(self, config: RecognitionConfig) -> RecognitionSession:
        self.configs.append(config)
        session = QueueRecognitionSession(on_stop=self._on_stop)
        for event in self.events:
            session.emit(event)
        session.finish()
        return session


class FakeNotifier(Notifier):
    def __init__(self) -> None:
        self.messages: list[str] = []

    async def alert(self, message: str) -> None:
        self.messages.append(message)


async def _settle() -> None:
    for _ in range(10):
        await asyncio.sleep(0)


@pytest.fixture
def settle():
    """Await settle() to let tasks woken by futures run to their next await."""
    return _settle


@pytest.fixture
def recognizer_factory():
    return FakeRecognizer


@pytest.fixture
def synth_factory():
    return FakeSynthesizer


@pytest.fixture
def api() -> MagicMock:
    client = MagicMock()
    client.generate_recipe = AsyncMock()
    return client


@pytest.fixture
def synth() -> FakeSynthesizer:
    return FakeSynthesizer([ENGLISH, HINDI])


@pytest.fixture
def notifier() -> FakeNotifier:
    return FakeNotifier()


@pytest.fixture
def make_client(api: MagicMock, synth: FakeSynthesizer, notifier: FakeNotifier):
    def _make(recognizer: SpeechRecognizer | None = None, synthesizer: SpeechSynthesizer | None = None) -> RecipeClient:
        return RecipeClient(
            api=api,
            synthesizer=synthesizer or synth,
            recognizer=recognizer or FakeRecognizer([]),
            notifier=notifier,
        )

    return _make
