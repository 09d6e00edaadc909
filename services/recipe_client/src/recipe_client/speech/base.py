"""Speech capability interfaces: synthesis (text-to-speech) and recognition (speech-to-text)."""
import asyncio
from abc import ABC, abstractmethod
from collections.abc import AsyncIterator, Callable
from dataclasses import dataclass, field


@dataclass(frozen=True)
class Voice:
    id: str
    name: str
    lang: str = ""
    default: bool = False


@dataclass(frozen=True)
class Utterance:
    text: str
    voice: Voice | None = None
    pitch: float = 1.0
    rate: float = 1.0
    volume: float = 1.0


class SpeechSynthesizer(ABC):
    """On-device text-to-speech engine.

    Voices may become available after construction. Subclasses call
    _notify_voices_changed() when their voice list changes; every coroutine
    awaiting voices_changed() at that moment is released exactly once.
    """

    def __init__(self) -> None:
        self._voice_waiters: list[asyncio.Future[None]] = []

    @abstractmethod
    def get_voices(self) -> list[Voice]:
        """Voices known right now. Empty while the platform is still loading them."""
        ...

    @abstractmethod
    def speak(self, utterance: Utterance) -> "asyncio.Future[None]":
        """Start playback. The returned future resolves when playback ends naturally."""
        ...

    @abstractmethod
    def cancel(self) -> None:
        """Stop any playback. Safe to call when idle."""
        ...

    async def voices_changed(self) -> None:
        fut: asyncio.Future[None] = asyncio.get_running_loop().create_future()
        self._voice_waiters.append(fut)
        try:
            await fut
        finally:
            if fut in self._voice_waiters:
                self._voice_waiters.remove(fut)

    def _notify_voices_changed(self) -> None:
        waiters, self._voice_waiters = self._voice_waiters, []
        for fut in waiters:
            if not fut.done():
                fut.set_result(None)


@dataclass(frozen=True)
class RecognitionConfig:
    lang: str = "hi-IN"
    interim_results: bool = False
    max_alternatives: int = 1


@dataclass(frozen=True)
class RecognitionAlternative:
    transcript: str
    confidence: float | None = None


@dataclass(frozen=True)
class RecognitionResult:
    """results[i] holds the alternatives for the i-th recognized segment."""

    results: list[list[RecognitionAlternative]] = field(default_factory=list)


@dataclass(frozen=True)
class SpeechEnded:
    pass


@dataclass(frozen=True)
class RecognitionFailed:
    error: str
    message: str = ""


RecognitionEvent = RecognitionResult | SpeechEnded | RecognitionFailed


class RecognitionSession(ABC):
    """One listening session. Iterate it for events; iteration ends when the session finishes."""

    @abstractmethod
    def __aiter__(self) -> AsyncIterator[RecognitionEvent]:
        ...

    @abstractmethod
    def stop(self) -> None:
        ...


class SpeechRecognizer(ABC):
    @abstractmethod
    def start(self, config: RecognitionConfig) -> RecognitionSession:
        ...


class QueueRecognitionSession(RecognitionSession):
    """Session fed by a producer through an asyncio.Queue.

    stop() only asks the producer to stop capturing audio; a result for audio
    already captured is still delivered. The producer calls finish() when it
    has nothing more to say, which ends iteration.
    """

    def __init__(self, on_stop: Callable[[], None] | None = None) -> None:
        self._queue: asyncio.Queue[RecognitionEvent | None] = asyncio.Queue()
        self._on_stop = on_stop
        self._stop_requested = False
        self._finished = False

    @property
    def stop_requested(self) -> bool:
        return self._stop_requested

    def emit(self, event: RecognitionEvent) -> None:
        if not self._finished:
            self._queue.put_nowait(event)

    def finish(self) -> None:
        if not self._finished:
            self._finished = True
            self._queue.put_nowait(None)

    def stop(self) -> None:
        if self._stop_requested:
            return
        self._stop_requested = True
        if self._on_stop is not None:
            self._on_stop()

    async def __aiter__(self) -> AsyncIterator[RecognitionEvent]:
        while True:
            event = await self._queue.get()
            if event is None:
                return
            yield event
