"""Recipe client: state, recipe submission, read-aloud and voice input."""
import asyncio
from dataclasses import dataclass, field

import structlog

from recipe_client.api import ClientNetworkError, PromptServiceClient
from recipe_client.notifier import Notifier
from recipe_client.speech import (
    RecognitionConfig,
    RecognitionFailed,
    RecognitionResult,
    SpeechEnded,
    SpeechRecognizer,
    SpeechSynthesizer,
    Utterance,
    Voice,
    select_voice,
)
from recipe_client.text import clean_markdown, strip_markdown_chars

log = structlog.get_logger("recipe_client")

ASK_FOR_RECIPE_NAME = "कृपया रेसिपी का नाम बताइए!"
GENERATION_FAILED = "अभी रेसिपी बनाने में दिक्कत हो रही है। कृपया दोबारा प्रयास करें।"
NOT_UNDERSTOOD = "मैं समझ नहीं पाया, कृपया दोबारा बोलें।"

SPEECH_PITCH = 1.0
SPEECH_RATE = 0.95
SPEECH_VOLUME = 1.0

VOICE_INPUT = RecognitionConfig(lang="hi-IN", interim_results=False, max_alternatives=1)


@dataclass
class ClientState:
    recipe_name: str = ""
    recipe: str = ""
    is_loading: bool = False
    is_speaking: bool = False
    voices: list[Voice] = field(default_factory=list)


class RecipeClient:
    """One client instance owns one ClientState.

    Platform notifications arrive as awaitables: voices_changed() for the
    voice list, the future returned by speak() for end of playback and the
    recognition session's event stream for voice input.
    """

    def __init__(
        self,
        api: PromptServiceClient,
        synthesizer: SpeechSynthesizer,
        recognizer: SpeechRecognizer,
        notifier: Notifier,
        state: ClientState | None = None,
    ) -> None:
        self.state = state or ClientState()
        self._api = api
        self._synth = synthesizer
        self._recognizer = recognizer
        self._notifier = notifier
        self._current_utterance: Utterance | None = None
        self._playback: asyncio.Task | None = None
        self._deferred_speak: asyncio.Task | None = None
        self._voice_watch: asyncio.Task | None = None

    async def __aenter__(self) -> "RecipeClient":
        await self.start()
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()

    async def start(self) -> None:
        self.refresh_voices()
        self._voice_watch = asyncio.create_task(self._watch_voices())

    async def close(self) -> None:
        if self.state.is_speaking:
            self._stop_speaking()
        for task in (self._voice_watch, self._deferred_speak, self._playback):
            if task is not None and not task.done():
                task.cancel()
        await asyncio.gather(
            *(t for t in (self._voice_watch, self._deferred_speak, self._playback) if t is not None),
            return_exceptions=True,
        )
        self._voice_watch = self._deferred_speak = self._playback = None

    def refresh_voices(self) -> None:
        self.state.voices = self._synth.get_voices()

    async def _watch_voices(self) -> None:
        while True:
            # refresh before each wait so a change that landed before the first wait is not lost
            self.refresh_voices()
            await self._synth.voices_changed()
            log.debug("voices_changed")

    async def submit(self) -> None:
        if not self.state.recipe_name:
            await self._notifier.alert(ASK_FOR_RECIPE_NAME)
            return
        if self.state.is_loading:
            log.info("submit_ignored", reason="request already in flight")
            return

        self.state.is_loading = True
        self.state.recipe = ""
        try:
            result = await self._api.generate_recipe(self.state.recipe_name)
        except ClientNetworkError as e:
            log.warning("recipe_request_failed", recipe=self.state.recipe_name, error=str(e))
            await self._notifier.alert(GENERATION_FAILED)
        else:
            self.state.recipe = clean_markdown(result.recipe)
        finally:
            self.state.is_loading = False

    def speak(self) -> None:
        """Toggle read-aloud of the current recipe. Must be called from the event loop."""
        if self.state.is_speaking:
            self._stop_speaking()
            return
        if not self.state.recipe:
            return

        # Quantities matter when cooking: only the markdown characters go, digits stay.
        text = strip_markdown_chars(self.state.recipe).strip()
        voices = self._synth.get_voices()
        if not voices:
            if self._deferred_speak is None or self._deferred_speak.done():
                self._deferred_speak = asyncio.create_task(self._speak_when_voices_arrive())
            return

        self.state.voices = voices
        utterance = Utterance(
            text=text,
            voice=select_voice(voices),
            pitch=SPEECH_PITCH,
            rate=SPEECH_RATE,
            volume=SPEECH_VOLUME,
        )
        self._current_utterance = utterance
        self.state.is_speaking = True
        ended = self._synth.speak(utterance)
        self._playback = asyncio.create_task(self._await_playback(utterance, ended))
        log.info("speech_started", voice=utterance.voice.id if utterance.voice else None, chars=len(text))

    async def _speak_when_voices_arrive(self) -> None:
        while not self._synth.get_voices():
            await self._synth.voices_changed()
        self._deferred_speak = None
        self.speak()

    async def _await_playback(self, utterance: Utterance, ended: "asyncio.Future[None]") -> None:
        try:
            await ended
        except Exception as e:
            log.error("speech_playback_failed", error=str(e))
        # a late end for a cancelled or replaced utterance must not touch the current state
        if self._current_utterance is utterance:
            self._current_utterance = None
            self.state.is_speaking = False

    def _stop_speaking(self) -> None:
        self._synth.cancel()
        self._current_utterance = None
        self.state.is_speaking = False
        if self._playback is not None and not self._playback.done():
            self._playback.cancel()
        self._playback = None

    async def listen(self) -> str | None:
        """Run one recognition session. Returns the transcript, or None if nothing was recognized."""
        heard: str | None = None
        session = self._recognizer.start(VOICE_INPUT)
        async for event in session:
            if isinstance(event, RecognitionResult):
                if event.results and event.results[0]:
                    heard = event.results[0][0].transcript
                    self.state.recipe_name = heard
            elif isinstance(event, SpeechEnded):
                session.stop()
            elif isinstance(event, RecognitionFailed):
                log.warning("speech_recognition_failed", error=event.error, message=event.message)
                await self._notifier.alert(NOT_UNDERSTOOD)
        return heard
