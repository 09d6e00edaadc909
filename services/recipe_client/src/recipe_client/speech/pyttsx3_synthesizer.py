"""Offline text-to-speech through pyttsx3 (SAPI5 on Windows, NSSpeechSynthesizer on macOS, eSpeak on Linux)."""
import asyncio
import threading
from typing import Any

import structlog

from recipe_client.speech.base import SpeechSynthesizer, Utterance, Voice

log = structlog.get_logger("tts")


def _decode_lang(raw: Any) -> str:
    # eSpeak reports languages as bytes prefixed with a priority byte, e.g. b"\x05hi"
    if isinstance(raw, (bytes, bytearray)):
        raw = bytes(raw).decode("utf-8", errors="ignore")
    return str(raw).lstrip("".join(chr(i) for i in range(32))).replace("_", "-")


def _to_voice(engine_voice: Any, default_id: str | None) -> Voice:
    langs = getattr(engine_voice, "languages", None) or []
    voice_id = str(getattr(engine_voice, "id", "") or getattr(engine_voice, "name", ""))
    return Voice(
        id=voice_id,
        name=str(getattr(engine_voice, "name", "") or voice_id),
        lang=_decode_lang(langs[0]) if langs else "",
        default=voice_id == default_id,
    )


def _settle(fut: "asyncio.Future[None]", exc: BaseException | None) -> None:
    if fut.done():
        return
    if exc is None:
        fut.set_result(None)
    else:
        fut.set_exception(exc)


class Pyttsx3Synthesizer(SpeechSynthesizer):
    """pyttsx3 blocks in runAndWait, so each utterance plays on a worker thread.

    Voices start out empty and arrive through load_voices(), mirroring
    platforms that enumerate voices asynchronously.
    """

    def __init__(self, driver_name: str | None = None) -> None:
        super().__init__()
        self._driver_name = driver_name
        self._voices: list[Voice] = []
        self._base_rate: int | None = None
        self._engine: Any = None
        self._last_playback: threading.Thread | None = None
        self._cancels = 0
        self._lock = threading.Lock()

    def _init_engine(self) -> Any:
        import pyttsx3  # local import: needs the optional "voice" extra and an OS speech backend

        return pyttsx3.init(self._driver_name)

    def _read_voices(self) -> tuple[list[Voice], int]:
        engine = self._init_engine()
        default_id = engine.getProperty("voice")
        voices = [_to_voice(v, default_id) for v in engine.getProperty("voices") or []]
        return voices, int(engine.getProperty("rate") or 200)

    async def load_voices(self) -> list[Voice]:
        voices, base_rate = await asyncio.to_thread(self._read_voices)
        self._voices = voices
        self._base_rate = base_rate
        log.info("tts_voices_loaded", count=len(voices))
        self._notify_voices_changed()
        return voices

    def get_voices(self) -> list[Voice]:
        return list(self._voices)

    def speak(self, utterance: Utterance) -> "asyncio.Future[None]":
        loop = asyncio.get_running_loop()
        done: asyncio.Future[None] = loop.create_future()
        with self._lock:
            previous = self._last_playback
            thread = threading.Thread(
                target=self._play,
                args=(utterance, done, loop, previous, self._cancels),
                name="tts-playback",
                daemon=True,
            )
            self._last_playback = thread
        thread.start()
        return done

    def _play(
        self,
        utterance: Utterance,
        done: "asyncio.Future[None]",
        loop: asyncio.AbstractEventLoop,
        previous: threading.Thread | None,
        cancels_at_start: int,
    ) -> None:
        error: BaseException | None = None
        engine = None
        try:
            # pyttsx3.init caches one engine per driver; its run loop must be idle before reuse
            if previous is not None:
                previous.join()
            engine = self._init_engine()
            with self._lock:
                if self._cancels != cancels_at_start:
                    return
                self._engine = engine
            if utterance.voice is not None:
                engine.setProperty("voice", utterance.voice.id)
            # pyttsx3 rate is words per minute; Utterance.rate is a multiplier
            engine.setProperty("rate", round((self._base_rate or 200) * utterance.rate))
            engine.setProperty("volume", utterance.volume)
            # pitch is not exposed by the SAPI5 and NSSpeech drivers; left at the voice default
            engine.say(utterance.text)
            engine.runAndWait()
        except Exception as e:
            log.error("tts_playback_failed", error=str(e))
            error = e
        finally:
            with self._lock:
                if self._engine is engine:
                    self._engine = None
            loop.call_soon_threadsafe(_settle, done, error)

    def cancel(self) -> None:
        with self._lock:
            self._cancels += 1
            engine = self._engine
        if engine is not None:
            engine.stop()
