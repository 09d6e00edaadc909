"""Speech-to-text from the default microphone using the SpeechRecognition package."""
import asyncio
import threading
from typing import Any

import structlog

from recipe_client.speech.base import (
    QueueRecognitionSession,
    RecognitionAlternative,
    RecognitionConfig,
    RecognitionEvent,
    RecognitionFailed,
    RecognitionResult,
    RecognitionSession,
    SpeechEnded,
    SpeechRecognizer,
)

log = structlog.get_logger("stt")


def parse_google_response(response: Any, max_alternatives: int) -> list[RecognitionAlternative]:
    """recognize_google(show_all=True) gives {"alternative": [...]} or [] when nothing was heard."""
    if not isinstance(response, dict):
        return []
    alternatives = []
    for alt in response.get("alternative", [])[: max(1, max_alternatives)]:
        transcript = alt.get("transcript")
        if transcript:
            alternatives.append(RecognitionAlternative(transcript, alt.get("confidence")))
    return alternatives


class MicrophoneRecognizer(SpeechRecognizer):
    def __init__(self, listen_timeout: float = 8.0, phrase_time_limit: float = 15.0) -> None:
        self._listen_timeout = listen_timeout
        self._phrase_time_limit = phrase_time_limit

    def _load_backend(self) -> Any:
        import speech_recognition as sr  # local import: needs the optional "voice" extra

        return sr

    def start(self, config: RecognitionConfig) -> RecognitionSession:
        loop = asyncio.get_running_loop()
        session = QueueRecognitionSession()
        thread = threading.Thread(
            target=self._run,
            args=(config, session, loop),
            name="stt-session",
            daemon=True,
        )
        thread.start()
        return session

    def _run(
        self,
        config: RecognitionConfig,
        session: QueueRecognitionSession,
        loop: asyncio.AbstractEventLoop,
    ) -> None:
        def emit(event: RecognitionEvent) -> None:
            loop.call_soon_threadsafe(session.emit, event)

        try:
            sr = self._load_backend()
        except ImportError as e:
            emit(RecognitionFailed("not-allowed", str(e)))
            loop.call_soon_threadsafe(session.finish)
            return

        recognizer = sr.Recognizer()
        try:
            with sr.Microphone() as source:
                recognizer.adjust_for_ambient_noise(source, duration=0.5)
                if session.stop_requested:
                    return
                audio = recognizer.listen(
                    source, timeout=self._listen_timeout, phrase_time_limit=self._phrase_time_limit
                )
            emit(SpeechEnded())
            response = recognizer.recognize_google(audio, language=config.lang, show_all=True)
            alternatives = parse_google_response(response, config.max_alternatives)
            if alternatives:
                emit(RecognitionResult([alternatives]))
            else:
                emit(RecognitionFailed("no-match", "speech was not recognized"))
        except sr.WaitTimeoutError:
            emit(RecognitionFailed("no-speech", "no speech detected"))
        except sr.UnknownValueError:
            emit(RecognitionFailed("no-match", "speech was not recognized"))
        except sr.RequestError as e:
            emit(RecognitionFailed("network", str(e)))
        except (OSError, AttributeError) as e:
            # AttributeError: SpeechRecognition raises it when PyAudio is missing
            log.error("stt_microphone_unavailable", error=str(e))
            emit(RecognitionFailed("audio-capture", str(e)))
        finally:
            loop.call_soon_threadsafe(session.finish)
