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
    SpeechSynthesizer,
    Utterance,
    Voice,
)
from recipe_client.speech.voices import select_voice

__all__ = [
    "QueueRecognitionSession",
    "RecognitionAlternative",
    "RecognitionConfig",
    "RecognitionEvent",
    "RecognitionFailed",
    "RecognitionResult",
    "RecognitionSession",
    "SpeechEnded",
    "SpeechRecognizer",
    "SpeechSynthesizer",
    "Utterance",
    "Voice",
    "select_voice",
]
