"""Voice selection for Hindi playback."""
from recipe_client.speech.base import Voice

HINDI_LANG = "hi-IN"


def normalize_lang(lang: str) -> str:
    return lang.strip().replace("_", "-")


def select_voice(voices: list[Voice], lang: str = HINDI_LANG) -> Voice | None:
    """Exact tag first (hi-IN), then any voice of the same language (hi, hi-*).

    None means "let the platform use its default voice".
    """
    wanted = normalize_lang(lang).lower()
    primary = wanted.split("-", 1)[0]
    for v in voices:
        if normalize_lang(v.lang).lower() == wanted:
            return v
    for v in voices:
        if normalize_lang(v.lang).lower().startswith(primary):
            return v
    return None
