"""Console front end: type a recipe name, or use /listen, /speak and /quit."""
import asyncio
import sys

import structlog

from shared.logging import configure_logging

from recipe_client.api import PromptServiceClient
from recipe_client.app import RecipeClient
from recipe_client.config import RecipeClientSettings
from recipe_client.notifier import ConsoleNotifier
from recipe_client.speech.microphone_recognizer import MicrophoneRecognizer
from recipe_client.speech.pyttsx3_synthesizer import Pyttsx3Synthesizer

log = structlog.get_logger("recipe_client")

BANNER = """🍲 Recipe Generator ✨
बस रेसिपी का नाम बताइए (टाइप या बोलकर), और मैं आपको हिंदी में पूरी रेसिपी बताऊंगा।
जैसे: जलेबी, पनीर बटर मसाला   |   /listen बोलकर बताएँ   /speak सुनें/रोकें   /quit बाहर"""


def get_settings() -> RecipeClientSettings:
    return RecipeClientSettings()


def render(client: RecipeClient) -> None:
    state = client.state
    if state.recipe:
        print(f"\nआपकी रेसिपी 🍛\n\n{state.recipe}\n", flush=True)


async def load_voices(synthesizer: Pyttsx3Synthesizer) -> None:
    try:
        await synthesizer.load_voices()
    except Exception as e:
        # no voices is a valid state: /speak waits for them
        log.error("tts_unavailable", error=str(e))


async def run(client: RecipeClient) -> None:
    print(BANNER, flush=True)
    while True:
        line = (await asyncio.to_thread(input, "> ")).strip()
        if line == "/quit":
            return
        if line == "/speak":
            client.speak()
            if client.state.is_speaking:
                print("⏹ /speak से रोकें", flush=True)
            continue
        if line == "/listen":
            print("🎤 ...", flush=True)
            heard = await client.listen()
            if heard is None:
                continue
            print(f"> {heard}", flush=True)
        elif line:
            client.state.recipe_name = line
        print("Generating...", flush=True)
        await client.submit()
        render(client)


async def amain() -> None:
    settings = get_settings()
    configure_logging(json_logs=settings.log_json, level=settings.log_level)
    synthesizer = Pyttsx3Synthesizer()
    client = RecipeClient(
        api=PromptServiceClient(settings.api_base_url, timeout=settings.request_timeout_seconds),
        synthesizer=synthesizer,
        recognizer=MicrophoneRecognizer(),
        notifier=ConsoleNotifier(),
    )
    async with client:
        voices_loading = asyncio.create_task(load_voices(synthesizer))
        try:
            await run(client)
        finally:
            if not voices_loading.done():
                voices_loading.cancel()


def main() -> None:
    try:
        asyncio.run(amain())
    except (KeyboardInterrupt, EOFError):
        print(file=sys.stderr)


if __name__ == "__main__":
    main()
