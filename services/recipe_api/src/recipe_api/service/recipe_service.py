"""Recipe generation: validate, build prompt, call upstream, extract text."""
from typing import Any

import structlog
from prometheus_client import Counter

from recipe_api.clients import GeminiClient
from recipe_api.errors import BadRequest, UpstreamEmpty, UpstreamFailure
from recipe_api.service.prompts import build_recipe_prompt

log = structlog.get_logger("recipe_service")

RECIPE_GENERATIONS = Counter(
    "recipe_generations_total",
    "Recipe generation requests by outcome.",
    ["outcome"],
)


def extract_recipe_text(payload: Any) -> str | None:
    """Return candidates[0].content.parts[0].text, or None if absent or empty."""
    if not isinstance(payload, dict):
        return None
    candidates = payload.get("candidates")
    if not isinstance(candidates, list) or not candidates:
        return None
    content = candidates[0].get("content") if isinstance(candidates[0], dict) else None
    parts = content.get("parts") if isinstance(content, dict) else None
    if not isinstance(parts, list) or not parts or not isinstance(parts[0], dict):
        return None
    text = parts[0].get("text")
    if not isinstance(text, str) or not text:
        return None
    return text


class RecipeService:
    def __init__(
        self,
        llm_client: GeminiClient,
        temperature: float = 0.6,
        max_output_tokens: int = 1024,
    ) -> None:
        self._llm = llm_client
        self._temperature = temperature
        self._max_output_tokens = max_output_tokens

    async def generate_recipe(self, recipe_name: Any) -> str:
        """Generate a Hindi recipe for recipe_name.

        Raises BadRequest before any network call when recipe_name is not a
        non-empty string, UpstreamEmpty when the model returned no text and
        UpstreamFailure on transport errors, timeouts and non-2xx responses.
        """
        if not isinstance(recipe_name, str) or not recipe_name:
            RECIPE_GENERATIONS.labels(outcome="bad_request").inc()
            raise BadRequest()

        prompt = build_recipe_prompt(recipe_name)
        try:
            payload = await self._llm.generate(
                prompt,
                temperature=self._temperature,
                max_output_tokens=self._max_output_tokens,
            )
        except UpstreamFailure as e:
            RECIPE_GENERATIONS.labels(outcome="upstream_failure").inc()
            log.error("recipe_upstream_failure", recipe=recipe_name, detail=e.detail)
            raise

        text = extract_recipe_text(payload)
        if text is None:
            RECIPE_GENERATIONS.labels(outcome="upstream_empty").inc()
            log.warning("recipe_upstream_empty", recipe=recipe_name)
            raise UpstreamEmpty(raw=payload)

        RECIPE_GENERATIONS.labels(outcome="ok").inc()
        log.info("recipe_generated", recipe=recipe_name, chars=len(text))
        return text
