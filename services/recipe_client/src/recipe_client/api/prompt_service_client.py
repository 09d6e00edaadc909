"""HTTP client to the recipe API."""
from dataclasses import dataclass

import httpx


class ClientNetworkError(Exception):
    """The recipe API could not be reached or did not answer with a recipe."""


@dataclass
class GeneratedRecipe:
    recipe: str
    # Sent by the API on every success; nothing reads it yet.
    tts: bool = False


class PromptServiceClient:
    def __init__(
        self,
        base_url: str,
        timeout: float = 60.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._transport = transport

    async def generate_recipe(self, recipe_name: str) -> GeneratedRecipe:
        url = f"{self._base_url}/generate-recipe"
        try:
            async with httpx.AsyncClient(timeout=self._timeout, transport=self._transport) as client:
                resp = await client.post(url, json={"recipe": recipe_name})
                resp.raise_for_status()
                data = resp.json()
        except (httpx.HTTPError, ValueError) as e:
            raise ClientNetworkError(str(e) or type(e).__name__) from e
        recipe = data.get("recipe") if isinstance(data, dict) else None
        if not isinstance(recipe, str):
            raise ClientNetworkError("response has no recipe text")
        return GeneratedRecipe(recipe=recipe, tts=bool(data.get("tts", False)))
