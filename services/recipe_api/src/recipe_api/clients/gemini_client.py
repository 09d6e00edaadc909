"""HTTP client for the Gemini generateContent API."""
import asyncio
from typing import Any

import httpx
import structlog

from recipe_api.errors import UpstreamFailure

log = structlog.get_logger("gemini")


def build_payload(prompt: str, temperature: float, max_output_tokens: int) -> dict[str, Any]:
    return {
        "contents": [{"parts": [{"text": prompt}]}],
        "generationConfig": {
            "temperature": temperature,
            "maxOutputTokens": max_output_tokens,
        },
    }


def _error_detail(resp: httpx.Response) -> Any:
    try:
        return resp.json()
    except ValueError:
        return resp.text or f"Upstream returned HTTP {resp.status_code}"


class GeminiClient:
    """One POST per call, no retries. Returns the decoded upstream payload as-is."""

    def __init__(
        self,
        api_key: str,
        model: str,
        base_url: str = "https://generativelanguage.googleapis.com/v1beta",
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._api_key = api_key
        self._model = model
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._transport = transport

    @property
    def url(self) -> str:
        return f"{self._base_url}/models/{self._model}:generateContent"

    def _headers(self) -> dict[str, str]:
        return {
            "Content-Type": "application/json",
            "x-goog-api-key": self._api_key,
        }

    async def generate(
        self, prompt: str, temperature: float = 0.6, max_output_tokens: int = 1024
    ) -> Any:
        payload = build_payload(prompt, temperature, max_output_tokens)
        try:
            # httpx timeouts apply per phase; wait_for bounds the whole exchange
            return await asyncio.wait_for(self._post(payload), timeout=self._timeout)
        except asyncio.TimeoutError:
            raise UpstreamFailure(
                f"Upstream request timed out after {self._timeout:g}s"
            ) from None

    async def _post(self, payload: dict[str, Any]) -> Any:
        async with httpx.AsyncClient(
            timeout=httpx.Timeout(self._timeout), transport=self._transport
        ) as client:
            try:
                resp = await client.post(self.url, headers=self._headers(), json=payload)
            except httpx.TimeoutException as e:
                raise UpstreamFailure(str(e) or "Upstream request timed out") from e
            except httpx.HTTPError as e:
                raise UpstreamFailure(str(e)) from e
        if resp.is_error:
            raise UpstreamFailure(_error_detail(resp))
        try:
            return resp.json()
        except ValueError:
            # Not JSON: hand the raw body back so extraction fails with it attached
            return resp.text
