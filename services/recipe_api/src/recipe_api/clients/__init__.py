from recipe_api.clients.gemini_client import GeminiClient, build_payload

__all__ = ["GeminiClient", "build_payload"]
