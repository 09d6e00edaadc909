"""Recipe API configuration."""
from pydantic import Field
from pydantic_settings import SettingsConfigDict

from shared.config import BaseAppSettings


class MissingApiKeyError(RuntimeError):
    """GEMINI_API_KEY is not configured; the service must not start."""


class RecipeApiSettings(BaseAppSettings):
    model_config = SettingsConfigDict(env_prefix="RECIPE_API_")

    gemini_api_key: str = Field("", validation_alias="GEMINI_API_KEY")
    host: str = "0.0.0.0"
    port: int = Field(3000, validation_alias="PORT")
    gemini_base_url: str = "https://generativelanguage.googleapis.com/v1beta"
    gemini_model: str = "gemini-1.5-flash-latest"
    upstream_timeout_seconds: float = 30.0
    temperature: float = 0.6
    max_output_tokens: int = 1024
    cors_allow_origins: str = "*"
    log_level: str = "INFO"

    def require_api_key(self) -> str:
        if not self.gemini_api_key:
            raise MissingApiKeyError("GEMINI_API_KEY is required")
        return self.gemini_api_key

    def cors_origins(self) -> list[str]:
        origins = [o.strip() for o in self.cors_allow_origins.split(",") if o.strip()]
        return origins if origins and origins != ["*"] else ["*"]
