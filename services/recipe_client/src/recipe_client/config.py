"""Recipe client configuration."""
from pydantic_settings import SettingsConfigDict

from shared.config import BaseAppSettings


class RecipeClientSettings(BaseAppSettings):
    model_config = SettingsConfigDict(env_prefix="RECIPE_CLIENT_")

    api_base_url: str = "http://localhost:3000"
    request_timeout_seconds: float = 60.0
    log_json: bool = False
    log_level: str = "WARNING"
