from recipe_client.api.prompt_service_client import (
    ClientNetworkError,
    GeneratedRecipe,
    PromptServiceClient,
)

__all__ = ["ClientNetworkError", "GeneratedRecipe", "PromptServiceClient"]
