from typing import Any

from pydantic import BaseModel, Field


class GenerateRecipeRequest(BaseModel):
    # Typed loosely on purpose: RecipeService owns validation and answers 400, not 422.
    recipe: Any = None


class GenerateRecipeResponse(BaseModel):
    recipe: str
    tts: bool = Field(
        default=True,
        description="Tells the client the text may be read aloud. Currently unused by the client.",
    )


class ErrorResponse(BaseModel):
    error: str
    detail: Any = None
    raw: Any = None
