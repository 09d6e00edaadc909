"""Errors surfaced by the recipe API and their HTTP mapping."""
from typing import Any

UNKNOWN_ERROR_DETAIL = "An unknown error occurred."


class RecipeServiceError(Exception):
    status_code: int = 500
    message: str = "Internal server error"

    def to_body(self) -> dict[str, Any]:
        return {"error": self.message}


class BadRequest(RecipeServiceError):
    """Recipe name missing, empty or not a string. No upstream call was made."""

    status_code = 400
    message = "Missing or invalid recipe name"


class UpstreamEmpty(RecipeServiceError):
    """Upstream answered but carried no usable text."""

    status_code = 502
    message = "No recipe was returned from the AI model."

    def __init__(self, raw: Any) -> None:
        super().__init__(self.message)
        self.raw = raw

    def to_body(self) -> dict[str, Any]:
        return {"error": self.message, "raw": self.raw}


class UpstreamFailure(RecipeServiceError):
    """Network error, timeout or non-2xx status from upstream."""

    status_code = 500
    message = "Internal server error"

    def __init__(self, detail: Any = None) -> None:
        self.detail = detail if detail not in (None, "") else UNKNOWN_ERROR_DETAIL
        super().__init__(str(self.detail))

    def to_body(self) -> dict[str, Any]:
        return {"error": self.message, "detail": self.detail}
