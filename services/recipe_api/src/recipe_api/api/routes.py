"""Recipe API routes."""
from fastapi import APIRouter, Request

from recipe_api.api.schemas import ErrorResponse, GenerateRecipeRequest, GenerateRecipeResponse
from recipe_api.service import RecipeService

router = APIRouter(tags=["recipes"])


@router.post(
    "/generate-recipe",
    response_model=GenerateRecipeResponse,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}, 502: {"model": ErrorResponse}},
)
async def generate_recipe(body: GenerateRecipeRequest, request: Request) -> GenerateRecipeResponse:
    service: RecipeService = request.app.state.recipe_service
    text = await service.generate_recipe(body.recipe)
    return GenerateRecipeResponse(recipe=text, tts=True)
