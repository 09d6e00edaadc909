from recipe_api.service.recipe_service import RecipeService, extract_recipe_text

__all__ = ["RecipeService", "extract_recipe_text"]
