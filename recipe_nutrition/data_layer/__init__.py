"""Recipe storage."""

from recipe_nutrition.data_layer.exceptions import RecipeNotFoundError, RecipeValidationError
from recipe_nutrition.data_layer.models import Recipe
from recipe_nutrition.data_layer.recipe_store import RecipeStore

__all__ = [
    "Recipe",
    "RecipeStore",
    "RecipeNotFoundError",
    "RecipeValidationError",
]
