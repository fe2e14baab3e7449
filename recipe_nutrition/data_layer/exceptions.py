"""Custom exceptions for the recipe store."""


class RecipeNotFoundError(Exception):
    """Raised when a recipe id is not in the store."""

    def __init__(self, recipe_id: int):
        """Initialize exception with recipe id.

        Args:
            recipe_id: Id of the recipe that was not found
        """
        self.recipe_id = recipe_id
        super().__init__(f"Recipe {recipe_id} not found")


class RecipeValidationError(ValueError):
    """Raised when a recipe payload is missing required fields."""
