"""Recipe store backed by a JSON file (or memory only when no path is given)."""
import dataclasses
import json
import os
import tempfile
import threading
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional

from recipe_nutrition.data_layer.exceptions import RecipeNotFoundError, RecipeValidationError
from recipe_nutrition.data_layer.models import Recipe

DEFAULT_LIST_LIMIT = 50

# Client field name -> Recipe attribute, for fields a client may set.
EDITABLE_FIELDS = {
    "title": "title",
    "description": "description",
    "ingredients": "ingredients",
    "steps": "steps",
    "imageUrl": "image_url",
    "author": "author",
}


def _encode_ingredients(value: Any) -> str:
    """Lists are stored as their JSON encoding; anything else as text."""
    if isinstance(value, list):
        return json.dumps(value)
    return value or ""


class RecipeStore:
    """Keeps recipes keyed by auto-incrementing integer id.

    The JSON file has the shape ``{"recipes": [...], "next_id": N}`` and is
    replaced after every change. A change is applied in memory only once the
    file has been written, so a failed write leaves both untouched.
    """

    def __init__(self, json_path: Optional[str] = None):
        """Initialize recipe store.

        Args:
            json_path: Path to JSON file; created on first write if missing
        """
        self.json_path = Path(json_path) if json_path else None
        self._lock = threading.Lock()
        self._recipes: Dict[int, Recipe] = {}
        self._next_id = 1
        self._load_recipes()

    def _load_recipes(self):
        if self.json_path is None or not self.json_path.exists():
            return
        with open(self.json_path, "r") as f:
            data = json.load(f)

        for recipe_data in data.get("recipes", []):
            recipe = Recipe.from_dict(recipe_data)
            self._recipes[recipe.id] = recipe
        highest = max(self._recipes, default=0)
        self._next_id = max(int(data.get("next_id", 1)), highest + 1)

    def _save(self, recipes: Dict[int, Recipe], next_id: int):
        if self.json_path is None:
            return
        self.json_path.parent.mkdir(parents=True, exist_ok=True)
        data = {
            "next_id": next_id,
            "recipes": [r.to_dict() for r in sorted(recipes.values(), key=lambda r: r.id)],
        }
        fd, tmp_path = tempfile.mkstemp(
            dir=self.json_path.parent, prefix=f".{self.json_path.name}.", suffix=".tmp"
        )
        try:
            with os.fdopen(fd, "w") as f:
                json.dump(data, f, indent=2)
            os.replace(tmp_path, self.json_path)
        except Exception:
            os.unlink(tmp_path)
            raise

    def _commit(self, recipes: Dict[int, Recipe], next_id: int):
        self._save(recipes, next_id)
        self._recipes = recipes
        self._next_id = next_id

    def list_recipes(self, limit: int = DEFAULT_LIST_LIMIT) -> List[Recipe]:
        """Most recent recipes first (by id, descending)."""
        with self._lock:
            recipes = sorted(self._recipes.values(), key=lambda r: r.id, reverse=True)
        return recipes[:limit]

    def get_recipe(self, recipe_id: int) -> Recipe:
        """Get a recipe by id.

        Raises:
            RecipeNotFoundError: If no recipe has this id
        """
        with self._lock:
            recipe = self._recipes.get(recipe_id)
        if recipe is None:
            raise RecipeNotFoundError(recipe_id)
        return recipe

    def create_recipe(self, payload: Mapping[str, Any]) -> Recipe:
        """Create a recipe from a client payload.

        Raises:
            RecipeValidationError: If ``title`` is missing or empty
        """
        title = payload.get("title")
        if not title or not str(title).strip():
            raise RecipeValidationError("title is required")

        with self._lock:
            recipe = Recipe(
                id=self._next_id,
                title=str(title),
                description=payload.get("description") or "",
                ingredients=_encode_ingredients(payload.get("ingredients")),
                steps=payload.get("steps") or "",
                image_url=payload.get("imageUrl") or "",
                author=payload.get("author") or "Anonymous",
            )
            recipes = dict(self._recipes)
            recipes[recipe.id] = recipe
            self._commit(recipes, self._next_id + 1)
        return recipe

    def update_recipe(self, recipe_id: int, payload: Mapping[str, Any]) -> Recipe:
        """Apply the editable fields present in ``payload``; others are ignored.

        Raises:
            RecipeNotFoundError: If no recipe has this id
            RecipeValidationError: If the update would blank the title
        """
        with self._lock:
            recipe = self._recipes.get(recipe_id)
            if recipe is None:
                raise RecipeNotFoundError(recipe_id)
            if "title" in payload and not str(payload["title"] or "").strip():
                raise RecipeValidationError("title cannot be empty")

            changes = {}
            for client_name, attr in EDITABLE_FIELDS.items():
                if client_name not in payload:
                    continue
                value = payload[client_name]
                if client_name == "ingredients":
                    value = _encode_ingredients(value)
                changes[attr] = value if value is not None else ""
            updated = dataclasses.replace(recipe, **changes)
            recipes = dict(self._recipes)
            recipes[recipe_id] = updated
            self._commit(recipes, self._next_id)
        return updated

    def delete_recipe(self, recipe_id: int) -> None:
        """Delete a recipe.

        Raises:
            RecipeNotFoundError: If no recipe has this id
        """
        with self._lock:
            if recipe_id not in self._recipes:
                raise RecipeNotFoundError(recipe_id)
            recipes = dict(self._recipes)
            del recipes[recipe_id]
            self._commit(recipes, self._next_id)
