"""FastAPI server for recipe storage and nutrition lookups."""

import logging
from typing import Any, Dict, List, Optional, Union

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict

from recipe_nutrition.config import Settings
from recipe_nutrition.data_layer.exceptions import RecipeNotFoundError, RecipeValidationError
from recipe_nutrition.data_layer.recipe_store import RecipeStore
from recipe_nutrition.lookup.errors import MissingInputError, NutritionLookupError
from recipe_nutrition.lookup.service import NutritionLookupService
from recipe_nutrition.lookup.upstream_client import UpstreamClient

logger = logging.getLogger(__name__)


def _as_text(value: Any) -> Optional[str]:
    """Ingredient text from a client value; lists become one line per entry."""
    if value is None:
        return None
    if isinstance(value, list):
        return "\n".join(str(v) for v in value)
    return str(value)


class LookupByTextRequest(BaseModel):
    """Body for text lookups.

    ``query`` (or the legacy ``ing``) carries the ingredient text. Any
    additional fields turn the body into a structured USDA search body that
    is forwarded upstream as-is. Fields are untyped so that bad input
    reaches the lookup service and fails with its own error envelope.
    """

    model_config = ConfigDict(extra="allow")

    query: Any = None
    ing: Any = None

    def ingredient_text(self) -> Optional[str]:
        return _as_text(self.query) or _as_text(self.ing)

    def structured_body(self) -> Optional[Dict[str, Any]]:
        if not self.model_extra:
            return None
        return self.model_dump(exclude_none=True)


class ParseIngredientsRequest(BaseModel):
    ingredientList: Any = None
    servings: Any = None
    includeNutrition: Any = None


class RecipePayload(BaseModel):
    title: Optional[str] = None
    description: Optional[str] = None
    ingredients: Optional[Union[List[str], str]] = None
    steps: Optional[str] = None
    imageUrl: Optional[str] = None
    author: Optional[str] = None


async def _lookup_error_handler(request: Request, exc: NutritionLookupError) -> JSONResponse:
    if exc.http_status >= 500:
        logger.error("%s %s failed: %s details=%r", request.method, request.url.path, exc, exc.details)
    else:
        logger.warning("%s %s rejected: %s", request.method, request.url.path, exc)
    return JSONResponse(status_code=exc.http_status, content=exc.to_dict())


async def _recipe_not_found_handler(request: Request, exc: RecipeNotFoundError) -> JSONResponse:
    return JSONResponse(status_code=404, content={"error": "Recipe not found"})


async def _recipe_validation_handler(request: Request, exc: RecipeValidationError) -> JSONResponse:
    return JSONResponse(status_code=400, content={"error": str(exc)})


async def _request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    logger.warning("%s %s rejected: invalid request body", request.method, request.url.path)
    return JSONResponse(
        status_code=400,
        content={"error": "Invalid request body", "details": jsonable_encoder(exc.errors())},
    )


def create_app(
    settings: Optional[Settings] = None,
    client: Optional[UpstreamClient] = None,
    store: Optional[RecipeStore] = None,
) -> FastAPI:
    """Build the application.

    Args:
        settings: Configuration (defaults to environment)
        client: Upstream HTTP client (injectable for tests)
        store: Recipe store (defaults to ``settings.recipes_path``)
    """
    settings = settings or Settings.from_env()
    service = NutritionLookupService(settings, client=client)
    store = store or RecipeStore(settings.recipes_path)

    app = FastAPI(title="Recipe Nutrition API")
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_exception_handler(NutritionLookupError, _lookup_error_handler)
    app.add_exception_handler(RecipeNotFoundError, _recipe_not_found_handler)
    app.add_exception_handler(RecipeValidationError, _recipe_validation_handler)
    app.add_exception_handler(RequestValidationError, _request_validation_handler)

    app.state.settings = settings
    app.state.lookup_service = service
    app.state.recipe_store = store

    @app.get("/health")
    def health() -> Dict[str, str]:
        return {"status": "ok"}

    # --- Nutrition lookups ---

    @app.post("/lookup/by-text")
    def lookup_by_text(payload: Optional[LookupByTextRequest] = None) -> Dict[str, Any]:
        if payload is None:
            return service.lookup_by_text(None).to_dict()
        envelope = service.lookup_by_text(payload.ingredient_text(), payload.structured_body())
        return envelope.to_dict()

    def _parse(payload: Optional[ParseIngredientsRequest]) -> Any:
        fields = payload.model_dump(exclude_none=True) if payload else {}
        return service.parse_ingredients(fields).to_dict()

    @app.post("/lookup/parse-ingredients")
    def parse_ingredients(payload: Optional[ParseIngredientsRequest] = None) -> Any:
        return _parse(payload)

    @app.post("/api/nutrition/spoonacular")
    def spoonacular(payload: Optional[ParseIngredientsRequest] = None) -> Any:
        return _parse(payload)

    # --- Recipes ---

    @app.get("/api/recipes")
    def list_recipes() -> List[Dict[str, Any]]:
        return [recipe.to_dict() for recipe in store.list_recipes()]

    @app.get("/api/recipes/{recipe_id}")
    def get_recipe(recipe_id: int) -> Dict[str, Any]:
        return store.get_recipe(recipe_id).to_dict()

    @app.post("/api/recipes", status_code=201)
    def create_recipe(payload: RecipePayload) -> Dict[str, Any]:
        return store.create_recipe(payload.model_dump(exclude_none=True)).to_dict()

    @app.put("/api/recipes/{recipe_id}")
    def update_recipe(recipe_id: int, payload: RecipePayload) -> Dict[str, Any]:
        return store.update_recipe(recipe_id, payload.model_dump(exclude_unset=True)).to_dict()

    @app.delete("/api/recipes/{recipe_id}")
    def delete_recipe(recipe_id: int) -> Dict[str, str]:
        store.delete_recipe(recipe_id)
        return {"message": "Deleted successfully"}

    def _recipe_nutrition(recipe_id: int, ing: Optional[str], payload: Optional[LookupByTextRequest]):
        text = ing or (payload.ingredient_text() if payload else None)
        structured = payload.structured_body() if payload else None
        if not text:
            # Fall back to the stored recipe's ingredients.
            text = store.get_recipe(recipe_id).ingredient_text()
        if not text or not text.strip():
            raise MissingInputError("ingredients", "No ingredients provided")
        return service.lookup_by_text(text, structured).to_dict()

    @app.get("/api/recipes/{recipe_id}/nutrition")
    def recipe_nutrition(recipe_id: int, ing: Optional[str] = None) -> Dict[str, Any]:
        return _recipe_nutrition(recipe_id, ing, None)

    @app.post("/api/recipes/{recipe_id}/nutrition")
    def recipe_nutrition_post(
        recipe_id: int,
        ing: Optional[str] = None,
        payload: Optional[LookupByTextRequest] = None,
    ) -> Dict[str, Any]:
        return _recipe_nutrition(recipe_id, ing, payload)

    return app
