"""Nutrition provider dispatch, request shaping and response normalization."""

from recipe_nutrition.lookup.errors import (
    LookupErrorCode,
    NutritionLookupError,
    MissingInputError,
    ConfigurationMissingError,
    UpstreamRejectedError,
    UpstreamUnreachableError,
)

from recipe_nutrition.lookup.provider_selector import (
    ProviderKind,
    classify_url,
    select_provider,
)

from recipe_nutrition.lookup.request_shaper import (
    IngredientParseRequest,
    CREDENTIAL_PARAMS,
    credential_params,
    shape_usda_body,
    shape_generic_params,
)

from recipe_nutrition.lookup.upstream_client import (
    UpstreamClient,
    UpstreamResponse,
)

from recipe_nutrition.lookup.response_normalizer import (
    FoodPreview,
    UsdaPreview,
    GenericPreview,
    ParsedIngredients,
    classify_rejection,
    normalize_usda,
    normalize_generic,
    normalize_parsed_ingredients,
)

from recipe_nutrition.lookup.mock_responder import mock_parsed_ingredients

from recipe_nutrition.lookup.service import NutritionLookupService

__all__ = [
    "LookupErrorCode",
    "NutritionLookupError",
    "MissingInputError",
    "ConfigurationMissingError",
    "UpstreamRejectedError",
    "UpstreamUnreachableError",
    "ProviderKind",
    "classify_url",
    "select_provider",
    "IngredientParseRequest",
    "CREDENTIAL_PARAMS",
    "credential_params",
    "shape_usda_body",
    "shape_generic_params",
    "UpstreamClient",
    "UpstreamResponse",
    "FoodPreview",
    "UsdaPreview",
    "GenericPreview",
    "ParsedIngredients",
    "classify_rejection",
    "normalize_usda",
    "normalize_generic",
    "normalize_parsed_ingredients",
    "mock_parsed_ingredients",
    "NutritionLookupService",
]
