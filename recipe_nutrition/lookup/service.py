"""Nutrition lookup service: provider dispatch, request shaping and normalization.

Usage:
    settings = Settings.from_env()
    service = NutritionLookupService(settings)

    envelope = service.lookup_by_text("2 eggs")
    print(envelope.to_dict())

    parsed = service.parse_ingredients({"ingredientList": "1 banana\\n2 tbsp peanut butter"})
"""

import logging
from typing import Any, Mapping, Optional, Union

from recipe_nutrition.config import Settings
from recipe_nutrition.lookup.errors import ConfigurationMissingError, MissingInputError
from recipe_nutrition.lookup.mock_responder import mock_parsed_ingredients, should_mock
from recipe_nutrition.lookup.provider_selector import ProviderKind, select_provider
from recipe_nutrition.lookup.request_shaper import (
    IngredientParseRequest,
    credential_params,
    shape_generic_params,
    shape_usda_body,
)
from recipe_nutrition.lookup.response_normalizer import (
    GenericPreview,
    ParsedIngredients,
    UsdaPreview,
    normalize_generic,
    normalize_parsed_ingredients,
    normalize_usda,
)
from recipe_nutrition.lookup.upstream_client import UpstreamClient

logger = logging.getLogger(__name__)


class NutritionLookupService:
    """Entry point for both lookup operations.

    Holds read-only settings and an upstream client; safe to share across
    concurrent requests.
    """

    def __init__(self, settings: Settings, client: Optional[UpstreamClient] = None):
        self.settings = settings
        self.client = client or UpstreamClient()

    @property
    def search_provider(self) -> ProviderKind:
        return select_provider(self.settings.search_url, self.settings.search_provider)

    def lookup_by_text(
        self,
        ingredient_text: Optional[str],
        structured_body: Optional[Mapping[str, Any]] = None,
    ) -> Union[UsdaPreview, GenericPreview]:
        """Search the configured provider for free-text ingredients.

        Args:
            ingredient_text: Free-text ingredients (e.g. "2 eggs")
            structured_body: Advanced USDA search body forwarded upstream

        Returns:
            UsdaPreview or GenericPreview depending on the provider kind

        Raises:
            MissingInputError: If ``ingredient_text`` is empty
            ConfigurationMissingError: If the target URL (or USDA key) is unset
            UpstreamRejectedError: If the provider answered non-2xx
            UpstreamUnreachableError: If no response was received
        """
        if ingredient_text is None or not str(ingredient_text).strip():
            raise MissingInputError("ingredients", "No ingredients provided")

        kind = self.search_provider
        target_url = self.settings.search_url
        if not target_url:
            raise ConfigurationMissingError("NUTRITION_API_URL")

        if kind is ProviderKind.USDA:
            return self._search_usda(target_url, str(ingredient_text), structured_body)
        return self._search_generic(target_url, str(ingredient_text))

    def _search_usda(
        self,
        target_url: str,
        ingredient_text: str,
        structured_body: Optional[Mapping[str, Any]],
    ) -> UsdaPreview:
        if not self.settings.search_api_key:
            raise ConfigurationMissingError("NUTRITION_API_KEY", "USDA API key not configured")

        body = shape_usda_body(ingredient_text, structured_body)
        params = credential_params(ProviderKind.USDA, self.settings.search_api_key)
        logger.debug("USDA search for %r", body.get("query"))
        response = self.client.post_json(
            target_url, body, params=params, timeout=self.settings.search_timeout
        )
        return normalize_usda(response)

    def _search_generic(self, target_url: str, ingredient_text: str) -> GenericPreview:
        params = shape_generic_params(
            ingredient_text,
            api_key=self.settings.search_api_key,
            app_id=self.settings.search_app_id,
        )
        logger.debug("Generic nutrition search for %r", ingredient_text)
        response = self.client.get(target_url, params=params, timeout=self.settings.search_timeout)
        return normalize_generic(response)

    def parse_ingredients(self, payload: Optional[Mapping[str, Any]]) -> ParsedIngredients:
        """Parse an ingredient list with the RapidAPI ingredient parser.

        Args:
            payload: ``{"ingredientList": ..., "servings": ..., "includeNutrition": ...}``

        Returns:
            ParsedIngredients (the mock payload in mock mode)

        Raises:
            ConfigurationMissingError: If no parse key is set and mock mode is off
            MissingInputError: If ``ingredientList`` is absent or empty
            UpstreamRejectedError: If the provider answered non-2xx
            UpstreamUnreachableError: If no response was received
        """
        settings = self.settings
        if not settings.parse_api_key and not settings.parse_mock_enabled:
            raise ConfigurationMissingError(
                "SPOONACULAR_API_KEY", "SPOONACULAR_API_KEY not configured in environment"
            )

        request = IngredientParseRequest.from_payload(payload)

        if should_mock(settings.parse_api_key, settings.parse_mock_enabled):
            logger.info("Serving mocked parseIngredients response (no API key, mock enabled)")
            return ParsedIngredients(items=mock_parsed_ingredients())

        response = self.client.post_form(
            settings.parse_endpoint,
            request.to_form_fields(),
            headers={
                "X-RapidAPI-Key": settings.parse_api_key,
                "X-RapidAPI-Host": settings.parse_api_host,
            },
            timeout=settings.parse_timeout,
        )
        return normalize_parsed_ingredients(response)
