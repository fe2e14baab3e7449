"""Tests for provider request shaping."""

import pytest
from urllib.parse import urlencode

from recipe_nutrition.lookup.errors import MissingInputError
from recipe_nutrition.lookup.provider_selector import ProviderKind
from recipe_nutrition.lookup.request_shaper import (
    CREDENTIAL_PARAMS,
    IngredientParseRequest,
    credential_params,
    shape_generic_params,
    shape_usda_body,
)


class TestShapeUsdaBody:
    """Tests for the FoodData Central search body."""

    def test_bare_text_builds_minimal_body(self):
        assert shape_usda_body("2 eggs") == {"query": "2 eggs", "pageSize": 5}

    def test_structured_body_forwarded(self):
        """Test that a structured body with a query is forwarded unchanged."""
        body = {"query": "cheddar", "dataType": ["Branded"], "pageSize": 25}
        assert shape_usda_body("ignored", body) == body

    def test_structured_body_without_query_gets_text_injected(self):
        """Test that a missing query is filled from the ingredient text."""
        body = {"dataType": ["Foundation"], "sortBy": "dataType.keyword"}

        shaped = shape_usda_body("milk", body)

        assert shaped == {
            "dataType": ["Foundation"],
            "sortBy": "dataType.keyword",
            "query": "milk",
        }

    def test_structured_body_empty_query_gets_text_injected(self):
        assert shape_usda_body("milk", {"query": "", "pageSize": 2})["query"] == "milk"

    def test_caller_body_not_mutated(self):
        body = {"dataType": ["Foundation"]}
        shape_usda_body("milk", body)
        assert "query" not in body


class TestShapeGenericParams:
    """Tests for generic provider query parameters."""

    def test_without_credential(self):
        assert shape_generic_params("1 apple") == {"ingr": "1 apple"}

    def test_credential_sent_under_every_alias(self):
        params = shape_generic_params("1 apple", api_key="abc")

        assert params == {
            "ingr": "1 apple",
            "app_key": "abc",
            "api_key": "abc",
            "key": "abc",
            "app_id": "abc",
        }

    def test_app_id_override(self):
        """Test that a separate app id replaces only the app_id parameter."""
        params = shape_generic_params("1 apple", api_key="abc", app_id="my-app")

        assert params["app_id"] == "my-app"
        assert params["app_key"] == "abc"
        assert params["api_key"] == "abc"
        assert params["key"] == "abc"


class TestCredentialParams:
    """Tests for the provider -> credential parameter table."""

    def test_table_covers_every_provider(self):
        assert set(CREDENTIAL_PARAMS) == set(ProviderKind)

    def test_usda_uses_api_key_only(self):
        assert credential_params(ProviderKind.USDA, "k", app_id="ignored") == {"api_key": "k"}

    def test_empty_credential_yields_no_params(self):
        assert credential_params(ProviderKind.GENERIC, "") == {}
        assert credential_params(ProviderKind.GENERIC, None) == {}


class TestIngredientParseRequest:
    """Tests for the ingredient-parsing form request."""

    def test_defaults(self):
        request = IngredientParseRequest.from_payload({"ingredientList": "1 banana"})

        assert request.ingredient_list == "1 banana"
        assert request.servings == "1"
        assert request.include_nutrition == "true"

    def test_values_coerced_to_strings(self):
        request = IngredientParseRequest.from_payload({
            "ingredientList": "1 banana",
            "servings": 2,
            "includeNutrition": False,
        })

        assert request.servings == "2"
        assert request.include_nutrition == "false"

    @pytest.mark.parametrize("payload", [None, {}, {"ingredientList": ""}, {"ingredientList": []}])
    def test_missing_ingredient_list(self, payload):
        with pytest.raises(MissingInputError) as exc_info:
            IngredientParseRequest.from_payload(payload)

        assert exc_info.value.field_name == "ingredientList"

    def test_whitespace_ingredient_list_forwarded(self):
        request = IngredientParseRequest.from_payload({"ingredientList": "   "})

        assert request.ingredient_list == "   "

    def test_list_ingredient_list_one_per_line(self):
        request = IngredientParseRequest.from_payload({"ingredientList": ["1 banana", "2 tbsp peanut butter"]})

        assert request.ingredient_list == "1 banana\n2 tbsp peanut butter"

    def test_form_fields_url_encoded_in_order(self):
        request = IngredientParseRequest.from_payload({
            "ingredientList": "1 banana\n2 tbsp peanut butter",
        })

        encoded = urlencode(request.to_form_fields())

        assert encoded == (
            "ingredientList=1+banana%0A2+tbsp+peanut+butter"
            "&servings=1&includeNutrition=true"
        )
