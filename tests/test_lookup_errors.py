"""Tests for the lookup error taxonomy."""

import pytest

from recipe_nutrition.lookup.errors import (
    ConfigurationMissingError,
    LookupErrorCode,
    MissingInputError,
    NutritionLookupError,
    UpstreamRejectedError,
    UpstreamUnreachableError,
)


class TestLookupErrorCode:
    """Tests for LookupErrorCode enum."""

    def test_error_codes_are_unique_strings(self):
        codes = [code.value for code in LookupErrorCode]
        assert all(isinstance(code, str) for code in codes)
        assert len(codes) == len(set(codes))


class TestNutritionLookupError:
    """Tests for the base error."""

    def test_str_includes_code(self):
        error = NutritionLookupError(LookupErrorCode.MISSING_INPUT, "No ingredients provided")

        assert str(error) == "[MISSING_INPUT] No ingredients provided"

    def test_to_dict_omits_empty_details(self):
        error = MissingInputError("ingredientList")
        assert error.to_dict() == {"error": "No ingredientList provided"}

    def test_repr(self):
        error = UpstreamRejectedError(429, "Spoonacular rate limit exceeded", details={"message": "slow down"})
        assert "UpstreamRejectedError(" in repr(error)
        assert "slow down" in repr(error)


class TestErrorSubclasses:
    """Tests for status mapping and envelope shape of each error."""

    @pytest.mark.parametrize("error,status,code", [
        (MissingInputError("ingredientList"), 400, LookupErrorCode.MISSING_INPUT),
        (ConfigurationMissingError("SPOONACULAR_API_KEY"), 500, LookupErrorCode.CONFIGURATION_MISSING),
        (UpstreamRejectedError(404, "Nutrition API failed (status 404)"), 502, LookupErrorCode.UPSTREAM_REJECTED),
        (UpstreamUnreachableError("Upstream request timed out", "timeout"), 500, LookupErrorCode.UPSTREAM_UNREACHABLE),
    ])
    def test_status_and_code(self, error, status, code):
        assert isinstance(error, NutritionLookupError)
        assert error.http_status == status
        assert error.code is code

    def test_configuration_default_message(self):
        assert ConfigurationMissingError("NUTRITION_API_URL").message == "NUTRITION_API_URL not configured"

    def test_rejected_keeps_upstream_status_and_body(self):
        body = {"message": "You are not subscribed to this API."}
        error = UpstreamRejectedError(403, "Spoonacular subscription required", details=body)

        assert error.status_code == 403
        assert error.http_status == 502
        assert error.to_dict() == {"error": "Spoonacular subscription required", "details": body}

    def test_unreachable_carries_network_message(self):
        error = UpstreamUnreachableError("Failed to connect to upstream provider", "Connection refused")

        assert error.to_dict() == {
            "error": "Failed to connect to upstream provider",
            "details": "Connection refused",
        }
