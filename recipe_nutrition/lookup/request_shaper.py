"""Build provider-specific request bodies and parameters from caller input."""

from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional, Tuple

from recipe_nutrition.lookup.errors import MissingInputError
from recipe_nutrition.lookup.provider_selector import ProviderKind

USDA_PAGE_SIZE = 5

# Parameter names each provider kind expects the search credential under.
# Generic providers (Edamam and friends) disagree on naming, so the key is
# sent under every alias.
CREDENTIAL_PARAMS: Dict[ProviderKind, Tuple[str, ...]] = {
    ProviderKind.USDA: ("api_key",),
    ProviderKind.GENERIC: ("app_key", "api_key", "key", "app_id"),
}

# Parameters that take a separately configured value when one is set.
CREDENTIAL_OVERRIDES = {"app_id"}


def credential_params(
    kind: ProviderKind,
    api_key: Optional[str],
    app_id: Optional[str] = None,
) -> Dict[str, str]:
    """Return the credential query parameters for ``kind``.

    Args:
        kind: Provider kind
        api_key: Search credential (no params are produced when empty)
        app_id: Override for parameters listed in CREDENTIAL_OVERRIDES
    """
    if not api_key:
        return {}
    params = {}
    for name in CREDENTIAL_PARAMS.get(kind, ()):
        if name in CREDENTIAL_OVERRIDES and app_id:
            params[name] = app_id
        else:
            params[name] = api_key
    return params


def shape_usda_body(
    ingredient_text: str,
    structured_body: Optional[Mapping[str, Any]] = None,
) -> Dict[str, Any]:
    """Build the JSON body for a FoodData Central ``/foods/search`` POST.

    Args:
        ingredient_text: Free-text ingredients
        structured_body: Caller-supplied advanced search body, forwarded as-is

    Returns:
        Body dict that always carries a non-empty ``query``
    """
    if structured_body:
        body = dict(structured_body)
        if not body.get("query"):
            body["query"] = str(ingredient_text)
        return body
    return {"query": str(ingredient_text), "pageSize": USDA_PAGE_SIZE}


def shape_generic_params(
    ingredient_text: str,
    api_key: Optional[str] = None,
    app_id: Optional[str] = None,
) -> Dict[str, str]:
    """Build query parameters for a generic GET-style nutrition provider."""
    params = {"ingr": str(ingredient_text)}
    params.update(credential_params(ProviderKind.GENERIC, api_key, app_id))
    return params


def _as_form_value(value: Any) -> str:
    # JSON booleans arrive as Python bools; the provider expects "true"/"false".
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


@dataclass(frozen=True)
class IngredientParseRequest:
    """Structured request for the ingredient-parsing provider."""

    ingredient_list: str
    servings: str = "1"
    include_nutrition: str = "true"

    @classmethod
    def from_payload(cls, payload: Optional[Mapping[str, Any]]) -> "IngredientParseRequest":
        """Build from a client payload using the wire field names.

        A list ``ingredientList`` is sent one entry per line. Whitespace-only
        text is forwarded as-is; only an absent or empty value is missing.

        Raises:
            MissingInputError: If ``ingredientList`` is absent or empty
        """
        payload = payload or {}
        ingredient_list = payload.get("ingredientList")
        if not ingredient_list:
            raise MissingInputError(
                "ingredientList", "No ingredientList provided in request body"
            )
        if isinstance(ingredient_list, list):
            ingredient_list = "\n".join(str(line) for line in ingredient_list)
        servings = payload.get("servings")
        include_nutrition = payload.get("includeNutrition")
        return cls(
            ingredient_list=str(ingredient_list),
            servings="1" if servings is None else _as_form_value(servings),
            include_nutrition="true" if include_nutrition is None else _as_form_value(include_nutrition),
        )

    def to_form_fields(self) -> List[Tuple[str, str]]:
        """Form fields in wire order, ready for URL encoding."""
        return [
            ("ingredientList", self.ingredient_list),
            ("servings", self.servings),
            ("includeNutrition", self.include_nutrition),
        ]
