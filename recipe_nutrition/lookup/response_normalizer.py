"""Map upstream responses into client-facing envelopes.

Success responses become one of three envelopes; non-2xx responses are
classified by status code into an :class:`UpstreamRejectedError` whose
``details`` is always the untransformed upstream body.
"""

import logging
import re
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from recipe_nutrition.lookup.errors import UpstreamRejectedError
from recipe_nutrition.lookup.upstream_client import UpstreamResponse

logger = logging.getLogger(__name__)

PREVIEW_LIMIT = 5

# Matched against the body's "message" field. Provider-specific wording:
# a reworded upstream message will fall through to the generic failure.
NOT_SUBSCRIBED_PATTERN = re.compile(r"not subscribed", re.IGNORECASE)

SEARCH_PROVIDER_LABEL = "Nutrition API"
PARSE_PROVIDER_LABEL = "Spoonacular"


@dataclass
class FoodPreview:
    """Reduced view of one FoodData Central search hit."""

    id: Any
    description: Optional[str]
    data_type: Optional[str]

    def to_dict(self) -> Dict[str, Any]:
        return {"id": self.id, "description": self.description, "dataType": self.data_type}


@dataclass
class UsdaPreview:
    """Envelope for a USDA-style search result."""

    preview: List[FoodPreview]
    raw: Any
    provider: str = "usda"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "provider": self.provider,
            "preview": [item.to_dict() for item in self.preview],
            "raw": self.raw,
        }


@dataclass
class GenericPreview:
    """Envelope for a generic provider result (body passed through)."""

    raw: Any
    provider: str = "generic"

    def to_dict(self) -> Dict[str, Any]:
        return {"provider": self.provider, "raw": self.raw}


@dataclass
class ParsedIngredients:
    """Envelope for the ingredient parser: the upstream item list, unmodified."""

    items: Any = field(default_factory=list)

    def to_dict(self) -> Any:
        return self.items


def classify_rejection(status_code: Optional[int], body: Any, label: str) -> str:
    """Return the categorized error message for a non-2xx upstream response.

    Args:
        status_code: Upstream HTTP status
        body: Upstream body (dict, text or None)
        label: Provider name used in the message
    """
    if status_code in (401, 403):
        return f"{label} authentication failed"
    if status_code == 429:
        return f"{label} rate limit exceeded"
    if status_code == 402 or _is_not_subscribed(body):
        return f"{label} subscription required"
    return f"{label} failed (status {status_code})"


def _is_not_subscribed(body: Any) -> bool:
    if not isinstance(body, dict):
        return False
    message = body.get("message")
    return bool(message) and bool(NOT_SUBSCRIBED_PATTERN.search(str(message)))


def raise_for_rejection(response: UpstreamResponse, label: str) -> None:
    """Raise a categorized UpstreamRejectedError for a non-2xx response.

    Raises:
        UpstreamRejectedError: If ``response`` is not 2xx
    """
    if response.ok:
        return
    message = classify_rejection(response.status_code, response.body, label)
    logger.error("%s returned %s: %r", label, response.status_code, response.body)
    raise UpstreamRejectedError(response.status_code, message, details=response.body)


def _preview_item(food: Any) -> FoodPreview:
    if not isinstance(food, dict):
        return FoodPreview(id=None, description=None, data_type=None)
    return FoodPreview(
        id=food.get("fdcId"),
        description=food.get("description"),
        data_type=food.get("dataType"),
    )


def normalize_usda(response: UpstreamResponse) -> UsdaPreview:
    """Normalize a FoodData Central search response.

    Raises:
        UpstreamRejectedError: On non-2xx or empty body
    """
    raise_for_rejection(response, SEARCH_PROVIDER_LABEL)
    body = response.body
    if not body:
        raise UpstreamRejectedError(
            response.status_code, "Empty response from nutrition provider", details=body
        )

    foods = body.get("foods", body) if isinstance(body, dict) else body
    if not isinstance(foods, list):
        foods = []
    preview = [_preview_item(food) for food in foods[:PREVIEW_LIMIT]]
    return UsdaPreview(preview=preview, raw=body)


def normalize_generic(response: UpstreamResponse) -> GenericPreview:
    """Normalize a generic provider response.

    Raises:
        UpstreamRejectedError: On non-2xx
    """
    raise_for_rejection(response, SEARCH_PROVIDER_LABEL)
    return GenericPreview(raw=response.body)


def normalize_parsed_ingredients(response: UpstreamResponse) -> ParsedIngredients:
    """Normalize an ingredient-parsing response (forwarded unchanged).

    Raises:
        UpstreamRejectedError: On non-2xx
    """
    raise_for_rejection(response, PARSE_PROVIDER_LABEL)
    return ParsedIngredients(items=response.body)
