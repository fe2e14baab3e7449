"""Decide which search protocol to speak for a configured provider."""

import re
from enum import Enum
from typing import Optional

from recipe_nutrition.lookup.errors import ConfigurationMissingError

# Substrings that identify USDA FoodData Central endpoints.
USDA_URL_PATTERN = re.compile(r"fdc|nal\.usda|fooddata", re.IGNORECASE)


class ProviderKind(Enum):
    """Search provider protocols."""

    USDA = "usda"
    GENERIC = "generic"

    @classmethod
    def from_string(cls, value: str) -> Optional["ProviderKind"]:
        for kind in cls:
            if kind.value == value:
                return kind
        return None


def classify_url(target_url: Optional[str]) -> ProviderKind:
    """Classify a target URL by substring match.

    Args:
        target_url: Configured search URL (may be empty)

    Returns:
        ProviderKind.USDA for FoodData Central style URLs, else GENERIC
    """
    if target_url and USDA_URL_PATTERN.search(target_url):
        return ProviderKind.USDA
    return ProviderKind.GENERIC


def select_provider(target_url: Optional[str], explicit_kind: Optional[str] = None) -> ProviderKind:
    """Pick the search provider kind.

    An explicitly configured kind wins; the URL heuristic is only the
    fallback when none is configured.

    Raises:
        ConfigurationMissingError: If ``explicit_kind`` names an unknown provider
    """
    if explicit_kind:
        kind = ProviderKind.from_string(explicit_kind.strip().lower())
        if kind is None:
            raise ConfigurationMissingError(
                "NUTRITION_PROVIDER",
                f"Unknown nutrition provider '{explicit_kind}' "
                f"(expected one of: {', '.join(k.value for k in ProviderKind)})",
            )
        return kind
    return classify_url(target_url)
