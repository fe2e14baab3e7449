"""Fixed ingredient-parsing payload for running without a RapidAPI key."""

import copy
from typing import Any, Dict, List

MOCK_PARSED_INGREDIENTS: List[Dict[str, Any]] = [
    {
        "name": "banana",
        "amount": 1,
        "unit": "",
        "nutrition": {
            "nutrients": [
                {"name": "Calories", "amount": 105, "unit": "kcal"},
                {"name": "Carbohydrates", "amount": 27, "unit": "g"},
            ]
        },
    },
    {
        "name": "peanut butter",
        "amount": 2,
        "unit": "tbsp",
        "nutrition": {
            "nutrients": [
                {"name": "Calories", "amount": 188, "unit": "kcal"},
                {"name": "Protein", "amount": 8, "unit": "g"},
            ]
        },
    },
]


def should_mock(api_key: str, mock_enabled: bool) -> bool:
    """Mock only when explicitly enabled and no real credential is configured."""
    return mock_enabled and not api_key


def mock_parsed_ingredients() -> List[Dict[str, Any]]:
    """Return a fresh copy of the example payload (same shape as a live response)."""
    return copy.deepcopy(MOCK_PARSED_INGREDIENTS)
