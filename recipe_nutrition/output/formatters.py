"""Formatters for lookup envelopes (JSON and plain text)."""

import json
from typing import Any, Dict, List, Union

from recipe_nutrition.lookup.response_normalizer import (
    GenericPreview,
    ParsedIngredients,
    UsdaPreview,
)

Envelope = Union[UsdaPreview, GenericPreview, ParsedIngredients]


def format_envelope_json(envelope: Envelope, indent: int = 2, include_raw: bool = True) -> str:
    """Serialize an envelope to a JSON string.

    Args:
        envelope: Lookup result
        indent: JSON indentation
        include_raw: If False, drop the ``raw`` upstream body from previews
    """
    data = envelope.to_dict()
    if not include_raw and isinstance(data, dict):
        data = {k: v for k, v in data.items() if k != "raw"}
    return json.dumps(data, indent=indent)


def format_nutrient(nutrient: Dict[str, Any]) -> str:
    """Format a nutrient as e.g. "Calories: 105 kcal"."""
    amount = nutrient.get("amount")
    if isinstance(amount, float) and amount == int(amount):
        amount = int(amount)
    unit = nutrient.get("unit") or ""
    return f"{nutrient.get('name')}: {amount} {unit}".rstrip()


def format_parsed_item(item: Dict[str, Any]) -> List[str]:
    """Format one parsed ingredient and its nutrients as indented lines."""
    amount = item.get("amount")
    unit = item.get("unit") or ""
    head = " ".join(str(part) for part in (amount, unit, item.get("name")) if part not in (None, ""))
    lines = [f"- {head}"]
    nutrients = (item.get("nutrition") or {}).get("nutrients", [])
    for nutrient in nutrients:
        lines.append(f"    {format_nutrient(nutrient)}")
    return lines


def format_envelope_text(envelope: Envelope) -> str:
    """Human-readable rendering for terminal output."""
    if isinstance(envelope, UsdaPreview):
        lines = ["USDA FoodData Central matches:"]
        if not envelope.preview:
            lines.append("  (no matches)")
        for item in envelope.preview:
            lines.append(f"  [{item.id}] {item.description} ({item.data_type})")
        return "\n".join(lines)

    if isinstance(envelope, GenericPreview):
        return "Nutrition provider response:\n" + json.dumps(envelope.raw, indent=2)

    items = envelope.items if isinstance(envelope.items, list) else []
    lines = ["Parsed ingredients:"]
    for item in items:
        if isinstance(item, dict):
            lines.extend(format_parsed_item(item))
    return "\n".join(lines)
