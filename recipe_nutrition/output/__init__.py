"""Output formatting for lookup results."""

from recipe_nutrition.output.formatters import (
    format_envelope_json,
    format_envelope_text,
    format_nutrient,
    format_parsed_item,
)

__all__ = [
    "format_envelope_json",
    "format_envelope_text",
    "format_nutrient",
    "format_parsed_item",
]
