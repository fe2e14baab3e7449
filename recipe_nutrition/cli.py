#!/usr/bin/env python3
"""Command-line interface for the recipe nutrition proxy."""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

import uvicorn
from dotenv import load_dotenv

from recipe_nutrition.api.server import create_app
from recipe_nutrition.config import load_settings, log_config
from recipe_nutrition.lookup.errors import MissingInputError, NutritionLookupError
from recipe_nutrition.lookup.service import NutritionLookupService
from recipe_nutrition.output.formatters import format_envelope_json, format_envelope_text

EXIT_INPUT_ERROR = 2
EXIT_LOOKUP_ERROR = 3


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Store recipes and look up ingredient nutrition via upstream providers"
    )
    parser.add_argument(
        "--config",
        type=str,
        help="Optional YAML settings file (environment variables override it)"
    )
    parser.add_argument(
        "--log-level",
        type=str,
        help="Logging level (default: LOG_LEVEL setting, INFO)"
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    serve = subparsers.add_parser("serve", help="Run the HTTP server")
    serve.add_argument("--host", type=str, help="Bind address (default: HOST setting)")
    serve.add_argument("--port", type=int, help="Port (default: PORT setting)")

    lookup = subparsers.add_parser("lookup", help="Search the nutrition provider for free text")
    lookup.add_argument("text", help="Ingredient text, e.g. '2 eggs'")
    lookup.add_argument(
        "--output",
        choices=["text", "json"],
        default="text",
        help="Output format: text (default) or json"
    )

    parse = subparsers.add_parser("parse", help="Parse an ingredient list with the ingredient parser")
    parse.add_argument(
        "ingredients",
        help="Ingredient list (one per line), or @path to read it from a file"
    )
    parse.add_argument("--servings", type=str, default="1", help="Servings (default: 1)")
    parse.add_argument(
        "--no-nutrition",
        action="store_true",
        help="Do not request nutrition information"
    )
    parse.add_argument(
        "--output",
        choices=["text", "json"],
        default="text",
        help="Output format: text (default) or json"
    )
    return parser


def _read_ingredients(value: str) -> str:
    if value.startswith("@"):
        return Path(value[1:]).read_text()
    return value


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point."""
    load_dotenv()
    args = build_parser().parse_args(argv)

    try:
        settings = load_settings(args.config)
    except (OSError, ValueError) as e:
        print(f"Error: could not load settings: {e}", file=sys.stderr)
        return 1

    logging.basicConfig(
        level=(args.log_level or settings.log_level).upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    log_config(settings)

    if args.command == "serve":
        uvicorn.run(create_app(settings), host=args.host or settings.host, port=args.port or settings.port)
        return 0

    service = NutritionLookupService(settings)
    try:
        if args.command == "lookup":
            envelope = service.lookup_by_text(args.text)
        else:
            envelope = service.parse_ingredients({
                "ingredientList": _read_ingredients(args.ingredients),
                "servings": args.servings,
                "includeNutrition": not args.no_nutrition,
            })
    except MissingInputError as e:
        print(f"Error: {e.message}", file=sys.stderr)
        return EXIT_INPUT_ERROR
    except NutritionLookupError as e:
        print(f"Error: {e.message}", file=sys.stderr)
        if e.details is not None:
            print(f"Details: {e.details}", file=sys.stderr)
        return EXIT_LOOKUP_ERROR

    if args.output == "json":
        print(format_envelope_json(envelope))
    else:
        print(format_envelope_text(envelope))
    return 0


if __name__ == "__main__":
    sys.exit(main())
