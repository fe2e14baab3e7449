"""Process configuration for the recipe nutrition proxy.

Settings are read once at startup (optional YAML file, then environment
variables) and handed to the lookup service as an immutable object.
Nothing in the dispatch path reads ``os.environ`` directly.
"""

import logging
import os
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import yaml

logger = logging.getLogger(__name__)

DEFAULT_PARSE_API_HOST = "spoonacular-recipe-food-nutrition-v1.p.rapidapi.com"
DEFAULT_SEARCH_TIMEOUT = 10.0
DEFAULT_PARSE_TIMEOUT = 15.0

# Environment variable -> Settings field
ENV_VARS = {
    "NUTRITION_API_URL": "search_url",
    "NUTRITION_API_KEY": "search_api_key",
    "NUTRITION_APP_ID": "search_app_id",
    "NUTRITION_PROVIDER": "search_provider",
    "NUTRITION_TIMEOUT": "search_timeout",
    "SPOONACULAR_API_KEY": "parse_api_key",
    "SPOONACULAR_API_HOST": "parse_api_host",
    "SPOONACULAR_API_URL": "parse_api_url",
    "SPOONACULAR_MOCK": "parse_mock_enabled",
    "PARSE_TIMEOUT": "parse_timeout",
    "RECIPES_PATH": "recipes_path",
    "HOST": "host",
    "PORT": "port",
    "LOG_LEVEL": "log_level",
}


def _as_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    return str(value or "").strip().lower() == "true"


@dataclass(frozen=True)
class Settings:
    """Immutable configuration for the nutrition lookup core and HTTP server.

    Attributes:
        search_url: Target URL of the text-search provider
        search_api_key: Credential for the search provider
        search_app_id: Separate app id, overrides ``app_id`` on generic calls
        search_provider: Explicit provider kind ("usda" or "generic");
            when unset the kind is inferred from ``search_url``
        parse_api_key: RapidAPI key for the ingredient-parsing provider
        parse_api_host: RapidAPI host for the ingredient-parsing provider
        parse_api_url: Full URL override for the ingredient-parsing endpoint
        parse_mock_enabled: Serve a fixed example payload when no parse key
        search_timeout: Seconds to wait on the search provider
        parse_timeout: Seconds to wait on the ingredient-parsing provider
        recipes_path: JSON file backing the recipe store (None = in memory)
    """

    search_url: str = ""
    search_api_key: str = ""
    search_app_id: str = ""
    search_provider: str = ""
    parse_api_key: str = ""
    parse_api_host: str = DEFAULT_PARSE_API_HOST
    parse_api_url: str = ""
    parse_mock_enabled: bool = False
    search_timeout: float = DEFAULT_SEARCH_TIMEOUT
    parse_timeout: float = DEFAULT_PARSE_TIMEOUT
    recipes_path: Optional[str] = None
    host: str = "0.0.0.0"
    port: int = 3000
    log_level: str = "INFO"

    def __post_init__(self):
        # Coerce loosely-typed values coming from env/YAML.
        object.__setattr__(self, "parse_mock_enabled", _as_bool(self.parse_mock_enabled))
        object.__setattr__(self, "search_timeout", float(self.search_timeout))
        object.__setattr__(self, "parse_timeout", float(self.parse_timeout))
        object.__setattr__(self, "port", int(self.port))
        for name in ("search_url", "search_api_key", "search_app_id", "parse_api_key", "parse_api_url"):
            object.__setattr__(self, name, str(getattr(self, name) or "").strip())
        object.__setattr__(
            self, "search_provider", str(self.search_provider or "").strip().lower()
        )
        object.__setattr__(
            self, "parse_api_host", str(self.parse_api_host or "").strip() or DEFAULT_PARSE_API_HOST
        )

    @property
    def parse_endpoint(self) -> str:
        """Resolved ingredient-parsing URL (override wins over host)."""
        return self.parse_api_url or f"https://{self.parse_api_host}/recipes/parseIngredients"

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "Settings":
        """Build settings from a dict, ignoring unknown keys.

        Raises:
            ValueError: If a value cannot be coerced to its field type
        """
        known = {f.name for f in fields(cls)}
        return cls(**{k: v for k, v in data.items() if k in known and v is not None})

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Settings":
        """Create settings from environment variables.

        Args:
            environ: Mapping to read instead of ``os.environ`` (for tests)
        """
        return cls.from_mapping(_env_overrides(environ))


def _env_overrides(environ: Optional[Mapping[str, str]]) -> Dict[str, Any]:
    env = os.environ if environ is None else environ
    return {field_name: env[var] for var, field_name in ENV_VARS.items() if env.get(var) not in (None, "")}


def load_settings(
    config_path: Optional[str] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> Settings:
    """Load settings from an optional YAML file, overlaid with environment variables.

    Args:
        config_path: Path to YAML file with Settings field names as keys
        environ: Mapping to read instead of ``os.environ``

    Returns:
        Settings instance

    Raises:
        FileNotFoundError: If ``config_path`` is given but doesn't exist
        ValueError: If the YAML document is not a mapping
    """
    data: Dict[str, Any] = {}
    if config_path:
        with open(Path(config_path), "r") as f:
            loaded = yaml.safe_load(f) or {}
        if not isinstance(loaded, dict):
            raise ValueError(f"Config file {config_path} must contain a mapping")
        data.update(loaded)

    settings = Settings.from_mapping(data)
    overrides = _env_overrides(environ)
    if overrides:
        settings = replace(settings, **overrides)
    return settings


def log_config(settings: Settings) -> None:
    """Log a one-line configuration summary. Credentials are reported by presence only."""
    logger.info(
        "CONFIG: search_url=%s search_provider=%s search_key=%s app_id=%s "
        "parse_key=%s parse_endpoint=%s parse_mock=%s timeouts=%ss/%ss recipes=%s",
        settings.search_url or "<unset>",
        settings.search_provider or "<auto>",
        bool(settings.search_api_key),
        bool(settings.search_app_id),
        bool(settings.parse_api_key),
        settings.parse_endpoint,
        settings.parse_mock_enabled,
        settings.search_timeout,
        settings.parse_timeout,
        settings.recipes_path or "<memory>",
    )
