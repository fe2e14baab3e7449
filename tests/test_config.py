"""Tests for settings loading."""

import dataclasses
import os
import pytest
import yaml
from tempfile import NamedTemporaryFile

from recipe_nutrition.config import (
    DEFAULT_PARSE_API_HOST,
    Settings,
    load_settings,
    log_config,
)


class TestSettings:
    """Tests for the Settings dataclass."""

    def test_defaults(self):
        settings = Settings()

        assert settings.search_url == ""
        assert settings.parse_api_host == DEFAULT_PARSE_API_HOST
        assert settings.parse_mock_enabled is False
        assert settings.search_timeout == 10.0
        assert settings.parse_timeout == 15.0
        assert settings.recipes_path is None

    def test_is_immutable(self):
        settings = Settings()

        with pytest.raises(dataclasses.FrozenInstanceError):
            settings.search_url = "https://example.com"

    def test_parse_endpoint_from_host(self):
        settings = Settings(parse_api_host="parser.example.com")
        assert settings.parse_endpoint == "https://parser.example.com/recipes/parseIngredients"

    def test_parse_endpoint_override(self):
        settings = Settings(parse_api_url="http://localhost:9000/parse")
        assert settings.parse_endpoint == "http://localhost:9000/parse"

    def test_blank_host_falls_back_to_default(self):
        assert Settings(parse_api_host="").parse_api_host == DEFAULT_PARSE_API_HOST


class TestFromEnv:
    """Tests for environment-based settings."""

    def test_reads_all_variables(self):
        environ = {
            "NUTRITION_API_URL": "https://api.nal.usda.gov/fdc/v1/foods/search",
            "NUTRITION_API_KEY": "usda-key",
            "NUTRITION_APP_ID": "app-1",
            "NUTRITION_PROVIDER": "USDA",
            "SPOONACULAR_API_KEY": "rapid-key",
            "SPOONACULAR_API_HOST": "parser.example.com",
            "SPOONACULAR_API_URL": "http://localhost:9000/parse",
            "SPOONACULAR_MOCK": "TRUE",
            "NUTRITION_TIMEOUT": "4",
            "PARSE_TIMEOUT": "6.5",
            "RECIPES_PATH": "data/recipes.json",
            "PORT": "8080",
        }

        settings = Settings.from_env(environ)

        assert settings.search_url == "https://api.nal.usda.gov/fdc/v1/foods/search"
        assert settings.search_api_key == "usda-key"
        assert settings.search_app_id == "app-1"
        assert settings.search_provider == "usda"
        assert settings.parse_api_key == "rapid-key"
        assert settings.parse_api_host == "parser.example.com"
        assert settings.parse_api_url == "http://localhost:9000/parse"
        assert settings.parse_mock_enabled is True
        assert settings.search_timeout == 4.0
        assert settings.parse_timeout == 6.5
        assert settings.recipes_path == "data/recipes.json"
        assert settings.port == 8080

    @pytest.mark.parametrize("value,expected", [("true", True), ("True", True), ("1", False), ("yes", False), ("false", False)])
    def test_mock_flag_only_true_enables(self, value, expected):
        assert Settings.from_env({"SPOONACULAR_MOCK": value}).parse_mock_enabled is expected

    def test_empty_environment(self):
        assert Settings.from_env({}) == Settings()

    def test_credentials_stripped(self):
        assert Settings.from_env({"NUTRITION_API_KEY": "  key  "}).search_api_key == "key"


class TestLoadSettings:
    """Tests for YAML + environment loading."""

    def _write_yaml(self, data):
        with NamedTemporaryFile(mode="w", suffix=".yaml", delete=False) as f:
            yaml.dump(data, f)
            return f.name

    def test_yaml_values(self):
        path = self._write_yaml({
            "search_url": "https://api.edamam.com/api/nutrition-data",
            "parse_mock_enabled": True,
            "search_timeout": 12,
            "unknown_key": "ignored",
        })
        try:
            settings = load_settings(path, environ={})
        finally:
            os.unlink(path)

        assert settings.search_url == "https://api.edamam.com/api/nutrition-data"
        assert settings.parse_mock_enabled is True
        assert settings.search_timeout == 12.0

    def test_environment_overrides_yaml(self):
        path = self._write_yaml({"search_url": "https://from-yaml", "search_api_key": "yaml-key"})
        try:
            settings = load_settings(path, environ={"NUTRITION_API_KEY": "env-key"})
        finally:
            os.unlink(path)

        assert settings.search_url == "https://from-yaml"
        assert settings.search_api_key == "env-key"

    def test_no_file(self):
        assert load_settings(None, environ={"NUTRITION_API_URL": "https://x"}).search_url == "https://x"

    def test_missing_file(self):
        with pytest.raises(FileNotFoundError):
            load_settings("/nonexistent/settings.yaml", environ={})

    def test_non_mapping_yaml(self):
        path = self._write_yaml(["not", "a", "mapping"])
        try:
            with pytest.raises(ValueError):
                load_settings(path, environ={})
        finally:
            os.unlink(path)


class TestLogConfig:
    """Tests for the startup config log line."""

    def test_credentials_not_logged(self, caplog):
        settings = Settings(search_api_key="secret-usda", parse_api_key="secret-rapid")

        with caplog.at_level("INFO", logger="recipe_nutrition.config"):
            log_config(settings)

        assert "CONFIG:" in caplog.text
        assert "secret-usda" not in caplog.text
        assert "secret-rapid" not in caplog.text
