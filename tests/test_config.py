"""
Tests for project configuration, API key management and small helpers.
"""

import json

import pytest

from translate_ai.config import (
    DEFAULT_PATTERNS,
    ProjectConfig,
    generate_file_patterns,
)
from translate_ai.keys import KeyManager, env_var_for
from translate_ai.translate.base import MissingCredentialError
from translate_ai.utils import (
    chunked,
    is_valid_language_code,
    normalize_language_code,
    parse_language_list,
    sanitize_for_log,
)


class TestProjectConfig:
    """Test translate-ai.config.json handling."""

    def test_defaults_when_missing(self, tmp_path):
        config = ProjectConfig.load(tmp_path / "missing.json")

        assert config.languages == ["fr"]
        assert config.provider == "openai"
        assert config.file_patterns == DEFAULT_PATTERNS

    def test_save_and_load(self, tmp_path):
        path = tmp_path / "translate-ai.config.json"
        ProjectConfig(project_name="shop", languages=["fr", "de"], provider="deepl").save(path)

        data = json.loads(path.read_text(encoding="utf-8"))
        assert data["projectName"] == "shop"
        assert data["createdAt"]

        loaded = ProjectConfig.load(path)
        assert loaded.languages == ["fr", "de"]
        assert loaded.provider == "deepl"

    def test_framework_patterns(self):
        assert generate_file_patterns(["react"]) == ["**/*.{js,jsx,ts,tsx}"]
        assert generate_file_patterns(["vue", "angular"]) == ["**/*.vue", "**/*.{ts,html}"]
        assert generate_file_patterns(["unknown"]) == DEFAULT_PATTERNS


class TestKeyManager:
    """Test API key lookup order and storage (keyring disabled)."""

    @pytest.fixture
    def km(self, tmp_path, monkeypatch):
        for var in ("OPENAI_API_KEY", "GEMINI_API_KEY", "DEEPL_API_KEY"):
            monkeypatch.delenv(var, raising=False)
        return KeyManager(config_dir=tmp_path / "keys", use_keyring=False)

    def test_env_var_names(self):
        assert env_var_for("openai") == "OPENAI_API_KEY"
        assert env_var_for("DeepL") == "DEEPL_API_KEY"
        assert env_var_for("custom") == "CUSTOM_API_KEY"

    def test_missing_key(self, km):
        assert km.get_key("openai") is None
        with pytest.raises(MissingCredentialError) as exc:
            km.require_key("openai")
        assert exc.value.env_var == "OPENAI_API_KEY"

    def test_config_file_storage(self, km):
        assert km.set_key("deepl", "abc:fx") == "config"
        assert km.get_key("deepl") == "abc:fx"
        assert km.get_key_info("deepl").source == "config"

        assert km.delete_key("deepl")
        assert km.get_key("deepl") is None

    def test_env_takes_priority(self, km, monkeypatch):
        km.set_key("gemini", "from-config")
        monkeypatch.setenv("GEMINI_API_KEY", "from-env")

        assert km.get_key("gemini") == "from-env"
        assert km.get_key_info("gemini").source == "env"

    def test_list_keys(self, km):
        services = [info.service for info in km.list_keys()]
        assert services == ["openai", "gemini", "deepl"]

    def test_mask_key(self):
        assert KeyManager.mask_key("sk-1234567890abcdef") == "sk-1...cdef"
        assert KeyManager.mask_key("short") == "*****"


class TestUtils:
    """Test helper functions."""

    def test_chunked(self):
        assert chunked([1, 2, 3, 4, 5], 2) == [[1, 2], [3, 4], [5]]
        assert chunked([1, 2, 3], None) == [[1, 2, 3]]
        assert chunked([], 2) == []

    def test_language_codes(self):
        assert normalize_language_code(" FR ") == "fr"
        assert is_valid_language_code("fr")
        assert is_valid_language_code("pt-BR")
        assert not is_valid_language_code("french")

    def test_parse_language_list(self):
        assert parse_language_list("fr, es,de fr") == ["fr", "es", "de"]
        assert parse_language_list("") == []

    def test_sanitize_for_log(self):
        assert sanitize_for_log("a" * 150, max_length=10) == "aaaaaaaaaa..."
        assert sanitize_for_log("short") == "short"
