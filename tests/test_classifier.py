"""
Tests for the translatable-text heuristics and key derivation.
"""

import re

import pytest

from translate_ai.extract.classifier import should_extract
from translate_ai.locale.keygen import derive_key


class TestShouldExtract:
    """Test the translatable-text predicate."""

    @pytest.mark.parametrize("text", [
        "Bonjour monde",
        "Erreur de validation",
        "OK!",
        "Save changes",
        "Créer un compte",
        "Hello, {name}",
        "3 items",
        "你好",
    ])
    def test_accepts_human_text(self, text):
        assert should_extract(text)

    @pytest.mark.parametrize("text", [
        "",
        "a",
        "   ",
        "\n\t",
        "submitButton",
        "$ref",
        "_private",
        "../",
        "./",
        "./src/App",
        "../components/Header",
        "42",
        "3.14",
        "#fff",
        "#FF0000",
        "#11223344",
        "Use className here",
        "call onClick please",
    ])
    def test_rejects_code_like_text(self, text):
        assert not should_extract(text)

    def test_trailing_newline_does_not_sneak_past(self):
        """Patterns match the whole string, not a prefix before a newline."""
        assert should_extract("42\n")
        assert should_extract("submit\n")

    def test_relative_path_needs_no_whitespace(self):
        assert should_extract("./ run the build first")


class TestDeriveKey:
    """Test translation key derivation."""

    KEY_PATTERN = re.compile(r"^[a-z0-9_]{1,50}$")

    def test_basic(self):
        assert derive_key("Erreur de validation !") == "erreur_de_validation"

    def test_accents_are_stripped(self):
        assert derive_key("Créer un compte") == "creer_un_compte"

    def test_placeholders(self):
        assert derive_key("Bonjour {name}") == "bonjour_name"

    def test_is_deterministic(self):
        assert derive_key("Save changes") == derive_key("Save changes")

    def test_truncation_has_no_trailing_underscore(self):
        text = "word " * 30
        key = derive_key(text)
        assert len(key) <= 50
        assert not key.endswith("_")
        assert self.KEY_PATTERN.match(key)

    def test_custom_length(self):
        assert derive_key("Welcome to the application", max_length=10) == "welcome_to"

    def test_non_latin_text_gets_hash_key(self):
        key = derive_key("你好")
        assert key.startswith("key_")
        assert self.KEY_PATTERN.match(key)
        assert key == derive_key("你好")
        assert key != derive_key("再见")

    @pytest.mark.parametrize("text", [
        "  Leading and trailing  ",
        "Multiple!!!   punctuation???",
        "Ünïcödé çhàrs",
        "snake_case_already",
    ])
    def test_shape(self, text):
        key = derive_key(text)
        assert self.KEY_PATTERN.match(key)
        assert not key.startswith("_")
        assert not key.endswith("_")
