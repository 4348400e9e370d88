"""
DeepL translation provider (REST API v2).

DeepL accepts a batch natively: every text goes in its own `text` form
field and the response lists one translation per field, in order.

Keys ending in ':fx' belong to the free plan and use api-free.deepl.com.
"""

from __future__ import annotations

import logging
import os
from typing import Optional, Sequence

import requests

from translate_ai.translate.base import (
    APIError,
    BatchSizeMismatchError,
    MissingCredentialError,
    ProviderConfig,
    TranslationError,
    TranslationProvider,
)

logger = logging.getLogger(__name__)

DEEPL_API_URL = {
    "free": "https://api-free.deepl.com/v2/translate",
    "pro": "https://api.deepl.com/v2/translate",
}

LANGUAGE_MAP = {
    "en": "EN",
    "fr": "FR",
    "es": "ES",
    "de": "DE",
    "it": "IT",
    "pt": "PT",
    "ru": "RU",
    "ja": "JA",
    "zh": "ZH",
}


class DeepLProvider(TranslationProvider):
    """DeepL provider.

    Usage:
        provider = DeepLProvider(api_key="...:fx")
        provider.translate_batch(["Save", "Cancel"], "fr")   # ["Enregistrer", "Annuler"]

    Args:
        api_key: DeepL authentication key (DEEPL_API_KEY if omitted)
        pro: Force the pro (True) or free (False) endpoint; guessed from the key when None
        formality: DeepL formality setting
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        pro: Optional[bool] = None,
        formality: str = "default",
        config: Optional[ProviderConfig] = None,
        session: Optional[requests.Session] = None,
    ):
        self.api_key = api_key or os.getenv("DEEPL_API_KEY")
        self.config = config or ProviderConfig()
        self.formality = formality
        self.session = session or requests.Session()
        if self.config.base_url:
            self.url = self.config.base_url
        else:
            if pro is None:
                pro = not (self.api_key or "").endswith(":fx")
            self.url = DEEPL_API_URL["pro" if pro else "free"]

    @property
    def name(self) -> str:
        return "deepl"

    def normalize_language(self, lang: str) -> str:
        lang = super().normalize_language(lang)
        return LANGUAGE_MAP.get(lang, lang.upper())

    def _post(self, texts: Sequence[str], target_lang: str) -> Optional[list]:
        if not self.api_key:
            raise MissingCredentialError(self.name, "DEEPL_API_KEY")

        data = [("text", text) for text in texts]
        data.append(("target_lang", self.normalize_language(target_lang)))
        data.append(("formality", self.formality))
        try:
            response = self.session.post(
                self.url,
                data=data,
                headers={"Authorization": f"DeepL-Auth-Key {self.api_key}"},
                timeout=self.config.timeout,
            )
        except requests.RequestException as e:
            raise TranslationError(f"Network request failed: {e}", self.name) from e

        if not response.ok:
            raise APIError(
                f"HTTP {response.status_code}: {response.reason}", self.name, response.status_code
            )

        try:
            translations = response.json()["translations"]
        except (ValueError, KeyError, TypeError):
            logger.warning("DeepL response without translations")
            return None
        return translations if isinstance(translations, list) else None

    @staticmethod
    def _text_of(item, fallback: str) -> str:
        if isinstance(item, dict) and isinstance(item.get("text"), str) and item["text"]:
            return item["text"]
        return fallback

    def translate(self, text: str, target_lang: str, context: Optional[str] = None) -> str:
        translations = self._post([text], target_lang)
        if not translations:
            return text
        return self._text_of(translations[0], text)

    def translate_batch(
        self,
        texts: Sequence[str],
        target_lang: str,
        contexts: Optional[Sequence[Optional[str]]] = None,
    ) -> list[str]:
        if not texts:
            return []
        translations = self._post(texts, target_lang)
        if translations is None:
            return list(texts)
        if len(translations) != len(texts):
            raise BatchSizeMismatchError(self.name, len(texts), len(translations))
        return [self._text_of(item, text) for item, text in zip(translations, texts)]
