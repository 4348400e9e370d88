"""
LLM-based translation providers.

This module provides:
- OpenAIProvider: chat completions through the official `openai` SDK
- GeminiProvider: Google Gemini `generateContent` over plain HTTP

Both share BaseLLMProvider, which owns the prompts and answer parsing.
A batch is sent as one numbered list and the model is asked to answer
with the translations separated by BATCH_SEPARATOR; the answer is split
back into exactly one translation per input string.

Neither provider retries on its own: the SDK client is created with
max_retries=0 and the orchestrator applies its retry policy.
"""

from __future__ import annotations

import logging
import os
from abc import ABC, abstractmethod
from typing import Optional, Sequence

import openai
import requests
from openai import OpenAI

from translate_ai.translate.base import (
    BATCH_SEPARATOR,
    APIError,
    MissingCredentialError,
    ProviderConfig,
    TranslationError,
    TranslationProvider,
    split_batch,
)

logger = logging.getLogger(__name__)

GEMINI_API_URL = "https://generativelanguage.googleapis.com/v1beta"


class BaseLLMProvider(TranslationProvider, ABC):
    """Base class for chat-style LLM providers.

    Provides common functionality:
    - Prompt construction for single strings and batches
    - Response cleanup
    - Batch splitting on BATCH_SEPARATOR
    """

    DEFAULT_MODEL = ""

    def __init__(self, api_key: Optional[str] = None, config: Optional[ProviderConfig] = None):
        self.config = config or ProviderConfig()
        self.api_key = api_key
        self.model = self.config.model or self.DEFAULT_MODEL

    @abstractmethod
    def _complete(self, system_prompt: str, user_prompt: str, max_tokens: int) -> Optional[str]:
        """Send one request; return the answer text or None if the response had none."""
        pass

    # ------------------------------------------------------------------
    # Prompts
    # ------------------------------------------------------------------

    def build_system_prompt(self) -> str:
        return (
            "You are a professional translator specializing in software localization. "
            "Provide accurate, contextually appropriate translations that maintain "
            "the original meaning and tone."
        )

    def build_batch_system_prompt(self) -> str:
        return (
            "You are a professional translator. Translate the following texts maintaining "
            "consistency across all translations. Return only the translations in the same "
            f"order, separated by {BATCH_SEPARATOR} markers."
        )

    def build_user_prompt(self, text: str, target_lang: str, context: Optional[str] = None) -> str:
        prompt = f'Translate the following text to {target_lang}:\n\n"{text}"'
        if context:
            prompt += f"\n\nContext: This text appears in {context}"
        prompt += "\n\nProvide only the translation, no explanation."
        return prompt

    def build_batch_prompt(
        self,
        texts: Sequence[str],
        target_lang: str,
        contexts: Optional[Sequence[Optional[str]]] = None,
    ) -> str:
        lines = [
            f"Translate the following texts to {target_lang}. "
            f"Return exactly {len(texts)} translations separated by {BATCH_SEPARATOR}:",
            "",
        ]
        for i, text in enumerate(texts):
            line = f'{i + 1}. "{text}"'
            if contexts and i < len(contexts) and contexts[i]:
                line += f" (Context: {contexts[i]})"
            lines.append(line)
        return "\n".join(lines)

    def parse_response(self, response: str) -> str:
        """Strip quotes and code fences the model wrapped around its answer."""
        cleaned = response.strip()
        if cleaned.startswith("```"):
            lines = cleaned.split("\n")
            lines = lines[1:-1] if lines[-1].strip() == "```" else lines[1:]
            cleaned = "\n".join(lines).strip()
        if len(cleaned) >= 2 and cleaned[0] == cleaned[-1] and cleaned[0] in "\"'":
            cleaned = cleaned[1:-1].strip()
        return cleaned

    # ------------------------------------------------------------------
    # TranslationProvider
    # ------------------------------------------------------------------

    def translate(self, text: str, target_lang: str, context: Optional[str] = None) -> str:
        answer = self._complete(
            self.build_system_prompt(),
            self.build_user_prompt(text, self.normalize_language(target_lang), context),
            self.config.max_tokens,
        )
        if not answer:
            return text
        return self.parse_response(answer) or text

    def translate_batch(
        self,
        texts: Sequence[str],
        target_lang: str,
        contexts: Optional[Sequence[Optional[str]]] = None,
    ) -> list[str]:
        if not texts:
            return []
        answer = self._complete(
            self.build_batch_system_prompt(),
            self.build_batch_prompt(texts, self.normalize_language(target_lang), contexts),
            self.config.batch_max_tokens,
        )
        if not answer:
            logger.warning("%s returned no batch translation, keeping originals", self.name)
            return list(texts)
        return split_batch(answer, len(texts), self.name)


class OpenAIProvider(BaseLLMProvider):
    """OpenAI chat-completion provider.

    Usage:
        provider = OpenAIProvider(api_key="sk-...")
        provider.translate("Save changes", "fr", context="<Button>")
    """

    DEFAULT_MODEL = "gpt-4o-mini"

    def __init__(
        self,
        api_key: Optional[str] = None,
        config: Optional[ProviderConfig] = None,
        client: Optional[OpenAI] = None,
    ):
        super().__init__(api_key or os.getenv("OPENAI_API_KEY"), config)
        self._client = client

    @property
    def name(self) -> str:
        return "openai"

    def _get_client(self) -> OpenAI:
        """Lazy initialization of the OpenAI client."""
        if self._client is None:
            if not self.api_key:
                raise MissingCredentialError(self.name, "OPENAI_API_KEY")
            kwargs = {
                "api_key": self.api_key,
                "timeout": self.config.timeout,
                "max_retries": 0,
            }
            if self.config.base_url:
                kwargs["base_url"] = self.config.base_url
            self._client = OpenAI(**kwargs)
        return self._client

    def _complete(self, system_prompt: str, user_prompt: str, max_tokens: int) -> Optional[str]:
        client = self._get_client()
        try:
            response = client.chat.completions.create(
                model=self.model,
                messages=[
                    {"role": "system", "content": system_prompt},
                    {"role": "user", "content": user_prompt},
                ],
                max_tokens=max_tokens,
                temperature=self.config.temperature,
            )
        except openai.APIStatusError as e:
            raise APIError(f"HTTP {e.status_code}: {e.message}", self.name, e.status_code) from e
        except openai.APIConnectionError as e:
            raise TranslationError(f"Network request failed: {e}", self.name) from e
        except openai.OpenAIError as e:
            raise TranslationError(f"Translation failed: {e}", self.name) from e

        if not response.choices:
            return None
        content = response.choices[0].message.content
        return content.strip() if content else None


class GeminiProvider(BaseLLMProvider):
    """Google Gemini provider using the REST generateContent endpoint.

    Usage:
        provider = GeminiProvider(api_key="...")
        provider.translate_batch(["Save", "Cancel"], "de")
    """

    DEFAULT_MODEL = "gemini-2.5-flash"

    def __init__(
        self,
        api_key: Optional[str] = None,
        config: Optional[ProviderConfig] = None,
        session: Optional[requests.Session] = None,
    ):
        super().__init__(api_key or os.getenv("GEMINI_API_KEY"), config)
        self.session = session or requests.Session()
        self.base_url = (self.config.base_url or GEMINI_API_URL).rstrip("/")

    @property
    def name(self) -> str:
        return "gemini"

    def _complete(self, system_prompt: str, user_prompt: str, max_tokens: int) -> Optional[str]:
        if not self.api_key:
            raise MissingCredentialError(self.name, "GEMINI_API_KEY")

        url = f"{self.base_url}/models/{self.model}:generateContent"
        payload = {
            "systemInstruction": {"parts": [{"text": system_prompt}]},
            "contents": [{"role": "user", "parts": [{"text": user_prompt}]}],
            "generationConfig": {
                "temperature": self.config.temperature,
                "maxOutputTokens": max_tokens,
            },
        }
        try:
            response = self.session.post(
                url,
                json=payload,
                headers={"x-goog-api-key": self.api_key},
                timeout=self.config.timeout,
            )
        except requests.RequestException as e:
            raise TranslationError(f"Network request failed: {e}", self.name) from e

        if not response.ok:
            raise APIError(
                f"HTTP {response.status_code}: {response.reason}", self.name, response.status_code
            )

        try:
            data = response.json()
            text = data["candidates"][0]["content"]["parts"][0]["text"]
        except (ValueError, KeyError, IndexError, TypeError):
            logger.warning("Gemini response without candidates")
            return None
        return text.strip() if isinstance(text, str) and text.strip() else None
