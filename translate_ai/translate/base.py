"""
Translation provider interface, errors and the offline DummyProvider.

This module defines:
- TranslationProvider: the two-operation contract every backend implements
- The error taxonomy shared by providers, registry and orchestrator
- Batch helpers for providers that return one concatenated answer
- DummyProvider for tests and offline runs

Error taxonomy:
    TranslationError        transport/API failure, recovered by the orchestrator
      APIError              non-OK HTTP status (carries status_code)
      BatchSizeMismatchError  batch answer does not line up with the input
    ConfigurationError      fatal, reported to the caller
      MissingCredentialError  no API key for the requested provider
      UnknownProviderError    provider name not registered

Design Philosophy:
- Providers are stateless apart from their HTTP client
- A missing field in a successful response means "no translation": the
  provider returns the original text instead of raising
"""

from __future__ import annotations

import re
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional, Sequence

from translate_ai.utils import normalize_language_code

# Marker between translations when a service answers a batch in one text
BATCH_SEPARATOR = "|||"

# Client-side status codes worth retrying (every 5xx is retried too)
RETRYABLE_STATUS = frozenset({408, 409, 425, 429})

_NUMBERING = re.compile(r"^\s*\d+[.)]\s+")


class TranslationError(Exception):
    """A provider failed to translate (network, HTTP or protocol problem)."""

    def __init__(self, message: str, provider: str, retryable: bool = True):
        super().__init__(message)
        self.provider = provider
        self.retryable = retryable


class APIError(TranslationError):
    """Non-success HTTP response from a translation service."""

    def __init__(self, message: str, provider: str, status_code: Optional[int] = None):
        retryable = status_code is None or status_code in RETRYABLE_STATUS or status_code >= 500
        super().__init__(message, provider, retryable=retryable)
        self.status_code = status_code


class BatchSizeMismatchError(TranslationError):
    """A batch answer split into a different number of pieces than requested."""

    def __init__(self, provider: str, expected: int, received: int):
        super().__init__(
            f"Expected {expected} translations, got {received}", provider, retryable=False
        )
        self.expected = expected
        self.received = received


class ConfigurationError(Exception):
    """Setup problem that makes translation impossible (never retried)."""


class MissingCredentialError(ConfigurationError):
    def __init__(self, service: str, env_var: str):
        super().__init__(
            f"No API key for {service}. Set {env_var} or run: "
            f"translate-ai keys set {service}"
        )
        self.service = service
        self.env_var = env_var


class UnknownProviderError(ConfigurationError):
    def __init__(self, name: str, available: Sequence[str]):
        listed = ", ".join(available) if available else "none"
        super().__init__(f"Provider '{name}' not found. Available providers: {listed}")
        self.name = name
        self.available = list(available)


@dataclass
class ProviderConfig:
    """Configuration shared by the remote providers."""
    model: Optional[str] = None
    temperature: float = 0.3
    max_tokens: int = 150
    batch_max_tokens: int = 1000
    timeout: float = 30.0
    base_url: Optional[str] = None


def split_batch(answer: str, expected: int, provider: str) -> list[str]:
    """Split a concatenated batch answer into exactly `expected` translations.

    Pieces are trimmed; "1. " numbering and wrapping quotes that models
    tend to echo back from the prompt are removed.

    Raises:
        BatchSizeMismatchError: The answer holds a different number of pieces
    """
    pieces = [clean_piece(p) for p in answer.split(BATCH_SEPARATOR)]
    # a trailing separator leaves one empty piece behind
    if len(pieces) == expected + 1 and not pieces[-1]:
        pieces.pop()
    if len(pieces) != expected:
        raise BatchSizeMismatchError(provider, expected, len(pieces))
    return pieces


def clean_piece(piece: str) -> str:
    cleaned = _NUMBERING.sub("", piece.strip(), count=1).strip()
    if len(cleaned) >= 2 and cleaned[0] == cleaned[-1] and cleaned[0] in "\"'":
        cleaned = cleaned[1:-1].strip()
    return cleaned


class TranslationProvider(ABC):
    """Abstract base class for translation backends.

    All providers implement:
    - translate(): one string
    - translate_batch(): many strings, same length and order as the input

    A provider raises TranslationError (or a subclass) on failure; the
    orchestrator decides what to do about it.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Registry name of the provider (e.g. 'openai', 'deepl')."""
        pass

    @abstractmethod
    def translate(self, text: str, target_lang: str, context: Optional[str] = None) -> str:
        """Translate a single string.

        Args:
            text: Source text
            target_lang: Target language code (e.g. 'fr', 'pt-BR')
            context: Where the text appears in the UI (e.g. '<h1>')

        Returns:
            Translated text (the original text when the service had no answer)
        """
        pass

    def translate_batch(
        self,
        texts: Sequence[str],
        target_lang: str,
        contexts: Optional[Sequence[Optional[str]]] = None,
    ) -> list[str]:
        """Translate several strings.

        Default implementation calls translate() in a loop.
        Override for services that accept batches.
        """
        return [
            self.translate(text, target_lang, contexts[i] if contexts else None)
            for i, text in enumerate(texts)
        ]

    def normalize_language(self, lang: str) -> str:
        """Language code in the form the service expects (lowercase by default)."""
        return normalize_language_code(lang)


class DummyProvider(TranslationProvider):
    """A dummy provider for testing and offline runs.

    Modes:
    - 'echo': Return the input unchanged
    - 'upper': Return uppercase version
    - 'prefix': Add a [lang] prefix
    - 'reverse': Reverse the text (for debugging)
    """

    MODES = ("echo", "upper", "prefix", "reverse")

    def __init__(self, mode: str = "prefix"):
        if mode not in self.MODES:
            raise ValueError(f"Unknown dummy mode '{mode}'. Available: {', '.join(self.MODES)}")
        self.mode = mode

    @property
    def name(self) -> str:
        return "dummy"

    def translate(self, text: str, target_lang: str, context: Optional[str] = None) -> str:
        if self.mode == "echo":
            return text
        if self.mode == "upper":
            return text.upper()
        if self.mode == "reverse":
            return text[::-1]
        return f"[{self.normalize_language(target_lang)}] {text}"
