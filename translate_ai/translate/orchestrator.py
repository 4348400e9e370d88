"""
Batch translation with per-item fallback.

For every target language the orchestrator:
1. sends all strings (or consecutive chunks of `batch_size`) in one batch call
2. on any batch failure, translates each string of that batch on its own,
   retrying each one with exponential backoff
3. keeps the original text for any string whose retries all failed

The result for each language always has exactly one TranslationResult per
input string, in input order. Languages are processed one after another.

Only configuration problems (unknown provider, missing API key) escape;
everything else degrades to untranslated text.

Usage:
    orchestrator = BatchOrchestrator(build_default_registry())
    results = orchestrator.translate(strings, ["fr", "de"], provider_name="deepl")
    for original, result in zip(strings, results["fr"]):
        print(original.text, "->", result.translated_text)
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from typing import Callable, Optional, Sequence

from translate_ai.config import DEFAULT_BASE_DELAY, DEFAULT_MAX_ATTEMPTS, DEFAULT_MAX_DELAY
from translate_ai.models import ExtractedString, TranslationResult
from translate_ai.translate.base import (
    BatchSizeMismatchError,
    ConfigurationError,
    TranslationProvider,
)
from translate_ai.translate.registry import ProviderRegistry
from translate_ai.utils import chunked, retry_with_backoff, sanitize_for_log

logger = logging.getLogger(__name__)


@dataclass
class RetryPolicy:
    """Exponential backoff settings for per-item fallback.

    The wait after failed attempt k is min(base_delay * 2**(k-1), max_delay).
    """
    max_attempts: int = DEFAULT_MAX_ATTEMPTS
    base_delay: float = DEFAULT_BASE_DELAY
    max_delay: Optional[float] = DEFAULT_MAX_DELAY


@dataclass
class TranslationStats:
    """Statistics from one orchestration run."""
    provider: str = ""
    languages: list[str] = field(default_factory=list)
    total_strings: int = 0
    translated: int = 0
    degraded: int = 0
    batch_failures: int = 0
    duration: float = 0.0

    @property
    def success_rate(self) -> float:
        total = self.translated + self.degraded
        return self.translated / total if total else 1.0

    def to_dict(self) -> dict:
        return {
            "provider": self.provider,
            "languages": self.languages,
            "totalStrings": self.total_strings,
            "translated": self.translated,
            "degraded": self.degraded,
            "batchFailures": self.batch_failures,
            "duration": round(self.duration, 3),
        }


def _should_retry(error: Exception) -> bool:
    if isinstance(error, ConfigurationError):
        return False
    return getattr(error, "retryable", True)


class BatchOrchestrator:
    """Translate extracted strings into several languages.

    Args:
        registry: Provider registry used to look up the provider by name
        retry: Backoff settings for the per-item fallback
        batch_size: Strings per batch call (None = all strings in one call)
        sleep: Sleep function (injectable for tests)
    """

    def __init__(
        self,
        registry: ProviderRegistry,
        retry: Optional[RetryPolicy] = None,
        batch_size: Optional[int] = None,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.registry = registry
        self.retry = retry or RetryPolicy()
        self.batch_size = batch_size
        self.sleep = sleep
        self.last_stats: Optional[TranslationStats] = None

    def translate(
        self,
        strings: Sequence[ExtractedString],
        languages: Sequence[str],
        provider_name: str,
        progress_callback: Optional[Callable[[str, float], None]] = None,
    ) -> dict[str, list[TranslationResult]]:
        """Translate every string into every language.

        Returns:
            {language: [TranslationResult, ...]} with len == len(strings)
            and the same order as `strings`

        Raises:
            UnknownProviderError: `provider_name` is not registered
            MissingCredentialError: The provider has no API key
        """
        provider = self.registry.get(provider_name)
        stats = TranslationStats(
            provider=provider.name,
            languages=list(languages),
            total_strings=len(strings),
        )
        self.last_stats = stats
        start = time.time()

        if not strings:
            logger.warning("No strings to translate")
            return {lang: [] for lang in languages}

        texts = [s.text for s in strings]
        contexts = [s.context for s in strings]
        results: dict[str, list[TranslationResult]] = {}

        for index, lang in enumerate(languages):
            if progress_callback:
                progress_callback(
                    f"Translating to {lang} using {provider.name}", index / len(languages)
                )
            logger.info("Translating %d strings to %s using %s", len(texts), lang, provider.name)

            try:
                translated = self._translate_language(provider, texts, contexts, lang, stats)
            except ConfigurationError:
                raise
            except Exception as e:
                logger.error("Failed to translate to %s: %s", lang, e)
                translated = list(texts)
                stats.degraded += len(texts)

            results[lang] = [
                TranslationResult(
                    original_text=s.text,
                    translated_text=t,
                    language=lang,
                    context=s.context,
                )
                for s, t in zip(strings, translated)
            ]

        stats.duration = time.time() - start
        if progress_callback:
            progress_callback("Translation complete", 1.0)
        return results

    def _translate_language(
        self,
        provider: TranslationProvider,
        texts: list[str],
        contexts: list[str],
        lang: str,
        stats: TranslationStats,
    ) -> list[str]:
        translated: list[str] = []
        for chunk in chunked(list(range(len(texts))), self.batch_size):
            chunk_texts = [texts[i] for i in chunk]
            chunk_contexts = [contexts[i] for i in chunk]
            try:
                batch = provider.translate_batch(chunk_texts, lang, chunk_contexts)
                if len(batch) != len(chunk_texts):
                    raise BatchSizeMismatchError(provider.name, len(chunk_texts), len(batch))
                stats.translated += len(batch)
            except ConfigurationError:
                raise
            except Exception as e:
                stats.batch_failures += 1
                logger.warning(
                    "Batch of %d strings failed for %s (%s), falling back to individual translations",
                    len(chunk_texts), provider.name, e,
                )
                batch = self._fallback(provider, chunk_texts, chunk_contexts, lang, stats)
            translated.extend(batch)
        return translated

    def _fallback(
        self,
        provider: TranslationProvider,
        texts: list[str],
        contexts: list[str],
        lang: str,
        stats: TranslationStats,
    ) -> list[str]:
        results: list[str] = []
        for text, context in zip(texts, contexts):
            try:
                translation = retry_with_backoff(
                    lambda: provider.translate(text, lang, context),
                    max_attempts=self.retry.max_attempts,
                    base_delay=self.retry.base_delay,
                    max_delay=self.retry.max_delay,
                    should_retry=_should_retry,
                    sleep=self.sleep,
                )
                stats.translated += 1
            except ConfigurationError:
                raise
            except Exception as e:
                logger.error("Failed to translate \"%s\": %s", sanitize_for_log(text), e)
                translation = text
                stats.degraded += 1
            results.append(translation)
        return results
