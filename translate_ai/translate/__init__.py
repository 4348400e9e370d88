"""Translation providers, the provider registry and the batch orchestrator."""

from translate_ai.translate.base import (
    BATCH_SEPARATOR,
    APIError,
    BatchSizeMismatchError,
    ConfigurationError,
    DummyProvider,
    MissingCredentialError,
    ProviderConfig,
    TranslationError,
    TranslationProvider,
    UnknownProviderError,
)
from translate_ai.translate.orchestrator import BatchOrchestrator, RetryPolicy, TranslationStats
from translate_ai.translate.registry import ProviderRegistry, build_default_registry

__all__ = [
    "BATCH_SEPARATOR",
    "APIError",
    "BatchSizeMismatchError",
    "ConfigurationError",
    "DummyProvider",
    "MissingCredentialError",
    "ProviderConfig",
    "TranslationError",
    "TranslationProvider",
    "UnknownProviderError",
    "BatchOrchestrator",
    "RetryPolicy",
    "TranslationStats",
    "ProviderRegistry",
    "build_default_registry",
]
