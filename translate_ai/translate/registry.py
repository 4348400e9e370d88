"""
Provider registry.

A ProviderRegistry maps provider names to factories. It is an ordinary
object owned by whoever runs the translation (pipeline, CLI, tests), so
two registries never share state.

Usage:
    registry = build_default_registry(KeyManager())
    provider = registry.get("deepl")        # built on first request
    registry.available()                    # ['deepl', 'dummy', 'gemini', 'openai']
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Callable, Optional

from translate_ai.translate.base import (
    DummyProvider,
    ProviderConfig,
    TranslationProvider,
    UnknownProviderError,
)

if TYPE_CHECKING:
    from translate_ai.keys import KeyManager

ProviderFactory = Callable[[], TranslationProvider]


class ProviderRegistry:
    """Named translation providers, created lazily and cached."""

    def __init__(self):
        self._factories: dict[str, ProviderFactory] = {}
        self._instances: dict[str, TranslationProvider] = {}

    def register(self, name: str, factory: ProviderFactory) -> None:
        """Register a factory; replaces any provider of the same name."""
        key = name.lower()
        self._factories[key] = factory
        self._instances.pop(key, None)

    def add(self, provider: TranslationProvider) -> None:
        """Register an already constructed provider under its own name."""
        key = provider.name.lower()
        self._factories[key] = lambda: provider
        self._instances[key] = provider

    def get(self, name: str) -> TranslationProvider:
        """Return the provider registered as `name` (case-insensitive).

        Raises:
            UnknownProviderError: Nothing is registered under that name
            MissingCredentialError: The provider needs an API key that is not set
        """
        key = name.lower()
        if key not in self._factories:
            raise UnknownProviderError(name, self.available())
        if key not in self._instances:
            self._instances[key] = self._factories[key]()
        return self._instances[key]

    def available(self) -> list[str]:
        return sorted(self._factories)

    def __contains__(self, name: str) -> bool:
        return name.lower() in self._factories


def build_default_registry(
    key_manager: Optional["KeyManager"] = None,
    config: Optional[ProviderConfig] = None,
    dummy_mode: str = "prefix",
) -> ProviderRegistry:
    """Registry with the built-in providers: openai, gemini, deepl and dummy.

    API keys are looked up when a provider is first requested, so a
    missing key only matters for the provider actually used.
    """
    if key_manager is None:
        from translate_ai.keys import KeyManager
        key_manager = KeyManager()

    def openai_factory() -> TranslationProvider:
        from translate_ai.translate.llm import OpenAIProvider
        return OpenAIProvider(api_key=key_manager.require_key("openai"), config=config)

    def gemini_factory() -> TranslationProvider:
        from translate_ai.translate.llm import GeminiProvider
        return GeminiProvider(api_key=key_manager.require_key("gemini"), config=config)

    def deepl_factory() -> TranslationProvider:
        from translate_ai.translate.deepl import DeepLProvider
        return DeepLProvider(api_key=key_manager.require_key("deepl"), config=config)

    registry = ProviderRegistry()
    registry.register("openai", openai_factory)
    registry.register("gemini", gemini_factory)
    registry.register("deepl", deepl_factory)
    registry.register("dummy", lambda: DummyProvider(mode=dummy_mode))
    return registry
