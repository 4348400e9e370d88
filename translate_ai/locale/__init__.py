"""Translation keys and locale file output."""

from translate_ai.locale.keygen import derive_key

__all__ = ["derive_key"]
