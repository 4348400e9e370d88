"""
Translation key derivation.

A key is a pure function of the source text: accents stripped, lowercased,
every run of characters outside [a-z0-9] collapsed to one underscore, and
truncated. The extraction report and the locale files both call
derive_key(), so identical text always lands on identical keys.

Different texts can derive the same key ("Save!" and "save"); the locale
builder keeps the last one written.
"""

from __future__ import annotations

import hashlib
import re
import unicodedata

DEFAULT_MAX_LENGTH = 50

_NON_KEY_CHARS = re.compile(r"[^a-z0-9]+")


def _strip_accents(text: str) -> str:
    decomposed = unicodedata.normalize("NFD", text)
    return "".join(ch for ch in decomposed if not unicodedata.combining(ch))


def derive_key(text: str, max_length: int = DEFAULT_MAX_LENGTH) -> str:
    """Derive a lowercase, ASCII, underscore-delimited key from text.
    
    Args:
        text: Source text
        max_length: Maximum key length
        
    Returns:
        Key matching ^[a-z0-9_]{1,max_length}$ with no leading/trailing underscore
        
    Example:
        >>> derive_key("Erreur de validation !")
        'erreur_de_validation'
        >>> derive_key("Créer un compte")
        'creer_un_compte'
    """
    key = _NON_KEY_CHARS.sub("_", _strip_accents(text.lower())).strip("_")
    key = key[:max_length].rstrip("_")
    if not key:
        # Nothing ASCII survived (e.g. CJK text): fall back to a content hash
        digest = hashlib.sha1(text.encode("utf-8")).hexdigest()[:10]
        key = f"key_{digest}"[:max_length]
    return key
