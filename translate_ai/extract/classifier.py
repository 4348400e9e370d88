"""
Heuristics deciding whether a text fragment is user-facing.

The filter is deliberately permissive: a false positive costs one extra
entry in a locale file, a false negative leaves text untranslated.
"""

from __future__ import annotations

import re

MIN_LENGTH = 2

# All patterns are applied with fullmatch()
_WHITESPACE_ONLY = re.compile(r"\s*")
_IDENTIFIER = re.compile(r"[A-Za-z_$][A-Za-z0-9_$]*")
_DOTS_AND_SLASHES = re.compile(r"[./\\]+")
_RELATIVE_PATH = re.compile(r"\.{1,2}[/\\]\S*")
_NUMBER = re.compile(r"[0-9]+(\.[0-9]+)?")
_HEX_COLOR = re.compile(r"#[0-9a-fA-F]{3,8}")

# React props that show up in code-like strings
_CODE_MARKERS = ("className", "onClick")


def should_extract(text: str) -> bool:
    """Return True when `text` looks like translatable, human-readable text.

    Rejected:
        - shorter than two characters, or whitespace only
        - bare identifiers ("submitButton", "$ref")
        - relative paths ("../", "./src/App")
        - integers and decimals ("42", "3.14")
        - hex colours ("#fff", "#FF0000")
        - anything mentioning className or onClick
    """
    if not text or len(text) < MIN_LENGTH:
        return False
    if _WHITESPACE_ONLY.fullmatch(text):
        return False
    if _IDENTIFIER.fullmatch(text):
        return False
    if _DOTS_AND_SLASHES.fullmatch(text) or _RELATIVE_PATH.fullmatch(text):
        return False
    if _NUMBER.fullmatch(text):
        return False
    if _HEX_COLOR.fullmatch(text):
        return False
    if any(marker in text for marker in _CODE_MARKERS):
        return False
    return True
