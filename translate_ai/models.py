"""
Core data models for translate-ai.

- ExtractedString: one piece of user-facing text found in a source file
- ScanResult: the strings found in one file, in document order
- TranslationResult: one translated string for one target language

ExtractedString is immutable once the tree walk creates it; everything
downstream reads it and never changes it.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional

from translate_ai.locale.keygen import DEFAULT_MAX_LENGTH, derive_key


class StringKind(str, Enum):
    """Where in the syntax tree a string was found."""
    JSX_TEXT = "jsx_text"
    JSX_ATTRIBUTE = "jsx_attribute"
    STRING_LITERAL = "string_literal"
    TEMPLATE_LITERAL = "template_literal"


@dataclass(frozen=True)
class ExtractedString:
    """A translatable text fragment with its source position.
    
    Attributes:
        text: Extracted content (template placeholders normalised to {name})
        line: 1-based line of the node start
        column: 0-based character column of the node start
        context: Human-readable enclosing construct (e.g. "<h1>", "Variable: title")
        kind: Extraction origin
    """
    text: str
    line: int
    column: int
    context: str
    kind: StringKind
    
    @property
    def key(self) -> str:
        return self.key_for()
    
    def key_for(self, max_length: int = DEFAULT_MAX_LENGTH) -> str:
        """Translation key; report and locale files must pass the same max_length."""
        return derive_key(self.text, max_length)
    
    def to_dict(self, key_length: int = DEFAULT_MAX_LENGTH) -> dict[str, Any]:
        return {
            "text": self.text,
            "line": self.line,
            "column": self.column,
            "context": self.context,
            "type": self.kind.value,
            "key": self.key_for(key_length),
        }
    
    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ExtractedString":
        # "key" is derived, never trusted from disk
        return cls(
            text=data["text"],
            line=int(data.get("line", 0)),
            column=int(data.get("column", 0)),
            context=data.get("context", ""),
            kind=StringKind(data.get("type", StringKind.STRING_LITERAL.value)),
        )


@dataclass
class ScanResult:
    """Strings extracted from a single file (path relative to the scan root)."""
    file: str
    strings: list[ExtractedString] = field(default_factory=list)
    
    @property
    def string_count(self) -> int:
        return len(self.strings)
    
    def to_dict(self, key_length: int = DEFAULT_MAX_LENGTH) -> dict[str, Any]:
        return {
            "file": self.file,
            "stringCount": self.string_count,
            "strings": [s.to_dict(key_length) for s in self.strings],
        }
    
    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ScanResult":
        return cls(
            file=data["file"],
            strings=[ExtractedString.from_dict(s) for s in data.get("strings", [])],
        )


@dataclass(frozen=True)
class TranslationResult:
    """Translation of one extracted string into one language.
    
    When every attempt failed, translated_text is the original text.
    """
    original_text: str
    translated_text: str
    language: str
    context: Optional[str] = None
    
    def to_dict(self) -> dict[str, Any]:
        return {
            "originalText": self.original_text,
            "translatedText": self.translated_text,
            "language": self.language,
            "context": self.context,
        }
