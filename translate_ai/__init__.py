"""
translate-ai: AI-powered translation assistant for developers

Finds user-facing text in JavaScript/TypeScript/React sources and turns it
into translated locale files.

Core pieces:
1. Source-tree string extraction (JSX text, attributes, literals, templates)
2. Stable translation keys derived from the source text
3. Batched translation through pluggable providers with per-item fallback

License: MIT
"""

__version__ = "0.1.0"

from translate_ai.models import ExtractedString, ScanResult, StringKind, TranslationResult
from translate_ai.pipeline import LocalizationPipeline, PipelineConfig

__all__ = [
    "ExtractedString",
    "ScanResult",
    "StringKind",
    "TranslationResult",
    "LocalizationPipeline",
    "PipelineConfig",
]
