"""
Locale file generation.

For every language two files are written to the output directory:

    <lang>.json            {"key": "translated text", ...}
    <lang>-i18next.json    {"translation": {"key": "translated text", ...}}

Keys come from ExtractedString.key_for() with the builder's key_length; the
extraction report must be saved with the same key_length for the keys to match.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Sequence

from translate_ai.config import DEFAULT_KEY_LENGTH, DEFAULT_OUTPUT_DIR
from translate_ai.models import ExtractedString, TranslationResult

logger = logging.getLogger(__name__)

NAMESPACE = "translation"


@dataclass
class LocaleFiles:
    """The two serialised forms of one language's translations."""
    flat: dict[str, str]

    @property
    def namespaced(self) -> dict[str, dict[str, str]]:
        return {NAMESPACE: self.flat}


class LocaleFileBuilder:
    """Turn per-language translation results into locale files.

    Usage:
        builder = LocaleFileBuilder("locales")
        paths = builder.write(results, strings)
        # locales/fr.json, locales/fr-i18next.json, ...
    """

    def __init__(self, output_dir: Path | str = DEFAULT_OUTPUT_DIR, key_length: int = DEFAULT_KEY_LENGTH):
        self.output_dir = Path(output_dir)
        self.key_length = key_length

    def build_map(
        self,
        results: Sequence[TranslationResult],
        strings: Sequence[ExtractedString],
    ) -> dict[str, str]:
        """Key → translated text for one language.

        `results[i]` must belong to `strings[i]`. When two different texts
        derive the same key, the later one wins.
        """
        if len(results) != len(strings):
            raise ValueError(
                f"Got {len(results)} translations for {len(strings)} extracted strings"
            )

        mapping: dict[str, str] = {}
        sources: dict[str, str] = {}
        for result, extracted in zip(results, strings):
            key = extracted.key_for(self.key_length)
            previous = sources.get(key)
            if previous is not None and previous != extracted.text:
                logger.warning(
                    "Key collision on '%s': \"%s\" replaces \"%s\"", key, extracted.text, previous
                )
            sources[key] = extracted.text
            mapping[key] = result.translated_text
        return mapping

    def build(
        self,
        translations: Mapping[str, Sequence[TranslationResult]],
        strings: Sequence[ExtractedString],
    ) -> dict[str, LocaleFiles]:
        return {
            lang: LocaleFiles(flat=self.build_map(results, strings))
            for lang, results in translations.items()
        }

    def write(
        self,
        translations: Mapping[str, Sequence[TranslationResult]],
        strings: Sequence[ExtractedString],
    ) -> list[Path]:
        """Write both files for every language; returns the written paths."""
        self.output_dir.mkdir(parents=True, exist_ok=True)
        written: list[Path] = []
        for lang, files in self.build(translations, strings).items():
            flat_path = self.output_dir / f"{lang}.json"
            i18next_path = self.output_dir / f"{lang}-i18next.json"
            self._dump(flat_path, files.flat)
            self._dump(i18next_path, files.namespaced)
            written.extend([flat_path, i18next_path])
            logger.info("%s translations saved (%d keys)", lang, len(files.flat))
        return written

    @staticmethod
    def _dump(path: Path, data: dict) -> None:
        path.write_text(json.dumps(data, indent=2, ensure_ascii=False) + "\n", encoding="utf-8")
