"""
End-to-end localization pipeline for translate-ai.

This module runs the complete workflow:
1. Scan the project and extract translatable strings
2. Save the extraction report
3. Translate the strings into every target language
4. Write the locale files

Design Philosophy:
- Pipeline is configurable via PipelineConfig
- Each stage is a method of its own and can be run separately
- Progress callbacks for CLI integration
- Configuration errors (unknown provider, missing key) propagate; by the
  time they can happen the extraction report is already on disk
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Optional, Sequence

from translate_ai.config import (
    DEFAULT_BASE_DELAY,
    DEFAULT_KEY_LENGTH,
    DEFAULT_LANGUAGES,
    DEFAULT_MAX_ATTEMPTS,
    DEFAULT_MAX_DELAY,
    DEFAULT_OUTPUT_DIR,
    DEFAULT_PROVIDER,
    DEFAULT_REPORT,
    ProjectConfig,
)
from translate_ai.extract.scanner import ProjectScanner, ScanReport
from translate_ai.locale.builder import LocaleFileBuilder
from translate_ai.models import ExtractedString, TranslationResult
from translate_ai.translate.orchestrator import BatchOrchestrator, RetryPolicy, TranslationStats
from translate_ai.translate.registry import ProviderRegistry, build_default_registry

logger = logging.getLogger(__name__)

# Type alias for progress callbacks
ProgressCallback = Callable[[str, float], None]


@dataclass
class PipelineConfig:
    """Configuration for the localization pipeline."""
    # Extraction
    root_dir: str = "."
    patterns: Optional[list[str]] = None  # None = JS/TS defaults
    exclude: Optional[list[str]] = None  # None = node_modules, dist, build, .git
    report_path: Optional[str] = DEFAULT_REPORT  # None = don't save the report

    # Translation
    languages: list[str] = field(default_factory=lambda: list(DEFAULT_LANGUAGES))
    provider: str = DEFAULT_PROVIDER
    batch_size: Optional[int] = None
    max_attempts: int = DEFAULT_MAX_ATTEMPTS
    base_delay: float = DEFAULT_BASE_DELAY
    max_delay: float = DEFAULT_MAX_DELAY

    # Output
    output_dir: str = DEFAULT_OUTPUT_DIR
    key_length: int = DEFAULT_KEY_LENGTH

    @classmethod
    def from_project(cls, project: ProjectConfig, root_dir: str = ".") -> "PipelineConfig":
        """Pipeline settings from a saved translate-ai.config.json."""
        return cls(
            root_dir=root_dir,
            patterns=list(project.file_patterns),
            exclude=list(project.exclude_patterns),
            languages=list(project.languages),
            provider=project.provider,
            output_dir=project.output_dir,
        )

    def to_dict(self) -> dict:
        """Serialize config for logging/debugging."""
        return {
            "root_dir": self.root_dir,
            "patterns": self.patterns,
            "exclude": self.exclude,
            "report_path": self.report_path,
            "languages": self.languages,
            "provider": self.provider,
            "batch_size": self.batch_size,
            "max_attempts": self.max_attempts,
            "base_delay": self.base_delay,
            "max_delay": self.max_delay,
            "output_dir": self.output_dir,
            "key_length": self.key_length,
        }


@dataclass
class PipelineResult:
    """Result of running the localization pipeline."""
    report: ScanReport
    config: PipelineConfig
    translations: dict[str, list[TranslationResult]] = field(default_factory=dict)
    written_files: list[Path] = field(default_factory=list)
    stats: Optional[TranslationStats] = None
    errors: list[str] = field(default_factory=list)

    @property
    def success(self) -> bool:
        return len(self.errors) == 0


class LocalizationPipeline:
    """Scan → translate → write locale files.

    Usage:
        config = PipelineConfig(root_dir="./src", languages=["fr", "es"], provider="deepl")
        pipeline = LocalizationPipeline(config)
        result = pipeline.run()
        print(result.report.total_strings, result.written_files)
    """

    def __init__(
        self,
        config: PipelineConfig | None = None,
        registry: ProviderRegistry | None = None,
        scanner: ProjectScanner | None = None,
        progress_callback: ProgressCallback | None = None,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.config = config or PipelineConfig()
        self.progress_callback = progress_callback or (lambda msg, pct: None)
        self.registry = registry or build_default_registry()
        self.scanner = scanner or ProjectScanner()
        self.orchestrator = BatchOrchestrator(
            self.registry,
            retry=RetryPolicy(
                max_attempts=self.config.max_attempts,
                base_delay=self.config.base_delay,
                max_delay=self.config.max_delay,
            ),
            batch_size=self.config.batch_size,
            sleep=sleep,
        )
        self.builder = LocaleFileBuilder(self.config.output_dir, key_length=self.config.key_length)

    def scan(self) -> ScanReport:
        """Extract strings and save the report (when report_path is set)."""
        report = self.scanner.scan(
            self.config.root_dir,
            patterns=self.config.patterns,
            exclude=self.config.exclude,
            progress_callback=lambda msg, pct: self.progress_callback(msg, pct * 0.4),
        )
        if self.config.report_path:
            report.save_json(self.config.report_path, key_length=self.config.key_length)
            logger.info("Extraction report saved to %s", self.config.report_path)
        return report

    def translate(self, strings: Sequence[ExtractedString]) -> dict[str, list[TranslationResult]]:
        """Translate strings into every configured language.

        Raises:
            ConfigurationError: Unknown provider or missing API key
        """
        return self.orchestrator.translate(
            strings,
            self.config.languages,
            self.config.provider,
            progress_callback=lambda msg, pct: self.progress_callback(msg, 0.4 + pct * 0.5),
        )

    def write_locales(
        self,
        translations: dict[str, list[TranslationResult]],
        strings: Sequence[ExtractedString],
    ) -> list[Path]:
        self.progress_callback("Writing locale files", 0.9)
        return self.builder.write(translations, strings)

    def run(self) -> PipelineResult:
        """Run all stages.

        Returns:
            PipelineResult; unreadable files are listed in `errors`
        """
        logger.debug("Pipeline config: %s", self.config.to_dict())
        report = self.scan()
        result = PipelineResult(report=report, config=self.config)
        result.errors.extend(f"{f.file}: {f.error}" for f in report.failed_files)

        strings = report.all_strings()
        result.translations = self.translate(strings)
        result.stats = self.orchestrator.last_stats
        if result.stats is not None:
            logger.info("Translation stats: %s", result.stats.to_dict())
        result.written_files = self.write_locales(result.translations, strings)

        self.progress_callback("Complete", 1.0)
        return result
