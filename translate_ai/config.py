"""
Project-wide defaults and the on-disk project configuration.

Module Contents:
    APP_NAME: Application name for display purposes
    CONFIG_FILE: Name of the per-project configuration file
    DEFAULT_REPORT: Default extraction report written by `scan`
    DEFAULT_OUTPUT_DIR: Default directory for locale files
    DEFAULT_PATTERNS / DEFAULT_EXCLUDE: File selection globs
    ProjectConfig: Settings saved by `translate-ai init`

Example:
    >>> from translate_ai.config import ProjectConfig
    >>> config = ProjectConfig.load()          # falls back to defaults
    >>> print(config.languages, config.output_dir)
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

# Application name for display and identification
APP_NAME = "translate-ai"

# Per-project configuration written by `init`
CONFIG_FILE = "translate-ai.config.json"

# Extraction report written by `scan` and read by `generate`
DEFAULT_REPORT = "translatable-strings.json"

# Locale files directory
DEFAULT_OUTPUT_DIR = "locales"

DEFAULT_PATTERNS = ["**/*.{js,jsx,ts,tsx}"]
DEFAULT_EXCLUDE = ["**/node_modules/**", "**/dist/**", "**/build/**", "**/.git/**"]

DEFAULT_LANGUAGES = ["fr"]
DEFAULT_PROVIDER = "openai"

# Retry defaults for per-item fallback
DEFAULT_MAX_ATTEMPTS = 3
DEFAULT_BASE_DELAY = 1.0
DEFAULT_MAX_DELAY = 30.0

# Maximum length of a derived translation key
DEFAULT_KEY_LENGTH = 50

FRAMEWORK_PATTERNS = {
    "react": ["**/*.{js,jsx,ts,tsx}"],
    "vue": ["**/*.vue"],
    "angular": ["**/*.{ts,html}"],
    "vanilla": ["**/*.{js,html}"],
}


def generate_file_patterns(frameworks: list[str]) -> list[str]:
    """Include patterns for the selected frameworks (React patterns if none match)."""
    patterns: list[str] = []
    for framework in frameworks:
        for pattern in FRAMEWORK_PATTERNS.get(framework.lower(), []):
            if pattern not in patterns:
                patterns.append(pattern)
    return patterns or list(DEFAULT_PATTERNS)


@dataclass
class ProjectConfig:
    """Settings stored in translate-ai.config.json."""
    project_name: str = "my-project"
    frameworks: list[str] = field(default_factory=lambda: ["react"])
    languages: list[str] = field(default_factory=lambda: list(DEFAULT_LANGUAGES))
    output_dir: str = DEFAULT_OUTPUT_DIR
    provider: str = DEFAULT_PROVIDER
    file_patterns: list[str] = field(default_factory=lambda: list(DEFAULT_PATTERNS))
    exclude_patterns: list[str] = field(
        default_factory=lambda: DEFAULT_EXCLUDE + ["**/*.test.*", "**/*.spec.*"]
    )
    created_at: Optional[str] = None
    
    def to_dict(self) -> dict:
        return {
            "projectName": self.project_name,
            "frameworks": self.frameworks,
            "languages": self.languages,
            "outputDir": self.output_dir,
            "provider": self.provider,
            "filePatterns": self.file_patterns,
            "excludePatterns": self.exclude_patterns,
            "createdAt": self.created_at,
        }
    
    @classmethod
    def from_dict(cls, data: dict) -> "ProjectConfig":
        defaults = cls()
        return cls(
            project_name=data.get("projectName", defaults.project_name),
            frameworks=list(data.get("frameworks", defaults.frameworks)),
            languages=list(data.get("languages", defaults.languages)),
            output_dir=data.get("outputDir", defaults.output_dir),
            provider=data.get("provider", defaults.provider),
            file_patterns=list(data.get("filePatterns", defaults.file_patterns)),
            exclude_patterns=list(data.get("excludePatterns", defaults.exclude_patterns)),
            created_at=data.get("createdAt"),
        )
    
    @classmethod
    def load(cls, path: Path | str = CONFIG_FILE) -> "ProjectConfig":
        """Load the project config, or defaults when the file does not exist."""
        path = Path(path)
        if not path.exists():
            return cls()
        return cls.from_dict(json.loads(path.read_text(encoding="utf-8")))
    
    def save(self, path: Path | str = CONFIG_FILE) -> Path:
        path = Path(path)
        if self.created_at is None:
            self.created_at = datetime.now(timezone.utc).isoformat()
        path.write_text(json.dumps(self.to_dict(), indent=2), encoding="utf-8")
        return path
