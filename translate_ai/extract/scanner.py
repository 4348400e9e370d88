"""
Project-wide extraction.

ProjectScanner enumerates source files, runs the TreeExtractor on each one
and aggregates the results into a ScanReport. A file that cannot be read
or parsed is recorded in `failed_files` and the scan carries on.

Usage:
    scanner = ProjectScanner()
    report = scanner.scan("./src")
    print(report.files_scanned, report.total_strings, report.by_kind())
    report.save_json("translatable-strings.json")
"""

from __future__ import annotations

import json
import logging
from collections import Counter
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Callable, Optional, Sequence

from translate_ai.config import DEFAULT_KEY_LENGTH
from translate_ai.extract.extractor import TreeExtractor
from translate_ai.extract.files import find_files
from translate_ai.models import ExtractedString, ScanResult, StringKind

logger = logging.getLogger(__name__)

FileFinder = Callable[[Path, Optional[Sequence[str]], Optional[Sequence[str]]], list[Path]]


@dataclass
class FailedFile:
    file: str
    error: str

    def to_dict(self) -> dict[str, str]:
        return {"file": self.file, "error": self.error}


@dataclass
class ScanReport:
    """Aggregated extraction results for a directory tree.

    Attributes:
        results: One entry per file that produced at least one string
        files_scanned: Number of files handed to the extractor
        failed_files: Files whose extraction failed
        generated_at: ISO timestamp of the scan
    """
    results: list[ScanResult] = field(default_factory=list)
    files_scanned: int = 0
    failed_files: list[FailedFile] = field(default_factory=list)
    generated_at: str = field(
        default_factory=lambda: datetime.now(timezone.utc).isoformat()
    )

    @property
    def total_files(self) -> int:
        return len(self.results)

    @property
    def total_strings(self) -> int:
        return sum(r.string_count for r in self.results)

    def all_strings(self) -> list[ExtractedString]:
        """Every extracted string, file by file, in document order."""
        return [s for result in self.results for s in result.strings]

    def by_kind(self) -> dict[str, int]:
        counts = Counter(s.kind.value for s in self.all_strings())
        return {kind.value: counts.get(kind.value, 0) for kind in StringKind}

    def to_dict(self, key_length: int = DEFAULT_KEY_LENGTH) -> dict[str, Any]:
        return {
            "generatedAt": self.generated_at,
            "totalFiles": self.total_files,
            "totalStrings": self.total_strings,
            "filesScanned": self.files_scanned,
            "failedFiles": [f.to_dict() for f in self.failed_files],
            "files": [r.to_dict(key_length) for r in self.results],
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ScanReport":
        results = [ScanResult.from_dict(f) for f in data.get("files", [])]
        return cls(
            results=results,
            files_scanned=int(data.get("filesScanned", len(results))),
            failed_files=[
                FailedFile(file=f["file"], error=f.get("error", ""))
                for f in data.get("failedFiles", [])
            ],
            generated_at=data.get("generatedAt") or datetime.now(timezone.utc).isoformat(),
        )

    def save_json(self, path: Path | str, key_length: int = DEFAULT_KEY_LENGTH) -> Path:
        """Write the report; `key_length` must match the one used for locale files."""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(
            json.dumps(self.to_dict(key_length), indent=2, ensure_ascii=False),
            encoding="utf-8",
        )
        return path

    @classmethod
    def load_json(cls, path: Path | str) -> "ScanReport":
        """Load a report written by save_json (keys are re-derived from text)."""
        return cls.from_dict(json.loads(Path(path).read_text(encoding="utf-8")))


class ProjectScanner:
    """Run the extractor over every matching file below a root directory.

    Args:
        extractor: TreeExtractor to use (a default one is created if omitted)
        file_finder: Callable(root, patterns, exclude) returning absolute paths
    """

    def __init__(
        self,
        extractor: Optional[TreeExtractor] = None,
        file_finder: FileFinder = find_files,
    ):
        self.extractor = extractor or TreeExtractor()
        self.file_finder = file_finder

    def scan(
        self,
        root: Path | str = ".",
        patterns: Optional[Sequence[str]] = None,
        exclude: Optional[Sequence[str]] = None,
        progress_callback: Optional[Callable[[str, float], None]] = None,
    ) -> ScanReport:
        """Extract strings from all matching files.

        Args:
            root: Directory to scan
            patterns: Include globs (None = JS/TS defaults)
            exclude: Exclude globs (None = node_modules, dist, build, .git)
            progress_callback: Optional callback(message, fraction)

        Returns:
            ScanReport with files in enumeration order
        """
        root = Path(root).resolve()
        if not root.is_dir():
            raise NotADirectoryError(f"Not a directory: {root}")

        files = self.file_finder(root, patterns, exclude)
        logger.info("Scanning %d files under %s", len(files), root)

        report = ScanReport()
        for index, path in enumerate(files):
            relative = self._relative(path, root)
            if progress_callback:
                progress_callback(f"Scanning {relative}", index / max(len(files), 1))

            report.files_scanned += 1
            try:
                outcome = self.extractor.extract_file(path)
            except Exception as e:
                # one broken file must never end the scan
                logger.exception("Unexpected error extracting %s", path)
                report.failed_files.append(FailedFile(file=relative, error=str(e)))
                continue

            if not outcome.ok:
                report.failed_files.append(FailedFile(file=relative, error=outcome.error or ""))
                continue
            if outcome.strings:
                report.results.append(ScanResult(file=relative, strings=outcome.strings))

        if progress_callback:
            progress_callback("Scan complete", 1.0)
        logger.info(
            "Found %d strings in %d of %d files (%d failed)",
            report.total_strings, report.total_files, report.files_scanned,
            len(report.failed_files),
        )
        return report

    @staticmethod
    def _relative(path: Path, root: Path) -> str:
        try:
            return Path(path).relative_to(root).as_posix()
        except ValueError:
            return Path(path).as_posix()
