"""Finding translatable strings in JavaScript/TypeScript sources."""

from translate_ai.extract.classifier import should_extract
from translate_ai.extract.extractor import FileExtraction, TreeExtractor
from translate_ai.extract.files import find_files, matches_any
from translate_ai.extract.parser import ParseError, TreeSitterParser
from translate_ai.extract.scanner import FailedFile, ProjectScanner, ScanReport

__all__ = [
    "should_extract",
    "FileExtraction",
    "TreeExtractor",
    "find_files",
    "matches_any",
    "ParseError",
    "TreeSitterParser",
    "FailedFile",
    "ProjectScanner",
    "ScanReport",
]
