"""
Syntax trees for JavaScript/TypeScript sources via tree-sitter.

The extractor only needs something with a `parse(source, suffix)` method
returning a tree with a `root_node`; TreeSitterParser is the default.

Grammar by file suffix:
    .tsx                → TSX
    .ts / .mts / .cts   → TypeScript
    .js / .jsx / .mjs / .cjs → JavaScript (JSX included), TSX when that fails
"""

from __future__ import annotations

from typing import Any, Optional, Protocol

from tree_sitter import Language, Node, Parser, Tree

JAVASCRIPT_SUFFIXES = frozenset({".js", ".jsx", ".mjs", ".cjs"})
TYPESCRIPT_SUFFIXES = frozenset({".ts", ".mts", ".cts"})
TSX_SUFFIXES = frozenset({".tsx"})
SUPPORTED_SUFFIXES = JAVASCRIPT_SUFFIXES | TYPESCRIPT_SUFFIXES | TSX_SUFFIXES


class ParseError(Exception):
    """A source file could not be turned into a usable syntax tree."""

    def __init__(self, message: str, line: Optional[int] = None):
        super().__init__(message)
        self.line = line


class SourceParser(Protocol):
    """Anything that can turn source bytes into a walkable syntax tree."""

    def parse(self, source: bytes, suffix: str) -> Any:
        ...


def _first_error_line(node: Node) -> Optional[int]:
    """1-based line of the first ERROR or MISSING node, depth first."""
    stack = [node]
    while stack:
        current = stack.pop()
        if current.type == "ERROR" or current.is_missing:
            return current.start_point[0] + 1
        if current.has_error:
            stack.extend(reversed(current.children))
    return None


class TreeSitterParser:
    """Parse JS/TS/JSX/TSX with tree-sitter.

    Grammars are loaded on first use and shared by every parse.

    Usage:
        parser = TreeSitterParser()
        tree = parser.parse(b"const a = 'Hello there';", ".ts")
        print(tree.root_node.type)  # program
    """

    def __init__(self):
        self._parsers: dict[str, Parser] = {}

    def _load(self) -> None:
        import tree_sitter_javascript as ts_javascript
        import tree_sitter_typescript as ts_typescript

        js_lang = Language(ts_javascript.language())
        ts_lang = Language(ts_typescript.language_typescript())
        tsx_lang = Language(ts_typescript.language_tsx())

        for suffix in JAVASCRIPT_SUFFIXES:
            self._parsers[suffix] = Parser(js_lang)
        for suffix in TYPESCRIPT_SUFFIXES:
            self._parsers[suffix] = Parser(ts_lang)
        for suffix in TSX_SUFFIXES:
            self._parsers[suffix] = Parser(tsx_lang)

    def parse(self, source: bytes, suffix: str) -> Tree:
        """Parse source bytes with the grammar for `suffix`.

        Raises:
            ParseError: Unsupported suffix or a tree containing syntax errors
        """
        if not self._parsers:
            self._load()

        parser = self._parsers.get(suffix.lower())
        if parser is None:
            raise ParseError(f"Unsupported file type: {suffix or '<none>'}")

        tree = parser.parse(source)
        if tree.root_node.has_error and suffix.lower() in JAVASCRIPT_SUFFIXES:
            # type-annotated .js/.jsx (e.g. Flow) may still parse as TSX
            retry = self._parsers[".tsx"].parse(source)
            if not retry.root_node.has_error:
                return retry
        if tree.root_node.has_error:
            line = _first_error_line(tree.root_node)
            where = f" at line {line}" if line else ""
            raise ParseError(f"Syntax error{where}", line=line)
        return tree
