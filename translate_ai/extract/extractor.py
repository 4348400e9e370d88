"""
Translatable string extraction from JavaScript/TypeScript syntax trees.

One pre-order walk over the tree feeds four strategies:

1. JSX text              <h1>Bonjour</h1>              → jsx_text
2. JSX attribute values  <Button label="Confirmer" />  → jsx_attribute
                         <Button label={"Confirmer"} />, {"Confirmer"}
3. String literals       const message = "Erreur"      → string_literal
4. Template literals     `Bonjour ${name}`             → template_literal

Literals anywhere below a JSX element or fragment belong to strategies
1 and 2 only, so an attribute value is never reported twice. Every walk
step carries the full tuple of ancestors; all context lookups read that
chain instead of parent pointers.
"""

from __future__ import annotations

import html
import logging
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Optional

from translate_ai.extract.classifier import should_extract
from translate_ai.extract.parser import ParseError, SourceParser, TreeSitterParser
from translate_ai.models import ExtractedString, StringKind

logger = logging.getLogger(__name__)

JSX_ELEMENT_TYPES = frozenset({"jsx_element", "jsx_self_closing_element", "jsx_fragment"})
JSX_TEXT_TYPES = frozenset({"jsx_text", "html_character_reference"})
TEMPLATE_TYPES = frozenset({"template_string", "template_literal_type"})
MEMBER_TYPES = frozenset({"member_expression", "subscript_expression"})

# Attribute values that hold CSS class lists rather than text. Both
# className="..." and className={"..."} are skipped; class lists with
# spaces ("flex items-center") would otherwise pass should_extract().
CLASS_ATTRIBUTES = frozenset({"className", "class"})

# JSX drops line breaks together with the indentation around them
_JSX_LINE_BREAK = re.compile(r"\s*\n\s*")

_SIMPLE_ESCAPES = {
    "n": "\n",
    "t": "\t",
    "r": "\r",
    "b": "\b",
    "f": "\f",
    "v": "\v",
    "0": "\0",
}

Ancestors = tuple


@dataclass
class FileExtraction:
    """Outcome of extracting one file; `error` is set when parsing failed."""
    path: Path
    strings: list[ExtractedString] = field(default_factory=list)
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None


def _cook_escape(raw: str) -> str:
    """Decode one JS escape sequence (including the backslash)."""
    body = raw[1:]
    if not body:
        return ""
    head = body[0]
    if head in "\r\n\u2028\u2029":
        return ""  # line continuation
    try:
        if head == "x" and len(body) == 3:
            return chr(int(body[1:], 16))
        if head == "u":
            if body.startswith("u{") and body.endswith("}"):
                return chr(int(body[2:-1], 16))
            return chr(int(body[1:5], 16))
    except ValueError:
        return body
    if body in _SIMPLE_ESCAPES:
        return _SIMPLE_ESCAPES[body]
    return body


def _join_surrogates(text: str) -> str:
    """Combine surrogate pairs produced by \\uD83D\\uDE00-style escapes."""
    if not any("\ud800" <= ch <= "\udfff" for ch in text):
        return text
    return text.encode("utf-16", "surrogatepass").decode("utf-16", errors="replace")


class TreeExtractor:
    """Extract translatable strings from one source file at a time.

    Usage:
        extractor = TreeExtractor()
        strings = extractor.extract_source('<h1>Bonjour monde</h1>', ".tsx")
        print(strings[0].text, strings[0].context)   # Bonjour monde <h1>

        outcome = extractor.extract_file(Path("src/App.tsx"))
        if not outcome.ok:
            print(outcome.error)
    """

    def __init__(
        self,
        parser: Optional[SourceParser] = None,
        classifier: Callable[[str], bool] = should_extract,
    ):
        self.parser = parser or TreeSitterParser()
        self.classifier = classifier

    # ------------------------------------------------------------------
    # Entry points
    # ------------------------------------------------------------------

    def extract_file(self, path: Path | str) -> FileExtraction:
        """Extract strings from a file; parse and read errors yield an empty result."""
        path = Path(path)
        try:
            source = path.read_bytes()
            strings = self.extract_source(source, path.suffix)
        except (ParseError, OSError, ValueError) as e:
            logger.warning("Failed to parse %s: %s", path, e)
            return FileExtraction(path=path, error=str(e))
        return FileExtraction(path=path, strings=strings)

    def extract_source(self, source: str | bytes, suffix: str = ".tsx") -> list[ExtractedString]:
        """Extract strings from source text.

        Raises:
            ParseError: The source cannot be parsed with the grammar for `suffix`
        """
        src = source.encode("utf-8") if isinstance(source, str) else source
        if src.startswith(b"\xef\xbb\xbf"):
            src = src[3:]
        tree = self.parser.parse(src, suffix)
        return self._walk(tree.root_node, src)

    # ------------------------------------------------------------------
    # Walk
    # ------------------------------------------------------------------

    def _walk(self, root, src: bytes) -> list[ExtractedString]:
        found: list[ExtractedString] = []
        stack: list[tuple] = [(root, ())]

        while stack:
            node, ancestors = stack.pop()
            extracted = self._visit(node, ancestors, src)
            if extracted is not None and self.classifier(extracted.text):
                found.append(extracted)

            child_ancestors = ancestors + (node,)
            for child in reversed(node.children):
                stack.append((child, child_ancestors))

        return found

    def _visit(self, node, ancestors: Ancestors, src: bytes) -> Optional[ExtractedString]:
        node_type = node.type
        parent = ancestors[-1] if ancestors else None

        if node_type in JSX_TEXT_TYPES:
            if parent is not None and parent.type in ("jsx_element", "jsx_fragment"):
                return self._jsx_text(node, ancestors, src)
            return None

        if node_type == "jsx_expression":
            return self._jsx_expression(node, ancestors, src)

        if node_type == "string":
            if parent is not None and parent.type == "jsx_attribute":
                if self._attribute_name(ancestors, src) in CLASS_ATTRIBUTES:
                    return None
                return self._make(
                    node, src, self._cook(node, src),
                    self._attribute_context(ancestors, src), StringKind.JSX_ATTRIBUTE,
                )
            if self._inside_jsx(ancestors):
                return None
            return self._make(
                node, src, self._cook(node, src),
                self._variable_context(node, ancestors, src), StringKind.STRING_LITERAL,
            )

        if node_type in TEMPLATE_TYPES:
            if self._inside_jsx(ancestors):
                return None
            return self._make(
                node, src, self._cook(node, src),
                self._variable_context(node, ancestors, src), StringKind.TEMPLATE_LITERAL,
            )

        return None

    # ------------------------------------------------------------------
    # Strategies
    # ------------------------------------------------------------------

    def _jsx_text(self, node, ancestors: Ancestors, src: bytes) -> Optional[ExtractedString]:
        # tree-sitter splits JSX text at line breaks and entities; the first
        # piece of a run speaks for the whole run
        previous = node.prev_sibling
        if previous is not None and previous.type in JSX_TEXT_TYPES:
            return None

        last = node
        while last.next_sibling is not None and last.next_sibling.type in JSX_TEXT_TYPES:
            last = last.next_sibling

        raw = src[node.start_byte:last.end_byte].decode("utf-8", errors="replace")
        text = _JSX_LINE_BREAK.sub(" ", html.unescape(raw).strip())
        return self._make(node, src, text, self._tag_context(ancestors, src), StringKind.JSX_TEXT)

    def _jsx_expression(self, node, ancestors: Ancestors, src: bytes) -> Optional[ExtractedString]:
        inner = [c for c in node.named_children if c.type != "comment"]
        if len(inner) != 1 or inner[0].type != "string":
            return None
        if self._attribute_name(ancestors, src) in CLASS_ATTRIBUTES:
            return None
        return self._make(
            node, src, self._cook(inner[0], src),
            self._attribute_context(ancestors, src), StringKind.JSX_ATTRIBUTE,
        )

    # ------------------------------------------------------------------
    # Ancestor-chain queries
    # ------------------------------------------------------------------

    @staticmethod
    def _inside_jsx(ancestors: Ancestors) -> bool:
        return any(a.type in JSX_ELEMENT_TYPES for a in ancestors)

    def _tag_context(self, ancestors: Ancestors, src: bytes) -> str:
        """'<TagName>' for the nearest named JSX element, '<JSXElement>' or 'JSX' otherwise."""
        for ancestor in reversed(ancestors):
            if ancestor.type != "jsx_element":
                continue
            opening = next((c for c in ancestor.children if c.type == "jsx_opening_element"), None)
            name = opening.child_by_field_name("name") if opening is not None else None
            if name is None:
                continue  # fragment written as <>...</>
            if name.type == "identifier":
                return f"<{self._text(name, src)}>"
            return "<JSXElement>"
        return "JSX"

    def _nearest_attribute(self, ancestors: Ancestors):
        for ancestor in reversed(ancestors):
            if ancestor.type == "jsx_attribute":
                return ancestor
            if ancestor.type in JSX_ELEMENT_TYPES:
                break
        return None

    def _attribute_name(self, ancestors: Ancestors, src: bytes) -> Optional[str]:
        attribute = self._nearest_attribute(ancestors)
        if attribute is None or not attribute.named_children:
            return None
        name = attribute.named_children[0]
        if name.type != "property_identifier":
            return None
        return self._text(name, src)

    def _attribute_context(self, ancestors: Ancestors, src: bytes) -> str:
        if self._nearest_attribute(ancestors) is None:
            return "JSX attribute"
        name = self._attribute_name(ancestors, src)
        return f"JSX attribute: {name or 'attribute'}"

    def _variable_context(self, node, ancestors: Ancestors, src: bytes) -> str:
        below = node
        for ancestor in reversed(ancestors):
            if ancestor.type == "variable_declarator":
                name = ancestor.child_by_field_name("name")
                if name is not None and name.type == "identifier":
                    return f"Variable: {self._text(name, src)}"
            elif ancestor.type == "pair":
                key = ancestor.child_by_field_name("key")
                if key is not None and key != below and key.type == "property_identifier":
                    return f"Object property: {self._text(key, src)}"
            below = ancestor
        return "String literal"

    # ------------------------------------------------------------------
    # Node text
    # ------------------------------------------------------------------

    @staticmethod
    def _text(node, src: bytes) -> str:
        return src[node.start_byte:node.end_byte].decode("utf-8", errors="replace")

    def _cook(self, node, src: bytes) -> str:
        """Literal value of a string/template node with escapes decoded."""
        parts: list[str] = []
        for child in node.children:
            child_type = child.type
            if child_type == "string_fragment":
                parts.append(self._text(child, src))
            elif child_type == "escape_sequence":
                parts.append(_cook_escape(self._text(child, src)))
            elif child_type == "html_character_reference":
                parts.append(html.unescape(self._text(child, src)))
            elif child_type == "template_substitution":
                parts.append("{" + self._placeholder(child, src) + "}")
            elif child_type == "template_type":
                parts.append("{type}")
            elif child.is_named and child_type != "comment":
                parts.append(self._text(child, src))
        return _join_surrogates("".join(parts))

    def _placeholder(self, substitution, src: bytes) -> str:
        expressions = [c for c in substitution.named_children if c.type != "comment"]
        if len(expressions) != 1:
            return "expression"
        expr = expressions[0]
        if expr.type == "identifier":
            return self._text(expr, src)
        if expr.type in MEMBER_TYPES:
            return "value"
        return "expression"

    def _make(self, node, src: bytes, text: str, context: str, kind: StringKind) -> ExtractedString:
        row = node.start_point[0]
        line_start = src.rfind(b"\n", 0, node.start_byte) + 1
        column = len(src[line_start:node.start_byte].decode("utf-8", errors="replace"))
        return ExtractedString(text=text, line=row + 1, column=column, context=context, kind=kind)
