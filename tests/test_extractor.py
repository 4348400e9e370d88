"""
Tests for string extraction from JS/TS/JSX syntax trees.

Tests cover:
- The four extraction strategies and their contexts
- Mutual exclusivity between JSX and bare-literal extraction
- Template placeholders
- Escapes, entities and multi-line JSX text
- Parse failures
"""

import pytest

from translate_ai.extract.extractor import TreeExtractor
from translate_ai.extract.parser import ParseError, TreeSitterParser
from translate_ai.models import StringKind


@pytest.fixture(scope="module")
def extractor():
    return TreeExtractor()


def texts(strings):
    return [s.text for s in strings]


class TestJsxText:
    """JSX text nodes."""

    def test_heading_text(self, extractor):
        """<h1>Bonjour monde</h1> yields one jsx_text string."""
        strings = extractor.extract_source("const el = <h1>Bonjour monde</h1>;", ".tsx")

        assert len(strings) == 1
        s = strings[0]
        assert s.text == "Bonjour monde"
        assert s.kind == StringKind.JSX_TEXT
        assert s.context == "<h1>"
        assert s.line == 1
        assert s.column == 15

    def test_nearest_tag_wins(self, extractor):
        """Context is the innermost named element."""
        source = "const el = <div><span>Salut à tous</span></div>;"
        strings = extractor.extract_source(source, ".jsx")

        assert texts(strings) == ["Salut à tous"]
        assert strings[0].context == "<span>"

    def test_member_tag_gets_generic_context(self, extractor):
        source = "const el = <Foo.Bar>Bonjour à vous</Foo.Bar>;"
        strings = extractor.extract_source(source, ".tsx")

        assert strings[0].context == "<JSXElement>"

    def test_fragment_only_context(self, extractor):
        source = "const el = <>Salut à tous</>;"
        strings = extractor.extract_source(source, ".tsx")

        assert texts(strings) == ["Salut à tous"]
        assert strings[0].context == "JSX"

    def test_multiline_text_is_one_string(self, extractor):
        source = "const el = (\n  <p>\n    Hello\n    world\n  </p>\n);\n"
        strings = extractor.extract_source(source, ".tsx")

        assert texts(strings) == ["Hello world"]

    def test_entities_are_decoded(self, extractor):
        strings = extractor.extract_source("const el = <p>Tom &amp; Jerry</p>;", ".tsx")

        assert texts(strings) == ["Tom & Jerry"]

    def test_single_character_text_rejected(self, extractor):
        strings = extractor.extract_source("const el = <b>x</b>;", ".tsx")

        assert strings == []


class TestJsxAttributes:
    """Attribute values and expression containers."""

    def test_plain_attribute_value(self, extractor):
        source = 'const el = <Button label="Confirmer la commande" />;'
        strings = extractor.extract_source(source, ".tsx")

        assert len(strings) == 1
        assert strings[0].kind == StringKind.JSX_ATTRIBUTE
        assert strings[0].context == "JSX attribute: label"
        assert strings[0].text == "Confirmer la commande"

    def test_expression_attribute_reported_once(self, extractor):
        """A literal inside an attribute is never also a string_literal."""
        source = 'const el = <Button label={"Confirmer la commande"} />;'
        strings = extractor.extract_source(source, ".tsx")

        assert len(strings) == 1
        assert strings[0].kind == StringKind.JSX_ATTRIBUTE
        assert strings[0].context == "JSX attribute: label"

    def test_child_expression_container(self, extractor):
        source = 'const el = <p>{"Texte dans une expression"}</p>;'
        strings = extractor.extract_source(source, ".tsx")

        assert len(strings) == 1
        assert strings[0].kind == StringKind.JSX_ATTRIBUTE
        assert strings[0].context == "JSX attribute"

    def test_class_names_are_skipped(self, extractor):
        source = 'const el = <div className="flex items-center" title="Aide en ligne" />;'
        strings = extractor.extract_source(source, ".tsx")

        assert texts(strings) == ["Aide en ligne"]

    def test_class_name_expressions_are_skipped(self, extractor):
        source = 'const el = <div className={"flex items-center"} title={"Fermer la fenêtre"} />;'
        strings = extractor.extract_source(source, ".tsx")

        assert texts(strings) == ["Fermer la fenêtre"]

    def test_nested_literals_inside_jsx_are_not_bare_literals(self, extractor):
        source = 'const el = <a onClick={() => alert("Bonjour tout le monde")}>Lien</a>;'
        strings = extractor.extract_source(source, ".tsx")

        assert all(s.kind != StringKind.STRING_LITERAL for s in strings)
        assert "Bonjour tout le monde" not in texts(strings)

    def test_template_inside_attribute_not_extracted(self, extractor):
        source = "const el = <a title={`Profil de ${name}`}>Lien</a>;"
        strings = extractor.extract_source(source, ".tsx")

        assert all(s.kind != StringKind.TEMPLATE_LITERAL for s in strings)


class TestStringLiterals:
    """Bare string literals outside JSX."""

    def test_variable_context(self, extractor):
        strings = extractor.extract_source('const message = "Erreur de validation";', ".ts")

        assert len(strings) == 1
        assert strings[0].text == "Erreur de validation"
        assert strings[0].kind == StringKind.STRING_LITERAL
        assert strings[0].context == "Variable: message"

    def test_object_property_context(self, extractor):
        source = 'const labels = { title: "Mon titre", subtitle: "Sous-titre du site" };'
        strings = extractor.extract_source(source, ".js")

        assert [s.context for s in strings] == [
            "Object property: title",
            "Object property: subtitle",
        ]

    def test_generic_context(self, extractor):
        strings = extractor.extract_source('alert("Bonjour tout le monde");', ".js")

        assert strings[0].context == "String literal"

    def test_escapes_are_cooked(self, extractor):
        source = "const a = 'Line one\\nLine two', b = \"Caf\\u00e9 noir\";"
        strings = extractor.extract_source(source, ".js")

        assert texts(strings) == ["Line one\nLine two", "Café noir"]

    def test_code_like_strings_rejected(self, extractor):
        source = (
            'import App from "./src/App";\n'
            'const color = "#FF0000";\n'
            'const count = "42";\n'
            'const mode = "dark";\n'
        )
        strings = extractor.extract_source(source, ".ts")

        assert strings == []

    def test_document_order(self, extractor):
        source = 'const a = "Premier texte";\nconst b = "Second texte";\n'
        strings = extractor.extract_source(source, ".ts")

        assert texts(strings) == ["Premier texte", "Second texte"]
        assert [s.line for s in strings] == [1, 2]


class TestTemplateLiterals:
    """Template literals and placeholders."""

    def test_identifier_placeholder(self, extractor):
        strings = extractor.extract_source("const greeting = `Bonjour ${name}`;", ".ts")

        assert len(strings) == 1
        assert strings[0].text == "Bonjour {name}"
        assert strings[0].kind == StringKind.TEMPLATE_LITERAL
        assert strings[0].context == "Variable: greeting"

    def test_member_placeholder(self, extractor):
        strings = extractor.extract_source("const t = `Total: ${order.total} EUR`;", ".ts")

        assert texts(strings) == ["Total: {value} EUR"]

    def test_call_placeholder(self, extractor):
        strings = extractor.extract_source("const t = `${count()} articles`;", ".ts")

        assert texts(strings) == ["{expression} articles"]


class TestParseFailures:
    """Files that cannot be parsed."""

    def test_syntax_error_raises(self, extractor):
        with pytest.raises(ParseError):
            extractor.extract_source("const = ;", ".ts")

    def test_type_annotations_in_js(self, extractor):
        """Type-annotated .js files fall back to the TSX grammar."""
        source = '// @flow\nconst a: string = "Flow text";\n'
        strings = extractor.extract_source(source, ".js")

        assert texts(strings) == ["Flow text"]
        assert strings[0].line == 2

    def test_broken_js_still_fails(self, extractor):
        with pytest.raises(ParseError):
            extractor.extract_source("const = <div>\n", ".jsx")

    def test_unsupported_suffix(self):
        with pytest.raises(ParseError):
            TreeSitterParser().parse(b"body { color: red; }", ".css")

    def test_extract_file_recovers(self, extractor, tmp_path):
        """A broken file yields an empty result with the error recorded."""
        path = tmp_path / "Broken.tsx"
        path.write_text("export const = <div>", encoding="utf-8")

        outcome = extractor.extract_file(path)

        assert not outcome.ok
        assert outcome.strings == []
        assert outcome.error

    def test_extract_file_reads_source(self, extractor, tmp_path):
        path = tmp_path / "App.jsx"
        path.write_text("export const App = () => <h1>Bienvenue chez nous</h1>;\n", encoding="utf-8")

        outcome = extractor.extract_file(path)

        assert outcome.ok
        assert texts(outcome.strings) == ["Bienvenue chez nous"]
