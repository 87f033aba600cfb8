"""Tests for the template expander.

Covers:
- Scalar substitution and the scope chain
- Boolean, list, mapping and string sections
- Pass-through of unresolved and malformed markers
- Strict mode errors
- Standalone section lines
- Same-name nesting
- Tokenizer and parser output
"""

from __future__ import annotations

import pytest

from fpd_toolkit.errors import TemplateError
from fpd_toolkit.scaffolder.expander import (
    Literal,
    Section,
    TokenKind,
    Variable,
    expand,
    parse,
    tokenize,
    variables,
)


pytestmark = pytest.mark.unit


# ---------------------------------------------------------------------------
# Required behaviour
# ---------------------------------------------------------------------------


class TestReferenceExamples:
    def test_true_section(self):
        assert expand("{{#x}}A{{/x}}", {"x": True}) == "A"

    def test_false_section(self):
        assert expand("{{#x}}A{{/x}}", {"x": False}) == ""

    def test_list_section(self):
        bindings = {"items": [{"v": "1"}, {"v": "2"}]}
        assert expand("{{#items}}[{{v}}]{{/items}}", bindings) == "[1][2]"

    def test_missing_variable_passes_through(self):
        assert expand("{{missing}}", {}) == "{{missing}}"


# ---------------------------------------------------------------------------
# Variables
# ---------------------------------------------------------------------------


class TestVariables:
    def test_substitutes_scalars(self):
        assert expand("Hello {{name}}!", {"name": "geo_sensor"}) == "Hello geo_sensor!"

    def test_whitespace_inside_marker(self):
        assert expand("{{ name }}", {"name": "x"}) == "x"

    def test_numbers_and_booleans(self):
        assert expand("{{n}} {{b}}", {"n": 3, "b": False}) == "3 false"

    def test_none_is_unresolved(self):
        assert expand("{{x}}", {"x": None}) == "{{x}}"

    def test_list_value_is_not_a_scalar(self):
        assert expand("{{items}}", {"items": [1]}) == "{{items}}"

    def test_dollar_prefixed_marker_is_literal(self):
        text = "runs-on: ${{ matrix.os }} for {{name}}"
        assert expand(text, {"name": "ci", "matrix.os": "nope"}) == (
            "runs-on: ${{ matrix.os }} for ci"
        )


# ---------------------------------------------------------------------------
# Sections
# ---------------------------------------------------------------------------


class TestSections:
    def test_unbound_section_is_removed(self):
        assert expand("a{{#x}}B{{/x}}c", {}) == "ac"

    def test_empty_list_removes_span(self):
        assert expand("[{{#xs}}x{{/xs}}]", {"xs": []}) == "[]"

    def test_element_fields_shadow_outer_bindings(self):
        bindings = {"name": "outer", "xs": [{"name": "inner"}, {}]}
        assert expand("{{#xs}}{{name}},{{/xs}}", bindings) == "inner,outer,"

    def test_dot_reaches_scalar_elements(self):
        assert expand("{{#xs}}<{{.}}>{{/xs}}", {"xs": ["a", "b"]}) == "<a><b>"

    def test_non_empty_string_section(self):
        assert expand("{{#w}}weight: {{w}}{{/w}}", {"w": "bold"}) == "weight: bold"

    def test_empty_string_section(self):
        assert expand("{{#w}}weight: {{w}}{{/w}}", {"w": ""}) == ""

    def test_mapping_section_pushes_scope(self):
        bindings = {"author": {"name": "Ada"}}
        assert expand("{{#author}}by {{name}}{{/author}}", bindings) == "by Ada"

    def test_boolean_wins_over_other_meanings(self):
        assert expand("{{#x}}[{{x}}]{{/x}}", {"x": True}) == "[true]"

    def test_nested_sections(self):
        bindings = {"outer": True, "items": [{"on": True, "v": 1}, {"on": False, "v": 2}]}
        template = "{{#outer}}{{#items}}{{#on}}{{v}}{{/on}}{{/items}}{{/outer}}"
        assert expand(template, bindings) == "1"

    def test_same_name_nesting_pairs_innermost_first(self):
        template = "{{#a}}1{{#a}}2{{/a}}3{{/a}}"
        assert expand(template, {"a": True}) == "123"
        assert expand(template, {"a": False}) == ""

    def test_list_items_see_their_own_flags(self):
        bindings = {
            "platforms": [
                {"platform": "android", "android": True},
                {"platform": "ios", "android": False},
            ]
        }
        template = "{{#platforms}}{{platform}}{{#android}}*{{/android}};{{/platforms}}"
        assert expand(template, bindings) == "android*;ios;"


# ---------------------------------------------------------------------------
# Standalone lines
# ---------------------------------------------------------------------------


class TestStandaloneTags:
    def test_standalone_tags_consume_their_lines(self):
        template = "a:\n{{#xs}}\n  - {{v}}\n{{/xs}}\nb: 1\n"
        bindings = {"xs": [{"v": "one"}, {"v": "two"}]}
        assert expand(template, bindings) == "a:\n  - one\n  - two\nb: 1\n"

    def test_indented_standalone_tag(self):
        template = "x\n    {{#flag}}\n    y\n    {{/flag}}\nz\n"
        assert expand(template, {"flag": True}) == "x\n    y\nz\n"
        assert expand(template, {"flag": False}) == "x\nz\n"

    def test_inline_tags_keep_surrounding_text(self):
        assert expand("a {{#f}}b{{/f}} c\n", {"f": True}) == "a b c\n"


# ---------------------------------------------------------------------------
# Malformed markers
# ---------------------------------------------------------------------------


class TestMalformedMarkers:
    def test_unmatched_close_is_literal(self):
        assert expand("a{{/x}}b", {}) == "a{{/x}}b"

    def test_unclosed_open_is_literal(self):
        assert expand("a{{#x}}b", {"x": True}) == "a{{#x}}b"

    def test_invalid_names_are_literal(self):
        assert expand("{{}} {{ a b }}", {"a": "1"}) == "{{}} {{ a b }}"

    def test_strict_unclosed_raises(self):
        with pytest.raises(TemplateError, match="never closed"):
            expand("{{#x}}b", {"x": True}, strict=True)

    def test_strict_unmatched_close_raises(self):
        with pytest.raises(TemplateError, match="no opening marker"):
            expand("b{{/x}}", {}, strict=True)

    def test_strict_unresolved_variable_raises(self):
        with pytest.raises(TemplateError, match="missing"):
            expand("{{missing}}", {}, strict=True)

    def test_strict_accepts_resolved_template(self):
        assert expand("{{#x}}{{y}}{{/x}}", {"x": True, "y": "ok"}, strict=True) == "ok"


# ---------------------------------------------------------------------------
# Tokenizer / parser
# ---------------------------------------------------------------------------


class TestTokenizeAndParse:
    def test_token_kinds(self):
        kinds = [t.kind for t in tokenize("a{{#s}}{{v}}{{/s}}")]
        assert kinds == [
            TokenKind.LITERAL,
            TokenKind.OPEN,
            TokenKind.VARIABLE,
            TokenKind.CLOSE,
        ]

    def test_parse_builds_tree(self):
        nodes = parse("a{{#s}}{{v}}{{/s}}")
        assert nodes[0] == Literal("a")
        section = nodes[1]
        assert isinstance(section, Section)
        assert section.name == "s"
        assert section.children == (Variable("v", "{{v}}"),)

    def test_variables_lists_names(self):
        template = "{{#items}}{{.}}{{name}}{{/items}}{{title}}"
        assert variables(template) == ["items", "name", "title"]
