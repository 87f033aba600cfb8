"""Mustache-style template expansion for project scaffolding.

Supports exactly three constructs:

* ``{{name}}``                 -- scalar substitution;
* ``{{#flag}}...{{/flag}}``    -- emit the body iff ``flag`` is truthy;
* ``{{#items}}...{{/items}}``  -- emit the body once per element of a list,
  resolving names against the element's fields first.

Expansion runs in two passes.  :func:`tokenize` turns the template text into a
flat list of tokens (literal / variable / section-open / section-close) and
:func:`parse` folds that list into a tree of :class:`Literal`,
:class:`Variable` and :class:`Section` nodes, which :func:`expand` then
evaluates against the bindings.

Tokens that cannot be resolved are passed through verbatim by default so that
source text which happens to look like a marker survives expansion.
``strict=True`` turns every unresolved variable and every malformed marker
into a :class:`TemplateError`.  A marker written right after a ``$`` (GitHub
Actions ``${{ ... }}`` expressions) is never a marker at all.
"""

from __future__ import annotations

import enum
import re
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any, Union

from fpd_toolkit.errors import TemplateError

__all__ = [
    "Literal",
    "Node",
    "Section",
    "Token",
    "TokenKind",
    "Variable",
    "expand",
    "parse",
    "tokenize",
    "variables",
]


# ---------------------------------------------------------------------------
# Tokens
# ---------------------------------------------------------------------------

_TAG_RE = re.compile(r"\{\{\s*([#/]?)\s*([^{}]*?)\s*\}\}")
_NAME_RE = re.compile(r"^(?:\.|[A-Za-z_][\w.\-]*)$")


class TokenKind(enum.Enum):
    LITERAL = "literal"
    VARIABLE = "variable"
    OPEN = "open"
    CLOSE = "close"


@dataclass(frozen=True)
class Token:
    """One element of the flat token list.

    ``text`` is the marker exactly as written.  ``consumed`` is the span of
    source text the token stands for; it differs from ``text`` only for
    standalone section tags, whose surrounding indentation and line break are
    swallowed together with the tag.
    """

    kind: TokenKind
    text: str
    name: str = ""
    consumed: str = ""


def _is_standalone(template: str, start: int, end: int) -> tuple[bool, int, int]:
    """Return whether the tag at ``[start, end)`` sits alone on its line.

    Also returns the start of the line and the index just past the line break.
    """
    line_start = template.rfind("\n", 0, start) + 1
    line_end = template.find("\n", end)
    after = len(template) if line_end == -1 else line_end + 1
    before_text = template[line_start:start]
    after_text = template[end:] if line_end == -1 else template[end:line_end]
    alone = before_text.strip(" \t") == "" and after_text.strip(" \t\r") == ""
    return alone, line_start, after


def tokenize(template: str) -> list[Token]:
    """Split *template* into a flat list of tokens.

    Markers whose name is not a valid identifier (``{{}}``, ``{{ a b }}``)
    and markers directly preceded by ``$`` are kept as literal text.  Section
    tags standing alone on a line consume that whole line so that
    line-oriented templates do not gain blank lines.
    """
    tokens: list[Token] = []
    cursor = 0

    for match in _TAG_RE.finditer(template):
        sigil, name = match.group(1), match.group(2)
        if not _NAME_RE.match(name):
            continue
        # ``${{ ... }}`` belongs to GitHub Actions and shell-like syntaxes.
        if match.start() > 0 and template[match.start() - 1] == "$":
            continue

        if sigil == "#":
            kind = TokenKind.OPEN
        elif sigil == "/":
            kind = TokenKind.CLOSE
        else:
            kind = TokenKind.VARIABLE

        lead_end, next_cursor = match.start(), match.end()
        if kind is not TokenKind.VARIABLE:
            alone, line_start, after = _is_standalone(template, match.start(), match.end())
            if alone:
                lead_end, next_cursor = max(line_start, cursor), after

        if lead_end > cursor:
            tokens.append(Token(TokenKind.LITERAL, template[cursor:lead_end]))
        tokens.append(
            Token(kind, match.group(0), name, template[lead_end:next_cursor])
        )
        cursor = next_cursor

    if cursor < len(template):
        tokens.append(Token(TokenKind.LITERAL, template[cursor:]))
    return tokens


# ---------------------------------------------------------------------------
# Syntax tree
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Literal:
    text: str


@dataclass(frozen=True)
class Variable:
    name: str
    source: str


@dataclass(frozen=True)
class Section:
    """A ``{{#name}}...{{/name}}`` span.

    Whether it behaves as a boolean or a list section is decided when it is
    evaluated, from the type of the value ``name`` resolves to.
    """

    name: str
    children: tuple["Node", ...]
    open_source: str
    close_source: str


Node = Union[Literal, Variable, Section]


@dataclass
class _Frame:
    name: str | None
    token: Token | None
    children: list[Node] = field(default_factory=list)


def _unwind(frames: list[_Frame], strict: bool) -> None:
    """Pop an unclosed section frame and splice it back as literal text."""
    frame = frames.pop()
    assert frame.token is not None
    if strict:
        raise TemplateError(f"Section '{frame.name}' is never closed")
    parent = frames[-1].children
    parent.append(Literal(frame.token.consumed or frame.token.text))
    parent.extend(frame.children)


def parse(template: str | Sequence[Token], *, strict: bool = False) -> tuple[Node, ...]:
    """Build the node tree for a template (or an already tokenized one).

    Closing markers pair with the innermost open section of the same name, so
    same-name nesting behaves like balanced brackets.  Unmatched markers become
    literal text, or raise :class:`TemplateError` when *strict* is set.
    """
    tokens = tokenize(template) if isinstance(template, str) else list(template)
    frames: list[_Frame] = [_Frame(name=None, token=None)]

    for token in tokens:
        if token.kind is TokenKind.LITERAL:
            frames[-1].children.append(Literal(token.text))
        elif token.kind is TokenKind.VARIABLE:
            frames[-1].children.append(Variable(token.name, token.text))
        elif token.kind is TokenKind.OPEN:
            frames.append(_Frame(name=token.name, token=token))
        else:
            match_index = next(
                (i for i in range(len(frames) - 1, 0, -1) if frames[i].name == token.name),
                None,
            )
            if match_index is None:
                if strict:
                    raise TemplateError(f"Closing marker {token.text} has no opening marker")
                frames[-1].children.append(Literal(token.consumed or token.text))
                continue
            while len(frames) - 1 > match_index:
                _unwind(frames, strict)
            frame = frames.pop()
            assert frame.token is not None and frame.name is not None
            frames[-1].children.append(
                Section(
                    name=frame.name,
                    children=tuple(frame.children),
                    open_source=frame.token.text,
                    close_source=token.text,
                )
            )

    while len(frames) > 1:
        _unwind(frames, strict)
    return tuple(frames[0].children)


# ---------------------------------------------------------------------------
# Evaluation
# ---------------------------------------------------------------------------

_MISSING = object()


def _lookup(name: str, scopes: Sequence[Mapping[str, Any]]) -> Any:
    for scope in scopes:
        if name in scope:
            return scope[name]
    return _MISSING


def _scalar_text(value: Any) -> str | None:
    """Textual form of a scalar binding, or ``None`` if it is not a scalar."""
    if value is None or value is _MISSING:
        return None
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (str, int, float)):
        return str(value)
    return None


def _render(
    nodes: Sequence[Node],
    scopes: tuple[Mapping[str, Any], ...],
    out: list[str],
    strict: bool,
) -> None:
    for node in nodes:
        if isinstance(node, Literal):
            out.append(node.text)
            continue

        value = _lookup(node.name, scopes)

        if isinstance(node, Variable):
            text = _scalar_text(value)
            if text is None:
                if strict:
                    raise TemplateError(f"Unresolved template variable '{node.name}'")
                out.append(node.source)
            else:
                out.append(text)
            continue

        # Boolean values are checked first: they win over every other reading.
        if value is True:
            _render(node.children, scopes, out, strict)
        elif value is False or value is None or value is _MISSING:
            continue
        elif isinstance(value, (list, tuple)):
            for item in value:
                scope = item if isinstance(item, Mapping) else {".": item}
                _render(node.children, (scope, *scopes), out, strict)
        elif isinstance(value, Mapping):
            _render(node.children, (value, *scopes), out, strict)
        elif value:
            _render(node.children, scopes, out, strict)


def expand(template: str, bindings: Mapping[str, Any], *, strict: bool = False) -> str:
    """Expand *template* against *bindings*.

    Args:
        template: Template text.
        bindings: Mapping of name to a string, number, boolean, or list of
            records.  Section bodies bound to a list are rendered once per
            element with the element pushed in front of the outer bindings.
        strict: Raise :class:`TemplateError` on unresolved variables and
            malformed markers instead of passing them through.

    Returns:
        The expanded text.

    Examples::

        expand("{{#x}}A{{/x}}", {"x": True})            -> "A"
        expand("{{#items}}[{{v}}]{{/items}}",
               {"items": [{"v": "1"}, {"v": "2"}]})     -> "[1][2]"
        expand("{{missing}}", {})                       -> "{{missing}}"
    """
    out: list[str] = []
    _render(parse(template, strict=strict), (bindings,), out, strict)
    return "".join(out)


def variables(template: str) -> list[str]:
    """Return the sorted set of names a template references."""
    names: set[str] = set()
    for token in tokenize(template):
        if token.kind is not TokenKind.LITERAL and token.name != ".":
            names.add(token.name)
    return sorted(names)
