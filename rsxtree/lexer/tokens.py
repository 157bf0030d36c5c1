"""Token tree vocabulary."""

from __future__ import annotations

import ast
from dataclasses import dataclass
from enum import IntEnum, StrEnum

from rsxtree.text import Span, cover_spans, slice_span


class Spacing(StrEnum):
    """Whether a punctuation character is immediately followed by another one."""

    ALONE = "alone"
    JOINT = "joint"


class Delimiter(StrEnum):
    PAREN = "paren"  # ( )
    BRACKET = "bracket"  # [ ]
    BRACE = "brace"  # { }

    @property
    def open(self) -> str:
        return _DELIMITER_CHARS[self][0]

    @property
    def close(self) -> str:
        return _DELIMITER_CHARS[self][1]


_DELIMITER_CHARS: dict[Delimiter, tuple[str, str]] = {
    Delimiter.PAREN: ("(", ")"),
    Delimiter.BRACKET: ("[", "]"),
    Delimiter.BRACE: ("{", "}"),
}


class LiteralKind(IntEnum):
    STRING = 1
    NUMBER = 2


@dataclass(frozen=True, slots=True)
class Ident:
    text: str
    span: Span

    def same_token(self, other: TokenTree) -> bool:
        return isinstance(other, Ident) and other.text == self.text


@dataclass(frozen=True, slots=True)
class Punct:
    char: str
    spacing: Spacing
    span: Span

    @property
    def text(self) -> str:
        return self.char

    @property
    def is_joint(self) -> bool:
        return self.spacing == Spacing.JOINT

    def same_token(self, other: TokenTree) -> bool:
        return isinstance(other, Punct) and other.char == self.char


@dataclass(frozen=True, slots=True)
class Literal:
    """Quoted string or number, `text` is the literal exactly as written."""

    text: str
    kind: LiteralKind
    span: Span

    @property
    def is_string(self) -> bool:
        return self.kind == LiteralKind.STRING

    def string_value(self) -> str | None:
        """Decoded value of a string literal, None for numbers and malformed strings."""
        if not self.is_string:
            return None
        try:
            value = ast.literal_eval(self.text)
        except (SyntaxError, ValueError):
            return None
        return value if isinstance(value, str) else None

    def same_token(self, other: TokenTree) -> bool:
        return isinstance(other, Literal) and other.text == self.text


@dataclass(frozen=True, slots=True)
class Group:
    """Delimited group; `span` covers both delimiters."""

    delimiter: Delimiter
    stream: tuple[TokenTree, ...]
    span: Span

    @property
    def text(self) -> str:
        return self.delimiter.open + render_tokens(self.stream) + self.delimiter.close

    @property
    def open_span(self) -> Span:
        return Span.at(self.span.start, 1)

    @property
    def close_span(self) -> Span:
        return Span(max(self.span.start, self.span.end - 1), self.span.end)

    def same_token(self, other: TokenTree) -> bool:
        return (
            isinstance(other, Group)
            and other.delimiter == self.delimiter
            and same_tokens(self.stream, other.stream)
        )


type TokenTree = Ident | Punct | Literal | Group


@dataclass(frozen=True, slots=True)
class TokenStream:
    """Top-level token trees plus the source text they were lexed from, if known."""

    trees: tuple[TokenTree, ...]
    source: str | None = None

    def __len__(self) -> int:
        return len(self.trees)

    def __iter__(self):
        return iter(self.trees)

    @property
    def span(self) -> Span:
        return cover_spans((tree.span for tree in self.trees), default=Span.empty(0))


def same_tokens(left: tuple[TokenTree, ...] | list[TokenTree], right: tuple[TokenTree, ...] | list[TokenTree]) -> bool:
    """Structural token equality that ignores spans."""
    if len(left) != len(right):
        return False
    return all(a.same_token(b) for a, b in zip(left, right))


def count_tokens(trees: tuple[TokenTree, ...] | list[TokenTree]) -> int:
    """Number of token trees including everything nested in groups."""
    total = 0
    for tree in trees:
        total += 1
        if isinstance(tree, Group):
            total += count_tokens(tree.stream)
    return total


def render_tokens(trees: tuple[TokenTree, ...] | list[TokenTree]) -> str:
    """Render tokens without source text.

    Joint punctuation is glued to the following token; everything else is separated by one space.
    """
    parts: list[str] = []
    for index, tree in enumerate(trees):
        parts.append(tree.text)
        if index + 1 < len(trees) and not (isinstance(tree, Punct) and tree.is_joint):
            parts.append(" ")
    return "".join(parts)


def tokens_source_text(
    trees: tuple[TokenTree, ...] | list[TokenTree],
    source: str | None,
) -> str | None:
    """Source slice covering `trees`, whitespace included. None if the source is unknown."""
    if source is None or not trees:
        return None
    span = cover_spans(tree.span for tree in trees)
    if span.end > len(source):
        return None
    return slice_span(source, span)
