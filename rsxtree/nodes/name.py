"""Node names: tag names and attribute keys."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from rsxtree.lexer import Ident, Punct, TokenTree, same_tokens
from rsxtree.text import Span

if TYPE_CHECKING:
    from rsxtree.nodes.model import Block


@dataclass(frozen=True, slots=True, eq=False)
class IdentName:
    """Single identifier, e.g. `div`."""

    ident: Ident

    @property
    def span(self) -> Span:
        return self.ident.span

    def to_tokens(self) -> tuple[TokenTree, ...]:
        return (self.ident,)

    def __eq__(self, other: object) -> bool:
        return isinstance(other, IdentName) and other.ident.text == self.ident.text

    def __hash__(self) -> int:
        return hash(("ident", self.ident.text))

    def __str__(self) -> str:
        return self.ident.text


@dataclass(frozen=True, slots=True, eq=False)
class PathName:
    """Identifiers joined by `-`, `:` or `::`, e.g. `data-foo`, `on:click`, `some::path`.

    `separators[i]` holds the punctuation between `segments[i]` and `segments[i + 1]`
    (two puncts for `::`).
    """

    segments: tuple[Ident, ...]
    separators: tuple[tuple[Punct, ...], ...]

    def __post_init__(self):
        if len(self.segments) < 2 or len(self.separators) != len(self.segments) - 1:
            raise ValueError("PathName needs at least two segments and one separator between each pair")

    @property
    def span(self) -> Span:
        return self.segments[0].span.cover(self.segments[-1].span)

    @property
    def separator_texts(self) -> tuple[str, ...]:
        return tuple("".join(p.char for p in sep) for sep in self.separators)

    def to_tokens(self) -> tuple[TokenTree, ...]:
        tokens: list[TokenTree] = [self.segments[0]]
        for separator, segment in zip(self.separators, self.segments[1:]):
            tokens.extend(separator)
            tokens.append(segment)
        return tuple(tokens)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, PathName):
            return False
        return (
            tuple(s.text for s in self.segments) == tuple(s.text for s in other.segments)
            and self.separator_texts == other.separator_texts
        )

    def __hash__(self) -> int:
        return hash(("path", tuple(s.text for s in self.segments), self.separator_texts))

    def __str__(self) -> str:
        parts = [self.segments[0].text]
        for separator, segment in zip(self.separator_texts, self.segments[1:]):
            parts.append(separator)
            parts.append(segment.text)
        return "".join(parts)


@dataclass(frozen=True, slots=True, eq=False)
class BlockName:
    """Name computed from embedded code, e.g. `<{component} />` or `<div {attrs} />`."""

    block: Block

    @property
    def span(self) -> Span:
        return self.block.span

    def to_tokens(self) -> tuple[TokenTree, ...]:
        return self.block.to_tokens()

    def __eq__(self, other: object) -> bool:
        return isinstance(other, BlockName) and same_tokens(self.block.group.stream, other.block.group.stream)

    def __hash__(self) -> int:
        return hash(("block", self.block.group.text))

    def __str__(self) -> str:
        return self.block.group.text


type NodeName = IdentName | PathName | BlockName
