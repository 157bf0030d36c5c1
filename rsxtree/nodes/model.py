"""Node tree data model."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any

from rsxtree.lexer import Group, Ident, Literal, Punct, TokenTree, render_tokens, tokens_source_text
from rsxtree.nodes.name import NodeName
from rsxtree.text import Span, cover_spans, slice_span


class NodeType(StrEnum):
    ELEMENT = "element"
    ATTRIBUTE = "attribute"
    TEXT = "text"
    RAW_TEXT = "raw_text"
    COMMENT = "comment"
    DOCTYPE = "doctype"
    FRAGMENT = "fragment"
    BLOCK = "block"


@dataclass(frozen=True, slots=True)
class Block:
    """Embedded code in a `{...}` group.

    `expression` is whatever the expression parser produced and is ignored by equality.
    `transformed` holds the replacement tokens when a block transform substituted the content.
    """

    group: Group
    valid: bool
    expression: Any = field(default=None, compare=False)
    transformed: tuple[TokenTree, ...] | None = None

    @property
    def node_type(self) -> NodeType:
        return NodeType.BLOCK

    @property
    def span(self) -> Span:
        return self.group.span

    @property
    def content(self) -> tuple[TokenTree, ...]:
        return self.group.stream

    def to_tokens(self) -> tuple[TokenTree, ...]:
        return (self.group,)


@dataclass(frozen=True, slots=True)
class Text:
    """Quoted string literal, or a run of unquoted tokens."""

    value: str
    quoted: bool
    token_trees: tuple[TokenTree, ...]

    @property
    def node_type(self) -> NodeType:
        return NodeType.TEXT

    @property
    def span(self) -> Span:
        return cover_spans(t.span for t in self.token_trees)

    def to_tokens(self) -> tuple[TokenTree, ...]:
        return self.token_trees


@dataclass(frozen=True, slots=True)
class RawText:
    """Verbatim content of a raw element such as `<script>` or `<style>`.

    `context` spans everything between the end of the open tag and the start of the close
    tag, so whitespace can be recovered from `source` when it is known.
    """

    token_trees: tuple[TokenTree, ...]
    context: Span
    source: str | None = field(default=None, compare=False, repr=False)

    @property
    def node_type(self) -> NodeType:
        return NodeType.RAW_TEXT

    @property
    def span(self) -> Span:
        return cover_spans((t.span for t in self.token_trees), default=self.context)

    def is_empty(self) -> bool:
        return not self.token_trees

    def to_tokens(self) -> tuple[TokenTree, ...]:
        return self.token_trees

    def to_token_stream_string(self) -> str:
        return render_tokens(self.token_trees)

    def to_source_text(self, with_whitespace: bool) -> str | None:
        """Source text of the content, None when the source is unknown."""
        if self.source is None or self.context.end > len(self.source):
            return None
        if with_whitespace:
            return slice_span(self.source, self.context)
        return tokens_source_text(self.token_trees, self.source) or ""

    def to_string_best(self) -> str:
        best = self.to_source_text(True)
        if best is None:
            best = self.to_source_text(False)
        if best is None:
            best = self.to_token_stream_string()
        return best


@dataclass(frozen=True, slots=True)
class AttributeValue:
    """`=` plus the value tokens: a literal, a bare path expression or a `{...}` group."""

    eq: Punct
    value_tokens: tuple[TokenTree, ...]
    valid: bool
    expression: Any = field(default=None, compare=False)

    @property
    def span(self) -> Span:
        return cover_spans((t.span for t in self.value_tokens), default=self.eq.span)

    @property
    def is_block(self) -> bool:
        return len(self.value_tokens) == 1 and isinstance(self.value_tokens[0], Group)

    def literal_string(self) -> str | None:
        """Decoded value when the value is a single quoted string."""
        if len(self.value_tokens) == 1 and isinstance(self.value_tokens[0], Literal):
            return self.value_tokens[0].string_value()
        return None

    def to_tokens(self) -> tuple[TokenTree, ...]:
        return (self.eq, *self.value_tokens)


@dataclass(frozen=True, slots=True)
class Attribute:
    """Keyed attribute (`key`, `key=value`), or a dynamic `{...}` attribute keyed by a BlockName."""

    key: NodeName
    value: AttributeValue | None = None

    @property
    def node_type(self) -> NodeType:
        return NodeType.ATTRIBUTE

    @property
    def span(self) -> Span:
        if self.value is None:
            return self.key.span
        return self.key.span.cover(self.value.span)

    def to_tokens(self) -> tuple[TokenTree, ...]:
        if self.value is None:
            return self.key.to_tokens()
        return (*self.key.to_tokens(), *self.value.to_tokens())


@dataclass(frozen=True, slots=True)
class OpenTag:
    """`<name attr ...>` or `<name attr ... />`; `end` is empty when input ended inside the tag."""

    lt: Punct
    name: NodeName
    attributes: tuple[Attribute, ...]
    end: tuple[Punct, ...]

    @property
    def is_self_closed(self) -> bool:
        return len(self.end) == 2

    @property
    def span(self) -> Span:
        last = self.end[-1].span if self.end else self.name.span
        if self.attributes and not self.end:
            last = self.attributes[-1].span
        return self.lt.span.cover(last)

    def to_tokens(self) -> tuple[TokenTree, ...]:
        tokens: list[TokenTree] = [self.lt, *self.name.to_tokens()]
        for attribute in self.attributes:
            tokens.extend(attribute.to_tokens())
        tokens.extend(self.end)
        return tuple(tokens)


@dataclass(frozen=True, slots=True)
class CloseTag:
    """`</name>`, or `</>` when `name` is None; `gt` is None when input ended inside the tag."""

    lt: Punct
    slash: Punct
    name: NodeName | None
    gt: Punct | None

    @property
    def is_malformed(self) -> bool:
        """`</` followed by neither a name nor `>`."""
        return self.name is None and self.gt is None

    @property
    def span(self) -> Span:
        if self.gt is not None:
            return self.lt.span.cover(self.gt.span)
        last = self.name.span if self.name is not None else self.slash.span
        return self.lt.span.cover(last)

    def to_tokens(self) -> tuple[TokenTree, ...]:
        name_tokens = self.name.to_tokens() if self.name is not None else ()
        end = (self.gt,) if self.gt is not None else ()
        return (self.lt, self.slash, *name_tokens, *end)


@dataclass(frozen=True, slots=True)
class Element:
    """Element with attributes and children.

    `close_tag` is None for self-closing elements and for elements closed implicitly
    during recovery.
    """

    open_tag: OpenTag
    children: tuple[Node, ...]
    close_tag: CloseTag | None
    self_closing: bool

    @property
    def node_type(self) -> NodeType:
        return NodeType.ELEMENT

    @property
    def name(self) -> NodeName:
        return self.open_tag.name

    @property
    def attributes(self) -> tuple[Attribute, ...]:
        return self.open_tag.attributes

    @property
    def span(self) -> Span:
        span = self.open_tag.span
        if self.children:
            span = span.cover(self.children[-1].span)
        if self.close_tag is not None:
            span = span.cover(self.close_tag.span)
        return span

    def to_tokens(self) -> tuple[TokenTree, ...]:
        tokens: list[TokenTree] = list(self.open_tag.to_tokens())
        for child in self.children:
            tokens.extend(child.to_tokens())
        if self.close_tag is not None:
            tokens.extend(self.close_tag.to_tokens())
        return tuple(tokens)


@dataclass(frozen=True, slots=True)
class Fragment:
    """`<>` children `</>`."""

    lt: Punct
    gt: Punct
    children: tuple[Node, ...]
    close_tag: CloseTag | None

    @property
    def node_type(self) -> NodeType:
        return NodeType.FRAGMENT

    @property
    def span(self) -> Span:
        span = self.lt.span.cover(self.gt.span)
        if self.children:
            span = span.cover(self.children[-1].span)
        if self.close_tag is not None:
            span = span.cover(self.close_tag.span)
        return span

    def to_tokens(self) -> tuple[TokenTree, ...]:
        tokens: list[TokenTree] = [self.lt, self.gt]
        for child in self.children:
            tokens.extend(child.to_tokens())
        if self.close_tag is not None:
            tokens.extend(self.close_tag.to_tokens())
        return tuple(tokens)


@dataclass(frozen=True, slots=True)
class Comment:
    """`<!-- "comment" -->`; `end` is empty when the comment is unterminated."""

    start: tuple[Punct, ...]
    value: str
    value_tokens: tuple[TokenTree, ...]
    end: tuple[Punct, ...]

    @property
    def node_type(self) -> NodeType:
        return NodeType.COMMENT

    @property
    def span(self) -> Span:
        return cover_spans(t.span for t in self.to_tokens())

    def to_tokens(self) -> tuple[TokenTree, ...]:
        return (*self.start, *self.value_tokens, *self.end)


@dataclass(frozen=True, slots=True)
class Doctype:
    """`<!DOCTYPE html>`; `value` is the text between the keyword and `>`."""

    start: tuple[Punct, Punct]
    keyword: Ident
    value: str
    value_tokens: tuple[TokenTree, ...]
    gt: Punct | None

    @property
    def node_type(self) -> NodeType:
        return NodeType.DOCTYPE

    @property
    def span(self) -> Span:
        return cover_spans(t.span for t in self.to_tokens())

    def to_tokens(self) -> tuple[TokenTree, ...]:
        end = (self.gt,) if self.gt is not None else ()
        return (*self.start, self.keyword, *self.value_tokens, *end)


type Node = Doctype | Comment | Fragment | Element | Block | Text | RawText


def node_children(node: Node) -> tuple[Node, ...]:
    if isinstance(node, (Element, Fragment)):
        return node.children
    return ()


def to_token_trees(nodes: tuple[Node, ...] | list[Node]) -> tuple[TokenTree, ...]:
    """Token trees referenced by `nodes`, in tree order.

    For a diagnostic-free parse this reproduces the input token trees exactly.
    """
    tokens: list[TokenTree] = []
    for node in nodes:
        tokens.extend(node.to_tokens())
    return tuple(tokens)


__all__ = [
    "Attribute",
    "AttributeValue",
    "Block",
    "CloseTag",
    "Comment",
    "Doctype",
    "Element",
    "Fragment",
    "Node",
    "NodeType",
    "OpenTag",
    "RawText",
    "Text",
    "node_children",
    "to_token_trees",
]
