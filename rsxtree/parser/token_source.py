"""Token cursor over one level of a token tree."""

from collections.abc import Sequence
from dataclasses import dataclass

from rsxtree.lexer import Delimiter, Group, Ident, Literal, LiteralKind, Punct, TokenTree
from rsxtree.text import Span


@dataclass(frozen=True, slots=True)
class TokenSourceCheckpoint:
    position: int


class TokenSource:
    """Peek/advance cursor. Exhaustion is reported as None, never raised."""

    def __init__(self, trees: Sequence[TokenTree], source: str | None = None) -> None:
        self._trees = tuple(trees)
        self._position = 0
        self._source = source
        if self._trees:
            self._end = self._trees[-1].span.end
        else:
            self._end = 0

    @property
    def trees(self) -> tuple[TokenTree, ...]:
        return self._trees

    @property
    def text(self) -> str | None:
        return self._source

    @property
    def position(self) -> int:
        return self._position

    @property
    def is_eof(self) -> bool:
        return self._position >= len(self._trees)

    @property
    def current(self) -> TokenTree | None:
        return self.nth(0)

    @property
    def current_span(self) -> Span:
        return self.nth_span(0)

    @property
    def checkpoint(self) -> TokenSourceCheckpoint:
        return TokenSourceCheckpoint(self._position)

    def nth(self, n: int) -> TokenTree | None:
        index = self._position + n
        if index < len(self._trees):
            return self._trees[index]
        return None

    def nth_span(self, n: int) -> Span:
        tree = self.nth(n)
        if tree is not None:
            return tree.span
        return Span.empty(self._end)

    def nth_is_punct(self, n: int, char: str) -> bool:
        tree = self.nth(n)
        return isinstance(tree, Punct) and tree.char == char

    def nth_is_ident(self, n: int) -> bool:
        return isinstance(self.nth(n), Ident)

    def nth_is_brace_group(self, n: int) -> bool:
        tree = self.nth(n)
        return isinstance(tree, Group) and tree.delimiter == Delimiter.BRACE

    def nth_is_string(self, n: int) -> bool:
        tree = self.nth(n)
        return isinstance(tree, Literal) and tree.is_string

    def bump(self) -> TokenTree | None:
        tree = self.nth(0)
        if tree is not None:
            self._position += 1
        return tree

    def rewind(self, checkpoint: TokenSourceCheckpoint) -> None:
        self._position = checkpoint.position

    def remaining(self) -> tuple[TokenTree, ...]:
        return self._trees[self._position :]


def token_kind(tree: TokenTree) -> str:
    """Coarse token class used by recovery sets: the punct char, the group opener, `ident`, `string` or `number`."""
    match tree:
        case Punct(char=char):
            return char
        case Group(delimiter=delimiter):
            return delimiter.open
        case Ident():
            return "ident"
        case Literal(kind=kind):
            return "string" if kind == LiteralKind.STRING else "number"
        case _:
            raise TypeError(f"Not a token tree: {tree!r}")
