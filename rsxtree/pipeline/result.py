"""Parse result carrier."""

from __future__ import annotations

from dataclasses import dataclass, field

from rsxtree.diagnostics import Diagnostic, first_error, has_errors
from rsxtree.errors import RsxParseError
from rsxtree.lexer import TokenTree
from rsxtree.nodes import FlatNode, Node, flatten, to_token_trees
from rsxtree.parser.options import ParserOptions


@dataclass(slots=True)
class RsxParseResult:
    """Nodes and diagnostics of one parse call.

    Nodes are always present, also when diagnostics were reported; zero diagnostics
    is the success condition.
    """

    nodes: tuple[Node, ...]
    diagnostics: list[Diagnostic]
    options: ParserOptions
    source_text: str | None = None
    _flat: tuple[FlatNode, ...] | None = field(default=None, init=False, repr=False)

    @property
    def has_errors(self) -> bool:
        return has_errors(self.diagnostics)

    @property
    def flat(self) -> tuple[FlatNode, ...] | None:
        """Pre-order flat view, only when the parse was configured with `flat_tree`."""
        if not self.options.flat_tree:
            return None
        return self.flat_nodes()

    def flat_nodes(self) -> tuple[FlatNode, ...]:
        if self._flat is None:
            self._flat = flatten(self.nodes)
        return self._flat

    def split(self) -> tuple[tuple[Node, ...], list[Diagnostic]]:
        return self.nodes, self.diagnostics

    def into_nodes(self) -> tuple[Node, ...]:
        """Nodes of a parse without errors; raises `RsxParseError` with the first error otherwise."""
        error = first_error(self.diagnostics)
        if error is not None:
            raise RsxParseError(error)
        return self.nodes

    def to_token_trees(self) -> tuple[TokenTree, ...]:
        return to_token_trees(self.nodes)
