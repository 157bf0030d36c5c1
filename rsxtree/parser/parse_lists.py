"""Reusable node-list parse loop."""

from collections.abc import Callable
from dataclasses import dataclass

from rsxtree.nodes import Node
from rsxtree.parser.parser import Parser, ParserProgress


@dataclass(slots=True)
class ParseNodeList:
    """Non-separated node list with progress checking and a recovery hook.

    `parse_element` returns None when it consumed input without producing a node,
    or when it could not parse anything; `recover` decides whether the loop goes on.
    """

    is_at_list_end: Callable[[Parser], bool]
    parse_element: Callable[[Parser], Node | None]
    recover: Callable[[Parser, Node | None], bool]

    def parse_list(self, parser: Parser) -> list[Node]:
        nodes: list[Node] = []
        progress = ParserProgress()

        while not parser.is_eof and not self.is_at_list_end(parser):
            progress.assert_progressing(parser)
            parsed = self.parse_element(parser)
            if parsed is not None:
                nodes.append(parsed)
            if not self.recover(parser, parsed):
                break

        return nodes
