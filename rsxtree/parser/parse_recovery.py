"""Token-set parser recovery."""

from dataclasses import dataclass
from enum import StrEnum

from rsxtree.lexer import TokenTree
from rsxtree.parser.parser import Parser

# Token kinds that can start a node.
NODE_START_SET: frozenset[str] = frozenset({"<", "{", "string"})


class RecoveryError(StrEnum):
    EOF = "eof"
    ALREADY_RECOVERED = "already_recovered"
    RECOVERY_DISABLED = "recovery_disabled"


@dataclass(frozen=True, slots=True)
class ParseRecoveryTokenSet:
    """Recover by skipping tokens until one whose kind is in `recovery_set`."""

    recovery_set: frozenset[str]

    def recover(self, parser: Parser) -> tuple[tuple[TokenTree, ...] | None, RecoveryError | None]:
        if parser.is_eof:
            return None, RecoveryError.EOF

        if self.is_at_recovered(parser):
            return None, RecoveryError.ALREADY_RECOVERED

        if parser.is_speculative_parsing():
            return None, RecoveryError.RECOVERY_DISABLED

        skipped: list[TokenTree] = []
        while not parser.is_eof and not self.is_at_recovered(parser):
            skipped.append(parser.bump())

        return tuple(skipped), None

    def is_at_recovered(self, parser: Parser) -> bool:
        return parser.at_set(self.recovery_set)
