"""Parser infrastructure (token cursor + recoverable parser + markup grammar)."""

from rsxtree.parser.expression import (
    AcceptAnyExpression,
    BlockTransform,
    ExpressionParser,
    ExpressionResult,
    PythonExpressionParser,
)
from rsxtree.parser.grammar import parse_node, parse_root
from rsxtree.parser.options import (
    HTML_RAW_TEXT_ELEMENTS,
    HTML_VOID_ELEMENTS,
    ParseMode,
    ParserOptions,
)
from rsxtree.parser.parse_lists import ParseNodeList
from rsxtree.parser.parse_recovery import ParseRecoveryTokenSet, RecoveryError
from rsxtree.parser.parser import Parser, ParserCheckpoint, ParserProgress
from rsxtree.parser.rsx import parse, parse_tokens
from rsxtree.parser.tag_matcher import CloseMatch, OpenEntry, TagMatcher
from rsxtree.parser.token_source import TokenSource, TokenSourceCheckpoint

__all__ = [
    "HTML_RAW_TEXT_ELEMENTS",
    "HTML_VOID_ELEMENTS",
    "AcceptAnyExpression",
    "BlockTransform",
    "CloseMatch",
    "ExpressionParser",
    "ExpressionResult",
    "OpenEntry",
    "ParseMode",
    "ParseNodeList",
    "ParseRecoveryTokenSet",
    "Parser",
    "ParserCheckpoint",
    "ParserOptions",
    "ParserProgress",
    "PythonExpressionParser",
    "RecoveryError",
    "TagMatcher",
    "TokenSource",
    "TokenSourceCheckpoint",
    "parse",
    "parse_node",
    "parse_root",
    "parse_tokens",
]
