"""High-level parse entrypoints for markup token trees and source text."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import TYPE_CHECKING

from rsxtree.diagnostics import Diagnostic, Label, collect_diagnostics, first_error
from rsxtree.diagnostics.codes import (
    PARSER_TOP_LEVEL_LIMIT_EXCEEDED,
    PARSER_TOP_LEVEL_TYPE_VIOLATION,
    DiagnosticSpec,
)
from rsxtree.errors import RsxParseError
from rsxtree.lexer import TokenStream, TokenTree, count_tokens, tokenize
from rsxtree.nodes import Node
from rsxtree.parser.grammar import parse_root
from rsxtree.parser.options import ParseMode, ParserOptions
from rsxtree.parser.parser import Parser
from rsxtree.parser.token_source import TokenSource

if TYPE_CHECKING:
    from rsxtree.pipeline import RsxParseResult

logger = logging.getLogger(__name__)


def _resolve_options(
    options: ParserOptions | None,
    mode: ParseMode | None,
) -> ParserOptions:
    if mode is not None and options is not None:
        raise ValueError("Pass either options or mode, not both")

    if options is not None:
        return options

    if mode is not None:
        return ParserOptions.for_mode(mode)

    return ParserOptions()


def parse_tokens(
    stream: TokenStream | Iterable[TokenTree],
    options: ParserOptions | None = None,
    *,
    mode: ParseMode | None = None,
) -> RsxParseResult:
    """Parse token trees into nodes, recovering from malformed markup.

    In strict mode the first error diagnostic raises `RsxParseError` instead.
    """
    from rsxtree.pipeline import RsxParseResult

    resolved_options = _resolve_options(options=options, mode=mode)
    if not isinstance(stream, TokenStream):
        stream = TokenStream(tuple(stream))

    parser = Parser(TokenSource(stream.trees, stream.source), options=resolved_options)
    nodes = _apply_top_level_restrictions(parser, parse_root(parser))
    diagnostics = parser.finish()

    logger.debug(
        "parsed %d tokens into %d top-level nodes with %d diagnostics",
        count_tokens(stream.trees),
        len(nodes),
        len(diagnostics),
    )
    return RsxParseResult(
        nodes=tuple(nodes),
        diagnostics=diagnostics,
        options=resolved_options,
        source_text=stream.source,
    )


def parse(
    text: str,
    options: ParserOptions | None = None,
    *,
    mode: ParseMode | None = None,
) -> RsxParseResult:
    """Tokenize `text` with the reference tokenizer, then parse it.

    Lexer diagnostics come first in the result.
    """
    from rsxtree.pipeline import RsxParseResult

    resolved_options = _resolve_options(options=options, mode=mode)
    lexed = tokenize(text)
    if resolved_options.is_strict:
        error = first_error(lexed.diagnostics)
        if error is not None:
            raise RsxParseError(error)

    parsed = parse_tokens(lexed.stream, options=resolved_options)
    return RsxParseResult(
        nodes=parsed.nodes,
        diagnostics=collect_diagnostics(lexed.diagnostics, parsed.diagnostics),
        options=resolved_options,
        source_text=text,
    )


def _apply_top_level_restrictions(parser: Parser, nodes: list[Node]) -> list[Node]:
    options = parser.options

    if options.top_level_node_type is not None:
        accepted: list[Node] = []
        allowed = ", ".join(sorted(options.top_level_node_type))
        for node in nodes:
            if node.node_type in options.top_level_node_type:
                accepted.append(node)
                continue
            parser.error(
                _top_level_diagnostic(
                    PARSER_TOP_LEVEL_TYPE_VIOLATION,
                    f"top level node has type `{node.node_type}`, expected one of: {allowed}",
                    node,
                )
            )
        nodes = accepted

    limit = options.max_top_level_nodes
    if limit is not None and len(nodes) > limit:
        parser.error(
            _top_level_diagnostic(
                PARSER_TOP_LEVEL_LIMIT_EXCEEDED,
                f"too many top level nodes: expected at most {limit}, found {len(nodes)}",
                nodes[limit],
                secondary=tuple(Label(node.span, "dropped") for node in nodes[limit + 1 :]),
            )
        )
        nodes = nodes[:limit]

    return nodes


def _top_level_diagnostic(
    spec: DiagnosticSpec,
    message: str,
    node: Node,
    *,
    secondary: tuple[Label, ...] = (),
) -> Diagnostic:
    return Diagnostic(
        code=spec.code,
        message=message,
        span=node.span,
        severity=spec.severity,
        hint=spec.hint,
        category=spec.category,
        secondary=secondary,
    )
