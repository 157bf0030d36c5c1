"""Pluggable collaborators for embedded code: expression parsing and block transforms."""

import ast
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any, Protocol

from rsxtree.lexer import TokenTree, render_tokens, tokens_source_text


@dataclass(frozen=True, slots=True)
class ExpressionResult:
    """Outcome of parsing embedded code.

    `consumed` is the number of tokens the expression covers; on failure it is a best guess.
    `error` is None on success.
    """

    expression: Any
    consumed: int
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


class ExpressionParser(Protocol):
    def parse_expression(self, tokens: Sequence[TokenTree], source: str | None) -> ExpressionResult: ...


class BlockTransform(Protocol):
    """Hook run on raw block content before the expression parser.

    Returns replacement tokens, or None to keep the content. Raise
    `TransformBlockError` to reject the block.
    """

    def transform_block(self, tokens: Sequence[TokenTree]) -> Sequence[TokenTree] | None: ...


class PythonExpressionParser:
    """Validates embedded code as a single Python expression with `ast.parse`.

    Empty content is accepted and yields no expression.
    """

    def parse_expression(self, tokens: Sequence[TokenTree], source: str | None) -> ExpressionResult:
        tokens = tuple(tokens)
        if not tokens:
            return ExpressionResult(expression=None, consumed=0)

        text = tokens_source_text(tokens, source)
        if text is None:
            text = render_tokens(tokens)

        try:
            # parenthesized so the expression may span lines
            tree = ast.parse(f"(\n{text}\n)", mode="eval")
        except SyntaxError as exc:
            return ExpressionResult(expression=None, consumed=len(tokens), error=exc.msg)

        body = tree.body
        if isinstance(body, ast.Tuple) and not body.elts and body.lineno == 1:
            # only the wrapping parentheses parsed, e.g. the content was a lone comment
            return ExpressionResult(expression=None, consumed=len(tokens), error="expected an expression")
        return ExpressionResult(expression=body, consumed=len(tokens))


class AcceptAnyExpression:
    """Accepts any content without inspecting it."""

    def parse_expression(self, tokens: Sequence[TokenTree], source: str | None) -> ExpressionResult:
        tokens = tuple(tokens)
        return ExpressionResult(expression=tokens, consumed=len(tokens))
