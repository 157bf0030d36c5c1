"""Token trees and the reference tokenizer."""

from rsxtree.lexer.lexer import LexResult, Lexer, dump_tokens, tokenize
from rsxtree.lexer.tokens import (
    Delimiter,
    Group,
    Ident,
    Literal,
    LiteralKind,
    Punct,
    Spacing,
    TokenStream,
    TokenTree,
    count_tokens,
    render_tokens,
    same_tokens,
    tokens_source_text,
)

__all__ = [
    "Delimiter",
    "Group",
    "Ident",
    "LexResult",
    "Lexer",
    "Literal",
    "LiteralKind",
    "Punct",
    "Spacing",
    "TokenStream",
    "TokenTree",
    "count_tokens",
    "dump_tokens",
    "render_tokens",
    "same_tokens",
    "tokenize",
    "tokens_source_text",
]
