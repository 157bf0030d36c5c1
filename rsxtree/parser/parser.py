"""Recoverable parser core: cursor, diagnostics and tag stack behind one checkpoint."""

import logging
from contextlib import contextmanager
from dataclasses import dataclass

from rsxtree.diagnostics import PARSER_INVALID_EMBEDDED_CODE, Diagnostic, first_error
from rsxtree.errors import EmbeddedCodeError, RsxParseError
from rsxtree.lexer import TokenTree
from rsxtree.nodes import CloseTag
from rsxtree.parser.options import ParserOptions
from rsxtree.parser.tag_matcher import OpenEntry, TagMatcher
from rsxtree.parser.token_source import TokenSource, TokenSourceCheckpoint, token_kind
from rsxtree.text import Span

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class ParserCheckpoint:
    source_checkpoint: TokenSourceCheckpoint
    diagnostics_len: int
    tag_stack: OpenEntry | None
    speculative_depth: int
    pending_close_tag: CloseTag | None


@dataclass(slots=True)
class ParserProgress:
    """Detect parser stalls inside list-style loops."""

    _position: int | None = None

    def has_progressed(self, parser: "Parser") -> bool:
        has_progressed = self._position is None or self._position < parser.position
        self._position = parser.position
        return has_progressed

    def assert_progressing(self, parser: "Parser") -> None:
        if not self.has_progressed(parser):
            raise RuntimeError(f"Parser stopped making progress at {parser.current!r} {parser.current_span}")


class Parser:
    """Token-tree parser.

    In strict mode the first error diagnostic raises `RsxParseError`, unless it is
    recorded while speculating; those are raised on `commit` instead.
    """

    def __init__(self, source: TokenSource, options: ParserOptions | None = None) -> None:
        self._source = source
        self._options = options or ParserOptions()
        self._diagnostics: list[Diagnostic] = []
        self._matcher = TagMatcher()
        self._speculative_depth = 0
        self._pending_close_tag: CloseTag | None = None

    @property
    def source(self) -> TokenSource:
        return self._source

    @property
    def source_text(self) -> str | None:
        return self._source.text

    @property
    def options(self) -> ParserOptions:
        return self._options

    @property
    def diagnostics(self) -> list[Diagnostic]:
        return self._diagnostics

    @property
    def matcher(self) -> TagMatcher:
        return self._matcher

    @property
    def current(self) -> TokenTree | None:
        return self._source.current

    @property
    def current_span(self) -> Span:
        return self._source.current_span

    @property
    def position(self) -> int:
        return self._source.position

    @property
    def is_eof(self) -> bool:
        return self._source.is_eof

    def nth(self, n: int) -> TokenTree | None:
        return self._source.nth(n)

    def nth_span(self, n: int) -> Span:
        return self._source.nth_span(n)

    def at_punct(self, char: str, n: int = 0) -> bool:
        return self._source.nth_is_punct(n, char)

    def at_ident(self, n: int = 0) -> bool:
        return self._source.nth_is_ident(n)

    def at_brace_group(self, n: int = 0) -> bool:
        return self._source.nth_is_brace_group(n)

    def at_string(self, n: int = 0) -> bool:
        return self._source.nth_is_string(n)

    def at_set(self, kinds: frozenset[str] | set[str]) -> bool:
        current = self.current
        return current is not None and token_kind(current) in kinds

    def at_close_tag(self) -> bool:
        return self.at_punct("<") and self.at_punct("/", 1)

    def checkpoint(self) -> ParserCheckpoint:
        return ParserCheckpoint(
            source_checkpoint=self._source.checkpoint,
            diagnostics_len=len(self._diagnostics),
            tag_stack=self._matcher.snapshot(),
            speculative_depth=self._speculative_depth,
            pending_close_tag=self._pending_close_tag,
        )

    def rewind(self, checkpoint: ParserCheckpoint) -> None:
        self._source.rewind(checkpoint.source_checkpoint)
        del self._diagnostics[checkpoint.diagnostics_len :]
        self._matcher.restore(checkpoint.tag_stack)
        self._speculative_depth = checkpoint.speculative_depth
        self._pending_close_tag = checkpoint.pending_close_tag

    def commit(self, checkpoint: ParserCheckpoint) -> None:
        """Keep what was parsed since `checkpoint`.

        Outside speculation, errors recorded since the checkpoint are raised the way
        `error` would have raised them: invalid embedded code when `recover_block` is
        off, any error in strict mode.
        """
        if self.is_speculative_parsing():
            return
        recorded = self._diagnostics[checkpoint.diagnostics_len :]
        if not self._options.recover_block:
            for diagnostic in recorded:
                if diagnostic.code == PARSER_INVALID_EMBEDDED_CODE.code:
                    raise EmbeddedCodeError(diagnostic)
        if self._options.is_strict:
            error = first_error(recorded)
            if error is not None:
                raise RsxParseError(error)

    @contextmanager
    def speculative_parsing(self):
        self._speculative_depth += 1
        try:
            yield
        finally:
            self._speculative_depth -= 1

    def is_speculative_parsing(self) -> bool:
        return self._speculative_depth > 0

    @property
    def pending_close_tag(self) -> CloseTag | None:
        """Close tag already consumed for an outer open entry, waiting for that entry's children loop."""
        return self._pending_close_tag

    def defer_close_tag(self, close_tag: CloseTag) -> None:
        self._pending_close_tag = close_tag

    def take_pending_close_tag(self) -> CloseTag | None:
        close_tag = self._pending_close_tag
        self._pending_close_tag = None
        return close_tag

    def at_children_end(self) -> bool:
        return self._pending_close_tag is not None or self.at_close_tag()

    def bump(self) -> TokenTree | None:
        return self._source.bump()

    def error(self, diagnostic: Diagnostic) -> None:
        logger.debug("%s at %s: %s", diagnostic.code, diagnostic.span.as_tuple(), diagnostic.message)
        self._diagnostics.append(diagnostic)
        if self._options.is_strict and diagnostic.is_error and not self.is_speculative_parsing():
            raise RsxParseError(diagnostic)

    def finish(self) -> list[Diagnostic]:
        return self._diagnostics
