"""Reference tokenizer: source text to token trees."""

from dataclasses import dataclass
from enum import IntEnum

from rsxtree.diagnostics import Diagnostic, Label
from rsxtree.diagnostics.codes import (
    LEXER_UNBALANCED_DELIMITER,
    LEXER_UNTERMINATED_STRING,
    DiagnosticSpec,
)
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
)
from rsxtree.text import Span

_OPENERS: dict[str, Delimiter] = {"(": Delimiter.PAREN, "[": Delimiter.BRACKET, "{": Delimiter.BRACE}
_CLOSERS: dict[str, Delimiter] = {")": Delimiter.PAREN, "]": Delimiter.BRACKET, "}": Delimiter.BRACE}
_QUOTES = frozenset({'"', "'"})


class LexemeKind(IntEnum):
    EOF = 1
    WHITESPACE = 10
    IDENT = 20
    STRING = 21
    NUMBER = 22
    PUNCT = 30
    OPEN = 40
    CLOSE = 41


@dataclass(frozen=True, slots=True)
class Lexeme:
    """Flat lexical unit, before delimiters are folded into groups."""

    kind: LexemeKind
    span: Span
    text: str


@dataclass(frozen=True, slots=True)
class LexResult:
    stream: TokenStream
    diagnostics: list[Diagnostic]


class Lexer:
    """Flat lexer that skips whitespace and reports unterminated strings."""

    def __init__(self, source: str) -> None:
        self._source = source
        self._position = 0
        self._diagnostics: list[Diagnostic] = []

    @property
    def source(self) -> str:
        return self._source

    @property
    def diagnostics(self) -> list[Diagnostic]:
        return self._diagnostics

    @property
    def is_eof(self) -> bool:
        return self._position >= len(self._source)

    def next_lexeme(self) -> Lexeme:
        start = self._position
        kind = self._lex_lexeme()
        span = Span(start, self._position)
        return Lexeme(kind, span, self._source[start : self._position])

    def lex(self) -> list[Lexeme]:
        lexemes: list[Lexeme] = []
        while True:
            lexeme = self.next_lexeme()
            if lexeme.kind == LexemeKind.WHITESPACE:
                continue
            lexemes.append(lexeme)
            if lexeme.kind == LexemeKind.EOF:
                break
        return lexemes

    def _lex_lexeme(self) -> LexemeKind:
        if self.is_eof:
            return LexemeKind.EOF

        ch = self._current_char()
        if ch.isspace():
            while not self.is_eof and self._current_char().isspace():
                self._advance(1)
            return LexemeKind.WHITESPACE

        if ch in _QUOTES:
            return self._lex_string(ch)

        if ch.isdigit():
            return self._lex_number()

        if ch.isalpha() or ch == "_":
            return self._lex_identifier()

        self._advance(1)
        if ch in _OPENERS:
            return LexemeKind.OPEN
        if ch in _CLOSERS:
            return LexemeKind.CLOSE
        return LexemeKind.PUNCT

    def _lex_string(self, quote: str) -> LexemeKind:
        start = self._position
        self._advance(1)
        closed = False

        while not self.is_eof:
            ch = self._current_char()
            if ch == quote:
                self._advance(1)
                closed = True
                break
            if ch == "\\":
                self._advance(1)
                if not self.is_eof:
                    self._advance(1)
                continue
            if ch == "\n" or ch == "\r":
                break
            self._advance(1)

        if not closed:
            self._diagnostics.append(_diagnostic(LEXER_UNTERMINATED_STRING, Span(start, self._position)))

        return LexemeKind.STRING

    def _lex_number(self) -> LexemeKind:
        saw_dot = False
        while not self.is_eof:
            ch = self._current_char()
            if ch.isalnum() or ch == "_":
                self._advance(1)
                continue
            if ch == "." and not saw_dot and self._peek_char().isdigit():
                saw_dot = True
                self._advance(1)
                continue
            break
        return LexemeKind.NUMBER

    def _lex_identifier(self) -> LexemeKind:
        self._advance(1)
        while not self.is_eof:
            ch = self._current_char()
            if ch.isalnum() or ch == "_":
                self._advance(1)
                continue
            break
        return LexemeKind.IDENT

    def _current_char(self) -> str:
        if self.is_eof:
            return "\0"
        return self._source[self._position]

    def _peek_char(self, ahead: int = 1) -> str:
        index = self._position + ahead
        if index >= len(self._source):
            return "\0"
        return self._source[index]

    def _advance(self, steps: int) -> None:
        self._position += steps


def tokenize(source: str) -> LexResult:
    """Lex `source` and fold delimiters into groups.

    Stray closing delimiters are dropped and unclosed groups are closed at end of input,
    both with a diagnostic, so the returned stream is always well nested.
    """
    lexer = Lexer(source)
    lexemes = lexer.lex()
    diagnostics = list(lexer.diagnostics)

    # (delimiter, open span, collected trees)
    stack: list[tuple[Delimiter | None, Span, list[TokenTree]]] = [(None, Span.empty(0), [])]

    for index, lexeme in enumerate(lexemes):
        match lexeme.kind:
            case LexemeKind.EOF:
                break
            case LexemeKind.IDENT:
                stack[-1][2].append(Ident(lexeme.text, lexeme.span))
            case LexemeKind.STRING:
                stack[-1][2].append(Literal(lexeme.text, LiteralKind.STRING, lexeme.span))
            case LexemeKind.NUMBER:
                stack[-1][2].append(Literal(lexeme.text, LiteralKind.NUMBER, lexeme.span))
            case LexemeKind.PUNCT:
                following = lexemes[index + 1]
                joint = following.kind == LexemeKind.PUNCT and following.span.start == lexeme.span.end
                stack[-1][2].append(Punct(lexeme.text, Spacing.JOINT if joint else Spacing.ALONE, lexeme.span))
            case LexemeKind.OPEN:
                stack.append((_OPENERS[lexeme.text], lexeme.span, []))
            case LexemeKind.CLOSE:
                delimiter = _CLOSERS[lexeme.text]
                if len(stack) > 1 and stack[-1][0] == delimiter:
                    opened, open_span, trees = stack.pop()
                    stack[-1][2].append(Group(delimiter, tuple(trees), open_span.cover(lexeme.span)))
                else:
                    diagnostics.append(
                        _diagnostic(
                            LEXER_UNBALANCED_DELIMITER,
                            lexeme.span,
                            message=f"Unexpected closing delimiter `{lexeme.text}`.",
                        )
                    )

    end = len(source)
    while len(stack) > 1:
        opened, open_span, trees = stack.pop()
        assert opened is not None
        diagnostics.append(
            _diagnostic(
                LEXER_UNBALANCED_DELIMITER,
                open_span,
                message=f"Unclosed delimiter `{opened.open}`.",
                secondary=(Label(Span.empty(end), "input ends here"),),
            )
        )
        stack[-1][2].append(Group(opened, tuple(trees), Span(open_span.start, end)))

    return LexResult(stream=TokenStream(tuple(stack[0][2]), source), diagnostics=diagnostics)


def dump_tokens(stream: TokenStream, diagnostics: list[Diagnostic] | None = None) -> None:
    """Print token trees with kind, span, and text for debugging."""

    def walk(trees: tuple[TokenTree, ...], depth: int) -> None:
        for tree in trees:
            indent = "  " * depth
            extra = f" spacing={tree.spacing}" if isinstance(tree, Punct) else ""
            label = f"Group({tree.delimiter})" if isinstance(tree, Group) else type(tree).__name__
            text = "" if isinstance(tree, Group) else f" text={tree.text!r}"
            print(f"{indent}{label:<16} span={tree.span.as_tuple()}{text}{extra}")
            if isinstance(tree, Group):
                walk(tree.stream, depth + 1)

    walk(stream.trees, 0)

    if diagnostics is not None:
        print("\nDiagnostics:")
        for d in diagnostics:
            print(f"- {d.severity.upper()} {d.code} span={d.span.as_tuple()} message={d.message}")


def _diagnostic(
    spec: DiagnosticSpec,
    span: Span,
    *,
    message: str | None = None,
    secondary: tuple[Label, ...] = (),
) -> Diagnostic:
    return Diagnostic(
        code=spec.code,
        message=message or spec.message,
        span=span,
        severity=spec.severity,
        hint=spec.hint,
        category=spec.category,
        secondary=secondary,
    )
