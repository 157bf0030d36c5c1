from rsxtree.diagnostics import (
    PARSER_UNCLOSED_TAG,
    Diagnostic,
    Label,
    collect_diagnostics,
    first_error,
    format_diagnostic,
    has_errors,
)
from rsxtree.parser import parse
from rsxtree.text import Span


def _warning(offset: int) -> Diagnostic:
    return Diagnostic(code="W", message="warn", span=Span.empty(offset), severity="warning")


def test_format_diagnostic_with_source_uses_line_and_column() -> None:
    source = "\n<div>"
    result = parse(source)
    (diagnostic,) = result.diagnostics
    assert diagnostic.code == PARSER_UNCLOSED_TAG.code

    rendered = format_diagnostic(diagnostic, source)
    assert rendered.splitlines() == [
        "error[PARSER_UNCLOSED_TAG] 2:1: open tag has no corresponding close tag and is not self-closing",
        "  note 2:6: input ends here",
        f"  help: {PARSER_UNCLOSED_TAG.hint}",
    ]


def test_format_diagnostic_without_source_uses_offsets() -> None:
    diagnostic = Diagnostic(
        code="X",
        message="message",
        span=Span(3, 4),
        secondary=(Label(Span(0, 1), "here"),),
    )
    assert format_diagnostic(diagnostic) == "error[X] @3: message\n  note @0: here"


def test_diagnostic_helpers() -> None:
    error = Diagnostic(code="E", message="boom", span=Span(0, 1))
    warnings = [_warning(0), _warning(1)]

    combined = collect_diagnostics(warnings, [error])
    assert combined == [*warnings, error]
    assert has_errors(combined)
    assert not has_errors(warnings)
    assert first_error(combined) is error
    assert first_error(warnings) is None
    assert error.is_error
    assert not warnings[0].is_error
