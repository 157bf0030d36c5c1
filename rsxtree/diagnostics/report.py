"""Diagnostics helpers."""

from __future__ import annotations

from collections.abc import Iterable

from rsxtree.diagnostics.diagnostic import Diagnostic


def collect_diagnostics(*groups: Iterable[Diagnostic]) -> list[Diagnostic]:
    diagnostics: list[Diagnostic] = []
    for group in groups:
        diagnostics.extend(group)
    return diagnostics


def has_errors(diagnostics: Iterable[Diagnostic]) -> bool:
    return any(d.severity == "error" for d in diagnostics)


def first_error(diagnostics: Iterable[Diagnostic]) -> Diagnostic | None:
    return next((d for d in diagnostics if d.severity == "error"), None)


def format_diagnostic(diagnostic: Diagnostic, source: str | None = None) -> str:
    """Compiler-style rendering: `error[CODE] 3:5: message` plus one line per secondary label."""
    lines = [f"{diagnostic.severity}[{diagnostic.code}] {_location(diagnostic.span.start, source)}: {diagnostic.message}"]
    for label in diagnostic.secondary:
        lines.append(f"  note {_location(label.span.start, source)}: {label.message}")
    if diagnostic.hint:
        lines.append(f"  help: {diagnostic.hint}")
    return "\n".join(lines)


def _location(offset: int, source: str | None) -> str:
    if source is None:
        return f"@{offset}"
    line = source.count("\n", 0, offset) + 1
    column = offset - (source.rfind("\n", 0, offset) + 1) + 1
    return f"{line}:{column}"
