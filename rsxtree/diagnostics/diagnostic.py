"""Diagnostics core types."""

from dataclasses import dataclass
from typing import Literal

from rsxtree.text import Span

type Severity = Literal["error", "warning", "note"]


@dataclass(frozen=True, slots=True)
class Label:
    """Secondary span with its own message, e.g. "open tag is here"."""

    span: Span
    message: str


@dataclass(frozen=True, slots=True)
class Diagnostic:
    """Structured diagnostic emitted by the lexer and parser."""

    code: str
    message: str
    span: Span
    severity: Severity = "error"
    hint: str | None = None
    category: str | None = None
    secondary: tuple[Label, ...] = ()

    @property
    def is_error(self) -> bool:
        return self.severity == "error"
