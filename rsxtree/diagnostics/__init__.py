"""Diagnostics."""

from rsxtree.diagnostics.diagnostic import Diagnostic, Label, Severity
from rsxtree.diagnostics.codes import (
    LEXER_UNBALANCED_DELIMITER,
    LEXER_UNTERMINATED_STRING,
    PARSER_EXPECTED_TOKEN,
    PARSER_INVALID_ATTRIBUTE_VALUE,
    PARSER_INVALID_EMBEDDED_CODE,
    PARSER_MISMATCHED_CLOSE_TAG,
    PARSER_NESTING_TOO_DEEP,
    PARSER_STRAY_CLOSE_TAG,
    PARSER_TOP_LEVEL_LIMIT_EXCEEDED,
    PARSER_TOP_LEVEL_TYPE_VIOLATION,
    PARSER_UNCLOSED_TAG,
    PARSER_UNEXPECTED_TOKEN,
    PARSER_UNTERMINATED_COMMENT,
    DiagnosticSpec,
)
from rsxtree.diagnostics.report import (
    collect_diagnostics,
    first_error,
    format_diagnostic,
    has_errors,
)

__all__ = [
    "LEXER_UNBALANCED_DELIMITER",
    "LEXER_UNTERMINATED_STRING",
    "PARSER_EXPECTED_TOKEN",
    "PARSER_INVALID_ATTRIBUTE_VALUE",
    "PARSER_INVALID_EMBEDDED_CODE",
    "PARSER_MISMATCHED_CLOSE_TAG",
    "PARSER_NESTING_TOO_DEEP",
    "PARSER_STRAY_CLOSE_TAG",
    "PARSER_TOP_LEVEL_LIMIT_EXCEEDED",
    "PARSER_TOP_LEVEL_TYPE_VIOLATION",
    "PARSER_UNCLOSED_TAG",
    "PARSER_UNEXPECTED_TOKEN",
    "PARSER_UNTERMINATED_COMMENT",
    "Diagnostic",
    "DiagnosticSpec",
    "Label",
    "Severity",
    "collect_diagnostics",
    "first_error",
    "format_diagnostic",
    "has_errors",
]
