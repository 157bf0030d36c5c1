"""Diagnostic codes and messages."""

from dataclasses import dataclass
from typing import Final

from rsxtree.diagnostics.diagnostic import Severity


@dataclass(frozen=True, slots=True)
class DiagnosticSpec:
    code: str
    message: str
    hint: str | None = None
    severity: Severity = "error"
    category: str | None = None


LEXER_UNTERMINATED_STRING: Final[DiagnosticSpec] = DiagnosticSpec(
    code="LEXER_UNTERMINATED_STRING",
    message="Unterminated string literal.",
    hint="Close the string with the same quote it was opened with.",
    severity="error",
    category="lexer",
)

LEXER_UNBALANCED_DELIMITER: Final[DiagnosticSpec] = DiagnosticSpec(
    code="LEXER_UNBALANCED_DELIMITER",
    message="Unbalanced delimiter.",
    severity="error",
    category="lexer",
)

PARSER_UNCLOSED_TAG: Final[DiagnosticSpec] = DiagnosticSpec(
    code="PARSER_UNCLOSED_TAG",
    message="open tag has no corresponding close tag and is not self-closing",
    hint="Add a matching close tag or end the open tag with `/>`.",
    severity="error",
    category="parser",
)

PARSER_MISMATCHED_CLOSE_TAG: Final[DiagnosticSpec] = DiagnosticSpec(
    code="PARSER_MISMATCHED_CLOSE_TAG",
    message="wrong close tag found",
    severity="error",
    category="parser",
)

PARSER_STRAY_CLOSE_TAG: Final[DiagnosticSpec] = DiagnosticSpec(
    code="PARSER_STRAY_CLOSE_TAG",
    message="closing tag with no corresponding open tag",
    severity="error",
    category="parser",
)

PARSER_INVALID_ATTRIBUTE_VALUE: Final[DiagnosticSpec] = DiagnosticSpec(
    code="PARSER_INVALID_ATTRIBUTE_VALUE",
    message="invalid attribute value",
    hint="Use a quoted literal, a path expression, or a `{...}` block.",
    severity="error",
    category="parser",
)

PARSER_INVALID_EMBEDDED_CODE: Final[DiagnosticSpec] = DiagnosticSpec(
    code="PARSER_INVALID_EMBEDDED_CODE",
    message="invalid embedded code",
    severity="error",
    category="parser",
)

PARSER_TOP_LEVEL_LIMIT_EXCEEDED: Final[DiagnosticSpec] = DiagnosticSpec(
    code="PARSER_TOP_LEVEL_LIMIT_EXCEEDED",
    message="too many top level nodes",
    severity="error",
    category="parser",
)

PARSER_TOP_LEVEL_TYPE_VIOLATION: Final[DiagnosticSpec] = DiagnosticSpec(
    code="PARSER_TOP_LEVEL_TYPE_VIOLATION",
    message="top level node has a disallowed type",
    severity="error",
    category="parser",
)

PARSER_EXPECTED_TOKEN: Final[DiagnosticSpec] = DiagnosticSpec(
    code="PARSER_EXPECTED_TOKEN",
    message="Expected token",
    severity="error",
    category="parser",
)

PARSER_UNEXPECTED_TOKEN: Final[DiagnosticSpec] = DiagnosticSpec(
    code="PARSER_UNEXPECTED_TOKEN",
    message="Unexpected token",
    severity="error",
    category="parser",
)

PARSER_UNTERMINATED_COMMENT: Final[DiagnosticSpec] = DiagnosticSpec(
    code="PARSER_UNTERMINATED_COMMENT",
    message="comment is not terminated",
    hint="End the comment with `-->`.",
    severity="error",
    category="parser",
)

PARSER_NESTING_TOO_DEEP: Final[DiagnosticSpec] = DiagnosticSpec(
    code="PARSER_NESTING_TOO_DEEP",
    message="markup is nested too deeply",
    hint="Content below this tag is kept as raw text; raise `max_nesting_depth` to parse it.",
    severity="error",
    category="parser",
)
