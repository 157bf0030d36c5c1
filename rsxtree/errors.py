"""Exceptions raised by rsxtree."""

from rsxtree.diagnostics import Diagnostic


class RsxError(Exception):
    """Base class for rsxtree exceptions."""


class RsxParseError(RsxError):
    """Parsing aborted on an error diagnostic (strict mode, or `into_nodes()` on a failed parse)."""

    def __init__(self, diagnostic: Diagnostic) -> None:
        super().__init__(diagnostic.message)
        self.diagnostic = diagnostic


class EmbeddedCodeError(RsxParseError):
    """Embedded code failed to parse and block recovery is disabled."""


class TransformBlockError(RsxError):
    """Raised by a block transform hook to reject the block content."""
