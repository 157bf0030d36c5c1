"""Parse result carriers."""

from rsxtree.pipeline.result import RsxParseResult

__all__ = [
    "RsxParseResult",
]
