"""Source spans."""

from rsxtree.text.text import Span, cover_spans, slice_span

__all__ = [
    "Span",
    "cover_spans",
    "slice_span",
]
