from collections.abc import Iterable
from dataclasses import dataclass
from typing import Literal


@dataclass(frozen=True, slots=True, order=True)
class Span:
    """
    Half-open range [start, end) of source offsets.

    Invariant:
    - 0 <= start <= end

    Offsets match python string indices, so a span slices the source text directly.
    """

    start: int
    end: int

    def __post_init__(self):
        if self.start < 0 or self.end < 0:
            raise ValueError("Span positions cannot be negative")
        if self.start > self.end:
            raise ValueError("Span invariant violated: start > end")

    @staticmethod
    def at(offset: int, length: int) -> "Span":
        """Create a Span at offset with given length."""
        return Span(offset, offset + length)

    @staticmethod
    def empty(offset: int) -> "Span":
        """Create an empty Span at the given offset."""
        return Span(offset, offset)

    def len(self) -> int:
        """Get the length of the span."""
        return self.end - self.start

    def is_empty(self) -> bool:
        return self.start == self.end

    def as_tuple(self) -> tuple[int, int]:
        """Get the span as a tuple of (start, end) integers."""
        return (self.start, self.end)

    def contains(self, offset: int) -> bool:
        return self.start <= offset < self.end

    def contains_span(self, other: "Span") -> bool:
        """Check if the span fully contains another span."""
        return self.start <= other.start and other.end <= self.end

    def cover(self, other: "Span") -> "Span":
        """Get the minimal span that covers both this span and another span."""
        return Span(min(self.start, other.start), max(self.end, other.end))

    def ordering(self, other: "Span") -> Literal[-1, 0, 1]:
        """Compare this span to another span for ordering.

        Returns:
        - -1 if this span is before the other span
        - 0 if the spans overlap
        - 1 if this span is after the other span
        """
        if self.end <= other.start:
            return -1
        elif other.end <= self.start:
            return 1
        else:
            return 0

    def __repr__(self) -> str:
        return f"Span({self.start}, {self.end})"


def cover_spans(spans: Iterable[Span], default: Span | None = None) -> Span:
    """Smallest span covering every span in `spans`.

    Raises ValueError when `spans` is empty and no default is given.
    """
    result: Span | None = None
    for span in spans:
        result = span if result is None else result.cover(span)
    if result is None:
        if default is None:
            raise ValueError("Cannot cover an empty sequence of spans")
        return default
    return result


def slice_span(source: str, span: Span) -> str:
    """Get the substring of the source text covered by the given Span."""
    return source[span.start : span.end]

