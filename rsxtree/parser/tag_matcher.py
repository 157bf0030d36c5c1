"""Stack of open elements and fragments, and close tag resolution."""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum

from rsxtree.nodes import NodeName
from rsxtree.text import Span


@dataclass(frozen=True, slots=True)
class OpenEntry:
    """Open element (`name` set) or fragment (`name` None).

    Entries form a persistent linked stack so that a snapshot is just a reference.
    """

    name: NodeName | None
    span: Span
    parent: OpenEntry | None = None
    depth: int = 1

    @property
    def is_fragment(self) -> bool:
        return self.name is None

    @property
    def display_name(self) -> str:
        return "<>" if self.name is None else f"<{self.name}>"


class CloseMatch(StrEnum):
    TOP = "top"
    DEEPER = "deeper"
    MISMATCHED = "mismatched"
    STRAY = "stray"


class TagMatcher:
    def __init__(self) -> None:
        self._top: OpenEntry | None = None

    @property
    def top(self) -> OpenEntry | None:
        return self._top

    @property
    def depth(self) -> int:
        return 0 if self._top is None else self._top.depth

    def is_empty(self) -> bool:
        return self._top is None

    def snapshot(self) -> OpenEntry | None:
        return self._top

    def restore(self, snapshot: OpenEntry | None) -> None:
        self._top = snapshot

    def push(self, name: NodeName | None, span: Span) -> OpenEntry:
        self._top = OpenEntry(name=name, span=span, parent=self._top, depth=self.depth + 1)
        return self._top

    def pop(self) -> OpenEntry:
        if self._top is None:
            raise RuntimeError("Tag stack is empty")
        entry = self._top
        self._top = entry.parent
        return entry

    def match_close(self, name: NodeName | None) -> CloseMatch:
        """Classify a close tag against the open entries without changing the stack.

        TOP: closes the innermost entry.
        DEEPER: closes an outer entry; every entry above it is closed implicitly.
        MISMATCHED: no open entry has this name.
        STRAY: nothing is open.
        """
        if self._top is None:
            return CloseMatch.STRAY
        if self._top.name == name:
            return CloseMatch.TOP
        entry = self._top.parent
        while entry is not None:
            if entry.name == name:
                return CloseMatch.DEEPER
            entry = entry.parent
        return CloseMatch.MISMATCHED
