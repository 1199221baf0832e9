"""Match ranges discovered by a single scan pass."""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, replace
from enum import Enum


class Direction(Enum):
    """Traversal direction of the scan that produced a match."""

    FORWARD = "forward"
    REVERSE = "reverse"


@dataclass(frozen=True)
class MatchRange:
    """A found occurrence as a half-open byte range `[start, end)`.

    Line ranges may be patched to file boundaries, so `start == end` (an empty
    line) is allowed; `start > end` never is.
    """

    start: int
    end: int
    direction: Direction = Direction.FORWARD
    is_first: bool = False
    is_last: bool = False

    def __post_init__(self) -> None:
        if self.start < 0 or self.end < self.start:
            raise ValueError(f"invalid match range [{self.start}, {self.end})")

    @property
    def length(self) -> int:
        return self.end - self.start


class MatchList:
    """Discovery-ordered matches from one scan.

    Never merged across scans; the scanner builds a fresh list per call and the
    caller owns it.
    """

    def __init__(self, items: list[MatchRange] | None = None) -> None:
        self._items: list[MatchRange] = list(items) if items else []

    def add(self, item: MatchRange) -> MatchList:
        self._items.append(item)
        return self

    def first(self) -> MatchRange | None:
        return self._items[0] if self._items else None

    def last(self) -> MatchRange | None:
        return self._items[-1] if self._items else None

    def patch(self, item: MatchRange, **changes: object) -> MatchRange:
        """Replace `item`'s fields in place and return the patched range.

        `item` is located by identity; `ValueError` if it is not in this list.
        """
        for i, existing in enumerate(self._items):
            if existing is item:
                patched = replace(existing, **changes)  # type: ignore[arg-type]
                self._items[i] = patched
                return patched
        raise ValueError("range is not part of this match list")

    def __len__(self) -> int:
        return len(self._items)

    def __bool__(self) -> bool:
        return bool(self._items)

    def __iter__(self) -> Iterator[MatchRange]:
        return iter(self._items)

    def __getitem__(self, index: int) -> MatchRange:
        return self._items[index]

    def __repr__(self) -> str:
        return f"MatchList({self._items!r})"
