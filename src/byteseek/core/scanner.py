"""Chunked forward/reverse literal search over a FileHandle.

Peak memory is one window of `window_size(len(pattern)) + len(pattern)` bytes,
regardless of file size. Successive windows overlap so an occurrence that
straddles a window boundary is always fully contained in one of them.
"""

from __future__ import annotations

import logging
import threading

from byteseek.core.errors import InvalidArgument, InvalidOffset, ScanCancelled
from byteseek.core.io import FileHandle
from byteseek.core.matches import Direction, MatchList, MatchRange

logger = logging.getLogger(__name__)

DEFAULT_CHUNK_SIZE = 1024
# Windows are kept at least this many pattern lengths wide so a long pattern
# does not degrade the scan into near byte-by-byte probing.
WINDOW_MULTIPLIER = 7


def overlap_margin(pattern_len: int) -> int:
    """Half the pattern length, rounded up. Shared by both scan directions."""
    return (pattern_len + 1) // 2


def find_all(pattern: bytes, window: bytes, *, reverse: bool = False) -> list[int]:
    """Return ascending offsets of non-overlapping occurrences of `pattern` in `window`.

    Forward: searched left to right, each search resuming after the previous
    hit, so the first offset is the earliest occurrence.
    Reverse: searched right to left, each search resuming before the previous
    hit, so the last offset is the latest occurrence.
    """
    hits: list[int] = []
    n = len(pattern)
    if reverse:
        end = len(window)
        while True:
            i = window.rfind(pattern, 0, end)
            if i == -1:
                break
            hits.append(i)
            end = i
        hits.reverse()
        return hits
    i = window.find(pattern)
    while i != -1:
        hits.append(i)
        i = window.find(pattern, i + n)
    return hits


def reverse_window(position: int, window: int, pattern_len: int, lower: int) -> tuple[int, int]:
    """Compute the next `(start, length)` read when walking down from `position`.

    The window starts `window + overlap_margin` bytes below `position` (clamped
    to `lower`) and reaches `pattern_len - 1` bytes past it, so every occurrence
    that starts before `position` lies fully inside it.
    """
    start = position - (window + overlap_margin(pattern_len))
    if start < lower:
        start = lower
    return start, position - start + pattern_len - 1


def _check_cancel(cancel: threading.Event | None) -> None:
    if cancel is not None and cancel.is_set():
        raise ScanCancelled("scan cancelled")


class ChunkScanner:
    """Windowed literal search bound to one FileHandle."""

    def __init__(self, handle: FileHandle, chunk_size: int = DEFAULT_CHUNK_SIZE) -> None:
        if chunk_size <= 0:
            raise InvalidArgument("chunk_size must be positive")
        self._handle = handle
        self._chunk_size = int(chunk_size)

    @property
    def chunk_size(self) -> int:
        return self._chunk_size

    def window_size(self, pattern_len: int) -> int:
        return max(self._chunk_size, pattern_len * WINDOW_MULTIPLIER)

    def forward_scan(
        self,
        pattern: bytes,
        lower: int,
        upper: int,
        *,
        cancel: threading.Event | None = None,
    ) -> MatchList | None:
        """Return the matches of the first window in `[lower, upper)` that has any.

        The head of the returned list is the earliest occurrence in the range.
        No read is issued when `lower >= upper`.
        """
        plen = _check_pattern(pattern)
        _check_bounds(lower, upper)
        upper = min(upper, self._handle.size)
        window = self.window_size(plen)
        step = window - overlap_margin(plen)

        position = lower
        while position < upper:
            _check_cancel(cancel)
            end = min(position + window + plen, upper)
            chunk = self._handle.read_at(position, end - position)
            logger.debug("forward window [%d, %d) for %d-byte pattern", position, end, plen)
            hits = find_all(pattern, chunk)
            if hits:
                return _to_match_list(hits, plen, position, Direction.FORWARD)
            if end >= upper:
                break
            position += step
        logger.debug("forward scan of [%d, %d) found nothing", lower, upper)
        return None

    def reverse_scan(
        self,
        pattern: bytes,
        lower: int,
        upper: int,
        *,
        cancel: threading.Event | None = None,
    ) -> MatchList | None:
        """Return the matches of the last window in `[lower, upper)` that has any.

        The tail of the returned list is the latest occurrence in the range.
        """
        plen = _check_pattern(pattern)
        _check_bounds(lower, upper)
        upper = min(upper, self._handle.size)
        if lower > upper:
            return None
        window = self.window_size(plen)

        position = upper
        while position > lower:
            _check_cancel(cancel)
            start, length = reverse_window(position, window, plen, lower)
            end = min(start + length, upper)
            chunk = self._handle.read_at(start, end - start)
            logger.debug("reverse window [%d, %d) for %d-byte pattern", start, end, plen)
            hits = find_all(pattern, chunk, reverse=True)
            if hits:
                return _to_match_list(hits, plen, start, Direction.REVERSE)
            position = start
        logger.debug("reverse scan of [%d, %d) found nothing", lower, upper)
        return None


def _check_pattern(pattern: bytes) -> int:
    if not isinstance(pattern, (bytes, bytearray, memoryview)):
        raise InvalidArgument(f"pattern must be bytes, not {type(pattern).__name__}")
    if len(pattern) == 0:
        raise InvalidArgument("pattern must not be empty")
    return len(pattern)


def _check_bounds(lower: int, upper: int) -> None:
    if lower < 0:
        raise InvalidOffset("lower bound must be >= 0")
    if upper < 0:
        raise InvalidOffset("upper bound must be >= 0")


def _to_match_list(hits: list[int], plen: int, base: int, direction: Direction) -> MatchList:
    matches = MatchList()
    for local in hits:
        start = base + local
        matches.add(MatchRange(start=start, end=start + plen, direction=direction))
    return matches
