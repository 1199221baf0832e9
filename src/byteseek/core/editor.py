"""Read/search/line API over a single open file.

    with Editor.open("server.log") as ed:
        header = ed.get_first_line().read_as_string()
        tail = ed.get_last_line().read_as_string()
        hit = ed.search_last(b"ERROR")
"""

from __future__ import annotations

import logging
import os
import threading
from typing import Protocol

from byteseek.core.config import EditorConfig
from byteseek.core.errors import EditorClosed, InvalidArgument, InvalidOffset
from byteseek.core.io import FileHandle, open_handle
from byteseek.core.matches import MatchList, MatchRange
from byteseek.core.results import LineResult, SearchResult
from byteseek.core.scanner import ChunkScanner

logger = logging.getLogger(__name__)


class Reader(Protocol):
    """Read and search capability."""

    def size_in_bytes(self) -> int: ...

    def read(self, offset: int, length: int) -> bytes: ...

    def read_as_string(self, offset: int, length: int, encoding: str | None = None) -> str: ...

    def search_first(self, pattern: bytes | str, start: int = 0) -> SearchResult | None: ...

    def search_last(self, pattern: bytes | str, until: int | None = None) -> SearchResult | None: ...

    def get_first_line(self, delimiter: bytes | str | None = None) -> LineResult: ...

    def get_last_line(self, delimiter: bytes | str | None = None) -> LineResult: ...


class Closer(Protocol):
    """Lifecycle capability."""

    def close(self) -> None: ...


class Editor:
    """Owns one FileHandle and answers first/last searches and line lookups.

    Not safe for concurrent use; open one Editor per thread instead.
    """

    def __init__(self, handle: FileHandle, *, config: EditorConfig | None = None) -> None:
        self._handle = handle
        self._config = config or EditorConfig()
        self._scanner = ChunkScanner(handle, self._config.chunk_size)
        self._closed = False

    @classmethod
    def open(
        cls,
        ref: str | os.PathLike[str] | bytes | bytearray | FileHandle,
        *,
        config: EditorConfig | None = None,
    ) -> Editor:
        """Open `ref` (a path, raw bytes, or a handle) and wrap it."""
        return cls(open_handle(ref), config=config)

    def __enter__(self) -> Editor:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    @property
    def config(self) -> EditorConfig:
        return self._config

    @property
    def raw(self) -> FileHandle:
        """The underlying handle."""
        return self._handle

    @property
    def closed(self) -> bool:
        return self._closed

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        self._handle.close()

    def _ensure_open(self) -> None:
        if self._closed:
            raise EditorClosed("editor is closed")

    def _to_bytes(self, value: bytes | str, what: str) -> bytes:
        if isinstance(value, str):
            value = value.encode(self._config.encoding)
        elif isinstance(value, (bytearray, memoryview)):
            value = bytes(value)
        elif not isinstance(value, bytes):
            raise InvalidArgument(f"{what} must be bytes or str, not {type(value).__name__}")
        if not value:
            raise InvalidArgument(f"{what} must not be empty")
        return value

    # ---- Reads ----
    def size_in_bytes(self) -> int:
        self._ensure_open()
        return self._handle.size

    def read(self, offset: int, length: int) -> bytes:
        """Read up to `length` bytes at `offset`; shorter only at EOF."""
        self._ensure_open()
        return self._handle.read_at(offset, length)

    def read_into(
        self,
        buffer: bytearray | memoryview,
        offset: int,
        *,
        buffer_offset: int = 0,
        length: int | None = None,
    ) -> int:
        """Read into `buffer` and return the number of bytes actually read."""
        self._ensure_open()
        return self._handle.read_into(buffer, offset, buffer_offset, length)

    def read_as_string(self, offset: int, length: int, encoding: str | None = None) -> str:
        return self.read(offset, length).decode(encoding or self._config.encoding)

    def read_range(self, offset: int, length: int, encoding: str | None = None) -> bytes | str:
        """Bytes when `encoding` is None, otherwise the decoded text."""
        if encoding is None:
            return self.read(offset, length)
        return self.read_as_string(offset, length, encoding)

    # ---- Searches ----
    def search_first(
        self,
        pattern: bytes | str,
        start: int = 0,
        *,
        cancel: threading.Event | None = None,
    ) -> SearchResult | None:
        """Earliest occurrence of `pattern` at or after `start`, or None."""
        self._ensure_open()
        needle = self._to_bytes(pattern, "pattern")
        if start < 0:
            raise InvalidOffset("start must be >= 0")
        matches = self._scanner.forward_scan(needle, start, self._handle.size, cancel=cancel)
        first = matches.first() if matches is not None else None
        if first is None:
            return None
        return SearchResult(first, needle, self)

    def search_last(
        self,
        pattern: bytes | str,
        until: int | None = None,
        *,
        cancel: threading.Event | None = None,
    ) -> SearchResult | None:
        """Latest occurrence of `pattern` ending at or before `until` (default: EOF)."""
        self._ensure_open()
        needle = self._to_bytes(pattern, "pattern")
        size = self._handle.size
        if until is None:
            until = size
        elif until < 0:
            raise InvalidOffset("until must be >= 0")
        matches = self._scanner.reverse_scan(needle, 0, min(until, size), cancel=cancel)
        last = matches.last() if matches is not None else None
        if last is None:
            return None
        return SearchResult(last, needle, self)

    # ---- Lines ----
    def _single_line(self, delimiter: bytes) -> LineResult:
        whole = MatchRange(start=0, end=self._handle.size, is_first=True, is_last=True)
        return LineResult(whole, delimiter, self)

    def get_first_line(
        self,
        delimiter: bytes | str | None = None,
        *,
        cancel: threading.Event | None = None,
    ) -> LineResult:
        """Bytes from file start up to (not including) the first delimiter."""
        self._ensure_open()
        sep = self._to_bytes(delimiter if delimiter is not None else self._config.delimiter, "delimiter")
        matches: MatchList | None = self._scanner.forward_scan(sep, 0, self._handle.size, cancel=cancel)
        first = matches.first() if matches is not None else None
        if matches is None or first is None:
            logger.debug("no delimiter found, file is a single line")
            return self._single_line(sep)
        line = matches.patch(first, start=0, end=first.start, is_first=True)
        return LineResult(line, sep, self)

    def get_last_line(
        self,
        delimiter: bytes | str | None = None,
        *,
        cancel: threading.Event | None = None,
    ) -> LineResult:
        """Bytes after the last delimiter up to end of file (may be empty)."""
        self._ensure_open()
        sep = self._to_bytes(delimiter if delimiter is not None else self._config.delimiter, "delimiter")
        size = self._handle.size
        matches = self._scanner.reverse_scan(sep, 0, size, cancel=cancel)
        last = matches.last() if matches is not None else None
        if matches is None or last is None:
            logger.debug("no delimiter found, file is a single line")
            return self._single_line(sep)
        line = matches.patch(last, start=last.end, end=size, is_last=True)
        return LineResult(line, sep, self)

    # Short names for the public surface
    search = search_first
    search_from_end = search_last
    first_line = get_first_line
    last_line = get_last_line
