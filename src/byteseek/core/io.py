from __future__ import annotations

import logging
import os
from typing import Protocol, runtime_checkable

from byteseek.core.errors import EditorClosed, InvalidOffset

logger = logging.getLogger(__name__)


@runtime_checkable
class FileHandle(Protocol):
    """Byte-addressable file consumed by the scanner.

    Implementations return fewer bytes than requested only at true EOF and
    never pad. Reads after `close()` raise `EditorClosed`.
    """

    @property
    def size(self) -> int: ...

    def read_at(self, offset: int, length: int) -> bytes: ...

    def read_into(
        self,
        buffer: bytearray | memoryview,
        offset: int,
        buffer_offset: int = 0,
        length: int | None = None,
    ) -> int: ...

    def close(self) -> None: ...


def _check_range(offset: int, length: int) -> None:
    if offset < 0:
        raise InvalidOffset("offset must be >= 0")
    if length < 0:
        raise InvalidOffset("length must be >= 0")


def _target_view(
    buffer: bytearray | memoryview, buffer_offset: int, length: int | None
) -> memoryview:
    if buffer_offset < 0:
        raise InvalidOffset("buffer_offset must be >= 0")
    view = memoryview(buffer).cast("B")
    if buffer_offset > len(view):
        raise InvalidOffset("buffer_offset is past the end of the buffer")
    available = len(view) - buffer_offset
    if length is None:
        length = available
    if length < 0:
        raise InvalidOffset("length must be >= 0")
    return view[buffer_offset : buffer_offset + min(length, available)]


class LocalFileHandle:
    """Bounds-checked reader over a file on the local filesystem.

    Each read is a single seek + read of at most the requested length; nothing
    beyond the requested range is kept in memory.
    """

    def __init__(self, path: str | os.PathLike[str]) -> None:
        self._path = os.fspath(path)
        try:
            os.stat(self._path)
        except FileNotFoundError:
            raise FileNotFoundError(f"File not found: {self._path}") from None
        self._fh = open(self._path, "rb", buffering=0)  # noqa: SIM115
        self._closed = False
        logger.debug("opened %s", self._path)

    def close(self) -> None:
        if self._closed:
            return
        # Marked closed before the OS close so a failed close still blocks reads
        self._closed = True
        self._fh.close()
        logger.debug("closed %s", self._path)

    def __enter__(self) -> LocalFileHandle:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def path(self) -> str:
        """File path."""
        return self._path

    @property
    def size(self) -> int:
        """Current file size in bytes (queried from the open descriptor)."""
        self._ensure_open()
        return int(os.fstat(self._fh.fileno()).st_size)

    def _ensure_open(self) -> None:
        if self._closed:
            raise EditorClosed(f"handle for {self._path} is closed")

    def read_at(self, offset: int, length: int) -> bytes:
        """Read up to `length` bytes starting at `offset`.

        - Negative `offset` or `length` raises `InvalidOffset`.
        - Reading past EOF returns the truncated data.
        """
        _check_range(offset, length)
        self._ensure_open()
        if length == 0:
            return b""
        self._fh.seek(offset)
        result = bytearray()
        while len(result) < length:
            data = self._fh.read(length - len(result))
            if not data:
                break
            result += data
        return bytes(result)

    def read_into(
        self,
        buffer: bytearray | memoryview,
        offset: int,
        buffer_offset: int = 0,
        length: int | None = None,
    ) -> int:
        """Fill `buffer[buffer_offset:]` from `offset`; return the byte count read.

        Bytes of `buffer` beyond the returned count are left untouched.
        """
        if offset < 0:
            raise InvalidOffset("offset must be >= 0")
        target = _target_view(buffer, buffer_offset, length)
        self._ensure_open()
        self._fh.seek(offset)
        filled = 0
        while filled < len(target):
            n = self._fh.readinto(target[filled:])
            if not n:
                break
            filled += n
        return filled


class MemoryHandle:
    """In-memory stand-in for a file; useful for tests and small buffers."""

    def __init__(self, data: bytes | bytearray = b"", *, name: str = "<memory>") -> None:
        self._data = bytes(data)
        self._name = name
        self._closed = False

    def close(self) -> None:
        self._closed = True

    def __enter__(self) -> MemoryHandle:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def path(self) -> str:
        return self._name

    @property
    def size(self) -> int:
        self._ensure_open()
        return len(self._data)

    def _ensure_open(self) -> None:
        if self._closed:
            raise EditorClosed(f"handle for {self._name} is closed")

    def read_at(self, offset: int, length: int) -> bytes:
        _check_range(offset, length)
        self._ensure_open()
        return self._data[offset : offset + length]

    def read_into(
        self,
        buffer: bytearray | memoryview,
        offset: int,
        buffer_offset: int = 0,
        length: int | None = None,
    ) -> int:
        if offset < 0:
            raise InvalidOffset("offset must be >= 0")
        target = _target_view(buffer, buffer_offset, length)
        self._ensure_open()
        chunk = self._data[offset : offset + len(target)]
        target[: len(chunk)] = chunk
        return len(chunk)


def open_handle(ref: str | os.PathLike[str] | bytes | bytearray | FileHandle) -> FileHandle:
    """Return a FileHandle for a path, raw bytes, or an existing handle."""
    if isinstance(ref, (bytes, bytearray)):
        return MemoryHandle(ref)
    if isinstance(ref, (str, os.PathLike)):
        return LocalFileHandle(ref)
    if isinstance(ref, FileHandle):
        return ref
    raise TypeError(f"cannot open {type(ref).__name__!r} as a file handle")
