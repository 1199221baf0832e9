from __future__ import annotations

from pathlib import Path

import pytest

from byteseek.core.errors import EditorClosed, InvalidOffset
from byteseek.core.io import FileHandle, LocalFileHandle, MemoryHandle, open_handle


def make_fixture_file(tmp_path: Path, size: int = 5000) -> Path:
    # Deterministic content: 0..255 repeating
    data = bytes(i % 256 for i in range(size))
    p = tmp_path / "fixture.bin"
    p.write_bytes(data)
    return p


def open_kind(tmp_path: Path, kind: str, size: int) -> FileHandle:
    path = make_fixture_file(tmp_path, size=size)
    if kind == "local":
        return LocalFileHandle(path)
    return MemoryHandle(path.read_bytes())


@pytest.mark.parametrize("kind", ["local", "memory"])
def test_read_exact_ranges(tmp_path: Path, kind: str) -> None:
    h = open_kind(tmp_path, kind, 5000)
    try:
        assert h.read_at(0, 16) == bytes(range(16))

        off = 1234
        ln = 77
        expected = bytes(i % 256 for i in range(off, off + ln))
        assert h.read_at(off, ln) == expected
        assert h.size == 5000
    finally:
        h.close()


@pytest.mark.parametrize("kind", ["local", "memory"])
def test_read_past_eof_truncated(tmp_path: Path, kind: str) -> None:
    h = open_kind(tmp_path, kind, 4097)
    try:
        start = h.size - 10
        out = h.read_at(start, 100)
        assert len(out) == 10
        assert out == bytes(i % 256 for i in range(start, h.size))

        # Offset exactly at EOF returns empty
        assert h.read_at(h.size, 10) == b""
        assert h.read_at(h.size + 50, 10) == b""
    finally:
        h.close()


@pytest.mark.parametrize("kind", ["local", "memory"])
def test_invalid_negative_offset_raises(tmp_path: Path, kind: str) -> None:
    h = open_kind(tmp_path, kind, 100)
    try:
        with pytest.raises(InvalidOffset):
            h.read_at(-1, 1)
        with pytest.raises(InvalidOffset):
            h.read_at(0, -1)
        with pytest.raises(InvalidOffset):
            h.read_into(bytearray(4), -1)
    finally:
        h.close()


@pytest.mark.parametrize("kind", ["local", "memory"])
def test_read_into_leaves_rest_of_buffer(tmp_path: Path, kind: str) -> None:
    p = tmp_path / "content.txt"
    p.write_bytes(b"test-content")
    h = LocalFileHandle(p) if kind == "local" else MemoryHandle(p.read_bytes())
    try:
        buf = bytearray(b"*" * 20)
        n = h.read_into(buf, 5)
        assert n == 7
        assert bytes(buf[:7]) == b"content"
        assert bytes(buf[7:]) == b"*" * 13

        # Append at an offset inside the same buffer
        n2 = h.read_into(buf, 4, buffer_offset=n, length=1)
        assert n2 == 1
        assert bytes(buf[:9]) == b"content-*"
    finally:
        h.close()


@pytest.mark.parametrize("kind", ["local", "memory"])
def test_reads_after_close_fail(tmp_path: Path, kind: str) -> None:
    h = open_kind(tmp_path, kind, 10)
    h.close()
    h.close()  # idempotent
    with pytest.raises(EditorClosed):
        h.read_at(0, 1)
    with pytest.raises(EditorClosed):
        _ = h.size


def test_file_not_found(tmp_path: Path) -> None:
    missing = tmp_path / "missing.bin"
    with pytest.raises(FileNotFoundError):
        LocalFileHandle(missing)


def test_local_size_tracks_appends(tmp_path: Path) -> None:
    p = tmp_path / "grow.log"
    p.write_bytes(b"one\n")
    with LocalFileHandle(p) as h:
        assert h.size == 4
        with p.open("ab") as f:
            f.write(b"two\n")
        assert h.size == 8
        assert h.read_at(4, 4) == b"two\n"


def test_open_handle_dispatch(tmp_path: Path) -> None:
    p = make_fixture_file(tmp_path, size=8)
    local = open_handle(str(p))
    assert isinstance(local, LocalFileHandle)
    local.close()
    with open_handle(p) as h:  # type: ignore[attr-defined]
        assert isinstance(h, LocalFileHandle)

    mem = open_handle(b"abc")
    assert isinstance(mem, MemoryHandle)
    assert open_handle(mem) is mem

    with pytest.raises(TypeError):
        open_handle(42)  # type: ignore[arg-type]


class FailingClose:
    """File object stand-in whose close fails like a flaky network mount."""

    def __init__(self, inner, error: OSError) -> None:  # type: ignore[no-untyped-def]
        self._inner = inner
        self.error = error

    def __getattr__(self, name: str):  # type: ignore[no-untyped-def]
        return getattr(self._inner, name)

    def close(self) -> None:
        self._inner.close()
        raise self.error


def test_close_failure_propagates(tmp_path: Path) -> None:
    p = make_fixture_file(tmp_path, size=10)
    h = LocalFileHandle(p)
    err = OSError(5, "EIO on close")
    h._fh = FailingClose(h._fh, err)  # type: ignore[assignment]
    with pytest.raises(OSError) as exc_info:
        h.close()
    assert exc_info.value is err
    # Still counts as closed afterwards
    assert h.closed
    with pytest.raises(EditorClosed):
        h.read_at(0, 1)
    h.close()
