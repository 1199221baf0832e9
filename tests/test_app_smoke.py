from __future__ import annotations

from pathlib import Path

import pytest

textual = pytest.importorskip("textual")


def test_app_constructs(tmp_path: Path) -> None:
    p = tmp_path / "tiny.log"
    p.write_bytes(b"first\nmiddle\nlast")

    # Import here to avoid E402 when textual is absent
    from byteseek.app import ByteseekApp

    app = ByteseekApp(str(p))
    # Do not run the app; just ensure construction doesn't crash
    assert app is not None


def test_parse_pattern() -> None:
    from byteseek.app import parse_pattern

    assert parse_pattern("hello") == b"hello"
    assert parse_pattern("  spaced  ") == b"spaced"
    assert parse_pattern("0xDE AD be ef") == b"\xde\xad\xbe\xef"
    assert parse_pattern("0xZZ") is None
    assert parse_pattern("") is None
    assert parse_pattern("é", "ascii") is None


def test_render_range_highlights_match() -> None:
    from byteseek.core.editor import Editor
    from byteseek.widgets.context_view import render_range

    with Editor.open(b"before NEEDLE after") as ed:
        text = render_range(ed, 7, 13, label="match", context=4)
        plain = text.plain
        assert "match" in plain
        assert "ore NEEDLE aft" in plain


class ClosingHandle:
    """Closes its editor mid-read, as happens when the app unmounts during a scan."""

    def __init__(self, data: bytes) -> None:
        from byteseek.core.io import MemoryHandle

        self._inner = MemoryHandle(data)
        self.editor = None

    @property
    def size(self) -> int:
        return self._inner.size

    def read_at(self, offset: int, length: int) -> bytes:
        self.editor.close()  # type: ignore[union-attr]
        raise ValueError("I/O operation on closed file")

    def read_into(self, buffer, offset, buffer_offset=0, length=None):  # type: ignore[no-untyped-def]
        return self._inner.read_into(buffer, offset, buffer_offset, length)

    def close(self) -> None:
        self._inner.close()


def _app_with_recorded_callbacks(tmp_path: Path):  # type: ignore[no-untyped-def]
    from byteseek.app import ByteseekApp

    p = tmp_path / "tiny.log"
    p.write_bytes(b"first\nmiddle\nlast")
    app = ByteseekApp(str(p))
    posted: list[tuple[str, tuple]] = []
    app.call_from_thread = lambda fn, *args: posted.append((fn.__name__, args))  # type: ignore[method-assign]
    return app, posted


def test_search_worker_quiet_when_editor_closed_mid_scan(tmp_path: Path) -> None:
    import threading

    from byteseek.core.editor import Editor

    app, posted = _app_with_recorded_callbacks(tmp_path)
    handle = ClosingHandle(b"abc\ndef")
    editor = Editor(handle)  # type: ignore[arg-type]
    handle.editor = editor
    app._search_worker(editor, b"def", True, 0, threading.Event())
    assert posted == []


def test_search_worker_reports_read_errors(tmp_path: Path) -> None:
    import threading

    from byteseek.core.editor import Editor
    from byteseek.core.io import MemoryHandle

    class BrokenRead(MemoryHandle):
        def read_at(self, offset: int, length: int) -> bytes:
            raise OSError(5, "EIO")

    app, posted = _app_with_recorded_callbacks(tmp_path)
    with Editor(BrokenRead(b"abc")) as editor:
        app._search_worker(editor, b"b", True, 0, threading.Event())
    assert [name for name, _ in posted] == ["_search_failed"]
    assert "EIO" in posted[0][1][0]


def test_search_worker_reports_cancel(tmp_path: Path) -> None:
    import threading

    from byteseek.core.editor import Editor

    app, posted = _app_with_recorded_callbacks(tmp_path)
    cancel = threading.Event()
    cancel.set()
    with Editor.open(b"abc") as editor:
        app._search_worker(editor, b"b", True, 0, cancel)
    assert posted == [("_search_finished", (None, "[search cancelled]"))]
