from __future__ import annotations

import os
import threading
from functools import partial

from rich.text import Text
from textual.app import App, ComposeResult
from textual.screen import ModalScreen
from textual.widgets import Footer, Header, Input, Label, Static

from byteseek.core.config import EditorConfig
from byteseek.core.editor import Editor
from byteseek.core.errors import ByteseekError, ScanCancelled
from byteseek.core.results import BaseResult, LineResult
from byteseek.ui.palette import PALETTE
from byteseek.widgets.context_view import ContextView
from byteseek.widgets.search_banner import SearchBanner


def parse_pattern(text: str, encoding: str = "utf-8") -> bytes | None:
    """Parse search input: ``0x`` prefixed hex (spaces allowed) or plain text."""
    s = text.strip()
    if not s:
        return None
    if s.lower().startswith("0x"):
        digits = s[2:].replace(" ", "")
        try:
            value = bytes.fromhex(digits)
        except ValueError:
            return None
        return value or None
    try:
        return s.encode(encoding)
    except UnicodeEncodeError:
        return None


class ByteseekApp(App):
    """Textual viewer for first/last lines and search navigation in large files."""

    DEFAULT_CSS = """
    ContextView { height: 1fr; padding: 0 1; }
    #status { height: 1; }
    """

    BINDINGS = [
        ("q", "quit", "Quit"),
        ("/", "open_search", "Search"),
        ("n", "search_next", "Next"),
        ("N", "search_prev", "Prev"),
        ("g", "first_line", "First Line"),
        ("G", "last_line", "Last Line"),
        ("escape", "cancel_search", "Cancel Search"),
    ]

    def __init__(self, path: str, config: EditorConfig | None = None) -> None:
        super().__init__()
        self._path = path
        self._config = config or EditorConfig()
        self._editor: Editor | None = None
        self.title = f"byteseek — {os.path.basename(path)}"
        self.status = Static(id="status")
        self.view = ContextView()
        self._banner = SearchBanner()
        self._needle: bytes | None = None
        self._current: BaseResult | None = None
        self._cancel: threading.Event | None = None
        self._status_hint = ""

    def compose(self) -> ComposeResult:  # noqa: D401 - Textual API
        # Delay opening until compose to give clear UI errors
        try:
            self._editor = Editor.open(self._path, config=self._config)
        except FileNotFoundError:
            yield Static(f"Error: file not found: {self._path}")
            return
        yield Header(show_clock=False)
        yield self._banner
        yield self.view
        yield self.status
        yield Footer()

    def on_mount(self) -> None:
        self._banner.display = False
        if self._editor is not None:
            self.action_first_line()

    def on_unmount(self) -> None:
        self.cancel_search()
        if self._editor is not None:
            self._editor.close()

    def update_status(self) -> None:
        if self._editor is None:
            self.status.update(Text("byteseek"))
            return
        parts = [os.path.basename(self._path), f"{self._editor.size_in_bytes()} bytes"]
        if self._current is not None:
            parts.append(f"at {self._current.start:#x}")
        if self._needle is not None:
            parts.append(f"pattern {self._needle!r}")
        if self._status_hint:
            parts.append(self._status_hint)
        text = Text("  ".join(parts), style=f"{PALETTE.status_fg} on {PALETTE.status_bg}")
        if self._needle is not None:
            text.highlight_words([f"pattern {self._needle!r}"], style=f"bold {PALETTE.accent}")
        self.status.update(text)

    def _show(self, result: BaseResult, label: str) -> None:
        if self._editor is None:
            return
        self._current = result
        self.view.show_range(self._editor, result.start, result.end, label)
        self.update_status()

    # ---- Lines ----
    def _show_line(self, line: LineResult, label: str) -> None:
        flags = [name for name, on in (("first", line.is_first), ("last", line.is_last)) if on]
        self._status_hint = ""
        self._show(line, f"{label} ({', '.join(flags)})" if flags else label)

    def action_first_line(self) -> None:
        if self._editor is None or self._cancel is not None:
            return
        self._show_line(self._editor.get_first_line(), "first line")

    def action_last_line(self) -> None:
        if self._editor is None or self._cancel is not None:
            return
        self._show_line(self._editor.get_last_line(), "last line")

    # ---- Search ----
    def action_open_search(self) -> None:
        self.push_screen(SearchScreen(), self._search_submit)

    def _search_submit(self, value: str | None) -> None:
        if value is None:
            return
        needle = parse_pattern(value, self._config.encoding)
        if needle is None:
            self._status_hint = "[invalid pattern]"
            self.update_status()
            return
        self._needle = needle
        self._start_search(forward=True, offset=0)

    def action_search_next(self) -> None:
        if self._needle is None:
            return
        offset = self._current.end if self._current is not None else 0
        self._start_search(forward=True, offset=offset)

    def action_search_prev(self) -> None:
        if self._needle is None or self._editor is None:
            return
        offset = self._current.start if self._current is not None else self._editor.size_in_bytes()
        self._start_search(forward=False, offset=offset)

    def _start_search(self, *, forward: bool, offset: int) -> None:
        if self._editor is None or self._needle is None:
            return
        if self._cancel is not None:
            # One scan at a time per editor
            self._status_hint = "[search in progress]"
            self.update_status()
            return
        self._cancel = threading.Event()
        direction = "forward" if forward else "backward"
        shown = self._needle.decode(self._config.encoding, errors="replace")
        self._banner.update_search(shown, direction, "scanning")
        self._banner.display = True
        self.run_worker(
            partial(self._search_worker, self._editor, self._needle, forward, offset, self._cancel),
            thread=True,
            group="search",
        )

    def _search_worker(
        self,
        editor: Editor,
        needle: bytes,
        forward: bool,
        offset: int,
        cancel: threading.Event,
    ) -> None:
        # The editor may be closed under this thread on unmount; the app is
        # gone by then, so nothing is posted back.
        try:
            if forward:
                result = editor.search_first(needle, offset, cancel=cancel)
            else:
                result = editor.search_last(needle, offset, cancel=cancel)
        except ScanCancelled:
            if not editor.closed:
                self.call_from_thread(self._search_finished, None, "[search cancelled]")
            return
        except (ByteseekError, OSError, ValueError) as e:
            if not editor.closed:
                self.call_from_thread(self._search_failed, str(e))
            return
        if editor.closed:
            return
        hint = "" if result is not None else "[no further match]"
        self.call_from_thread(self._search_finished, result, hint)

    def _search_finished(self, result: BaseResult | None, hint: str) -> None:
        self._cancel = None
        self._banner.display = False
        self._status_hint = hint
        if result is not None:
            self._show(result, "match")
        else:
            self.update_status()

    def _search_failed(self, message: str) -> None:
        self._search_finished(None, "[search failed]")
        self.view.show_message(f"error: {message}", style=PALETTE.error_fg)

    def cancel_search(self) -> None:
        """Signal the running scan to stop at its next window read."""
        if self._cancel is not None:
            self._cancel.set()

    def action_cancel_search(self) -> None:
        """Action for Esc key to cancel search."""
        self.cancel_search()


# ---- Simple modals ----


class SearchScreen(ModalScreen[str | None]):
    def compose(self) -> ComposeResult:  # type: ignore[override]
        yield Label("Search (text, or hex bytes e.g. 0xDE AD BE EF):")
        self._input = Input(placeholder="pattern")
        yield self._input

    def on_mount(self) -> None:  # type: ignore[override]
        self.set_focus(self._input)

    def on_input_submitted(self, event: Input.Submitted) -> None:  # type: ignore[override]
        self.dismiss(event.value)

    def on_key(self, event) -> None:  # type: ignore[override]
        if event.key == "escape":
            self.dismiss(None)
