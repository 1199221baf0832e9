"""Shows a byte range with some surrounding context, decoded as text."""

from __future__ import annotations

from rich.text import Text
from textual.widgets import Static

from byteseek.core.editor import Editor
from byteseek.ui.palette import PALETTE

CONTEXT_BYTES = 256
MAX_HIGHLIGHT_BYTES = 4096


def _decode(data: bytes, encoding: str) -> str:
    return data.decode(encoding, errors="replace")


def render_range(
    editor: Editor,
    start: int,
    end: int,
    *,
    label: str = "",
    context: int = CONTEXT_BYTES,
) -> Text:
    """Build rich text for `[start, end)` plus up to `context` bytes on each side.

    Long ranges are cut at MAX_HIGHLIGHT_BYTES so a huge line never gets read
    whole.
    """
    encoding = editor.config.encoding
    shown_end = min(end, start + MAX_HIGHLIGHT_BYTES)
    before_start = max(0, start - context)
    before = editor.read(before_start, start - before_start)
    body = editor.read(start, shown_end - start)
    after = editor.read(shown_end, context) if shown_end == end else b""

    text = Text()
    if label:
        text.append(f"{label} ", style=f"bold {PALETTE.line_label_fg}")
    text.append(f"[{start:#x}, {end:#x})\n", style=PALETTE.offset_fg)
    text.append(_decode(before, encoding), style=PALETTE.dim_fg)
    text.append(_decode(body, encoding), style=f"bold {PALETTE.search_hit_fg} on {PALETTE.search_hit_bg}")
    if shown_end < end:
        text.append(f" … ({end - shown_end} more bytes)", style=PALETTE.dim_fg)
    text.append(_decode(after, encoding), style=PALETTE.dim_fg)
    return text


class ContextView(Static):
    """Static panel rendering the current hit or line."""

    def show_range(self, editor: Editor, start: int, end: int, label: str = "") -> None:
        self.update(render_range(editor, start, end, label=label))

    def show_message(self, message: str, style: str | None = None) -> None:
        self.update(Text(message, style=style or PALETTE.dim_fg))
