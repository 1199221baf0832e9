"""Banner shown above the text view while a search is running or active."""

from __future__ import annotations

from rich.text import Text
from textual.widgets import Static

from byteseek.ui.palette import PALETTE


class SearchBanner(Static):
    """Banner showing the active pattern, direction and a cancel hint."""

    def __init__(self) -> None:
        super().__init__()
        self._pattern = ""
        self._direction = ""
        self._state = ""

    def update_search(self, pattern: str, direction: str, state: str) -> None:
        """Update banner content."""
        self._pattern = pattern
        self._direction = direction
        self._state = state
        self.update(self.render_text())

    def render_text(self) -> Text:
        text = Text()
        style = f"{PALETTE.search_banner_fg} on {PALETTE.search_banner_bg}"
        bold_style = f"bold {style}"

        text.append("Searching for: ", style=bold_style)
        text.append(f"{self._pattern!r} ({self._direction})", style=style)
        if self._state:
            text.append(f" | {self._state}", style=style)
        text.append("   [Esc Cancel]", style=bold_style)
        return text

    def on_click(self, event) -> None:  # type: ignore[no-untyped-def, override]
        """Cancel search when banner is clicked."""
        if hasattr(self.app, "cancel_search"):
            self.app.cancel_search()  # type: ignore[attr-defined]
