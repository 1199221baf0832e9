from __future__ import annotations

from typing import TYPE_CHECKING

from byteseek.core.matches import Direction, MatchRange

if TYPE_CHECKING:
    from byteseek.core.editor import Editor


class BaseResult:
    """A match range bound to the editor it was found in.

    Content is read lazily from the editor, so it is only valid while the
    editor is open.
    """

    def __init__(self, match: MatchRange, editor: Editor) -> None:
        self._match = match
        self._editor = editor

    @property
    def match(self) -> MatchRange:
        return self._match

    @property
    def start(self) -> int:
        return self._match.start

    @property
    def end(self) -> int:
        return self._match.end

    @property
    def length(self) -> int:
        return self._match.length

    @property
    def direction(self) -> Direction:
        return self._match.direction

    def read(self) -> bytes:
        """Materialize the range's bytes."""
        return self._editor.read(self.start, self.length)

    def read_as_string(self, encoding: str | None = None) -> str:
        return self._editor.read_as_string(self.start, self.length, encoding)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(start={self.start}, end={self.end})"


class SearchResult(BaseResult):
    """One occurrence of a pattern."""

    def __init__(self, match: MatchRange, pattern: bytes, editor: Editor) -> None:
        super().__init__(match, editor)
        self._pattern = bytes(pattern)

    @property
    def pattern(self) -> bytes:
        return self._pattern


class LineResult(BaseResult):
    """A line's content range (delimiter excluded) with boundary flags."""

    def __init__(self, match: MatchRange, delimiter: bytes, editor: Editor) -> None:
        super().__init__(match, editor)
        self._delimiter = bytes(delimiter)

    @property
    def delimiter(self) -> bytes:
        return self._delimiter

    @property
    def is_first(self) -> bool:
        return self._match.is_first

    @property
    def is_last(self) -> bool:
        return self._match.is_last

    def __repr__(self) -> str:
        return (
            f"LineResult(start={self.start}, end={self.end}, "
            f"is_first={self.is_first}, is_last={self.is_last})"
        )
