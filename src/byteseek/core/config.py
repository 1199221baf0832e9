"""Editor configuration, loadable from a small YAML file.

Example::

    chunk_size: 4096
    delimiter: "\\r\\n"
    encoding: latin-1
"""

from __future__ import annotations

import codecs
import re
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any

import yaml

from byteseek.core.errors import ConfigError
from byteseek.core.scanner import DEFAULT_CHUNK_SIZE

_KNOWN_KEYS = ("chunk_size", "delimiter", "encoding")

_ESCAPES = {"n": b"\n", "r": b"\r", "t": b"\t", "0": b"\x00", "\\": b"\\"}
_ESCAPE_RE = re.compile(r"\\(x[0-9A-Fa-f]{2}|.?)", re.DOTALL)


@dataclass(frozen=True)
class EditorConfig:
    """Per-editor defaults.

    Args:
        chunk_size: Base window size in bytes for each scan read
        delimiter: Line delimiter used by first/last line lookups
        encoding: Encoding for str patterns and decoded reads
    """

    chunk_size: int = DEFAULT_CHUNK_SIZE
    delimiter: bytes = b"\n"
    encoding: str = "utf-8"

    def __post_init__(self) -> None:
        if not isinstance(self.chunk_size, int) or isinstance(self.chunk_size, bool):
            raise ConfigError("chunk_size must be an integer")
        if self.chunk_size <= 0:
            raise ConfigError("chunk_size must be positive")
        if not isinstance(self.delimiter, bytes) or not self.delimiter:
            raise ConfigError("delimiter must be non-empty bytes")
        try:
            codecs.lookup(self.encoding)
        except LookupError:
            raise ConfigError(f"unknown encoding: {self.encoding}") from None

    def with_overrides(self, **overrides: Any) -> EditorConfig:
        """Return a copy with every non-None override applied."""
        changes = {k: v for k, v in overrides.items() if v is not None}
        if "delimiter" in changes and isinstance(changes["delimiter"], str):
            changes["delimiter"] = parse_delimiter(changes["delimiter"])
        return replace(self, **changes)

    @classmethod
    def from_mapping(cls, data: dict[str, Any] | None) -> EditorConfig:
        if data is None:
            return cls()
        if not isinstance(data, dict):
            raise ConfigError("config must be a mapping")
        unknown = sorted(set(data) - set(_KNOWN_KEYS))
        if unknown:
            raise ConfigError(f"unknown config keys: {', '.join(unknown)}")
        kwargs: dict[str, Any] = {}
        if "chunk_size" in data:
            kwargs["chunk_size"] = data["chunk_size"]
        if "encoding" in data:
            kwargs["encoding"] = str(data["encoding"])
        if "delimiter" in data:
            raw = data["delimiter"]
            if not isinstance(raw, str):
                raise ConfigError("delimiter must be a string")
            kwargs["delimiter"] = parse_delimiter(raw)
        return cls(**kwargs)

    @classmethod
    def load(cls, path: str | Path) -> EditorConfig:
        """Load config from a YAML file."""
        text = Path(path).read_text(encoding="utf-8")
        try:
            data = yaml.safe_load(text)
        except yaml.YAMLError as e:
            raise ConfigError(f"invalid YAML in {path}: {e}") from e
        return cls.from_mapping(data)


def parse_delimiter(text: str) -> bytes:
    """Turn a delimiter string with backslash escapes (``\\n``, ``\\r\\n``, ``\\x00``) into bytes."""
    value = bytearray()
    pos = 0
    for m in _ESCAPE_RE.finditer(text):
        value += text[pos : m.start()].encode("utf-8")
        code = m.group(1)
        if len(code) == 3 and code.startswith("x"):
            value.append(int(code[1:], 16))
        elif code in _ESCAPES:
            value += _ESCAPES[code]
        else:
            raise ConfigError(f"invalid delimiter {text!r}: unsupported escape \\{code}")
        pos = m.end()
    value += text[pos:].encode("utf-8")
    if not value:
        raise ConfigError("delimiter must not be empty")
    return bytes(value)
