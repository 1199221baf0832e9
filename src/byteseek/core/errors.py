from __future__ import annotations


class ByteseekError(Exception):
    """Base class for errors raised by byteseek."""


class InvalidArgument(ByteseekError, ValueError):
    """Raised for malformed inputs such as an empty pattern or a bad chunk size."""


class InvalidOffset(InvalidArgument):
    """Raised when an invalid (e.g., negative) offset or length is provided."""


class ConfigError(InvalidArgument):
    """Raised when a configuration file or mapping cannot be used."""


class EditorClosed(ByteseekError):
    """Raised when a read or search is attempted on a closed editor or handle."""


class ScanCancelled(ByteseekError):
    """Raised when a scan's cancel event is set before the next window read."""
