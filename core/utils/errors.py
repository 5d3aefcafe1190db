"""Custom exceptions for core logic."""

from __future__ import annotations

from pathlib import Path


class MappingParseError(ValueError):
    """Raised when a mapping table line cannot be parsed."""

    def __init__(
        self,
        message: str,
        *,
        line_number: int,
        line: str,
        source: Path | None = None,
    ) -> None:
        location = f"{source}:{line_number}" if source is not None else f"line {line_number}"
        super().__init__(f"{message} ({location}: {line!r})")
        self.line_number = line_number
        self.line = line
        self.source = source


class RenameDictionaryError(MappingParseError):
    """Raised when a rename dictionary row is malformed or duplicated."""


class HashError(Exception):
    """Raised when a fingerprint cannot be computed for a path or value."""

    def __init__(self, message: str, *, path: Path | None = None) -> None:
        super().__init__(message)
        self.path = path


class ConfigError(ValueError):
    """Raised when the configuration file is missing or invalid."""
