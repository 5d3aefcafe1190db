"""Resolution of configured path expressions into concrete filesystem paths."""

from __future__ import annotations

import os
from collections.abc import Iterable
from pathlib import Path
from typing import Any

_MAX_UNWRAP = 32


def unwrap(value: Any) -> Any:
    """Invoke deferred values (zero-argument callables) until a plain value remains."""

    for _ in range(_MAX_UNWRAP):
        if not callable(value) or isinstance(value, (str, bytes, os.PathLike)):
            return value
        value = value()
    raise ValueError("Deferred value did not resolve after repeated calls")


class PathResolver:
    """Turn strings, ``Path`` objects and deferred values into absolute paths."""

    def __init__(self, base_dir: Path | None = None) -> None:
        self._base_dir = (base_dir or Path.cwd()).resolve()

    def resolve(self, value: Any) -> Path:
        value = unwrap(value)
        if not isinstance(value, (str, os.PathLike)):
            raise TypeError(f"Cannot resolve {type(value).__name__} to a path")
        path = Path(value)
        if not path.is_absolute():
            path = self._base_dir / path
        return path

    def resolve_all(self, values: Any) -> list[Path]:
        """Resolve each member of a collection, keeping its iteration order."""

        values = unwrap(values)
        if isinstance(values, (str, os.PathLike)):
            return [self.resolve(values)]
        if not isinstance(values, Iterable):
            raise TypeError(f"Expected a collection of paths, got {type(values).__name__}")
        return [self.resolve(v) for v in values]
