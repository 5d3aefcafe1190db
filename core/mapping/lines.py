"""Per-line UTF-8 decoding for mapping tables and rename dictionaries."""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from pathlib import Path

from core.utils.errors import MappingParseError


def iter_utf8_lines(
    raw_lines: Iterable[bytes],
    *,
    source: Path | None = None,
    error: type[MappingParseError] = MappingParseError,
) -> Iterator[str]:
    """Decode byte lines one at a time so invalid UTF-8 is reported with its line number."""

    for line_number, raw in enumerate(raw_lines, start=1):
        try:
            yield raw.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise error(
                f"Invalid UTF-8 at byte {exc.start}",
                line_number=line_number,
                line=raw.rstrip(b"\r\n").decode("utf-8", errors="replace"),
                source=source,
            ) from exc
