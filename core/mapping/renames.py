"""Rename dictionaries mapping intermediate short names to final names."""

from __future__ import annotations

import csv
from collections.abc import Iterable, Iterator, Mapping
from pathlib import Path
from types import MappingProxyType

from core.mapping.lines import iter_utf8_lines
from core.utils.errors import RenameDictionaryError


class RenameDictionary(Mapping[str, str]):
    """Read-only short-name to final-name lookup with unique keys."""

    def __init__(self, entries: Mapping[str, str] | None = None) -> None:
        self._entries: Mapping[str, str] = MappingProxyType(dict(entries or {}))

    def __getitem__(self, key: str) -> str:
        return self._entries[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:
        return f"RenameDictionary({len(self)} entries)"

    @classmethod
    def from_rows(
        cls,
        rows: Iterable[tuple[int, list[str]]],
        *,
        source: Path | None = None,
    ) -> RenameDictionary:
        """Build from numbered ``(short, final, ...)`` rows.

        Blank rows are ignored and columns past the second are dropped. A short
        name that appears twice is rejected instead of silently overwritten.
        """

        entries: dict[str, str] = {}
        first_seen: dict[str, int] = {}
        for line_number, row in rows:
            if not row or all(not cell.strip() for cell in row):
                continue
            line = ",".join(row)
            if len(row) < 2:
                raise RenameDictionaryError(
                    "Rename row needs a short name and a final name",
                    line_number=line_number,
                    line=line,
                    source=source,
                )
            short_name, final_name = row[0].strip(), row[1].strip()
            if not short_name or not final_name:
                raise RenameDictionaryError(
                    "Rename row has an empty name",
                    line_number=line_number,
                    line=line,
                    source=source,
                )
            if short_name in entries:
                raise RenameDictionaryError(
                    f"Duplicate short name {short_name!r} (first defined on line "
                    f"{first_seen[short_name]})",
                    line_number=line_number,
                    line=line,
                    source=source,
                )
            entries[short_name] = final_name
            first_seen[short_name] = line_number
        return cls(entries)


EMPTY_RENAMES = RenameDictionary()


def load_rename_dictionary(path: Path, *, has_header: bool = True) -> RenameDictionary:
    """Load a CSV rename dictionary, optionally skipping its header row."""

    with path.open("rb") as handle:
        lines = iter_utf8_lines(handle, source=path, error=RenameDictionaryError)
        reader = csv.reader(lines)
        return RenameDictionary.from_rows(
            _numbered_rows(reader, skip_header=has_header), source=path
        )


def _numbered_rows(reader, *, skip_header: bool) -> Iterator[tuple[int, list[str]]]:
    for row in reader:
        if skip_header:
            skip_header = False
            continue
        # line_num counts physical lines, so quoted multi-line cells stay accurate.
        yield reader.line_num, row
