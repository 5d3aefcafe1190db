"""Streaming derivation of three rename tables from one mapping table."""

from __future__ import annotations

import logging
import os
import tempfile
from collections.abc import Iterable
from contextlib import ExitStack
from dataclasses import dataclass
from pathlib import Path
from typing import TextIO

from core.mapping.lines import iter_utf8_lines
from core.mapping.models import (
    ClassEntry,
    FieldEntry,
    MappingEntry,
    PackageEntry,
    RenderedLines,
    TransformSummary,
)
from core.mapping.renames import EMPTY_RENAMES, RenameDictionary
from core.mapping.table_parser import parse_line
from core.utils.logs import log_event

logger = logging.getLogger("mapgate.mapping")


@dataclass(frozen=True)
class TableOutputs:
    """Destinations for the three derived tables."""

    obf_to_final: Path
    final_to_intermediate: Path
    final_to_obf: Path

    def as_tuple(self) -> tuple[Path, Path, Path]:
        return (self.obf_to_final, self.final_to_intermediate, self.final_to_obf)


def render_entry(entry: MappingEntry) -> RenderedLines:
    """Produce the obf->final, final->intermediate and final->obf lines for one record."""

    if isinstance(entry, PackageEntry):
        return RenderedLines(entry.line, entry.line, entry.line)

    if isinstance(entry, ClassEntry):
        obf, final = entry.obf_name, entry.final_name
        return RenderedLines(
            obf_to_final=f"CL: {obf} {final}",
            final_to_intermediate=f"CL: {final} {entry.intermediate_name}",
            final_to_obf=f"CL: {final} {obf}",
        )

    if isinstance(entry, FieldEntry):
        return RenderedLines(
            obf_to_final=f"FD: {entry.obf_path} {entry.final_path}",
            final_to_intermediate=f"FD: {entry.final_path} {entry.intermediate_path}",
            final_to_obf=f"FD: {entry.final_path} {entry.obf_path}",
        )

    obf = f"{entry.obf_path} {entry.obf_signature}"
    intermediate = f"{entry.intermediate_path} {entry.intermediate_signature}"
    final = f"{entry.final_path} {entry.final_signature}"
    return RenderedLines(
        obf_to_final=f"MD: {obf} {final}",
        final_to_intermediate=f"MD: {final} {intermediate}",
        final_to_obf=f"MD: {final} {obf}",
    )


def transform_stream(
    lines: Iterable[str],
    obf_to_final: TextIO,
    final_to_intermediate: TextIO,
    final_to_obf: TextIO,
    *,
    field_renames: RenameDictionary = EMPTY_RENAMES,
    method_renames: RenameDictionary = EMPTY_RENAMES,
    source: Path | None = None,
) -> TransformSummary:
    """Transform records one line at a time, preserving input row order.

    Each record's three lines are rendered before any is written, so a parse
    error never leaves an output with a partial row.
    """

    summary = TransformSummary()
    for line_number, line in enumerate(lines, start=1):
        entry = parse_line(
            line,
            line_number,
            field_renames=field_renames,
            method_renames=method_renames,
            source=source,
        )
        if entry is None:
            continue

        rendered = render_entry(entry)
        obf_to_final.write(rendered.obf_to_final + "\n")
        final_to_intermediate.write(rendered.final_to_intermediate + "\n")
        final_to_obf.write(rendered.final_to_obf + "\n")
        _count(summary, entry)
    return summary


def transform_files(
    input_table: Path,
    outputs: TableOutputs,
    *,
    field_renames: RenameDictionary = EMPTY_RENAMES,
    method_renames: RenameDictionary = EMPTY_RENAMES,
) -> TransformSummary:
    """Transform a table file into three output files.

    Outputs are written to temporary siblings and moved into place only once the
    whole input has been consumed; on failure the previous outputs are untouched.
    """

    temp_paths: list[Path] = []
    try:
        with ExitStack() as stack:
            table_in = stack.enter_context(input_table.open("rb"))
            writers: list[TextIO] = []
            for target in outputs.as_tuple():
                target.parent.mkdir(parents=True, exist_ok=True)
                fd, raw_tmp_path = tempfile.mkstemp(
                    dir=target.parent,
                    prefix=f"{target.name}.",
                    suffix=".tmp",
                )
                temp_paths.append(Path(raw_tmp_path))
                writers.append(
                    stack.enter_context(os.fdopen(fd, "w", encoding="utf-8", newline="\n"))
                )

            summary = transform_stream(
                iter_utf8_lines(table_in, source=input_table),
                *writers,
                field_renames=field_renames,
                method_renames=method_renames,
                source=input_table,
            )

        for tmp_path, target in zip(temp_paths, outputs.as_tuple()):
            tmp_path.replace(target)
    except Exception:
        for tmp_path in temp_paths:
            tmp_path.unlink(missing_ok=True)
        raise

    log_event(
        logger,
        logging.INFO,
        "transform_done",
        input=input_table,
        packages=summary.packages,
        classes=summary.classes,
        fields=summary.fields,
        methods=summary.methods,
        renamed_fields=summary.renamed_fields,
        renamed_methods=summary.renamed_methods,
    )
    return summary


def _count(summary: TransformSummary, entry: MappingEntry) -> None:
    if isinstance(entry, PackageEntry):
        summary.packages += 1
    elif isinstance(entry, ClassEntry):
        summary.classes += 1
    elif isinstance(entry, FieldEntry):
        summary.fields += 1
        if entry.final_path != entry.intermediate_path:
            summary.renamed_fields += 1
    else:
        summary.methods += 1
        if entry.final_path != entry.intermediate_path:
            summary.renamed_methods += 1
