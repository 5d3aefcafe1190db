"""Parser for mapping table records.

Grammar, one record per line:

    PK: <path>
    CL: <type> <obfName> <intermediateName>
    FD: <type> <obfOwnerPath> <intermediateOwnerPath>
    MD: <type> <obfOwnerPath> <obfSignature> <intermediateOwnerPath> <intermediateSignature>

Field and method entries resolve their final owner path while parsing: only the
trailing simple name is looked up, and only that segment is replaced.
"""

from __future__ import annotations

from pathlib import Path

from core.mapping.models import (
    ClassEntry,
    FieldEntry,
    MappingEntry,
    MethodEntry,
    PackageEntry,
    replace_trailing_name,
    trailing_name,
)
from core.mapping.renames import EMPTY_RENAMES, RenameDictionary
from core.utils.errors import MappingParseError

_TOKEN_COUNTS = {"CL:": 3, "FD:": 3, "MD:": 5}


def parse_line(
    line: str,
    line_number: int,
    *,
    field_renames: RenameDictionary = EMPTY_RENAMES,
    method_renames: RenameDictionary = EMPTY_RENAMES,
    source: Path | None = None,
) -> MappingEntry | None:
    """Parse one table line; blank lines yield None."""

    text = line.rstrip("\r\n")
    if not text.strip():
        return None

    tag, *tokens = text.split()

    if tag == "PK:":
        if not tokens:
            raise MappingParseError(
                "Package record has no path", line_number=line_number, line=text, source=source
            )
        return PackageEntry(line=text.strip())

    expected = _TOKEN_COUNTS.get(tag)
    if expected is None:
        raise MappingParseError(
            f"Unknown record tag {tag!r}", line_number=line_number, line=text, source=source
        )
    if len(tokens) != expected:
        raise MappingParseError(
            f"{tag} record needs {expected} tokens after the tag, got {len(tokens)}",
            line_number=line_number,
            line=text,
            source=source,
        )

    if tag == "CL:":
        type_code, obf_name, intermediate_name = tokens
        return ClassEntry(type_code, obf_name, intermediate_name)

    if tag == "FD:":
        type_code, obf_path, intermediate_path = tokens
        return FieldEntry(
            type_code=type_code,
            obf_path=obf_path,
            intermediate_path=intermediate_path,
            final_path=_final_path(intermediate_path, field_renames),
        )

    type_code, obf_path, obf_signature, intermediate_path, intermediate_signature = tokens
    return MethodEntry(
        type_code=type_code,
        obf_path=obf_path,
        obf_signature=obf_signature,
        intermediate_path=intermediate_path,
        intermediate_signature=intermediate_signature,
        final_path=_final_path(intermediate_path, method_renames),
    )


def _final_path(intermediate_path: str, renames: RenameDictionary) -> str:
    final_name = renames.get(trailing_name(intermediate_path))
    if final_name is None:
        return intermediate_path
    return replace_trailing_name(intermediate_path, final_name)
