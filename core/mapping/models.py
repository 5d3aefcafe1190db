"""Data models for mapping table records and the derived rename tables."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union


def trailing_name(path: str) -> str:
    """Simple name after the last ``/`` of an owner path."""

    return path.rsplit("/", 1)[-1]


def replace_trailing_name(path: str, new_name: str) -> str:
    head, sep, _ = path.rpartition("/")
    return f"{head}{sep}{new_name}"


@dataclass(frozen=True)
class PackageEntry:
    """A package record; written unchanged to every output."""

    line: str


@dataclass(frozen=True)
class ClassEntry:
    type_code: str
    obf_name: str
    intermediate_name: str

    @property
    def final_name(self) -> str:
        return self.intermediate_name


@dataclass(frozen=True)
class FieldEntry:
    type_code: str
    obf_path: str
    intermediate_path: str
    final_path: str


@dataclass(frozen=True)
class MethodEntry:
    type_code: str
    obf_path: str
    obf_signature: str
    intermediate_path: str
    intermediate_signature: str
    final_path: str

    @property
    def final_signature(self) -> str:
        return self.intermediate_signature


MappingEntry = Union[PackageEntry, ClassEntry, FieldEntry, MethodEntry]


@dataclass(frozen=True)
class RenderedLines:
    """The three output lines produced by one input record."""

    obf_to_final: str
    final_to_intermediate: str
    final_to_obf: str


@dataclass
class TransformSummary:
    """Record counts for one transform run."""

    packages: int = 0
    classes: int = 0
    fields: int = 0
    methods: int = 0
    renamed_fields: int = 0
    renamed_methods: int = 0

    @property
    def total(self) -> int:
        return self.packages + self.classes + self.fields + self.methods
