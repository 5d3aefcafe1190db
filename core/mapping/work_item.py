"""Cached work item that derives the three rename tables."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, ClassVar

from core.cache.descriptors import CachedOutput, TrackedInput, WorkItemDescriptor
from core.cache.paths import PathResolver
from core.config.models import MappingConfig
from core.mapping.models import TransformSummary
from core.mapping.renames import EMPTY_RENAMES, RenameDictionary, load_rename_dictionary
from core.mapping.transform import TableOutputs, transform_files

# Bump when the rendered table format changes so existing caches are invalidated.
TABLE_FORMAT_VERSION = "1"

RENAME_DICTIONARY_INPUTS = WorkItemDescriptor(
    tracked_inputs=(
        TrackedInput("fields_csv", "file", lambda item: item.fields_csv, optional=True),
        TrackedInput("methods_csv", "file", lambda item: item.methods_csv, optional=True),
    ),
)

TABLE_FORMAT_INPUTS = WorkItemDescriptor(
    tracked_inputs=(
        TrackedInput("table_format_version", "value", lambda item: TABLE_FORMAT_VERSION),
        TrackedInput(
            "dictionary_has_header",
            "value",
            lambda item: item.mapping_config.dictionary_has_header,
        ),
    ),
)


@dataclass(frozen=True)
class GenerateMappingsItem:
    """Inputs and outputs of one rename-table derivation.

    Path fields accept anything the ``PathResolver`` understands: strings,
    ``Path`` objects or zero-argument callables returning either.
    """

    in_srg: Any
    obf_to_final: Any
    final_to_intermediate: Any
    final_to_obf: Any
    fields_csv: Any = None
    methods_csv: Any = None
    mapping_config: MappingConfig = field(default_factory=MappingConfig)

    DESCRIPTOR: ClassVar[WorkItemDescriptor] = WorkItemDescriptor.compose(
        WorkItemDescriptor(
            cached_outputs=(
                CachedOutput("obf_to_final", lambda item: item.obf_to_final),
                CachedOutput("final_to_intermediate", lambda item: item.final_to_intermediate),
                CachedOutput("final_to_obf", lambda item: item.final_to_obf),
            ),
            tracked_inputs=(TrackedInput("in_srg", "file", lambda item: item.in_srg),),
        ),
        RENAME_DICTIONARY_INPUTS,
        TABLE_FORMAT_INPUTS,
    )

    def execute(self, resolver: PathResolver) -> TransformSummary:
        outputs = TableOutputs(
            obf_to_final=resolver.resolve(self.obf_to_final),
            final_to_intermediate=resolver.resolve(self.final_to_intermediate),
            final_to_obf=resolver.resolve(self.final_to_obf),
        )
        return transform_files(
            resolver.resolve(self.in_srg),
            outputs,
            field_renames=self._load_renames(self.fields_csv, resolver),
            method_renames=self._load_renames(self.methods_csv, resolver),
        )

    def _load_renames(self, value: Any, resolver: PathResolver) -> RenameDictionary:
        if value is None:
            return EMPTY_RENAMES
        path: Path = resolver.resolve(value)
        return load_rename_dictionary(path, has_header=self.mapping_config.dictionary_has_header)
