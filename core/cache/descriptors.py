"""Static declarations of cached outputs and tracked inputs per work-item type.

Each work-item class exposes a ``DESCRIPTOR`` built once at import time from its
own declarations plus any shared descriptor sets it embeds. Accessors are plain
callables that read the value off an item; nothing is discovered by reflection.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, Literal

InputKind = Literal["file", "files", "directory", "value"]
Accessor = Callable[[Any], Any]

_INPUT_KINDS: frozenset[str] = frozenset({"file", "files", "directory", "value"})


@dataclass(frozen=True)
class CachedOutput:
    """An output path whose content is fingerprinted and may be reused."""

    name: str
    accessor: Accessor

    def value(self, item: object) -> Any:
        return self.accessor(item)


@dataclass(frozen=True)
class TrackedInput:
    """An input whose current content participates in the fingerprint."""

    name: str
    kind: InputKind
    accessor: Accessor
    optional: bool = False

    def __post_init__(self) -> None:
        if self.kind not in _INPUT_KINDS:
            raise ValueError(f"Unsupported input kind for {self.name!r}: {self.kind}")

    def value(self, item: object) -> Any:
        return self.accessor(item)


@dataclass(frozen=True)
class WorkItemDescriptor:
    """Ordered cached outputs and tracked inputs of one work-item type."""

    cached_outputs: tuple[CachedOutput, ...] = ()
    tracked_inputs: tuple[TrackedInput, ...] = ()

    def __post_init__(self) -> None:
        names = [o.name for o in self.cached_outputs] + [i.name for i in self.tracked_inputs]
        duplicates = sorted({name for name in names if names.count(name) > 1})
        if duplicates:
            raise ValueError(f"Duplicate descriptor names: {duplicates}")

    @classmethod
    def compose(
        cls,
        own: WorkItemDescriptor,
        *shared: WorkItemDescriptor,
    ) -> WorkItemDescriptor:
        """Own declarations first, then each shared set in the order given."""

        outputs = list(own.cached_outputs)
        inputs = list(own.tracked_inputs)
        for part in shared:
            outputs.extend(part.cached_outputs)
            inputs.extend(part.tracked_inputs)
        return cls(cached_outputs=tuple(outputs), tracked_inputs=tuple(inputs))


def describe(item: object) -> WorkItemDescriptor:
    """Return the descriptor declared by the item's type."""

    descriptor = getattr(type(item), "DESCRIPTOR", None)
    if not isinstance(descriptor, WorkItemDescriptor):
        raise TypeError(f"{type(item).__name__} does not declare a WorkItemDescriptor")
    return descriptor
