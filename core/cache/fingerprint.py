"""Ordered digest sequences summarizing a cached output and its tracked inputs."""

from __future__ import annotations

import logging
import os
from collections.abc import Sequence
from pathlib import Path
from typing import Any

from core.cache.descriptors import CachedOutput, TrackedInput
from core.cache.paths import PathResolver, unwrap
from core.config.models import CacheConfig
from core.hashing.digest import hash_all, hash_directory_shallow, hash_file, hash_string
from core.utils.errors import HashError
from core.utils.logs import log_event

logger = logging.getLogger("mapgate.cache")

NULL_TOKEN = "null"
TOKEN_SEPARATOR = "\n"


def sidecar_path(target: Path, config: CacheConfig) -> Path:
    """Where the fingerprint of ``target`` is stored."""

    if target.is_dir():
        return target / config.directory_sidecar_name
    return target.with_name(f"{target.name}{config.sidecar_suffix}")


def render_fingerprint(tokens: Sequence[str]) -> str:
    return TOKEN_SEPARATOR.join(tokens)


class FingerprintCalculator:
    """Compute fingerprints for one work item's cached outputs."""

    def __init__(self, resolver: PathResolver, config: CacheConfig) -> None:
        self._resolver = resolver
        self._config = config

    @property
    def algorithm(self) -> str:
        return self._config.hash_algorithm

    def fingerprint(
        self,
        output: CachedOutput,
        inputs: Sequence[TrackedInput],
        item: object,
    ) -> list[str]:
        """Output content hash(es) first, then each input in declared order."""

        target = self._resolver.resolve(output.value(item))
        tokens = self._hash_output(target)
        for tracked in inputs:
            tokens.extend(self._hash_input(tracked, item))
        return tokens

    def render(self, output: CachedOutput, inputs: Sequence[TrackedInput], item: object) -> str:
        return render_fingerprint(self.fingerprint(output, inputs, item))

    def _hash_output(self, target: Path) -> list[str]:
        exclude = [sidecar_path(target, self._config)] if target.is_dir() else []
        return hash_all(target, self.algorithm, exclude=exclude)

    def _hash_input(self, tracked: TrackedInput, item: object) -> list[str]:
        raw = unwrap(tracked.value(item))
        if raw is None:
            if tracked.optional:
                return [NULL_TOKEN]
            raise HashError(f"Required input {tracked.name!r} has no value")

        if tracked.kind == "file":
            path = self._resolver.resolve(raw)
            if not path.is_file():
                raise HashError(f"Input {tracked.name!r} is not a file: {path}", path=path)
            tokens = [hash_file(path, self.algorithm)]
        elif tracked.kind == "directory":
            path = self._resolver.resolve(raw)
            if not path.is_dir():
                raise HashError(f"Input {tracked.name!r} is not a directory: {path}", path=path)
            tokens = hash_all(path, self.algorithm)
        elif tracked.kind == "files":
            tokens = [hash_file(p, self.algorithm) for p in self._resolver.resolve_all(raw)]
        else:
            tokens = self._hash_value(tracked, raw)

        log_event(logger, logging.DEBUG, "input_hashed", input=tracked.name, tokens=tokens)
        return tokens

    def _hash_value(self, tracked: TrackedInput, value: Any) -> list[str]:
        if isinstance(value, str):
            return [hash_string(value, self.algorithm)]
        if isinstance(value, os.PathLike):
            path = self._resolver.resolve(value)
            if path.is_dir():
                return hash_directory_shallow(path, self.algorithm)
            return [hash_file(path, self.algorithm)]
        if isinstance(value, (bool, int, float)):
            return [hash_string(str(value), self.algorithm)]
        raise HashError(
            f"Input {tracked.name!r} has unsupported value type {type(value).__name__}"
        )
