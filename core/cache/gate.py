"""Skip-or-run decision for work items, backed by fingerprint sidecar files.

The gate never trusts uncertain cache state. A missing sidecar, a mismatching
fingerprint or any unexpected failure all resolve to "run", and stale artifacts
are deleted so the outer build cannot mistake them for current results.
"""

from __future__ import annotations

import logging
import os
import shutil
import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import Literal

from core.cache.descriptors import CachedOutput, WorkItemDescriptor, describe
from core.cache.fingerprint import FingerprintCalculator, sidecar_path
from core.cache.paths import PathResolver
from core.config.models import CacheConfig
from core.utils.logs import log_event

logger = logging.getLogger("mapgate.cache")

GateReason = Literal[
    "caching_disabled",
    "no_cached_outputs",
    "output_missing",
    "sidecar_missing",
    "fingerprint_mismatch",
    "error",
    "up_to_date",
]


@dataclass(frozen=True)
class GateDecision:
    """Outcome of one gate check."""

    should_run: bool
    reason: GateReason
    output: str | None = None


class CacheGate:
    """Decide whether a work item may be skipped and record fingerprints after it runs."""

    def __init__(self, resolver: PathResolver | None = None) -> None:
        self._resolver = resolver or PathResolver()

    def should_run(self, item: object, config: CacheConfig) -> bool:
        return self.check(item, config).should_run

    def check(self, item: object, config: CacheConfig) -> GateDecision:
        item_name = type(item).__name__
        if not config.enabled:
            log_event(logger, logging.INFO, "gate", item=item_name, reason="caching_disabled")
            return GateDecision(should_run=True, reason="caching_disabled")

        try:
            descriptor = describe(item)
        except Exception as exc:  # noqa: BLE001
            log_event(logger, logging.ERROR, "gate_error", item=item_name, error=str(exc))
            return GateDecision(should_run=True, reason="error")

        if not descriptor.cached_outputs:
            return GateDecision(should_run=True, reason="no_cached_outputs")

        calculator = FingerprintCalculator(self._resolver, config)
        for output in descriptor.cached_outputs:
            try:
                decision = self._check_output(output, descriptor, item, calculator, config)
            except Exception as exc:  # noqa: BLE001
                log_event(
                    logger,
                    logging.ERROR,
                    "gate_error",
                    item=item_name,
                    output=output.name,
                    error=f"{type(exc).__name__}: {exc}",
                )
                return GateDecision(should_run=True, reason="error", output=output.name)
            if decision is not None:
                return decision

        log_event(logger, logging.INFO, "gate", item=item_name, reason="up_to_date")
        return GateDecision(should_run=False, reason="up_to_date")

    def commit(self, item: object, config: CacheConfig) -> list[Path]:
        """Rewrite sidecars for every cached output that exists; return the sidecars written."""

        if not config.enabled:
            return []

        try:
            descriptor = describe(item)
        except TypeError as exc:
            log_event(logger, logging.ERROR, "commit_error", item=type(item).__name__, error=str(exc))
            return []

        calculator = FingerprintCalculator(self._resolver, config)
        written: list[Path] = []
        for output in descriptor.cached_outputs:
            try:
                target = self._resolver.resolve(output.value(item))
                if not target.exists():
                    log_event(logger, logging.INFO, "commit_skipped", output=output.name, target=target)
                    continue
                sidecar = sidecar_path(target, config)
                fingerprint = calculator.render(output, descriptor.tracked_inputs, item)
                _atomic_write_text(sidecar, fingerprint)
                written.append(sidecar)
                log_event(logger, logging.INFO, "commit", output=output.name, sidecar=sidecar)
            except Exception as exc:  # noqa: BLE001
                log_event(
                    logger,
                    logging.ERROR,
                    "commit_error",
                    output=output.name,
                    error=f"{type(exc).__name__}: {exc}",
                )
        return written

    def _check_output(
        self,
        output: CachedOutput,
        descriptor: WorkItemDescriptor,
        item: object,
        calculator: FingerprintCalculator,
        config: CacheConfig,
    ) -> GateDecision | None:
        target = self._resolver.resolve(output.value(item))
        if not target.exists():
            log_event(logger, logging.INFO, "gate", output=output.name, reason="output_missing")
            return GateDecision(should_run=True, reason="output_missing", output=output.name)

        sidecar = sidecar_path(target, config)
        if not sidecar.is_file():
            log_event(
                logger,
                logging.WARNING,
                "corrupted_cache",
                output=output.name,
                target=target,
                reason="sidecar_missing",
            )
            _delete_path(target)
            return GateDecision(should_run=True, reason="sidecar_missing", output=output.name)

        found = sidecar.read_text(encoding="utf-8")
        calculated = calculator.render(output, descriptor.tracked_inputs, item)
        log_event(
            logger,
            logging.INFO,
            "cached_output_found",
            output=output.name,
            target=target,
            found=found,
            calculated=calculated,
        )
        if found != calculated:
            log_event(
                logger,
                logging.WARNING,
                "corrupted_cache",
                output=output.name,
                target=target,
                reason="fingerprint_mismatch",
            )
            _delete_path(sidecar)
            _delete_path(target)
            return GateDecision(should_run=True, reason="fingerprint_mismatch", output=output.name)
        return None


def _delete_path(path: Path) -> None:
    if path.is_dir() and not path.is_symlink():
        shutil.rmtree(path)
    else:
        path.unlink(missing_ok=True)


def _atomic_write_text(path: Path, text: str) -> None:
    fd, raw_tmp_path = tempfile.mkstemp(
        dir=path.parent,
        prefix=f"{path.name}.",
        suffix=".tmp",
    )
    os.close(fd)
    tmp_path = Path(raw_tmp_path)

    try:
        tmp_path.write_text(text, encoding="utf-8")
        tmp_path.replace(path)
    except Exception:
        if tmp_path.exists():
            tmp_path.unlink(missing_ok=True)
        raise
