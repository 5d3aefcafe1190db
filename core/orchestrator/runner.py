"""Run a single work item behind the cache gate."""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from core.cache.gate import CacheGate, GateDecision
from core.config.models import CacheConfig
from core.utils.logs import log_event

logger = logging.getLogger("mapgate.runner")


@dataclass
class RunOutcome:
    """What happened to one work item."""

    executed: bool
    decision: GateDecision
    result: Any = None
    sidecars: list[Path] = field(default_factory=list)


def run_cached(
    item: object,
    action: Callable[[], Any],
    *,
    gate: CacheGate,
    config: CacheConfig,
) -> RunOutcome:
    """Check -> execute -> commit. Fingerprints are committed only after a successful action."""

    decision = gate.check(item, config)
    item_name = type(item).__name__
    if not decision.should_run:
        log_event(logger, logging.INFO, "skipped", item=item_name)
        return RunOutcome(executed=False, decision=decision)

    log_event(logger, logging.INFO, "start", item=item_name, reason=decision.reason)
    result = action()
    sidecars = gate.commit(item, config)
    log_event(logger, logging.INFO, "done", item=item_name, sidecars=len(sidecars))
    return RunOutcome(executed=True, decision=decision, result=result, sidecars=sidecars)
