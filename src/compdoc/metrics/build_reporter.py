"""
Build progress reporting.

Observes a LibraryBuilder through its hooks, logs progress and keeps
local timing statistics. No data leaves the process.
"""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Callable

import structlog

from compdoc.library.hooks import BuildEvent
from compdoc.library.index import component_key

if TYPE_CHECKING:
    from compdoc.library.builder import LibraryBuilder
    from compdoc.library.component import Component

logger = structlog.get_logger(__name__)


@dataclass
class BuildStats:
    """Accumulated statistics of one library's builds."""

    batches: int = 0
    components_built: int = 0
    last_batch_size: int = 0
    last_batch_seconds: float = 0.0
    # Keyed by component root directory.
    component_seconds: dict[str, float] = field(default_factory=dict)

    def to_dict(self) -> dict[str, float | int]:
        return {
            "batches": self.batches,
            "components_built": self.components_built,
            "last_batch_size": self.last_batch_size,
            "last_batch_seconds": round(self.last_batch_seconds, 4),
        }


class BuildReporter:
    """Logs build lifecycle events of one builder."""

    def __init__(self, builder: "LibraryBuilder") -> None:
        self.builder = builder
        self.stats = BuildStats()

        self._batch_started: float | None = None
        self._component_started: dict[str, float] = {}
        self._unsubscribers: list[Callable[[], None]] = []

    def attach(self) -> "BuildReporter":
        hooks = self.builder.hooks
        self._unsubscribers = [
            hooks.subscribe(BuildEvent.BATCH_START, self._on_batch_start),
            hooks.subscribe(BuildEvent.BATCH_END, self._on_batch_end),
            hooks.subscribe(BuildEvent.UNIT_START, self._on_component_start),
            hooks.subscribe(BuildEvent.UNIT_END, self._on_component_end),
        ]
        return self

    def detach(self) -> None:
        for unsubscribe in self._unsubscribers:
            unsubscribe()
        self._unsubscribers = []

    def _on_batch_start(self, builder: "LibraryBuilder", components: list["Component"]) -> None:
        self._batch_started = time.perf_counter()
        logger.info("Building components", lib=builder.lib.name, count=len(components))

    def _on_batch_end(self, builder: "LibraryBuilder", components: list["Component"]) -> None:
        elapsed = time.perf_counter() - (self._batch_started or time.perf_counter())
        self._batch_started = None
        self.stats.batches += 1
        self.stats.last_batch_size = len(components)
        self.stats.last_batch_seconds = elapsed
        logger.info(
            "Built components",
            lib=builder.lib.name,
            count=len(components),
            seconds=round(elapsed, 3),
        )

    def _on_component_start(self, component: "Component") -> None:
        self._component_started[component_key(component.abs_path)] = time.perf_counter()
        logger.debug("Building component", lib=self.builder.lib.name, component=component.name)

    def _on_component_end(self, component: "Component") -> None:
        key = component_key(component.abs_path)
        started = self._component_started.pop(key, time.perf_counter())
        elapsed = time.perf_counter() - started
        self.stats.components_built += 1
        self.stats.component_seconds[key] = elapsed
        logger.debug(
            "Built component",
            lib=self.builder.lib.name,
            component=component.name,
            seconds=round(elapsed, 3),
        )
