"""
Library change watcher.

Subscribes to one aggregated change stream covering the doc, api and
examples directories of every component, maps each changed path to the
component owning it, and rebuilds only those components.
"""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import TYPE_CHECKING, Awaitable, Callable, Iterable

import structlog

from compdoc.library.component import Component
from compdoc.library.index import RootLookup

if TYPE_CHECKING:
    from compdoc.host import AggregatedWatch, ChangeEvent
    from compdoc.library.builder import LibraryBuilder

logger = structlog.get_logger(__name__)


class LibraryWatcher:
    """
    Turns change batches into scoped rebuilds of one library.

    The watched directories and the root lookup are computed once, at
    activation, from the builder's index at that moment. Batches are
    handled one after another; a failing rebuild is logged and later
    batches are still processed.
    """

    def __init__(
        self,
        builder: "LibraryBuilder",
        debounce_ms: int | None = None,
        on_rebuild: Callable[[list[Component]], Awaitable[None]] | None = None,
    ) -> None:
        """
        Initialize the watcher.

        Args:
            builder: Builder whose components are watched and rebuilt.
            debounce_ms: Debounce delay passed to the host.
            on_rebuild: Awaited with the rebuilt components after each
                successful batch.
        """
        self.builder = builder
        self.debounce_ms = debounce_ms
        self.on_rebuild = on_rebuild

        self.watched_dirs: list[Path] = []
        self._lookup: RootLookup | None = None
        self._subscription: AggregatedWatch | None = None
        self._task: asyncio.Task | None = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def activate(self) -> None:
        """Snapshot the watched directories and the root lookup."""
        watched: list[Path] = []
        for component in self.builder.components:
            watched.append(component.abs_doc_path)
            watched.append(component.abs_api_path)
            watched.append(component.abs_examples_path)
        self.watched_dirs = watched
        self._lookup = self.builder.components.root_lookup()

    def start(self) -> None:
        """Subscribe to changes and process batches in a background task."""
        if self._task is not None:
            return

        self.activate()
        self._subscription = self.builder.host.watch_aggregated(
            self.watched_dirs, debounce_ms=self.debounce_ms
        )
        self._task = asyncio.create_task(self._run(self._subscription))

        logger.info(
            "Watching library",
            lib=self.builder.lib.name,
            components=len(self._lookup or ()),
            directories=len(self.watched_dirs),
        )

    async def stop(self) -> None:
        """Close the subscription and wait for the running batch to finish."""
        if self._subscription is not None:
            self._subscription.close()
            self._subscription = None

        if self._task is not None:
            await self._task
            self._task = None

        logger.info("Stopped watching library", lib=self.builder.lib.name)

    async def _run(self, subscription: "AggregatedWatch") -> None:
        async for changes in subscription:
            try:
                await self.handle_changes(changes)
            except Exception:
                logger.exception("Rebuild failed", lib=self.builder.lib.name)

    def resolve_changes(self, changes: Iterable["ChangeEvent"]) -> list[Component]:
        """
        Map changes to the distinct components owning them.

        Components are returned in the order they first appear in the
        batch. Paths outside every component are dropped.
        """
        if self._lookup is None:
            self.activate()
        assert self._lookup is not None

        changed: dict[str, Component] = {}
        for change in changes:
            owner = self._lookup.resolve(change.path)
            if owner is None:
                continue
            root, component = owner
            changed.setdefault(root, component)
        return list(changed.values())

    async def handle_changes(self, changes: list["ChangeEvent"]) -> list[Component]:
        """Rebuild the components affected by one batch."""
        logger.info(
            "Changes detected",
            lib=self.builder.lib.name,
            changes=[f"{c.event_type.value}:{c.path}" for c in changes],
        )
        components = self.resolve_changes(changes)
        if not components:
            return []

        await self.builder.build_components(components)
        if self.on_rebuild is not None:
            await self.on_rebuild(components)
        return components
