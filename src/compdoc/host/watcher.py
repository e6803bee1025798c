"""
Aggregated file system watching with debouncing.

Watches several directories with one watchdog observer and delivers the
changes as coalesced batches through an async iterator, so that a burst
of saves turns into a single unit of work.
"""

from __future__ import annotations

import asyncio
import fnmatch
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Callable, Iterable

import structlog
from watchdog.events import (
    DirCreatedEvent,
    DirModifiedEvent,
    FileSystemEvent,
    FileSystemEventHandler,
)
from watchdog.observers import Observer

logger = structlog.get_logger(__name__)


class HostWatchEventType(str, Enum):
    """Kinds of change reported in a batch."""

    CREATED = "created"
    CHANGED = "changed"
    DELETED = "deleted"
    RENAMED = "renamed"


@dataclass(frozen=True)
class ChangeEvent:
    """A single coalesced change."""

    path: str
    event_type: HostWatchEventType


class DebouncedHandler(FileSystemEventHandler):
    """
    File system event handler with debouncing.

    Watchdog calls the ``on_*`` methods from its observer thread. Events
    are handed to the event loop, collected there, and flushed as one
    batch once no new event arrived for the debounce period. Repeated
    events for the same path keep the position of the first one and the
    type of the latest one.
    """

    def __init__(
        self,
        loop: asyncio.AbstractEventLoop,
        callback: Callable[[list[ChangeEvent]], None],
        debounce_ms: int = 300,
        ignore_patterns: list[str] | None = None,
    ) -> None:
        """
        Initialize the debounced handler.

        Args:
            loop: Event loop the callback runs on.
            callback: Function called with each flushed batch.
            debounce_ms: Debounce delay in milliseconds.
            ignore_patterns: Glob patterns to ignore.
        """
        super().__init__()
        self.callback = callback
        self.debounce_seconds = debounce_ms / 1000.0
        self.ignore_patterns = ignore_patterns or []

        self._loop = loop
        self._pending: dict[str, HostWatchEventType] = {}
        self._timer: asyncio.TimerHandle | None = None
        self._cancelled = False

    def _should_ignore(self, path: str) -> bool:
        """Check if a path should be ignored."""
        name = Path(path).name
        for pattern in self.ignore_patterns:
            if fnmatch.fnmatch(path, pattern) or fnmatch.fnmatch(name, pattern):
                return True
        return False

    def _record(self, path: str | bytes, event_type: HostWatchEventType) -> None:
        if isinstance(path, bytes):
            path = path.decode()
        if self._should_ignore(path):
            return
        self._loop.call_soon_threadsafe(self._add, path, event_type)

    def _add(self, path: str, event_type: HostWatchEventType) -> None:
        if self._cancelled:
            return
        self._pending[path] = event_type
        self._schedule_flush()

    def _schedule_flush(self) -> None:
        """Schedule the flush after the debounce period."""
        if self._timer:
            self._timer.cancel()

        self._timer = self._loop.call_later(self.debounce_seconds, self.flush)

    def flush(self) -> None:
        """Deliver pending changes as one batch."""
        self._timer = None
        if not self._pending:
            return

        batch = [ChangeEvent(path, event_type) for path, event_type in self._pending.items()]
        self._pending.clear()
        self.callback(batch)

    def cancel(self) -> None:
        """Drop pending changes and any scheduled flush. Later events are ignored."""
        self._cancelled = True
        if self._timer:
            self._timer.cancel()
            self._timer = None
        self._pending.clear()

    def on_created(self, event: FileSystemEvent) -> None:
        """Handle file creation."""
        if isinstance(event, DirCreatedEvent):
            return
        self._record(event.src_path, HostWatchEventType.CREATED)

    def on_modified(self, event: FileSystemEvent) -> None:
        """Handle file modification."""
        if isinstance(event, DirModifiedEvent):
            return
        self._record(event.src_path, HostWatchEventType.CHANGED)

    def on_deleted(self, event: FileSystemEvent) -> None:
        """Handle file/directory deletion."""
        self._record(event.src_path, HostWatchEventType.DELETED)

    def on_moved(self, event: FileSystemEvent) -> None:
        """Handle file/directory move."""
        self._record(event.src_path, HostWatchEventType.DELETED)
        self._record(event.dest_path, HostWatchEventType.RENAMED)


_CLOSED = object()


class AggregatedWatch:
    """
    Async iterator of debounced change batches for a set of directories.

    The observer starts on first iteration. Directories that do not exist
    at that moment are not watched.
    """

    def __init__(
        self,
        dirs: Iterable[Path | str],
        debounce_ms: int = 300,
        ignore_patterns: list[str] | None = None,
    ) -> None:
        self.dirs = [Path(d) for d in dirs]
        self.debounce_ms = debounce_ms
        self.ignore_patterns = ignore_patterns or []

        self._queue: asyncio.Queue | None = None
        self._observer: Observer | None = None
        self._handler: DebouncedHandler | None = None
        self._closed = False

    @property
    def running(self) -> bool:
        return self._observer is not None

    def start(self) -> None:
        """Start the observer on the running event loop."""
        if self._observer is not None or self._closed:
            return

        loop = asyncio.get_running_loop()
        self._queue = asyncio.Queue()
        self._handler = DebouncedHandler(
            loop,
            callback=self._queue.put_nowait,
            debounce_ms=self.debounce_ms,
            ignore_patterns=self.ignore_patterns,
        )

        observer = Observer()
        watched = 0
        for directory in self.dirs:
            if not directory.is_dir():
                logger.debug("Skipping missing watch directory", path=str(directory))
                continue
            observer.schedule(self._handler, str(directory), recursive=True)
            watched += 1
        observer.start()
        self._observer = observer

        logger.info("Aggregated watch started", directories=watched)

    def close(self) -> None:
        """Stop the observer and end iteration."""
        if self._closed:
            return
        self._closed = True

        if self._observer:
            self._observer.stop()
            self._observer.join(timeout=5.0)
            self._observer = None

        if self._handler:
            self._handler.cancel()
            self._handler = None

        if self._queue is not None:
            self._queue.put_nowait(_CLOSED)

        logger.info("Aggregated watch stopped")

    def __aiter__(self) -> "AggregatedWatch":
        self.start()
        return self

    async def __anext__(self) -> list[ChangeEvent]:
        if self._queue is None:
            raise StopAsyncIteration
        batch = await self._queue.get()
        if batch is _CLOSED:
            raise StopAsyncIteration
        return batch
