"""
Host file system access for compdoc.

Provides:
- Directory existence checks and subdirectory listing
- Aggregated, debounced change watching (watchdog based)
"""

from compdoc.host.filesystem import Host, matches_any
from compdoc.host.watcher import (
    AggregatedWatch,
    ChangeEvent,
    DebouncedHandler,
    HostWatchEventType,
)

__all__ = [
    "Host",
    "matches_any",
    "AggregatedWatch",
    "ChangeEvent",
    "DebouncedHandler",
    "HostWatchEventType",
]
