"""
Host file system abstraction used by discovery and watching.
"""

from __future__ import annotations

import fnmatch
import os
from pathlib import Path
from typing import Iterable

import structlog

from compdoc.host.watcher import AggregatedWatch

logger = structlog.get_logger(__name__)


def matches_any(name: str, patterns: Iterable[str]) -> bool:
    """Check a directory name against glob patterns."""
    return any(fnmatch.fnmatch(name, pattern) for pattern in patterns)


class Host:
    """
    Local file system host.

    Path checks and listings are coroutines so that callers suspend at
    every I/O boundary; the default implementation reads synchronously.
    """

    def __init__(
        self,
        debounce_ms: int = 300,
        ignore_patterns: list[str] | None = None,
    ) -> None:
        self.debounce_ms = debounce_ms
        self.ignore_patterns = ignore_patterns or []

    async def path_exists(self, path: Path | str) -> bool:
        return os.path.exists(path)

    async def get_dirs(
        self,
        path: Path | str,
        exclude: Iterable[str] | None = None,
    ) -> list[str]:
        """
        List the names of the immediate subdirectories of ``path``.

        Names matching any ``exclude`` glob are left out. The result is
        sorted so that discovery order does not depend on the platform.
        """
        patterns = list(exclude or [])
        try:
            entries = list(os.scandir(path))
        except FileNotFoundError:
            logger.debug("Directory not found", path=str(path))
            return []

        dirs = [
            entry.name
            for entry in entries
            if entry.is_dir() and not matches_any(entry.name, patterns)
        ]
        return sorted(dirs)

    def watch_aggregated(
        self,
        dirs: Iterable[Path | str],
        debounce_ms: int | None = None,
    ) -> AggregatedWatch:
        """Watch ``dirs`` recursively and yield debounced change batches."""
        return AggregatedWatch(
            dirs,
            debounce_ms=debounce_ms or self.debounce_ms,
            ignore_patterns=self.ignore_patterns,
        )
