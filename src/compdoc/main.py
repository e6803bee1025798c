"""
compdoc service.

Provides the DocService orchestration class tying the library builders
of a site together.
"""

from __future__ import annotations

import asyncio
import copy
import json
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator

import structlog

from compdoc.config import Config
from compdoc.constants import NAVIGATIONS_FILENAME
from compdoc.host import Host
from compdoc.library import Component, LibraryBuilder
from compdoc.metrics import BuildReporter
from compdoc.models import NavigationItem

logger = structlog.get_logger(__name__)


class DocService:
    """
    Main compdoc service orchestrating all libraries of a site.

    It manages:
    - One LibraryBuilder (and BuildReporter) per configured library
    - Full builds and artifact emission
    - Per-locale navigation generation
    - Watch mode with scoped rebuilds
    """

    def __init__(self, config: Config | None = None, host: Host | None = None) -> None:
        """
        Initialize the service.

        Args:
            config: Configuration instance. Uses default if not provided.
            host: File system host shared by all builders.
        """
        self.config = config or Config()
        self.host = host or Host(
            debounce_ms=self.config.watcher.debounce_ms,
            ignore_patterns=self.config.watcher.ignore_patterns,
        )

        self.builders: dict[str, LibraryBuilder] = {}
        self.reporters: dict[str, BuildReporter] = {}
        self._initialized = False
        self._shutdown_event = asyncio.Event()

        logger.info(
            "compdoc service created",
            project_root=str(self.config.project_root),
            site=str(self.config.abs_site_path),
            libs=[lib.name for lib in self.config.libs],
        )

    async def initialize(self) -> None:
        """Create and initialize a builder per library."""
        if self._initialized:
            return

        for lib in self.config.libs:
            builder = LibraryBuilder(self.config, lib, host=self.host)
            self.reporters[lib.name] = BuildReporter(builder).attach()
            await builder.initialize()
            self.builders[lib.name] = builder

        self._initialized = True
        logger.info("compdoc service initialized", libs=len(self.builders))

    async def shutdown(self) -> None:
        """Stop watchers and detach reporters."""
        logger.info("Shutting down compdoc service")
        self._shutdown_event.set()

        for builder in self.builders.values():
            await builder.stop_watching()
        for reporter in self.reporters.values():
            reporter.detach()

        self._initialized = False
        logger.info("compdoc service shutdown complete")

    @asynccontextmanager
    async def session(self) -> AsyncIterator["DocService"]:
        """Context manager for service lifecycle."""
        try:
            await self.initialize()
            yield self
        finally:
            await self.shutdown()

    async def wait_closed(self) -> None:
        await self._shutdown_event.wait()

    def request_shutdown(self) -> None:
        self._shutdown_event.set()

    async def build(self) -> None:
        """Build every library."""
        for builder in self.builders.values():
            await builder.build()

    async def emit(self) -> None:
        """Emit every library's artifacts and the navigation file."""
        for builder in self.builders.values():
            await builder.emit()
        self.write_navigations()

    def generate_navigations(self) -> dict[str, dict[str, list[dict[str, Any]]]]:
        """
        Merge all libraries into each locale's navigation.

        Configured navs are copied per locale; channels synthesized for
        libraries without a configured nav are appended after them.
        """
        result: dict[str, dict[str, list[dict[str, Any]]]] = {}
        for locale in self.config.locale_keys:
            root_navs = [
                NavigationItem(id=nav.id, title=nav.title, path=nav.path, lib=nav.lib)
                for nav in copy.deepcopy(self.config.navs)
            ]
            synthesized: list[NavigationItem] = []
            docs: list[dict[str, Any]] = []
            for builder in self.builders.values():
                merged = builder.merge_locale_navs(locale, root_navs)
                if merged.synthesized:
                    synthesized.append(merged.channel)
                docs.extend(item.to_dict() for item in merged.doc_items)

            result[locale] = {
                "navs": [nav.to_dict() for nav in root_navs + synthesized],
                "docs": docs,
            }
        return result

    def write_navigations(self) -> None:
        target = self.config.abs_site_content_path / NAVIGATIONS_FILENAME
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(
            json.dumps(self.generate_navigations(), indent=2, ensure_ascii=False),
            encoding="utf-8",
        )
        logger.debug("Navigations written", path=str(target))

    async def start_watching(self) -> int:
        """
        Start every library's watcher.

        Returns:
            Number of libraries being watched (0 when watching is disabled).
        """
        if not self._initialized:
            await self.initialize()

        watching = 0
        for builder in self.builders.values():

            async def on_rebuild(components: list[Component], builder: LibraryBuilder = builder) -> None:
                await builder.emit_components(components)
                self.write_navigations()

            if builder.watch(on_rebuild=on_rebuild) is not None:
                watching += 1

        logger.info("File watching started", libs=watching)
        return watching

    def get_stats(self) -> dict[str, Any]:
        """Get build statistics per library."""
        return {
            name: {
                "components": len(builder.components),
                **self.reporters[name].stats.to_dict(),
            }
            for name, builder in self.builders.items()
        }
