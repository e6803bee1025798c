"""
Library builder.

Owns the component index of one library and drives full builds, partial
rebuilds, artifact emission and navigation merges for it.
"""

from __future__ import annotations

import functools
from typing import TYPE_CHECKING, Awaitable, Callable, Sequence

import structlog

from compdoc.constants import (
    ASSETS_API_DOCS_RELATIVE_PATH,
    ASSETS_EXAMPLES_HIGHLIGHTED_RELATIVE_PATH,
    ASSETS_OVERVIEWS_RELATIVE_PATH,
    SITE_CONTENT_COMPONENTS_RELATIVE_PATH,
)
from compdoc.host import Host
from compdoc.library.categories import build_locale_categories
from compdoc.library.component import Component, ComponentFactory, LibComponent
from compdoc.library.discovery import discover
from compdoc.library.hooks import BuildEvent, BuildHooks
from compdoc.library.index import ComponentIndex
from compdoc.library.navigation import NavigationMerger
from compdoc.library.watcher import LibraryWatcher
from compdoc.models import CategoryItem, DocItem, NavigationItem, NavigationResult

if TYPE_CHECKING:
    from compdoc.config import Config, LibraryConfig

logger = structlog.get_logger(__name__)


class LibraryBuilder:
    """
    Builds the components of one library.

    Components are built one at a time in index order, and hooks fire in
    the order BATCH_START, (UNIT_START, UNIT_END)*, BATCH_END. A failing
    component aborts the rest of its batch and the error propagates.
    """

    def __init__(
        self,
        config: "Config",
        lib: "LibraryConfig",
        host: Host | None = None,
        component_factory: ComponentFactory | None = None,
    ) -> None:
        """
        Initialize the builder.

        Args:
            config: compdoc configuration.
            lib: The library to build.
            host: File system host. Uses the local file system if not provided.
            component_factory: Creates components; defaults to LibComponent.
        """
        self.config = config
        self.lib = lib
        self.host = host or Host(
            debounce_ms=config.watcher.debounce_ms,
            ignore_patterns=config.watcher.ignore_patterns,
        )
        self.hooks = BuildHooks()

        self._component_factory = component_factory or functools.partial(LibComponent, config)
        self._index = ComponentIndex()
        self._locale_categories: dict[str, list[CategoryItem]] = {}
        self._watcher: LibraryWatcher | None = None

        lib_root = lib.root_dir
        if not lib_root.is_absolute():
            lib_root = config.project_root / lib_root
        self.abs_lib_path = lib_root.resolve()

        site = config.abs_site_path
        self.abs_dest_site_content_components_path = (
            config.abs_site_content_path / SITE_CONTENT_COMPONENTS_RELATIVE_PATH / lib.name
        )
        self.abs_dest_assets_overviews_path = site / ASSETS_OVERVIEWS_RELATIVE_PATH / lib.name
        self.abs_dest_assets_api_docs_path = site / ASSETS_API_DOCS_RELATIVE_PATH / lib.name
        self.abs_dest_assets_examples_highlighted_path = (
            site / ASSETS_EXAMPLES_HIGHLIGHTED_RELATIVE_PATH / lib.name
        )

    @property
    def components(self) -> ComponentIndex:
        return self._index

    @property
    def locale_categories(self) -> dict[str, list[CategoryItem]]:
        return self._locale_categories

    async def initialize(self) -> None:
        """Resolve locale categories and discover components."""
        self._locale_categories = build_locale_categories(
            self.lib.categories, self.config.locale_keys
        )
        await discover(
            self.lib,
            self.host,
            self.abs_lib_path,
            self._component_factory,
            self._index,
        )
        logger.info(
            "Library initialized",
            lib=self.lib.name,
            path=str(self.abs_lib_path),
            components=len(self._index),
        )

    async def build(self) -> None:
        """Build every component in the index."""
        await self.build_components(self._index.values())
        logger.info("Library compiled successfully", lib=self.lib.name)

    async def build_components(self, components: Sequence[Component]) -> None:
        """Build ``components`` sequentially, firing the lifecycle hooks."""
        components = list(components)
        self.hooks.publish(BuildEvent.BATCH_START, self, components)
        for component in components:
            await self.build_component(component)
        self.hooks.publish(BuildEvent.BATCH_END, self, components)

    async def build_component(self, component: Component) -> None:
        self.hooks.publish(BuildEvent.UNIT_START, component)
        await component.build()
        self.hooks.publish(BuildEvent.UNIT_END, component)

    async def emit(self) -> None:
        """Write the artifacts of every component in the index."""
        await self.emit_components(self._index.values())

    async def emit_components(self, components: Sequence[Component]) -> None:
        for component in components:
            await component.emit(
                self.abs_dest_assets_overviews_path,
                self.abs_dest_assets_api_docs_path,
                self.abs_dest_site_content_components_path,
                self.abs_dest_assets_examples_highlighted_path,
            )

    def watch(
        self,
        on_rebuild: Callable[[list[Component]], Awaitable[None]] | None = None,
    ) -> LibraryWatcher | None:
        """
        Start rebuilding changed components in the background.

        Returns:
            The running watcher, or None when watching is disabled.
        """
        if not self.config.watch:
            return None

        if self._watcher is None:
            self._watcher = LibraryWatcher(
                self,
                debounce_ms=self.config.watcher.debounce_ms,
                on_rebuild=on_rebuild,
            )
            self._watcher.start()
        return self._watcher

    async def stop_watching(self) -> None:
        if self._watcher is not None:
            await self._watcher.stop()
            self._watcher = None

    def merge_locale_navs(
        self,
        locale: str,
        root_navs: Sequence[NavigationItem],
    ) -> NavigationResult:
        """Merge this library into ``locale``'s navigation and return the channel."""
        merger = NavigationMerger(self.lib, self._locale_categories, self.config.mode)
        return merger.merge(locale, root_navs, self._index.values())

    def generate_locale_navs(
        self,
        locale: str,
        root_navs: Sequence[NavigationItem],
    ) -> list[DocItem]:
        """Merge this library into ``locale``'s navigation and return its doc items."""
        return self.merge_locale_navs(locale, root_navs).doc_items
