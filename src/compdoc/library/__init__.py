"""
Library building for compdoc.

Provides:
- Component discovery and the component index
- The library builder with lifecycle hooks
- Change watching with scoped rebuilds
- Locale category resolution and navigation merging
"""

from compdoc.library.builder import LibraryBuilder
from compdoc.library.categories import build_locale_categories
from compdoc.library.component import Component, ComponentFactory, LibComponent
from compdoc.library.discovery import discover
from compdoc.library.hooks import BuildEvent, BuildHooks
from compdoc.library.index import ComponentIndex, RootLookup, component_key
from compdoc.library.navigation import NavigationMerger
from compdoc.library.watcher import LibraryWatcher

__all__ = [
    "LibraryBuilder",
    "build_locale_categories",
    "Component",
    "ComponentFactory",
    "LibComponent",
    "discover",
    "BuildEvent",
    "BuildHooks",
    "ComponentIndex",
    "RootLookup",
    "component_key",
    "NavigationMerger",
    "LibraryWatcher",
]
