"""
Component index keyed by absolute directory path.
"""

from __future__ import annotations

import os
from pathlib import Path, PurePath
from typing import Iterator, Mapping

from compdoc.library.component import Component


def component_key(path: Path | str) -> str:
    """Normalized absolute path used as a component key."""
    return os.path.normpath(os.path.abspath(path))


class RootLookup:
    """
    Resolve a changed path to the component owning it.

    A component owns a path when its root directory is a strict ancestor
    of that path. Ancestors are checked deepest first, so with nested
    roots the innermost component wins.
    """

    def __init__(self, roots: Mapping[str, Component]) -> None:
        self._roots = dict(roots)

    def __len__(self) -> int:
        return len(self._roots)

    def resolve(self, path: Path | str) -> tuple[str, Component] | None:
        """Return ``(root, component)`` for the owner of ``path``, if any."""
        pure = PurePath(os.path.normpath(path))
        for parent in pure.parents:
            key = str(parent)
            component = self._roots.get(key)
            if component is not None:
                return key, component
        return None


class ComponentIndex:
    """
    Insertion-ordered mapping from absolute directory path to component.

    Registering a path again replaces the component but keeps its
    original position.
    """

    def __init__(self) -> None:
        self._components: dict[str, Component] = {}

    def register(self, component: Component) -> str:
        key = component_key(component.abs_path)
        self._components[key] = component
        return key

    def get(self, path: Path | str) -> Component | None:
        return self._components.get(component_key(path))

    def keys(self) -> list[str]:
        return list(self._components.keys())

    def values(self) -> list[Component]:
        return list(self._components.values())

    def items(self) -> list[tuple[str, Component]]:
        return list(self._components.items())

    def root_lookup(self) -> RootLookup:
        """Snapshot of the current roots for change resolution."""
        return RootLookup(self._components)

    def __len__(self) -> int:
        return len(self._components)

    def __iter__(self) -> Iterator[Component]:
        return iter(list(self._components.values()))

    def __contains__(self, path: object) -> bool:
        if not isinstance(path, (str, PurePath)):
            return False
        return component_key(path) in self._components
