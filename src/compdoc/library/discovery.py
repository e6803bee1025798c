"""
Component discovery.

Every immediate subdirectory of a library root is a component. Each
``include`` subpath contributes its own immediate subdirectories as
components too, while the include directory itself stays a plain
container: with ``include = ["common"]``, ``common/zoo`` is a component
and ``common`` is not.
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

import structlog

from compdoc.library.component import ComponentFactory
from compdoc.library.index import ComponentIndex

if TYPE_CHECKING:
    from compdoc.config import LibraryConfig
    from compdoc.host import Host

logger = structlog.get_logger(__name__)


def include_paths_in_order(lib_root: Path, include: list[str]) -> list[Path]:
    """Resolved include paths, in configuration order, without duplicates."""
    paths: list[Path] = []
    for entry in include:
        path = (lib_root / entry).resolve()
        if path not in paths:
            paths.append(path)
    return paths


async def _register_children(
    parent: Path,
    library: "LibraryConfig",
    host: "Host",
    factory: ComponentFactory,
    index: ComponentIndex,
    containers: frozenset[Path] = frozenset(),
) -> int:
    registered = 0
    for name in await host.get_dirs(parent, exclude=library.exclude):
        abs_path = (parent / name).resolve()
        if abs_path in containers:
            continue
        index.register(factory(library, name, abs_path))
        registered += 1
    return registered


async def discover(
    library: "LibraryConfig",
    host: "Host",
    lib_root: Path,
    factory: ComponentFactory,
    index: ComponentIndex | None = None,
) -> ComponentIndex:
    """
    Populate a component index for ``library``.

    Args:
        library: Library configuration.
        host: File system host used for existence checks and listings.
        lib_root: Absolute library root directory.
        factory: Creates a component from ``(library, dir_name, abs_path)``.
        index: Index to populate; a new one when omitted.

    Returns:
        The populated index.
    """
    index = index if index is not None else ComponentIndex()
    include_paths = include_paths_in_order(lib_root, library.include)

    for include_path in include_paths:
        if not await host.path_exists(include_path):
            logger.debug("Include path not found", lib=library.name, path=str(include_path))
            continue
        await _register_children(include_path, library, host, factory, index)

    if await host.path_exists(lib_root):
        await _register_children(
            lib_root, library, host, factory, index, frozenset(include_paths)
        )
    else:
        logger.debug("Library root not found", lib=library.name, path=str(lib_root))

    logger.debug("Discovered components", lib=library.name, count=len(index))
    return index
