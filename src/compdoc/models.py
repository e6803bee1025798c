"""
Navigation data model.

Doc items, categories and channels are plain dataclasses so that the
navigation tree can be deep-copied and serialized with dataclasses.asdict.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any, Union


@dataclass
class DocItem:
    """Per-component, per-locale summary placed into the navigation tree."""

    id: str
    title: str
    path: str
    name: str = ""
    subtitle: str | None = None
    category: str | None = None
    order: int | None = None
    hidden: bool = False
    lib: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass
class CategoryItem:
    """A locale-resolved category receiving doc items."""

    id: str
    title: str
    subtitle: str | None = None
    items: list[DocItem] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


ChannelEntry = Union[CategoryItem, DocItem]


@dataclass
class NavigationItem:
    """
    A top-level navigation entry.

    When ``lib`` names a library the entry is that library's channel and
    its ``items`` are rewritten on every navigation merge.
    """

    id: str
    title: str
    path: str
    lib: str | None = None
    items: list[ChannelEntry] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


# A channel is the navigation entry owned by one library.
ChannelItem = NavigationItem


@dataclass
class NavigationResult:
    """Outcome of merging one library into one locale's navigation."""

    channel: ChannelItem
    doc_items: list[DocItem]
    synthesized: bool = False
