"""
Locale navigation merge.

Attaches each component's doc item to the library's channel, grouped
under the locale's categories. The channel's items are rebuilt from the
resolved category template on every call so that repeated merges never
accumulate entries.
"""

from __future__ import annotations

import copy
import dataclasses
from typing import TYPE_CHECKING, Iterable, Sequence

from compdoc.config import SiteMode
from compdoc.exceptions import UnknownLocaleError
from compdoc.models import CategoryItem, ChannelItem, DocItem, NavigationItem, NavigationResult
from compdoc.utils import ascending_sort_by_order, title_case

if TYPE_CHECKING:
    from compdoc.config import LibraryConfig
    from compdoc.library.component import Component


class NavigationMerger:
    """Merges one library's doc items into per-locale navigation."""

    def __init__(
        self,
        library: "LibraryConfig",
        locale_categories: dict[str, list[CategoryItem]],
        mode: SiteMode = SiteMode.FULL,
    ) -> None:
        self.library = library
        self.locale_categories = locale_categories
        self.mode = mode

    def _categories_for(self, locale: str) -> list[CategoryItem]:
        if locale not in self.locale_categories:
            raise UnknownLocaleError(locale, list(self.locale_categories))
        return copy.deepcopy(self.locale_categories[locale])

    def find_channel(self, root_navs: Sequence[NavigationItem]) -> ChannelItem | None:
        for nav in root_navs:
            if nav.lib == self.library.name:
                return nav
        return None

    def merge(
        self,
        locale: str,
        root_navs: Sequence[NavigationItem],
        components: Iterable["Component"],
    ) -> NavigationResult:
        """
        Merge the components' doc items for ``locale``.

        A channel found in ``root_navs`` is updated in place. Otherwise a
        channel is synthesized; it is returned but not added to
        ``root_navs``.
        """
        categories = self._categories_for(locale)
        channel = self.find_channel(root_navs)
        synthesized = channel is None
        if channel is None:
            name = self.library.name
            channel = ChannelItem(
                id=name,
                lib=name,
                path=name,
                title=title_case(name),
                items=categories,
            )
        else:
            channel.items = categories

        categories_by_id = {category.id: category for category in categories}
        doc_items: list[DocItem] = []
        for component in components:
            doc_item = component.get_doc_item(locale)
            if doc_item is None or doc_item.hidden:
                continue

            doc_item = dataclasses.replace(doc_item)
            if self.mode == SiteMode.LITE:
                doc_item.path = f"{channel.path}/{doc_item.path}"

            category = categories_by_id.get(doc_item.category) if doc_item.category else None
            if category is not None:
                category.items.append(doc_item)
            else:
                channel.items.append(doc_item)
            doc_items.append(doc_item)

        for entry in channel.items:
            if isinstance(entry, CategoryItem):
                entry.items = ascending_sort_by_order(entry.items)

        return NavigationResult(channel=channel, doc_items=doc_items, synthesized=synthesized)
