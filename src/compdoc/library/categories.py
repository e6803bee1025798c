"""Locale-resolved category trees."""

from __future__ import annotations

from typing import TYPE_CHECKING, Iterable

from compdoc.models import CategoryItem
from compdoc.utils import get_item_locale_property

if TYPE_CHECKING:
    from compdoc.config import CategoryConfig


def build_locale_categories(
    categories: Iterable["CategoryConfig"],
    locales: Iterable[str],
) -> dict[str, list[CategoryItem]]:
    """
    Resolve the raw categories once per locale.

    Every locale gets its own list, even when no category is configured,
    and all lists follow the raw declaration order.
    """
    locale_keys = list(locales)
    resolved: dict[str, list[CategoryItem]] = {locale: [] for locale in locale_keys}

    for raw in categories:
        for locale in locale_keys:
            resolved[locale].append(
                CategoryItem(
                    id=raw.id,
                    title=get_item_locale_property(raw, locale, "title") or raw.id,
                    subtitle=get_item_locale_property(raw, locale, "subtitle"),
                    items=[],
                )
            )
    return resolved
