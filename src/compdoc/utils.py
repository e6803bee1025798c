"""Small helpers shared by the library builders."""

from __future__ import annotations

import re
from typing import Any, Protocol, Sequence, TypeVar


class _Ordered(Protocol):
    order: int | None


T = TypeVar("T", bound=_Ordered)

_WORD_SEPARATORS = re.compile(r"[-_\s]+")


def ascending_sort_by_order(items: Sequence[T]) -> list[T]:
    """
    Sort items ascending by their ``order`` attribute.

    The sort is stable. Items without an order keep their relative
    position after every ordered item.
    """
    return sorted(items, key=lambda item: (item.order is None, item.order or 0))


def title_case(value: str) -> str:
    """Turn a library or component name into a label: ``my-lib`` -> ``My Lib``."""
    words = [word for word in _WORD_SEPARATORS.split(value) if word]
    return " ".join(word[:1].upper() + word[1:] for word in words)


def get_item_locale_property(item: Any, locale: str, name: str) -> Any:
    """
    Read a possibly localized property of a config item.

    ``item.locales[locale][name]`` wins over the item's own attribute.
    """
    locales = getattr(item, "locales", None) or {}
    localized = locales.get(locale) or {}
    value = localized.get(name)
    if value:
        return value
    return getattr(item, name, None)
