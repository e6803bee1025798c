"""
Unit tests for shared helpers.
"""

from __future__ import annotations

from compdoc.config import CategoryConfig
from compdoc.utils import ascending_sort_by_order, get_item_locale_property, title_case
from tests.conftest import doc_item


class TestAscendingSortByOrder:
    """Tests for ascending_sort_by_order."""

    def test_sorts_ascending(self):
        items = [doc_item("c", order=3), doc_item("a", order=1), doc_item("b", order=2)]

        assert [i.order for i in ascending_sort_by_order(items)] == [1, 2, 3]

    def test_unordered_items_last_and_stable(self):
        items = [
            doc_item("x"),
            doc_item("b", order=5),
            doc_item("y"),
            doc_item("a", order=-1),
        ]

        assert [i.id for i in ascending_sort_by_order(items)] == ["a", "b", "x", "y"]

    def test_does_not_mutate_input(self):
        items = [doc_item("b", order=2), doc_item("a", order=1)]

        ascending_sort_by_order(items)

        assert [i.id for i in items] == ["b", "a"]


class TestTitleCase:
    """Tests for title_case."""

    def test_words(self):
        assert title_case("button") == "Button"
        assert title_case("my-lib") == "My Lib"
        assert title_case("date_picker") == "Date Picker"
        assert title_case("nzZorro") == "NzZorro"

    def test_empty(self):
        assert title_case("") == ""


class TestGetItemLocaleProperty:
    """Tests for get_item_locale_property."""

    def test_localized_value_wins(self):
        item = CategoryConfig(id="general", title="General", locales={"zh-cn": {"title": "通用"}})

        assert get_item_locale_property(item, "zh-cn", "title") == "通用"
        assert get_item_locale_property(item, "en-us", "title") == "General"

    def test_missing_property(self):
        item = CategoryConfig(id="general")

        assert get_item_locale_property(item, "en-us", "subtitle") is None
