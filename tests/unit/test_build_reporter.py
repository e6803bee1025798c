"""
Unit tests for BuildReporter.
"""

from __future__ import annotations

from pathlib import Path

import pytest

from compdoc.config import Config
from compdoc.library.builder import LibraryBuilder
from compdoc.library.hooks import BuildEvent
from compdoc.metrics import BuildReporter
from tests.conftest import fake_factory


class TestBuildReporter:
    """Tests for BuildReporter statistics."""

    @pytest.mark.asyncio
    async def test_counts_batches_and_components(self, test_config: Config):
        builder = LibraryBuilder(test_config, test_config.libs[0], component_factory=fake_factory)
        await builder.initialize()
        reporter = BuildReporter(builder).attach()

        await builder.build()
        await builder.build_components(builder.components.values()[:1])

        assert reporter.stats.batches == 2
        assert reporter.stats.components_built == 5
        assert reporter.stats.last_batch_size == 1
        assert set(reporter.stats.component_seconds) == set(builder.components.keys())
        assert reporter.stats.to_dict()["batches"] == 2

    @pytest.mark.asyncio
    async def test_same_named_components_timed_separately(self, test_config: Config, lib_root: Path):
        (lib_root / "common" / "button").mkdir()
        builder = LibraryBuilder(test_config, test_config.libs[0], component_factory=fake_factory)
        await builder.initialize()
        reporter = BuildReporter(builder).attach()

        await builder.build()

        assert str(lib_root / "button") in reporter.stats.component_seconds
        assert str(lib_root / "common" / "button") in reporter.stats.component_seconds
        assert len(reporter.stats.component_seconds) == 5

    @pytest.mark.asyncio
    async def test_failed_batch_not_counted(self, test_config: Config):
        builder = LibraryBuilder(test_config, test_config.libs[0], component_factory=fake_factory)
        await builder.initialize()
        builder.components.values()[1].fail = True
        reporter = BuildReporter(builder).attach()

        with pytest.raises(RuntimeError):
            await builder.build()

        assert reporter.stats.batches == 0
        assert reporter.stats.components_built == 1

    def test_detach_removes_listeners(self, test_config: Config):
        builder = LibraryBuilder(test_config, test_config.libs[0], component_factory=fake_factory)
        reporter = BuildReporter(builder).attach()
        assert builder.hooks.listener_count(BuildEvent.UNIT_START) == 1

        reporter.detach()

        for event in BuildEvent:
            assert builder.hooks.listener_count(event) == 0
