"""
Integration tests for the full build flow.

Tests the complete pipeline: discover -> build -> emit -> navigations,
and scoped rebuilds in watch mode.
"""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from compdoc.config import Config
from compdoc.exceptions import ComponentBuildError
from compdoc.main import DocService
from tests.conftest import FakeHost


pytestmark = pytest.mark.integration


def write_doc(component_dir: Path, locale: str, text: str) -> None:
    doc = component_dir / "doc"
    doc.mkdir(exist_ok=True)
    (doc / f"{locale}.md").write_text(text, encoding="utf-8")


@pytest.fixture
def populated_lib(lib_root: Path) -> Path:
    write_doc(lib_root / "button", "en-us", "---\ntitle: Button\ncategory: general\norder: 2\n---\n# Button\n")
    write_doc(lib_root / "button", "zh-cn", "---\ntitle: 按钮\ncategory: general\norder: 2\n---\n# 按钮\n")
    write_doc(lib_root / "alert", "en-us", "---\ncategory: general\norder: 1\n---\n# Alert\n")
    write_doc(lib_root / "common" / "lion", "en-us", "---\ncategory: layout\n---\n# Lion\n")
    write_doc(lib_root / "common" / "zoo", "en-us", "---\nhidden: true\n---\n# Zoo\n")
    (lib_root / "button" / "api").mkdir()
    (lib_root / "button" / "api" / "en-us.json").write_text(json.dumps([{"name": "ButtonComponent"}]))
    example = lib_root / "button" / "examples" / "basic"
    example.mkdir(parents=True)
    (example / "basic.component.ts").write_text("export class Basic {}\n")
    return lib_root


def read_navigations(config: Config) -> dict:
    path = config.abs_site_content_path / "navigations.json"
    return json.loads(path.read_text(encoding="utf-8"))


class TestFullBuild:
    """Tests for a one-shot build of the site."""

    @pytest.mark.asyncio
    async def test_build_and_emit(self, test_config: Config, populated_lib: Path):
        service = DocService(test_config)
        async with service.session():
            await service.build()
            await service.emit()

            stats = service.get_stats()

        site = test_config.abs_site_path
        assert (site / "assets/content/overviews/alib/button/en-us.md").read_text(
            encoding="utf-8"
        ) == "# Button\n"
        assert (site / "assets/content/overviews/alib/alert/zh-cn.md").exists()
        assert (site / "assets/content/api-docs/alib/button/en-us.json").exists()
        assert (site / "assets/content/examples-highlighted/alib/button/basic.json").exists()
        assert (
            test_config.abs_site_content_path / "components/alib/button/basic/basic.component.ts"
        ).exists()
        assert stats["alib"]["components"] == 4
        assert stats["alib"]["components_built"] == 4

    @pytest.mark.asyncio
    async def test_navigations_per_locale(self, test_config: Config, populated_lib: Path):
        service = DocService(test_config)
        async with service.session():
            await service.build()
            await service.emit()

        navigations = read_navigations(test_config)

        assert set(navigations) == {"en-us", "zh-cn"}
        channel = navigations["en-us"]["navs"][0]
        assert channel["id"] == "alib"
        assert channel["title"] == "Alib"

        categories = {entry["id"]: entry for entry in channel["items"] if "items" in entry}
        assert [item["id"] for item in categories["general"]["items"]] == ["alert", "button"]
        assert [item["id"] for item in categories["layout"]["items"]] == ["lion"]

        doc_ids = {item["id"] for item in navigations["en-us"]["docs"]}
        assert doc_ids == {"alert", "button", "lion"}

        zh_channel = navigations["zh-cn"]["navs"][0]
        zh_general = next(entry for entry in zh_channel["items"] if entry["id"] == "general")
        assert zh_general["title"] == "通用"
        assert zh_general["items"][1]["title"] == "按钮"

    @pytest.mark.asyncio
    async def test_failed_component_aborts_build(self, test_config: Config, populated_lib: Path):
        (populated_lib / "alert" / "doc" / "en-us.md").write_text("---\ntitle: [broken\n---\n")
        service = DocService(test_config)

        async with service.session():
            with pytest.raises(ComponentBuildError):
                await service.build()

            assert service.reporters["alib"].stats.batches == 0


class TestWatchFlow:
    """Tests for scoped rebuilds in watch mode."""

    @pytest.mark.asyncio
    async def test_change_rebuilds_and_re_emits(
        self, test_config: Config, populated_lib: Path, fake_host: FakeHost
    ):
        config = test_config.model_copy(update={"watch": True})
        service = DocService(config, host=fake_host)

        async with service.session():
            await service.build()
            await service.emit()
            assert await service.start_watching() == 1

            doc = populated_lib / "button" / "doc" / "en-us.md"
            doc.write_text("---\ntitle: Big Button\ncategory: general\norder: 2\n---\n# Big\n")
            fake_host.watches[0].push(str(doc))
            await fake_host.watches[0].drain()

            overview = config.abs_site_path / "assets/content/overviews/alib/button/en-us.md"
            assert overview.read_text(encoding="utf-8") == "# Big\n"

            channel = read_navigations(config)["en-us"]["navs"][0]
            general = next(entry for entry in channel["items"] if entry["id"] == "general")
            assert general["items"][1]["title"] == "Big Button"
            assert service.reporters["alib"].stats.last_batch_size == 1

    @pytest.mark.asyncio
    async def test_watching_disabled(self, test_config: Config, populated_lib: Path, fake_host: FakeHost):
        service = DocService(test_config, host=fake_host)

        async with service.session():
            assert await service.start_watching() == 0

        assert fake_host.watches == []
