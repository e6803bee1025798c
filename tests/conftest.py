"""
Shared fixtures for the compdoc test suite.

Provides common test fixtures including:
- Recording fake components
- A host whose change stream is driven by the test
- Temporary library trees on disk
- Configuration overrides
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Iterable

import pytest

from compdoc.config import CategoryConfig, Config, LibraryConfig, LocaleConfig
from compdoc.host import ChangeEvent, Host, HostWatchEventType
from compdoc.models import DocItem

# Ensure event loop is available for async fixtures
pytest_plugins = ["pytest_asyncio"]


# ==============================================================================
# Fakes
# ==============================================================================

@dataclass
class FakeComponent:
    """Component double recording builds and emits."""

    name: str
    abs_path: Path
    doc_items: dict[str, DocItem | None] = field(default_factory=dict)
    fail: bool = False
    build_count: int = 0
    emit_calls: list[tuple[Path, ...]] = field(default_factory=list)

    @property
    def abs_doc_path(self) -> Path:
        return self.abs_path / "doc"

    @property
    def abs_api_path(self) -> Path:
        return self.abs_path / "api"

    @property
    def abs_examples_path(self) -> Path:
        return self.abs_path / "examples"

    async def build(self) -> None:
        self.build_count += 1
        if self.fail:
            raise RuntimeError(f"{self.name} failed to build")

    async def emit(self, *destinations: Path) -> None:
        self.emit_calls.append(destinations)

    def get_doc_item(self, locale: str) -> DocItem | None:
        return self.doc_items.get(locale)


def fake_factory(library: LibraryConfig, name: str, abs_path: Path) -> FakeComponent:
    return FakeComponent(name=name, abs_path=abs_path)


class FakeWatch:
    """Change stream fed by the test through ``push``."""

    def __init__(self, dirs: Iterable[Path]) -> None:
        self.dirs = list(dirs)
        self.closed = False
        self._queue: asyncio.Queue = asyncio.Queue()

    def push(self, *paths: str, event_type: HostWatchEventType = HostWatchEventType.CHANGED) -> None:
        self._queue.put_nowait([ChangeEvent(path, event_type) for path in paths])

    async def drain(self) -> None:
        """Wait until every pushed batch has been picked up and handled."""
        while not self._queue.empty():
            await asyncio.sleep(0)
        for _ in range(5):
            await asyncio.sleep(0)

    def close(self) -> None:
        self.closed = True
        self._queue.put_nowait(None)

    def __aiter__(self) -> "FakeWatch":
        return self

    async def __anext__(self) -> list[ChangeEvent]:
        batch = await self._queue.get()
        if batch is None:
            raise StopAsyncIteration
        return batch


class FakeHost(Host):
    """Local host whose aggregated watch is a FakeWatch."""

    def __init__(self) -> None:
        super().__init__()
        self.watches: list[FakeWatch] = []

    def watch_aggregated(self, dirs: Iterable[Path | str], debounce_ms: int | None = None) -> FakeWatch:
        watch = FakeWatch(Path(d) for d in dirs)
        self.watches.append(watch)
        return watch


def doc_item(
    id: str,
    category: str | None = None,
    order: int | None = None,
    hidden: bool = False,
    **extra: Any,
) -> DocItem:
    return DocItem(
        id=id,
        name=id,
        title=extra.pop("title", id.title()),
        path=extra.pop("path", id),
        category=category,
        order=order,
        hidden=hidden,
        **extra,
    )


# ==============================================================================
# Fixtures
# ==============================================================================

@pytest.fixture
def temp_dir(tmp_path: Path) -> Path:
    """Resolved temporary directory for tests."""
    return tmp_path.resolve()


@pytest.fixture
def lib_root(temp_dir: Path) -> Path:
    """
    Library tree::

        lib/
          alert/
          button/
          common/zoo/
          common/lion/
          docs/          (excluded)
    """
    root = temp_dir / "lib"
    for name in ("alert", "button", "common/zoo", "common/lion", "docs"):
        (root / name).mkdir(parents=True)
    return root


@pytest.fixture
def library(lib_root: Path) -> LibraryConfig:
    return LibraryConfig(
        name="alib",
        root_dir=lib_root,
        include=["common"],
        exclude=["docs"],
        categories=[
            CategoryConfig(
                id="general",
                title="General",
                locales={"zh-cn": {"title": "通用"}},
            ),
            CategoryConfig(id="layout", title="Layout", subtitle="Structure"),
        ],
    )


@pytest.fixture
def test_config(temp_dir: Path, library: LibraryConfig) -> Config:
    """Create a test configuration."""
    return Config(
        project_root=temp_dir,
        site_dir=temp_dir / "site",
        locales=[LocaleConfig(key="en-us", name="English"), LocaleConfig(key="zh-cn", name="中文")],
        libs=[library],
        log_level="DEBUG",
    )


@pytest.fixture
def fake_host() -> FakeHost:
    return FakeHost()
