"""
Library components.

A component is one documentable unit of a library, identified by its
directory. ``Component`` is the contract the builders rely on;
``LibComponent`` is the file system implementation reading the
``doc/``, ``api/`` and ``examples/`` conventions.
"""

from __future__ import annotations

import json
import shutil
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING, Any, Callable, Protocol, runtime_checkable

import structlog
import yaml

from compdoc.constants import COMPONENT_API_DIR, COMPONENT_DOC_DIR, COMPONENT_EXAMPLES_DIR
from compdoc.exceptions import ComponentBuildError
from compdoc.models import DocItem
from compdoc.utils import title_case

if TYPE_CHECKING:
    from compdoc.config import Config, LibraryConfig

logger = structlog.get_logger(__name__)


@runtime_checkable
class Component(Protocol):
    """What the builder, watcher and navigation merger need from a unit."""

    name: str
    abs_path: Path

    @property
    def abs_doc_path(self) -> Path: ...

    @property
    def abs_api_path(self) -> Path: ...

    @property
    def abs_examples_path(self) -> Path: ...

    async def build(self) -> None: ...

    async def emit(
        self,
        overviews_dst: Path,
        api_docs_dst: Path,
        site_content_dst: Path,
        highlighted_examples_dst: Path,
    ) -> None: ...

    def get_doc_item(self, locale: str) -> DocItem | None: ...


ComponentFactory = Callable[["LibraryConfig", str, Path], Component]


EXAMPLE_LANGUAGES = {
    ".ts": "typescript",
    ".tsx": "typescript",
    ".js": "javascript",
    ".jsx": "javascript",
    ".html": "html",
    ".css": "css",
    ".scss": "scss",
    ".less": "less",
    ".json": "json",
    ".md": "markdown",
    ".py": "python",
    ".vue": "html",
}

API_SUFFIXES = (".yaml", ".yml", ".json")


@dataclass
class ComponentDoc:
    """A parsed ``doc/<locale>.md`` file."""

    locale: str
    meta: dict[str, Any]
    content: str


@dataclass
class ExampleSource:
    """One source file of an example."""

    name: str
    content: str
    language: str


@dataclass
class ComponentExample:
    """An ``examples/<name>/`` directory."""

    name: str
    sources: list[ExampleSource] = field(default_factory=list)


def parse_front_matter(text: str, path: Path) -> tuple[dict[str, Any], str]:
    """
    Split a markdown document into YAML front matter and body.

    Documents without a leading ``---`` line have empty metadata.
    """
    lines = text.splitlines(keepends=True)
    if not lines or lines[0].strip() != "---":
        return {}, text

    for index in range(1, len(lines)):
        if lines[index].strip() == "---":
            raw = "".join(lines[1:index])
            body = "".join(lines[index + 1 :])
            try:
                meta = yaml.safe_load(raw) or {}
            except yaml.YAMLError as e:
                raise ComponentBuildError(path, f"invalid front matter: {e}") from e
            if not isinstance(meta, dict):
                raise ComponentBuildError(path, "front matter must be a mapping")
            return meta, body.lstrip("\n")

    raise ComponentBuildError(path, "unterminated front matter")


def check_doc_meta(meta: dict[str, Any], path: Path) -> None:
    """Reject front matter values navigation cannot use."""
    order = meta.get("order")
    if order is not None and (isinstance(order, bool) or not isinstance(order, int)):
        raise ComponentBuildError(path, f"order must be an integer, got {order!r}")

    hidden = meta.get("hidden")
    if hidden is not None and not isinstance(hidden, bool):
        raise ComponentBuildError(path, f"hidden must be true or false, got {hidden!r}")


class LibComponent:
    """
    A component backed by a directory of a library.

    ``build()`` re-reads everything from disk, so calling it again after a
    change replaces the previous state.
    """

    def __init__(
        self,
        config: "Config",
        lib: "LibraryConfig",
        name: str,
        abs_path: Path,
    ) -> None:
        self.config = config
        self.lib = lib
        self.name = name
        self.abs_path = abs_path

        self.docs: dict[str, ComponentDoc] = {}
        self.api_docs: dict[str, Any] = {}
        self.examples: list[ComponentExample] = []
        self.built = False

    def __repr__(self) -> str:
        return f"LibComponent(lib={self.lib.name!r}, name={self.name!r})"

    @property
    def abs_doc_path(self) -> Path:
        return self.abs_path / COMPONENT_DOC_DIR

    @property
    def abs_api_path(self) -> Path:
        return self.abs_path / COMPONENT_API_DIR

    @property
    def abs_examples_path(self) -> Path:
        return self.abs_path / COMPONENT_EXAMPLES_DIR

    async def build(self) -> None:
        """Read docs, API declarations and examples of this component."""
        docs = self._read_docs()
        api_docs = self._read_api_docs()
        examples = self._read_examples()

        self.docs = docs
        self.api_docs = api_docs
        self.examples = examples
        self.built = True

        logger.debug(
            "Built component",
            lib=self.lib.name,
            component=self.name,
            docs=len(docs),
            api_docs=len(api_docs),
            examples=len(examples),
        )

    def _read_docs(self) -> dict[str, ComponentDoc]:
        docs: dict[str, ComponentDoc] = {}
        if not self.abs_doc_path.is_dir():
            return docs

        for locale in self.config.locale_keys:
            path = self.abs_doc_path / f"{locale}.md"
            if not path.is_file():
                continue
            meta, content = parse_front_matter(path.read_text(encoding="utf-8"), path)
            check_doc_meta(meta, path)
            docs[locale] = ComponentDoc(locale=locale, meta=meta, content=content)
        return docs

    def _read_api_docs(self) -> dict[str, Any]:
        api_docs: dict[str, Any] = {}
        if not self.abs_api_path.is_dir():
            return api_docs

        for locale in self.config.locale_keys:
            for suffix in API_SUFFIXES:
                path = self.abs_api_path / f"{locale}{suffix}"
                if not path.is_file():
                    continue
                text = path.read_text(encoding="utf-8")
                try:
                    if suffix == ".json":
                        api_docs[locale] = json.loads(text)
                    else:
                        api_docs[locale] = yaml.safe_load(text)
                except (json.JSONDecodeError, yaml.YAMLError) as e:
                    raise ComponentBuildError(path, f"invalid API declaration: {e}") from e
                break
        return api_docs

    def _read_examples(self) -> list[ComponentExample]:
        examples: list[ComponentExample] = []
        if not self.abs_examples_path.is_dir():
            return examples

        for example_dir in sorted(p for p in self.abs_examples_path.iterdir() if p.is_dir()):
            example = ComponentExample(name=example_dir.name)
            for source in sorted(p for p in example_dir.iterdir() if p.is_file()):
                try:
                    content = source.read_text(encoding="utf-8")
                except UnicodeDecodeError:
                    logger.debug("Skipping binary example file", path=str(source))
                    continue
                example.sources.append(
                    ExampleSource(
                        name=source.name,
                        content=content,
                        language=EXAMPLE_LANGUAGES.get(source.suffix.lower(), "plaintext"),
                    )
                )
            examples.append(example)
        return examples

    def _get_doc(self, locale: str) -> ComponentDoc | None:
        return self.docs.get(locale) or self.docs.get(self.config.default_locale or "")

    def get_doc_item(self, locale: str) -> DocItem | None:
        """Summary of this component for one locale's navigation."""
        doc = self._get_doc(locale)
        if doc is None:
            return None

        meta = doc.meta
        return DocItem(
            id=self.name,
            name=meta.get("name") or self.name,
            title=meta.get("title") or title_case(self.name),
            subtitle=meta.get("subtitle"),
            path=self.name,
            category=meta.get("category"),
            order=meta.get("order"),
            hidden=bool(meta.get("hidden")),
            lib=self.lib.name,
        )

    async def emit(
        self,
        overviews_dst: Path,
        api_docs_dst: Path,
        site_content_dst: Path,
        highlighted_examples_dst: Path,
    ) -> None:
        """Write this component's artifacts below the given destinations."""
        if not self.built:
            logger.debug("Component not built, nothing to emit", component=self.name)
            return

        for locale in self.config.locale_keys:
            doc = self._get_doc(locale)
            if doc is not None:
                target = overviews_dst / self.name / f"{locale}.md"
                target.parent.mkdir(parents=True, exist_ok=True)
                target.write_text(doc.content, encoding="utf-8")

        for locale, api in self.api_docs.items():
            target = api_docs_dst / self.name / f"{locale}.json"
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_text(json.dumps(api, indent=2, ensure_ascii=False), encoding="utf-8")

        content_dir = site_content_dst / self.name
        if content_dir.exists():
            shutil.rmtree(content_dir)
        for example in self.examples:
            example_dir = content_dir / example.name
            example_dir.mkdir(parents=True, exist_ok=True)
            for source in example.sources:
                (example_dir / source.name).write_text(source.content, encoding="utf-8")

            target = highlighted_examples_dst / self.name / f"{example.name}.json"
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_text(
                json.dumps(
                    [
                        {"name": s.name, "language": s.language, "content": s.content}
                        for s in example.sources
                    ],
                    indent=2,
                    ensure_ascii=False,
                ),
                encoding="utf-8",
            )
