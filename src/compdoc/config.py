"""
Configuration module for compdoc.

Provides strongly-typed configuration with pydantic, supporting both
file-based and environment variable configuration.
"""

from __future__ import annotations

import json
from enum import Enum
from pathlib import Path
from typing import Any, Literal

from pydantic import BaseModel, Field, ValidationError, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from compdoc.exceptions import ConfigurationError, LibraryNotFoundError


def _coerce_list(value: Any) -> Any:
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    return value


class SiteMode(str, Enum):
    """Rendering modes of the generated site."""

    FULL = "full"
    LITE = "lite"


class LocaleConfig(BaseModel):
    """A locale the site is rendered in."""

    key: str = Field(min_length=1, description="Locale key, e.g. en-us")
    name: str = Field(default="", description="Human readable locale name")


class CategoryConfig(BaseModel):
    """Raw, locale-agnostic category definition."""

    id: str = Field(min_length=1, description="Category id referenced by doc items")
    title: str = Field(default="", description="Default title")
    subtitle: str | None = Field(default=None, description="Default subtitle")
    locales: dict[str, dict[str, str]] = Field(
        default_factory=dict,
        description="Per-locale overrides, e.g. {'zh-cn': {'title': '通用'}}",
    )


class LibraryConfig(BaseModel):
    """One component library to document."""

    model_config = {"frozen": True}

    name: str = Field(min_length=1, description="Library name, also the channel id")
    root_dir: Path = Field(description="Library root directory (relative to project_root)")
    include: list[str] = Field(
        default_factory=list,
        description="Subpaths whose children are components too",
    )
    exclude: list[str] = Field(
        default_factory=list,
        description="Glob patterns of directory names that are not components",
    )
    categories: list[CategoryConfig] = Field(default_factory=list)

    @field_validator("include", "exclude", mode="before")
    @classmethod
    def coerce_to_list(cls, v: Any) -> Any:
        """Accept a single string where a list is expected."""
        return _coerce_list(v)


class NavigationConfig(BaseModel):
    """A pre-configured top-level navigation entry (channel)."""

    id: str
    title: str = ""
    path: str = ""
    lib: str | None = Field(default=None, description="Library rendered in this channel")


class WatcherConfig(BaseModel):
    """File system watcher configuration."""

    debounce_ms: int = Field(
        default=300,
        ge=10,
        le=5000,
        description="Debounce delay in milliseconds",
    )
    ignore_patterns: list[str] = Field(
        default_factory=lambda: [
            "*.swp",
            "*~",
            "*.tmp",
            "**/.DS_Store",
            "**/.git/**",
            "**/node_modules/**",
        ],
        description="Glob patterns to ignore",
    )


class Config(BaseSettings):
    """
    Main compdoc configuration.

    Can be configured via:
    1. Configuration file (compdoc.toml, compdoc.yaml or compdoc.json)
    2. Environment variables with COMPDOC_ prefix
    3. Programmatic overrides
    """

    model_config = SettingsConfigDict(
        env_prefix="COMPDOC_",
        env_nested_delimiter="__",
        case_sensitive=False,
    )

    # Core settings
    project_root: Path = Field(
        default_factory=lambda: Path.cwd(),
        description="Project root directory",
    )
    site_dir: Path = Field(
        default=Path(".compdoc/site"),
        description="Generated site directory (relative to project_root)",
    )
    site_content_dir: Path = Field(
        default=Path("src/app/content"),
        description="Site content directory (relative to site_dir)",
    )
    mode: SiteMode = Field(default=SiteMode.FULL, description="Site rendering mode")
    watch: bool = Field(default=False, description="Rebuild components on file changes")
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="INFO",
        description="Logging level",
    )

    locales: list[LocaleConfig] = Field(
        default_factory=lambda: [LocaleConfig(key="en-us", name="English")],
    )
    default_locale: str | None = Field(
        default=None,
        description="Fallback locale for components without a localized doc",
    )
    libs: list[LibraryConfig] = Field(default_factory=list)
    navs: list[NavigationConfig] = Field(default_factory=list)

    # Sub-configurations
    watcher: WatcherConfig = Field(default_factory=WatcherConfig)

    @field_validator("project_root", mode="before")
    @classmethod
    def resolve_project_root(cls, v: Path | str) -> Path:
        """Resolve project root to absolute path."""
        path = Path(v) if isinstance(v, str) else v
        return path.resolve()

    @model_validator(mode="after")
    def check_locales_and_libs(self) -> "Config":
        """Validate locale keys and library names."""
        keys = [locale.key for locale in self.locales]
        if not keys:
            raise ValueError("At least one locale must be configured")
        if len(set(keys)) != len(keys):
            raise ValueError(f"Duplicate locale keys: {keys}")
        if self.default_locale is None:
            self.default_locale = keys[0]
        elif self.default_locale not in keys:
            raise ValueError(
                f"default_locale '{self.default_locale}' is not one of {keys}"
            )

        names = [lib.name for lib in self.libs]
        if len(set(names)) != len(names):
            raise ValueError(f"Duplicate library names: {names}")
        return self

    @property
    def locale_keys(self) -> list[str]:
        """Configured locale keys in declaration order."""
        return [locale.key for locale in self.locales]

    @property
    def abs_site_path(self) -> Path:
        """Get absolute path to the generated site."""
        if self.site_dir.is_absolute():
            return self.site_dir
        return self.project_root / self.site_dir

    @property
    def abs_site_content_path(self) -> Path:
        """Get absolute path to the site content directory."""
        if self.site_content_dir.is_absolute():
            return self.site_content_dir
        return self.abs_site_path / self.site_content_dir

    def get_library(self, name: str) -> LibraryConfig:
        """Look up a configured library by name."""
        for lib in self.libs:
            if lib.name == name:
                return lib
        raise LibraryNotFoundError(f"Library not configured: {name}")

    @classmethod
    def from_file(cls, path: Path, **overrides: Any) -> "Config":
        """Load configuration from a TOML, YAML or JSON file."""
        if not path.exists():
            raise ConfigurationError(f"Configuration file not found: {path}")

        suffix = path.suffix.lower()
        content = path.read_text(encoding="utf-8")

        try:
            if suffix == ".toml":
                import tomllib

                data = tomllib.loads(content)
            elif suffix in (".yaml", ".yml"):
                import yaml

                data = yaml.safe_load(content) or {}
            elif suffix == ".json":
                data = json.loads(content)
            else:
                raise ConfigurationError(f"Unsupported config format: {suffix}")
        except ConfigurationError:
            raise
        except Exception as e:
            raise ConfigurationError(f"Failed to parse {path}: {e}") from e

        if not isinstance(data, dict):
            raise ConfigurationError(f"Configuration root must be a mapping: {path}")

        data.update(overrides)
        try:
            return cls(**data)
        except ValidationError as e:
            raise ConfigurationError(f"Invalid configuration in {path}: {e}") from e

    def to_dict(self) -> dict:
        """Convert configuration to dictionary."""
        return self.model_dump()


CONFIG_CANDIDATES = (
    "compdoc.toml",
    ".compdoc/config.toml",
    "compdoc.yaml",
    ".compdoc/config.yaml",
    "compdoc.json",
)


def load_config(
    config_path: Path | None = None,
    project_root: Path | None = None,
) -> Config:
    """
    Load configuration with automatic discovery.

    Priority:
    1. Explicit config_path if provided
    2. compdoc.toml / .compdoc/config.toml in project_root
    3. compdoc.yaml / .compdoc/config.yaml / compdoc.json in project_root
    4. Default configuration
    """
    root = project_root or Path.cwd()

    if config_path is not None:
        return Config.from_file(config_path, project_root=root)

    for candidate in CONFIG_CANDIDATES:
        path = root / candidate
        if path.exists():
            return Config.from_file(path, project_root=root)

    return Config(project_root=root)
