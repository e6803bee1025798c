"""
Exception hierarchy for compdoc.

Build and emit failures raised by components are not wrapped; they
propagate to whoever drives the builder.
"""

from __future__ import annotations

from pathlib import Path


class CompdocError(Exception):
    """Base exception for compdoc errors."""

    pass


class ConfigurationError(CompdocError):
    """Raised when there's a configuration problem."""

    pass


class UnknownLocaleError(CompdocError):
    """Raised when navigation is requested for a locale that is not configured."""

    def __init__(self, locale: str, available: list[str]) -> None:
        self.locale = locale
        self.available = available
        super().__init__(
            f"Locale '{locale}' is not configured (available: {', '.join(available) or 'none'})"
        )


class LibraryNotFoundError(CompdocError):
    """Raised when a library name does not match any configured library."""

    pass


class ComponentBuildError(CompdocError):
    """Raised by LibComponent when one of its source files cannot be parsed."""

    def __init__(self, path: Path, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Failed to build {path}: {reason}")
