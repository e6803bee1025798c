"""
Build lifecycle hooks.

Listeners observe a build; they are called synchronously, in
subscription order, and their return values are ignored.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Callable


class BuildEvent(str, Enum):
    """Lifecycle events fired by LibraryBuilder.build_components."""

    # listener(builder, components)
    BATCH_START = "build"
    BATCH_END = "build_succeed"
    # listener(component)
    UNIT_START = "build_component"
    UNIT_END = "build_component_succeed"


Listener = Callable[..., None]


class BuildHooks:
    """Observer lists per build event."""

    def __init__(self) -> None:
        self._listeners: dict[BuildEvent, list[Listener]] = {event: [] for event in BuildEvent}

    def subscribe(self, event: BuildEvent, listener: Listener) -> Callable[[], None]:
        """
        Register a listener.

        Returns:
            A callable removing the listener again.
        """
        self._listeners[event].append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners[event]:
                self._listeners[event].remove(listener)

        return unsubscribe

    def publish(self, event: BuildEvent, *args: Any) -> None:
        for listener in list(self._listeners[event]):
            listener(*args)

    def listener_count(self, event: BuildEvent) -> int:
        return len(self._listeners[event])
