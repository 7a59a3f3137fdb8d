"""Observer hook for diagnostics emitted while walking a resource tree.

Resolvers never print or log directly. They report through an Observer so
that hosts can route traversal diagnostics wherever they want (structlog by
default, a list in tests, nowhere at all).
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from rolloutscope.observability.logging import get_logger


@runtime_checkable
class Observer(Protocol):
    """Receives named diagnostic events with structured fields."""

    def emit(self, event: str, **fields: object) -> None: ...


class LoggingObserver:
    """Forwards events to structlog at debug level."""

    def __init__(self, component: str = "assembler") -> None:
        self._log = get_logger(component)

    def emit(self, event: str, **fields: object) -> None:
        self._log.debug(event, **fields)


class NullObserver:
    """Discards every event."""

    def emit(self, event: str, **fields: object) -> None:
        return None


class RecordingObserver:
    """Keeps every event in memory, in emission order."""

    def __init__(self) -> None:
        self.events: list[tuple[str, dict[str, object]]] = []

    def emit(self, event: str, **fields: object) -> None:
        self.events.append((event, dict(fields)))

    def names(self) -> list[str]:
        return [name for name, _ in self.events]
