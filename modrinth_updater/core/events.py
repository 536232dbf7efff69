"""Event bus — fans progress events out to every registered sink.

Every event is logged at debug level and then delivered to each sink in
registration order. A failing sink is logged and skipped; it never interrupts a sync.
"""

from __future__ import annotations

import logging
from typing import Protocol, runtime_checkable

from modrinth_updater.models.sync import EventLevel, ProgressEvent

logger = logging.getLogger(__name__)


@runtime_checkable
class EventSink(Protocol):
    """Anything that can receive progress events."""

    @property
    def sink_name(self) -> str: ...

    def accept(self, event: ProgressEvent) -> None: ...


class EventBus:
    """Routes progress events to all registered sinks.

    Usage
    -----
    >>> bus = EventBus()
    >>> bus.register_sink(console_sink)
    >>> bus.info("sodium", "Fetching latest release...")
    """

    def __init__(self, sinks: list[EventSink] | None = None) -> None:
        self._sinks: list[EventSink] = []
        for sink in sinks or []:
            self.register_sink(sink)

    # ------------------------------------------------------------------
    # Sink management
    # ------------------------------------------------------------------

    def register_sink(self, sink: EventSink) -> None:
        """Register a sink. Registering the same instance twice is a no-op."""
        if sink not in self._sinks:
            self._sinks.append(sink)
            logger.debug("Registered event sink: %s", sink.sink_name)

    def unregister_sink(self, sink: EventSink) -> None:
        try:
            self._sinks.remove(sink)
        except ValueError:
            pass

    @property
    def registered_sinks(self) -> list[EventSink]:
        return list(self._sinks)

    # ------------------------------------------------------------------
    # Emit
    # ------------------------------------------------------------------

    def emit(self, event: ProgressEvent) -> None:
        """Log the event at debug level, then deliver it to every sink."""
        logger.debug(
            "[%s] %s%s",
            event.level.value,
            f"{event.artifact}: " if event.artifact else "",
            event.message,
        )
        for sink in self._sinks:
            try:
                sink.accept(event)
            except Exception as exc:  # noqa: BLE001
                logger.error("Event sink %s failed: %s", sink.sink_name, exc)

    def info(self, artifact: str | None, message: str) -> None:
        self.emit(ProgressEvent(level=EventLevel.INFO, artifact=artifact, message=message))

    def warn(self, artifact: str | None, message: str) -> None:
        self.emit(ProgressEvent(level=EventLevel.WARN, artifact=artifact, message=message))

    def error(self, artifact: str | None, message: str) -> None:
        self.emit(ProgressEvent(level=EventLevel.ERROR, artifact=artifact, message=message))

    def success(self, artifact: str | None, message: str) -> None:
        self.emit(ProgressEvent(level=EventLevel.SUCCESS, artifact=artifact, message=message))
