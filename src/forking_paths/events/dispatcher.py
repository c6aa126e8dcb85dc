"""Fan-out of timeline events to registered processors."""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import TYPE_CHECKING

from forking_paths.events.processor import EventProcessor

if TYPE_CHECKING:
    from forking_paths.events.types import Event

logger = logging.getLogger(__name__)


class EventDispatcher:
    """Delivers tree, layout, viewport and drag events to processors.

    Delivery is synchronous and in registration order. A failing processor
    is logged and skipped so that it never interrupts gesture handling;
    with ``strict=True`` its exception propagates instead.
    """

    def __init__(
        self,
        processors: list[EventProcessor] | None = None,
        *,
        strict: bool = False,
    ) -> None:
        self._processors: list[EventProcessor] = list(processors) if processors else []
        self._strict = strict
        # Processors whose failures propagate even when the dispatcher is lenient
        self._strict_processors: list[EventProcessor] = []

    @property
    def active(self) -> bool:
        """True if there is at least one registered processor."""
        return bool(self._processors)

    @property
    def processors(self) -> tuple[EventProcessor, ...]:
        return tuple(self._processors)

    def add(self, processor: EventProcessor, *, strict: bool = False) -> None:
        """Register *processor*; registering twice is a no-op.

        With ``strict=True`` this processor's exceptions propagate out of
        ``emit`` regardless of the dispatcher's own mode.
        """
        if processor not in self._processors:
            self._processors.append(processor)
            if strict:
                self._strict_processors.append(processor)

    def remove(self, processor: EventProcessor) -> None:
        """Unregister *processor* if present."""
        if processor in self._processors:
            self._processors.remove(processor)
        if processor in self._strict_processors:
            self._strict_processors.remove(processor)

    def emit(self, event: Event) -> None:
        """Send *event* to every processor."""
        # Snapshot: a processor may unsubscribe while handling the event
        for processor in list(self._processors):
            self._call(processor, lambda p: p.on_event(event), f"on {type(event).__name__}")

    def shutdown(self) -> None:
        """Shut down every processor.

        In strict mode all processors still get their shutdown call; the
        first failure is re-raised afterwards.
        """
        first_error: Exception | None = None
        for processor in list(self._processors):
            try:
                self._call(processor, lambda p: p.shutdown(), "during shutdown")
            except Exception as e:
                if first_error is None:
                    first_error = e
        if first_error is not None:
            raise first_error

    def _call(
        self,
        processor: EventProcessor,
        hook: Callable[[EventProcessor], None],
        context: str,
    ) -> None:
        try:
            hook(processor)
        except Exception:
            if self._strict or processor in self._strict_processors:
                raise
            logger.warning("EventProcessor %s failed %s", processor, context, exc_info=True)
