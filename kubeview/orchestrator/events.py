"""Event primitives emitted while a dispatch run advances."""

from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Callable, DefaultDict, List, Literal, Mapping, Optional


EventKind = Literal[
    "info",
    "warning",
    "error",
    "progress",
]


@dataclass(slots=True)
class DispatchEvent:
    """Represents a state transition or notable outcome of a run."""

    kind: EventKind
    message: str
    timestamp: datetime
    state: Optional[str] = None
    payload: Optional[Mapping[str, Any]] = None


EventSubscriber = Callable[[DispatchEvent], None]


class EventBus:
    """Fan-out of dispatch events to subscribers, optionally by kind."""

    def __init__(self) -> None:
        self._subscribers: DefaultDict[
            Optional[EventKind],
            List[EventSubscriber],
        ] = defaultdict(list)

    def subscribe(
        self,
        subscriber: EventSubscriber,
        *,
        kind: Optional[EventKind] = None,
    ) -> None:
        self._subscribers[kind].append(subscriber)

    def unsubscribe(
        self,
        subscriber: EventSubscriber,
        *,
        kind: Optional[EventKind] = None,
    ) -> bool:
        """Drop ``subscriber`` from ``kind``; False when it was not there."""

        listeners = self._subscribers.get(kind, [])
        if subscriber not in listeners:
            return False
        listeners.remove(subscriber)
        return True

    def emit(self, event: DispatchEvent) -> None:
        for listener in list(self._subscribers.get(None, [])):
            listener(event)
        for listener in list(self._subscribers.get(event.kind, [])):
            listener(event)

    def clear(self) -> None:
        self._subscribers.clear()


__all__ = ["EventKind", "DispatchEvent", "EventSubscriber", "EventBus"]
