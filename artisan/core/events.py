# artisan/core/events.py
"""
Outbound event queue for the crafting engine.

State changes emit events into a pending queue; subscribers only see them when the
owner drains the queue (once per tick). Draining delivers events strictly in
emission order, including events emitted by subscribers during the drain.
"""
import time
from collections import deque
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Deque, Dict, List, Optional

from artisan.config import EVENT_LOG_SIZE
from artisan.utils.logger import Logger


class CraftingEventType(str, Enum):
    MATERIAL_CHANGED = "MATERIAL_CHANGED"
    QUEUE_ITEM_STARTED = "QUEUE_ITEM_STARTED"
    QUEUE_ITEM_COMPLETED = "QUEUE_ITEM_COMPLETED"
    QUEUE_ITEM_CANCELLED = "QUEUE_ITEM_CANCELLED"
    ITEM_CRAFTED = "ITEM_CRAFTED"
    MASTERY_LEVEL_UP = "MASTERY_LEVEL_UP"
    RECIPE_UNLOCKED = "RECIPE_UNLOCKED"
    STATION_UNLOCKED = "STATION_UNLOCKED"
    STATION_UPGRADED = "STATION_UPGRADED"


@dataclass
class CraftingEvent:
    type: CraftingEventType
    timestamp: float
    data: Dict[str, Any] = field(default_factory=dict)
    sequence: int = 0

    def __repr__(self) -> str:
        return f"CraftingEvent(#{self.sequence} {self.type.value}, t={self.timestamp:.1f})"


EventCallback = Callable[[CraftingEvent], None]


class EventDispatcher:
    def __init__(self, clock: Callable[[], float] = time.time, log_size: int = EVENT_LOG_SIZE):
        self.clock = clock
        self._subscribers: Dict[Optional[CraftingEventType], List[EventCallback]] = {}
        self._pending: Deque[CraftingEvent] = deque()
        self._event_log: Deque[CraftingEvent] = deque(maxlen=log_size)
        self._sequence = 0

    def subscribe(self, event_type: Optional[CraftingEventType], callback: EventCallback) -> None:
        """Registers a callback for one event type, or for every event when event_type is None."""
        self._subscribers.setdefault(event_type, []).append(callback)

    def unsubscribe(self, event_type: Optional[CraftingEventType], callback: EventCallback) -> bool:
        callbacks = self._subscribers.get(event_type, [])
        if callback in callbacks:
            callbacks.remove(callback)
            return True
        return False

    def emit(self, event_type: CraftingEventType, **data: Any) -> CraftingEvent:
        self._sequence += 1
        event = CraftingEvent(event_type, self.clock(), data, self._sequence)
        self._pending.append(event)
        return event

    @property
    def pending(self) -> List[CraftingEvent]:
        return list(self._pending)

    def drain(self) -> int:
        """Delivers all pending events in order. Returns the number delivered."""
        delivered = 0
        while self._pending:
            event = self._pending.popleft()
            self._event_log.append(event)
            delivered += 1
            for callback in self._subscribers.get(event.type, []) + self._subscribers.get(None, []):
                try:
                    callback(event)
                except Exception as e:
                    # keep delivering to the remaining subscribers
                    Logger.error("EventDispatcher", f"Subscriber failed on {event.type.value}: {e}")
        return delivered

    def get_event_log(self) -> List[CraftingEvent]:
        return list(self._event_log)

    def clear(self) -> None:
        self._pending.clear()
        self._event_log.clear()
