# artisan/crafting/queue.py
import uuid
from typing import Any, Dict, Iterator, List, Optional

from artisan.crafting.types import StationKind


class QueueItem:
    """A scheduled crafting job. Completion is a timestamp, not a countdown."""

    def __init__(self, recipe_id: str, quantity: int, station: StationKind, start_time: float,
                 completion_time: float, job_id: Optional[str] = None):
        self.job_id = job_id or uuid.uuid4().hex[:12]
        self.recipe_id = recipe_id
        self.quantity = quantity
        self.station = station
        self.start_time = start_time
        self.completion_time = completion_time
        self.completed = False

    @property
    def duration(self) -> float:
        return self.completion_time - self.start_time

    def is_due(self, now: float) -> bool:
        return not self.completed and now >= self.completion_time

    def progress(self, now: float) -> float:
        if self.completed:
            return 1.0
        if self.duration <= 0:
            return 1.0 if now >= self.completion_time else 0.0
        return max(0.0, min(1.0, (now - self.start_time) / self.duration))

    def time_remaining(self, now: float) -> float:
        if self.completed:
            return 0.0
        return max(0.0, self.completion_time - now)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "job_id": self.job_id, "recipe_id": self.recipe_id, "quantity": self.quantity,
            "station": self.station.value, "start_time": self.start_time,
            "completion_time": self.completion_time,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'QueueItem':
        return cls(recipe_id=data["recipe_id"], quantity=int(data["quantity"]),
                   station=StationKind(data["station"]), start_time=float(data["start_time"]),
                   completion_time=float(data["completion_time"]), job_id=data.get("job_id"))

    def __repr__(self) -> str:
        return f"QueueItem({self.job_id}, {self.quantity}x {self.recipe_id}, done_at={self.completion_time:.1f})"


class ProductionQueue:
    """Ordered, bounded list of pending jobs shared by every station."""

    def __init__(self, capacity: int):
        self.capacity = capacity
        self.items: List[QueueItem] = []

    def __len__(self) -> int:
        return len(self.items)

    def __iter__(self) -> Iterator[QueueItem]:
        return iter(list(self.items))

    @property
    def is_full(self) -> bool:
        return len(self.items) >= self.capacity

    def add(self, item: QueueItem) -> bool:
        if self.is_full:
            return False
        self.items.append(item)
        return True

    def remove(self, item: QueueItem) -> bool:
        if item in self.items:
            self.items.remove(item)
            return True
        return False

    def get(self, index: int) -> Optional[QueueItem]:
        if 0 <= index < len(self.items):
            return self.items[index]
        return None

    def find(self, job_id: str) -> Optional[QueueItem]:
        return next((item for item in self.items if item.job_id == job_id), None)

    def due(self, now: float) -> List[QueueItem]:
        """Jobs finished by `now`, earliest completion first (queue order breaks ties)."""
        due = [item for item in self.items if item.is_due(now)]
        return sorted(due, key=lambda item: item.completion_time)

    def for_station(self, station: StationKind) -> List[QueueItem]:
        return [item for item in self.items if item.station == station]

    def clear(self) -> List[QueueItem]:
        items, self.items = self.items, []
        return items
