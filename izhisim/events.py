from __future__ import annotations

import heapq
import logging
from dataclasses import dataclass
from typing import List, Optional

from .errors import StaleEventError
from .network import Network

logger = logging.getLogger(__name__)


@dataclass(frozen=True, eq=False)
class Event:
    """External stimulus: set `neuron`'s external current to `current` at time step `at`."""

    at: int
    neuron: int
    current: float

    def __lt__(self, other: "Event") -> bool:
        # For priority queue ordering (earliest time step first)
        return self.at < other.at

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Event):
            return NotImplemented
        return self.at == other.at and self.neuron == other.neuron

    def __hash__(self) -> int:
        return hash((self.at, self.neuron))


class EventQueue:
    """Min-priority queue of external stimulus events."""

    def __init__(self) -> None:
        self._heap: List[Event] = []

    def __len__(self) -> int:
        return len(self._heap)

    def __bool__(self) -> bool:
        return bool(self._heap)

    def push(self, event: Event) -> None:
        heapq.heappush(self._heap, event)

    def schedule(self, at: int, neuron: int, current: float) -> Event:
        event = Event(at=at, neuron=neuron, current=float(current))
        self.push(event)
        return event

    def peek(self) -> Optional[Event]:
        return self._heap[0] if self._heap else None

    def pop_next_event_at(self, at: int) -> Optional[Event]:
        """Pop the next event scheduled for time step `at`.

        Returns None if the queue is empty or its earliest event lies in the
        future. Raises StaleEventError, leaving the event queued, if the
        earliest event was scheduled before `at`.
        """
        head = self.peek()
        if head is None or head.at > at:
            return None
        if head.at < at:
            logger.debug("Stale event %r found while querying time step %d", head, at)
            raise StaleEventError(
                f"Event for neuron {head.neuron} at time step {head.at} was not consumed "
                f"before time step {at}"
            )
        return heapq.heappop(self._heap)


def apply_due_events(queue: EventQueue, network: Network, time_step: int) -> int:
    """Set the external input of every neuron with an event due at `time_step`.

    Returns the number of events applied.
    """
    applied = 0
    while True:
        event = queue.pop_next_event_at(time_step)
        if event is None:
            return applied
        network.set_external_input(event.neuron, event.current)
        applied += 1


__all__ = ["Event", "EventQueue", "apply_due_events"]
