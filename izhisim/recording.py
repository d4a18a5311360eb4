from __future__ import annotations

from typing import Dict, List, Protocol, Tuple

from .neuron import NeuronState


class FireSink(Protocol):
    def record_fire(self, neuron_id: int, time_step: int) -> None:
        ...


class NullRecorder:
    """Discards all fire events."""

    def record_fire(self, neuron_id: int, time_step: int) -> None:
        pass


class FireRecorder:
    """Keeps every (neuron_id, time_step) fire event in the order it happened."""

    def __init__(self) -> None:
        self.events: List[Tuple[int, int]] = []

    def __len__(self) -> int:
        return len(self.events)

    def record_fire(self, neuron_id: int, time_step: int) -> None:
        self.events.append((neuron_id, time_step))

    def fire_times(self, neuron_id: int) -> List[int]:
        return [t for n, t in self.events if n == neuron_id]

    def by_time_step(self) -> Dict[int, List[int]]:
        grouped: Dict[int, List[int]] = {}
        for n, t in self.events:
            grouped.setdefault(t, []).append(n)
        return grouped

    def clear(self) -> None:
        self.events.clear()


class StateRecorder(FireRecorder):
    """Fire recorder that also keeps snapshots of every neuron's state.

    Call `capture(network)` whenever a snapshot should be taken, e.g. once
    per time step for membrane potential traces.
    """

    def __init__(self) -> None:
        super().__init__()
        self.states: List[List[NeuronState]] = []

    def capture(self, network) -> None:
        self.states.append(network.save_state())

    def potentials(self, neuron_id: int) -> List[float]:
        return [snapshot[neuron_id].potential() for snapshot in self.states]

    def clear(self) -> None:
        super().clear()
        self.states.clear()


__all__ = ["FireSink", "NullRecorder", "FireRecorder", "StateRecorder"]
