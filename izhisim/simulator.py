from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from .errors import ConfigurationError
from .events import EventQueue, apply_due_events
from .network import Network
from .recording import FireSink
from .stdp import StdpConfig, WeightUpdateConfig

logger = logging.getLogger(__name__)

MAX_RING_SIZE = 1 << 16


def ring_size_for(max_delay: int) -> int:
    """Smallest power of two strictly greater than `max_delay`."""
    if max_delay < 1:
        raise ConfigurationError(f"max_delay must be at least 1, got {max_delay}")
    size = 1 << int(max_delay).bit_length()
    if size > MAX_RING_SIZE:
        raise ConfigurationError(
            f"max_delay {max_delay} needs a ring buffer of {size} slots (limit {MAX_RING_SIZE})"
        )
    return size


@dataclass
class SimulatorConfig:
    stdp: StdpConfig = field(default_factory=StdpConfig)
    weights: WeightUpdateConfig = field(default_factory=WeightUpdateConfig)
    # Used by Simulator.run only; step() never touches the weights.
    weight_update_interval: Optional[int] = None

    def __post_init__(self) -> None:
        if self.weight_update_interval is not None and self.weight_update_interval < 1:
            raise ConfigurationError(
                f"weight_update_interval must be positive, got {self.weight_update_interval}"
            )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "stdp": self.stdp.to_dict(),
            "weights": self.weights.to_dict(),
            "weight_update_interval": self.weight_update_interval,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SimulatorConfig":
        return cls(
            stdp=StdpConfig.from_dict(data.get("stdp", {})),
            weights=WeightUpdateConfig.from_dict(data.get("weights", {})),
            weight_update_interval=data.get("weight_update_interval"),
        )


@dataclass
class Simulator:
    """Fixed 1 ms time step driver for a Network.

    Spikes travelling along synapses are queued in a ring buffer of
    `ring_size` slots indexed by `time_step & mask`. A synapse id sits in the
    slot of the time step at which its spike arrives at the target.
    """

    model: Network
    config: SimulatorConfig = field(default_factory=SimulatorConfig)

    time_step: int = field(default=0, init=False)
    _future_spikes: List[List[int]] = field(default_factory=list, init=False, repr=False)
    _mask: int = field(default=0, init=False, repr=False)

    def __post_init__(self) -> None:
        size = ring_size_for(self.model.max_delay)
        self._future_spikes = [[] for _ in range(size)]
        self._mask = size - 1
        logger.info(
            "Simulator ready: %d neurons, %d synapses, max delay %d, ring buffer of %d slots",
            self.model.total_neurons(), self.model.total_synapses(), self.model.max_delay, size,
        )

    def current_time_step(self) -> int:
        return self.time_step

    @property
    def ring_size(self) -> int:
        return len(self._future_spikes)

    def _timeslot(self, at: int) -> int:
        return at & self._mask

    def pending_spikes(self) -> int:
        return sum(len(slot) for slot in self._future_spikes)

    def step(self, recorder: Optional[FireSink] = None) -> List[int]:
        """Advance the network by one time step.

        External inputs must be set beforehand. Returns the ids of the
        neurons that fired, in ascending order; each is also reported to
        `recorder` if given.
        """
        network = self.model
        time_step = self.time_step
        stdp_config = self.config.stdp

        network.reset_all_input_currents()

        # Deliver spikes arriving now
        slot = self._future_spikes[self._timeslot(time_step)]
        network.process_firing_synapses(slot)
        slot.clear()

        fired: List[int] = []
        for neuron in network.neurons:
            activity = neuron.update_state(stdp_config)
            if not activity.fires():
                continue

            fired.append(neuron.id)
            if recorder is not None:
                recorder.record_fire(neuron.id, time_step)

            for synapse_id in neuron.outgoing:
                delay = network.synapses[synapse_id].delay
                self._future_spikes[self._timeslot(time_step + delay)].append(synapse_id)

            network.excite_incoming_synapses(neuron.id, stdp_config)

        if fired:
            logger.debug("Time step %d: %d neurons fired", time_step, len(fired))
        self.time_step += 1
        return fired

    def run(
        self,
        steps: int,
        recorder: Optional[FireSink] = None,
        events: Optional[EventQueue] = None,
    ) -> int:
        """Run `steps` time steps and return the number of fire events.

        Events due at a time step are applied to the external inputs before
        that step. With `weight_update_interval` configured, the weight update
        pass runs whenever the time step counter reaches a multiple of it.
        """
        interval = self.config.weight_update_interval
        total_fired = 0
        for _ in range(steps):
            if events is not None:
                apply_due_events(events, self.model, self.time_step)
            total_fired += len(self.step(recorder))
            if interval is not None and self.time_step % interval == 0:
                self.model.apply_weight_update(self.config.weights)
        return total_fired

    def future_spikes(self) -> List[List[int]]:
        """Copy of the ring buffer slots."""
        return [list(slot) for slot in self._future_spikes]

    def restore(self, time_step: int, future_spikes: List[List[int]]) -> None:
        """Reinstate a time step counter and ring buffer taken from `future_spikes()`."""
        if len(future_spikes) != self.ring_size:
            raise ConfigurationError(
                f"Ring buffer has {self.ring_size} slots, snapshot has {len(future_spikes)}"
            )
        if time_step < 0:
            raise ConfigurationError(f"Time step must not be negative, got {time_step}")
        for slot in future_spikes:
            for synapse_id in slot:
                self.model.synapse(synapse_id)
        self.time_step = int(time_step)
        self._future_spikes = [[int(s) for s in slot] for slot in future_spikes]


__all__ = ["MAX_RING_SIZE", "ring_size_for", "SimulatorConfig", "Simulator"]
