from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Callable, Iterable, List, Optional, Sequence, Tuple

from .errors import ConfigurationError, InvalidNeuronError, InvalidSynapseError
from .neuron import NeuronActivity, NeuronConfig, NeuronState
from .stdp import StdpConfig, WeightUpdateConfig, clamp

logger = logging.getLogger(__name__)

# Izhikevich's polychronization networks use a maximal conduction delay of 20 ms.
DEFAULT_MAX_DELAY = 20


@dataclass
class Neuron:
    """A neuron of a Network.

    `i_ext` is the external current; it stays until it is changed.
    `i_inp` is the synaptic current; it is cleared every time step.
    `stdp` is the decaying plasticity trace.
    `outgoing` holds the ids of synapses this neuron is the source of,
    `incoming` the ids of synapses it is the target of.
    """

    id: int
    config: NeuronConfig
    state: NeuronState = field(default_factory=NeuronState)
    i_ext: float = 0.0
    i_inp: float = 0.0
    stdp: float = 0.0
    outgoing: List[int] = field(default_factory=list)
    incoming: List[int] = field(default_factory=list)

    def potential(self) -> float:
        return self.state.potential()

    def update_state(self, stdp_config: StdpConfig) -> NeuronActivity:
        """Advance the neuron by one time step and update its trace."""
        i_syn = self.i_ext + self.i_inp
        self.state, activity = self.state.step_1ms(i_syn, self.config)
        self.stdp = stdp_config.next_trace(self.stdp, activity.fires())
        return activity

    def reset(self) -> None:
        self.state = NeuronState()
        self.i_ext = 0.0
        self.i_inp = 0.0
        self.stdp = 0.0


@dataclass
class Synapse:
    """Connection from `source` to `target` with an integer conduction delay.

    Endpoints and delay are fixed once connected; `weight` and the pending
    efficacy derivative `eff_d` change as the network learns.
    """

    id: int
    source: int
    target: int
    delay: int
    weight: float
    eff_d: float = 0.0


ConnectFn = Callable[[int, int], Optional[Tuple[int, float]]]


class Network:
    """Dense store of neurons and synapses.

    Neuron and synapse ids are zero-based indices into the two lists, handed
    out in creation order and never reused.
    """

    def __init__(self, max_delay: int = DEFAULT_MAX_DELAY) -> None:
        if isinstance(max_delay, bool) or int(max_delay) != max_delay:
            raise ConfigurationError(f"max_delay must be an integer, got {max_delay!r}")
        if max_delay < 1:
            raise ConfigurationError(f"max_delay must be at least 1, got {max_delay!r}")
        self.max_delay = int(max_delay)
        self.neurons: List[Neuron] = []
        self.synapses: List[Synapse] = []
        self._longest_delay = 0

    def __repr__(self) -> str:
        return (
            f"Network(neurons={len(self.neurons)}, synapses={len(self.synapses)}, "
            f"max_delay={self.max_delay})"
        )

    # -------------------------
    # Construction
    # -------------------------

    def create_neuron(self, config: NeuronConfig) -> int:
        neuron_id = len(self.neurons)
        self.neurons.append(Neuron(id=neuron_id, config=config))
        return neuron_id

    def create_neurons(self, count: int, factory: Callable[[int], NeuronConfig]) -> List[int]:
        """Create `count` neurons, `factory(i)` supplies the i-th configuration."""
        return [self.create_neuron(factory(idx)) for idx in range(count)]

    def connect(self, source: int, target: int, delay: int, weight: float) -> int:
        """Connect `source` to `target` and return the new synapse id."""
        self._check_neuron(source)
        self._check_neuron(target)
        if isinstance(delay, bool) or int(delay) != delay:
            raise ConfigurationError(f"Synapse delay must be an integer, got {delay!r}")
        delay = int(delay)
        if delay < 1:
            raise ConfigurationError(f"Synapse delay must be at least 1, got {delay}")
        if delay > self.max_delay:
            raise ConfigurationError(
                f"Synapse delay {delay} exceeds the network's max_delay of {self.max_delay}"
            )

        synapse_id = len(self.synapses)
        self.synapses.append(
            Synapse(id=synapse_id, source=source, target=target, delay=delay, weight=float(weight))
        )
        self.neurons[source].outgoing.append(synapse_id)
        self.neurons[target].incoming.append(synapse_id)
        self._longest_delay = max(self._longest_delay, delay)
        return synapse_id

    def connect_all(
        self, sources: Iterable[int], targets: Sequence[int], delay: int, weight: float
    ) -> List[int]:
        """Connect every source with every target using the same delay and weight."""
        return self.connect_all_with(sources, targets, lambda _src, _tgt: (delay, weight))

    def connect_all_with(
        self, sources: Iterable[int], targets: Sequence[int], fn: ConnectFn
    ) -> List[int]:
        """Connect pairs for which `fn(source, target)` returns `(delay, weight)`.

        Pairs for which `fn` returns None are skipped.
        """
        created: List[int] = []
        for src in sources:
            for tgt in targets:
                pair = fn(src, tgt)
                if pair is None:
                    continue
                delay, weight = pair
                created.append(self.connect(src, tgt, delay, weight))
        return created

    # -------------------------
    # Accessors
    # -------------------------

    def neuron(self, neuron_id: int) -> Neuron:
        self._check_neuron(neuron_id)
        return self.neurons[neuron_id]

    def synapse(self, synapse_id: int) -> Synapse:
        if not 0 <= synapse_id < len(self.synapses):
            raise InvalidSynapseError(
                f"Synapse id {synapse_id} out of range (network has {len(self.synapses)} synapses)"
            )
        return self.synapses[synapse_id]

    def total_neurons(self) -> int:
        return len(self.neurons)

    def total_synapses(self) -> int:
        return len(self.synapses)

    def longest_delay(self) -> int:
        """Longest delay of any connected synapse, 0 for a network without synapses."""
        return self._longest_delay

    def save_state(self) -> List[NeuronState]:
        return [n.state for n in self.neurons]

    def potentials(self) -> List[float]:
        return [n.potential() for n in self.neurons]

    def weights(self) -> List[float]:
        return [s.weight for s in self.synapses]

    def set_weights(self, weights: Sequence[float]) -> None:
        if len(weights) != len(self.synapses):
            raise ValueError("Weight vector length mismatch with network synapses")
        for s, w in zip(self.synapses, weights):
            s.weight = float(w)

    # -------------------------
    # Input currents
    # -------------------------

    def reset_all_input_currents(self) -> None:
        """Clear the synaptic input of all neurons. External input is kept."""
        for n in self.neurons:
            n.i_inp = 0.0

    def set_external_input(self, neuron_id: int, current: float) -> None:
        self.neuron(neuron_id).i_ext = float(current)

    def get_external_input(self, neuron_id: int) -> float:
        return self.neuron(neuron_id).i_ext

    def increase_external_input(self, neuron_id: int, additional_current: float) -> None:
        self.neuron(neuron_id).i_ext += additional_current

    def reset_all_states(self) -> None:
        """Put every neuron back into its initial state.

        Connectivity, weights and pending efficacy derivatives are kept.
        """
        for n in self.neurons:
            n.reset()

    # -------------------------
    # Per-step effects
    # -------------------------

    def process_firing_synapse(self, synapse_id: int) -> None:
        """Deliver a spike arriving at the target of `synapse_id`.

        The weight is added to the target's synaptic input. The source fired
        `delay` steps ago; if the target fired more recently than that, its
        trace outweighs the source's and the synapse is depressed.
        """
        syn = self.synapses[synapse_id]
        pre = self.neurons[syn.source]
        post = self.neurons[syn.target]
        post.i_inp += syn.weight
        syn.eff_d += pre.stdp - post.stdp

    def process_firing_synapses(self, synapse_ids: Iterable[int]) -> None:
        for synapse_id in synapse_ids:
            self.process_firing_synapse(synapse_id)

    def excite_incoming_synapses(self, neuron_id: int, stdp_config: StdpConfig) -> None:
        """Credit the synapses that may have caused `neuron_id` to fire.

        Each incoming synapse's eff_d grows by the firing neuron's own trace,
        or by the synapse source's trace when `credit_source_trace` is set.
        Weights are only changed by `update_synapse_weights`.
        """
        neuron = self.neurons[neuron_id]
        for synapse_id in neuron.incoming:
            syn = self.synapses[synapse_id]
            if stdp_config.credit_source_trace:
                syn.eff_d += self.neurons[syn.source].stdp
            else:
                syn.eff_d += neuron.stdp

    def update_synapse_weights(
        self, min_syn_weight: float, max_syn_weight: float, eff_d_decay: float
    ) -> None:
        """Apply pending efficacy derivatives to the weights.

        weight := clamp(weight + eff_d, min, max), then eff_d decays.
        """
        if min_syn_weight > max_syn_weight:
            raise ConfigurationError(
                f"min_syn_weight ({min_syn_weight}) is larger than max_syn_weight ({max_syn_weight})"
            )
        for syn in self.synapses:
            syn.weight = clamp(syn.weight + syn.eff_d, min_syn_weight, max_syn_weight)
            syn.eff_d *= eff_d_decay
        logger.debug(
            "Updated %d synapse weights (range %.3f..%.3f, eff_d decay %.3f)",
            len(self.synapses), min_syn_weight, max_syn_weight, eff_d_decay,
        )

    def apply_weight_update(self, config: WeightUpdateConfig) -> None:
        self.update_synapse_weights(config.min_weight, config.max_weight, config.eff_d_decay)

    def _check_neuron(self, neuron_id: int) -> None:
        if isinstance(neuron_id, bool) or not isinstance(neuron_id, int):
            raise InvalidNeuronError(f"Neuron id must be an integer, got {neuron_id!r}")
        if not 0 <= neuron_id < len(self.neurons):
            raise InvalidNeuronError(
                f"Neuron id {neuron_id!r} out of range (network has {len(self.neurons)} neurons)"
            )


__all__ = ["DEFAULT_MAX_DELAY", "Neuron", "Synapse", "Network"]
