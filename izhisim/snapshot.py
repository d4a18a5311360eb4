"""Save and restore a Simulator together with its Network as JSON.

A restored pair continues exactly where the saved one stopped: neuron
states, currents and traces, synapse weights and pending efficacy
derivatives, the time step counter and the spikes still travelling along
synapses are all part of the snapshot.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional, Union

from .errors import ConfigurationError
from .network import Network
from .neuron import NeuronConfig, NeuronState
from .simulator import Simulator, SimulatorConfig

logger = logging.getLogger(__name__)

FORMAT_VERSION = 1

PathLike = Union[str, Path]


def network_to_dict(network: Network) -> Dict[str, Any]:
    return {
        "max_delay": network.max_delay,
        "neurons": [
            {
                "config": {"a": n.config.a, "b": n.config.b, "c": n.config.c, "d": n.config.d},
                "v": n.state.v,
                "u": n.state.u,
                "i_ext": n.i_ext,
                "i_inp": n.i_inp,
                "stdp": n.stdp,
            }
            for n in network.neurons
        ],
        "synapses": [
            {
                "source": s.source,
                "target": s.target,
                "delay": s.delay,
                "weight": s.weight,
                "eff_d": s.eff_d,
            }
            for s in network.synapses
        ],
    }


def network_from_dict(data: Dict[str, Any]) -> Network:
    try:
        network = Network(max_delay=data["max_delay"])
        for entry in data["neurons"]:
            neuron = network.neuron(network.create_neuron(NeuronConfig(**entry["config"])))
            neuron.state = NeuronState(v=float(entry["v"]), u=float(entry["u"]))
            neuron.i_ext = float(entry.get("i_ext", 0.0))
            neuron.i_inp = float(entry.get("i_inp", 0.0))
            neuron.stdp = float(entry.get("stdp", 0.0))
        # Connecting in id order rebuilds identical incoming/outgoing lists
        for entry in data["synapses"]:
            synapse_id = network.connect(
                entry["source"], entry["target"], entry["delay"], entry["weight"]
            )
            network.synapses[synapse_id].eff_d = float(entry.get("eff_d", 0.0))
    except ConfigurationError:
        raise
    except (KeyError, TypeError, ValueError, IndexError) as e:
        raise ConfigurationError(f"Malformed network snapshot: {e}") from e
    return network


def to_dict(simulator: Simulator) -> Dict[str, Any]:
    return {
        "format_version": FORMAT_VERSION,
        "time_step": simulator.current_time_step(),
        "config": simulator.config.to_dict(),
        "network": network_to_dict(simulator.model),
        "future_spikes": simulator.future_spikes(),
    }


def from_dict(data: Dict[str, Any]) -> Simulator:
    version = data.get("format_version")
    if version != FORMAT_VERSION:
        raise ConfigurationError(f"Unsupported snapshot format version: {version!r}")
    network = network_from_dict(data.get("network", {}))
    try:
        simulator = Simulator(model=network, config=SimulatorConfig.from_dict(data["config"]))
        simulator.restore(data["time_step"], data["future_spikes"])
    except ConfigurationError:
        raise
    except (KeyError, TypeError, ValueError, IndexError) as e:
        raise ConfigurationError(f"Malformed simulator snapshot: {e}") from e
    return simulator


def save_snapshot(path: PathLike, simulator: Simulator) -> Path:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(to_dict(simulator), indent=2))
    logger.info("Saved snapshot at time step %d to %s", simulator.current_time_step(), path)
    return path


def load_snapshot(path: PathLike) -> Simulator:
    path = Path(path)
    simulator = from_dict(json.loads(path.read_text()))
    logger.info("Loaded snapshot at time step %d from %s", simulator.current_time_step(), path)
    return simulator


def save_checkpoint(runs_dir: PathLike, simulator: Simulator) -> Path:
    """Persist a snapshot named after the current time step inside `runs_dir`."""
    return save_snapshot(
        Path(runs_dir) / f"step_{simulator.current_time_step():08d}.json", simulator
    )


def latest_checkpoint(runs_dir: PathLike) -> Optional[Path]:
    snapshot_files = sorted(Path(runs_dir).glob("step_*.json"))
    if not snapshot_files:
        return None
    return snapshot_files[-1]


__all__ = [
    "FORMAT_VERSION",
    "network_to_dict",
    "network_from_dict",
    "to_dict",
    "from_dict",
    "save_snapshot",
    "load_snapshot",
    "save_checkpoint",
    "latest_checkpoint",
]
