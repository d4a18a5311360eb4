from .errors import (
    ConfigurationError,
    InvalidNeuronError,
    InvalidSynapseError,
    InvariantViolation,
    SimulationError,
    StaleEventError,
)
from .events import Event, EventQueue, apply_due_events
from .network import Network, Neuron, Synapse
from .neuron import RESET_THRESHOLD, NeuronActivity, NeuronConfig, NeuronState, NeuronType
from .recording import FireRecorder, NullRecorder, StateRecorder
from .simulator import Simulator, SimulatorConfig
from .snapshot import load_snapshot, save_snapshot
from .stdp import StdpConfig, WeightUpdateConfig

__version__ = "0.1.0"

__all__ = [
    "Network",
    "Neuron",
    "Synapse",
    "NeuronConfig",
    "NeuronState",
    "NeuronType",
    "NeuronActivity",
    "RESET_THRESHOLD",
    "StdpConfig",
    "WeightUpdateConfig",
    "Simulator",
    "SimulatorConfig",
    "Event",
    "EventQueue",
    "apply_due_events",
    "FireRecorder",
    "NullRecorder",
    "StateRecorder",
    "save_snapshot",
    "load_snapshot",
    "SimulationError",
    "ConfigurationError",
    "InvariantViolation",
    "InvalidNeuronError",
    "InvalidSynapseError",
    "StaleEventError",
]
