from __future__ import annotations


class SimulationError(Exception):
    """Base class for all errors raised by izhisim."""


class ConfigurationError(SimulationError, ValueError):
    """Invalid parameters detected while building a network or simulator."""


class InvariantViolation(SimulationError, RuntimeError):
    """The caller broke an invariant of the network, simulator or event queue."""


class InvalidNeuronError(InvariantViolation, IndexError):
    pass


class InvalidSynapseError(InvariantViolation, IndexError):
    pass


class StaleEventError(InvariantViolation):
    """An event scheduled before the queried time step was never consumed."""


__all__ = [
    "SimulationError",
    "ConfigurationError",
    "InvariantViolation",
    "InvalidNeuronError",
    "InvalidSynapseError",
    "StaleEventError",
]
