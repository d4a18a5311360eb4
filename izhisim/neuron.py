from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple

from .errors import ConfigurationError

# Potential at which a neuron fires and is reset to `c`.
RESET_THRESHOLD = 30.0

INITIAL_POTENTIAL = -70.0
INITIAL_RECOVERY = -14.0


def closed_unit(r: float, name: str = "r") -> float:
    """Return `r` as float if it lies within [0, 1], raise otherwise."""
    value = float(r)
    if not 0.0 <= value <= 1.0:
        raise ConfigurationError(f"{name} must be within [0, 1], got {r!r}")
    return value


class NeuronActivity(Enum):
    """Outcome of advancing a neuron by one time step."""

    FIRES = "fires"
    SILENT = "silent"

    def fires(self) -> bool:
        return self is NeuronActivity.FIRES


class NeuronType(Enum):
    EXCITATORY = "excitatory"
    INHIBITORY = "inhibitory"
    REGULAR_SPIKING = "regular_spiking"
    CHATTERING = "chattering"
    INTRINSICALLY_BURSTING = "intrinsically_bursting"
    FAST_SPIKING = "fast_spiking"
    LOW_THRESHOLD_SPIKING = "low_threshold_spiking"
    RESONATOR = "resonator"

    @property
    def needs_random_variable(self) -> bool:
        return self in (NeuronType.EXCITATORY, NeuronType.INHIBITORY)


@dataclass(frozen=True)
class NeuronConfig:
    """Static Izhikevich parameters of a single neuron.

    a: rate of recovery
    b: sensitivity of the recovery variable `u` to the membrane potential `v`
    c: after-spike reset value of `v`
    d: after-spike increment of `u`
    """

    a: float = 0.02
    b: float = 0.2
    c: float = -65.0
    d: float = 8.0

    @classmethod
    def excitatory(cls, r: float) -> "NeuronConfig":
        """Excitatory cell from Izhikevich (2003), `r` uniform in [0, 1].

        r=0 gives a regular spiking cell, r=1 a chattering one.
        """
        r2 = closed_unit(r) ** 2
        return cls(a=0.02, b=0.2, c=-65.0 + 15.0 * r2, d=8.0 - 6.0 * r2)

    @classmethod
    def inhibitory(cls, r: float) -> "NeuronConfig":
        r = closed_unit(r)
        return cls(a=0.02 + 0.08 * r, b=0.25 - 0.05 * r, c=-65.0, d=2.0)

    # Convenience presets similar to Izhikevich (2003)
    @classmethod
    def regular_spiking(cls) -> "NeuronConfig":
        return cls.excitatory(0.0)

    @classmethod
    def chattering(cls) -> "NeuronConfig":
        return cls.excitatory(1.0)

    @classmethod
    def intrinsically_bursting(cls) -> "NeuronConfig":
        return cls(a=0.02, b=0.2, c=-55.0, d=4.0)

    @classmethod
    def fast_spiking(cls) -> "NeuronConfig":
        return cls(a=0.10, b=0.2, c=-65.0, d=2.0)

    @classmethod
    def low_threshold_spiking(cls) -> "NeuronConfig":
        return cls(a=0.02, b=0.25, c=-65.0, d=2.0)

    @classmethod
    def resonator(cls) -> "NeuronConfig":
        return cls(a=0.10, b=0.26, c=-65.0, d=2.0)

    @classmethod
    def from_type(cls, kind: NeuronType, r: Optional[float] = None) -> "NeuronConfig":
        """Derive a configuration from a neuron type descriptor.

        Excitatory and inhibitory types need the random variable `r`; the
        fixed presets ignore it.
        """
        try:
            kind = NeuronType(kind)
        except ValueError as e:
            raise ConfigurationError(f"Unknown neuron type: {kind!r}") from e
        if kind.needs_random_variable:
            if r is None:
                raise ConfigurationError(f"{kind.value} neurons need a random variable r in [0, 1]")
            return cls.excitatory(r) if kind is NeuronType.EXCITATORY else cls.inhibitory(r)
        return getattr(cls, kind.value)()


def _dv(v: float, u: float, i_syn: float) -> float:
    # dv/dt = 0.04 v^2 + 5 v + 140 - u + I
    return (0.04 * v + 5.0) * v + 140.0 - u + i_syn


def _du(v: float, u: float, a: float, b: float) -> float:
    # du/dt = a (b v - u)
    return a * (b * v - u)


@dataclass(frozen=True)
class NeuronState:
    """Membrane potential `v` (mV) and recovery variable `u` of a neuron."""

    v: float = INITIAL_POTENTIAL
    u: float = INITIAL_RECOVERY

    def potential(self) -> float:
        return self.v if self.v < RESET_THRESHOLD else RESET_THRESHOLD

    def recovery(self) -> float:
        return self.u

    def _euler(self, dt: float, i_syn: float, config: NeuronConfig) -> "NeuronState":
        return NeuronState(
            v=self.v + dt * _dv(self.v, self.u, i_syn),
            u=self.u + dt * _du(self.v, self.u, config.a, config.b),
        )

    def step_1ms(self, i_syn: float, config: NeuronConfig) -> Tuple["NeuronState", NeuronActivity]:
        """Advance the state by 1 ms.

        Below threshold the equations are integrated with two forward Euler
        half-steps of 0.5 ms, the second applied to the result of the first.
        At or above threshold the neuron fires: `v` is reset to `c` and `d`
        is added to `u`.
        """
        if self.v < RESET_THRESHOLD:
            state = self._euler(0.5, i_syn, config)._euler(0.5, i_syn, config)
            return state, NeuronActivity.SILENT
        return NeuronState(v=config.c, u=self.u + config.d), NeuronActivity.FIRES


__all__ = [
    "RESET_THRESHOLD",
    "INITIAL_POTENTIAL",
    "INITIAL_RECOVERY",
    "closed_unit",
    "NeuronActivity",
    "NeuronType",
    "NeuronConfig",
    "NeuronState",
]
