from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, Dict

from .errors import ConfigurationError


def clamp(value: float, lower: float, upper: float) -> float:
    if value < lower:
        return lower
    if value > upper:
        return upper
    return value


@dataclass(frozen=True)
class StdpConfig:
    """Spike-timing-dependent plasticity parameters.

    Every time step each neuron's trace is either reset to `fire_reset`
    (it fired) or multiplied by `decay` (it stayed silent).

    When a neuron fires, its incoming synapses are credited with the firing
    neuron's own trace. Set `credit_source_trace` to credit them with the
    trace of each synapse's source neuron instead.
    """

    decay: float = 0.95
    fire_reset: float = 0.1
    credit_source_trace: bool = False

    def __post_init__(self) -> None:
        if not 0.0 <= self.decay <= 1.0:
            raise ConfigurationError(f"STDP decay must be within [0, 1], got {self.decay!r}")

    def next_trace(self, trace: float, fired: bool) -> float:
        return self.fire_reset if fired else trace * self.decay

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "StdpConfig":
        return cls(**data)


@dataclass(frozen=True)
class WeightUpdateConfig:
    """Parameters of the batched weight update pass.

    Weights are clamped to [min_weight, max_weight]; the pending efficacy
    derivative is multiplied by `eff_d_decay` after being applied.
    """

    min_weight: float = 0.0
    max_weight: float = 10.0
    eff_d_decay: float = 0.9

    def __post_init__(self) -> None:
        if self.min_weight > self.max_weight:
            raise ConfigurationError(
                f"min_weight ({self.min_weight}) is larger than max_weight ({self.max_weight})"
            )

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "WeightUpdateConfig":
        return cls(**data)


__all__ = ["clamp", "StdpConfig", "WeightUpdateConfig"]
