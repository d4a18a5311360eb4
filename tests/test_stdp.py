import pytest

from izhisim import ConfigurationError, StdpConfig, WeightUpdateConfig
from izhisim.stdp import clamp


def test_trace_reset_and_decay() -> None:
    cfg = StdpConfig(decay=0.95, fire_reset=0.1)
    assert cfg.next_trace(0.0, fired=True) == 0.1
    assert cfg.next_trace(0.1, fired=False) == pytest.approx(0.095)
    # Firing always resets, independent of the current trace
    assert cfg.next_trace(0.07, fired=True) == 0.1


def test_trace_decays_geometrically() -> None:
    cfg = StdpConfig()
    trace = cfg.next_trace(0.0, fired=True)
    for _ in range(10):
        trace = cfg.next_trace(trace, fired=False)
    assert trace == pytest.approx(0.1 * 0.95 ** 10)


def test_invalid_decay_is_rejected() -> None:
    with pytest.raises(ConfigurationError):
        StdpConfig(decay=1.5)


def test_weight_update_config_validation() -> None:
    with pytest.raises(ConfigurationError):
        WeightUpdateConfig(min_weight=2.0, max_weight=1.0)


def test_config_dict_round_trip() -> None:
    cfg = StdpConfig(decay=0.9, fire_reset=0.2, credit_source_trace=True)
    assert StdpConfig.from_dict(cfg.to_dict()) == cfg
    weights = WeightUpdateConfig(min_weight=-1.0, max_weight=4.0, eff_d_decay=0.5)
    assert WeightUpdateConfig.from_dict(weights.to_dict()) == weights


def test_clamp() -> None:
    assert clamp(-3.0, 0.0, 10.0) == 0.0
    assert clamp(13.0, 0.0, 10.0) == 10.0
    assert clamp(4.5, 0.0, 10.0) == 4.5
