import json

import pytest

from conftest import build_random_network
from izhisim import ConfigurationError, FireRecorder, Simulator, SimulatorConfig, StdpConfig, WeightUpdateConfig
from izhisim import snapshot


def make_simulator(seed: int = 3) -> Simulator:
    config = SimulatorConfig(
        stdp=StdpConfig(decay=0.9, fire_reset=0.12),
        weights=WeightUpdateConfig(min_weight=-6.0, max_weight=8.0, eff_d_decay=0.8),
        weight_update_interval=25,
    )
    return Simulator(build_random_network(seed), config=config)


def test_resumed_run_matches_continuous_run(tmp_path) -> None:
    continuous = make_simulator()
    continuous.run(300)
    tail = FireRecorder()
    continuous.run(300, tail)

    interrupted = make_simulator()
    interrupted.run(300)
    path = snapshot.save_snapshot(tmp_path / "snap.json", interrupted)
    resumed = snapshot.load_snapshot(path)
    assert resumed.current_time_step() == 300
    assert resumed.pending_spikes() == interrupted.pending_spikes()

    resumed_tail = FireRecorder()
    resumed.run(300, resumed_tail)

    assert len(tail) > 0
    assert resumed_tail.events == tail.events
    assert resumed.model.weights() == continuous.model.weights()
    assert resumed.model.potentials() == continuous.model.potentials()


def test_snapshot_contents(tmp_path) -> None:
    sim = make_simulator()
    sim.run(40)
    data = json.loads(snapshot.save_snapshot(tmp_path / "a" / "snap.json", sim).read_text())

    assert data["format_version"] == snapshot.FORMAT_VERSION
    assert data["time_step"] == 40
    assert data["config"]["weight_update_interval"] == 25
    assert data["config"]["stdp"]["fire_reset"] == 0.12
    assert len(data["network"]["neurons"]) == sim.model.total_neurons()
    assert len(data["network"]["synapses"]) == sim.model.total_synapses()
    assert len(data["future_spikes"]) == sim.ring_size


def test_restored_network_has_same_connectivity() -> None:
    sim = make_simulator()
    sim.run(20)
    restored = snapshot.from_dict(snapshot.to_dict(sim))
    for original, copy in zip(sim.model.neurons, restored.model.neurons):
        assert copy.incoming == original.incoming
        assert copy.outgoing == original.outgoing
        assert copy.config == original.config
        assert copy.state == original.state
        assert copy.stdp == original.stdp
        assert copy.i_ext == original.i_ext
    assert [s.eff_d for s in restored.model.synapses] == [s.eff_d for s in sim.model.synapses]
    assert restored.future_spikes() == sim.future_spikes()


def test_checkpoints(tmp_path) -> None:
    sim = make_simulator()
    assert snapshot.latest_checkpoint(tmp_path) is None
    sim.run(5)
    snapshot.save_checkpoint(tmp_path, sim)
    sim.run(5)
    last = snapshot.save_checkpoint(tmp_path, sim)
    assert snapshot.latest_checkpoint(tmp_path) == last
    assert snapshot.load_snapshot(last).current_time_step() == 10


def test_malformed_snapshots_are_rejected() -> None:
    data = snapshot.to_dict(make_simulator())
    with pytest.raises(ConfigurationError):
        snapshot.from_dict(dict(data, format_version=99))

    broken = json.loads(json.dumps(data))
    del broken["network"]["synapses"][0]["delay"]
    with pytest.raises(ConfigurationError):
        snapshot.from_dict(broken)

    too_long = json.loads(json.dumps(data))
    too_long["network"]["synapses"][0]["delay"] = too_long["network"]["max_delay"] + 1
    with pytest.raises(ConfigurationError):
        snapshot.from_dict(too_long)


def _mangled(data, edit):
    copy = json.loads(json.dumps(data))
    edit(copy)
    return copy


def test_snapshots_with_bad_references_or_values_are_rejected() -> None:
    data = snapshot.to_dict(make_simulator())
    n_synapses = len(data["network"]["synapses"])

    def unknown_target(d):
        d["network"]["synapses"][0]["target"] = 99

    def unknown_pending_synapse(d):
        d["future_spikes"][1] = [n_synapses]

    def non_numeric_potential(d):
        d["network"]["neurons"][0]["v"] = "abc"

    for edit in (unknown_target, unknown_pending_synapse, non_numeric_potential):
        with pytest.raises(ConfigurationError):
            snapshot.from_dict(_mangled(data, edit))
