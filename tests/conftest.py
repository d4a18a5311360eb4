import random

import pytest

from izhisim import Network, NeuronConfig


def build_random_network(seed: int, n_exc: int = 40, n_inh: int = 10, fan_out: int = 8) -> Network:
    """Small excitatory/inhibitory network in the spirit of Izhikevich (2003)."""
    rng = random.Random(seed)
    net = Network(max_delay=10)
    exc = net.create_neurons(n_exc, lambda _: NeuronConfig.excitatory(rng.random()))
    inh = net.create_neurons(n_inh, lambda _: NeuronConfig.inhibitory(rng.random()))
    everyone = exc + inh
    for src in exc:
        for tgt in rng.sample(everyone, fan_out):
            net.connect(src, tgt, rng.randint(1, 10), 6.0)
    for src in inh:
        for tgt in rng.sample(exc, fan_out):
            net.connect(src, tgt, 1, -5.0)
    for nid in everyone:
        net.set_external_input(nid, rng.uniform(0.0, 8.0))
    return net


@pytest.fixture
def random_network():
    return build_random_network(seed=7)


@pytest.fixture
def pair_network():
    """Two regular spiking neurons, 0 -> 1 with delay 2 and weight 5."""
    net = Network(max_delay=4)
    src = net.create_neuron(NeuronConfig.regular_spiking())
    tgt = net.create_neuron(NeuronConfig.regular_spiking())
    net.connect(src, tgt, 2, 5.0)
    return net
