"""Tests for text encoding, concept activation and fingerprints."""

import hashlib
import sys
import os

import pytest

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))
from fixed_point import SCALE
from snn_config import EncodingConfig
from snn_errors import InputSizeMismatch, UnknownConcept
from spiking_network import Network, NeuronType
from text_encoder import (
    ConceptRegistry,
    MemoryEncoder,
    compute_fingerprint,
    text_to_inputs,
)


def text_network(outputs=2, weight=SCALE, learning=True):
    """16 inputs; input 0 wired to every output."""
    net = Network("text", 16, outputs)
    net.set_learning_enabled(learning)
    for dst in net.output_ids:
        net.create_synapse(0, dst, weight)
    return net


@pytest.fixture
def registry():
    return ConceptRegistry()


class TestTextToInputs:

    def test_single_printable_byte(self):
        inputs = text_to_inputs("!")
        assert len(inputs) == 16
        assert inputs[0] == SCALE // 94
        assert inputs[1:] == [0] * 15

    def test_range_endpoints(self):
        assert text_to_inputs(" ")[0] == 0
        assert text_to_inputs("~")[0] == SCALE

    def test_truncates_to_width(self):
        inputs = text_to_inputs("~" * 40)
        assert inputs == [SCALE] * 16

    def test_custom_width(self):
        assert text_to_inputs("~~~", width=2) == [SCALE, SCALE]

    def test_utf8_bytes(self):
        # "é" is 0xC3 0xA9; both bytes count, both exceed the printable range
        inputs = text_to_inputs("é")
        assert inputs[0] == (0xC3 - 32) * SCALE // 94
        assert inputs[1] == (0xA9 - 32) * SCALE // 94
        assert inputs[2] == 0

    def test_control_characters_go_negative(self):
        assert text_to_inputs("\n")[0] < 0

    def test_empty_text(self):
        assert text_to_inputs("") == [0] * 16


class TestConceptRegistry:

    def test_sequential_ids(self, registry):
        assert registry.register("a", [1, 2], SCALE // 2) == 0
        assert registry.register("b", [3], SCALE) == 1
        assert len(registry) == 2
        assert registry.get(1).name == "b"
        assert registry.get(0).associated_neurons == frozenset({1, 2})

    def test_unknown(self, registry):
        with pytest.raises(UnknownConcept):
            registry.get(0)
        with pytest.raises(KeyError):
            registry.get(-1)

    def test_float_threshold(self, registry):
        with pytest.raises(TypeError):
            registry.register("a", [1], 0.5)

    def test_invalid_neuron_id(self, registry):
        with pytest.raises(ValueError):
            registry.register("a", [-1], SCALE)
        assert len(registry) == 0

    def test_activation_blend(self, registry):
        registry.register("pair", [16, 17], SCALE // 2)
        registry.register("half", [16, 99], SCALE // 2)
        registry.register("empty", [], 0)
        activations = registry.compute_activations([0, 16, 17], output0=SCALE)
        # (1.0 * 80 + 1.0 * 20) / 100, (0.5 * 80 + 1.0 * 20) / 100, (0 + 20) / 100
        assert activations == [SCALE, SCALE * 6 // 10, SCALE // 5]

    def test_activated(self, registry):
        registry.register("low", [1], SCALE // 10)
        registry.register("high", [1], SCALE)
        assert registry.activated([SCALE // 2, SCALE // 2]) == [0]


class TestProcess:

    def test_single_char_run(self, registry):
        net = text_network()
        registry.register("outputs", [16, 17], SCALE // 2)
        encoding = MemoryEncoder(registry).process(net, "~")

        assert encoding.network_id == net.network_id
        assert encoding.activated_neurons == (0, 16, 17)
        assert encoding.neuroplasticity_score == 30
        assert encoding.last_processed == 10
        assert encoding.concept_activations == (SCALE * 8 // 10,)
        assert len(encoding.fingerprint) == 32
        assert registry.get(0).last_activated == 10

    def test_sub_threshold_text_activates_nothing(self, registry):
        net = text_network()
        encoding = MemoryEncoder(registry).process(net, "hello")
        assert encoding.activated_neurons == ()
        assert encoding.neuroplasticity_score == 0
        assert encoding.concept_activations == ()

    def test_neurons_listed_once_in_first_spike_order(self, registry):
        # Output 16 is driven directly at t=0 and again through a three-neuron
        # delay chain at t=3, after its refractory period has run out.
        net = Network("chain", 16, 1)
        net.set_learning_enabled(False)
        h1 = net.add_hidden_layer(1, 1)[0]
        h2 = net.add_hidden_layer(1, 2)[0]
        h3 = net.add_hidden_layer(1, 3)[0]
        for nid in (h1, h2, h3):
            net.neurons[nid].neuron_type = NeuronType.EXCITATORY
        for src, dst in ((0, h1), (h1, h2), (h2, h3), (h3, 16), (0, 16)):
            net.create_synapse(src, dst, SCALE)

        encoding = MemoryEncoder(registry).process(net, "~")

        assert [s.neuron_id for s in net.recent_spikes(10)].count(16) == 2
        assert encoding.activated_neurons == (0, 16, h1, h2, h3)
        assert encoding.neuroplasticity_score == 50

    def test_score_capped(self, registry):
        net = text_network()
        encoding = MemoryEncoder(registry).process(net, "~" * 12)
        assert len(encoding.activated_neurons) == 14
        assert encoding.neuroplasticity_score == 100

    def test_spike_cap_keeps_latest(self, registry):
        net = text_network()
        encoder = MemoryEncoder(registry, EncodingConfig(max_spikes=2))
        encoding = encoder.process(net, "~")
        assert encoding.activated_neurons == (16, 17)

    def test_only_spikes_from_this_run(self, registry):
        net = text_network()
        net.set_inputs([SCALE] * 16)
        net.step()
        encoding = MemoryEncoder(registry).process(net, " ")
        # Outputs flagged before the run spike at its first step
        assert encoding.activated_neurons == (16, 17)
        assert encoding.last_processed == 11

    def test_wrong_input_width(self, registry):
        net = Network("small", 8, 2)
        with pytest.raises(InputSizeMismatch):
            MemoryEncoder(registry).process(net, "abc")
        assert net.timestep == 0


class TestDeterminism:

    def test_repeat_without_learning(self, registry):
        net = text_network(learning=False)
        registry.register("outputs", [16, 17], SCALE // 2)
        encoder = MemoryEncoder(registry)
        first = encoder.process(net, "~")
        second = encoder.process(net, "~")

        assert first.activated_neurons == second.activated_neurons
        assert first.concept_activations == second.concept_activations
        assert second.last_processed == 20
        # The time step is hashed in, so every run gets a distinct fingerprint
        assert first.fingerprint != second.fingerprint

    def test_identical_networks_identical_fingerprints(self, registry):
        a = MemoryEncoder(registry).process(text_network(), "~ab")
        b = MemoryEncoder(registry).process(text_network(), "~ab")
        assert a.fingerprint == b.fingerprint


class TestFingerprint:

    def test_layout(self):
        expected = hashlib.sha3_256()
        expected.update(b"hi")
        for value in (3, 16, SCALE, 10):
            expected.update(value.to_bytes(32, "big", signed=True))
        assert compute_fingerprint("hi", [3, 16], [SCALE], 10) == expected.digest()

    def test_negative_activation_encoded_signed(self):
        expected = hashlib.sha3_256()
        expected.update(b"x")
        expected.update((-SCALE).to_bytes(32, "big", signed=True))
        expected.update((0).to_bytes(32, "big", signed=True))
        assert compute_fingerprint("x", [], [-SCALE], 0) == expected.digest()

    def test_order_sensitive(self):
        assert compute_fingerprint("t", [1, 2], [], 0) != compute_fingerprint(
            "t", [2, 1], [], 0
        )

    def test_text_sensitive(self):
        assert compute_fingerprint("a", [1], [], 0) != compute_fingerprint(
            "b", [1], [], 0
        )
