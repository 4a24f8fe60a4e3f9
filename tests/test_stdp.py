"""Tests for STDP learning: LTP, LTD, coincident spikes, bounds and polarity.

- A→B strengthens when A fires before B
- A→B weakens when A fires after B
- weights stay inside [-1000, 1000] and never change sign
"""

import sys
import os

import pytest

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))
from fixed_point import SCALE, exp_decay, mul
from plasticity import STDPRule
from randomness import RandomnessProvider
from spiking_network import Network, NeuronType

HALF = SCALE // 2
MAX_WEIGHT = 1000 * SCALE


def pair(weight):
    """One input wired to one output; learning on."""
    net = Network("pair", 1, 1)
    syn = net.create_synapse(0, 1, weight)
    return net, syn


class TestCalcDelta:

    def test_ltp_one_step(self):
        rule = STDPRule()
        assert rule.calc_delta(1, is_ltp=True) == 81873075555555555

    def test_ltd_one_step(self):
        rule = STDPRule()
        assert rule.calc_delta(1, is_ltp=False) == -40936537777777777

    def test_ltp_twice_as_strong(self):
        rule = STDPRule()
        for dt in range(1, 6):
            ltp = rule.calc_delta(dt, is_ltp=True)
            ltd = rule.calc_delta(dt, is_ltp=False)
            assert abs(ltp - 2 * -ltd) <= 2

    def test_uses_exp_decay_surrogate(self):
        rule = STDPRule()
        expected = mul(SCALE // 10, exp_decay(3 * SCALE, 5 * SCALE))
        assert rule.calc_delta(3, is_ltp=True) == expected

    def test_decays_with_spacing(self):
        rule = STDPRule()
        deltas = [rule.calc_delta(dt, is_ltp=True) for dt in range(1, 10)]
        assert deltas == sorted(deltas, reverse=True)


class TestLTP:

    def test_causal_strengthening(self):
        net, syn = pair(SCALE)
        net.set_inputs([SCALE])
        net.step()      # t=0: input spikes, output flagged
        r1 = net.step() # t=1: output spikes, input→output potentiated

        assert r1.synapses_updated == 1
        assert syn.weight == SCALE + 81873075555555555
        assert syn.last_weight_update == 1

    def test_clamped_at_max_weight(self):
        net, syn = pair(MAX_WEIGHT - 1)
        net.set_inputs([SCALE])
        net.step_n(2)
        assert syn.weight == MAX_WEIGHT


class TestLTD:

    def test_acausal_weakening(self):
        net, syn = pair(HALF)
        net.neurons[1].has_fired = True
        net.step()      # t=0: output spikes first
        net.set_inputs([SCALE])
        r1 = net.step() # t=1: input spikes after, input→output depressed

        assert r1.synapses_updated == 1
        assert syn.weight == HALF - 40936537777777777
        assert syn.last_weight_update == 1

    def test_excitatory_weight_floors_at_zero(self):
        net, syn = pair(SCALE // 100)
        net.neurons[1].has_fired = True
        net.step()
        net.set_inputs([SCALE])
        net.step()
        assert syn.weight == 0


class TestCoincidence:

    def test_same_step_spikes_leave_weight_alone(self):
        net, syn = pair(HALF)
        net.neurons[1].has_fired = True
        net.set_inputs([SCALE])
        result = net.step()   # both spike at t=0
        assert result.synapses_updated == 0
        assert syn.weight == HALF
        assert syn.last_weight_update == 0

    def test_silent_target_not_updated(self):
        net, syn = pair(SCALE // 10)
        net.set_inputs([SCALE])
        net.step_n(3)
        assert syn.weight == SCALE // 10


class TestPolarity:

    def test_inhibitory_never_turns_positive(self):
        net = Network("inh", 1, 1)
        hidden = net.add_hidden_layer(1, 1)[0]
        net.neurons[hidden].neuron_type = NeuronType.INHIBITORY
        net.create_synapse(0, hidden, SCALE)
        inh = net.create_synapse(hidden, 1, SCALE // 100)
        assert inh.weight == -(SCALE // 100)

        net.set_inputs([SCALE])
        net.step()                       # t=0: input spikes, hidden flagged
        net.step()                       # t=1: hidden spikes
        net.neurons[1].has_fired = True
        net.step()                       # t=2: output spikes after hidden → LTP
        assert inh.weight == 0


class TestLearningSwitch:

    def test_disabled_learning_keeps_weights(self):
        net, syn = pair(SCALE)
        net.set_learning_enabled(False)
        net.set_inputs([SCALE])
        results = net.step_n(3)
        assert syn.weight == SCALE
        assert all(r.synapses_updated == 0 for r in results)

    def test_custom_rules(self):
        net, syn = pair(SCALE)
        net.set_plasticity_rules([])
        net.set_inputs([SCALE])
        net.step_n(2)
        assert syn.weight == SCALE

    def test_spike_window(self):
        net, syn = pair(SCALE)
        net.set_plasticity_rules([STDPRule(spike_window=1)])
        net.set_inputs([SCALE])
        net.step_n(2)
        # Only the output's own spike is examined; it has no synapses
        assert syn.weight == SCALE


class TestWeightBounds:

    @pytest.mark.parametrize("seed", [1, 2, 3])
    def test_bounds_and_polarity_after_long_run(self, seed):
        net = Network("bounds", 6, 3, rng=RandomnessProvider(seed))
        net.add_hidden_layer(8, 1)
        net.connect_layers(0, 1, 0, 500 * SCALE)
        net.connect_layers(1, 2, 0, 999 * SCALE)
        drive = RandomnessProvider(seed + 100)

        for _ in range(80):
            net.set_inputs([drive.randint("in", 0, 2 * SCALE) for _ in range(6)])
            net.step()

        for neuron in net.neurons:
            for syn in net.synapses(neuron.neuron_id):
                assert -MAX_WEIGHT <= syn.weight <= MAX_WEIGHT
                if neuron.is_inhibitory:
                    assert syn.weight <= 0
                else:
                    assert syn.weight >= 0
