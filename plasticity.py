"""
Plasticity rules for the fixed-point network (pluggable strategy objects).

A rule is handed the network after each step's propagation and threshold
passes and may adjust synapse weights.  ``Network`` runs the default
``STDPRule`` whenever learning is enabled; ``set_plasticity_rules`` swaps
in others.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from fixed_point import SCALE, exp_decay, mul

if TYPE_CHECKING:
    from snn_config import PlasticityConfig
    from spiking_network import Network

logger = logging.getLogger("neurofingerprint.plasticity")


class PlasticityRule:
    """Base class for pluggable plasticity rules.

    Subclass and override ``apply``; return the number of synapses changed.
    """

    def apply(self, network: "Network", timestep: int) -> int:
        raise NotImplementedError


class STDPRule(PlasticityRule):
    """Spike-Timing-Dependent Plasticity over the recent spike log.

    For each of the ``spike_window`` most recent spikes (pre neuron P at
    time t) and each outgoing synapse P→T, with t' the last spike of T:

        t' > t (causal):  w = min(w + calc_delta(t' - t, LTP), max_weight)
        t' < t (acausal): w = max(w + calc_delta(t - t', LTD), min_weight)
        t' == t:          unchanged

    ``calc_delta`` scales the maximum change (+0.1 for LTP, -0.05 for LTD)
    by ``exp_decay(dt, tau)``, so potentiation is twice as strong as
    depression.  A synapse never changes sign: weights of inhibitory
    sources stay at or below zero, all others at or above zero.
    """

    def __init__(
        self,
        spike_window: int = 50,
        ltp_max_change: int = SCALE // 10,
        ltd_max_change: int = -(SCALE * 5 // 100),
        tau: int = 5 * SCALE,
    ):
        self.spike_window = spike_window
        self.ltp_max_change = ltp_max_change
        self.ltd_max_change = ltd_max_change
        self.tau = tau

    @classmethod
    def from_config(cls, cfg: "PlasticityConfig") -> "STDPRule":
        return cls(
            spike_window=cfg.spike_window,
            ltp_max_change=cfg.ltp_max_change,
            ltd_max_change=cfg.ltd_max_change,
            tau=cfg.tau,
        )

    def calc_delta(self, dt: int, is_ltp: bool) -> int:
        """Weight change for a spike pair ``dt`` steps apart (fixed-point)."""
        max_change = self.ltp_max_change if is_ltp else self.ltd_max_change
        decay = exp_decay(dt * SCALE, self.tau)
        return mul(max_change, decay)

    def apply(self, network: "Network", timestep: int) -> int:
        """Apply STDP to the outgoing synapses of recently spiking neurons."""
        updated = 0
        for spike in network.recent_spikes(self.spike_window):
            source = network.neurons[spike.neuron_id]
            t_pre = spike.timestep
            for syn in network.synapses(spike.neuron_id):
                t_post = network.last_spike_time(syn.target_id)
                if t_post is None or t_post == t_pre:
                    continue

                if t_post > t_pre:
                    delta = self.calc_delta(t_post - t_pre, is_ltp=True)
                    weight = min(syn.weight + delta, network.max_weight)
                else:
                    delta = self.calc_delta(t_pre - t_post, is_ltp=False)
                    weight = max(syn.weight + delta, network.min_weight)

                if source.is_inhibitory:
                    weight = min(weight, 0)
                else:
                    weight = max(weight, 0)

                syn.weight = weight
                syn.last_weight_update = timestep
                updated += 1

        if updated:
            logger.debug("STDP at t=%d updated %d synapses", timestep, updated)
        return updated
