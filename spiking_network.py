"""
NeuroFingerprint Network - Layered fixed-point spiking network.

Implements the topology store and the discrete-time simulation loop: a
strictly feed-forward network of leaky integrate-and-fire neurons whose
potentials, thresholds and weights are ints scaled by ``fixed_point.SCALE``.

Design principles:
    - Integer only: every quantity is fixed-point, floats are rejected
    - Feed-forward by construction: synapses only point to later layers,
      so one sweep per step is enough and no cycle detection is needed
    - Pluggable plasticity: learning rules are swappable strategy objects
    - Bounded memory: spike histories are ring buffers
    - Persistence-native: all state is serializable to JSON
"""

from __future__ import annotations

import json
import logging
import threading
import uuid
from collections import deque
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import (
    Any,
    Deque,
    Dict,
    List,
    Optional,
    Sequence,
)

import numpy as np

from fixed_point import SCALE, checked, mul, require_fixed, require_int, tdiv
from plasticity import PlasticityRule, STDPRule
from randomness import RandomnessProvider
from snn_config import EngineConfig, load_engine_config
from snn_errors import (
    InputSizeMismatch,
    InvalidNeuron,
    InvalidTopology,
    WeightOutOfRange,
)

logger = logging.getLogger("neurofingerprint.network")


# ---------------------------------------------------------------------------
# Enumerations
# ---------------------------------------------------------------------------

class NeuronType(Enum):
    """Neuron role; inhibitory neurons only emit non-positive weights."""
    INPUT = auto()
    EXCITATORY = auto()
    INHIBITORY = auto()


INPUT_LAYER = 0
OUTPUT_LAYER = 1


# ---------------------------------------------------------------------------
# Ring Buffer for spike history
# ---------------------------------------------------------------------------

class RingBuffer:
    """Fixed-size ring buffer for storing recent spike time steps."""

    def __init__(self, capacity: int = 100):
        self._capacity = capacity
        self._buffer: Deque[int] = deque(maxlen=capacity)

    def append(self, value: int) -> None:
        self._buffer.append(value)

    def last(self) -> Optional[int]:
        return self._buffer[-1] if self._buffer else None

    def __len__(self) -> int:
        return len(self._buffer)

    def __iter__(self):
        return iter(self._buffer)

    def __repr__(self) -> str:
        return f"RingBuffer(capacity={self._capacity}, size={len(self._buffer)})"

    @property
    def capacity(self) -> int:
        return self._capacity

    def to_list(self) -> List[int]:
        return list(self._buffer)

    @classmethod
    def from_list(cls, data: List[int], capacity: int = 100) -> "RingBuffer":
        rb = cls(capacity)
        for v in data:
            rb.append(v)
        return rb


# ---------------------------------------------------------------------------
# Core Data Structures
# ---------------------------------------------------------------------------

@dataclass
class Neuron:
    """Leaky integrate-and-fire neuron with fixed-point state.

    Attributes:
        neuron_id: Index of the neuron within its network.
        neuron_type: INPUT, EXCITATORY or INHIBITORY.
        layer: Layer index; input layer is 0.
        membrane_potential: Accumulated excitation; resets on spike.
        resting_potential: Potential restored after a spike.
        threshold: Neuron is flagged to fire when potential >= threshold.
        refractory_period: Steps of forced quiescence after a spike.
        refractory_counter: Steps left in the current refractory period.
        has_fired: Flagged to spike at the start of the next step.
        active: Inactive neurons are skipped by the simulation loop.
        spike_history: Rolling window of the time steps this neuron spiked.
    """

    neuron_id: int
    neuron_type: NeuronType = NeuronType.EXCITATORY
    layer: int = 0
    membrane_potential: int = 0
    resting_potential: int = 0
    threshold: int = SCALE
    refractory_period: int = 0
    refractory_counter: int = 0
    has_fired: bool = False
    active: bool = True
    spike_history: RingBuffer = field(default_factory=lambda: RingBuffer(100))

    @property
    def is_inhibitory(self) -> bool:
        return self.neuron_type == NeuronType.INHIBITORY


@dataclass
class Synapse:
    """Directed, weighted connection owned by its source neuron.

    Attributes:
        source_id: Neuron emitting spikes through this synapse.
        target_id: Neuron receiving ``weight`` on each source spike.
        weight: Fixed-point strength in ``[-max_weight, max_weight]``.
        last_weight_update: Time step of creation or last plasticity change.
    """

    source_id: int
    target_id: int
    weight: int
    last_weight_update: int = 0


@dataclass(frozen=True)
class Spike:
    """A single neuron spike at a given time step."""

    neuron_id: int
    timestep: int


# ---------------------------------------------------------------------------
# Step Result / Telemetry
# ---------------------------------------------------------------------------

@dataclass
class StepResult:
    """Result returned from Network.step().

    Attributes:
        timestep: The time step this result corresponds to.
        spiked_neuron_ids: Neurons whose pending spike was delivered.
        flagged_neuron_ids: Neurons that crossed threshold and fire next step.
        synapses_updated: Weight changes applied by plasticity rules.
    """

    timestep: int = 0
    spiked_neuron_ids: List[int] = field(default_factory=list)
    flagged_neuron_ids: List[int] = field(default_factory=list)
    synapses_updated: int = 0


@dataclass
class Telemetry:
    """Network statistics snapshot.

    ``global_firing_rate`` is a float because it is a diagnostic, not a
    simulation quantity; ``mean_weight`` stays fixed-point.
    """

    timestep: int = 0
    total_neurons: int = 0
    total_synapses: int = 0
    layer_count: int = 0
    neurons_per_layer: List[int] = field(default_factory=list)
    spikes_in_history: int = 0
    global_firing_rate: float = 0.0
    mean_weight: int = 0


# ---------------------------------------------------------------------------
# Network Container
# ---------------------------------------------------------------------------

CHECKPOINT_VERSION = "1.0.0"


class Network:
    """Owns all neurons, synapses and spike histories of one network.

    The input block is neurons ``[0, input_count)`` on layer 0, followed by
    the output block ``[input_count, input_count + output_count)`` which
    always sits on the last layer.  Hidden neurons get the ids after that.

    Every public method holds the network lock for its whole duration, so
    steps and topology changes never interleave.

    Args:
        name: Human-readable label.
        input_count: Number of input neurons (> 0).
        output_count: Number of output neurons (> 0).
        config: Engine configuration (defaults if None).
        rng: Randomness provider for polarities and random wiring.
        network_id: Explicit id (auto-generated UUID if None).
    """

    def __init__(
        self,
        name: str,
        input_count: int,
        output_count: int,
        config: Optional[EngineConfig] = None,
        rng: Optional[RandomnessProvider] = None,
        network_id: Optional[str] = None,
    ):
        self.config = config or EngineConfig()
        self.rng = rng or RandomnessProvider(self.config.random_seed)
        self._topo = self.config.topology
        self._sim = self.config.simulation

        require_int(input_count, "input_count")
        require_int(output_count, "output_count")
        if input_count <= 0 or output_count <= 0:
            raise InvalidTopology(
                f"Input and output counts must be positive "
                f"(got {input_count}, {output_count})"
            )
        if input_count + output_count > self._topo.max_neurons:
            raise InvalidTopology(
                f"{input_count + output_count} neurons exceeds the cap of "
                f"{self._topo.max_neurons}"
            )

        self.network_id = network_id or str(uuid.uuid4())
        self.name = name
        self.input_count = input_count
        self.output_count = output_count
        self.layer_count = 2
        self.timestep: int = 0
        self.learning_enabled: bool = self._sim.learning_enabled

        self.neurons: List[Neuron] = []
        # neuron_id → outgoing synapses
        self._outgoing: List[List[Synapse]] = []
        self._spike_log: Deque[Spike] = deque(maxlen=self._sim.spike_log_capacity)

        self._plasticity_rules: List[PlasticityRule] = [
            STDPRule.from_config(self.config.plasticity)
        ]

        self._lock = threading.RLock()

        for _ in range(input_count):
            self._append_neuron(
                NeuronType.INPUT, INPUT_LAYER, refractory_period=0
            )
        for _ in range(output_count):
            self._append_neuron(
                NeuronType.EXCITATORY,
                OUTPUT_LAYER,
                refractory_period=self._topo.output_refractory_period,
            )

        logger.info(
            "Created network %s (%r): %d inputs, %d outputs",
            self.network_id, name, input_count, output_count,
        )

    # -----------------------------------------------------------------------
    # Properties
    # -----------------------------------------------------------------------

    @property
    def neuron_count(self) -> int:
        return len(self.neurons)

    @property
    def max_weight(self) -> int:
        return self._topo.max_weight

    @property
    def min_weight(self) -> int:
        return -self._topo.max_weight

    @property
    def output_ids(self) -> range:
        return range(self.input_count, self.input_count + self.output_count)

    @property
    def lock(self) -> threading.RLock:
        """Re-entrant lock held by every public operation."""
        return self._lock

    # -----------------------------------------------------------------------
    # Topology Management
    # -----------------------------------------------------------------------

    def _append_neuron(
        self, neuron_type: NeuronType, layer: int, refractory_period: int
    ) -> Neuron:
        neuron = Neuron(
            neuron_id=len(self.neurons),
            neuron_type=neuron_type,
            layer=layer,
            threshold=self._topo.default_threshold,
            refractory_period=refractory_period,
            spike_history=RingBuffer(self._sim.neuron_spike_capacity),
        )
        self.neurons.append(neuron)
        self._outgoing.append([])
        return neuron

    def _check_neuron(self, neuron_id: int) -> Neuron:
        if (
            isinstance(neuron_id, bool)
            or not isinstance(neuron_id, int)
            or not 0 <= neuron_id < len(self.neurons)
        ):
            raise InvalidNeuron(
                f"Neuron {neuron_id!r} not in network {self.network_id} "
                f"(0..{len(self.neurons) - 1})"
            )
        return self.neurons[neuron_id]

    def neuron(self, neuron_id: int) -> Neuron:
        """Return a neuron by id."""
        return self._check_neuron(neuron_id)

    def add_hidden_layer(self, count: int, layer_position: int) -> List[int]:
        """Insert ``count`` hidden neurons as a new layer at ``layer_position``.

        Every neuron currently on ``layer_position`` or above moves up one
        layer.  Each new neuron is excitatory with probability
        ``excitatory_percent`` (drawn from the ``layer_types`` stream).

        Args:
            count: Number of neurons in the new layer (> 0).
            layer_position: Must satisfy ``0 < layer_position < layer_count``.

        Returns:
            Ids of the inserted neurons.
        """
        require_int(count, "count")
        require_int(layer_position, "layer_position")
        with self._lock:
            if count <= 0:
                raise InvalidTopology(f"Hidden layer size must be positive (got {count})")
            if not 0 < layer_position < self.layer_count:
                raise InvalidTopology(
                    f"Layer position {layer_position} must be between 1 and "
                    f"{self.layer_count - 1}"
                )
            if len(self.neurons) + count > self._topo.max_neurons:
                raise InvalidTopology(
                    f"Adding {count} neurons exceeds the cap of {self._topo.max_neurons}"
                )

            for neuron in self.neurons:
                if neuron.layer >= layer_position:
                    neuron.layer += 1

            new_ids: List[int] = []
            for _ in range(count):
                if self.rng.percent("layer_types") < self._topo.excitatory_percent:
                    neuron_type = NeuronType.EXCITATORY
                else:
                    neuron_type = NeuronType.INHIBITORY
                neuron = self._append_neuron(
                    neuron_type,
                    layer_position,
                    refractory_period=self._topo.hidden_refractory_period,
                )
                new_ids.append(neuron.neuron_id)

            self.layer_count += 1
            logger.info(
                "Network %s: inserted %d hidden neurons at layer %d (%d layers)",
                self.network_id, count, layer_position, self.layer_count,
            )
            return new_ids

    def _polarized(self, source: Neuron, weight: int) -> int:
        return -abs(weight) if source.is_inhibitory else abs(weight)

    def create_synapse(self, source_id: int, target_id: int, weight: int) -> Synapse:
        """Create a feed-forward synapse.

        The weight's sign is forced to the source's polarity: inhibitory
        sources always get a non-positive weight, all others non-negative.

        Raises:
            InvalidNeuron: Either id is out of range.
            WeightOutOfRange: ``|weight|`` exceeds ``max_weight``.
            InvalidTopology: Target is not on a later layer, or the source
                already has ``max_synapses_per_neuron`` synapses.
        """
        require_fixed(weight, "weight")
        with self._lock:
            source = self._check_neuron(source_id)
            target = self._check_neuron(target_id)
            if abs(weight) > self._topo.max_weight:
                raise WeightOutOfRange(
                    f"Weight {weight} outside ±{self._topo.max_weight}"
                )
            if source.layer >= target.layer:
                raise InvalidTopology(
                    f"Synapse {source_id}->{target_id} is not feed-forward "
                    f"(layer {source.layer} -> {target.layer})"
                )
            if len(self._outgoing[source_id]) >= self._topo.max_synapses_per_neuron:
                raise InvalidTopology(
                    f"Neuron {source_id} already has "
                    f"{self._topo.max_synapses_per_neuron} synapses"
                )

            syn = Synapse(
                source_id=source_id,
                target_id=target_id,
                weight=self._polarized(source, weight),
                last_weight_update=self.timestep,
            )
            self._outgoing[source_id].append(syn)
            return syn

    def connect_layers(
        self,
        source_layer: int,
        target_layer: int,
        min_weight: int,
        max_weight: int,
    ) -> int:
        """Connect every neuron of one layer to every neuron of a later layer.

        Weights are drawn uniformly from ``[min_weight, max_weight]`` on the
        ``synapse_weights`` stream, then polarized like ``create_synapse``.
        Sources whose fan-out is full are skipped.

        Returns:
            Number of synapses created.
        """
        require_int(source_layer, "source_layer")
        require_int(target_layer, "target_layer")
        require_fixed(min_weight, "min_weight")
        require_fixed(max_weight, "max_weight")
        with self._lock:
            if not 0 <= source_layer < target_layer < self.layer_count:
                raise InvalidTopology(
                    f"Cannot connect layer {source_layer} to layer {target_layer} "
                    f"({self.layer_count} layers)"
                )
            if min_weight > max_weight:
                raise WeightOutOfRange(f"Empty weight range [{min_weight}, {max_weight}]")
            if max(abs(min_weight), abs(max_weight)) > self._topo.max_weight:
                raise WeightOutOfRange(
                    f"Weight range [{min_weight}, {max_weight}] outside "
                    f"±{self._topo.max_weight}"
                )

            sources = [n for n in self.neurons if n.layer == source_layer]
            targets = [n for n in self.neurons if n.layer == target_layer]
            created = 0
            for source in sources:
                outgoing = self._outgoing[source.neuron_id]
                for target in targets:
                    if len(outgoing) >= self._topo.max_synapses_per_neuron:
                        break
                    weight = self.rng.randint("synapse_weights", min_weight, max_weight)
                    outgoing.append(
                        Synapse(
                            source_id=source.neuron_id,
                            target_id=target.neuron_id,
                            weight=self._polarized(source, weight),
                            last_weight_update=self.timestep,
                        )
                    )
                    created += 1

            logger.debug(
                "Network %s: connected layer %d -> %d with %d synapses",
                self.network_id, source_layer, target_layer, created,
            )
            return created

    def synapses(self, neuron_id: int) -> List[Synapse]:
        """Outgoing synapses of a neuron (live objects)."""
        self._check_neuron(neuron_id)
        return self._outgoing[neuron_id]

    def all_synapses(self) -> List[Synapse]:
        return [syn for outgoing in self._outgoing for syn in outgoing]

    # -----------------------------------------------------------------------
    # Stimulation
    # -----------------------------------------------------------------------

    def set_inputs(self, values: Sequence[int]) -> None:
        """Set input-neuron potentials.

        An input whose value reaches its threshold is flagged to fire and
        spikes at the start of the next step; any other input is unflagged,
        so a later call overrides an earlier one that was never stepped.

        Raises:
            InputSizeMismatch: ``len(values) != input_count``.
            TypeError: A value is not a fixed-point int.
        """
        values = list(values)
        for i, v in enumerate(values):
            require_fixed(v, f"values[{i}]")
        with self._lock:
            if len(values) != self.input_count:
                raise InputSizeMismatch(
                    f"Expected {self.input_count} inputs, got {len(values)}"
                )
            for neuron, value in zip(self.neurons[: self.input_count], values):
                neuron.membrane_potential = value
                neuron.has_fired = value >= neuron.threshold

    def set_learning_enabled(self, enabled: bool) -> None:
        with self._lock:
            self.learning_enabled = bool(enabled)

    # -----------------------------------------------------------------------
    # Simulation Loop
    # -----------------------------------------------------------------------

    def step(self) -> StepResult:
        """Advance one time step.

        Pipeline:
            1. Deliver pending spikes: record them, add weights to every
               non-refractory target, reset the spiking neuron and start
               its refractory period
            2. Second pass: count down refractory neurons, flag neurons at
               or above threshold, leak the rest by 0.9
            3. Apply plasticity rules (if learning is enabled)
            4. Advance the clock

        Propagation finishes before any threshold check, so a neuron
        excited in this step fires at the earliest on the next one.
        """
        with self._lock:
            t = self.timestep
            result = StepResult(timestep=t)

            # 1. Deliver spikes flagged on the previous step
            for neuron in self.neurons:
                if not neuron.active or not neuron.has_fired:
                    continue
                self._spike_log.append(Spike(neuron.neuron_id, t))
                neuron.spike_history.append(t)
                for syn in self._outgoing[neuron.neuron_id]:
                    target = self.neurons[syn.target_id]
                    if target.refractory_counter == 0:
                        target.membrane_potential = checked(
                            target.membrane_potential + syn.weight
                        )
                neuron.membrane_potential = neuron.resting_potential
                neuron.refractory_counter = neuron.refractory_period
                neuron.has_fired = False
                result.spiked_neuron_ids.append(neuron.neuron_id)

            # 2. Refractory countdown, threshold check, leak
            leak = self._sim.leak_numerator
            for neuron in self.neurons:
                if not neuron.active:
                    continue
                if neuron.refractory_counter > 0:
                    neuron.refractory_counter -= 1
                elif neuron.membrane_potential >= neuron.threshold:
                    neuron.has_fired = True
                    result.flagged_neuron_ids.append(neuron.neuron_id)
                else:
                    neuron.membrane_potential = mul(neuron.membrane_potential, leak)

            # 3. Plasticity
            if self.learning_enabled:
                for rule in self._plasticity_rules:
                    result.synapses_updated += rule.apply(self, t)

            # 4. Clock
            self.timestep += 1

            if result.spiked_neuron_ids:
                logger.debug(
                    "Network %s t=%d: %d spikes, %d flagged, %d weight updates",
                    self.network_id, t, len(result.spiked_neuron_ids),
                    len(result.flagged_neuron_ids), result.synapses_updated,
                )
            return result

    def step_n(self, n: int) -> List[StepResult]:
        """Run n steps; returns all StepResults."""
        require_int(n, "n")
        with self._lock:
            return [self.step() for _ in range(n)]

    # -----------------------------------------------------------------------
    # Query Methods
    # -----------------------------------------------------------------------

    def recent_spikes(self, max_count: int) -> List[Spike]:
        """Up to ``max_count`` most recent spikes, oldest first."""
        require_int(max_count, "max_count")
        if max_count < 0:
            raise ValueError(f"max_count must be non-negative (got {max_count})")
        with self._lock:
            if max_count == 0:
                return []
            return list(self._spike_log)[-max_count:]

    def spikes_since(self, timestep: int) -> List[Spike]:
        """Spikes recorded at or after ``timestep``, oldest first."""
        with self._lock:
            return [s for s in self._spike_log if s.timestep >= timestep]

    def last_spike_time(self, neuron_id: int) -> Optional[int]:
        """Most recent spike time step of a neuron, or None if it never fired."""
        return self._check_neuron(neuron_id).spike_history.last()

    def outputs(self) -> List[int]:
        """Membrane potentials of the output neurons."""
        with self._lock:
            return [self.neurons[i].membrane_potential for i in self.output_ids]

    def get_telemetry(self) -> Telemetry:
        """Network statistics snapshot."""
        with self._lock:
            layers = np.bincount(
                [n.layer for n in self.neurons], minlength=self.layer_count
            )
            spike_counts = np.array([len(n.spike_history) for n in self.neurons])
            weights = [s.weight for s in self.all_synapses()]
            return Telemetry(
                timestep=self.timestep,
                total_neurons=len(self.neurons),
                total_synapses=len(weights),
                layer_count=self.layer_count,
                neurons_per_layer=[int(c) for c in layers],
                spikes_in_history=len(self._spike_log),
                global_firing_rate=(
                    float(spike_counts.mean()) / self.timestep if self.timestep else 0.0
                ),
                mean_weight=tdiv(sum(weights), len(weights)) if weights else 0,
            )

    # -----------------------------------------------------------------------
    # Plasticity Configuration
    # -----------------------------------------------------------------------

    def set_plasticity_rules(self, rules: List[PlasticityRule]) -> None:
        """Configure active plasticity rules."""
        with self._lock:
            self._plasticity_rules = list(rules)

    # -----------------------------------------------------------------------
    # Persistence
    # -----------------------------------------------------------------------

    def checkpoint(self, path: str) -> None:
        """Save full network state as JSON (ints are preserved exactly)."""
        with self._lock:
            data = self._serialize()
        with open(path, "w") as f:
            json.dump(data, f, indent=2)
        logger.info("Checkpointed network %s to %s", self.network_id, path)

    @classmethod
    def from_checkpoint(
        cls,
        path: str,
        rng: Optional[RandomnessProvider] = None,
        network_id: Optional[str] = None,
    ) -> "Network":
        """Rebuild a network from a ``checkpoint()`` file.

        The restored network keeps its saved id unless ``network_id`` is
        given.
        """
        with open(path, "r") as f:
            data = json.load(f)
        config = load_engine_config(data.get("config", {}))
        net = cls(
            name=data["name"],
            input_count=data["input_count"],
            output_count=data["output_count"],
            config=config,
            rng=rng,
            network_id=network_id or data["network_id"],
        )
        net._deserialize(data)
        return net

    def _serialize_neuron(self, neuron: Neuron) -> Dict[str, Any]:
        return {
            "neuron_id": neuron.neuron_id,
            "neuron_type": neuron.neuron_type.name,
            "layer": neuron.layer,
            "membrane_potential": neuron.membrane_potential,
            "resting_potential": neuron.resting_potential,
            "threshold": neuron.threshold,
            "refractory_period": neuron.refractory_period,
            "refractory_counter": neuron.refractory_counter,
            "has_fired": neuron.has_fired,
            "active": neuron.active,
            "spike_history": neuron.spike_history.to_list(),
        }

    def _serialize_synapse(self, syn: Synapse) -> Dict[str, Any]:
        return {
            "source_id": syn.source_id,
            "target_id": syn.target_id,
            "weight": syn.weight,
            "last_weight_update": syn.last_weight_update,
        }

    def _serialize(self) -> Dict[str, Any]:
        return {
            "version": CHECKPOINT_VERSION,
            "network_id": self.network_id,
            "name": self.name,
            "input_count": self.input_count,
            "output_count": self.output_count,
            "layer_count": self.layer_count,
            "timestep": self.timestep,
            "learning_enabled": self.learning_enabled,
            "config": self.config.to_dict(),
            "neurons": [self._serialize_neuron(n) for n in self.neurons],
            "synapses": [self._serialize_synapse(s) for s in self.all_synapses()],
            "spike_log": [[s.neuron_id, s.timestep] for s in self._spike_log],
        }

    def _deserialize(self, data: Dict[str, Any]) -> None:
        """Replace all state with serialized data."""
        capacity = self._sim.neuron_spike_capacity
        self.layer_count = data["layer_count"]
        self.timestep = data["timestep"]
        self.learning_enabled = data.get("learning_enabled", self._sim.learning_enabled)

        self.neurons = []
        self._outgoing = []
        for nd in data["neurons"]:
            self.neurons.append(
                Neuron(
                    neuron_id=nd["neuron_id"],
                    neuron_type=NeuronType[nd["neuron_type"]],
                    layer=nd["layer"],
                    membrane_potential=nd["membrane_potential"],
                    resting_potential=nd.get("resting_potential", 0),
                    threshold=nd["threshold"],
                    refractory_period=nd["refractory_period"],
                    refractory_counter=nd.get("refractory_counter", 0),
                    has_fired=nd.get("has_fired", False),
                    active=nd.get("active", True),
                    spike_history=RingBuffer.from_list(
                        nd.get("spike_history", []), capacity
                    ),
                )
            )
            self._outgoing.append([])

        for sd in data.get("synapses", []):
            self._outgoing[sd["source_id"]].append(
                Synapse(
                    source_id=sd["source_id"],
                    target_id=sd["target_id"],
                    weight=sd["weight"],
                    last_weight_update=sd.get("last_weight_update", 0),
                )
            )

        self._spike_log.clear()
        for neuron_id, timestep in data.get("spike_log", []):
            self._spike_log.append(Spike(neuron_id, timestep))
