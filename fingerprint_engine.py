"""
NeuroFingerprint Engine

Single entry point used by the owning memory/record layer.  Keeps every
network under an opaque id, owns the shared concept registry, processes
text into neural encodings and compares them.

All numeric arguments and results are ints scaled by ``fixed_point.SCALE``;
passing a float raises ``TypeError``.

Usage:
    from fingerprint_engine import NeuralFingerprintEngine
    from fixed_point import SCALE

    engine = NeuralFingerprintEngine()
    net = engine.create_network("memories", 16, 4)
    engine.add_hidden_layer(net, 8, 1)
    engine.connect_layers(net, 0, 1, 0, SCALE // 2)
    engine.connect_layers(net, 1, 2, 0, SCALE // 2)
    a = engine.process_memory(net, "the quick brown fox", memory_id="m1")
    b = engine.process_memory(net, "the quick brown cat", memory_id="m2")
    print(engine.similarity(a, b))
"""

from __future__ import annotations

import logging
import threading
from dataclasses import replace
from typing import Any, Dict, Iterable, List, Optional, Union

from engine_monitoring import EventLog
from randomness import RandomnessProvider
from similarity import similarity as encoding_similarity
from snn_config import EngineConfig, load_engine_config
from snn_errors import UnknownNetwork
from spiking_network import (
    Network,
    Neuron,
    RingBuffer,
    Spike,
    StepResult,
    Synapse,
    Telemetry,
)
from text_encoder import Concept, ConceptRegistry, MemoryEncoder, NeuralEncoding

logger = logging.getLogger("neurofingerprint")

EncodingRef = Union[NeuralEncoding, str]


class NeuralFingerprintEngine:
    """Registry of networks, concepts and memory encodings.

    Args:
        config: Engine configuration (``load_engine_config()`` if None).
        rng: Randomness provider shared by all networks.  When None each
            network gets its own provider seeded with ``config.random_seed``.
    """

    def __init__(
        self,
        config: Optional[EngineConfig] = None,
        rng: Optional[RandomnessProvider] = None,
    ) -> None:
        self.config = config or load_engine_config()
        self._rng = rng

        self._networks: Dict[str, Network] = {}
        self.concepts = ConceptRegistry()
        self.encoder = MemoryEncoder(self.concepts, self.config.encoding)

        # memory_id → latest encoding; fingerprint hex → memory_id
        self._encodings: Dict[str, NeuralEncoding] = {}
        self._by_fingerprint: Dict[str, str] = {}
        self._memories_processed = 0

        self._lock = threading.Lock()
        self.event_log = EventLog(self.config.monitoring)

    # -----------------------------------------------------------------------
    # Networks
    # -----------------------------------------------------------------------

    def network(self, network_id: str) -> Network:
        """Return the network registered under ``network_id``."""
        net = self._networks.get(network_id)
        if net is None:
            raise UnknownNetwork(f"Network {network_id!r} not found")
        return net

    def _provider(self) -> RandomnessProvider:
        return self._rng or RandomnessProvider(self.config.random_seed)

    def create_network(self, name: str, input_count: int, output_count: int) -> str:
        """Create a two-layer network and return its id."""
        net = Network(
            name,
            input_count,
            output_count,
            config=self.config,
            rng=self._provider(),
        )
        with self._lock:
            self._networks[net.network_id] = net
        self.event_log.log_event(
            "network_created",
            {"network_id": net.network_id, "name": name,
             "inputs": input_count, "outputs": output_count},
        )
        return net.network_id

    def add_hidden_layer(self, network_id: str, count: int, position: int) -> List[int]:
        return self.network(network_id).add_hidden_layer(count, position)

    def create_synapse(
        self, network_id: str, source: int, target: int, weight: int
    ) -> Synapse:
        return self.network(network_id).create_synapse(source, target, weight)

    def connect_layers(
        self,
        network_id: str,
        source_layer: int,
        target_layer: int,
        min_weight: int,
        max_weight: int,
    ) -> int:
        return self.network(network_id).connect_layers(
            source_layer, target_layer, min_weight, max_weight
        )

    def set_inputs(self, network_id: str, values: Iterable[int]) -> None:
        self.network(network_id).set_inputs(list(values))

    def step(self, network_id: str) -> StepResult:
        return self.network(network_id).step()

    def step_n(self, network_id: str, n: int) -> List[StepResult]:
        return self.network(network_id).step_n(n)

    def set_learning_enabled(self, network_id: str, enabled: bool) -> None:
        self.network(network_id).set_learning_enabled(enabled)

    def recent_spikes(self, network_id: str, max_count: int) -> List[Spike]:
        return self.network(network_id).recent_spikes(max_count)

    def outputs(self, network_id: str) -> List[int]:
        return self.network(network_id).outputs()

    def neuron(self, network_id: str, neuron_id: int) -> Neuron:
        """Snapshot of a neuron; changing it does not affect the network."""
        net = self.network(network_id)
        with net.lock:
            n = net.neuron(neuron_id)
            return replace(
                n,
                spike_history=RingBuffer.from_list(
                    n.spike_history.to_list(), n.spike_history.capacity
                ),
            )

    def synapses(self, network_id: str, neuron_id: int) -> List[Synapse]:
        """Snapshots of a neuron's outgoing synapses."""
        net = self.network(network_id)
        with net.lock:
            return [replace(s) for s in net.synapses(neuron_id)]

    def telemetry(self, network_id: str) -> Telemetry:
        return self.network(network_id).get_telemetry()

    # -----------------------------------------------------------------------
    # Concepts
    # -----------------------------------------------------------------------

    def register_concept(
        self, name: str, neuron_ids: Iterable[int], threshold: int
    ) -> int:
        """Register a concept shared by all networks; returns its id."""
        with self._lock:
            return self.concepts.register(name, neuron_ids, threshold)

    def get_concept(self, concept_id: int) -> Concept:
        return self.concepts.get(concept_id)

    def activated_concepts(self, encoding: EncodingRef) -> List[int]:
        """Ids of the concepts an encoding activated."""
        return self.concepts.activated(self._resolve(encoding).concept_activations)

    # -----------------------------------------------------------------------
    # Memories
    # -----------------------------------------------------------------------

    def process_memory(
        self,
        network_id: str,
        text: str,
        memory_id: Optional[str] = None,
    ) -> NeuralEncoding:
        """Run *text* through a network and store the resulting encoding.

        Reprocessing a ``memory_id`` replaces its previous encoding.  Without
        a ``memory_id`` the encoding is stored under its fingerprint.
        """
        net = self.network(network_id)
        encoding = self.encoder.process(net, text)
        key = memory_id or encoding.fingerprint_hex

        with self._lock:
            previous = self._encodings.get(key)
            if previous is not None:
                self._by_fingerprint.pop(previous.fingerprint_hex, None)
            self._encodings[key] = encoding
            self._by_fingerprint[encoding.fingerprint_hex] = key
            self._memories_processed += 1

        self.event_log.log_event(
            "memory_processed",
            {
                "memory_id": key,
                "network_id": network_id,
                "fingerprint": encoding.fingerprint_hex,
                "activated_neurons": list(encoding.activated_neurons),
                "neuroplasticity_score": encoding.neuroplasticity_score,
                "timestep": encoding.last_processed,
            },
        )
        return encoding

    def get_encoding(self, memory_id: str) -> Optional[NeuralEncoding]:
        return self._encodings.get(memory_id)

    def find_by_fingerprint(self, fingerprint: Union[bytes, str]) -> Optional[str]:
        """Memory id whose latest encoding has this fingerprint, if any."""
        key = fingerprint.hex() if isinstance(fingerprint, bytes) else fingerprint
        return self._by_fingerprint.get(key.lower())

    def _resolve(self, encoding: EncodingRef) -> NeuralEncoding:
        if isinstance(encoding, NeuralEncoding):
            return encoding
        found = self._encodings.get(encoding)
        if found is None:
            raise KeyError(f"No encoding for memory {encoding!r}")
        return found

    def similarity(self, a: EncodingRef, b: EncodingRef) -> int:
        """Similarity score in ``[0, 100]`` of two encodings or memory ids."""
        return encoding_similarity(self._resolve(a), self._resolve(b))

    # -----------------------------------------------------------------------
    # Persistence
    # -----------------------------------------------------------------------

    def checkpoint_network(self, network_id: str, path: str) -> None:
        self.network(network_id).checkpoint(path)
        self.event_log.log_event(
            "checkpoint_saved", {"network_id": network_id, "path": path}
        )

    def load_network(self, path: str, network_id: Optional[str] = None) -> str:
        """Register a network restored from a checkpoint; returns its id."""
        net = Network.from_checkpoint(path, rng=self._provider(), network_id=network_id)
        with self._lock:
            self._networks[net.network_id] = net
        logger.info("Loaded network %s from %s", net.network_id, path)
        return net.network_id

    # -----------------------------------------------------------------------
    # Stats
    # -----------------------------------------------------------------------

    def stats(self) -> Dict[str, Any]:
        """Summary counts across all networks."""
        networks = list(self._networks.values())
        return {
            "networks": len(networks),
            "neurons": sum(n.neuron_count for n in networks),
            "synapses": sum(len(n.all_synapses()) for n in networks),
            "learning_networks": sum(1 for n in networks if n.learning_enabled),
            "concepts": len(self.concepts),
            "encodings": len(self._encodings),
            "memories_processed": self._memories_processed,
        }
