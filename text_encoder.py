"""
Text encoder, concept registry and neural fingerprints.

Turns a piece of text into a ``NeuralEncoding``: the text's leading bytes
become input potentials, the network runs for a fixed number of steps, and
the spikes it produces are summarised as activated neurons, per-concept
activations and a SHA3-256 fingerprint.

Usage::

    registry = ConceptRegistry()
    registry.register("greeting", [16, 17], SCALE // 2)
    encoder = MemoryEncoder(registry)
    encoding = encoder.process(network, "hello")
"""

from __future__ import annotations

import hashlib
import logging
from dataclasses import dataclass
from typing import Iterable, List, Optional, Sequence, Tuple

from fixed_point import SCALE, require_fixed, tdiv
from snn_config import EncodingConfig
from snn_errors import UnknownConcept
from spiking_network import Network

logger = logging.getLogger("neurofingerprint.encoder")

PRINTABLE_MIN = 32
PRINTABLE_SPAN = 94  # 32..126

MAX_NEUROPLASTICITY_SCORE = 100
SCORE_PER_NEURON = 10


def text_to_inputs(text: str, width: int = 16) -> List[int]:
    """Map the first ``width`` UTF-8 bytes of *text* to fixed-point inputs.

    Each byte becomes ``(byte - 32) * SCALE / 94`` so printable ASCII spans
    ``[0, SCALE]``; positions past the end of the text are zero.
    """
    data = text.encode("utf-8")[:width]
    inputs = [tdiv((b - PRINTABLE_MIN) * SCALE, PRINTABLE_SPAN) for b in data]
    inputs.extend([0] * (width - len(inputs)))
    return inputs


# ---------------------------------------------------------------------------
# Concepts
# ---------------------------------------------------------------------------

@dataclass
class Concept:
    """Named cluster of neuron ids with an activation threshold.

    Attributes:
        concept_id: Index into every encoding's concept activation vector.
        name: Label.
        associated_neurons: Neuron ids that make up the concept.
        activation_threshold: Fixed-point activation needed to count as active.
        last_activated: Time step of the last run that activated it.
    """

    concept_id: int
    name: str
    associated_neurons: frozenset
    activation_threshold: int
    last_activated: Optional[int] = None


class ConceptRegistry:
    """Registered concepts, in registration order.

    Concepts are shared by every network; an encoding's concept vector has
    one entry per concept registered at processing time.
    """

    def __init__(self) -> None:
        self._concepts: List[Concept] = []

    def __len__(self) -> int:
        return len(self._concepts)

    def __iter__(self):
        return iter(self._concepts)

    def register(
        self, name: str, neuron_ids: Iterable[int], threshold: int
    ) -> int:
        """Register a concept and return its id."""
        require_fixed(threshold, "threshold")
        ids = frozenset(neuron_ids)
        for nid in ids:
            if isinstance(nid, bool) or not isinstance(nid, int) or nid < 0:
                raise ValueError(f"Invalid neuron id {nid!r} for concept {name!r}")
        concept = Concept(
            concept_id=len(self._concepts),
            name=name,
            associated_neurons=ids,
            activation_threshold=threshold,
        )
        self._concepts.append(concept)
        logger.info("Registered concept %d (%r) over %d neurons", concept.concept_id, name, len(ids))
        return concept.concept_id

    def get(self, concept_id: int) -> Concept:
        if not isinstance(concept_id, int) or not 0 <= concept_id < len(self._concepts):
            raise UnknownConcept(f"Concept {concept_id!r} not found")
        return self._concepts[concept_id]

    def compute_activations(
        self,
        activated_neurons: Sequence[int],
        output0: int,
        blend_percent: int = 20,
    ) -> List[int]:
        """Activation of every concept for one run.

        ``overlap * SCALE / |associated|`` blended with the first output's
        potential: ``(activation * (100 - p) + output0 * p) / 100``.
        """
        active = set(activated_neurons)
        activations = []
        for concept in self._concepts:
            size = len(concept.associated_neurons)
            if size:
                overlap = len(active & concept.associated_neurons)
                activation = tdiv(overlap * SCALE, size)
            else:
                activation = 0
            activations.append(
                tdiv(activation * (100 - blend_percent) + output0 * blend_percent, 100)
            )
        return activations

    def activated(self, concept_activations: Sequence[int]) -> List[int]:
        """Ids of the concepts whose activation reached their threshold."""
        return [
            concept.concept_id
            for concept, activation in zip(self._concepts, concept_activations)
            if activation >= concept.activation_threshold
        ]

    def mark_activated(self, concept_activations: Sequence[int], timestep: int) -> None:
        for concept_id in self.activated(concept_activations):
            self._concepts[concept_id].last_activated = timestep


# ---------------------------------------------------------------------------
# Encodings
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class NeuralEncoding:
    """Activation summary of one processing run.

    Attributes:
        network_id: Network the text was run through.
        activated_neurons: Distinct spiking neurons, in order of first spike.
        concept_activations: One fixed-point activation per concept.
        last_processed: Network time step at the end of the run.
        neuroplasticity_score: ``min(10 * len(activated_neurons), 100)``.
        fingerprint: 32-byte digest of text, activations and time step.
    """

    network_id: str
    activated_neurons: Tuple[int, ...]
    concept_activations: Tuple[int, ...]
    last_processed: int
    neuroplasticity_score: int
    fingerprint: bytes

    @property
    def fingerprint_hex(self) -> str:
        return self.fingerprint.hex()


def _word(value: int) -> bytes:
    return value.to_bytes(32, "big", signed=True)


def compute_fingerprint(
    text: str,
    activated_neurons: Sequence[int],
    concept_activations: Sequence[int],
    timestep: int,
) -> bytes:
    """SHA3-256 over the text bytes followed by 32-byte big-endian words.

    Order-sensitive in both sequences.  The time step is part of the digest,
    so the same text gives a new fingerprint on every run.
    """
    h = hashlib.sha3_256()
    h.update(text.encode("utf-8"))
    for nid in activated_neurons:
        h.update(_word(nid))
    for activation in concept_activations:
        h.update(_word(activation))
    h.update(_word(timestep))
    return h.digest()


class MemoryEncoder:
    """Drives a network with text and reads back a ``NeuralEncoding``.

    Args:
        concepts: Registry used for concept activations.
        config: Encoding parameters (defaults if None).
    """

    def __init__(
        self,
        concepts: ConceptRegistry,
        config: Optional[EncodingConfig] = None,
    ) -> None:
        self.concepts = concepts
        self.config = config or EncodingConfig()

    def process(self, network: Network, text: str) -> NeuralEncoding:
        """Run *text* through *network* and summarise the result.

        Sets the inputs, runs ``processing_steps`` steps, and keeps the last
        ``max_spikes`` spikes of the run.
        """
        cfg = self.config
        inputs = text_to_inputs(text, cfg.input_width)

        with network.lock:
            start = network.timestep
            network.set_inputs(inputs)
            network.step_n(cfg.processing_steps)
            spikes = network.spikes_since(start)[-cfg.max_spikes:]
            outputs = network.outputs()
            timestep = network.timestep

        activated = list(dict.fromkeys(s.neuron_id for s in spikes))
        activations = self.concepts.compute_activations(
            activated, outputs[0], cfg.output_blend_percent
        )
        self.concepts.mark_activated(activations, timestep)

        encoding = NeuralEncoding(
            network_id=network.network_id,
            activated_neurons=tuple(activated),
            concept_activations=tuple(activations),
            last_processed=timestep,
            neuroplasticity_score=min(
                len(activated) * SCORE_PER_NEURON, MAX_NEUROPLASTICITY_SCORE
            ),
            fingerprint=compute_fingerprint(text, activated, activations, timestep),
        )
        logger.debug(
            "Processed %d chars on network %s: %d neurons activated, fingerprint %s",
            len(text), network.network_id, len(activated), encoding.fingerprint_hex[:16],
        )
        return encoding
