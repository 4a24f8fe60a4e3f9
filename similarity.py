"""Similarity between two neural encodings.

Score in ``[0, 100]``: 70% concept-activation closeness, 30% overlap of the
activated neuron sets.  Symmetric in its arguments.
"""

from __future__ import annotations

from typing import Sequence

import numpy as np

from fixed_point import SCALE
from snn_errors import ConceptVectorMismatch
from text_encoder import NeuralEncoding

CONCEPT_WEIGHT = 70
NEURON_WEIGHT = 30


def neuron_similarity(a: Sequence[int], b: Sequence[int]) -> int:
    """``overlap * 100 / avg(|a|, |b|)`` over distinct neuron ids."""
    set_a = np.unique(np.asarray(a, dtype=np.int64))
    set_b = np.unique(np.asarray(b, dtype=np.int64))
    avg_size = (set_a.size + set_b.size) // 2
    if avg_size == 0:
        return 0
    overlap = np.intersect1d(set_a, set_b, assume_unique=True).size
    return int(overlap * 100 // avg_size)


def concept_similarity(a: Sequence[int], b: Sequence[int]) -> int:
    """``100 - avg|a_i - b_i| * 100 / SCALE``, 0 once the average exceeds 1.0.

    Empty vectors are identical (100).
    """
    if len(a) != len(b):
        raise ConceptVectorMismatch(
            f"Concept vectors differ in length ({len(a)} vs {len(b)})"
        )
    if not a:
        return 100
    avg_diff = sum(abs(x - y) for x, y in zip(a, b)) // len(a)
    if avg_diff > SCALE:
        return 0
    return 100 - avg_diff * 100 // SCALE


def similarity(a: NeuralEncoding, b: NeuralEncoding) -> int:
    """Weighted similarity score of two encodings."""
    concept_score = concept_similarity(a.concept_activations, b.concept_activations)
    neuron_score = neuron_similarity(a.activated_neurons, b.activated_neurons)
    return (concept_score * CONCEPT_WEIGHT + neuron_score * NEURON_WEIGHT) // 100
