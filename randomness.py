"""Seeded randomness provider.

Topology construction draws neuron polarities and initial weights from here
so that a given seed always rebuilds the same network.  Each named stream
gets its own numpy ``Generator`` derived from the base seed, so drawing from
one stream never shifts another.
"""

from __future__ import annotations

import hashlib
from typing import Dict

import numpy as np


def _derive_seed(base_seed: int, name: str) -> int:
    payload = f"{base_seed}:{name}".encode("utf-8")
    digest = hashlib.sha256(payload).digest()
    return int.from_bytes(digest[:8], "big")


class RandomnessProvider:
    """Factory of named, independently seeded integer streams."""

    def __init__(self, seed: int = 0) -> None:
        self.seed = seed
        self._streams: Dict[str, np.random.Generator] = {}

    def stream(self, name: str) -> np.random.Generator:
        """Return the cached generator for *name*."""
        if name not in self._streams:
            self._streams[name] = np.random.default_rng(_derive_seed(self.seed, name))
        return self._streams[name]

    def percent(self, name: str) -> int:
        """Uniform int in ``[0, 100)``."""
        return int(self.stream(name).integers(0, 100))

    def randint(self, name: str, low: int, high: int) -> int:
        """Uniform int in ``[low, high]``, exact for arbitrarily large bounds."""
        if high < low:
            raise ValueError(f"Empty range [{low}, {high}]")
        span = high - low
        if span == 0:
            return low
        # Fixed-point bounds overflow int64; compose from 32-bit draws.
        words = span.bit_length() // 32 + 2
        raw = 0
        for w in self.stream(name).integers(0, 2 ** 32, size=words, dtype=np.uint64):
            raw = (raw << 32) | int(w)
        return low + raw % (span + 1)
