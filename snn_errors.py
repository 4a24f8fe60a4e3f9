"""
Error kinds raised by the NeuroFingerprint engine.

Every failure is a caller error: a bad argument or an unknown id.  The
engine never retries, and an operation that raises leaves the network
untouched.  Each class also derives from the builtin exception a Python
caller would expect, so ``except KeyError`` keeps working for lookups.
"""

from __future__ import annotations


class SNNError(Exception):
    """Base class for all engine errors."""


class InvalidTopology(SNNError, ValueError):
    """Bad neuron/layer counts, non-feed-forward synapse, or a cap exceeded."""


class InvalidNeuron(SNNError, ValueError):
    """Neuron id outside ``[0, neuron_count)``."""


class WeightOutOfRange(SNNError, ValueError):
    """Synapse weight magnitude above the configured maximum."""


class InputSizeMismatch(SNNError, ValueError):
    """Input vector length differs from the network's input count."""


class ConceptVectorMismatch(SNNError, ValueError):
    """Two encodings carry concept vectors of different lengths."""


class DivisionByZero(SNNError, ZeroDivisionError):
    """Fixed-point division by zero."""


class FixedPointOverflow(SNNError, OverflowError):
    """Fixed-point result outside the signed 256-bit range."""


class UnknownNetwork(SNNError, KeyError):
    """No network registered under the given id."""


class UnknownConcept(SNNError, KeyError):
    """No concept registered under the given id."""
