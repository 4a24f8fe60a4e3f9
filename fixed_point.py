"""
Fixed-point arithmetic for the spiking network.

Real numbers are carried as Python ints scaled by ``SCALE`` (10**18).  All
neuron potentials, thresholds, synapse weights and concept activations use
this representation; floats never enter the simulation.

Division truncates toward zero and every result is checked against the
signed 256-bit range, so values computed here match a 256-bit integer
machine bit for bit.

Usage::

    from fixed_point import SCALE, mul, div, exp_decay

    half = SCALE // 2
    mul(half, half)            # 0.25 * SCALE
    exp_decay(SCALE, 5 * SCALE)  # ~e^-0.2
"""

from __future__ import annotations

from typing import Any

from snn_errors import DivisionByZero, FixedPointOverflow

SCALE: int = 10 ** 18

INT256_MAX: int = 2 ** 255 - 1
INT256_MIN: int = -(2 ** 255)

# Beyond this input the truncated series diverges; treat as fully decayed.
EXP_DECAY_CUTOFF: int = 100 * SCALE
EXP_DECAY_TERMS: int = 6


def checked(value: int) -> int:
    """Return *value* unchanged, raising if it leaves the int256 range."""
    if value > INT256_MAX or value < INT256_MIN:
        raise FixedPointOverflow(f"Fixed-point overflow: {value}")
    return value


def require_int(value: Any, name: str = "value") -> int:
    """Reject anything that is not a plain int (floats and bools included)."""
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeError(f"{name} must be an int, got {type(value).__name__}")
    return value


def require_fixed(value: Any, name: str = "value") -> int:
    """Like ``require_int``, for values carrying the fixed-point scale."""
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeError(
            f"{name} must be a fixed-point int scaled by {SCALE}, "
            f"got {type(value).__name__}"
        )
    return value


def tdiv(a: int, b: int) -> int:
    """Integer division truncating toward zero."""
    if b == 0:
        raise DivisionByZero("Fixed-point division by zero")
    q = abs(a) // abs(b)
    return q if (a >= 0) == (b > 0) else -q


def mul(a: int, b: int) -> int:
    """``a * b / SCALE``."""
    return checked(tdiv(checked(a * b), SCALE))


def div(a: int, b: int) -> int:
    """``a * SCALE / b``; raises ``DivisionByZero`` when ``b == 0``."""
    if b == 0:
        raise DivisionByZero("Fixed-point division by zero")
    return checked(tdiv(checked(a * SCALE), b))


def from_fraction(numerator: int, denominator: int) -> int:
    """Fixed-point value of ``numerator / denominator``."""
    return div(numerator, denominator)


def to_float(value: int) -> float:
    """Approximate float for display and logging only."""
    return value / SCALE


def exp_decay(x: int, tau: int) -> int:
    """Approximate ``e^(-x/tau)`` with six Taylor terms.

    With ``u = x / tau``::

        1 - u + u^2/2! - u^3/3! + u^4/4! - u^5/5! + u^6/6!

    Inputs at or below zero give ``SCALE`` (no decay); inputs at or above
    ``100 * SCALE`` give 0.  The result is clamped to be non-negative.  The
    polynomial is only decreasing for ``u`` up to roughly 2.2; past that the
    last even term dominates and the value grows again.
    """
    if x <= 0:
        return SCALE
    if x >= EXP_DECAY_CUTOFF:
        return 0

    u = div(x, tau)
    result = SCALE
    term = SCALE
    for i in range(1, EXP_DECAY_TERMS + 1):
        term = tdiv(checked(term * u), i * SCALE)
        if i % 2 == 1:
            result -= term
        else:
            result += term

    return checked(max(result, 0))
