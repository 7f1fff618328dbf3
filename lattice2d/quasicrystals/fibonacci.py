"""Fibonacci chain: the 1D quasicrystal with long (L) and short (S) spacings.

Two routes produce the same class of chain:
  - substitution: rewrite L -> LS, S -> L starting from 'L';
  - projection: cut Z^2 with a strip of slope 1/phi and project the lattice
    points inside the strip onto the line.
Long spacing is 1 and short spacing 1/phi in both routes.
"""
from __future__ import annotations

import logging
import math

import numpy as np

from ..errors import InvalidParameter
from .base import (
    DEFAULT_TOLERANCE,
    PHI,
    PROJECTION,
    SUBSTITUTION,
    QuasicrystalData,
    accept_window,
    check_count,
    check_generations,
    deduplicate_points,
)

logger = logging.getLogger(__name__)

LONG = 1.0
SHORT = 1.0 / PHI

_SUBSTITUTION_RULES = {"L": "LS", "S": "L"}

# Physical direction has slope 1/phi: tan(theta) = 1/phi.
_NORM = math.sqrt(1.0 + PHI ** 2)
COS_THETA = PHI / _NORM
SIN_THETA = 1.0 / _NORM


def fibonacci_number(k: int) -> int:
    """F_k with F_0 = 0, F_1 = F_2 = 1."""
    if k < 0:
        raise InvalidParameter(f"k must be >= 0, got {k}")
    a, b = 0, 1
    for _ in range(k):
        a, b = b, a + b
    return a


def fibonacci_word(generations: int) -> str:
    """Symbol sequence after applying L -> LS, S -> L to 'L' generations times.

    Its length is fibonacci_number(generations + 2).
    """
    generations = check_generations(generations)
    word = "L"
    for _ in range(generations):
        word = "".join(_SUBSTITUTION_RULES[c] for c in word)
    return word


def generate_fibonacci_substitution(generations: int) -> QuasicrystalData:
    """Fibonacci chain from the substitution rule.

    One point per symbol, at the left end of its segment: the chain starts
    at 0 and advances by LONG for 'L' and SHORT for 'S'.
    """
    generations = check_generations(generations)
    word = fibonacci_word(generations)
    steps = np.array([LONG if c == "L" else SHORT for c in word])
    positions = np.concatenate([[0.0], np.cumsum(steps)[:-1]])

    n_long = word.count("L")
    logger.info(
        f"Fibonacci substitution: generations={generations}, "
        f"length={len(word)} (L={n_long}, S={len(word) - n_long})"
    )
    return QuasicrystalData(
        name="fibonacci",
        dimension=1,
        positions=positions[:, None],
        generation_method=SUBSTITUTION,
        parameters={
            "generations": generations,
            "sequence_length": len(word),
            "n_points": len(word),
            "n_long": n_long,
            "n_short": len(word) - n_long,
        },
    )


def generate_fibonacci_projection(
    n: int,
    *,
    tol: float = DEFAULT_TOLERANCE,
    strict: bool = False,
) -> QuasicrystalData:
    """First n points (x >= 0) of the cut-and-project Fibonacci chain.

    Z^2 points (m, k) are kept when their perpendicular coordinate
    -m*sin(theta) + k*cos(theta) lies in the window of width
    cos(theta) + sin(theta) centred on 0, the projection of the unit
    square. Unit steps in m and k then project to LONG and SHORT.

    Args:
        n: Number of points to return.
        tol: Window-boundary and deduplication tolerance.
        strict: Raise NumericToleranceViolation on ambiguous candidates.
    """
    n = check_count("n", n)
    half_width = 0.5 * (COS_THETA + SIN_THETA)

    # Every m >= 1 contributes a point with x > 0, so m <= n + 3 is enough.
    m = np.arange(-2, n + 4)
    k0 = np.floor((m * SIN_THETA - half_width) / COS_THETA).astype(np.int64)
    mm = np.repeat(m, 4)
    kk = (k0[:, None] + np.arange(4)).ravel()

    perp = -mm * SIN_THETA + kk * COS_THETA
    accepted, n_ambiguous = accept_window(
        half_width - np.abs(perp), tol=tol, strict=strict, label="Fibonacci",
    )
    par = (mm * COS_THETA + kk * SIN_THETA)[accepted]
    par = par[par >= -tol]
    par = np.sort(par, kind="stable")[:n] / COS_THETA

    points, _ = deduplicate_points(par[:, None], tol=tol)
    logger.info(f"Fibonacci projection: {len(points)} points, ambiguous={n_ambiguous}")
    return QuasicrystalData(
        name="fibonacci",
        dimension=1,
        positions=points,
        generation_method=PROJECTION,
        parameters={
            "n_points": len(points),
            "window_width": 2.0 * half_width,
            "n_ambiguous": n_ambiguous,
        },
    )
