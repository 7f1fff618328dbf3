"""Ammann-Beenker tiling: squares and 45-degree rhombi, 8-fold symmetric.

Projection route: Z^4 points whose perpendicular image lies in the regular
octagon obtained by projecting the unit 4-cube. Substitution route:
inflation by the silver ratio 1 + sqrt(2) over rhombi and half-squares.

Both routes use unit edge length.
"""
from __future__ import annotations

import cmath
import logging
import math
from typing import Sequence

import numpy as np

from ..errors import InvalidParameter
from .base import (
    DEFAULT_TOLERANCE,
    PROJECTION,
    SILVER,
    SUBSTITUTION,
    QuasicrystalData,
    accept_window,
    check_generations,
    check_radius,
    deduplicate_points,
    regular_polygon_margin,
    sort_radially,
    tiles_from_vertices,
)

logger = logging.getLogger(__name__)

RHOMBUS = "rhombus"
TRIANGLE = "triangle"

DEFAULT_AMMANN_BEENKER_OFFSET = (0.13, 0.29, -0.21, 0.37)

_J = np.arange(4)
E_PAR = np.column_stack([np.cos(np.pi * _J / 4), np.sin(np.pi * _J / 4)])
E_PERP = np.column_stack([np.cos(3 * np.pi * _J / 4), np.sin(3 * np.pi * _J / 4)])

# Octagon = sum of the segments [0, e_perp_j]: centred at half their sum,
# edge length 1, edge normals every 45 degrees.
WINDOW_CENTER = 0.5 * E_PERP.sum(axis=0)
WINDOW_APOTHEM = 0.5 * SILVER


def generate_ammann_beenker_projection(
    radius: float,
    *,
    offset: Sequence[float] = DEFAULT_AMMANN_BEENKER_OFFSET,
    tol: float = DEFAULT_TOLERANCE,
    strict: bool = False,
) -> QuasicrystalData:
    """Ammann-Beenker vertices within a disc of the given radius.

    A lattice point n in Z^4 is a vertex when sum((n_j - offset_j) *
    e_perp_j) lies in the octagonal window. Points are returned sorted by
    distance from the origin, then angle.

    Args:
        radius: Physical-space cutoff radius (edge length is 1).
        offset: Grid phases, four values in (-1, 1).
        tol: Window-boundary and deduplication tolerance.
        strict: Raise NumericToleranceViolation on ambiguous candidates.
    """
    radius = check_radius(radius)
    gamma = np.asarray(offset, dtype=float)
    if gamma.shape != (4,):
        raise InvalidParameter(f"offset must have 4 components, got shape {gamma.shape}")
    if np.any(np.abs(gamma) >= 1.0):
        raise InvalidParameter("offset components must lie in (-1, 1)")

    # A vertex at distance r comes from grid coordinate |x| <= (r + 4(1 + max|gamma|)) / 2.
    bound = int(math.ceil(0.5 * (radius + 4.0 * (1.0 + np.abs(gamma).max())))) + 2
    axis = np.arange(-bound, bound + 1)
    lattice = np.stack(np.meshgrid(axis, axis, axis, axis, indexing="ij"), axis=-1).reshape(-1, 4)

    par = lattice @ E_PAR
    near = np.hypot(par[:, 0], par[:, 1]) <= radius + tol
    perp = (lattice[near] - gamma) @ E_PERP
    margin = regular_polygon_margin(perp, 8, WINDOW_APOTHEM, 0.0, center=WINDOW_CENTER)

    accepted, n_ambiguous = accept_window(margin, tol=tol, strict=strict, label="Ammann-Beenker")
    points = sort_radially(par[near][accepted])
    points, _ = deduplicate_points(points, tol=tol)

    logger.info(
        f"Ammann-Beenker projection: radius={radius:g}, {len(points)} vertices, "
        f"ambiguous={n_ambiguous}"
    )
    return QuasicrystalData(
        name="ammann_beenker",
        dimension=2,
        positions=points,
        generation_method=PROJECTION,
        parameters={
            "radius": radius,
            "n_points": len(points),
            "n_ambiguous": n_ambiguous,
        },
    )


# --- Substitution ---
#
# Rhombus (O, P, Q, R): acute (45 degree) corners at O and Q.
# Half-square (U, V, W): right angle at V. Edges carry the orientation that
# decides where the unit piece of an inflated edge goes: rhombus sides put it
# at the acute corner, leg UV at V and leg VW at W. The hypotenuse splits
# symmetrically (1, sqrt2, 1).

_SQRT2 = math.sqrt(2.0)
_K = 2.0 - _SQRT2         # sqrt2 / silver
_H = 0.5 * _K             # (sqrt2 / 2) / silver
_C = 0.5 * _SQRT2


def _seed_tiles():
    """A 45-degree rhombus with a square (two halves) glued under its base."""
    O, P = 0j, 1 + 0j
    R = cmath.rect(1.0, math.pi / 4)
    return [
        (RHOMBUS, (O, P, P + R - O, R)),
        (TRIANGLE, (1 - 1j, P, O)),
        (TRIANGLE, (1 - 1j, -1j, O)),
    ]


def _inflate_rhombus(O, P, Q, R):
    p = (P - O) / SILVER
    r = (R - O) / SILVER
    E0, E1 = O + p, O + r
    M1, M2 = O + p + r, Q - p - r
    Qp, Qr = Q - p, Q - r
    return [
        (RHOMBUS, (O, E0, M1, E1)),
        (RHOMBUS, (Q, Qp, M2, Qr)),
        (RHOMBUS, (P, M2, R, M1)),
        (TRIANGLE, (E0, M1, P)),
        (TRIANGLE, (E1, M1, R)),
        (TRIANGLE, (Qp, M2, R)),
        (TRIANGLE, (Qr, M2, P)),
    ]


def _inflate_triangle(U, V, W):
    def at(px, py):
        return U + px * (V - U) + py * (W - V)

    X1, Y1 = at(_K, 0.0), at(1.0, _K)
    D1, D2 = at(_H, _H), at(_C, _C)
    M = at(_C, _H)
    return [
        (RHOMBUS, (W, Y1, M, D2)),
        (RHOMBUS, (V, M, D1, X1)),
        (TRIANGLE, (Y1, M, V)),
        (TRIANGLE, (D2, M, D1)),
        (TRIANGLE, (X1, D1, U)),
    ]


def _inflate(tiles):
    result = []
    for kind, vertices in tiles:
        if kind == RHOMBUS:
            result += _inflate_rhombus(*vertices)
        else:
            result += _inflate_triangle(*vertices)
    return result


def generate_ammann_beenker_substitution(
    generations: int,
    *,
    tol: float = DEFAULT_TOLERANCE,
) -> QuasicrystalData:
    """Ammann-Beenker patch from silver-ratio inflation.

    A rhombus becomes 3 rhombi + 4 half-squares and a half-square becomes
    2 rhombi + 3 half-squares, so n_{g+1} = 6 n_g - n_{g-1} and the count
    grows by (1 + sqrt2)^2 asymptotically. The patch is rescaled by
    (1 + sqrt2)^generations to keep unit edges.

    Tiles are (O, P, Q, R) rhombi with acute corners O, Q and (U, V, W)
    half-squares with the right angle at V.
    """
    generations = check_generations(generations)
    tiles = _seed_tiles()
    for g in range(generations):
        tiles = _inflate(tiles)
        logger.debug(f"Ammann-Beenker inflation {g + 1}: {len(tiles)} tiles")

    scale = SILVER ** generations
    positions, index_tiles = tiles_from_vertices(
        [vertices for _, vertices in tiles], scale=scale, tol=tol,
    )
    tile_types = tuple(kind for kind, _ in tiles)
    n_rhombi = tile_types.count(RHOMBUS)

    logger.info(
        f"Ammann-Beenker substitution: generations={generations}, "
        f"{len(index_tiles)} tiles, {len(positions)} vertices"
    )
    return QuasicrystalData(
        name="ammann_beenker",
        dimension=2,
        positions=positions,
        tiles=index_tiles,
        tile_types=tile_types,
        generation_method=SUBSTITUTION,
        parameters={
            "generations": generations,
            "n_tiles": len(index_tiles),
            "n_rhombi": n_rhombi,
            "n_triangles": len(index_tiles) - n_rhombi,
            "n_points": len(positions),
            "scale": scale,
        },
    )
