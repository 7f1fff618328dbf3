"""Penrose P3 (thick/thin rhombus) tiling, 5-fold symmetric.

Projection route: vertices are the points of Z^5 whose perpendicular-space
image falls in one of four pentagonal windows (de Bruijn's pentagrid
condition). Substitution route: Robinson-triangle deflation of a thick and
a thin rhombus.

Both routes use unit edge length.
"""
from __future__ import annotations

import cmath
import logging
import math
from collections import defaultdict
from typing import Dict, List, Sequence, Tuple

import numpy as np

from ..errors import InvalidParameter
from .base import (
    DEFAULT_TOLERANCE,
    PHI,
    PROJECTION,
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

THIN = "thin"
THICK = "thick"

# Grid phases; they must sum to zero for a true Penrose tiling, and a
# generic choice keeps every vertex off the window boundaries.
DEFAULT_PENROSE_OFFSET = (0.1, 0.23, -0.17, 0.31, -0.47)

_J = np.arange(5)
E_PAR = np.column_stack([np.cos(2 * np.pi * _J / 5), np.sin(2 * np.pi * _J / 5)])
E_PERP = np.column_stack([np.cos(4 * np.pi * _J / 5), np.sin(4 * np.pi * _J / 5)])

# Index k = sum(n_j) -> (circumradius, rotation of edge normals) of the
# pentagon slice of the rhombic icosahedron at height k.
_WINDOWS = {
    1: (1.0, math.pi / 5),
    2: (PHI, 0.0),
    3: (PHI, math.pi / 5),
    4: (1.0, 0.0),
}
_COS36 = math.cos(math.pi / 5)


def _check_offset(offset: Sequence[float], tol: float) -> np.ndarray:
    gamma = np.asarray(offset, dtype=float)
    if gamma.shape != (5,):
        raise InvalidParameter(f"offset must have 5 components, got shape {gamma.shape}")
    if abs(gamma.sum()) > tol:
        raise InvalidParameter(f"offset components must sum to 0, got {gamma.sum():g}")
    if np.any(np.abs(gamma) >= 1.0):
        raise InvalidParameter("offset components must lie in (-1, 1)")
    return gamma


def generate_penrose_projection(
    radius: float,
    *,
    offset: Sequence[float] = DEFAULT_PENROSE_OFFSET,
    tol: float = DEFAULT_TOLERANCE,
    strict: bool = False,
) -> QuasicrystalData:
    """Penrose P3 vertices within a disc of the given radius.

    A lattice point n in Z^5 is a vertex when its index k = sum(n) is in
    1..4 and sum((n_j - offset_j) * e_perp_j) lies in the window W_k.
    Points are returned sorted by distance from the origin, then angle.

    Args:
        radius: Physical-space cutoff radius (edge length is 1).
        offset: Pentagrid phases, five values summing to zero.
        tol: Window-boundary and deduplication tolerance.
        strict: Raise NumericToleranceViolation on ambiguous candidates.
    """
    radius = check_radius(radius)
    gamma = _check_offset(offset, tol)

    # A vertex at distance r comes from grid coordinate |x| <= (2/5)(r + 5(1 + max|gamma|)).
    bound = int(math.ceil(0.4 * (radius + 5.0 * (1.0 + np.abs(gamma).max())))) + 2
    axis = np.arange(-bound, bound + 1)
    base = np.stack(np.meshgrid(axis, axis, axis, axis, indexing="ij"), axis=-1).reshape(-1, 4)
    base_sum = base.sum(axis=1)

    candidates = []
    margins = []
    for k, (circumradius, rotation) in _WINDOWS.items():
        last = k - base_sum
        inside_box = np.abs(last) <= bound
        lattice = np.column_stack([base[inside_box], last[inside_box]])
        par = lattice @ E_PAR
        near = np.hypot(par[:, 0], par[:, 1]) <= radius + tol
        perp = (lattice[near] - gamma) @ E_PERP
        margins.append(
            regular_polygon_margin(perp, 5, circumradius * _COS36, rotation)
        )
        candidates.append(par[near])

    accepted, n_ambiguous = accept_window(
        np.concatenate(margins), tol=tol, strict=strict, label="Penrose",
    )
    points = np.concatenate(candidates)[accepted]
    points = sort_radially(points)
    points, _ = deduplicate_points(points, tol=tol)

    logger.info(
        f"Penrose projection: radius={radius:g}, {len(points)} vertices, "
        f"ambiguous={n_ambiguous}"
    )
    return QuasicrystalData(
        name="penrose",
        dimension=2,
        positions=points,
        generation_method=PROJECTION,
        parameters={
            "radius": radius,
            "n_points": len(points),
            "n_ambiguous": n_ambiguous,
        },
    )


# --- Substitution (Robinson triangles) ---
#
# A half-rhombus is (type, A, B, C): A is the apex, AB and AC are rhombus
# sides and BC is the diagonal shared with its mirror half (A' = B + C - A).

def _seed_triangles() -> List[Tuple[str, complex, complex, complex]]:
    """One thick and one thin rhombus, each as two mirrored halves."""
    triangles = []
    for kind, half_angle, shift in ((THICK, 3 * math.pi / 10, 0.0), (THIN, math.pi / 10, 2.0)):
        A = complex(shift, 0.0)
        B = A + cmath.rect(1.0, -half_angle)
        C = A + cmath.rect(1.0, half_angle)
        triangles.append((kind, A, B, C))
        triangles.append((kind, B + C - A, B, C))
    return triangles


def _deflate(triangles):
    result = []
    for kind, A, B, C in triangles:
        if kind == THIN:
            P = A + (B - A) / PHI
            result += [(THIN, C, P, B), (THICK, P, C, A)]
        else:
            Q = B + (A - B) / PHI
            R = B + (C - B) / PHI
            result += [(THICK, R, C, A), (THICK, Q, R, B), (THIN, R, Q, A)]
    return result


def generate_penrose_substitution(
    generations: int,
    *,
    tol: float = DEFAULT_TOLERANCE,
) -> QuasicrystalData:
    """Penrose P3 patch from Robinson-triangle deflation.

    Each generation replaces a thin half by one thin and one thick half and
    a thick half by one thin and two thick halves, so the tile count obeys
    n_{g+1} = 3 n_g - n_{g-1} and grows by phi^2 asymptotically. The patch
    is rescaled by phi^generations to keep unit edges.

    Tiles are (A, B, C) vertex-index triples; see assemble_rhombi to pair
    mirrored halves into rhombi.
    """
    generations = check_generations(generations)
    triangles = _seed_triangles()
    for g in range(generations):
        triangles = _deflate(triangles)
        logger.debug(f"Penrose deflation {g + 1}: {len(triangles)} half-rhombi")

    scale = PHI ** generations
    positions, tiles = tiles_from_vertices(
        [(A, B, C) for _, A, B, C in triangles], scale=scale, tol=tol,
    )
    tile_types = tuple(kind for kind, _, _, _ in triangles)
    n_thin = tile_types.count(THIN)

    logger.info(
        f"Penrose substitution: generations={generations}, {len(tiles)} tiles, "
        f"{len(positions)} vertices"
    )
    return QuasicrystalData(
        name="penrose",
        dimension=2,
        positions=positions,
        tiles=tiles,
        tile_types=tile_types,
        generation_method=SUBSTITUTION,
        parameters={
            "generations": generations,
            "n_tiles": len(tiles),
            "n_thin": n_thin,
            "n_thick": len(tiles) - n_thin,
            "n_points": len(positions),
            "scale": scale,
        },
    )


def assemble_rhombi(
    data: QuasicrystalData,
) -> Tuple[List[Tuple[int, int, int, int]], List[str], List[int]]:
    """Pair mirrored Robinson halves into rhombi.

    Two halves of the same type sharing the diagonal (B, C) form the rhombus
    (A, B, A', C).

    Returns:
        (rhombi, rhombus_types, unpaired) where unpaired lists the indices
        of halves on the patch boundary whose mirror is missing.
    """
    by_diagonal: Dict[Tuple[str, int, int], List[int]] = defaultdict(list)
    for i, (tile, kind) in enumerate(zip(data.tiles, data.tile_types)):
        _, b, c = tile
        by_diagonal[(kind, b, c)].append(i)

    rhombi = []
    types = []
    unpaired = []
    for (kind, b, c), members in by_diagonal.items():
        if len(members) == 2:
            a1 = data.tiles[members[0]][0]
            a2 = data.tiles[members[1]][0]
            rhombi.append((a1, b, a2, c))
            types.append(kind)
        else:
            unpaired.extend(members)
    return rhombi, types, sorted(unpaired)
