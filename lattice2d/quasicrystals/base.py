"""Shared data type and numerics for quasicrystal generation.

Both generation routes (cut-and-project and substitution) return a
QuasicrystalData. Coincident points are merged with a fixed tolerance, and
points sitting on an acceptance-window boundary are reported rather than
silently dropped.
"""
from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, List, Mapping, Optional, Sequence, Tuple

import networkx as nx
import numpy as np
from scipy.constants import golden
from scipy.sparse import coo_matrix
from scipy.sparse.csgraph import connected_components
from scipy.spatial import cKDTree

from ..errors import InvalidParameter, NumericToleranceViolation

logger = logging.getLogger(__name__)

DEFAULT_TOLERANCE = 1e-10
PHI = golden
SILVER = 1.0 + math.sqrt(2.0)

PROJECTION = "projection"
SUBSTITUTION = "substitution"
GENERATION_METHODS = (PROJECTION, SUBSTITUTION)

# Per-type tile counts kept in step with tile_types by QuasicrystalData.trim.
TILE_COUNT_KEYS = {
    "n_thin": "thin",
    "n_thick": "thick",
    "n_rhombi": "rhombus",
    "n_triangles": "triangle",
}
CANDIDATE_COUNT_KEYS = ("n_ambiguous",)


@dataclass(frozen=True, eq=False)
class QuasicrystalData:
    """An aperiodic point set, optionally with tiles.

    Attributes:
        name: Structure family ('fibonacci', 'penrose', 'ammann_beenker').
        dimension: Physical embedding dimension (1 or 2).
        positions: (n_points, dimension) read-only coordinates.
        tiles: Vertex-index tuples into positions, one per tile.
        tile_types: Label of each tile (empty when tiles is empty).
        generation_method: 'projection' or 'substitution'.
        parameters: Read-only mapping of scalars recording how the structure
            was produced.
    """
    name: str
    dimension: int
    positions: np.ndarray
    tiles: Tuple[Tuple[int, ...], ...] = ()
    tile_types: Tuple[str, ...] = ()
    generation_method: str = PROJECTION
    parameters: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        if self.dimension not in (1, 2):
            raise InvalidParameter(f"dimension must be 1 or 2, got {self.dimension}")
        if self.generation_method not in GENERATION_METHODS:
            raise InvalidParameter(
                f"generation_method must be one of {GENERATION_METHODS}, "
                f"got {self.generation_method!r}"
            )
        positions = np.array(self.positions, dtype=float).reshape(-1, self.dimension)
        positions.setflags(write=False)
        object.__setattr__(self, "positions", positions)
        object.__setattr__(self, "tiles", tuple(tuple(int(v) for v in t) for t in self.tiles))
        object.__setattr__(self, "tile_types", tuple(self.tile_types))
        object.__setattr__(self, "parameters", MappingProxyType(dict(self.parameters)))
        if self.tile_types and len(self.tile_types) != len(self.tiles):
            raise InvalidParameter(
                f"{len(self.tile_types)} tile types given for {len(self.tiles)} tiles"
            )
        n = len(positions)
        for t in self.tiles:
            if any(v < 0 or v >= n for v in t):
                raise InvalidParameter(f"Tile {t} references a vertex outside 0..{n - 1}")

    @property
    def n_points(self) -> int:
        return len(self.positions)

    @property
    def n_tiles(self) -> int:
        return len(self.tiles)

    def __len__(self) -> int:
        return self.n_points

    @property
    def edge_list(self) -> List[Tuple[int, int]]:
        """Unique tile sides in first-seen order, canonical (lower, higher).

        Half-tiles (Robinson triangles, half-squares) contribute their cut
        diagonal as a side.
        """
        seen = set()
        edges = []
        for tile in self.tiles:
            k = len(tile)
            for i in range(k):
                u, v = tile[i], tile[(i + 1) % k]
                e = (min(u, v), max(u, v))
                if u != v and e not in seen:
                    seen.add(e)
                    edges.append(e)
        return edges

    def neighbor_pairs(self, cutoff: float) -> List[Tuple[int, int]]:
        """All (i, j), i < j, with |r_i - r_j| <= cutoff, sorted."""
        if cutoff <= 0:
            raise InvalidParameter(f"cutoff must be positive, got {cutoff}")
        pairs = cKDTree(self.positions).query_pairs(r=cutoff, output_type="ndarray")
        if len(pairs) == 0:
            return []
        pairs = pairs[np.lexsort((pairs[:, 1], pairs[:, 0]))]
        return [(int(i), int(j)) for i, j in pairs]

    def to_graph(self, cutoff: Optional[float] = None) -> nx.Graph:
        """Graph over the points: tile sides, or distance <= cutoff when given."""
        G = nx.Graph()
        for i, p in enumerate(self.positions):
            G.add_node(i, pos=tuple(p))
        if cutoff is None:
            G.add_edges_from(self.edge_list)
        else:
            G.add_edges_from(self.neighbor_pairs(cutoff))
        return G

    def trim(self, n_points: int) -> "QuasicrystalData":
        """Keep the first n_points positions and the tiles fully inside them.

        Count parameters are recomputed for what survives: n_points, n_tiles,
        the per-type tile counts and, for the chain, sequence_length, n_long
        and n_short. Candidate counts from generation (n_ambiguous) describe
        the untrimmed structure and are dropped when points are removed.
        """
        check_count("n_points", n_points)
        if n_points > self.n_points:
            raise InvalidParameter(
                f"Cannot trim {self.n_points} points to {n_points}"
            )
        kept = [
            (tile, self.tile_types[i] if self.tile_types else None)
            for i, tile in enumerate(self.tiles)
            if max(tile) < n_points
        ]
        parameters = dict(self.parameters)
        parameters["n_points"] = n_points
        if n_points < self.n_points:
            for key in CANDIDATE_COUNT_KEYS:
                parameters.pop(key, None)
            if "sequence_length" in parameters:
                parameters["sequence_length"] = n_points
            if "n_long" in parameters:
                # One symbol per point; its length is the gap to the next point.
                gaps = np.diff(self.positions[:n_points + 1, 0])
                n_long = int(np.count_nonzero(gaps > 0.5 * (1.0 + 1.0 / PHI)))
                parameters["n_long"] = n_long
                parameters["n_short"] = n_points - n_long
        if self.tiles:
            parameters["n_tiles"] = len(kept)
            for key, label in TILE_COUNT_KEYS.items():
                if key in parameters:
                    parameters[key] = sum(1 for _, tt in kept if tt == label)
        return QuasicrystalData(
            name=self.name,
            dimension=self.dimension,
            positions=self.positions[:n_points],
            tiles=tuple(t for t, _ in kept),
            tile_types=tuple(tt for _, tt in kept) if self.tile_types else (),
            generation_method=self.generation_method,
            parameters=parameters,
        )


def check_count(label: str, value) -> int:
    if isinstance(value, bool) or not isinstance(value, (int, np.integer)):
        raise InvalidParameter(f"{label} must be a positive integer, got {value!r}")
    if value <= 0:
        raise InvalidParameter(f"{label} must be positive, got {value}")
    return int(value)


def check_radius(radius) -> float:
    if isinstance(radius, bool) or not isinstance(radius, (int, float, np.integer, np.floating)):
        raise InvalidParameter(f"radius must be a positive number, got {radius!r}")
    if not np.isfinite(radius) or radius <= 0:
        raise InvalidParameter(f"radius must be positive, got {radius}")
    return float(radius)


def check_generations(generations) -> int:
    if isinstance(generations, bool) or not isinstance(generations, (int, np.integer)):
        raise InvalidParameter(f"generations must be an integer, got {generations!r}")
    if generations < 0:
        raise InvalidParameter(f"generations must be >= 0, got {generations}")
    return int(generations)


def deduplicate_points(
    points: np.ndarray,
    tol: float = DEFAULT_TOLERANCE,
) -> Tuple[np.ndarray, np.ndarray]:
    """Merge points closer than tol, keeping first-occurrence order.

    Clusters are the connected components of the graph of all pairs within
    tol, so chains of near-coincident points collapse to one vertex. Each
    cluster is represented by its lowest index.

    Returns:
        (unique_points, index_map) where index_map[i] is the row of
        unique_points that input point i was merged into.
    """
    points = np.asarray(points, dtype=float)
    n = len(points)
    if n == 0:
        return points.copy(), np.zeros(0, dtype=np.int64)

    pairs = cKDTree(points).query_pairs(r=tol, output_type="ndarray")
    adjacency = coo_matrix(
        (np.ones(len(pairs)), (pairs[:, 0], pairs[:, 1])), shape=(n, n)
    )
    n_clusters, labels = connected_components(adjacency, directed=False)

    first = np.full(n_clusters, n, dtype=np.int64)
    np.minimum.at(first, labels, np.arange(n))
    keep = np.zeros(n, dtype=bool)
    keep[first] = True
    new_index = np.cumsum(keep) - 1
    if len(pairs):
        logger.debug(f"Merged {n - n_clusters} of {n} points within tol={tol:g}")
    return points[keep], new_index[first[labels]]


def regular_polygon_margin(
    points: np.ndarray,
    n_sides: int,
    apothem: float,
    rotation: float = 0.0,
    center: Sequence[float] = (0.0, 0.0),
) -> np.ndarray:
    """Signed distance inside a regular polygon (positive inside).

    The polygon has edge normals at rotation + 2*pi*k/n_sides.
    """
    angles = rotation + 2.0 * np.pi * np.arange(n_sides) / n_sides
    normals = np.column_stack([np.cos(angles), np.sin(angles)])
    shifted = np.asarray(points, dtype=float) - np.asarray(center, dtype=float)
    return apothem - (shifted @ normals.T).max(axis=1)


def accept_window(
    margin: np.ndarray,
    tol: float = DEFAULT_TOLERANCE,
    strict: bool = False,
    label: str = "window",
) -> Tuple[np.ndarray, int]:
    """Acceptance mask for window margins (positive = inside).

    Margins within tol of zero are ambiguous. They are accepted (closed
    window) and logged, or raise NumericToleranceViolation when strict.

    Returns:
        (accepted mask, number of ambiguous candidates)
    """
    margin = np.asarray(margin, dtype=float)
    n_ambiguous = int(np.count_nonzero(np.abs(margin) <= tol))
    if n_ambiguous:
        msg = (
            f"{n_ambiguous} {label} candidate(s) lie within {tol:g} "
            f"of the acceptance-window boundary"
        )
        if strict:
            raise NumericToleranceViolation(msg)
        logger.warning(f"{msg}; including them")
    return margin >= -tol, n_ambiguous


def tiles_from_vertices(
    vertex_rows: List[Tuple[complex, ...]],
    scale: float,
    tol: float,
) -> Tuple[np.ndarray, Tuple[Tuple[int, ...], ...]]:
    """Turn tiles given as complex vertex tuples into (positions, index tiles).

    Vertices are scaled, then merged by deduplicate_points in tile order.
    """
    flat = [z for row in vertex_rows for z in row]
    coords = np.array([[z.real, z.imag] for z in flat], dtype=float) * scale
    unique, index_map = deduplicate_points(coords, tol=tol)
    tiles = []
    pos = 0
    for row in vertex_rows:
        k = len(row)
        tiles.append(tuple(int(v) for v in index_map[pos:pos + k]))
        pos += k
    return unique, tuple(tiles)


def sort_radially(points: np.ndarray) -> np.ndarray:
    """Order 2D points by distance from the origin, then by angle in [0, 2*pi)."""
    r = np.round(np.hypot(points[:, 0], points[:, 1]), 9)
    theta = np.round(np.mod(np.arctan2(points[:, 1], points[:, 0]), 2 * np.pi), 9)
    return points[np.lexsort((theta, r))]
