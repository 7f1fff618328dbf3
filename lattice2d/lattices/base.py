"""Base classes for periodic lattice generation.

UnitCell defines a tileable lattice pattern. LatticeGenerator tiles it over
an Lx x Ly patch under periodic or open boundary conditions and returns an
immutable Lattice with positions, site indexing and adjacency.
"""
from __future__ import annotations

import abc
import logging
import math
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Dict, FrozenSet, Iterator, List, Mapping, Optional, Tuple, Union

import networkx as nx
import numpy as np

from ..boundary import BoundaryCondition
from ..errors import InvalidDimension, InvalidParameter

logger = logging.getLogger(__name__)

BASIS_TOL = 1e-12


@dataclass(frozen=True)
class UnitCell:
    """Definition of a repeating lattice unit cell.

    Attributes:
        a1: First lattice translation vector.
        a2: Second lattice translation vector.
        sublattice_positions: Cartesian offsets of the sites within the cell.
        bonds: List of (src_sub, dst_sub, dx, dy) where dx, dy are cell
            offsets for the destination site. Each bond is listed once;
            the builder records both directions.
        expected_coordination: Mapping from sublattice index to bulk
            coordination number (degree).
    """
    a1: Tuple[float, float]
    a2: Tuple[float, float]
    sublattice_positions: Tuple[Tuple[float, float], ...]
    bonds: Tuple[Tuple[int, int, int, int], ...]
    expected_coordination: Mapping[int, int] = field(default_factory=dict, hash=False)

    def __post_init__(self):
        object.__setattr__(
            self, "expected_coordination", MappingProxyType(dict(self.expected_coordination))
        )
        cross = self.a1[0] * self.a2[1] - self.a1[1] * self.a2[0]
        if abs(cross) < BASIS_TOL:
            raise InvalidParameter(
                f"Basis vectors {self.a1} and {self.a2} are linearly dependent"
            )
        n_sub = len(self.sublattice_positions)
        for src, dst, _, _ in self.bonds:
            if not (0 <= src < n_sub and 0 <= dst < n_sub):
                raise InvalidParameter(
                    f"Bond ({src}, {dst}) references a sublattice outside 0..{n_sub - 1}"
                )

    @property
    def basis(self) -> Tuple[np.ndarray, np.ndarray]:
        return np.array(self.a1, dtype=float), np.array(self.a2, dtype=float)

    @property
    def n_sublattices(self) -> int:
        return len(self.sublattice_positions)

    @property
    def coordination_number(self) -> int:
        """Largest bulk degree over the sublattices."""
        return max(self.expected_coordination.values(), default=0)


def reciprocal_vectors(
    a1: Union[Tuple[float, float], np.ndarray],
    a2: Union[Tuple[float, float], np.ndarray],
) -> np.ndarray:
    """Reciprocal vectors b1, b2 (rows) with a_i . b_j = 2*pi*delta_ij.

    Closed form of 2*pi * inv(A).T for A = [a1; a2].
    """
    a1x, a1y = float(a1[0]), float(a1[1])
    a2x, a2y = float(a2[0]), float(a2[1])
    det = a1x * a2y - a1y * a2x
    if abs(det) < BASIS_TOL:
        raise InvalidParameter("Cannot invert a degenerate basis")
    scale = 2.0 * math.pi / det
    return np.array([
        [scale * a2y, -scale * a2x],
        [-scale * a1y, scale * a1x],
    ])


@dataclass(frozen=True, eq=False)
class Lattice:
    """Output of lattice construction. Arrays are read-only, graph is frozen."""
    name: str
    Lx: int
    Ly: int
    N: int
    boundary: BoundaryCondition
    unit_cell: UnitCell
    site_map: np.ndarray  # (Lx, Ly): base site id of each cell
    positions: np.ndarray  # (N, 2)
    basis_vectors: np.ndarray  # rows a1, a2
    reciprocal_vectors: np.ndarray  # rows b1, b2
    nearest_neighbors: Tuple[FrozenSet[int], ...]
    edge_list: Tuple[Tuple[int, int], ...]  # canonical orientation: lower -> higher index
    coordination: np.ndarray  # per-site degree
    graph: nx.Graph
    is_bipartite: bool

    def __len__(self) -> int:
        return self.N

    def __iter__(self) -> Iterator[int]:
        return iter(range(self.N))

    def size(self, d: Optional[int] = None):
        """(Lx, Ly), or the extent along axis d (0 -> Lx, 1 -> Ly, else 1)."""
        if d is None:
            return self.Lx, self.Ly
        if d == 0:
            return self.Lx
        if d == 1:
            return self.Ly
        return 1

    @property
    def n_sublattices(self) -> int:
        return self.unit_cell.n_sublattices

    @property
    def n_edges(self) -> int:
        return len(self.edge_list)

    @property
    def coordination_distribution(self) -> Dict[int, int]:
        unique, counts = np.unique(self.coordination, return_counts=True)
        return {int(u): int(c) for u, c in zip(unique, counts)}

    def site_index(self, x: int, y: int, s: int = 0) -> int:
        """Site id of sublattice s in cell (x, y)."""
        return int(self.site_map[x, y]) + s

    def cell_of(self, site: int) -> Tuple[int, int, int]:
        """Inverse of site_index: (x, y, s) for a site id."""
        cell, s = divmod(site, self.n_sublattices)
        y, x = divmod(cell, self.Lx)
        return x, y, s


def _check_extent(label: str, value) -> int:
    if isinstance(value, bool) or not isinstance(value, (int, np.integer)):
        raise InvalidDimension(f"{label} must be a positive integer, got {value!r}")
    if value <= 0:
        raise InvalidDimension(f"{label} must be positive, got {value}")
    return int(value)


def _freeze_array(arr: np.ndarray) -> np.ndarray:
    arr.setflags(write=False)
    return arr


class LatticeGenerator(abc.ABC):
    """Base class for lattice generators with shared tiling logic."""

    name: str = "base"

    @abc.abstractmethod
    def _define_unit_cell(self) -> UnitCell:
        """Return the unit cell definition for this lattice type."""
        ...

    def build(
        self,
        Lx: int,
        Ly: int,
        boundary: Union[BoundaryCondition, str] = "periodic",
        unit_cell: Optional[UnitCell] = None,
    ) -> Lattice:
        """Tile the unit cell and construct the full lattice.

        Args:
            Lx: Number of unit cells along a1.
            Ly: Number of unit cells along a2.
            boundary: BoundaryCondition, 'periodic'/'open' or 'PBC'/'OBC'.
            unit_cell: Pre-resolved unit cell (defaults to this generator's).

        Returns:
            Lattice with all lattice data.
        """
        Lx = _check_extent("Lx", Lx)
        Ly = _check_extent("Ly", Ly)
        bc = BoundaryCondition.parse(boundary)

        uc = unit_cell if unit_cell is not None else self._define_unit_cell()
        n_sub = uc.n_sublattices
        a1, a2 = uc.basis
        offsets = np.array(uc.sublattice_positions, dtype=float)
        n_sites = n_sub * Lx * Ly

        # --- Row-major cell enumeration, x fastest ---
        site_map = np.empty((Lx, Ly), dtype=np.int64)
        positions = np.zeros((n_sites, 2))
        for y in range(Ly):
            for x in range(Lx):
                base = (x + y * Lx) * n_sub
                site_map[x, y] = base
                origin = x * a1 + y * a2
                positions[base:base + n_sub] = origin + offsets

        # --- Adjacency from bond rules ---
        neighbors: List[set] = [set() for _ in range(n_sites)]
        edge_set = set()
        edge_list = []
        for y in range(Ly):
            for x in range(Lx):
                for src, dst, dx, dy in uc.bonds:
                    cell = bc.resolve(x + dx, y + dy, Lx, Ly)
                    if cell is None:
                        continue
                    i = int(site_map[x, y]) + src
                    j = int(site_map[cell]) + dst
                    if i == j:
                        continue  # skip self-loops on 1-cell periodic extents
                    neighbors[i].add(j)
                    neighbors[j].add(i)

                    e = (min(i, j), max(i, j))
                    if e not in edge_set:
                        edge_set.add(e)
                        edge_list.append(e)

        # --- Build NetworkX graph ---
        G = nx.Graph()
        for i in range(n_sites):
            G.add_node(i, pos=tuple(positions[i]))
        G.add_edges_from(edge_list)
        is_bipartite = nx.is_bipartite(G)
        nx.freeze(G)

        coordination = np.array([len(nb) for nb in neighbors], dtype=np.int64)
        basis_vectors = np.vstack([a1, a2])

        logger.info(
            f"Built {self.name} {Lx}x{Ly} ({bc.value}): N={n_sites}, "
            f"edges={len(edge_list)}, bipartite={is_bipartite}"
        )

        return Lattice(
            name=self.name,
            Lx=Lx,
            Ly=Ly,
            N=n_sites,
            boundary=bc,
            unit_cell=uc,
            site_map=_freeze_array(site_map),
            positions=_freeze_array(positions),
            basis_vectors=_freeze_array(basis_vectors),
            reciprocal_vectors=_freeze_array(reciprocal_vectors(a1, a2)),
            nearest_neighbors=tuple(frozenset(nb) for nb in neighbors),
            edge_list=tuple(edge_list),
            coordination=_freeze_array(coordination),
            graph=G,
            is_bipartite=is_bipartite,
        )
