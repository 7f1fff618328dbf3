"""Kagome lattice generator.

The kagome lattice is the trihexagonal tiling: corner-sharing triangles
with hexagonal voids. Every site has coordination z=4, and the triangles
make it non-bipartite.
"""
import math

from .base import LatticeGenerator, UnitCell


class KagomeGenerator(LatticeGenerator):
    """Kagome lattice: 3 sites per cell, 6 bonds per cell.

    Bravais lattice: a1 = (2, 0), a2 = (1, sqrt(3))
    Sites per cell:
      v0 = (0, 0), v1 = (1, 0), v2 = (0.5, sqrt(3)/2)
    """

    name = "kagome"

    def _define_unit_cell(self) -> UnitCell:
        s3 = math.sqrt(3)
        return UnitCell(
            a1=(2.0, 0.0),
            a2=(1.0, s3),
            sublattice_positions=(
                (0.0, 0.0),       # v0
                (1.0, 0.0),       # v1
                (0.5, s3 / 2),    # v2
            ),
            bonds=(
                # Intra-cell bonds (upward triangle)
                (0, 1, 0, 0),
                (1, 2, 0, 0),
                (0, 2, 0, 0),
                # Inter-cell bonds
                (1, 0, 1, 0),   # v1 -> v0 in cell (x+1, y)
                (2, 0, 0, 1),   # v2 -> v0 in cell (x, y+1)
                (2, 1, -1, 1),  # v2 -> v1 in cell (x-1, y+1)
            ),
            expected_coordination={0: 4, 1: 4, 2: 4},
        )
