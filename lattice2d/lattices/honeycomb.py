"""Honeycomb lattice generator (graphene geometry, all z=3)."""
import math

from .base import LatticeGenerator, UnitCell


class HoneycombGenerator(LatticeGenerator):
    """Honeycomb lattice: 2 sites per cell (A, B), 3 bonds per cell.

    Bravais lattice: a1 = (sqrt(3), 0), a2 = (sqrt(3)/2, 3/2)
      |a1| = |a2| = sqrt(3), a1 . a2 = 3/2 (60 degrees)
    Sites per cell:
      A = (0, 0), B = (0, 1)   -> nearest-neighbour distance 1

    Every A bonds to the B in its own cell, the B in cell (x, y-1) and
    the B in cell (x+1, y-1). All bonds join A to B, so any finite patch
    is bipartite.

    Periodic Lx*Ly: N = 2*Lx*Ly, 3*Lx*Ly bonds, all z=3
    """

    name = "honeycomb"

    def _define_unit_cell(self) -> UnitCell:
        s3 = math.sqrt(3)
        return UnitCell(
            a1=(s3, 0.0),
            a2=(s3 / 2, 1.5),
            sublattice_positions=(
                (0.0, 0.0),  # A
                (0.0, 1.0),  # B
            ),
            bonds=(
                (0, 1, 0, 0),    # A -> B same cell (vertical bond)
                (0, 1, 0, -1),   # A -> B in cell (x, y-1)
                (0, 1, 1, -1),   # A -> B in cell (x+1, y-1)
            ),
            expected_coordination={0: 3, 1: 3},
        )
