"""Triangular lattice generator (all z=6, never bipartite in the bulk)."""
import math

from .base import LatticeGenerator, UnitCell


class TriangularGenerator(LatticeGenerator):
    """Triangular lattice: 1 site per cell, 3 bonds per cell.

    Unit cell: a1=(1,0), a2=(1/2, sqrt(3)/2)
    Bonds: +a1, +a2 and a2-a1, i.e. cells (x+1,y), (x,y+1), (x-1,y+1).
    Every elementary triangle is an odd cycle.
    """

    name = "triangular"

    def _define_unit_cell(self) -> UnitCell:
        return UnitCell(
            a1=(1.0, 0.0),
            a2=(0.5, math.sqrt(3) / 2),
            sublattice_positions=((0.0, 0.0),),
            bonds=(
                (0, 0, 1, 0),
                (0, 0, 0, 1),
                (0, 0, -1, 1),
            ),
            expected_coordination={0: 6},
        )
