"""Lieb lattice generator (mixed z=2 and z=4, bipartite)."""
from .base import LatticeGenerator, UnitCell


class LiebGenerator(LatticeGenerator):
    """Lieb lattice: a square lattice with an extra site on every bond.

    Unit cell: a1=(2,0), a2=(0,2)
      v0 = (0,0) corner  (z=4)
      v1 = (1,0) x-edge  (z=2)
      v2 = (0,1) y-edge  (z=2)

    Corners only bond to edge sites, so the lattice is bipartite for every
    size and boundary.
    """

    name = "lieb"

    def _define_unit_cell(self) -> UnitCell:
        return UnitCell(
            a1=(2.0, 0.0),
            a2=(0.0, 2.0),
            sublattice_positions=(
                (0.0, 0.0),
                (1.0, 0.0),
                (0.0, 1.0),
            ),
            bonds=(
                (0, 1, 0, 0),   # corner -> x-edge same cell
                (1, 0, 1, 0),   # x-edge -> corner in cell (x+1, y)
                (0, 2, 0, 0),   # corner -> y-edge same cell
                (2, 0, 0, 1),   # y-edge -> corner in cell (x, y+1)
            ),
            expected_coordination={0: 4, 1: 2, 2: 2},
        )
