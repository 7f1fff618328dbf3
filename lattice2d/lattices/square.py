"""Square lattice generator (all z=4)."""
from .base import LatticeGenerator, UnitCell


class SquareGenerator(LatticeGenerator):
    """Square lattice: 1 site per cell, 2 bonds per cell.

    Unit cell: a1=(1,0), a2=(0,1)
    Site: v0 at (0,0)
    Bonds: horizontal v0->v0(+1,0), vertical v0->v0(0,+1)
    All sites have coordination z=4.

    Periodic L*L: N=L^2, 2L^2 bonds. Bipartite only when both extents are
    even (or the boundary is open): an odd periodic extent closes an odd
    cycle around the torus.
    """

    name = "square"

    def _define_unit_cell(self) -> UnitCell:
        return UnitCell(
            a1=(1.0, 0.0),
            a2=(0.0, 1.0),
            sublattice_positions=((0.0, 0.0),),
            bonds=(
                (0, 0, 1, 0),  # horizontal: v0 -> v0 in cell (x+1, y)
                (0, 0, 0, 1),  # vertical: v0 -> v0 in cell (x, y+1)
            ),
            expected_coordination={0: 4},
        )
