"""Boundary-condition policy used when tiling a unit cell.

PBC wraps cell coordinates around the torus; OBC drops bonds that leave
the Lx x Ly patch.
"""
from __future__ import annotations

from enum import Enum
from typing import Optional, Tuple, Union

from .errors import InvalidBoundary


_ALIASES = {
    "periodic": "periodic",
    "pbc": "periodic",
    "open": "open",
    "obc": "open",
}


class BoundaryCondition(str, Enum):
    """Periodic or open boundary. Values match the plain string tags."""

    PBC = "periodic"
    OBC = "open"

    @classmethod
    def parse(cls, tag: Union["BoundaryCondition", str]) -> "BoundaryCondition":
        """Accept a member, 'periodic'/'open' or 'PBC'/'OBC' (any case)."""
        if isinstance(tag, cls):
            return tag
        if isinstance(tag, str):
            value = _ALIASES.get(tag.strip().lower())
            if value is not None:
                return cls(value)
        raise InvalidBoundary(
            f"Unknown boundary condition {tag!r}. Use 'periodic' (PBC) or 'open' (OBC)."
        )

    @property
    def is_periodic(self) -> bool:
        return self is BoundaryCondition.PBC

    def resolve(self, x: int, y: int, Lx: int, Ly: int) -> Optional[Tuple[int, int]]:
        """Map a (possibly out-of-range) cell coordinate into the patch.

        Returns None when the cell does not exist under this boundary.
        """
        if self is BoundaryCondition.PBC:
            return x % Lx, y % Ly
        if 0 <= x < Lx and 0 <= y < Ly:
            return x, y
        return None

    def __str__(self) -> str:
        return self.value


PBC = BoundaryCondition.PBC
OBC = BoundaryCondition.OBC
