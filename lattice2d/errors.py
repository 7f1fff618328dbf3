"""Exception hierarchy for lattice and quasicrystal generation.

Every failure is detected before any structure is built, so callers either
get a complete result or one of these exceptions.
"""


class Lattice2DError(Exception):
    """Base class for all lattice2d errors."""


class InvalidParameter(Lattice2DError, ValueError):
    """A size, radius, generation count or tag is out of range."""


class InvalidDimension(InvalidParameter):
    """Lattice extents Lx, Ly must be positive integers."""


class InvalidBoundary(InvalidParameter):
    """Unknown boundary-condition tag."""


class UnsupportedLatticeType(Lattice2DError, KeyError):
    """Tag not present in the lattice (or quasicrystal) registry."""

    def __str__(self):
        # KeyError quotes its message; keep it readable.
        return str(self.args[0]) if self.args else ""


class NumericToleranceViolation(Lattice2DError, ArithmeticError):
    """A projected point sits on an acceptance-window boundary within tolerance."""
