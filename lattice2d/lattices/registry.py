"""Lattice registry mapping lattice-type tags to generator classes.

Provides a single lookup point for all supported periodic lattices. The
set of types is closed: extend LatticeType and LATTICE_REGISTRY together.
"""
from __future__ import annotations

import functools
from enum import Enum
from typing import List, Union

from ..boundary import BoundaryCondition
from ..errors import UnsupportedLatticeType
from .base import Lattice, LatticeGenerator, UnitCell
from .honeycomb import HoneycombGenerator
from .kagome import KagomeGenerator
from .lieb import LiebGenerator
from .square import SquareGenerator
from .triangular import TriangularGenerator


class LatticeType(str, Enum):
    HONEYCOMB = "honeycomb"
    SQUARE = "square"
    TRIANGULAR = "triangular"
    KAGOME = "kagome"
    LIEB = "lieb"


LATTICE_REGISTRY = {
    LatticeType.HONEYCOMB: HoneycombGenerator,
    LatticeType.SQUARE: SquareGenerator,
    LatticeType.TRIANGULAR: TriangularGenerator,
    LatticeType.KAGOME: KagomeGenerator,
    LatticeType.LIEB: LiebGenerator,
}


def _resolve(tag: Union[LatticeType, str]) -> LatticeType:
    if isinstance(tag, LatticeType):
        return tag
    try:
        return LatticeType(str(tag).strip().lower())
    except ValueError:
        available = ', '.join(list_lattices())
        raise UnsupportedLatticeType(
            f"Unknown lattice '{tag}'. Available: {available}"
        ) from None


def get_generator(tag: Union[LatticeType, str]) -> LatticeGenerator:
    """Get a lattice generator by tag.

    Args:
        tag: LatticeType member or name (e.g., 'honeycomb', 'Square').

    Returns:
        An instance of the corresponding LatticeGenerator subclass.

    Raises:
        UnsupportedLatticeType: If the tag is not in the registry.
    """
    return LATTICE_REGISTRY[_resolve(tag)]()


@functools.lru_cache(maxsize=None)
def _unit_cell_for(lattice_type: LatticeType) -> UnitCell:
    return LATTICE_REGISTRY[lattice_type]()._define_unit_cell()


def get_unit_cell(tag: Union[LatticeType, str]) -> UnitCell:
    """Canonical UnitCell for a tag, created on first lookup and reused."""
    return _unit_cell_for(_resolve(tag))


def build_lattice(
    tag: Union[LatticeType, str],
    Lx: int,
    Ly: int,
    boundary: Union[BoundaryCondition, str] = "periodic",
) -> Lattice:
    """Build an Lx x Ly patch of the lattice named by tag.

    Raises:
        UnsupportedLatticeType: unknown tag.
        InvalidDimension: Lx or Ly not a positive integer.
        InvalidBoundary: unknown boundary tag.
    """
    lattice_type = _resolve(tag)
    generator = LATTICE_REGISTRY[lattice_type]()
    return generator.build(Lx, Ly, boundary=boundary, unit_cell=_unit_cell_for(lattice_type))


def list_lattices() -> List[str]:
    """Return sorted list of available lattice names."""
    return sorted(t.value for t in LatticeType)
