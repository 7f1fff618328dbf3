"""Quasicrystal registry: structure name x generation method -> generator.

Projection generators take a size argument (point count for the Fibonacci
chain, radius for the 2D tilings); substitution generators take a number of
generations.
"""
from __future__ import annotations

from typing import Callable, Dict, List

from ..errors import InvalidParameter, UnsupportedLatticeType
from .ammann_beenker import (
    generate_ammann_beenker_projection,
    generate_ammann_beenker_substitution,
)
from .base import GENERATION_METHODS, PROJECTION, SUBSTITUTION, QuasicrystalData
from .fibonacci import generate_fibonacci_projection, generate_fibonacci_substitution
from .penrose import generate_penrose_projection, generate_penrose_substitution

QUASICRYSTAL_REGISTRY: Dict[str, Dict[str, Callable[..., QuasicrystalData]]] = {
    "fibonacci": {
        PROJECTION: generate_fibonacci_projection,
        SUBSTITUTION: generate_fibonacci_substitution,
    },
    "penrose": {
        PROJECTION: generate_penrose_projection,
        SUBSTITUTION: generate_penrose_substitution,
    },
    "ammann_beenker": {
        PROJECTION: generate_ammann_beenker_projection,
        SUBSTITUTION: generate_ammann_beenker_substitution,
    },
}


def generate_quasicrystal(name: str, method: str, *args, **kwargs) -> QuasicrystalData:
    """Generate a quasicrystal by name and method.

    Example:
        >>> generate_quasicrystal('penrose', 'substitution', 3).n_tiles
        68

    Raises:
        UnsupportedLatticeType: unknown structure name.
        InvalidParameter: method is not 'projection' or 'substitution'.
    """
    key = str(name).strip().lower().replace("-", "_")
    if key not in QUASICRYSTAL_REGISTRY:
        available = ', '.join(list_quasicrystals())
        raise UnsupportedLatticeType(
            f"Unknown quasicrystal '{name}'. Available: {available}"
        )
    method_key = str(method).strip().lower()
    if method_key not in GENERATION_METHODS:
        raise InvalidParameter(
            f"Unknown generation method '{method}'. Available: {', '.join(GENERATION_METHODS)}"
        )
    return QUASICRYSTAL_REGISTRY[key][method_key](*args, **kwargs)


def list_quasicrystals() -> List[str]:
    """Return sorted list of available quasicrystal names."""
    return sorted(QUASICRYSTAL_REGISTRY)
