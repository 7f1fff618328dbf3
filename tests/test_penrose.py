"""Tests for the Penrose P3 rhombus tiling.

Substitution (Robinson halves, unit edges after rescaling by phi^g):
  tiles: 4, 10, 26, 68, 178, ...   n_{g+1} = 3 n_g - n_{g-1}
  thin' = thin + thick, thick' = thin + 2 thick
  thin half: legs 1, base 1/phi; thick half: legs 1, base phi
  seed area sin(72) + sin(36), preserved up to the phi^(2g) rescale
Projection: vertex spacing at least 1/phi (thin rhombus short diagonal).
"""
import math

import numpy as np
import pytest
from scipy.spatial.distance import pdist

from lattice2d.errors import InvalidParameter, NumericToleranceViolation
from lattice2d.quasicrystals.base import PHI, PROJECTION, SUBSTITUTION
from lattice2d.quasicrystals.penrose import (
    THICK,
    THIN,
    assemble_rhombi,
    generate_penrose_projection,
    generate_penrose_substitution,
)

SEED_AREA = math.sin(2 * math.pi / 5) + math.sin(math.pi / 5)


def _triangle_area(positions, tile):
    a, b, c = (positions[v] for v in tile)
    return 0.5 * abs((b[0] - a[0]) * (c[1] - a[1]) - (b[1] - a[1]) * (c[0] - a[0]))


@pytest.fixture(scope="module")
def penrose_g4():
    return generate_penrose_substitution(4)


@pytest.fixture(scope="module")
def penrose_disc():
    return generate_penrose_projection(6.0)


class TestPenroseSubstitutionCounts:

    @pytest.mark.parametrize("g, expected", [(0, 4), (1, 10), (2, 26), (3, 68), (4, 178)])
    def test_tile_counts(self, g, expected):
        assert generate_penrose_substitution(g).n_tiles == expected

    def test_type_recurrence(self):
        prev = generate_penrose_substitution(0).parameters
        for g in range(1, 5):
            cur = generate_penrose_substitution(g).parameters
            assert cur["n_thin"] == prev["n_thin"] + prev["n_thick"]
            assert cur["n_thick"] == prev["n_thin"] + 2 * prev["n_thick"]
            prev = cur

    def test_inflation_factor(self):
        n4 = generate_penrose_substitution(4).n_tiles
        n5 = generate_penrose_substitution(5).n_tiles
        assert n5 / n4 == pytest.approx(PHI ** 2, rel=1e-3)

    def test_parameters(self, penrose_g4):
        p = penrose_g4.parameters
        assert p["generations"] == 4
        assert p["n_tiles"] == penrose_g4.n_tiles
        assert p["n_points"] == penrose_g4.n_points
        assert p["scale"] == pytest.approx(PHI ** 4)
        assert penrose_g4.generation_method == SUBSTITUTION
        assert set(penrose_g4.tile_types) == {THIN, THICK}


class TestPenroseSubstitutionGeometry:

    def test_unit_legs(self, penrose_g4):
        pos = penrose_g4.positions
        for a, b, c in penrose_g4.tiles:
            assert np.linalg.norm(pos[a] - pos[b]) == pytest.approx(1.0, abs=1e-9)
            assert np.linalg.norm(pos[a] - pos[c]) == pytest.approx(1.0, abs=1e-9)

    def test_base_lengths(self, penrose_g4):
        pos = penrose_g4.positions
        for (_, b, c), kind in zip(penrose_g4.tiles, penrose_g4.tile_types):
            expected = 1 / PHI if kind == THIN else PHI
            assert np.linalg.norm(pos[b] - pos[c]) == pytest.approx(expected, abs=1e-9)

    @pytest.mark.parametrize("g", [0, 1, 3])
    def test_area_preserved(self, g):
        data = generate_penrose_substitution(g)
        total = sum(_triangle_area(data.positions, t) for t in data.tiles)
        assert total == pytest.approx(SEED_AREA * PHI ** (2 * g), rel=1e-9)

    def test_min_vertex_distance(self, penrose_g4):
        assert pdist(penrose_g4.positions).min() >= 1 / PHI - 1e-9

    def test_vertex_degree_bound(self, penrose_g4):
        """Rhombus sides alone give at most 7 edges per vertex."""
        degree = np.zeros(penrose_g4.n_points, dtype=int)
        sides = set()
        for a, b, c in penrose_g4.tiles:
            sides.add((min(a, b), max(a, b)))
            sides.add((min(a, c), max(a, c)))
        for u, v in sides:
            degree[u] += 1
            degree[v] += 1
        assert degree.max() <= 7

    def test_edge_list_includes_diagonals(self, penrose_g4):
        lengths = [
            np.linalg.norm(penrose_g4.positions[u] - penrose_g4.positions[v])
            for u, v in penrose_g4.edge_list
        ]
        allowed = np.array([1.0, 1 / PHI, PHI])
        for d in lengths:
            assert np.min(np.abs(allowed - d)) < 1e-9

    def test_deterministic(self):
        a = generate_penrose_substitution(3)
        b = generate_penrose_substitution(3)
        np.testing.assert_array_equal(a.positions, b.positions)
        assert a.tiles == b.tiles
        assert a.tile_types == b.tile_types


class TestAssembleRhombi:

    def test_seed_pairs(self):
        rhombi, types, unpaired = assemble_rhombi(generate_penrose_substitution(0))
        assert len(rhombi) == 2
        assert sorted(types) == [THICK, THIN]
        assert unpaired == []

    @pytest.mark.parametrize("g", [1, 2, 4])
    def test_every_half_accounted(self, g):
        data = generate_penrose_substitution(g)
        rhombi, types, unpaired = assemble_rhombi(data)
        assert 2 * len(rhombi) + len(unpaired) == data.n_tiles
        assert len(types) == len(rhombi)

    def test_rhombi_have_unit_sides(self, penrose_g4):
        rhombi, _, _ = assemble_rhombi(penrose_g4)
        pos = penrose_g4.positions
        for quad in rhombi:
            for i in range(4):
                u, v = quad[i], quad[(i + 1) % 4]
                assert np.linalg.norm(pos[u] - pos[v]) == pytest.approx(1.0, abs=1e-9)


class TestPenroseProjection:

    def test_within_radius(self, penrose_disc):
        r = np.hypot(penrose_disc.positions[:, 0], penrose_disc.positions[:, 1])
        assert np.all(r <= 6.0 + 1e-9)

    def test_sorted_by_radius(self, penrose_disc):
        r = np.hypot(penrose_disc.positions[:, 0], penrose_disc.positions[:, 1])
        assert np.all(np.diff(r) >= -1e-9)

    def test_min_vertex_distance(self, penrose_disc):
        assert pdist(penrose_disc.positions).min() >= 1 / PHI - 1e-9

    def test_has_unit_edges(self, penrose_disc):
        pairs = penrose_disc.neighbor_pairs(1.0 + 1e-9)
        assert len(pairs) > penrose_disc.n_points

    def test_grows_with_radius(self, penrose_disc):
        smaller = generate_penrose_projection(3.0)
        assert 0 < smaller.n_points < penrose_disc.n_points

    def test_metadata(self, penrose_disc):
        assert penrose_disc.dimension == 2
        assert penrose_disc.tiles == ()
        assert penrose_disc.generation_method == PROJECTION
        assert penrose_disc.parameters["n_points"] == penrose_disc.n_points
        assert penrose_disc.parameters["n_ambiguous"] == 0

    def test_strict_generic_offset(self):
        data = generate_penrose_projection(4.0, strict=True)
        assert data.n_points > 0

    def test_singular_offset_strict(self):
        """A zero offset puts lattice points on window corners."""
        with pytest.raises(NumericToleranceViolation):
            generate_penrose_projection(3.0, offset=(0, 0, 0, 0, 0), strict=True)

    def test_singular_offset_warns(self, caplog):
        with caplog.at_level("WARNING", logger="lattice2d.quasicrystals.base"):
            data = generate_penrose_projection(3.0, offset=(0, 0, 0, 0, 0))
        assert data.parameters["n_ambiguous"] > 0
        assert "acceptance-window boundary" in caplog.text

    def test_deterministic(self):
        a = generate_penrose_projection(4.0)
        b = generate_penrose_projection(4.0)
        np.testing.assert_array_equal(a.positions, b.positions)


class TestPenroseErrors:

    @pytest.mark.parametrize("radius", [0, -1.0, float("nan"), "5", True])
    def test_invalid_radius(self, radius):
        with pytest.raises(InvalidParameter):
            generate_penrose_projection(radius)

    @pytest.mark.parametrize("offset", [
        (0.1, 0.2, 0.3, 0.4, 0.5),
        (0.1, -0.1),
        (1.5, -1.5, 0, 0, 0),
    ])
    def test_invalid_offset(self, offset):
        with pytest.raises(InvalidParameter):
            generate_penrose_projection(3.0, offset=offset)

    @pytest.mark.parametrize("g", [-1, 1.5])
    def test_invalid_generations(self, g):
        with pytest.raises(InvalidParameter):
            generate_penrose_substitution(g)
