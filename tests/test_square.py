"""Tests for the square lattice against known analytical values.

4x4 periodic square lattice (torus):
  N = 16, edges = 32, all z=4, bipartite
  independent cycles = edges - N + 1 = 17

4x4 open square lattice:
  edges = 2*4*3 = 24; 4 corners (z=2), 8 edge sites (z=3), 4 bulk (z=4)
"""
import networkx as nx
import numpy as np
import pytest

from lattice2d.lattices.square import SquareGenerator


@pytest.fixture
def square_4x4():
    gen = SquareGenerator()
    return gen.build(4, 4, boundary="periodic")


@pytest.fixture
def square_4x4_open():
    gen = SquareGenerator()
    return gen.build(4, 4, boundary="open")


class TestSquareCounts:
    """Verify basic lattice counts."""

    def test_vertex_count(self, square_4x4):
        assert square_4x4.N == 16

    def test_edge_count(self, square_4x4):
        assert square_4x4.n_edges == 32

    def test_all_coordination_4(self, square_4x4):
        assert np.all(square_4x4.coordination == 4)

    def test_cycle_rank(self, square_4x4):
        # Cycle rank = n_edges - N + components = 32 - 16 + 1
        assert len(nx.cycle_basis(square_4x4.graph)) == 17

    def test_open_edge_count(self, square_4x4_open):
        assert square_4x4_open.n_edges == 24

    def test_open_coordination(self, square_4x4_open):
        assert square_4x4_open.coordination_distribution == {2: 4, 3: 8, 4: 4}


class TestSquareLaplacian:
    """Graph Laplacian of the periodic square lattice."""

    def test_laplacian_identity(self, square_4x4):
        """L = D - A with D from the coordination array."""
        L = nx.laplacian_matrix(square_4x4.graph, nodelist=range(16)).toarray()
        A = nx.adjacency_matrix(square_4x4.graph, nodelist=range(16)).toarray().astype(float)
        D = np.diag(square_4x4.coordination.astype(float))
        np.testing.assert_allclose(L, D - A, atol=1e-12)

    def test_spectrum(self, square_4x4):
        """Torus spectrum 4 - 2cos(kx) - 2cos(ky), k in 2*pi*Z/4."""
        L = nx.laplacian_matrix(square_4x4.graph, nodelist=range(16)).toarray().astype(float)
        evals = np.sort(np.linalg.eigvalsh(L))
        k = 2 * np.pi * np.arange(4) / 4
        expected = np.sort(
            (4 - 2 * np.cos(k)[:, None] - 2 * np.cos(k)[None, :]).ravel()
        )
        np.testing.assert_allclose(evals, expected, atol=1e-10)

    def test_single_zero_mode(self, square_4x4):
        L = nx.laplacian_matrix(square_4x4.graph).toarray().astype(float)
        evals = np.linalg.eigvalsh(L)
        assert np.sum(np.abs(evals) < 1e-10) == 1


class TestSquareBipartite:
    """An odd periodic extent closes an odd cycle around the torus."""

    @pytest.mark.parametrize("n, expected", [(2, True), (3, False), (4, True), (5, False)])
    def test_periodic(self, n, expected):
        lat = SquareGenerator().build(n, n, boundary="periodic")
        assert lat.is_bipartite is expected

    @pytest.mark.parametrize("n", [2, 3, 5])
    def test_open_always_bipartite(self, n):
        lat = SquareGenerator().build(n, n, boundary="open")
        assert lat.is_bipartite is True

    def test_mixed_parity(self):
        lat = SquareGenerator().build(4, 3, boundary="periodic")
        assert lat.is_bipartite is False


class TestSquareScaling:
    """Verify counts scale correctly with system size."""

    @pytest.mark.parametrize("n", [3, 5, 8])
    def test_periodic_counts(self, n):
        gen = SquareGenerator()
        lat = gen.build(n, n, boundary="periodic")
        assert lat.N == n * n
        assert lat.n_edges == 2 * n * n

    @pytest.mark.parametrize("n", [3, 5, 8])
    def test_open_counts(self, n):
        gen = SquareGenerator()
        lat = gen.build(n, n, boundary="open")
        assert lat.N == n * n
        assert lat.n_edges == 2 * n * (n - 1)


class TestSquareThinStrips:
    """Extents of 1 or 2 cells under periodic wrapping."""

    def test_single_cell(self):
        lat = SquareGenerator().build(1, 1, boundary="periodic")
        assert lat.N == 1
        assert lat.n_edges == 0
        assert lat.coordination[0] == 0

    def test_ring(self):
        """1 x 4 torus: horizontal bonds are self-loops and are dropped."""
        lat = SquareGenerator().build(1, 4, boundary="periodic")
        assert lat.n_edges == 4
        assert np.all(lat.coordination == 2)

    def test_two_wide_wrap_is_single_bond(self):
        """With Lx=2 the +x and wrapped -x neighbour coincide."""
        lat = SquareGenerator().build(2, 2, boundary="periodic")
        assert lat.n_edges == 4
        assert np.all(lat.coordination == 2)
