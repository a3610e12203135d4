import numpy as np
import pytest
from scipy import linalg

from solver.linear import gaussian_elimination


def test_empty_system():
    result = gaussian_elimination(np.zeros((0, 0)), np.zeros(0))
    assert len(result) == 0


def test_matches_reference_solver():
    rng = np.random.default_rng(7)
    A = rng.normal(size=(8, 8)) + 8 * np.eye(8)
    b = rng.normal(size=8)
    assert np.allclose(gaussian_elimination(A, b), linalg.solve(A, b))


def test_requires_pivoting():
    A = [[0.0, 1.0], [1.0, 0.0]]
    b = [2.0, 3.0]
    assert np.allclose(gaussian_elimination(A, b), [3.0, 2.0])


def test_inputs_are_not_modified():
    A = np.array([[0.0, 2.0], [4.0, 1.0]])
    b = np.array([1.0, 2.0])
    A_before, b_before = A.copy(), b.copy()
    gaussian_elimination(A, b)
    assert np.array_equal(A, A_before)
    assert np.array_equal(b, b_before)


def test_singular_system_leaves_unknowns_at_zero():
    result = gaussian_elimination([[1.0, 1.0], [1.0, 1.0]], [2.0, 2.0])
    assert result.tolist() == [2.0, 0.0]


def test_zero_column_is_skipped():
    result = gaussian_elimination([[0.0, 0.0], [0.0, 2.0]], [5.0, 4.0])
    assert result.tolist() == [0.0, 2.0]


def test_tolerance_is_configurable():
    A = [[1e-12, 0.0], [0.0, 1.0]]
    assert gaussian_elimination(A, [1.0, 1.0]).tolist() == [0.0, 1.0]
    assert gaussian_elimination(A, [1.0, 1.0], tolerance=1e-15)[0] == pytest.approx(1e12)


def test_mna_scale_conductances():
    # ideal-wire conductances next to ordinary resistors
    A = np.array([[1e6 + 0.1, -1e6, 1.0],
                  [-1e6, 1e6, 0.0],
                  [1.0, 0.0, 0.0]])
    b = np.array([0.0, 0.0, 9.0])
    assert np.allclose(gaussian_elimination(A, b), linalg.solve(A, b), rtol=1e-6)
