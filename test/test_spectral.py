"""
Tests for the symmetric eigensolver wrapper and the singular system.
"""
from __future__ import annotations

import numpy as np
import pytest

from heatinv import spectral
from heatinv.errors import InvalidParameterError, NumericalInstabilityError
from heatinv.grid import PeriodicGrid
from heatinv.kernel import build_kernel
from heatinv.spectral import SpectralSystem, compute_singular_system, decompose_symmetric


def _kernel(n: int = 32, t: float = 1e-3) -> np.ndarray:
    return build_kernel(PeriodicGrid.uniform(n), t)


# --- decompose_symmetric ---

def test_decompose_symmetric_eigenpairs_ordered():
    A = _kernel(24, 2e-3)
    lam, W = decompose_symmetric(A)
    assert np.all(np.diff(lam) <= 0.0)
    np.testing.assert_allclose(W.T @ W, np.eye(24), atol=1e-12)
    for k in range(24):
        np.testing.assert_allclose(A @ W[:, k], lam[k] * W[:, k], atol=1e-12)


def test_decompose_symmetric_rejects_non_symmetric():
    with pytest.raises(InvalidParameterError):
        decompose_symmetric(np.array([[1.0, 2.0], [0.0, 1.0]]))


# --- compute_singular_system ---

@pytest.mark.parametrize("method", ["eigh", "svd"])
def test_singular_system_reconstructs_operator(method):
    """U diag(S) V^T == A within 1e-8 relative."""
    A = _kernel(32, 1e-3)
    system = compute_singular_system(A, method=method)
    assert isinstance(system, SpectralSystem)
    assert system.n == 32
    resid = np.linalg.norm(system.reconstruct() - A)
    assert resid <= 1e-8 * np.linalg.norm(A)
    assert np.all(np.diff(system.S) <= 0.0)
    np.testing.assert_allclose(system.U.T @ system.U, np.eye(32), atol=1e-10)
    np.testing.assert_allclose(system.V.T @ system.V, np.eye(32), atol=1e-10)
    # U spans eigenvectors of A A^T, V of A^T A, both with eigenvalues S^2
    np.testing.assert_allclose(A @ A.T @ system.U, system.U * system.S**2, atol=1e-12)
    np.testing.assert_allclose(A.T @ A @ system.V, system.V * system.S**2, atol=1e-12)


def test_eigh_system_equal_vectors_and_signed_eigenvalues():
    A = _kernel(40, 5e-2)
    system = compute_singular_system(A, method="eigh")
    np.testing.assert_array_equal(system.U, system.V)
    np.testing.assert_allclose(np.sort(system.S), np.sort(np.linalg.eigvalsh(A)), atol=1e-12)


def test_svd_system_nonnegative_on_indefinite_matrix():
    A = np.diag([1.0, -0.5, 0.25])
    system = compute_singular_system(A, method="svd", require_nonnegative=True)
    np.testing.assert_allclose(system.S, [1.0, 0.5, 0.25])
    np.testing.assert_allclose(system.reconstruct(), A, atol=1e-14)


def test_require_nonnegative_flags_negative_eigenvalue():
    A = np.diag([1.0, -0.5, 0.25])
    with pytest.raises(NumericalInstabilityError):
        compute_singular_system(A, method="eigh", require_nonnegative=True)
    # tolerated when the caller allows it
    system = compute_singular_system(A, method="eigh", require_nonnegative=True, atol=1.0)
    np.testing.assert_allclose(system.S, [1.0, 0.25, -0.5])


def test_unknown_method_rejected():
    with pytest.raises(InvalidParameterError):
        compute_singular_system(np.eye(3), method="qr")


def test_non_finite_decomposition_raises(monkeypatch):
    def bad_eigh(m, check_finite=False):
        n = m.shape[0]
        return np.full(n, np.nan), np.eye(n)

    monkeypatch.setattr(spectral.la, "eigh", bad_eigh)
    with pytest.raises(NumericalInstabilityError):
        compute_singular_system(_kernel(8, 1e-3))


def test_inconsistent_decomposition_fails_reconstruction(monkeypatch):
    """A triple that does not rebuild A must not be returned."""
    def wrong_eigh(m, check_finite=False):
        n = m.shape[0]
        return np.ones(n), np.eye(n)

    monkeypatch.setattr(spectral.la, "eigh", wrong_eigh)
    with pytest.raises(NumericalInstabilityError):
        compute_singular_system(_kernel(8, 1e-2))


# --- SpectralSystem ---

def test_spectral_system_arrays_read_only_and_unaliased():
    """Left and right vectors are independent read-only copies."""
    system = compute_singular_system(_kernel(8, 1e-2), method="eigh")
    assert not np.shares_memory(system.U, system.V)
    for arr in (system.S, system.U, system.V):
        with pytest.raises(ValueError):
            arr[0] = 99.0


def test_spectral_system_copies_inputs():
    W = np.eye(3)
    S = np.array([3.0, 2.0, 1.0])
    system = SpectralSystem(S=S, U=W, V=W)
    W[0, 0] = 5.0
    S[0] = 7.0
    np.testing.assert_array_equal(system.U, np.eye(3))
    np.testing.assert_array_equal(system.S, [3.0, 2.0, 1.0])


@pytest.mark.parametrize(
    "S,U,V",
    [
        (np.ones(3), np.eye(2), np.eye(3)),
        (np.ones(3), np.eye(3), np.ones((3, 2))),
        (np.ones((3, 1)), np.eye(3), np.eye(3)),
        (np.ones(0), np.eye(0), np.eye(0)),
    ],
)
def test_spectral_system_rejects_bad_shapes(S, U, V):
    with pytest.raises(InvalidParameterError):
        SpectralSystem(S=S, U=U, V=V)
