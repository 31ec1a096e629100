"""
Tests for the exponential covariance, its precision and the FFT prior view.
"""
from __future__ import annotations

import numpy as np
import pytest

from heatinv.errors import InvalidParameterError, SingularMatrixError
from heatinv.grid import PeriodicGrid
from heatinv.prior import ExponentialPrior, build_exponential_covariance, invert_to_precision


# --- Covariance ---

def test_covariance_unit_diagonal_symmetric():
    sigma = build_exponential_covariance(PeriodicGrid.uniform(20), 0.1)
    np.testing.assert_array_equal(np.diag(sigma), np.ones(20))
    np.testing.assert_array_equal(sigma, sigma.T)
    assert np.all(sigma > 0.0)
    assert np.all(sigma <= 1.0)


def test_covariance_small_length_is_identity():
    """ell -> 0 drives Sigma to the identity."""
    sigma = build_exponential_covariance(PeriodicGrid.uniform(16), 1e-3)
    np.testing.assert_allclose(sigma, np.eye(16), rtol=0.0, atol=1e-20)


def test_covariance_large_length_is_singular_all_ones():
    """ell -> inf drives Sigma to the all-ones matrix; inversion must refuse it."""
    sigma = build_exponential_covariance(PeriodicGrid.uniform(16), 1e20)
    np.testing.assert_allclose(sigma, np.ones((16, 16)), rtol=0.0, atol=1e-15)
    with pytest.raises(SingularMatrixError):
        invert_to_precision(sigma)


def test_singular_matrix_error_is_linalg_error():
    with pytest.raises(np.linalg.LinAlgError):
        invert_to_precision(np.ones((5, 5)))


@pytest.mark.parametrize("ell", [0.0, -0.1, float("nan")])
def test_covariance_rejects_bad_length(ell):
    with pytest.raises(InvalidParameterError):
        build_exponential_covariance(PeriodicGrid.uniform(8), ell)


# --- Precision ---

def test_precision_inverts_covariance():
    sigma = build_exponential_covariance(PeriodicGrid.uniform(32), 0.1)
    Q = invert_to_precision(sigma)
    np.testing.assert_array_equal(Q, Q.T)
    np.testing.assert_allclose(sigma @ Q, np.eye(32), atol=1e-10)


def test_precision_rejects_non_symmetric():
    with pytest.raises(InvalidParameterError):
        invert_to_precision(np.array([[1.0, 0.5], [0.0, 1.0]]))


def test_precision_rejects_non_square():
    with pytest.raises(InvalidParameterError):
        invert_to_precision(np.ones((2, 3)))


# --- FFT prior ---

def test_prior_fft_apply_matches_dense():
    prior = ExponentialPrior(grid=PeriodicGrid.uniform(24), corr_length=0.08, variance=2.5)
    rng = np.random.default_rng(3)
    x = rng.standard_normal(24)
    np.testing.assert_allclose(prior.apply_C(x), prior.covariance() @ x, rtol=1e-10, atol=1e-12)
    np.testing.assert_allclose(prior.apply_Cinv(x), prior.precision() @ x, rtol=1e-8, atol=1e-10)


def test_prior_spectrum_positive_and_matches_eigenvalues():
    prior = ExponentialPrior(grid=PeriodicGrid.uniform(30), corr_length=0.2)
    spec = prior.spectrum()
    assert np.all(spec > 0.0)
    lam = np.linalg.eigvalsh(prior.covariance())
    np.testing.assert_allclose(np.sort(spec), np.sort(lam), rtol=1e-10, atol=1e-12)


def test_prior_covariance_scaled_by_variance():
    grid = PeriodicGrid.uniform(10)
    prior = ExponentialPrior(grid=grid, corr_length=0.1, variance=4.0)
    np.testing.assert_allclose(prior.covariance(), 4.0 * build_exponential_covariance(grid, 0.1))


def test_prior_apply_cinv_refuses_singular():
    prior = ExponentialPrior(grid=PeriodicGrid.uniform(16), corr_length=1e20)
    with pytest.raises(SingularMatrixError):
        prior.apply_Cinv(np.ones(16))


def test_prior_rejects_bad_parameters():
    with pytest.raises(InvalidParameterError):
        ExponentialPrior(grid=PeriodicGrid.uniform(8), corr_length=0.1, variance=0.0)
    with pytest.raises(InvalidParameterError):
        ExponentialPrior(grid=[0.0, 0.3], corr_length=0.1)
    with pytest.raises(InvalidParameterError):
        ExponentialPrior(grid=PeriodicGrid.uniform(8), corr_length=0.1).apply_C(np.ones(7))
