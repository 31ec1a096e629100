"""
Diagonal Bayesian estimator in the spectral basis.

Model per component i (coefficients of h0 in V, of y in U):

  y_i = S_i h_i + e_i,   h_i ~ N(0, gamma^2),   e_i ~ N(0, lam^2)

With r = lam^2 / gamma^2 the posterior is

  mean_i = y_i S_i / (S_i^2 + r)
  var_i  = gamma^2 (1 - S_i^2 / (S_i^2 + r))

and the spatial estimate applies the Wiener filter phi_i = S_i^2 / (S_i^2 + r),
the smooth counterpart of the TSVD indicator 1[S_i > alpha].
"""

from __future__ import annotations

import numpy as np

from .util import as_positive_scalar, as_singular_system, as_vector


def _ratio(lam: float, gamma: float) -> float:
    lam = as_positive_scalar(lam, name="lam")
    gamma = as_positive_scalar(gamma, name="gamma")
    return (lam * lam) / (gamma * gamma)


def shrinkage_filter(lam: float, gamma: float, S: np.ndarray) -> np.ndarray:
    """(N,) phi_i = S_i^2 / (S_i^2 + lam^2/gamma^2), each in [0, 1]."""
    r = _ratio(lam, gamma)
    s2 = as_vector(S, name="S") ** 2
    return s2 / (s2 + r)


def posterior_mean_diag(lam: float, gamma: float, y: np.ndarray, S: np.ndarray) -> np.ndarray:
    """
    Posterior mean of the spectral coefficients of h0.

    Args:
      y: (N,) observation coefficients in the spectral basis, y_i = <u_i, y>.
      S: (N,) singular values.
    """
    r = _ratio(lam, gamma)
    s = as_vector(S, name="S")
    yy = as_vector(y, n=s.size, name="y")
    return yy * s / (s * s + r)


def posterior_var_diag(lam: float, gamma: float, S: np.ndarray) -> np.ndarray:
    """(N,) posterior variances of the spectral coefficients, each <= gamma^2."""
    gamma2 = as_positive_scalar(gamma, name="gamma") ** 2
    return gamma2 * (1.0 - shrinkage_filter(lam, gamma, S))


def bayes_solution(
    lam: float,
    gamma: float,
    y: np.ndarray,
    U: np.ndarray,
    S: np.ndarray,
    V: np.ndarray,
) -> np.ndarray:
    """
    Spatial posterior mean sum_i phi_i (<u_i, y> / S_i) v_i.

    phi_i / S_i is evaluated as S_i / (S_i^2 + r), so components with S_i = 0
    contribute nothing instead of 0/0.
    """
    yy, u, s, v = as_singular_system(y, U, S, V)
    coeff = posterior_mean_diag(lam, gamma, u.T @ yy, s)  # (N,) one weight per column i
    return v @ coeff
