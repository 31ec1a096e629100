"""
Gauss-linear posterior for y = A h0 + e with Gaussian prior and noise.

  e  ~ N(0, Qe^{-1})
  h0 ~ N(m0, Qh0^{-1})

  P    = A^T Qe A + Qh0                       (posterior precision)
  mean = P^{-1} (A^T Qe y + Qh0 m0)
  cov  = P^{-1}

Qe and Qh0 are precisions. Each may be a non-negative scalar
(identity-scaled model), a non-negative (n,) vector (diagonal model), or a
symmetric (n, n) matrix (correlated model, e.g. `ExponentialPrior.precision()`).
A zero prior precision is a flat prior; only a singular P is refused.
"""

from __future__ import annotations

import numpy as np

from .errors import InvalidParameterError, SingularPrecisionError
from .util import as_nonnegative_scalar, as_square_matrix, as_vector, checked_inverse, symmetrize


def as_precision(Q, *, n: int, name: str = "Q") -> np.ndarray:
    """Normalise a scalar / (n,) / (n, n) precision to a dense (n, n) matrix."""
    q = np.asarray(Q, dtype=np.float64)
    if q.ndim == 0:
        return as_nonnegative_scalar(q, name=name) * np.eye(int(n), dtype=np.float64)
    if q.ndim == 1:
        d = as_vector(q, n=n, name=name)
        if not bool(np.all(d >= 0.0)):
            raise InvalidParameterError(f"{name} diagonal precisions must be >= 0.")
        return np.diag(d)
    return as_square_matrix(q, n=n, name=name, symmetric=True)


def normal_equations(
    y: np.ndarray,
    Qe,
    A: np.ndarray,
    Qh0,
    prior_mean: np.ndarray | None = None,
) -> tuple[np.ndarray, np.ndarray]:
    """
    Validate inputs and assemble the posterior precision and right-hand side.

    Args:
      y: (m,) observation.
      Qe: noise precision, scalar / (m,) / (m, m).
      A: (m, n) forward operator.
      Qh0: prior precision, scalar / (n,) / (n, n).
      prior_mean: (n,) prior mean; None means zero.

    Returns:
      P: (n, n) symmetric posterior precision A^T Qe A + Qh0.
      rhs: (n,) A^T Qe y + Qh0 m0.
    """
    a = np.array(A, dtype=np.float64, copy=True)
    if a.ndim != 2 or a.size == 0:
        raise InvalidParameterError(f"A must be a non-empty 2-D matrix; got shape {a.shape}.")
    if not bool(np.all(np.isfinite(a))):
        raise InvalidParameterError("A must be finite.")
    m, n = int(a.shape[0]), int(a.shape[1])

    yy = as_vector(y, n=m, name="y")
    qe = as_precision(Qe, n=m, name="Qe")
    qh0 = as_precision(Qh0, n=n, name="Qh0")

    AtQe = a.T @ qe  # (n, m)
    P = symmetrize(AtQe @ a + qh0)
    rhs = AtQe @ yy
    if prior_mean is not None:
        rhs = rhs + qh0 @ as_vector(prior_mean, n=n, name="prior_mean")
    return P, rhs


def gauss_linear_posterior(
    y: np.ndarray,
    Qe,
    A: np.ndarray,
    Qh0,
    prior_mean: np.ndarray | None = None,
    *,
    rcond_min: float | None = None,
) -> tuple[np.ndarray, np.ndarray]:
    """
    Closed-form posterior (mean, covariance) of h0.

    Returns:
      mean: (n,)
      cov: (n, n), symmetric positive semi-definite.

    Raises:
      InvalidParameterError: shape mismatch or negative scalar/vector precision.
      SingularPrecisionError: P is singular or numerically singular.
    """
    P, rhs = normal_equations(y, Qe, A, Qh0, prior_mean)
    cov = symmetrize(
        checked_inverse(P, label="posterior precision", rcond_min=rcond_min, error_cls=SingularPrecisionError)
    )
    mean = cov @ rhs
    return mean, cov
