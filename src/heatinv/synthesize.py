"""
Synthetic truth and observations for the heat-kernel inverse problem.

  h0 ~ N(m0, C)            (e.g. C = ExponentialPrior.covariance())
  y  = A h0 + noise_std * e,   e ~ N(0, I)
"""

from __future__ import annotations

import numpy as np

from .errors import InvalidParameterError
from .spectral import decompose_symmetric
from .util import as_positive_scalar, as_square_matrix, as_vector


def sample_gaussian(
    cov: np.ndarray,
    *,
    rng: np.random.Generator,
    mean: np.ndarray | None = None,
) -> np.ndarray:
    """
    One draw from N(mean, cov) using the eigen-factor cov = W diag(lam) W^T.

    Eigenvalues down to -1e-10 * max(lam) are treated as round-off and clipped
    to zero; anything more negative means cov is not a covariance.
    """
    c = as_square_matrix(cov, name="cov", symmetric=True)
    n = int(c.shape[0])
    lam, W = decompose_symmetric(c)
    lam_max = float(np.max(np.abs(lam)))
    if float(np.min(lam)) < -1e-10 * lam_max:
        raise InvalidParameterError(f"cov is not positive semi-definite: min eigenvalue {float(np.min(lam)):.3e}.")
    z = rng.standard_normal(n)
    x = W @ (np.sqrt(np.maximum(lam, 0.0)) * z)
    if mean is not None:
        x = x + as_vector(mean, n=n, name="mean")
    return x


def synthesize_observation(
    A: np.ndarray,
    h0: np.ndarray,
    *,
    noise_std: float,
    rng: np.random.Generator,
) -> np.ndarray:
    """(m,) noisy observation A h0 + white noise of std noise_std."""
    a = np.asarray(A, dtype=np.float64)
    if a.ndim != 2:
        raise InvalidParameterError(f"A must be 2-D; got shape {a.shape}.")
    h = as_vector(h0, n=int(a.shape[1]), name="h0")
    sigma = as_positive_scalar(noise_std, name="noise_std")
    return a @ h + sigma * rng.standard_normal(int(a.shape[0]))
