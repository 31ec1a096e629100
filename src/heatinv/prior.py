"""
Exponential (Ornstein-Uhlenbeck type) Gaussian priors on a periodic grid.

This file contains the prior pieces only: dense covariance/precision builders
and an FFT-diagonal view of the same stationary covariance. Estimators take
the dense precision (`ExponentialPrior.precision`) or apply it matrix-free via
`apply_Cinv`.
"""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from .errors import SingularMatrixError
from .grid import PeriodicGrid, as_grid, circular_distance, circular_distance_matrix
from .util import as_positive_scalar, as_square_matrix, as_vector, checked_inverse, symmetrize


def build_exponential_covariance(grid: PeriodicGrid | np.ndarray, ell: float) -> np.ndarray:
    """
    Correlation matrix Sigma[i, j] = exp(-d(x_i, x_j) / ell), unit diagonal.

    ell -> 0 gives the identity; ell -> inf gives the (singular) all-ones matrix.
    """
    ell = as_positive_scalar(ell, name="ell")
    return np.exp(-circular_distance_matrix(as_grid(grid)) / ell)


def invert_to_precision(sigma: np.ndarray, *, rcond_min: float | None = None) -> np.ndarray:
    """
    Precision Q = Sigma^{-1} of a symmetric covariance matrix.

    Raises:
      SingularMatrixError: Sigma is singular or its reciprocal condition number
        is below rcond_min (default N * eps).
    """
    s = as_square_matrix(sigma, name="sigma", symmetric=True)
    return symmetrize(checked_inverse(s, label="covariance", rcond_min=rcond_min))


@dataclass(frozen=True)
class ExponentialPrior:
    """
    Stationary Gaussian prior h0 ~ N(0, variance * Sigma(ell)) on a periodic grid.

    Sigma is symmetric circulant, so it is diagonal in the discrete Fourier basis:

      Sigma = F^H diag(lam_k) F,   lam_k = DFT_k(Sigma[0, :])

    with all lam_k > 0 for ell > 0 (the exponential kernel has positive
    Fourier coefficients on the circle).

    Args:
      grid: periodic grid (coordinates are validated).
      corr_length: ell > 0.
      variance: marginal prior variance gamma^2 > 0.
    """

    grid: PeriodicGrid
    corr_length: float
    variance: float = 1.0

    def __post_init__(self) -> None:
        object.__setattr__(self, "grid", as_grid(self.grid))
        object.__setattr__(self, "corr_length", as_positive_scalar(self.corr_length, name="corr_length"))
        object.__setattr__(self, "variance", as_positive_scalar(self.variance, name="variance"))

        x = self.grid.x
        row = float(self.variance) * np.exp(-circular_distance(x[0], x) / float(self.corr_length))
        spec = np.fft.fft(row).real
        spec.setflags(write=False)
        object.__setattr__(self, "_spectrum", spec)

    @property
    def n(self) -> int:
        return self.grid.n

    def covariance(self) -> np.ndarray:
        """(N, N) dense covariance variance * Sigma."""
        return float(self.variance) * build_exponential_covariance(self.grid, self.corr_length)

    def precision(self, *, rcond_min: float | None = None) -> np.ndarray:
        """(N, N) dense precision (variance * Sigma)^{-1}."""
        return invert_to_precision(self.covariance(), rcond_min=rcond_min)

    def spectrum(self) -> np.ndarray:
        """(N,) covariance eigenvalues in FFT frequency order."""
        return np.array(self._spectrum, copy=True)

    def apply_C(self, x: np.ndarray) -> np.ndarray:
        """Apply the covariance to a (N,) vector in O(N log N)."""
        xx = as_vector(x, n=self.n, name="x")
        return np.fft.ifft(np.fft.fft(xx) * self._spectrum).real

    def apply_Cinv(self, x: np.ndarray) -> np.ndarray:
        """
        Apply the precision to a (N,) vector in O(N log N).

        Raises SingularMatrixError under the same conditioning rule as
        `invert_to_precision`.
        """
        spec = np.asarray(self._spectrum)
        s_max = float(np.max(np.abs(spec)))
        s_min = float(np.min(spec))
        rcond_min = self.n * float(np.finfo(np.float64).eps)
        if s_max <= 0.0 or s_min / s_max < rcond_min:
            raise SingularMatrixError(
                f"covariance ({self.n}x{self.n}) is numerically singular: "
                f"min eigenvalue {s_min:.3e}, max {s_max:.3e}."
            )
        xx = as_vector(x, n=self.n, name="x")
        return np.fft.ifft(np.fft.fft(xx) / spec).real
