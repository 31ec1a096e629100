"""
Discretized heat-kernel forward operator on a periodic grid.

  A[i, j] = (dx / sqrt(4 pi t)) * exp(-d(x_i, x_j)^2 / (4 t)),   dx = 1/N

with d the circular distance. A maps an initial state h0 (N,) to the expected
state at time t, y = A h0. On a uniform periodic grid A is symmetric circulant.
"""

from __future__ import annotations

import numpy as np

from .grid import PeriodicGrid, as_grid, circular_distance, circular_distance_matrix
from .util import as_positive_scalar


def _heat_weights(d: np.ndarray, *, dx: float, t: float) -> np.ndarray:
    return (dx / np.sqrt(4.0 * np.pi * t)) * np.exp(-(d * d) / (4.0 * t))


def build_kernel(grid: PeriodicGrid | np.ndarray, t: float) -> np.ndarray:
    """
    Build the (N, N) forward operator A for diffusion time t.

    Args:
      grid: PeriodicGrid or (N,) coordinates in [0, 1), equally spaced.
      t: diffusion time, > 0.

    Returns:
      A: (N, N) float64, symmetric.
    """
    t = as_positive_scalar(t, name="t")
    g = as_grid(grid)
    return _heat_weights(circular_distance_matrix(g), dx=g.spacing, t=t)


def kernel_spectrum(grid: PeriodicGrid | np.ndarray, t: float) -> np.ndarray:
    """
    Eigenvalues of `build_kernel(grid, t)` via the DFT of its first row.

    A is circulant, so its eigenvectors are Fourier modes and its eigenvalues
    are the (real, since the row is even) DFT coefficients of row 0.

    Returns:
      (N,) eigenvalues in FFT frequency order (not sorted).
    """
    t = as_positive_scalar(t, name="t")
    g = as_grid(grid)
    row = _heat_weights(circular_distance(g.x[0], g.x), dx=g.spacing, t=t)
    return np.fft.fft(row).real
