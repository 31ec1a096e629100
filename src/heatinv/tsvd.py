"""
Truncated spectral inversion.

  h0_hat = sum_{i : S_i > alpha} (<u_i, y> / S_i) v_i

Components with S_i <= alpha (including non-positive eigenvalue artifacts) are
dropped. Choosing alpha is the caller's job.
"""

from __future__ import annotations

import numpy as np
from tqdm import tqdm

from .util import as_positive_scalar, as_singular_system, as_vector


def selected_components(alpha: float, S: np.ndarray) -> np.ndarray:
    """Indices i with S_i > alpha (strict), in increasing index order."""
    alpha = as_positive_scalar(alpha, name="alpha")
    s = as_vector(S, name="S")
    return np.nonzero(s > alpha)[0].astype(np.int64)


def tsvd_solution(
    *,
    alpha: float,
    y: np.ndarray,
    U: np.ndarray,
    S: np.ndarray,
    V: np.ndarray,
) -> np.ndarray:
    """
    TSVD estimate of h0.

    Args:
      alpha: cutoff > 0.
      y: (N,) observation.
      U, S, V: singular system (columns of U/V pair with S).

    Returns:
      (N,) estimate; the zero vector when no S_i exceeds alpha.
    """
    yy, u, s, v = as_singular_system(y, U, S, V)
    keep = selected_components(alpha, s)
    if keep.size == 0:
        return np.zeros_like(yy)
    coeff = (u[:, keep].T @ yy) / s[keep]  # (n_keep,) = <u_i, y> / S_i
    return v[:, keep] @ coeff


def tsvd_sweep(
    *,
    alphas: np.ndarray,
    y: np.ndarray,
    U: np.ndarray,
    S: np.ndarray,
    V: np.ndarray,
    progress: bool = False,
) -> np.ndarray:
    """
    Evaluate `tsvd_solution` for each caller-supplied cutoff.

    Returns:
      (n_alpha, N) estimates, row k for alphas[k].
    """
    alphas = np.asarray(alphas, dtype=np.float64).reshape(-1)
    yy, u, s, v = as_singular_system(y, U, S, V)
    out = np.zeros((alphas.size, yy.size), dtype=np.float64)
    for k in tqdm(range(alphas.size), desc="tsvd-sweep", leave=True, disable=not progress):
        out[k] = tsvd_solution(alpha=float(alphas[k]), y=yy, U=u, S=s, V=v)
    return out
