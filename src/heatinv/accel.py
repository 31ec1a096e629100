"""
Gauss-linear posterior with the dense solves on JAX (GPU when available).

Same inputs, validation and singularity rule as
`heatinv.posterior.gauss_linear_posterior`; only the O(n^3) inverse runs in
`jax.numpy.linalg`. Requires JAX (set CUDA_VISIBLE_DEVICES to pick a device).
"""

from __future__ import annotations

import numpy as np

import jax
import jax.numpy as jnp

from .errors import SingularPrecisionError
from .posterior import normal_equations
from .util import reciprocal_condition

jax.config.update("jax_enable_x64", True)


def _inverse_and_mean(P: np.ndarray, rhs: np.ndarray) -> tuple[np.ndarray, np.ndarray]:
    P_j = jnp.asarray(P)
    cov = jnp.linalg.inv(P_j)
    cov = 0.5 * (cov + cov.T)
    mean = cov @ jnp.asarray(rhs)
    return np.asarray(mean, dtype=np.float64), np.asarray(cov, dtype=np.float64)


def gauss_linear_posterior_jax(
    y: np.ndarray,
    Qe,
    A: np.ndarray,
    Qh0,
    prior_mean: np.ndarray | None = None,
    *,
    rcond_min: float | None = None,
) -> tuple[np.ndarray, np.ndarray]:
    """JAX twin of `gauss_linear_posterior`; returns numpy (mean, cov)."""
    P, rhs = normal_equations(y, Qe, A, Qh0, prior_mean)
    n = int(P.shape[0])
    if rcond_min is None:
        rcond_min = n * float(np.finfo(np.float64).eps)
    rcond = reciprocal_condition(P)
    if rcond < float(rcond_min):
        cond = np.inf if rcond == 0.0 else 1.0 / rcond
        raise SingularPrecisionError(
            f"posterior precision ({n}x{n}) is numerically singular: cond~{cond:.3e}."
        )

    mean, cov = _inverse_and_mean(P, rhs)
    if not (bool(np.all(np.isfinite(mean))) and bool(np.all(np.isfinite(cov)))):
        raise SingularPrecisionError(f"posterior precision ({n}x{n}) inverse is not finite: cond~{1.0 / rcond:.3e}.")
    return mean, cov
