"""
Shared array validation and dense linear-algebra helpers (no I/O).

Conventions:
  - vectors are (n,) float64, matrices are (n, n) float64.
  - inputs are copied into fresh float64 arrays, callers' arrays are never mutated.
"""

from __future__ import annotations

import numpy as np
import scipy.linalg as la

from .errors import InvalidParameterError, SingularMatrixError

SYMMETRY_RTOL = 1e-10


def as_positive_scalar(value: float, *, name: str) -> float:
    """Return `value` as a float, raising unless it is finite and > 0."""
    try:
        v = float(value)
    except (TypeError, ValueError) as e:
        raise InvalidParameterError(f"{name} must be a real scalar; got {value!r}.") from e
    if not np.isfinite(v) or v <= 0.0:
        raise InvalidParameterError(f"{name} must be finite and > 0; got {v}.")
    return v


def as_nonnegative_scalar(value: float, *, name: str) -> float:
    """Return `value` as a float, raising unless it is finite and >= 0."""
    try:
        v = float(value)
    except (TypeError, ValueError) as e:
        raise InvalidParameterError(f"{name} must be a real scalar; got {value!r}.") from e
    if not np.isfinite(v) or v < 0.0:
        raise InvalidParameterError(f"{name} must be finite and >= 0; got {v}.")
    return v


def as_vector(x: np.ndarray, *, n: int | None = None, name: str = "x") -> np.ndarray:
    """Copy `x` into a finite (n,) float64 vector."""
    v = np.array(x, dtype=np.float64, copy=True)
    if v.ndim != 1:
        raise InvalidParameterError(f"{name} must be 1-D; got shape {v.shape}.")
    if v.size == 0:
        raise InvalidParameterError(f"{name} must be non-empty.")
    if n is not None and v.shape != (int(n),):
        raise InvalidParameterError(f"{name} must have shape ({int(n)},); got {v.shape}.")
    if not bool(np.all(np.isfinite(v))):
        raise InvalidParameterError(f"{name} must be finite.")
    return v


def as_square_matrix(
    M: np.ndarray,
    *,
    n: int | None = None,
    name: str = "M",
    symmetric: bool = False,
) -> np.ndarray:
    """
    Copy `M` into a finite (n, n) float64 matrix.

    With symmetric=True, also require max|M - M^T| <= SYMMETRY_RTOL * max|M|.
    """
    m = np.array(M, dtype=np.float64, copy=True)
    if m.ndim != 2 or m.shape[0] != m.shape[1]:
        raise InvalidParameterError(f"{name} must be square; got shape {m.shape}.")
    if m.shape[0] == 0:
        raise InvalidParameterError(f"{name} must be non-empty.")
    if n is not None and m.shape != (int(n), int(n)):
        raise InvalidParameterError(f"{name} must have shape ({int(n)},{int(n)}); got {m.shape}.")
    if not bool(np.all(np.isfinite(m))):
        raise InvalidParameterError(f"{name} must be finite.")
    if symmetric:
        asym = float(np.max(np.abs(m - m.T)))
        scale = float(np.max(np.abs(m)))
        if asym > SYMMETRY_RTOL * scale:
            raise InvalidParameterError(f"{name} must be symmetric; max|M - M^T|={asym:.3e}.")
    return m


def symmetrize(M: np.ndarray) -> np.ndarray:
    return 0.5 * (M + M.T)


def reciprocal_condition(M: np.ndarray) -> float:
    """
    2-norm reciprocal condition number s_min / s_max.

    Returns 0.0 for a zero matrix or when the singular values are not finite.
    """
    s = la.svdvals(np.asarray(M, dtype=np.float64), check_finite=False)
    if not bool(np.all(np.isfinite(s))) or float(s[0]) <= 0.0:
        return 0.0
    return float(s[-1] / s[0])


def checked_inverse(
    M: np.ndarray,
    *,
    label: str = "matrix",
    rcond_min: float | None = None,
    error_cls: type[SingularMatrixError] = SingularMatrixError,
) -> np.ndarray:
    """
    Dense inverse of a square matrix, refusing singular or numerically singular input.

    Args:
      M: (n, n) matrix.
      label: name used in error messages.
      rcond_min: smallest accepted s_min/s_max; default n * machine epsilon.
      error_cls: SingularMatrixError or a subclass, raised on failure.

    Returns:
      (n, n) inverse.
    """
    m = np.asarray(M, dtype=np.float64)
    n = int(m.shape[0])
    if rcond_min is None:
        rcond_min = n * float(np.finfo(np.float64).eps)

    rcond = reciprocal_condition(m)
    if rcond < float(rcond_min):
        cond = np.inf if rcond == 0.0 else 1.0 / rcond
        raise error_cls(
            f"{label} ({n}x{n}) is numerically singular: cond~{cond:.3e} "
            f"exceeds 1/rcond_min={1.0 / float(rcond_min):.3e}."
        )
    try:
        inv = la.inv(m, check_finite=False)
    except la.LinAlgError as e:
        raise error_cls(f"{label} ({n}x{n}) inversion failed: cond~{1.0 / rcond:.3e}.") from e
    if not bool(np.all(np.isfinite(inv))):
        raise error_cls(f"{label} ({n}x{n}) inverse is not finite: cond~{1.0 / rcond:.3e}.")
    return inv


def as_singular_system(
    y: np.ndarray,
    U: np.ndarray,
    S: np.ndarray,
    V: np.ndarray,
) -> tuple[np.ndarray, np.ndarray, np.ndarray, np.ndarray]:
    """Validate an observation against a singular system; returns float64 copies (y, U, S, V)."""
    s = as_vector(S, name="S")
    n = int(s.size)
    yy = as_vector(y, n=n, name="y")
    u = as_square_matrix(U, n=n, name="U")
    v = as_square_matrix(V, n=n, name="V")
    return yy, u, s, v
