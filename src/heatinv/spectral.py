"""
Spectral decomposition of the (symmetric) forward operator.

The singular system (S, U, V) must satisfy A ~= U diag(S) V^T. Computing S, U
and V from three separate eigen problems (A, A A^T, A^T A) leaves the sign and
order of the vectors undetermined relative to each other, so here the whole
triple always comes out of a single decomposition:

  - method="eigh": A = W diag(lam) W^T, S = lam, U = V = W.
    S are the eigenvalues of A itself and may contain small negative values
    (round-off and grid truncation of the kernel); TSVD drops those.
  - method="svd":  A = U diag(s) Vh, S = s >= 0, V = Vh^T.

Components are ordered by decreasing S in both cases.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

import numpy as np
import scipy.linalg as la

from .errors import InvalidParameterError, NumericalInstabilityError
from .util import as_square_matrix


@dataclass(frozen=True)
class SpectralSystem:
    """
    Singular system of an (N, N) operator.

    S, U and V are copied on construction and made read-only, so U and V never
    alias each other even when they hold the same vectors.

    Fields:
      S: (N,) singular values (or signed eigenvalues), decreasing.
      U: (N, N) left vectors as columns, orthonormal.
      V: (N, N) right vectors as columns, orthonormal.
      method: 'eigh' or 'svd'.
    """

    S: np.ndarray
    U: np.ndarray
    V: np.ndarray
    method: str = "eigh"

    def __post_init__(self) -> None:
        S = np.array(self.S, dtype=np.float64, copy=True)
        if S.ndim != 1 or S.size == 0:
            raise InvalidParameterError(f"S must be a non-empty 1-D array; got shape {S.shape}.")
        n = int(S.size)
        U = np.array(self.U, dtype=np.float64, copy=True)
        V = np.array(self.V, dtype=np.float64, copy=True)
        if U.shape != (n, n) or V.shape != (n, n):
            raise InvalidParameterError(
                f"U and V must have shape ({n},{n}) to match S; got U{U.shape}, V{V.shape}."
            )
        for name, arr in (("S", S), ("U", U), ("V", V)):
            arr.setflags(write=False)
            object.__setattr__(self, name, arr)

    @property
    def n(self) -> int:
        return int(self.S.size)

    def reconstruct(self) -> np.ndarray:
        """U diag(S) V^T."""
        return (self.U * self.S[None, :]) @ self.V.T


def decompose_symmetric(M: np.ndarray) -> tuple[np.ndarray, np.ndarray]:
    """
    Eigenpairs of a symmetric matrix, ordered by decreasing eigenvalue.

    Returns:
      eigenvalues: (N,)
      eigenvectors: (N, N), column k pairs with eigenvalues[k].
    """
    m = as_square_matrix(M, name="M", symmetric=True)
    n = int(m.shape[0])
    try:
        lam, W = la.eigh(m, check_finite=False)
    except la.LinAlgError as e:
        raise NumericalInstabilityError(f"Symmetric eigensolver failed for {n}x{n} matrix.") from e
    order = np.argsort(lam)[::-1]
    return lam[order], W[:, order]


def compute_singular_system(
    A: np.ndarray,
    *,
    method: Literal["eigh", "svd"] = "eigh",
    require_nonnegative: bool = False,
    atol: float | None = None,
    rtol: float = 1e-8,
) -> SpectralSystem:
    """
    Singular system (S, U, V) of a symmetric operator from one decomposition.

    Args:
      A: (N, N) symmetric operator (e.g. from `build_kernel`).
      method: 'eigh' (signed eigenvalues, U = V) or 'svd'.
      require_nonnegative: raise if any S_i < -atol.
      atol: negativity tolerance; default 1e-12 * max|S|.
      rtol: relative Frobenius tolerance of the check A ~= U diag(S) V^T.

    Returns:
      SpectralSystem.

    Raises:
      InvalidParameterError: A not square/symmetric/finite, or unknown method.
      NumericalInstabilityError: non-finite output, unexpected negative S,
        or failed reconstruction.
    """
    method = str(method).lower()
    if method not in ("eigh", "svd"):
        raise InvalidParameterError("method must be 'eigh' or 'svd'.")
    a = as_square_matrix(A, name="A", symmetric=True)
    n = int(a.shape[0])

    if method == "eigh":
        S, W = decompose_symmetric(a)
        U = W
        V = W
    else:
        try:
            U, S, Vh = la.svd(a, check_finite=False)
        except la.LinAlgError as e:
            raise NumericalInstabilityError(f"SVD did not converge for {n}x{n} operator.") from e
        V = Vh.T

    if not (bool(np.all(np.isfinite(S))) and bool(np.all(np.isfinite(U))) and bool(np.all(np.isfinite(V)))):
        raise NumericalInstabilityError(f"Spectral decomposition of {n}x{n} operator produced NaN/Inf.")

    s_scale = float(np.max(np.abs(S)))
    if require_nonnegative:
        tol = 1e-12 * s_scale if atol is None else float(atol)
        s_min = float(np.min(S))
        if s_min < -tol:
            raise NumericalInstabilityError(
                f"Singular value expected non-negative but got {s_min:.3e} "
                f"(tol={tol:.3e}, max|S|={s_scale:.3e}, n={n})."
            )

    system = SpectralSystem(S=S, U=U, V=V, method=method)
    a_norm = float(np.linalg.norm(a))
    resid = float(np.linalg.norm(system.reconstruct() - a))
    if resid > float(rtol) * max(a_norm, np.finfo(np.float64).tiny):
        raise NumericalInstabilityError(
            f"Reconstruction check failed: ||U diag(S) V^T - A||_F={resid:.3e} "
            f"> rtol*||A||_F={float(rtol) * a_norm:.3e} (n={n})."
        )
    return system
