"""
Equally spaced grids on the periodic unit interval [0, 1).

The two ends of the interval are identified, so the distance between two
points is the shorter of the direct and the wrap-around path:

  d(x_i, x_j) = min(|x_i - x_j|, 1 - |x_i - x_j|)   in [0, 0.5]
"""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from .errors import InvalidParameterError

SPACING_ATOL = 1e-9


@dataclass(frozen=True)
class PeriodicGrid:
    """
    N equally spaced, strictly increasing coordinates in [0, 1).

    Args:
      x: (n,) coordinates. Spacing must be 1/n so the grid covers the circle.

    The coordinate array is copied and made read-only.
    """

    x: np.ndarray

    def __post_init__(self) -> None:
        x = np.array(self.x, dtype=np.float64, copy=True)
        if x.ndim != 1 or x.size == 0:
            raise InvalidParameterError(f"grid must be a non-empty 1-D sequence; got shape {x.shape}.")
        if not bool(np.all(np.isfinite(x))):
            raise InvalidParameterError("grid coordinates must be finite.")
        if not bool(np.all((x >= 0.0) & (x < 1.0))):
            raise InvalidParameterError(
                f"grid coordinates must lie in [0, 1); got min={float(np.min(x))}, max={float(np.max(x))}."
            )
        n = int(x.size)
        if n > 1:
            dx = np.diff(x)
            if not bool(np.all(dx > 0.0)):
                raise InvalidParameterError("grid coordinates must be strictly increasing.")
            if not np.allclose(dx, 1.0 / n, rtol=0.0, atol=SPACING_ATOL):
                raise InvalidParameterError(
                    f"grid must be equally spaced with spacing 1/N={1.0 / n:.6g}; "
                    f"got spacing in [{float(np.min(dx)):.6g}, {float(np.max(dx)):.6g}]."
                )
        x.setflags(write=False)
        object.__setattr__(self, "x", x)

    @classmethod
    def uniform(cls, n: int, offset: float = 0.0) -> "PeriodicGrid":
        """Grid x_k = offset + k/n, k = 0..n-1 (requires 0 <= offset < 1/n)."""
        n = int(n)
        if n <= 0:
            raise InvalidParameterError(f"n must be positive; got {n}.")
        return cls(x=float(offset) + np.arange(n, dtype=np.float64) / n)

    @property
    def n(self) -> int:
        return int(self.x.size)

    @property
    def spacing(self) -> float:
        return 1.0 / self.n


def as_grid(grid: PeriodicGrid | np.ndarray) -> PeriodicGrid:
    """Accept a PeriodicGrid or raw coordinates; validate the latter."""
    if isinstance(grid, PeriodicGrid):
        return grid
    return PeriodicGrid(x=np.asarray(grid, dtype=np.float64))


def circular_distance(xi, xj):
    """Wrap-around distance between coordinates in [0, 1). Broadcasts over arrays."""
    diff = np.abs(np.asarray(xi, dtype=np.float64) - np.asarray(xj, dtype=np.float64))
    return np.minimum(diff, 1.0 - diff)


def circular_distance_matrix(grid: PeriodicGrid | np.ndarray) -> np.ndarray:
    """(n, n) matrix D[i, j] = d(x_i, x_j); exactly symmetric with zero diagonal."""
    x = as_grid(grid).x
    return circular_distance(x[:, None], x[None, :])
