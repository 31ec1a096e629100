"""
Error kinds raised by the inversion engine.

Each error also subclasses the builtin it refines, so callers that catch
`ValueError` or `numpy.linalg.LinAlgError` keep working.
"""

from __future__ import annotations

import numpy as np


class HeatInvError(Exception):
    """Base class for all heatinv errors."""


class InvalidParameterError(HeatInvError, ValueError):
    """Bad scalar parameter (t, alpha, ell, lam, gamma), bad grid, or shape mismatch."""


class SingularMatrixError(HeatInvError, np.linalg.LinAlgError):
    """Covariance/precision matrix is singular or numerically singular."""


class SingularPrecisionError(SingularMatrixError):
    """Posterior precision A^T Qe A + Qh0 is not invertible."""


class NumericalInstabilityError(HeatInvError, ArithmeticError):
    """Spectral decomposition produced non-finite or inconsistent output."""
