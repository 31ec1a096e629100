"""
heatinv: regularized inversion of a periodic heat-kernel operator.

The main public entry points are:
  - `build_kernel` / `compute_singular_system` (operator and its spectrum)
  - `tsvd_solution` (truncated spectral inversion)
  - `bayes_solution` (diagonal Bayes / Wiener filter)
  - `gauss_linear_posterior` (correlated Gauss-linear posterior)
  - `run_inversion` (end-to-end workflow)

The JAX solve path lives in `heatinv.accel` and is not imported here.
"""

from .bayes_diag import bayes_solution, posterior_mean_diag, posterior_var_diag, shrinkage_filter
from .errors import (
    HeatInvError,
    InvalidParameterError,
    NumericalInstabilityError,
    SingularMatrixError,
    SingularPrecisionError,
)
from .grid import PeriodicGrid, circular_distance, circular_distance_matrix
from .kernel import build_kernel, kernel_spectrum
from .posterior import as_precision, gauss_linear_posterior
from .prior import ExponentialPrior, build_exponential_covariance, invert_to_precision
from .spectral import SpectralSystem, compute_singular_system, decompose_symmetric
from .tsvd import selected_components, tsvd_solution, tsvd_sweep
from .workflow import InversionConfig, InversionResult, run_inversion, save_result

__all__ = [
    "HeatInvError",
    "InvalidParameterError",
    "SingularMatrixError",
    "SingularPrecisionError",
    "NumericalInstabilityError",
    "PeriodicGrid",
    "circular_distance",
    "circular_distance_matrix",
    "build_kernel",
    "kernel_spectrum",
    "ExponentialPrior",
    "build_exponential_covariance",
    "invert_to_precision",
    "SpectralSystem",
    "decompose_symmetric",
    "compute_singular_system",
    "selected_components",
    "tsvd_solution",
    "tsvd_sweep",
    "shrinkage_filter",
    "posterior_mean_diag",
    "posterior_var_diag",
    "bayes_solution",
    "as_precision",
    "gauss_linear_posterior",
    "InversionConfig",
    "InversionResult",
    "run_inversion",
    "save_result",
]
