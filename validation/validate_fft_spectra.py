#!/usr/bin/env python3
"""
Sanity checks for the circulant (FFT-diagonal) views used in `heatinv`.

Checks:
  - Kernel: DFT of the first row of A matches the dense eigenvalues.
  - Prior: apply_C / apply_Cinv match the dense covariance / precision.
  - MC: samples from the exponential prior recover its covariance.
"""

from __future__ import annotations

import numpy as np

import heatinv
from heatinv.synthesize import sample_gaussian


def _check_kernel(*, n: int, t: float) -> float:
    grid = heatinv.PeriodicGrid.uniform(n)
    A = heatinv.build_kernel(grid, t)
    lam_dense, _ = heatinv.decompose_symmetric(A)
    lam_fft = np.sort(heatinv.kernel_spectrum(grid, t))[::-1]
    return float(np.max(np.abs(lam_dense - lam_fft)) / np.max(np.abs(lam_dense)))


def _check_prior_apply(*, n: int, ell: float, rng: np.random.Generator) -> tuple[float, float]:
    prior = heatinv.ExponentialPrior(grid=heatinv.PeriodicGrid.uniform(n), corr_length=ell, variance=2.0)
    x = rng.standard_normal(n)
    C = prior.covariance()
    Q = prior.precision()
    err_c = float(np.max(np.abs(prior.apply_C(x) - C @ x)) / np.max(np.abs(C @ x)))
    err_q = float(np.max(np.abs(prior.apply_Cinv(x) - Q @ x)) / np.max(np.abs(Q @ x)))
    return err_c, err_q


def _check_prior_mc(*, n: int, ell: float, n_samples: int, rng: np.random.Generator) -> float:
    prior = heatinv.ExponentialPrior(grid=heatinv.PeriodicGrid.uniform(n), corr_length=ell)
    C = prior.covariance()
    draws = np.stack([sample_gaussian(C, rng=rng) for _ in range(int(n_samples))], axis=0)
    C_hat = draws.T @ draws / float(n_samples)
    return float(np.max(np.abs(C_hat - C)))


def main() -> None:
    rng = np.random.default_rng(0)
    for n, t in [(32, 1e-3), (100, 1e-3), (100, 1e-2)]:
        print(f"[kernel] n={n} t={t:g} max rel eig diff={_check_kernel(n=n, t=t):.3e}", flush=True)
    for n, ell in [(32, 0.05), (100, 0.2)]:
        err_c, err_q = _check_prior_apply(n=n, ell=ell, rng=rng)
        print(f"[prior] n={n} ell={ell:g} apply_C rel={err_c:.3e} apply_Cinv rel={err_q:.3e}", flush=True)
    err = _check_prior_mc(n=32, ell=0.1, n_samples=20000, rng=rng)
    print(f"[mc] n=32 ell=0.1 max|C_hat - C|={err:.3e} (expect ~1e-2)", flush=True)


if __name__ == "__main__":
    main()
