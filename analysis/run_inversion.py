#!/usr/bin/env python3
"""
Synthetic end-to-end inversion on the periodic unit interval.

Usage:
  python analysis/run_inversion.py [n_grid] [t] [alpha] [out_dir]

Outputs:
  - `<out_dir>/inversion_n<N>_t<t>.npz` (see `heatinv.workflow.save_result`)
"""

from __future__ import annotations

import pathlib
import sys

BASE_DIR = pathlib.Path(__file__).resolve().parent
PKG_DIR = BASE_DIR.parent
OUT_BASE = PKG_DIR / "out"

if str(PKG_DIR / "src") not in sys.path:
    sys.path.insert(0, str(PKG_DIR / "src"))

from heatinv import InversionConfig, run_inversion, save_result


def main() -> None:
    n_grid = int(sys.argv[1]) if len(sys.argv) >= 2 else 100
    t = float(sys.argv[2]) if len(sys.argv) >= 3 else 1e-3
    alpha = float(sys.argv[3]) if len(sys.argv) >= 4 else 1e-2
    out_dir = pathlib.Path(sys.argv[4]) if len(sys.argv) >= 5 else OUT_BASE
    out_dir.mkdir(parents=True, exist_ok=True)

    cfg = InversionConfig(n_grid=n_grid, t=t, alpha=alpha)
    result = run_inversion(cfg)
    save_result(result, out_dir / f"inversion_n{n_grid}_t{t:g}.npz")


if __name__ == "__main__":
    main()
