"""femur_sweep.py
=================================

Purpose
-------
Check the femur-length inverse solver across the whole femur slider range.
For every femur length the solver must keep the standing shoulder height and
the torso:shin proportion fixed, and find a back angle that balances the
figure over mid-foot. This script reports where that works, where it cannot
(no sign change in the bisection bracket), and how large the residuals are.

Conceptual Model
----------------
Height and proportion fix the other two lengths linearly:
    S = (H - F) / (1 + TS)
    T = TS * S

The back angle x (deg) is the root on [0, 90] of
    f(x) = S*sin(R*x) + T*sin(x) - F*sin(phi) - feet/2

Two runs are made:
    1. Baseline ratios (no drag snapshot): R = R_shin, TS = T0/S0, H = H0.
    2. Snapshot ratios taken from a modified pose (long torso, upright shin),
       showing how a drag started elsewhere moves the solvable range.

Usage
-----
Run directly:
    python scripts/femur_sweep.py

Outputs
-------
Per-length table (shin, torso, shin angle, back angle, status, residuals) and a
summary of the worst residuals. With cfg.EXPORT_CSV the tables are written to
femur_sweep_baseline.csv and femur_sweep_snapshot.csv.
"""

import logging
import sys, pathlib

# Ensure project root on path for "ssm" imports when run directly
ROOT = pathlib.Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

import numpy as np

from ssm import config as cfg
from ssm.kinematics import Parameters
from ssm.model import get_initial_values, sweep_femur_lengths, summarize_sweep
from ssm.solver import begin_drag

logger = logging.getLogger("femur_sweep")


def report(label: str, df, csv_name: str):
    stats = summarize_sweep(df)
    print(f"\n{label}")
    print("-" * len(label))
    print(df[["femur_length", "shin_length", "torso_length", "shin_angle", "back_angle_deg",
              "status", "iterations", "balance_residual"]].round(5).to_string(index=False))
    print(f"\n  solved: {stats['solved_fraction']*100:.1f}% of {stats['count']}")
    print(f"  max |height residual|: {stats['max_height_residual']:.3e} m")
    print(f"  max |torso/shin ratio residual|: {stats['max_ratio_residual']:.3e}")
    print(f"  max |balance residual| (solved): {stats['max_balance_residual']:.3e}")
    unsolved = df[df["status"] != "OK"]
    if len(unsolved):
        print(f"  no balanced posture for femur in "
              f"[{unsolved['femur_length'].min():.3f}, {unsolved['femur_length'].max():.3f}] m")
    if cfg.EXPORT_CSV:
        try:
            df.to_csv(csv_name, index=False)
            print(f"  [saved] {csv_name}")
        except OSError as exc:
            logger.warning(f"failed to save {csv_name}: {exc}")


def main():
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

    initial = get_initial_values()
    params = Parameters.defaults()
    lo, hi, _ = cfg.SLIDER_RANGES["femur_length"]
    lengths = np.round(np.linspace(lo, hi, 17), 4)

    df_base = sweep_femur_lengths(lengths, params, initial)
    report("Baseline ratios", df_base, "femur_sweep_baseline.csv")

    modified = params.replace(torso_length=0.60, shin_angle=30.0)
    session = begin_drag(modified, initial)
    print(f"\nSnapshot from modified pose: ratio={session.ratio:.4f}, "
          f"torso/shin={session.ts_ratio:.4f}, height={session.shoulder_height:.3f} m")
    df_snap = sweep_femur_lengths(lengths, modified, initial, session)
    report("Snapshot ratios", df_snap, "femur_sweep_snapshot.csv")


if __name__ == "__main__":
    main()
