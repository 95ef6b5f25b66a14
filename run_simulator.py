"""
Structured runner for the Squat Simulator Model.
- Configuration: ssm/config.py
- Forward kinematics and baseline constants: ssm/kinematics.py
- Femur drag inverse solver: ssm/solver.py
- Animation frames: ssm/animation.py
- Display conversion: ssm/display.py
- Plotting: ssm/plots.py

Prints the baseline, the derived outputs for the default pose, a femur drag
session and the animation frames, then draws the figures.
"""
import logging

import numpy as np
import pandas as pd

from ssm import config as cfg
from ssm.display import joints_to_display
from ssm.kinematics import Parameters, compute_angles_and_joints
from ssm.model import (
    get_initial_values,
    start_femur_drag,
    finish_femur_drag,
    apply_parameter_update,
    derived_summary,
    sweep_femur_lengths,
    summarize_sweep,
    animation_table,
)
from ssm.plots import plot_pose, plot_animation_trajectory


def main():
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

    initial = get_initial_values()
    parameters = Parameters.defaults()

    print("\n" + "="*80)
    print("SQUAT SIMULATOR: pose from segment lengths under the balance constraint")
    print("="*80)

    print("\n" + "="*80)
    print("USER INPUT VARIABLES")
    print("="*80)

    print("\nDefault posture:")
    print(f"  Thigh angle: {cfg.DEFAULT_THIGH_ANGLE_DEG} degrees from vertical")
    print(f"  Shin angle: {cfg.DEFAULT_SHIN_ANGLE_DEG} degrees from vertical")
    print(f"  Torso length: {cfg.DEFAULT_TORSO_LENGTH_M} m")
    print(f"  Femur length: {cfg.DEFAULT_FEMUR_LENGTH_M} m")
    print(f"  Shin length: {cfg.DEFAULT_SHIN_LENGTH_M} m")
    print(f"  Feet length: {cfg.DEFAULT_FEET_LENGTH_M} m")

    print("\nSolver:")
    print(f"  Bisection bracket: [{cfg.BISECTION_LOW_DEG}, {cfg.BISECTION_HIGH_DEG}] degrees")
    print(f"  Iterations: {cfg.BISECTION_ITERATIONS}, tolerance {cfg.BISECTION_TOLERANCE:g}")

    print("\nAnimation:")
    print(f"  Cycle duration: {cfg.ANIMATION_CYCLE_DURATION_S} s, cycles: {cfg.ANIMATION_CYCLES}")

    print("\n" + "="*80)
    print("CALCULATED RESULTS")
    print("="*80)

    print("\nBaseline constants:")
    print(f"  theta0: {np.degrees(initial.theta0):.4f} degrees")
    print(f"  H0 (standing shoulder height): {initial.H0:.3f} m")
    print(f"  T0 / S0: {initial.T0:.3f} / {initial.S0:.3f} m")
    print(f"  R_shin (shin angle / back angle): {initial.R_shin:.4f}")

    summary = derived_summary(parameters)
    print("\nCalculated angles & ratios (default pose):")
    print(f"  Torso (back) angle: {summary['torso_angle_deg']:.2f} degrees")
    print(f"  Backward lean (at ankle): {summary['backward_lean_deg']:.2f} degrees")
    print(f"  Standing shoulder height: {summary['shoulder_height_m']:.3f} m")
    print(f"  Torso length : shin length ratio: {summary['torso_shin_ratio']:.3f}")
    print(f"  Shin angle / torso angle ratio: {summary['shin_torso_angle_ratio']:.3f}")

    state = compute_angles_and_joints(parameters)
    shown = joints_to_display(state.joints)
    df_joints = pd.DataFrame({
        "joint": ["ankle", "knee", "hip", "torso_top"],
        "x_m": [p.x for p in state.joints.as_list()],
        "y_m": [p.y for p in state.joints.as_list()],
        "display_y": [p.y for p in shown.as_list()],
    })
    print("\nJoint positions:")
    print(df_joints.round(4).to_string(index=False))

    # Femur drag demo: three separate drags, each starting from the previous pose
    print("\nFemur drag session:")
    dragged = parameters
    for target in (0.46, 0.44, 0.42):
        session = start_femur_drag(dragged, initial)
        dragged = apply_parameter_update("femur_length", target, dragged, initial, session)
        session = finish_femur_drag()
        s = derived_summary(dragged)
        print(f"  femur {target:.3f} m -> shin {dragged.shin_length:.4f} m, torso {dragged.torso_length:.4f} m, "
              f"shin angle {dragged.shin_angle:.2f}°, back angle {s['torso_angle_deg']:.2f}°, "
              f"height {s['shoulder_height_m']:.4f} m")

    lo, hi, _ = cfg.SLIDER_RANGES["femur_length"]
    df_sweep = sweep_femur_lengths(np.linspace(lo, hi, 41), parameters, initial)
    print("\nFemur sweep (baseline ratios):")
    print(df_sweep[["femur_length", "shin_length", "torso_length", "shin_angle",
                    "back_angle_deg", "status"]].iloc[::5].round(4).to_string(index=False))
    sweep_stats = summarize_sweep(df_sweep)
    print(f"  Solved {sweep_stats['solved_fraction']*100:.0f}% of {sweep_stats['count']} lengths; "
          f"max height residual {sweep_stats['max_height_residual']:.2e}, "
          f"max balance residual {sweep_stats['max_balance_residual']:.2e}")

    squat = (parameters.thigh_angle, parameters.shin_angle)
    df_anim = animation_table(squat)
    print("\nAnimation frames:")
    print(df_anim.iloc[::10].round(3).to_string(index=False))

    if cfg.EXPORT_CSV:
        try:
            df_sweep.to_csv("femur_sweep.csv", index=False)
            print("  [saved] femur_sweep.csv")
        except OSError as exc:
            logging.getLogger(__name__).warning(f"failed to save femur_sweep.csv: {exc}")

    # Plots
    plot_pose(parameters, title="Default squat pose", name="pose_default")
    plot_pose(dragged, title="After femur drag", name="pose_dragged")
    plot_animation_trajectory(squat)

    # Keep all figures open at the end of the run only if configured
    if getattr(cfg, "BLOCK_AT_END", False) or getattr(cfg, "SHOW_BLOCKING", False):
        try:
            import matplotlib.pyplot as plt
        except ImportError:
            return
        plt.show()


if __name__ == "__main__":
    main()
