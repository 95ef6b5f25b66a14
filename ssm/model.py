"""Session-level helpers built on the kinematics core.

This module is what a UI or script calls: it dispatches slider edits (femur
length through the inverse solver, everything else as-is), summarizes the
derived outputs shown next to the figure, and tabulates sweeps for analysis.

Functions
---------
get_initial_values() -> InitialValues
    Memoized baseline computed from the configured default posture.

start_femur_drag(parameters, initial_values) -> DragSession
finish_femur_drag() -> DragSession
    Capture and clear the femur drag snapshot, with debug logging.

apply_parameter_update(key, value, parameters, initial_values, session) -> Parameters
    Apply one slider edit, keeping the pose consistent when the femur changes.

derived_summary(parameters) -> dict
    Torso angle, backward lean, standing height and the two display ratios.

sweep_femur_lengths(lengths, parameters, initial_values, session) -> pandas.DataFrame
    Run the inverse solver over femur lengths, with conservation residuals.

summarize_sweep(df) -> dict
    Worst residuals and fraction of lengths with a balanced posture.

animation_table(squat_angles, ...) -> pandas.DataFrame
    Frames sampled on a regular time grid.

Notes
-----
The core modules never log. Logging here is diagnostic only; an unsolvable
femur edit is reported and the parameters are returned unchanged.
"""

from __future__ import annotations

import logging
from typing import Dict, Iterable, Optional, Tuple

import numpy as np
import pandas as pd

from . import config as cfg
from .animation import compute_animation_frame
from .kinematics import InitialValues, Parameters, compute_angles_and_joints, compute_initial_values
from .solver import DragSession, begin_drag, end_drag, resolve_fixed_ratios, solve_femur_length_update

logger = logging.getLogger(__name__)

PARAMETER_KEYS = ("thigh_angle", "shin_angle", "torso_length", "femur_length", "shin_length", "feet_length")

SWEEP_COLUMNS = [
    "femur_length", "shin_length", "torso_length", "shin_angle", "back_angle_deg", "status",
    "iterations", "balance_residual", "height_residual", "ratio_residual", "fk_torso_angle_deg",
]

_INITIAL_VALUES_CACHE: InitialValues | None = None


def get_initial_values() -> InitialValues:
    """Return the session baseline with memoization."""
    global _INITIAL_VALUES_CACHE
    if _INITIAL_VALUES_CACHE is None:
        _INITIAL_VALUES_CACHE = compute_initial_values(Parameters.defaults())
    return _INITIAL_VALUES_CACHE


def start_femur_drag(parameters: Parameters, initial_values: InitialValues) -> DragSession:
    session = begin_drag(parameters, initial_values)
    logger.debug(
        f"Femur drag started: ratio={session.ratio:.4f}, torso/shin={session.ts_ratio:.4f}, "
        f"height={session.shoulder_height:.3f} m"
    )
    return session


def finish_femur_drag() -> DragSession:
    logger.debug("Femur drag ended; snapshot cleared.")
    return end_drag()


def apply_parameter_update(key: str, value: float, parameters: Parameters,
                           initial_values: InitialValues,
                           session: Optional[DragSession] = None) -> Parameters:
    if key not in PARAMETER_KEYS:
        raise KeyError(f"Unknown parameter: {key!r}")
    value = float(value)

    if key != "femur_length":
        return parameters.replace(**{key: value})

    update = solve_femur_length_update(value, parameters, initial_values, session)
    if not update.solved:
        logger.warning(
            f"No balanced posture for femur length {value:.3f} m "
            f"(residual {update.residual:.4f}); keeping current parameters."
        )
        return parameters

    return parameters.replace(
        femur_length=value,
        torso_length=update.new_torso,
        shin_length=update.new_shin,
        shin_angle=update.new_shin_angle,
    )


def derived_summary(parameters: Parameters) -> Dict[str, float]:
    state = compute_angles_and_joints(parameters)
    return {
        "torso_angle_deg": state.torso_angle_deg,
        "backward_lean_deg": parameters.shin_angle,
        "shoulder_height_m": state.shoulder_height,
        "torso_shin_ratio": state.torso_shin_ratio,
        "shin_torso_angle_ratio": state.shin_torso_angle_ratio,
    }


def sweep_femur_lengths(lengths: Iterable[float], parameters: Parameters,
                        initial_values: InitialValues,
                        session: Optional[DragSession] = None) -> pd.DataFrame:
    _, TS_fixed, H_fixed = resolve_fixed_ratios(initial_values, session)

    rows = []
    for femur in lengths:
        femur = float(femur)
        update = solve_femur_length_update(femur, parameters, initial_values, session)
        row = {
            "femur_length": femur,
            "shin_length": update.new_shin,
            "torso_length": update.new_torso,
            "shin_angle": update.new_shin_angle if update.solved else float("nan"),
            "back_angle_deg": update.back_angle_deg if update.solved else float("nan"),
            "status": update.status,
            "iterations": update.iterations,
            "balance_residual": update.residual,
            "height_residual": abs(update.new_shin + femur + update.new_torso - H_fixed),
            "ratio_residual": (abs(update.new_torso / update.new_shin - TS_fixed)
                               if update.new_shin != 0 else float("nan")),
        }
        if update.solved:
            # Cross-check against forward kinematics on the updated pose
            solved = parameters.replace(femur_length=femur, shin_length=update.new_shin,
                                        torso_length=update.new_torso, shin_angle=update.new_shin_angle,
                                        thigh_angle=initial_values.defaults.thigh_angle)
            row["fk_torso_angle_deg"] = compute_angles_and_joints(solved).torso_angle_deg
        else:
            row["fk_torso_angle_deg"] = float("nan")
        rows.append(row)
    return pd.DataFrame(rows, columns=SWEEP_COLUMNS)


def summarize_sweep(df: pd.DataFrame) -> Dict[str, float]:
    if df.empty:
        return {
            "count": 0,
            "solved_fraction": 0.0,
            "max_height_residual": 0.0,
            "max_ratio_residual": 0.0,
            "max_balance_residual": float("nan"),
        }
    solved = df[df["status"] == "OK"]
    return {
        "count": int(len(df)),
        "solved_fraction": float(len(solved)) / len(df),
        "max_height_residual": float(df["height_residual"].max()),
        "max_ratio_residual": float(df["ratio_residual"].max()),
        "max_balance_residual": float(solved["balance_residual"].max()) if len(solved) else float("nan"),
    }


def animation_table(squat_angles: Tuple[float, float],
                    stand_angles: Optional[Tuple[float, float]] = None,
                    duration: float = cfg.ANIMATION_CYCLE_DURATION_S,
                    cycle_count: int = cfg.ANIMATION_CYCLES,
                    samples: int = cfg.ANIMATION_SAMPLE_COUNT) -> pd.DataFrame:
    times = np.linspace(0.0, duration * cycle_count, samples)
    rows = []
    for t in times:
        frame = compute_animation_frame(float(t), duration, cycle_count, squat_angles, stand_angles)
        rows.append({
            "time_s": float(t),
            "thigh_angle": frame.current_thigh_angle,
            "shin_angle": frame.current_shin_angle,
            "is_complete": frame.is_complete,
        })
    return pd.DataFrame(rows)
