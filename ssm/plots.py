"""
Plotting utilities for the squat figure. These functions depend on the model but
keep matplotlib-specific code out of the core computations.
"""
import logging
import os
from typing import Optional, Tuple

from . import config as cfg
from .display import guide_lines, joints_to_display
from .kinematics import Parameters, compute_angles_and_joints
from .model import animation_table, derived_summary

logger = logging.getLogger(__name__)


def _save_and_show(plt, name: str):
    # Optional: save figure
    if getattr(cfg, "SAVE_PLOTS", False):
        try:
            os.makedirs(cfg.PLOTS_DIR, exist_ok=True)
            out_path = os.path.join(cfg.PLOTS_DIR, f"{name}.{cfg.SAVE_FORMAT}")
            plt.savefig(out_path, dpi=cfg.SAVE_DPI, format=cfg.SAVE_FORMAT, bbox_inches="tight")
            print(f"[saved] {out_path}")
        except OSError as exc:
            logger.warning(f"failed to save figure {name}: {exc}")
    try:
        plt.show(block=cfg.SHOW_BLOCKING)
        if not cfg.SHOW_BLOCKING:
            plt.pause(0.001)
    except Exception:
        # Be robust to backend quirks on non-blocking shows
        plt.show()


def plot_pose(parameters: Parameters, title: Optional[str] = None, name: str = "pose"):
    """Draw the stick figure in display coordinates (y down, top-left origin).

    Shin, femur and torso are drawn in the configured segment colors over the
    foot line and the dashed balance guide at mid-foot.
    """
    try:
        import matplotlib.pyplot as plt
    except ImportError as exc:
        print("\n[pose] matplotlib is not available. Install it to see the pose plot:")
        print("  python -m pip install matplotlib")
        print(f"  (reason: {exc})")
        return

    state = compute_angles_and_joints(parameters)
    joints = joints_to_display(state.joints)
    guides = guide_lines(parameters)
    colors = cfg.SEGMENT_COLORS

    fig, ax = plt.subplots(figsize=(6, 6))

    (f0, f1) = guides["foot"]
    ax.plot([f0.x, f1.x], [f0.y, f1.y], color=colors["foot"], linewidth=3, label="foot")
    (c0, c1) = guides["com"]
    ax.plot([c0.x, c1.x], [c0.y, c1.y], color="gray", linestyle="--", linewidth=0.8)

    segments = [
        ("shin", joints.ankle, joints.knee),
        ("femur", joints.knee, joints.hip),
        ("torso", joints.hip, joints.torso_top),
    ]
    for seg_name, a, b in segments:
        ax.plot([a.x, b.x], [a.y, b.y], color=colors[seg_name], linewidth=3, label=seg_name)

    xs = [p.x for p in joints.as_list()]
    ys = [p.y for p in joints.as_list()]
    ax.scatter(xs, ys, color="black", s=25, zorder=5)

    vx, vy, vw, vh = cfg.DISPLAY_VIEWBOX
    ax.set_xlim(vx, vx + vw)
    ax.set_ylim(vy + vh, vy)  # y grows downward on the display
    ax.set_aspect("equal")
    ax.grid(True, alpha=0.3)
    ax.legend(loc="upper right", fontsize=8)

    summary = derived_summary(parameters)
    text = (
        f"Torso angle: {summary['torso_angle_deg']:.2f}°\n"
        f"Backward lean: {summary['backward_lean_deg']:.2f}°\n"
        f"Shoulder height: {summary['shoulder_height_m']:.3f} m\n"
        f"Torso:shin: {summary['torso_shin_ratio']:.3f}\n"
        f"Shin/torso angle: {summary['shin_torso_angle_ratio']:.3f}"
    )
    ax.text(0.02, 0.98, text, transform=ax.transAxes, ha="left", va="top", fontsize=8,
            bbox=dict(boxstyle="round", fc="white", ec="gray", alpha=0.7))
    ax.set_title(title or "Squat pose")
    fig.tight_layout()

    _save_and_show(plt, name)
    return fig


def plot_animation_trajectory(squat_angles: Tuple[float, float],
                              stand_angles: Optional[Tuple[float, float]] = None,
                              duration: float = cfg.ANIMATION_CYCLE_DURATION_S,
                              cycle_count: int = cfg.ANIMATION_CYCLES):
    try:
        import matplotlib.pyplot as plt
    except ImportError as exc:
        print("\n[animation] matplotlib is not available. Install it to see the trajectory plot:")
        print("  python -m pip install matplotlib")
        print(f"  (reason: {exc})")
        return

    df = animation_table(squat_angles, stand_angles, duration, cycle_count)

    fig = plt.figure(figsize=(8, 4.5))
    plt.plot(df["time_s"], df["thigh_angle"], label="thigh (°)", color=cfg.SEGMENT_COLORS["femur"], linewidth=2)
    plt.plot(df["time_s"], df["shin_angle"], label="shin (°)", color=cfg.SEGMENT_COLORS["shin"], linewidth=2)
    for k in range(1, cycle_count):
        plt.axvline(k * duration, color="gray", linestyle=":", linewidth=0.8)
    plt.title(f"Squat animation: {cycle_count} cycles of {duration:.1f} s")
    plt.xlabel("Time (s)")
    plt.ylabel("Angle from vertical (°)")
    plt.grid(True, alpha=0.3)
    plt.legend()
    plt.tight_layout()

    if cfg.EXPORT_CSV:
        try:
            df.to_csv("animation_trajectory.csv", index=False)
            print("  [saved] animation_trajectory.csv")
        except OSError as exc:
            logger.warning(f"failed to save animation_trajectory.csv: {exc}")

    _save_and_show(plt, "animation_trajectory")
    return fig
