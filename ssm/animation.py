"""
Squat-down / stand-up animation frames.

The caller polls with the elapsed time; nothing here keeps a clock. Each cycle
runs a full cosine period: the figure starts at the squat target, rises to the
standing angles at mid-cycle and sinks back again. Once the requested cycles have elapsed the
frame is complete and pinned at the squat target.
"""
from __future__ import annotations

from dataclasses import dataclass
import math
from typing import Optional, Tuple

from . import config as cfg


@dataclass(frozen=True)
class AnimationFrame:
    is_complete: bool
    current_thigh_angle: float
    current_shin_angle: float


def smooth_progress(t: float) -> float:
    """Ease 0 -> 1 -> 0 over t in [0, 1]: (1 - cos(2*pi*t)) / 2."""
    return (1 - math.cos(2 * math.pi * t)) / 2


def compute_animation_frame(current_time: float,
                            duration: float,
                            cycle_count: int,
                            squat_angles: Tuple[float, float],
                            stand_angles: Optional[Tuple[float, float]] = None) -> AnimationFrame:
    """Interpolated (thigh, shin) angles at `current_time` seconds into the run.

    Parameters:
        current_time : elapsed time since the run started (s)
        duration     : length of one squat-and-return cycle (s)
        cycle_count  : number of cycles in the run
        squat_angles : (thigh, shin) at the bottom of the squat (deg)
        stand_angles : (thigh, shin) when standing (deg), defaults to config
    """
    if duration <= 0:
        raise ValueError(f"duration must be positive, got {duration}")
    if cycle_count <= 0:
        raise ValueError(f"cycle_count must be positive, got {cycle_count}")
    if stand_angles is None:
        stand_angles = (cfg.STANDING_THIGH_ANGLE_DEG, cfg.STANDING_SHIN_ANGLE_DEG)

    squat_thigh, squat_shin = squat_angles
    stand_thigh, stand_shin = stand_angles

    total_duration = duration * cycle_count
    progress = current_time / total_duration
    if progress >= 1:
        return AnimationFrame(is_complete=True,
                              current_thigh_angle=squat_thigh,
                              current_shin_angle=squat_shin)

    cycle_progress = (current_time % duration) / duration
    eased = smooth_progress(cycle_progress)

    return AnimationFrame(
        is_complete=False,
        current_thigh_angle=squat_thigh - (squat_thigh - stand_thigh) * eased,
        current_shin_angle=squat_shin - (squat_shin - stand_shin) * eased,
    )


@dataclass(frozen=True)
class SquatAnimation:
    """One scheduling run. Restarting means building a new run with a fresh start_time."""
    start_time: float
    squat_angles: Tuple[float, float]
    stand_angles: Tuple[float, float] = (cfg.STANDING_THIGH_ANGLE_DEG, cfg.STANDING_SHIN_ANGLE_DEG)
    duration: float = cfg.ANIMATION_CYCLE_DURATION_S
    cycle_count: int = cfg.ANIMATION_CYCLES

    @property
    def total_duration(self) -> float:
        return self.duration * self.cycle_count

    def frame_at(self, now: float) -> AnimationFrame:
        return compute_animation_frame(now - self.start_time, self.duration, self.cycle_count,
                                       self.squat_angles, self.stand_angles)
