"""
Conversion from the pose frame (y upward, ankle at origin) to display coordinates
(y downward, top-left origin), plus the guide lines drawn behind the figure.
"""
from __future__ import annotations

from typing import Dict, Optional, Tuple

from . import config as cfg
from .kinematics import Joints, Parameters, Point


def to_display_coords(point: Point, offset: Optional[float] = None) -> Point:
    if offset is None:
        offset = cfg.DISPLAY_Y_OFFSET_M
    return Point(point.x, offset - point.y)


def joints_to_display(joints: Joints, offset: Optional[float] = None) -> Joints:
    return Joints(
        ankle=to_display_coords(joints.ankle, offset),
        knee=to_display_coords(joints.knee, offset),
        hip=to_display_coords(joints.hip, offset),
        torso_top=to_display_coords(joints.torso_top, offset),
    )


def guide_lines(parameters: Parameters, offset: Optional[float] = None,
                guide_height: Optional[float] = None) -> Dict[str, Tuple[Point, Point]]:
    """Foot line from the ankle to the toes and the vertical balance guide at mid-foot."""
    if guide_height is None:
        guide_height = cfg.COM_GUIDE_HEIGHT_M
    mid_foot = -parameters.feet_length / 2
    return {
        "foot": (to_display_coords(Point(0.0, 0.0), offset),
                 to_display_coords(Point(-parameters.feet_length, 0.0), offset)),
        "com": (to_display_coords(Point(mid_foot, 0.0), offset),
                to_display_coords(Point(mid_foot, guide_height), offset)),
    }
