"""
Sagittal-plane squat kinematics: balance equation, joint chain and baseline constants.

The figure is a three-segment chain standing on the ankle at the origin, with y
upward and the foot lying along negative x. Angles enter in degrees measured from vertical and
are converted to radians here; nothing outside this module does trigonometry on
the raw parameters.

Functions
---------
balance_ratio(parameters) -> float
    Horizontal balance ratio sin(theta) before clamping.
solve_back_angle(parameters) -> float
    Back angle theta (rad, signed) from the clamped balance ratio.
compute_angles_and_joints(parameters) -> DerivedState
    Forward kinematics: angles, ratios and joint positions.
compute_initial_values(defaults=None) -> InitialValues
    Session baseline constants (H0, T0, S0, R_shin, ...).
"""
from __future__ import annotations

from dataclasses import dataclass, asdict, replace as _dc_replace
import math
from typing import Dict, List, NamedTuple, Optional

from . import config as cfg


class Point(NamedTuple):
    x: float
    y: float


@dataclass(frozen=True)
class Parameters:
    thigh_angle: float   # deg from vertical
    shin_angle: float    # deg from vertical, positive leans the shank forward over the toes
    torso_length: float  # m
    femur_length: float  # m
    shin_length: float   # m
    feet_length: float   # m

    @classmethod
    def defaults(cls) -> "Parameters":
        return cls(
            thigh_angle=cfg.DEFAULT_THIGH_ANGLE_DEG,
            shin_angle=cfg.DEFAULT_SHIN_ANGLE_DEG,
            torso_length=cfg.DEFAULT_TORSO_LENGTH_M,
            femur_length=cfg.DEFAULT_FEMUR_LENGTH_M,
            shin_length=cfg.DEFAULT_SHIN_LENGTH_M,
            feet_length=cfg.DEFAULT_FEET_LENGTH_M,
        )

    def replace(self, **changes: float) -> "Parameters":
        return _dc_replace(self, **changes)

    def as_dict(self) -> Dict[str, float]:
        return asdict(self)

    @property
    def standing_height(self) -> float:
        """Shoulder height when upright; the person's stature, independent of angles."""
        return self.shin_length + self.femur_length + self.torso_length


@dataclass(frozen=True)
class Joints:
    ankle: Point
    knee: Point
    hip: Point
    torso_top: Point

    def as_list(self) -> List[Point]:
        return [self.ankle, self.knee, self.hip, self.torso_top]


@dataclass(frozen=True)
class DerivedState:
    phi: float                      # thigh angle (rad)
    psi: float                      # shin angle (rad, sign flipped)
    theta: float                    # back angle (rad, signed)
    torso_angle_deg: float          # |theta| in degrees
    shoulder_height: float          # standing reference height (m)
    torso_shin_ratio: float
    shin_torso_angle_ratio: float
    joints: Joints


@dataclass(frozen=True)
class InitialValues:
    defaults: Parameters
    psi0: float
    phi: float
    theta0: float
    H0: float
    T0: float
    S0: float
    R_shin: float

    @property
    def ts_ratio(self) -> float:
        return self.T0 / self.S0


def _clamp_unit(value: float) -> float:
    return max(-1.0, min(1.0, value))


def balance_ratio(parameters: Parameters) -> float:
    """Return the unclamped horizontal balance ratio.

    The torso top has to bring the centre of mass back over the middle of the
    foot (x = -feet/2):

        ratio = (-feet/2 - shin*sin(psi) - femur*sin(phi)) / torso

    A zero torso length saturates in the sign of the numerator.
    """
    phi = math.radians(parameters.thigh_angle)
    psi = -math.radians(parameters.shin_angle)
    numerator = (-parameters.feet_length / 2
                 - parameters.shin_length * math.sin(psi)
                 - parameters.femur_length * math.sin(phi))
    if parameters.torso_length == 0:
        return 0.0 if numerator == 0 else math.copysign(1.0, numerator)
    return numerator / parameters.torso_length


def solve_back_angle(parameters: Parameters) -> float:
    """Back angle theta (rad). Ratios beyond [-1, 1] saturate at +/-90 deg."""
    return math.asin(_clamp_unit(balance_ratio(parameters)))


def compute_angles_and_joints(parameters: Parameters) -> DerivedState:
    phi = math.radians(parameters.thigh_angle)
    psi = -math.radians(parameters.shin_angle)
    theta = solve_back_angle(parameters)

    torso_angle_deg = abs(math.degrees(theta))
    shoulder_height = parameters.standing_height
    torso_shin_ratio = (parameters.torso_length / parameters.shin_length
                        if parameters.shin_length != 0 else 0.0)
    shin_torso_angle_ratio = (parameters.shin_angle / torso_angle_deg
                              if torso_angle_deg != 0 else 0.0)

    # Successive vector addition up the chain
    ankle = Point(0.0, 0.0)
    knee = Point(ankle.x + parameters.shin_length * math.sin(psi),
                 ankle.y + parameters.shin_length * math.cos(psi))
    hip = Point(knee.x + parameters.femur_length * math.sin(phi),
                knee.y + parameters.femur_length * math.cos(phi))
    torso_top = Point(hip.x + parameters.torso_length * math.sin(theta),
                      hip.y + parameters.torso_length * math.cos(theta))

    return DerivedState(
        phi=phi,
        psi=psi,
        theta=theta,
        torso_angle_deg=torso_angle_deg,
        shoulder_height=shoulder_height,
        torso_shin_ratio=torso_shin_ratio,
        shin_torso_angle_ratio=shin_torso_angle_ratio,
        joints=Joints(ankle=ankle, knee=knee, hip=hip, torso_top=torso_top),
    )


def compute_initial_values(defaults: Optional[Parameters] = None) -> InitialValues:
    """Compute the session baseline from the default posture.

    These are ground-truth constants, so the baseline must lie inside the
    balance domain; a ratio outside [-1, 1] or a vertical back raises
    ValueError instead of being clamped.
    """
    if defaults is None:
        defaults = Parameters.defaults()

    ratio0 = balance_ratio(defaults)
    if not -1.0 <= ratio0 <= 1.0:
        raise ValueError(
            f"Default posture has no balanced back angle (balance ratio {ratio0:.4f} outside [-1, 1])"
        )
    if defaults.shin_length == 0:
        raise ValueError("Default shin length must be non-zero")

    psi0 = -math.radians(defaults.shin_angle)
    phi = math.radians(defaults.thigh_angle)
    theta0 = math.asin(ratio0)
    theta0_deg = abs(math.degrees(theta0))
    if theta0_deg == 0:
        raise ValueError("Default posture has a vertical back; shin/back angle ratio is undefined")

    return InitialValues(
        defaults=defaults,
        psi0=psi0,
        phi=phi,
        theta0=theta0,
        H0=defaults.standing_height,
        T0=defaults.torso_length,
        S0=defaults.shin_length,
        R_shin=defaults.shin_angle / theta0_deg,
    )
