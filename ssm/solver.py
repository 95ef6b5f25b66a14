"""
Femur-length inverse solver.

Dragging the femur length keeps the person's standing height and torso:shin
proportion fixed, and keeps the shin angle proportional to the back angle. The
ratios come either from a DragSession captured when the gesture began or, if
none was captured, from the session baseline (InitialValues).

Step 1 is linear (height and proportion give shin and torso directly). Step 2
finds the back angle x (deg) for which the figure balances:

    f(x) = S*sin(R*x) + T*sin(x) - F*sin(phi) - feet/2 = 0

f mixes two different angle scalings inside the sines, so there is no closed
form; it is solved by bisection on [0, 90] deg. The bracket is checked first:
without a sign change there is no balanced posture in range and the update is
reported as NO_SOLUTION_IN_RANGE rather than returning an arbitrary angle.
"""
from __future__ import annotations

from dataclasses import dataclass
import math
from typing import Callable, Optional, Tuple

from . import config as cfg
from .kinematics import InitialValues, Parameters, solve_back_angle

STATUS_OK = "OK"
STATUS_NO_SOLUTION = "NO_SOLUTION_IN_RANGE"


@dataclass(frozen=True)
class DragSession:
    """Ratios observed when a femur drag began. None means use the baseline."""
    ratio: Optional[float] = None
    ts_ratio: Optional[float] = None
    shoulder_height: Optional[float] = None

    @classmethod
    def empty(cls) -> "DragSession":
        return cls()

    @property
    def is_active(self) -> bool:
        return not (self.ratio is None and self.ts_ratio is None and self.shoulder_height is None)


@dataclass(frozen=True)
class FemurLengthUpdate:
    new_shin: float
    new_torso: float
    new_shin_angle: Optional[float]   # None when no balanced posture exists in range
    back_angle_deg: Optional[float]
    residual: float
    iterations: int
    status: str = STATUS_OK

    @property
    def solved(self) -> bool:
        return self.status == STATUS_OK


def begin_drag(parameters: Parameters, initial_values: InitialValues) -> DragSession:
    """Capture the current shin/back angle ratio, torso:shin ratio and standing height."""
    back_angle_deg = abs(math.degrees(solve_back_angle(parameters)))
    ratio = (parameters.shin_angle / back_angle_deg
             if back_angle_deg != 0 else initial_values.R_shin)
    ts_ratio = (parameters.torso_length / parameters.shin_length
                if parameters.shin_length != 0 else 0.0)
    return DragSession(
        ratio=ratio,
        ts_ratio=ts_ratio,
        shoulder_height=parameters.standing_height,
    )


def end_drag() -> DragSession:
    """Discard a drag snapshot; later updates fall back to the baseline ratios."""
    return DragSession.empty()


def resolve_fixed_ratios(initial_values: InitialValues,
                         session: Optional[DragSession] = None) -> Tuple[float, float, float]:
    """Return (R_fixed, TS_fixed, H_fixed) from the snapshot, or the baseline per missing field."""
    if session is None:
        session = DragSession.empty()
    R_fixed = session.ratio if session.ratio is not None else initial_values.R_shin
    TS_fixed = session.ts_ratio if session.ts_ratio is not None else initial_values.ts_ratio
    H_fixed = session.shoulder_height if session.shoulder_height is not None else initial_values.H0
    return R_fixed, TS_fixed, H_fixed


def balance_residual(new_shin: float, new_torso: float, new_femur: float,
                     phi: float, feet_length: float, R_fixed: float) -> Callable[[float], float]:
    def f(x_deg: float) -> float:
        return (new_shin * math.sin(math.radians(R_fixed * x_deg))
                + new_torso * math.sin(math.radians(x_deg))
                - new_femur * math.sin(phi)
                - feet_length / 2)
    return f


def bisect(f: Callable[[float], float],
           low: Optional[float] = None,
           high: Optional[float] = None,
           iterations: Optional[int] = None,
           tolerance: Optional[float] = None) -> Tuple[Optional[float], int]:
    """Bisection root search on [low, high].

    Returns (root, iterations_used), or (None, 0) when f(low) and f(high) share
    a sign. The bracket is updated against the sign of f(low), re-evaluated
    each iteration.
    """
    low = cfg.BISECTION_LOW_DEG if low is None else low
    high = cfg.BISECTION_HIGH_DEG if high is None else high
    iterations = cfg.BISECTION_ITERATIONS if iterations is None else iterations
    tolerance = cfg.BISECTION_TOLERANCE if tolerance is None else tolerance

    f_low = f(low)
    f_high = f(high)
    if abs(f_low) < tolerance:
        return low, 0
    if abs(f_high) < tolerance:
        return high, 0
    if f_low * f_high > 0:
        return None, 0

    x = low
    used = 0
    for used in range(1, iterations + 1):
        x = (low + high) / 2
        f_mid = f(x)
        if abs(f_mid) < tolerance:
            break
        if f(low) * f_mid < 0:
            high = x
        else:
            low = x
    return x, used


def solve_femur_length_update(new_femur_length: float,
                              parameters: Parameters,
                              initial_values: InitialValues,
                              session: Optional[DragSession] = None,
                              low: Optional[float] = None,
                              high: Optional[float] = None,
                              iterations: Optional[int] = None,
                              tolerance: Optional[float] = None) -> FemurLengthUpdate:
    """Re-derive shin length, torso length and shin angle for a new femur length.

    Only feet_length is read from the current parameters; the thigh angle used
    in the balance equation is the baseline phi. low, high, iterations and
    tolerance override the configured bisection settings.
    """
    low = cfg.BISECTION_LOW_DEG if low is None else low
    high = cfg.BISECTION_HIGH_DEG if high is None else high
    R_fixed, TS_fixed, H_fixed = resolve_fixed_ratios(initial_values, session)

    # newShin + newFemur + newTorso = H_fixed, newTorso = TS_fixed * newShin
    new_shin = (H_fixed - new_femur_length) / (1 + TS_fixed)
    new_torso = TS_fixed * new_shin

    f = balance_residual(new_shin, new_torso, new_femur_length,
                         initial_values.phi, parameters.feet_length, R_fixed)
    x_deg, used = bisect(f, low, high, iterations, tolerance)

    if x_deg is None:
        return FemurLengthUpdate(
            new_shin=new_shin,
            new_torso=new_torso,
            new_shin_angle=None,
            back_angle_deg=None,
            residual=min(abs(f(low)), abs(f(high))),
            iterations=0,
            status=STATUS_NO_SOLUTION,
        )

    return FemurLengthUpdate(
        new_shin=new_shin,
        new_torso=new_torso,
        new_shin_angle=R_fixed * x_deg,
        back_angle_deg=x_deg,
        residual=abs(f(x_deg)),
        iterations=used,
    )
