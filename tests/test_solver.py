import math

import pytest

from ssm import config as cfg
from ssm.kinematics import compute_angles_and_joints
from ssm.solver import (
    STATUS_NO_SOLUTION,
    STATUS_OK,
    DragSession,
    balance_residual,
    begin_drag,
    bisect,
    end_drag,
    resolve_fixed_ratios,
    solve_femur_length_update,
)


def test_unchanged_femur_reproduces_baseline(defaults, initial):
    update = solve_femur_length_update(0.48, defaults, initial)
    assert update.status == STATUS_OK
    assert update.new_shin == pytest.approx(0.41)
    assert update.new_torso == pytest.approx(0.50)
    assert update.new_shin_angle == pytest.approx(45.0, abs=1e-3)
    assert update.back_angle_deg == pytest.approx(abs(math.degrees(initial.theta0)), abs=1e-3)


@pytest.mark.parametrize("femur", [0.25, 0.30, 0.40, 0.46, 0.50, 0.60])
def test_height_and_proportion_preserved_without_snapshot(defaults, initial, femur):
    update = solve_femur_length_update(femur, defaults, initial, DragSession.empty())
    assert update.new_shin + femur + update.new_torso == pytest.approx(initial.H0, abs=1e-6)
    assert update.new_torso / update.new_shin == pytest.approx(initial.T0 / initial.S0, abs=1e-6)


@pytest.mark.parametrize("femur", [0.30, 0.45, 0.55])
def test_height_and_proportion_preserved_with_snapshot(defaults, initial, femur):
    current = defaults.replace(torso_length=0.60, shin_angle=30.0)
    session = begin_drag(current, initial)
    update = solve_femur_length_update(femur, current, initial, session)
    assert update.new_shin + femur + update.new_torso == pytest.approx(session.shoulder_height, abs=1e-6)
    assert update.new_torso / update.new_shin == pytest.approx(session.ts_ratio, abs=1e-6)


@pytest.mark.parametrize("femur", [0.25, 0.35, 0.45, 0.55, 0.60])
def test_bisection_converges(defaults, initial, femur):
    update = solve_femur_length_update(femur, defaults, initial)
    assert update.solved
    assert 0 <= update.back_angle_deg <= 90
    assert update.residual < cfg.BISECTION_TOLERANCE or update.iterations == cfg.BISECTION_ITERATIONS
    assert update.residual < 1e-4
    assert update.new_shin_angle == pytest.approx(initial.R_shin * update.back_angle_deg)


def test_solved_pose_balances_under_forward_kinematics(defaults, initial):
    update = solve_femur_length_update(0.42, defaults, initial)
    pose = defaults.replace(femur_length=0.42, shin_length=update.new_shin,
                            torso_length=update.new_torso, shin_angle=update.new_shin_angle)
    state = compute_angles_and_joints(pose)
    assert state.torso_angle_deg == pytest.approx(update.back_angle_deg, abs=1e-3)
    assert state.shoulder_height == pytest.approx(initial.H0)


def test_no_solution_in_range_is_reported(defaults, initial):
    # Long femur: even a 90 deg back cannot bring the shoulders over mid-foot
    update = solve_femur_length_update(0.65, defaults, initial)
    assert update.status == STATUS_NO_SOLUTION
    assert not update.solved
    assert update.new_shin_angle is None
    assert update.back_angle_deg is None
    assert update.iterations == 0
    assert update.residual > 0
    # The linear step is still well defined
    assert update.new_shin + 0.65 + update.new_torso == pytest.approx(initial.H0)


def test_only_feet_length_is_read_from_parameters(defaults, initial):
    a = solve_femur_length_update(0.45, defaults, initial)
    b = solve_femur_length_update(0.45, defaults.replace(thigh_angle=10.0, shin_angle=3.0,
                                                         torso_length=0.7), initial)
    assert a == b
    c = solve_femur_length_update(0.45, defaults.replace(feet_length=0.30), initial)
    assert c.new_shin_angle != a.new_shin_angle


def test_begin_drag_captures_current_ratios(defaults, initial):
    current = defaults.replace(torso_length=0.60, shin_angle=30.0)
    session = begin_drag(current, initial)
    back = compute_angles_and_joints(current).torso_angle_deg
    assert session.is_active
    assert session.ratio == pytest.approx(30.0 / back)
    assert session.ts_ratio == pytest.approx(0.60 / 0.41)
    assert session.shoulder_height == pytest.approx(0.41 + 0.48 + 0.60)


def test_begin_drag_falls_back_to_baseline_ratio_for_vertical_back(balanced_vertical_back, initial):
    session = begin_drag(balanced_vertical_back, initial)
    assert session.ratio == initial.R_shin


def test_end_drag_clears_snapshot():
    session = end_drag()
    assert session == DragSession.empty()
    assert not session.is_active
    assert (session.ratio, session.ts_ratio, session.shoulder_height) == (None, None, None)


def test_resolve_fixed_ratios_per_field(initial):
    assert resolve_fixed_ratios(initial) == (initial.R_shin, initial.ts_ratio, initial.H0)
    R, TS, H = resolve_fixed_ratios(initial, DragSession(ratio=2.0))
    assert R == 2.0
    assert TS == initial.ts_ratio
    assert H == initial.H0


def test_chained_drags_use_ratios_from_each_start(defaults, initial):
    first = begin_drag(defaults, initial)
    up1 = solve_femur_length_update(0.44, defaults, initial, first)
    pose = defaults.replace(femur_length=0.44, shin_length=up1.new_shin,
                            torso_length=up1.new_torso, shin_angle=up1.new_shin_angle,
                            feet_length=0.30)
    second = begin_drag(pose, initial)
    up2 = solve_femur_length_update(0.46, pose, initial, second)
    assert up2.new_shin + 0.46 + up2.new_torso == pytest.approx(second.shoulder_height, abs=1e-6)
    assert up2.new_shin_angle / up2.back_angle_deg == pytest.approx(second.ratio)


def test_balance_residual_at_baseline_root(initial):
    f = balance_residual(0.41, 0.50, 0.48, initial.phi, 0.24, initial.R_shin)
    assert f(abs(math.degrees(initial.theta0))) == pytest.approx(0.0, abs=1e-9)
    assert f(0.0) == pytest.approx(-0.48 - 0.12)


def test_bisect_linear_root():
    root, used = bisect(lambda x: x - 30.0)
    assert root == pytest.approx(30.0, abs=1e-5)
    assert 0 < used <= cfg.BISECTION_ITERATIONS


def test_bisect_without_sign_change():
    assert bisect(lambda x: x + 1.0) == (None, 0)


def test_bisect_root_on_low_endpoint():
    assert bisect(lambda x: x) == (0.0, 0)


def test_bisect_respects_iteration_limit():
    # Tolerance unreachable: loop runs to exhaustion
    root, used = bisect(lambda x: x - 30.0, iterations=5, tolerance=0.0)
    assert used == 5
    assert abs(root - 30.0) <= 90.0 / 2 ** 5


def test_narrowed_bracket_reports_no_solution(defaults, initial):
    assert solve_femur_length_update(0.48, defaults, initial).solved
    update = solve_femur_length_update(0.48, defaults, initial, high=20.0)
    assert update.status == STATUS_NO_SOLUTION
    assert update.new_shin_angle is None
    f = balance_residual(update.new_shin, update.new_torso, 0.48, initial.phi, 0.24, initial.R_shin)
    assert update.residual == pytest.approx(min(abs(f(0.0)), abs(f(20.0))))


def test_bisection_settings_are_forwarded(defaults, initial):
    update = solve_femur_length_update(0.48, defaults, initial, iterations=3, tolerance=0.0)
    assert update.solved
    assert update.iterations == 3
    # Three halvings of [0, 90] land on 33.75 deg
    assert update.back_angle_deg == pytest.approx(33.75)
