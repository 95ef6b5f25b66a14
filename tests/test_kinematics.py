import math

import pytest

from ssm.kinematics import (
    Parameters,
    balance_ratio,
    compute_angles_and_joints,
    compute_initial_values,
)


def test_default_pose_regression(defaults):
    state = compute_angles_and_joints(defaults)
    j = state.joints
    assert j.ankle == (0.0, 0.0)
    assert j.knee.x == pytest.approx(-0.290, abs=1e-3)
    assert j.knee.y == pytest.approx(0.290, abs=1e-3)
    # asin(0.62017...) in degrees
    assert 38.2 < state.torso_angle_deg < 38.5
    assert state.theta < 0
    assert state.torso_angle_deg == pytest.approx(abs(math.degrees(state.theta)))


def test_default_pose_derived_ratios(defaults):
    state = compute_angles_and_joints(defaults)
    assert state.shoulder_height == pytest.approx(1.39)
    assert state.torso_shin_ratio == pytest.approx(0.50 / 0.41)
    assert state.shin_torso_angle_ratio == pytest.approx(45.0 / state.torso_angle_deg)
    assert state.phi == pytest.approx(math.pi / 2)
    assert state.psi == pytest.approx(-math.pi / 4)


@pytest.mark.parametrize("changes", [
    {},
    {"thigh_angle": 0.0, "shin_angle": 0.0},
    {"thigh_angle": 120.0, "shin_angle": -5.0, "torso_length": 0.7},
    {"thigh_angle": 45.0, "shin_angle": 80.0, "femur_length": 0.6, "shin_length": 0.3},
    {"feet_length": 5.0},                             # saturates backward
    {"femur_length": 2.0, "thigh_angle": -90.0},      # saturates forward
])
def test_segment_lengths_are_exact(defaults, changes):
    p = defaults.replace(**changes)
    j = compute_angles_and_joints(p).joints
    assert math.dist(j.ankle, j.knee) == pytest.approx(p.shin_length, abs=1e-9)
    assert math.dist(j.knee, j.hip) == pytest.approx(p.femur_length, abs=1e-9)
    assert math.dist(j.hip, j.torso_top) == pytest.approx(p.torso_length, abs=1e-9)


@pytest.mark.parametrize("changes,sign", [
    ({"feet_length": 5.0}, -1),
    ({"femur_length": 2.0, "thigh_angle": -90.0}, 1),
    ({"torso_length": 0.01}, -1),
])
def test_balance_ratio_saturates(defaults, changes, sign):
    p = defaults.replace(**changes)
    assert abs(balance_ratio(p)) > 1
    state = compute_angles_and_joints(p)
    assert not math.isnan(state.torso_angle_deg)
    assert state.torso_angle_deg == pytest.approx(90.0)
    assert math.copysign(1.0, state.theta) == sign


def test_zero_torso_length_saturates_without_error(defaults):
    state = compute_angles_and_joints(defaults.replace(torso_length=0.0))
    assert state.torso_angle_deg == pytest.approx(90.0)
    assert state.joints.torso_top == state.joints.hip


def test_angle_ratio_guarded_when_back_is_vertical(balanced_vertical_back):
    state = compute_angles_and_joints(balanced_vertical_back)
    assert state.torso_angle_deg == 0.0
    assert state.shin_torso_angle_ratio == 0.0


def test_torso_shin_ratio_guarded_for_zero_shin(defaults):
    state = compute_angles_and_joints(defaults.replace(shin_length=0.0))
    assert state.torso_shin_ratio == 0.0
    assert state.joints.knee == (0.0, 0.0)


def test_shoulder_height_ignores_angles(defaults):
    a = compute_angles_and_joints(defaults)
    b = compute_angles_and_joints(defaults.replace(thigh_angle=10.0, shin_angle=5.0))
    assert a.shoulder_height == b.shoulder_height


def test_initial_values_from_defaults(defaults, initial):
    state = compute_angles_and_joints(defaults)
    assert initial.H0 == pytest.approx(1.39)
    assert initial.T0 == 0.50
    assert initial.S0 == 0.41
    assert initial.phi == pytest.approx(math.pi / 2)
    assert initial.psi0 == pytest.approx(-math.pi / 4)
    assert initial.theta0 == pytest.approx(state.theta)
    assert initial.R_shin == pytest.approx(45.0 / abs(math.degrees(initial.theta0)))
    assert initial.ts_ratio == pytest.approx(0.50 / 0.41)


def test_initial_values_default_argument_uses_config():
    assert compute_initial_values().defaults == Parameters.defaults()


def test_initial_values_reject_out_of_domain_baseline(defaults):
    with pytest.raises(ValueError, match="balance ratio"):
        compute_initial_values(defaults.replace(feet_length=5.0))


def test_initial_values_reject_vertical_back(balanced_vertical_back):
    with pytest.raises(ValueError, match="vertical back"):
        compute_initial_values(balanced_vertical_back)


def test_parameters_replace_and_dict(defaults):
    p = defaults.replace(femur_length=0.5)
    assert p.femur_length == 0.5
    assert defaults.femur_length == 0.48
    assert p.as_dict()["femur_length"] == 0.5
    assert set(p.as_dict()) == {"thigh_angle", "shin_angle", "torso_length",
                                "femur_length", "shin_length", "feet_length"}
