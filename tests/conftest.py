import pytest

from ssm.kinematics import Parameters, compute_initial_values


@pytest.fixture
def defaults():
    return Parameters(
        thigh_angle=90.0,
        shin_angle=45.0,
        torso_length=0.50,
        femur_length=0.48,
        shin_length=0.41,
        feet_length=0.24,
    )


@pytest.fixture
def initial(defaults):
    return compute_initial_values(defaults)


@pytest.fixture
def balanced_vertical_back():
    # Numerator of the balance ratio is exactly zero: back angle 0
    return Parameters(
        thigh_angle=-90.0,
        shin_angle=90.0,
        torso_length=0.5,
        femur_length=0.25,
        shin_length=0.25,
        feet_length=1.0,
    )
