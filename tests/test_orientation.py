"""Attitude tests: safety envelope, aerobatic loops and yaw momentum."""

import numpy as np
import pytest

from dronesim import DronePhysics
from dronesim.math3d import (
    FORWARD_AXIS,
    UP_AXIS,
    quat_from_euler_yxz,
    quat_rotate_vec,
    wrap_angle_pi,
    wrap_delta,
)
from dronesim.metrics import cumulative_rotation, up_y_range
from dronesim.scenarios import run_scenario

DT = 1.0 / 60.0


def _fly(drone, n_ticks, throttle=0.0, pitch=0.0, roll=0.0, yaw=0.0):
    drone.set_throttle(throttle)
    drone.set_pitch(pitch)
    drone.set_roll(roll)
    drone.set_yaw(yaw)
    for _ in range(n_ticks):
        drone.update(DT)


# ---- Test 1: Quaternion stays unit length --------------------------------

@pytest.mark.parametrize("name", ["backward_loop", "barrel_roll", "yaw_spin"])
def test_quaternion_unit_norm(name):
    log = run_scenario(name)
    norms = np.linalg.norm(log.q, axis=1)
    assert np.max(np.abs(norms - 1.0)) < 1e-9


# ---- Test 2: Safety envelope clamps pitch and roll ------------------------

def test_safety_mode_clamps_tilt():
    drone = DronePhysics(start_position=[0.0, 500.0, 0.0])
    drone.set_pitch(1.0)
    drone.set_roll(-1.0)
    limit = drone.params.max_tilt_angle
    for _ in range(300):
        drone.update(DT)
        assert abs(drone.local_rotation.pitch) <= limit + 1e-12
        assert abs(drone.local_rotation.roll) <= limit + 1e-12

    # Sustained input settles inside the envelope, not on it
    assert 0.5 < drone.local_rotation.pitch < limit
    assert -limit < drone.local_rotation.roll < -0.5


def test_released_sticks_level_out():
    drone = DronePhysics(start_position=[0.0, 500.0, 0.0])
    _fly(drone, 60, pitch=1.0, roll=1.0)
    _fly(drone, 120)
    assert abs(drone.local_rotation.pitch) < 1e-2
    assert abs(drone.local_rotation.roll) < 1e-2


# ---- Test 3: Backward loop with safety off ---------------------------------

def test_backward_loop_completes():
    drone = DronePhysics(start_position=[0.0, 150.0, 0.0])
    drone.disable_safety_mode()
    drone.set_throttle(1.0)
    drone.set_pitch(1.0)

    min_up_y = 1.0
    for _ in range(360):
        drone.update(DT)
        min_up_y = min(min_up_y, drone.up[1])

    assert drone.total_rotation[0] >= 1.8 * np.pi
    assert min_up_y < -0.5
    assert -np.pi <= drone.local_rotation.pitch <= np.pi


def test_backward_loop_scenario_metrics():
    log = run_scenario("backward_loop")
    assert cumulative_rotation(log, "pitch") >= 1.8 * np.pi
    assert np.min(log.up[:, 1]) < -0.5


# ---- Test 4: Barrel roll ---------------------------------------------------

def test_barrel_roll():
    log = run_scenario("barrel_roll")
    assert cumulative_rotation(log, "roll") >= 1.5 * np.pi
    assert up_y_range(log) > 1.5


def test_safety_mode_blocks_inversion():
    drone = DronePhysics(start_position=[0.0, 500.0, 0.0])
    _fly(drone, 360, throttle=1.0, pitch=1.0)
    assert abs(drone.total_rotation[0]) < np.pi / 4
    assert drone.up[1] > 0.5


# ---- Test 5: Yaw momentum --------------------------------------------------

def test_yaw_release_decays_geometrically():
    drone = DronePhysics(start_position=[0.0, 500.0, 0.0])
    _fly(drone, 60, yaw=1.0)
    spun_up = drone.angular_velocity[1]
    assert spun_up > 0.5

    drone.set_yaw(None)
    rates = []
    for _ in range(10):
        drone.update(DT)
        rates.append(drone.angular_velocity[1])

    assert rates[0] == pytest.approx(spun_up * 0.92)
    for prev, cur in zip(rates[:-1], rates[1:]):
        assert cur / prev == pytest.approx(0.92)


def test_yaw_zero_input_lags_to_zero():
    drone = DronePhysics(start_position=[0.0, 500.0, 0.0])
    _fly(drone, 60, yaw=1.0)
    before = drone.angular_velocity[1]
    drone.set_yaw(0.0)
    drone.update(DT)
    # First-order lag: one tick removes yaw_acceleration * dt of the rate
    assert drone.angular_velocity[1] == pytest.approx(before * (1 - 4.0 * DT))


def test_yaw_stays_wrapped():
    drone = DronePhysics(start_position=[0.0, 500.0, 0.0])
    _fly(drone, 600, yaw=1.0)
    assert -np.pi <= drone.local_rotation.yaw <= np.pi
    assert drone.total_rotation[1] > 2 * np.pi


# ---- Test 6: Basis vectors follow the quaternion --------------------------

def test_basis_matches_quaternion():
    drone = DronePhysics(start_position=[0.0, 500.0, 0.0])
    _fly(drone, 30, pitch=0.5, roll=-0.3, yaw=0.7)
    rot = drone.local_rotation
    q = quat_from_euler_yxz(rot.pitch, rot.yaw, rot.roll)
    np.testing.assert_allclose(drone.orientation, q)
    np.testing.assert_allclose(drone.up, quat_rotate_vec(q, UP_AXIS))
    assert np.dot(drone.forward, drone.up) == pytest.approx(0.0, abs=1e-12)
    assert np.dot(drone.right, drone.up) == pytest.approx(0.0, abs=1e-12)


def test_euler_composition_yaw_then_pitch_then_roll():
    # Pitch the nose straight up, then yaw: the nose stays up
    q = quat_from_euler_yxz(pitch=np.pi / 2, yaw=np.pi / 2, roll=0.0)
    np.testing.assert_allclose(quat_rotate_vec(q, FORWARD_AXIS), [0.0, 1.0, 0.0], atol=1e-12)

    # Yaw alone turns the nose toward -X
    q = quat_from_euler_yxz(pitch=0.0, yaw=np.pi / 2, roll=0.0)
    np.testing.assert_allclose(quat_rotate_vec(q, FORWARD_AXIS), [-1.0, 0.0, 0.0], atol=1e-12)


def test_euler_composition_pitch_and_roll_up_vector():
    p, r = 0.5, 0.3
    q = quat_from_euler_yxz(pitch=p, yaw=0.0, roll=r)
    expected = [-np.sin(r), np.cos(p) * np.cos(r), np.sin(p) * np.cos(r)]
    np.testing.assert_allclose(quat_rotate_vec(q, UP_AXIS), expected, atol=1e-12)

    # Applying roll last would give -sin(r)*cos(p) in X instead
    assert quat_rotate_vec(q, UP_AXIS)[0] != pytest.approx(-np.sin(r) * np.cos(p))


# ---- Test 7: Angle helpers -------------------------------------------------

def test_wrap_helpers():
    assert wrap_angle_pi(np.pi) == np.pi
    assert wrap_angle_pi(3 * np.pi / 2) == pytest.approx(-np.pi / 2)
    assert wrap_angle_pi(-3 * np.pi / 2) == pytest.approx(np.pi / 2)
    assert wrap_delta(-3.1, 3.1) == pytest.approx(2 * np.pi - 6.2)
    assert wrap_delta(3.1, -3.1) == pytest.approx(6.2 - 2 * np.pi)
    assert wrap_delta(0.5, 0.2) == pytest.approx(0.3)
