"""Vehicle facade tests: setters, modes, reset and parameters."""

import numpy as np
import pytest

from dronesim import DronePhysics, LandingPadField, Params, acrobatic_params, default_params

DT = 1.0 / 60.0


# ---- Test 1: Setters clamp on write -----------------------------------------

def test_setters_clamp():
    drone = DronePhysics()
    drone.set_throttle(1.7)
    drone.set_pitch(-3.0)
    drone.set_roll(2.0)
    drone.set_yaw(-9.0)
    assert drone.throttle == 1.0
    assert drone.state.controls.pitch == -1.0
    assert drone.state.controls.roll == 1.0
    assert drone.state.controls.yaw == -1.0

    drone.set_throttle(-0.5)
    assert drone.throttle == 0.0

    drone.set_yaw(None)
    assert drone.state.controls.yaw is None


@pytest.mark.parametrize("bad", [float("nan"), float("inf"), float("-inf")])
def test_non_finite_commands_read_as_zero(bad):
    drone = DronePhysics(start_position=[0.0, 100.0, 0.0])
    drone.set_throttle(bad)
    drone.set_pitch(bad)
    drone.set_roll(bad)
    drone.set_yaw(bad)
    assert drone.throttle == 0.0
    assert drone.state.controls.pitch == 0.0
    assert drone.state.controls.roll == 0.0
    assert drone.state.controls.yaw == 0.0

    drone.update(DT)
    assert 0.0 <= drone.previous_throttle <= drone.params.max_throttle
    assert np.all(np.isfinite(drone.position))
    assert np.all(np.isfinite(drone.orientation))


# ---- Test 2: Mode toggles ------------------------------------------------------

def test_safety_mode_toggles():
    drone = DronePhysics()
    assert drone.safety_mode
    assert drone.toggle_safety_mode() is False
    assert not drone.safety_mode
    assert drone.toggle_safety_mode() is True
    assert drone.disable_safety_mode() is False
    assert drone.enable_safety_mode() is True


def test_altitude_hold_toggles():
    drone = DronePhysics()
    assert not drone.altitude_hold_active
    assert drone.toggle_altitude_hold() is True
    assert drone.state.altitude_hold.hold_height == pytest.approx(51.0)
    assert drone.toggle_altitude_hold() is False


def test_altitude_hold_height_not_below_ground():
    drone = DronePhysics()
    drone.enable_altitude_hold()
    drone.set_altitude_hold_height(-20.0)
    assert drone.state.altitude_hold.target_hold_height == 0.0
    drone.set_altitude_hold_height(75.0)
    assert drone.state.altitude_hold.target_hold_height == 75.0


def test_verbose_reports_mode_changes(capsys):
    drone = DronePhysics(verbose=True)
    drone.disable_safety_mode()
    drone.enable_altitude_hold()
    out = capsys.readouterr().out
    assert "Safety mode disabled" in out
    assert "Altitude hold enabled" in out


# ---- Test 3: Reset ------------------------------------------------------------

def _assert_spawn_state(drone, spawn):
    np.testing.assert_array_equal(drone.position, spawn)
    np.testing.assert_array_equal(drone.velocity, np.zeros(3))
    np.testing.assert_array_equal(drone.orientation, [1.0, 0.0, 0.0, 0.0])
    np.testing.assert_array_equal(drone.total_rotation, np.zeros(3))
    np.testing.assert_array_equal(drone.angular_velocity, np.zeros(3))
    np.testing.assert_array_equal(drone.up, [0.0, 1.0, 0.0])
    assert drone.local_rotation.as_array().tolist() == [0.0, 0.0, 0.0]
    assert drone.throttle == 0.0
    assert drone.previous_throttle == 0.0
    assert drone.safety_mode
    assert not drone.altitude_hold_active


def test_reset_restores_spawn():
    pads = LandingPadField.single()
    drone = DronePhysics(pads, start_position=[1.0, 80.0, -2.0])
    drone.disable_safety_mode()
    drone.enable_altitude_hold()
    drone.set_throttle(1.0)
    drone.set_pitch(1.0)
    drone.set_yaw(0.5)
    for _ in range(200):
        drone.update(DT)

    drone.reset()
    _assert_spawn_state(drone, [1.0, 80.0, -2.0])
    assert drone.collision_context is pads

    drone.reset()
    _assert_spawn_state(drone, [1.0, 80.0, -2.0])


def test_default_spawn():
    drone = DronePhysics()
    np.testing.assert_array_equal(drone.position, [0.0, 51.0, 0.0])


def test_start_position_is_copied():
    start = np.array([0.0, 10.0, 0.0])
    drone = DronePhysics(start_position=start)
    drone.update(DT)
    assert start[1] == 10.0


def test_bad_start_position():
    with pytest.raises(ValueError):
        DronePhysics(start_position=[0.0, 1.0])


# ---- Test 4: Degenerate time steps --------------------------------------------

@pytest.mark.parametrize("dt", [0.0, -DT, float("nan"), float("inf")])
def test_non_positive_dt_is_noop(dt):
    drone = DronePhysics(start_position=[0.0, 100.0, 0.0])
    drone.set_throttle(1.0)
    drone.set_pitch(1.0)
    drone.update(dt)
    np.testing.assert_array_equal(drone.position, [0.0, 100.0, 0.0])
    np.testing.assert_array_equal(drone.velocity, np.zeros(3))
    assert drone.previous_throttle == 0.0
    assert drone.local_rotation.pitch == 0.0


# ---- Test 5: Snapshot ----------------------------------------------------------

def test_snapshot_is_independent():
    drone = DronePhysics(start_position=[0.0, 100.0, 0.0])
    sample = drone.snapshot()
    drone.update(DT)
    assert sample.position[1] == 100.0
    assert drone.position[1] < 100.0


# ---- Test 6: Parameters ---------------------------------------------------------

@pytest.mark.parametrize("kwargs", [
    {"gravity": 0.0},
    {"mass": -1.0},
    {"max_throttle": 0.0},
    {"max_tilt_angle": 4.0},
    {"horizontal_drag": -0.1},
    {"safe_step_size": 0.0},
    {"yaw_damping": 1.5},
    {"default_spawn": [0.0, 1.0]},
])
def test_params_validation(kwargs):
    with pytest.raises(ValueError):
        Params(**kwargs)


def test_params_factories():
    params = default_params()
    assert params.gravity == 9.81
    assert params.max_tilt_angle == pytest.approx(np.pi / 4)
    assert params.altitude_hold.kp == 5.0

    acro = acrobatic_params()
    assert acro.acrobatic_tilt_multiplier > params.acrobatic_tilt_multiplier


def test_custom_gravity():
    drone = DronePhysics(start_position=[0.0, 1000.0, 0.0], params=Params(gravity=1.62))
    for _ in range(60):
        drone.update(DT)
    assert drone.velocity[1] == pytest.approx(-1.62, abs=1e-9)
