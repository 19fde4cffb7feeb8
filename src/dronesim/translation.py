"""
Translational integrator.

Turns the smoothed throttle and the current attitude into velocity and
position changes. Forces are expressed directly as accelerations.

Per tick (gravity has already been applied by the caller):
    1. Throttle momentum:  T_s += (T - T_s) * throttle_change_rate * dt
    2. Thrust along body up:  T_s**1.5 * throttle_acceleration
    3. Tilt translation along body forward/right
    4. Acrobatic extras (safety off): inverted thrust loss, roll lift,
       auto-level nudge
    5. Drag (horizontal quadratic-ish, vertical except in freefall)
    6. Altitude hold
    7. Explicit Euler position update
"""

import numpy as np

from dronesim.altitude_hold import apply_altitude_hold
from dronesim.params import Params
from dronesim.types import PhysicsState

# Inverted-flight thrust factor bounds (fully inverted -> fully upright)
INVERTED_THRUST_FACTOR = 0.7

# Acrobatic roll-lift heuristics
ROLL_LIFT_INPUT = 0.7
ROLL_LIFT_THROTTLE = 0.7
ROLL_LIFT_GAIN = 1.2
ROLL_LIFT_BOOST = 3.0
ROLL_CONSTANT_LIFT = 0.4
ROLL_CONSTANT_BOOST = 1.5

AUTO_LEVEL_STRENGTH = 0.8
AUTO_LEVEL_INPUT = 0.1

# Quadratic share of horizontal drag
HORIZONTAL_DRAG_QUADRATIC = 0.1


def update_throttle_momentum(state: PhysicsState, params: Params, dt: float) -> None:
    """Lag the effective throttle behind the command (propeller spin-up)."""
    state.previous_throttle += (
        (state.controls.throttle - state.previous_throttle)
        * params.throttle_change_rate * dt
    )
    state.previous_throttle = float(
        np.clip(state.previous_throttle, 0.0, params.max_throttle)
    )


def thrust_accel(state: PhysicsState, params: Params) -> float:
    """
    Thrust acceleration magnitude along the body up axis [m/s²].

    Superlinear in the smoothed throttle. With safety off the thrust is
    scaled down to 70 % when fully inverted.
    """
    response = state.previous_throttle ** params.throttle_curve_exponent
    if not state.safety_mode:
        upright = (state.up[1] + 1.0) / 2.0
        response *= INVERTED_THRUST_FACTOR + (1.0 - INVERTED_THRUST_FACTOR) * upright
    return response * params.throttle_acceleration


def apply_tilt_forces(state: PhysicsState, params: Params, dt: float) -> None:
    """Translate pitch/roll angles into motion along forward/right."""
    rot = state.local_rotation
    pitch_force = -rot.pitch * params.tilt_force * state.previous_throttle
    roll_force = rot.roll * params.tilt_force * state.previous_throttle
    state.velocity += state.forward * pitch_force * dt
    state.velocity += state.right * roll_force * dt


def apply_acrobatic_forces(
    state: PhysicsState,
    params: Params,
    roll_rate: float,
    dt: float,
) -> None:
    """
    Heuristic forces that only exist with the safety envelope off.

    Roll lift: a hard roll at high throttle gets a world-up boost, peaking
    at 90 degrees of bank, plus a small constant lift.
    Auto-level: with sticks centred and the vehicle inverted, push gently
    along the body up axis to help it recover.

    Args:
        state: Vehicle state (velocity mutated)
        params: Vehicle tunables
        roll_rate: Magnitude of the roll rate this tick [rad/s]
        dt: Time step [s]
    """
    controls = state.controls
    pt = state.previous_throttle

    if abs(controls.roll) > ROLL_LIFT_INPUT and controls.throttle > ROLL_LIFT_THROTTLE:
        roll_lift = ROLL_LIFT_GAIN * pt * roll_rate * dt

        roll_angle = abs(state.local_rotation.roll) % np.pi
        folded = np.pi - roll_angle if roll_angle > np.pi / 2 else roll_angle
        lift_multiplier = np.sin(folded * 2)

        state.velocity[1] += roll_lift * lift_multiplier * ROLL_LIFT_BOOST
        state.velocity[1] += (
            ROLL_CONSTANT_LIFT * pt * abs(controls.roll) * dt * ROLL_CONSTANT_BOOST
        )

    if abs(controls.pitch) < AUTO_LEVEL_INPUT and abs(controls.roll) < AUTO_LEVEL_INPUT:
        inverted = state.up[1]
        if inverted < 0:
            correction = AUTO_LEVEL_STRENGTH * pt * inverted * dt
            state.velocity += state.up * correction


def apply_drag(state: PhysicsState, params: Params, dt: float) -> None:
    """
    Apply horizontal and vertical air resistance.

    Vertical drag is skipped for a falling vehicle at (near) zero throttle
    so freefall accelerates at exactly g.
    """
    v = state.velocity
    horizontal_speed = float(np.hypot(v[0], v[2]))
    if horizontal_speed > 0:
        drag = horizontal_speed * params.horizontal_drag * (
            1 + horizontal_speed * HORIZONTAL_DRAG_QUADRATIC
        )
        factor = max(0.0, 1 - drag * dt)
        v[0] *= factor
        v[2] *= factor

    freefall = state.controls.throttle < params.freefall_throttle and v[1] < 0
    if not freefall:
        drag = abs(v[1]) * params.vertical_drag
        v[1] *= max(0.0, 1 - drag * dt)


def integrate_translation(
    state: PhysicsState,
    params: Params,
    dt: float,
    roll_rate: float = 0.0,
) -> None:
    """
    Advance velocity and position by one tick.

    Args:
        state: Vehicle state (mutated in place)
        params: Vehicle tunables
        dt: Time step [s], positive
        roll_rate: Magnitude of this tick's roll rate [rad/s], used by the
            acrobatic roll lift
    """
    update_throttle_momentum(state, params, dt)

    if state.previous_throttle > 0:
        state.velocity += state.up * thrust_accel(state, params) * dt
        apply_tilt_forces(state, params, dt)
        if not state.safety_mode:
            apply_acrobatic_forces(state, params, roll_rate, dt)

    apply_drag(state, params, dt)
    apply_altitude_hold(state, params, dt)

    state.position += state.velocity * dt
