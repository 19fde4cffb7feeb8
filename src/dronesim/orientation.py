"""
Orientation integrator.

Pitch, yaw and roll are accumulated as angles and the attitude quaternion is
rebuilt from them every tick (yaw -> pitch -> roll). Keeping angles as the
source of truth makes the safety envelope a scalar clamp, while the
quaternion keeps the basis vectors well defined through full inversions.

Per tick:
    1. Yaw rate: first-order lag toward yaw * yaw_speed, or geometric decay
       when yaw is released (None).
    2. Pitch/roll: driven directly by input rate (no velocity state).
    3. Safety mode: clamp to +/-max_tilt_angle, then angular damping.
       Acrobatic mode: wrap to [-pi, pi], then lighter damping.
    4. Unwrapped rotation totals.
    5. Quaternion + forward/up/right basis.
"""

import numpy as np

from dronesim.math3d import (
    FORWARD_AXIS,
    RIGHT_AXIS,
    UP_AXIS,
    quat_from_euler_yxz,
    quat_rotate_vec,
    wrap_angle_pi,
    wrap_delta,
)
from dronesim.params import Params
from dronesim.types import PhysicsState


def update_yaw_rate(state: PhysicsState, params: Params, dt: float) -> None:
    """
    Advance the yaw rate.

    A released stick (yaw is None) means "keep the heading": the rate decays
    by ``yaw_damping`` each tick instead of snapping to zero.
    """
    yaw_cmd = state.controls.yaw
    if yaw_cmd is None:
        state.angular_velocity[1] *= params.yaw_damping
    else:
        target_rate = yaw_cmd * params.yaw_speed
        state.angular_velocity[1] += (
            (target_rate - state.angular_velocity[1]) * params.yaw_acceleration * dt
        )


def effective_tilt_speed(state: PhysicsState, params: Params) -> float:
    """Pitch/roll rate per unit input for the current flight mode."""
    if state.safety_mode:
        return params.tilt_speed
    return params.tilt_speed * params.acrobatic_tilt_multiplier


def apply_tilt_envelope(state: PhysicsState, params: Params) -> None:
    """
    Constrain and damp pitch/roll after accumulation.

    In safety mode the angles are clamped to the tilt envelope. With safety
    off they are only wrapped into [-pi, pi]; the damping then pulls a
    wrapped angle toward zero, which carries a sustained input on through
    the inverted attitude and round the full loop.
    """
    rot = state.local_rotation
    if state.safety_mode:
        limit = params.max_tilt_angle
        rot.pitch = float(np.clip(rot.pitch, -limit, limit))
        rot.roll = float(np.clip(rot.roll, -limit, limit))
        rot.pitch *= params.angular_damping
        rot.roll *= params.angular_damping
    else:
        rot.pitch = wrap_angle_pi(rot.pitch) * params.acrobatic_damping
        rot.roll = wrap_angle_pi(rot.roll) * params.acrobatic_damping


def track_total_rotation(state: PhysicsState) -> None:
    """Accumulate the unwrapped per-axis rotation since spawn/reset."""
    current = state.local_rotation.as_array()
    for axis in range(3):
        state.total_rotation[axis] += wrap_delta(
            current[axis], state.previous_rotation[axis]
        )
    state.previous_rotation[:] = current


def update_basis(state: PhysicsState) -> None:
    """Rebuild the quaternion and basis vectors from the accumulated angles."""
    rot = state.local_rotation
    state.orientation = quat_from_euler_yxz(rot.pitch, rot.yaw, rot.roll)
    state.forward = quat_rotate_vec(state.orientation, FORWARD_AXIS)
    state.up = quat_rotate_vec(state.orientation, UP_AXIS)
    state.right = quat_rotate_vec(state.orientation, RIGHT_AXIS)


def integrate_orientation(state: PhysicsState, params: Params, dt: float) -> None:
    """
    Advance the vehicle attitude by one tick.

    Mutates ``local_rotation``, ``angular_velocity[1]``, ``total_rotation``,
    ``orientation`` and the ``forward``/``up``/``right`` basis.

    Args:
        state: Vehicle state (mutated in place)
        params: Vehicle tunables
        dt: Time step [s], positive
    """
    rot = state.local_rotation

    update_yaw_rate(state, params, dt)
    rot.yaw += state.angular_velocity[1] * dt

    tilt_speed = effective_tilt_speed(state, params)
    rot.pitch += state.controls.pitch * tilt_speed * dt
    rot.roll += state.controls.roll * tilt_speed * dt

    apply_tilt_envelope(state, params)
    rot.yaw = wrap_angle_pi(rot.yaw)

    track_total_rotation(state)
    update_basis(state)
