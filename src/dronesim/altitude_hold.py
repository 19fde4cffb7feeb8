"""
Altitude-hold controller.

Closed-loop vertical stabilization around a slowly adjustable target height.
While engaged, throttle no longer means "more thrust" but "raise the hold
altitude" (cruise-control semantics).

Control law (per tick):
    target      += throttle * adjust_rate * dt          (outside deadzone)
    hold        += (target - hold) * transition_speed * dt
    e            = hold - y
    I            = clip(I + e * dt, -I_max, I_max)
    F            = kp * e + kd * (-v_y) + ki * I + g * gravity_compensation
    v_y         += F * min(1, |e| * force_scale) * dt
"""

import numpy as np

from dronesim.params import Params
from dronesim.types import AltitudeHoldState, PhysicsState


def engage(hold: AltitudeHoldState, height: float) -> None:
    """
    Engage the loop at the given height.

    Both the hold height and the target are captured and the integrator is
    cleared so engaging never kicks the vehicle.
    """
    hold.active = True
    hold.hold_height = height
    hold.target_hold_height = height
    hold.integral_error = 0.0


def disengage(hold: AltitudeHoldState) -> None:
    """Disengage the loop and clear the integrator."""
    hold.active = False
    hold.integral_error = 0.0


def update_target(hold: AltitudeHoldState, throttle: float, params: Params, dt: float) -> None:
    """Nudge the target with throttle and ease the hold height toward it."""
    ah = params.altitude_hold
    if abs(throttle) > ah.deadzone:
        hold.target_hold_height += throttle * ah.adjust_rate * dt

    hold.hold_height += (
        (hold.target_hold_height - hold.hold_height) * ah.transition_speed * dt
    )


def altitude_hold_accel(state: PhysicsState, params: Params, dt: float) -> float:
    """
    Run one controller step and return the vertical acceleration command.

    Updates the target, hold height and integral error in place. Returns
    0.0 when the loop is not engaged.

    Args:
        state: Vehicle state (altitude-hold sub-state mutated)
        params: Vehicle tunables
        dt: Time step [s]

    Returns:
        Vertical acceleration to add to the velocity [m/s²]
    """
    hold = state.altitude_hold
    if not hold.active:
        return 0.0

    ah = params.altitude_hold
    update_target(hold, state.controls.throttle, params, dt)

    height_error = hold.hold_height - state.position[1]
    velocity_error = -state.velocity[1]

    # Anti-windup
    hold.integral_error = float(np.clip(
        hold.integral_error + height_error * dt,
        -ah.max_integral,
        ah.max_integral,
    ))

    force = (
        ah.kp * height_error
        + ah.kd * velocity_error
        + ah.ki * hold.integral_error
        + params.gravity * ah.gravity_compensation
    )

    # Ramp authority in near the setpoint for a smooth engagement
    scale = min(1.0, abs(height_error) * ah.force_scale)
    return float(force * scale)


def apply_altitude_hold(state: PhysicsState, params: Params, dt: float) -> None:
    """Apply the altitude-hold correction to the vertical velocity."""
    state.velocity[1] += altitude_hold_accel(state, params, dt) * dt
