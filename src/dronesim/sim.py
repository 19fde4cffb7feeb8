"""
Fixed-step driver loop.

Plays the role of the external game loop: each tick it pulls control
setpoints from a control function, pushes them through the vehicle's
setters, calls ``update`` and records the readable state.

The pipeline per tick is:
    1. control_fn(t)  →  Controls
    2. setters        →  clamped commands on the vehicle
    3. update(dt)     →  gravity, orientation, translation, collision
    4. record         →  FlightLog sample at t + dt
"""

from typing import Callable, Optional

import numpy as np

from dronesim.log import allocate_log, record_step
from dronesim.physics import DronePhysics
from dronesim.types import Controls, FlightLog

ControlFn = Callable[[float], Controls]
StopFn = Callable[[DronePhysics], bool]

DEFAULT_DT = 1.0 / 60.0


def constant_controls(
    throttle: float = 0.0,
    pitch: float = 0.0,
    roll: float = 0.0,
    yaw: Optional[float] = 0.0,
) -> ControlFn:
    """Control function holding the same setpoint for the whole run."""
    controls = Controls(throttle=throttle, pitch=pitch, roll=roll, yaw=yaw)

    def control_fn(t: float) -> Controls:
        return controls

    return control_fn


def apply_controls(drone: DronePhysics, controls: Controls) -> None:
    """Push a setpoint through the vehicle's clamping setters."""
    drone.set_throttle(controls.throttle)
    drone.set_pitch(controls.pitch)
    drone.set_roll(controls.roll)
    drone.set_yaw(controls.yaw)


def run_sim(
    drone: DronePhysics,
    control_fn: Optional[ControlFn],
    t_final: float,
    dt: float = DEFAULT_DT,
    stop_fn: Optional[StopFn] = None,
    verbose: bool = False,
) -> FlightLog:
    """
    Fly a vehicle for ``t_final`` seconds at a fixed step.

    Args:
        drone: Vehicle to simulate (mutated)
        control_fn: Setpoint for time t; None leaves the current controls
        t_final: Simulated duration [s]
        dt: Tick length [s] (default: 1/60 s)
        stop_fn: Optional early-exit predicate evaluated after each tick
        verbose: Print progress updates

    Returns:
        FlightLog with one sample after every tick
    """
    if dt <= 0:
        raise ValueError(f"dt must be positive, got {dt}")

    n_steps = int(np.ceil(t_final / dt - 1e-9))
    log = allocate_log(max(n_steps, 0))

    if verbose:
        print(f"Starting simulation: t_final={t_final}s, dt={dt*1000:.1f}ms, steps={n_steps}")
        print(f"  Safety mode {'ON' if drone.safety_mode else 'OFF'}, "
              f"altitude hold {'ON' if drone.altitude_hold_active else 'OFF'}")

    t = 0.0
    for step in range(n_steps):
        if control_fn is not None:
            apply_controls(drone, control_fn(t))

        drone.update(dt)
        t = (step + 1) * dt
        record_step(log, t, drone)

        if verbose and (step + 1) % 600 == 0:
            print(f"  t={t:.2f}s, y={drone.position[1]:.2f}m, v_y={drone.velocity[1]:.2f}m/s")

        if stop_fn is not None and stop_fn(drone):
            if verbose:
                print(f"  Stop condition met at t={t:.2f}s")
            break

    log = log.trim()

    if verbose:
        print(f"Simulation complete: {len(log)} steps recorded")

    return log


def landed_on(height: float, tol: float = 0.5) -> StopFn:
    """Stop predicate: vertical velocity zeroed within ``tol`` of ``height``."""

    def stop_fn(drone: DronePhysics) -> bool:
        return drone.velocity[1] == 0.0 and abs(drone.position[1] - height) <= tol

    return stop_fn
