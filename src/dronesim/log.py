"""
Flight recording utilities.

Provides pre-allocated logging of the readable vehicle state for offline
analysis.
"""

import numpy as np

from dronesim.metrics import max_quat_norm_error
from dronesim.physics import DronePhysics
from dronesim.types import FlightLog


def allocate_log(n_samples: int) -> FlightLog:
    """
    Allocate a FlightLog with pre-allocated arrays.

    This is a convenience wrapper around FlightLog.allocate().

    Args:
        n_samples: Number of samples to allocate

    Returns:
        Pre-allocated FlightLog
    """
    return FlightLog.allocate(n_samples)


def record_step(log: FlightLog, t: float, drone: DronePhysics) -> None:
    """
    Record the vehicle's readable state at time t.

    Args:
        log: FlightLog instance to record into
        t: Current time [s]
        drone: Vehicle to sample
    """
    log.record(t, drone.snapshot())


def compute_statistics(log: FlightLog) -> dict:
    """
    Compute summary statistics from a flight log.

    Args:
        log: Completed flight log

    Returns:
        Dictionary with statistics:
        - duration: Recorded time span [s]
        - min_altitude / max_altitude: Height extremes [m]
        - max_speed: Peak speed [m/s]
        - max_descent_rate: Peak downward speed [m/s]
        - min_up_y: Lowest world-Y of the body up axis (negative = inverted)
        - max_quat_norm_error: Worst |1 - |q|| over the run
    """
    if len(log.t) == 0:
        return {
            "duration": 0.0,
            "min_altitude": 0.0,
            "max_altitude": 0.0,
            "max_speed": 0.0,
            "max_descent_rate": 0.0,
            "min_up_y": 1.0,
            "max_quat_norm_error": 0.0,
        }

    speed = np.linalg.norm(log.v, axis=1)
    return {
        "duration": float(log.t[-1] - log.t[0]),
        "min_altitude": float(np.min(log.p[:, 1])),
        "max_altitude": float(np.max(log.p[:, 1])),
        "max_speed": float(np.max(speed)),
        "max_descent_rate": float(max(0.0, -np.min(log.v[:, 1]))),
        "min_up_y": float(np.min(log.up[:, 1])),
        "max_quat_norm_error": max_quat_norm_error(log),
    }


def print_statistics(log: FlightLog, name: str = "Flight") -> None:
    """
    Print summary statistics to console.

    Args:
        log: Completed flight log
        name: Name of the run for display
    """
    stats = compute_statistics(log)

    print(f"\n{name} Statistics:")
    print(f"  Duration:        {stats['duration']:.2f} s")
    print(f"  Altitude range:  {stats['min_altitude']:.2f} .. {stats['max_altitude']:.2f} m")
    print(f"  Max speed:       {stats['max_speed']:.2f} m/s")
    print(f"  Max descent:     {stats['max_descent_rate']:.2f} m/s")
    print(f"  Min up.y:        {stats['min_up_y']:.3f}")
    print(f"  Quat norm error: {stats['max_quat_norm_error']:.2e}")
