"""
Evaluation metrics for flight logs.

All functions take a ``FlightLog`` and return scalar or dict values suitable
for tabulation.
"""

from __future__ import annotations

import numpy as np

from dronesim.math3d import quat_angle_between, wrap_delta
from dronesim.types import FlightLog

_AXES = ("pitch", "yaw", "roll")


def cumulative_rotation(log: FlightLog, axis: str) -> float:
    """Unwrapped rotation [rad] about one axis ("pitch", "yaw", "roll").

    Sums the wrap-aware frame-to-frame change of the recorded angle, so a
    full loop reports about 2*pi even though the stored angle stays in
    [-pi, pi].
    """
    idx = _AXES.index(axis)
    angles = log.euler[:, idx]
    total = 0.0
    for prev, cur in zip(angles[:-1], angles[1:]):
        total += wrap_delta(float(cur), float(prev))
    return total


def up_y_range(log: FlightLog) -> float:
    """Spread between the most upright and most inverted sampled attitude."""
    if len(log.up) == 0:
        return 0.0
    return float(np.max(log.up[:, 1]) - np.min(log.up[:, 1]))


def passed_inverted(log: FlightLog, threshold: float = -0.5) -> bool:
    """True if any sample had the body up axis pointing below ``threshold``."""
    return bool(np.any(log.up[:, 1] < threshold))


def max_quaternion_jump(log: FlightLog) -> float:
    """Largest attitude change between consecutive samples [rad]."""
    jump = 0.0
    for prev, cur in zip(log.q[:-1], log.q[1:]):
        jump = max(jump, quat_angle_between(prev, cur))
    return jump


def max_quat_norm_error(log: FlightLog) -> float:
    """Worst deviation of the quaternion norm from 1."""
    if len(log.q) == 0:
        return 0.0
    return float(np.max(np.abs(np.linalg.norm(log.q, axis=1) - 1.0)))


def altitude_error_stats(log: FlightLog, target: float, t_settle: float = 0.0) -> dict[str, float]:
    """Altitude error to ``target`` over samples at or after ``t_settle``.

    Returns dict with keys: mean, max_abs, std.
    """
    mask = log.t >= t_settle
    err = log.p[mask, 1] - target
    if err.size == 0:
        return {"mean": 0.0, "max_abs": 0.0, "std": 0.0}
    return {
        "mean": float(np.mean(err)),
        "max_abs": float(np.max(np.abs(err))),
        "std": float(np.std(err)),
    }


def detect_crash(log: FlightLog, ground_level: float = 0.0, crash_speed: float = 15.0) -> bool:
    """Detect if the flight crashed.

    Checks for:
      - NaN in any state array
      - quaternion norm deviation > 0.01
      - reaching the ground with a descent faster than ``crash_speed``
        in the preceding sample
    """
    for arr in (log.p, log.v, log.q):
        if np.any(np.isnan(arr)):
            return True

    if max_quat_norm_error(log) > 0.01:
        return True

    on_ground = np.isclose(log.p[:, 1], ground_level)
    for i in np.flatnonzero(on_ground):
        if i > 0 and log.v[i - 1, 1] < -crash_speed:
            return True

    return False


def compute_all_metrics(log: FlightLog) -> dict[str, float]:
    """Flat dict of every scalar metric for one flight."""
    return {
        "duration": float(log.t[-1]) if len(log.t) > 0 else 0.0,
        "pitch_total": cumulative_rotation(log, "pitch"),
        "yaw_total": cumulative_rotation(log, "yaw"),
        "roll_total": cumulative_rotation(log, "roll"),
        "up_y_range": up_y_range(log),
        "max_quat_jump": max_quaternion_jump(log),
        "max_quat_norm_error": max_quat_norm_error(log),
        "final_altitude": float(log.p[-1, 1]) if len(log.t) > 0 else 0.0,
        "crashed": float(detect_crash(log)),
    }
