"""
3D math utilities for quaternions, rotations and angle bookkeeping.

Quaternion convention: [w, x, y, z] (scalar-first, Hamilton convention).
World frame: +X right, +Y up, -Z forward.
"""

import numpy as np
from numpy.typing import NDArray


IDENTITY_QUAT = np.array([1.0, 0.0, 0.0, 0.0])

# Canonical body axes before any rotation
FORWARD_AXIS = np.array([0.0, 0.0, -1.0])
UP_AXIS = np.array([0.0, 1.0, 0.0])
RIGHT_AXIS = np.array([1.0, 0.0, 0.0])


def quat_normalize(q: NDArray[np.float64]) -> NDArray[np.float64]:
    """
    Normalize a quaternion to unit length.

    Args:
        q: Quaternion [w, x, y, z], shape (4,)

    Returns:
        Normalized quaternion, shape (4,)
    """
    norm = np.linalg.norm(q)
    if norm < 1e-10:
        # Return identity quaternion if input is near-zero
        return IDENTITY_QUAT.copy()
    return q / norm


def quat_mul(q1: NDArray[np.float64], q2: NDArray[np.float64]) -> NDArray[np.float64]:
    """
    Multiply two quaternions (Hamilton product).

    q1 * q2 represents: first rotate by q2, then by q1.

    Args:
        q1: First quaternion [w, x, y, z], shape (4,)
        q2: Second quaternion [w, x, y, z], shape (4,)

    Returns:
        Product quaternion, shape (4,)
    """
    w1, x1, y1, z1 = q1
    w2, x2, y2, z2 = q2

    return np.array([
        w1 * w2 - x1 * x2 - y1 * y2 - z1 * z2,
        w1 * x2 + x1 * w2 + y1 * z2 - z1 * y2,
        w1 * y2 - x1 * z2 + y1 * w2 + z1 * x2,
        w1 * z2 + x1 * y2 - y1 * x2 + z1 * w2,
    ])


def quat_from_axis_angle(axis: NDArray[np.float64], angle: float) -> NDArray[np.float64]:
    """
    Build a unit quaternion rotating by ``angle`` about a unit ``axis``.

    Args:
        axis: Unit rotation axis, shape (3,)
        angle: Rotation angle [rad]

    Returns:
        Unit quaternion [w, x, y, z], shape (4,)
    """
    half = 0.5 * angle
    s = np.sin(half)
    return np.array([np.cos(half), axis[0] * s, axis[1] * s, axis[2] * s])


def quat_from_euler_yxz(pitch: float, yaw: float, roll: float) -> NDArray[np.float64]:
    """
    Compose yaw -> pitch -> roll into a single orientation quaternion.

    Intrinsic Y-X-Z order: q = q_y(yaw) * q_x(pitch) * q_z(roll).
    Pitch is about the body X axis, yaw about Y, roll about Z.

    Args:
        pitch: Rotation about X [rad]
        yaw: Rotation about Y [rad]
        roll: Rotation about Z [rad]

    Returns:
        Unit quaternion [w, x, y, z], shape (4,)
    """
    q_yaw = quat_from_axis_angle(UP_AXIS, yaw)
    q_pitch = quat_from_axis_angle(RIGHT_AXIS, pitch)
    q_roll = quat_from_axis_angle(np.array([0.0, 0.0, 1.0]), roll)
    return quat_normalize(quat_mul(q_yaw, quat_mul(q_pitch, q_roll)))


def quat_to_R(q: NDArray[np.float64]) -> NDArray[np.float64]:
    """
    Convert quaternion to rotation matrix.

    The rotation matrix R rotates vectors from body to world frame:
        v_world = R @ v_body

    Args:
        q: Unit quaternion [w, x, y, z], shape (4,)

    Returns:
        Rotation matrix, shape (3, 3)
    """
    q = quat_normalize(q)
    w, x, y, z = q

    R = np.array([
        [1 - 2*(y*y + z*z),     2*(x*y - w*z),     2*(x*z + w*y)],
        [    2*(x*y + w*z), 1 - 2*(x*x + z*z),     2*(y*z - w*x)],
        [    2*(x*z - w*y),     2*(y*z + w*x), 1 - 2*(x*x + y*y)],
    ])
    return R


def quat_rotate_vec(q: NDArray[np.float64], v: NDArray[np.float64]) -> NDArray[np.float64]:
    """
    Rotate a vector by a quaternion.

    Args:
        q: Unit quaternion [w, x, y, z], shape (4,)
        v: Vector to rotate, shape (3,)

    Returns:
        Rotated vector, shape (3,)
    """
    return quat_to_R(q) @ v


def quat_angle_between(q1: NDArray[np.float64], q2: NDArray[np.float64]) -> float:
    """
    Smallest rotation angle [rad] taking q1 to q2 (sign-invariant).
    """
    d = abs(float(np.dot(quat_normalize(q1), quat_normalize(q2))))
    return 2.0 * float(np.arccos(min(1.0, d)))


def wrap_angle_pi(angle: float) -> float:
    """
    Wrap angle to [-pi, pi].

    Angles already inside the interval are returned unchanged, so values
    exactly at +/-pi are kept as they are.

    Args:
        angle: Angle in radians

    Returns:
        Wrapped angle in [-pi, pi]
    """
    if -np.pi <= angle <= np.pi:
        return float(angle)
    return float((angle + np.pi) % (2 * np.pi) - np.pi)


def wrap_delta(current: float, previous: float) -> float:
    """
    Signed change from ``previous`` to ``current`` across the +/-pi seam.

    Both angles are expected in [-pi, pi]; the result lies in [-pi, pi].
    """
    delta = current - previous
    if delta < -np.pi:
        delta += 2 * np.pi
    elif delta > np.pi:
        delta -= 2 * np.pi
    return float(delta)
