"""
Core data types for the flight core.

All arrays use numpy with explicit shapes noted in comments.
Quaternion convention: [w, x, y, z] (scalar-first).
"""

from dataclasses import dataclass, field
from typing import Optional

import numpy as np
from numpy.typing import NDArray


@dataclass
class EulerAngles:
    """
    Accumulated pitch/yaw/roll of the vehicle [rad].

    This is the authoritative orientation state; the quaternion is derived
    from it every tick.
    """

    pitch: float = 0.0
    yaw: float = 0.0
    roll: float = 0.0

    def as_array(self) -> NDArray[np.float64]:
        """Return [pitch, yaw, roll], shape (3,)."""
        return np.array([self.pitch, self.yaw, self.roll])

    def copy(self) -> "EulerAngles":
        return EulerAngles(pitch=self.pitch, yaw=self.yaw, roll=self.roll)


@dataclass
class Controls:
    """
    Normalized control commands for one tick.

    Attributes:
        throttle: Thrust command in [0, max_throttle]
        pitch: Pitch rate command in [-1, 1]
        roll: Roll rate command in [-1, 1]
        yaw: Yaw rate command in [-1, 1], or None to hold the heading
    """

    throttle: float = 0.0
    pitch: float = 0.0
    roll: float = 0.0
    yaw: Optional[float] = 0.0


@dataclass
class AltitudeHoldState:
    """
    Altitude-hold loop state.

    Attributes:
        active: Loop engaged
        hold_height: Smoothed setpoint the loop regulates to [m]
        target_hold_height: Setpoint commanded via throttle [m]
        integral_error: Accumulated height error, bounded [m·s]
    """

    active: bool = False
    hold_height: float = 0.0
    target_hold_height: float = 0.0
    integral_error: float = 0.0


@dataclass
class PhysicsState:
    """
    Complete numeric state of one simulated vehicle.

    Attributes:
        position: Position in world frame [m], shape (3,)
        velocity: Velocity in world frame [m/s], shape (3,)
        orientation: Attitude quaternion [w, x, y, z], shape (4,), derived
        local_rotation: Accumulated pitch/yaw/roll [rad], authoritative
        angular_velocity: [pitch, yaw, roll] rates [rad/s], shape (3,);
            only the yaw entry carries momentum
        forward, up, right: Body basis vectors in world frame, shape (3,)
        total_rotation: Unwrapped cumulative [pitch, yaw, roll] [rad], shape (3,)
        previous_rotation: Wrapped [pitch, yaw, roll] at the last tick, shape (3,)
        controls: Current control commands
        previous_throttle: Momentum-smoothed throttle
        safety_mode: Tilt envelope enabled
        altitude_hold: Altitude-hold loop state
    """

    position: NDArray[np.float64]  # (3,)
    velocity: NDArray[np.float64]  # (3,)
    orientation: NDArray[np.float64]  # (4,) [w, x, y, z]
    local_rotation: EulerAngles
    angular_velocity: NDArray[np.float64]  # (3,)
    forward: NDArray[np.float64]  # (3,)
    up: NDArray[np.float64]  # (3,)
    right: NDArray[np.float64]  # (3,)
    total_rotation: NDArray[np.float64]  # (3,)
    previous_rotation: NDArray[np.float64]  # (3,)
    controls: Controls = field(default_factory=Controls)
    previous_throttle: float = 0.0
    safety_mode: bool = True
    altitude_hold: AltitudeHoldState = field(default_factory=AltitudeHoldState)

    @staticmethod
    def at(position: NDArray[np.float64]) -> "PhysicsState":
        """Create a level, motionless state at the given position."""
        return PhysicsState(
            position=np.array(position, dtype=np.float64),
            velocity=np.zeros(3),
            orientation=np.array([1.0, 0.0, 0.0, 0.0]),  # Identity quaternion
            local_rotation=EulerAngles(),
            angular_velocity=np.zeros(3),
            forward=np.array([0.0, 0.0, -1.0]),
            up=np.array([0.0, 1.0, 0.0]),
            right=np.array([1.0, 0.0, 0.0]),
            total_rotation=np.zeros(3),
            previous_rotation=np.zeros(3),
        )


@dataclass
class FlightSample:
    """
    Readable state of a vehicle at one instant.

    This is what renderers and recorders consume after ``update``.
    """

    position: NDArray[np.float64]  # (3,)
    velocity: NDArray[np.float64]  # (3,)
    orientation: NDArray[np.float64]  # (4,) [w, x, y, z]
    local_rotation: EulerAngles
    up: NDArray[np.float64]  # (3,)
    throttle: float
    safety_mode: bool
    altitude_hold_active: bool


@dataclass
class FlightLog:
    """
    Recorded flight history.

    All arrays have shape (N,) or (N, 3) or (N, 4) where N is number of samples.
    Euler angles are stored as [pitch, yaw, roll].
    """

    # Time
    t: NDArray[np.float64]  # (N,)

    # State histories
    p: NDArray[np.float64]  # (N, 3)
    v: NDArray[np.float64]  # (N, 3)
    q: NDArray[np.float64]  # (N, 4)
    euler: NDArray[np.float64]  # (N, 3)
    up: NDArray[np.float64]  # (N, 3)

    # Control / mode histories
    throttle: NDArray[np.float64]  # (N,)
    safety_mode: NDArray[np.bool_]  # (N,)
    altitude_hold: NDArray[np.bool_]  # (N,)

    # Current write index
    _idx: int = field(default=0, repr=False)

    def __len__(self) -> int:
        return self._idx

    @staticmethod
    def allocate(n_samples: int) -> "FlightLog":
        """Pre-allocate arrays for n_samples samples."""
        return FlightLog(
            t=np.zeros(n_samples),
            p=np.zeros((n_samples, 3)),
            v=np.zeros((n_samples, 3)),
            q=np.zeros((n_samples, 4)),
            euler=np.zeros((n_samples, 3)),
            up=np.zeros((n_samples, 3)),
            throttle=np.zeros(n_samples),
            safety_mode=np.zeros(n_samples, dtype=bool),
            altitude_hold=np.zeros(n_samples, dtype=bool),
            _idx=0,
        )

    def record(self, t: float, sample: FlightSample) -> None:
        """Record one sample."""
        i = self._idx
        if i >= len(self.t):
            raise IndexError(f"FlightLog is full ({len(self.t)} samples)")
        self.t[i] = t
        self.p[i] = sample.position
        self.v[i] = sample.velocity
        self.q[i] = sample.orientation
        self.euler[i] = sample.local_rotation.as_array()
        self.up[i] = sample.up
        self.throttle[i] = sample.throttle
        self.safety_mode[i] = sample.safety_mode
        self.altitude_hold[i] = sample.altitude_hold_active
        self._idx += 1

    def trim(self) -> "FlightLog":
        """Trim arrays to actual recorded length."""
        n = self._idx
        return FlightLog(
            t=self.t[:n],
            p=self.p[:n],
            v=self.v[:n],
            q=self.q[:n],
            euler=self.euler[:n],
            up=self.up[:n],
            throttle=self.throttle[:n],
            safety_mode=self.safety_mode[:n],
            altitude_hold=self.altitude_hold[:n],
            _idx=n,
        )
