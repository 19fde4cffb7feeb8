"""
Vehicle tunables and altitude-hold gains.

Default values reproduce the arcade-style feel of the flight core: a light
(~500 g) quad with momentum on throttle and yaw, a 45 degree tilt envelope in
safety mode and full aerobatics when the envelope is switched off.
"""

from dataclasses import dataclass, field

import numpy as np
from numpy.typing import NDArray


@dataclass
class AltitudeHoldParams:
    """
    Gains and rates for the altitude-hold PID loop.

    Attributes:
        kp: Proportional gain on height error [1/s²]
        kd: Derivative gain on vertical velocity error [1/s]
        ki: Integral gain on accumulated height error
        max_integral: Anti-windup bound for the integral term [m·s]
        deadzone: Throttle magnitude below which the target is not nudged
        adjust_rate: Target climb rate per unit throttle [m/s]
        transition_speed: Rate at which the hold height chases the target [1/s]
        gravity_compensation: Multiple of gravity fed forward (slightly > 1)
        force_scale: Error-to-authority ramp; full authority at
            |error| >= 1 / force_scale [1/m]
    """

    kp: float = 5.0
    kd: float = 3.0
    ki: float = 1.0
    max_integral: float = 0.5
    deadzone: float = 0.05
    adjust_rate: float = 3.0
    transition_speed: float = 2.0
    gravity_compensation: float = 1.2
    # The ramp must reach full authority close to the setpoint, otherwise the
    # loop settles noticeably below the hold height.
    force_scale: float = 5.0


@dataclass
class Params:
    """
    Complete parameter set for one simulated vehicle.

    Physical:
        gravity: Gravitational acceleration [m/s²]
        mass: Vehicle mass [kg]. Descriptive only: every force in the
            integrators is already an acceleration, so no code path reads it

    Throttle:
        max_throttle: Upper bound of the throttle command
        throttle_acceleration: Thrust acceleration at full throttle [m/s²]
        throttle_curve_exponent: Response curve exponent (superlinear)
        throttle_change_rate: Propeller spin-up rate [1/s]
        freefall_throttle: Throttle below which a falling vehicle has no
            vertical drag

    Attitude:
        tilt_speed: Pitch/roll rate per unit input [rad/s]
        acrobatic_tilt_multiplier: Tilt speed multiplier with safety off
        tilt_force: Tilt-to-translation gain [m/s² per rad]
        yaw_speed: Yaw rate at full input [rad/s]
        yaw_acceleration: Yaw rate lag constant [1/s]
        yaw_damping: Per-tick yaw rate decay when yaw is released
        angular_damping: Per-tick pitch/roll decay in safety mode
        acrobatic_damping: Per-tick pitch/roll decay with safety off
        max_tilt_angle: Safety envelope for pitch and roll [rad]

    Drag:
        horizontal_drag: Horizontal drag coefficient
        vertical_drag: Vertical drag coefficient

    Collision:
        ground_level: Height of the ground plane [m]
        ground_friction: Horizontal velocity factor on ground contact
        pad_friction: Horizontal velocity factor on landing pad contact
        pad_rest_offset: Rest height above the pad surface [m]
        pad_contact_margin: Half-width of the pad resting band [m]
        tunneling_velocity_threshold: Downward speed enabling sub-stepping [m/s]
        safe_step_size: Max vertical travel per sub-step [m]

    Spawn:
        default_spawn: Start position when none is given, shape (3,)
    """

    # Physical
    gravity: float = 9.81
    mass: float = 0.5

    # Throttle
    max_throttle: float = 1.0
    throttle_acceleration: float = 40.0
    throttle_curve_exponent: float = 1.5
    throttle_change_rate: float = 8.0
    freefall_throttle: float = 0.1

    # Attitude
    tilt_speed: float = 2.0
    acrobatic_tilt_multiplier: float = 2.0
    tilt_force: float = 15.0
    yaw_speed: float = 2.0
    yaw_acceleration: float = 4.0
    yaw_damping: float = 0.92
    angular_damping: float = 0.95
    acrobatic_damping: float = 0.98
    max_tilt_angle: float = np.pi / 4

    # Drag
    horizontal_drag: float = 0.02
    vertical_drag: float = 0.05

    # Collision
    ground_level: float = 0.0
    ground_friction: float = 0.8
    pad_friction: float = 0.6
    pad_rest_offset: float = 0.1
    pad_contact_margin: float = 0.1
    tunneling_velocity_threshold: float = 10.0
    safe_step_size: float = 0.1

    # Spawn (just above the default landing pad at y=50)
    default_spawn: NDArray[np.float64] = field(
        default_factory=lambda: np.array([0.0, 51.0, 0.0])
    )

    altitude_hold: AltitudeHoldParams = field(default_factory=AltitudeHoldParams)

    def __post_init__(self) -> None:
        """Validate and convert parameters after initialization."""
        if not isinstance(self.default_spawn, np.ndarray):
            self.default_spawn = np.array(self.default_spawn, dtype=np.float64)
        if self.default_spawn.shape != (3,):
            raise ValueError(
                f"default_spawn must have shape (3,), got {self.default_spawn.shape}"
            )

        if self.gravity <= 0:
            raise ValueError(f"gravity must be positive, got {self.gravity}")
        if self.mass <= 0:
            raise ValueError(f"mass must be positive, got {self.mass}")
        if self.max_throttle <= 0:
            raise ValueError(f"max_throttle must be positive, got {self.max_throttle}")
        if self.throttle_change_rate <= 0:
            raise ValueError(
                f"throttle_change_rate must be positive, got {self.throttle_change_rate}"
            )
        if not 0.0 < self.max_tilt_angle <= np.pi:
            raise ValueError(
                f"max_tilt_angle must be in (0, pi], got {self.max_tilt_angle}"
            )
        if self.horizontal_drag < 0 or self.vertical_drag < 0:
            raise ValueError("drag coefficients must be non-negative")
        if self.safe_step_size <= 0:
            raise ValueError(f"safe_step_size must be positive, got {self.safe_step_size}")
        for name in ("yaw_damping", "angular_damping", "acrobatic_damping"):
            value = getattr(self, name)
            if not 0.0 <= value <= 1.0:
                raise ValueError(f"{name} must be in [0, 1], got {value}")


def default_params() -> Params:
    """
    Create default parameters for the standard vehicle.
    """
    return Params()


def acrobatic_params() -> Params:
    """
    Create parameters tuned for stunt flying.

    Faster tilting and lighter damping so loops and rolls complete sooner.
    Safety mode still has to be switched off on the vehicle itself.
    """
    return Params(
        acrobatic_tilt_multiplier=2.5,
        acrobatic_damping=0.985,
        yaw_speed=3.0,
    )
