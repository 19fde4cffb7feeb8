"""
Vehicle facade: controls, modes and the per-tick update.

One ``DronePhysics`` instance simulates one vehicle. A driver (input mapper,
scripted routine, test) calls the setters, then ``update(dt)``; renderers and
recorders read the state afterwards.

The tick runs, in this exact order:
    1. Gravity
    2. Orientation integrator
    3. Translational integrator (altitude hold included)
    4. Collision resolver

Teleport detection compares the height at the start of the tick with the
height after integration, so the steps are not exposed individually.

Typical usage example:
    from dronesim import DronePhysics, LandingPadField

    drone = DronePhysics(LandingPadField.single())
    drone.set_throttle(0.6)
    drone.update(1 / 60)
"""

from typing import Optional

import numpy as np
from numpy.typing import NDArray

from dronesim import altitude_hold
from dronesim.collision import ColliderQuery, resolve_collisions
from dronesim.math3d import wrap_delta
from dronesim.orientation import integrate_orientation
from dronesim.params import Params, default_params
from dronesim.translation import integrate_translation
from dronesim.types import EulerAngles, FlightSample, PhysicsState


def _clamp_command(value: float, low: float, high: float) -> float:
    if not np.isfinite(value):
        return 0.0
    return float(np.clip(value, low, high))


class DronePhysics:
    """Flight core for a single quad-rotor style vehicle.

    Attributes:
        params: Vehicle tunables
        state: Complete numeric state (see ``PhysicsState``)
        collision_context: Optional read-only landing-pad enumeration
        initial_position: Spawn position restored by ``reset()``
        verbose: Print mode transitions
    """

    def __init__(
        self,
        collision_context: Optional[ColliderQuery] = None,
        start_position: Optional[NDArray[np.float64]] = None,
        params: Optional[Params] = None,
        verbose: bool = False,
    ) -> None:
        self.params = params if params is not None else default_params()
        self.collision_context = collision_context
        self.verbose = verbose

        if start_position is None:
            spawn = self.params.default_spawn.copy()
        else:
            spawn = np.array(start_position, dtype=np.float64)
            if spawn.shape != (3,):
                raise ValueError(f"start_position must have shape (3,), got {spawn.shape}")
        self.initial_position = spawn

        self.state = PhysicsState.at(self.initial_position)
        self.state.altitude_hold.hold_height = float(spawn[1])
        self.state.altitude_hold.target_hold_height = float(spawn[1])

    # ------------------------------------------------------------------
    # Tick
    # ------------------------------------------------------------------

    def update(self, dt: float) -> None:
        """
        Advance the simulation by ``dt`` seconds.

        A non-positive or non-finite ``dt`` leaves the state untouched.
        """
        if not np.isfinite(dt) or dt <= 0:
            return

        s = self.state
        prior_y = float(s.position[1])
        prior_roll = s.local_rotation.roll

        s.velocity[1] -= self.params.gravity * dt

        integrate_orientation(s, self.params, dt)

        roll_rate = abs(wrap_delta(s.local_rotation.roll, prior_roll)) / dt
        integrate_translation(s, self.params, dt, roll_rate=roll_rate)

        resolve_collisions(s, prior_y, self.params, dt, self.collision_context)

    # ------------------------------------------------------------------
    # Controls
    # ------------------------------------------------------------------

    # Setters clamp on write; a non-finite command (NaN, inf) reads as 0.

    def set_throttle(self, value: float) -> None:
        self.state.controls.throttle = _clamp_command(value, 0.0, self.params.max_throttle)

    def set_pitch(self, value: float) -> None:
        self.state.controls.pitch = _clamp_command(value, -1.0, 1.0)

    def set_roll(self, value: float) -> None:
        self.state.controls.roll = _clamp_command(value, -1.0, 1.0)

    def set_yaw(self, value: Optional[float]) -> None:
        """Set the yaw command; ``None`` holds the heading (rate decays)."""
        if value is None:
            self.state.controls.yaw = None
            return
        self.state.controls.yaw = _clamp_command(value, -1.0, 1.0)

    # ------------------------------------------------------------------
    # Modes
    # ------------------------------------------------------------------

    def enable_safety_mode(self) -> bool:
        self.state.safety_mode = True
        self._report("Safety mode enabled")
        return self.state.safety_mode

    def disable_safety_mode(self) -> bool:
        self.state.safety_mode = False
        self._report("Safety mode disabled (acrobatic flight)")
        return self.state.safety_mode

    def toggle_safety_mode(self) -> bool:
        if self.state.safety_mode:
            return self.disable_safety_mode()
        return self.enable_safety_mode()

    def enable_altitude_hold(self) -> bool:
        height = float(self.state.position[1])
        altitude_hold.engage(self.state.altitude_hold, height)
        self._report(f"Altitude hold enabled at height: {height:.2f} m")
        return self.state.altitude_hold.active

    def disable_altitude_hold(self) -> bool:
        altitude_hold.disengage(self.state.altitude_hold)
        self._report("Altitude hold disabled")
        return self.state.altitude_hold.active

    def toggle_altitude_hold(self) -> bool:
        if self.state.altitude_hold.active:
            return self.disable_altitude_hold()
        return self.enable_altitude_hold()

    def set_altitude_hold_height(self, height: float) -> None:
        """Command a new hold target, never below the ground plane."""
        self.state.altitude_hold.target_hold_height = max(self.params.ground_level, height)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def reset(self) -> None:
        """
        Restore the spawn state.

        Position, velocity, rotation, controls and rotation totals are reset,
        altitude hold is disengaged and safety mode re-enabled. The collision
        context is kept.
        """
        self.state = PhysicsState.at(self.initial_position)
        self.state.altitude_hold.hold_height = float(self.initial_position[1])
        self.state.altitude_hold.target_hold_height = float(self.initial_position[1])

    # ------------------------------------------------------------------
    # Readable state
    # ------------------------------------------------------------------

    @property
    def position(self) -> NDArray[np.float64]:
        return self.state.position

    @property
    def velocity(self) -> NDArray[np.float64]:
        return self.state.velocity

    @property
    def orientation(self) -> NDArray[np.float64]:
        return self.state.orientation

    @property
    def local_rotation(self) -> EulerAngles:
        return self.state.local_rotation

    @property
    def angular_velocity(self) -> NDArray[np.float64]:
        return self.state.angular_velocity

    @property
    def forward(self) -> NDArray[np.float64]:
        return self.state.forward

    @property
    def up(self) -> NDArray[np.float64]:
        return self.state.up

    @property
    def right(self) -> NDArray[np.float64]:
        return self.state.right

    @property
    def total_rotation(self) -> NDArray[np.float64]:
        return self.state.total_rotation

    @property
    def throttle(self) -> float:
        return self.state.controls.throttle

    @property
    def previous_throttle(self) -> float:
        return self.state.previous_throttle

    @property
    def safety_mode(self) -> bool:
        return self.state.safety_mode

    @property
    def altitude_hold_active(self) -> bool:
        return self.state.altitude_hold.active

    def snapshot(self) -> FlightSample:
        """Copy of the readable state, safe to keep after further ticks."""
        s = self.state
        return FlightSample(
            position=s.position.copy(),
            velocity=s.velocity.copy(),
            orientation=s.orientation.copy(),
            local_rotation=s.local_rotation.copy(),
            up=s.up.copy(),
            throttle=s.controls.throttle,
            safety_mode=s.safety_mode,
            altitude_hold_active=s.altitude_hold.active,
        )

    def _report(self, message: str) -> None:
        if self.verbose:
            print(f"  [drone] {message}")
