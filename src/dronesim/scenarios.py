"""
Named flight scenarios.

Provides a registry of scenarios (initial setup + control function +
duration) used by the CLI and by the analysis scripts.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Optional

from dronesim.collision import LandingPadField
from dronesim.params import Params, default_params
from dronesim.physics import DronePhysics
from dronesim.sim import DEFAULT_DT, ControlFn, StopFn, constant_controls, landed_on, run_sim
from dronesim.types import Controls, FlightLog

PAD_HEIGHT = 50.0
PAD_RADIUS = 2.0


@dataclass(frozen=True)
class ScenarioSpec:
    """Definition of a flight scenario."""

    name: str
    t_final: float
    control_fn: Callable[[], ControlFn]  # factory: call to get control fn
    setup: Callable[[DronePhysics], None]
    with_pad: bool = False
    stop_fn: Optional[Callable[[], StopFn]] = None
    dt: float = DEFAULT_DT
    description: str = ""


# ---------------------------------------------------------------------------
# Scenario registry
# ---------------------------------------------------------------------------

_SCENARIOS: dict[str, ScenarioSpec] = {}


def _register(spec: ScenarioSpec) -> None:
    _SCENARIOS[spec.name] = spec


def _at_height(y: float, vy: float = 0.0, safety: bool = True,
               hold: bool = False) -> Callable[[DronePhysics], None]:
    def setup(drone: DronePhysics) -> None:
        drone.position[1] = y
        drone.velocity[1] = vy
        if not safety:
            drone.disable_safety_mode()
        if hold:
            drone.enable_altitude_hold()
    return setup


def _climb_then_release(t_switch: float) -> ControlFn:
    def control_fn(t: float) -> Controls:
        if t < t_switch:
            return Controls(throttle=0.5)
        return Controls(throttle=0.0)
    return control_fn


_register(ScenarioSpec(
    name="freefall",
    t_final=2.0,
    control_fn=lambda: constant_controls(),
    setup=_at_height(1000.0),
    description="Zero throttle from 1000 m; no vertical drag while falling",
))

_register(ScenarioSpec(
    name="altitude_hold",
    t_final=6.0,
    control_fn=lambda: constant_controls(),
    setup=_at_height(100.0, hold=True),
    description="Hold engaged at 100 m with zero throttle",
))

_register(ScenarioSpec(
    name="altitude_climb",
    t_final=8.0,
    control_fn=lambda: _climb_then_release(2.0),
    setup=_at_height(100.0, hold=True),
    description="Throttle raises the hold target, then releases",
))

_register(ScenarioSpec(
    name="pad_drop",
    t_final=5.0,
    control_fn=lambda: constant_controls(),
    setup=_at_height(100.0, vy=-50.0),
    with_pad=True,
    stop_fn=lambda: landed_on(PAD_HEIGHT),
    description="Fast drop from 100 m onto the pad at 50 m",
))

_register(ScenarioSpec(
    name="tunneling",
    t_final=DEFAULT_DT,
    control_fn=lambda: constant_controls(),
    setup=_at_height(55.0, vy=-1000.0),
    with_pad=True,
    description="Single tick at -1000 m/s just above the pad",
))

_register(ScenarioSpec(
    name="backward_loop",
    t_final=6.0,
    control_fn=lambda: constant_controls(throttle=1.0, pitch=1.0),
    setup=_at_height(150.0, safety=False),
    description="Full throttle, full back pitch, safety off",
))

_register(ScenarioSpec(
    name="barrel_roll",
    t_final=10.0,
    control_fn=lambda: constant_controls(throttle=1.0, pitch=0.25, roll=1.0),
    setup=_at_height(70.0, safety=False),
    description="Full throttle, full roll with a little pitch, safety off",
))

_register(ScenarioSpec(
    name="yaw_spin",
    t_final=4.0,
    control_fn=lambda: (lambda t: Controls(throttle=0.5, yaw=1.0 if t < 2.0 else None)),
    setup=_at_height(100.0),
    description="Spin up yaw, then release the stick and coast",
))


def get_scenario(name: str) -> ScenarioSpec:
    """Return a scenario by name. Raises ``KeyError`` if unknown."""
    return _SCENARIOS[name]


def list_scenarios() -> list[str]:
    """Return sorted list of registered scenario names."""
    return sorted(_SCENARIOS)


def build_drone(spec: ScenarioSpec, params: Optional[Params] = None,
                verbose: bool = False) -> DronePhysics:
    """Create and set up the vehicle for a scenario."""
    pads = LandingPadField.single(PAD_HEIGHT, PAD_RADIUS) if spec.with_pad else None
    drone = DronePhysics(pads, params=params or default_params(), verbose=verbose)
    spec.setup(drone)
    return drone


def run_scenario(name: str, params: Optional[Params] = None,
                 verbose: bool = False) -> FlightLog:
    """Build, fly and record a registered scenario."""
    spec = get_scenario(name)
    drone = build_drone(spec, params, verbose=verbose)
    stop_fn = spec.stop_fn() if spec.stop_fn is not None else None
    return run_sim(drone, spec.control_fn(), spec.t_final, spec.dt,
                   stop_fn=stop_fn, verbose=verbose)
