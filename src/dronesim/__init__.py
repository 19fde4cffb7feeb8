"""
Drone Sim: Quad-rotor Flight Core

Turns normalized throttle/pitch/roll/yaw commands into rigid-body motion with
safety-envelope and aerobatic attitude handling, altitude hold, and
ground/landing-pad collision resolution.
"""

from dronesim.types import Controls, EulerAngles, FlightLog, FlightSample, PhysicsState
from dronesim.params import AltitudeHoldParams, Params, default_params, acrobatic_params
from dronesim.collision import ColliderQuery, LandingPad, LandingPadField
from dronesim.physics import DronePhysics
from dronesim.sim import run_sim

__version__ = "0.1.0"

__all__ = [
    "Controls",
    "EulerAngles",
    "FlightLog",
    "FlightSample",
    "PhysicsState",
    "AltitudeHoldParams",
    "Params",
    "default_params",
    "acrobatic_params",
    "ColliderQuery",
    "LandingPad",
    "LandingPadField",
    "DronePhysics",
    "run_sim",
]
