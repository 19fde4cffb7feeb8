"""
Ground-plane and landing-pad collision resolution.

A **landing pad** is a thin horizontal disc defined by:

* ``center`` – centre of the disc in world frame (its Y is ignored).
* ``height`` – world Y of the pad surface.
* ``radius`` – disc radius; containment is a planar (X/Z) test.

Pads are enumerated through a ``ColliderQuery`` owned by the caller. The
resolver only reads it and works the same with no query at all.

Resolution order per pad, stopping at the first tier that resolves:

1. Teleport-through: the tick started above the surface and ended below it.
2. Sub-stepped look-ahead for fast descents: the coming motion is walked in
   small steps; a crossing snaps the vehicle onto the pad, otherwise the
   trial positions are discarded.
3. Resting band: already within ``pad_contact_margin`` of the surface.

Every resolution zeroes the vertical velocity exactly.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Protocol, Sequence, runtime_checkable

import numpy as np
from numpy.typing import NDArray

from dronesim.params import Params
from dronesim.types import PhysicsState


# ---------------------------------------------------------------------------
# Colliders
# ---------------------------------------------------------------------------

@dataclass
class LandingPad:
    """A circular landing pad.

    Attributes
    ----------
    center : ndarray, shape (3,)
        Pad centre in world frame [m].
    height : float
        World Y of the pad surface [m].
    radius : float
        Disc radius [m].
    """

    center: NDArray[np.float64]
    height: float
    radius: float = 2.0

    def __post_init__(self) -> None:
        self.center = np.asarray(self.center, dtype=np.float64)
        if self.center.shape != (3,):
            raise ValueError(f"center must have shape (3,), got {self.center.shape}")
        if self.radius <= 0:
            raise ValueError(f"radius must be positive, got {self.radius}")

    def contains_xz(self, position: NDArray[np.float64]) -> bool:
        """True if ``position`` is horizontally inside the disc."""
        dx = position[0] - self.center[0]
        dz = position[2] - self.center[2]
        return dx * dx + dz * dz < self.radius * self.radius


@runtime_checkable
class ColliderQuery(Protocol):
    """Read-only view of the world's landing-pad colliders."""

    def landing_pads(self) -> Sequence[LandingPad]:
        """Return the landing pads currently in the world (may be empty)."""
        ...


@dataclass
class LandingPadField:
    """Simple list-backed ``ColliderQuery``."""

    pads: List[LandingPad] = field(default_factory=list)

    def landing_pads(self) -> Sequence[LandingPad]:
        return tuple(self.pads)

    def add(self, pad: LandingPad) -> None:
        self.pads.append(pad)

    @staticmethod
    def single(height: float = 50.0, radius: float = 2.0,
               center: Iterable[float] = (0.0, 0.0, 0.0)) -> "LandingPadField":
        """One pad, by default the 2 m pad at y=50 under the default spawn."""
        c = np.array(list(center), dtype=np.float64)
        c[1] = height
        return LandingPadField([LandingPad(center=c, height=height, radius=radius)])


# ---------------------------------------------------------------------------
# Contact helpers
# ---------------------------------------------------------------------------

def _land(state: PhysicsState, y: float, friction: float) -> None:
    state.position[1] = y
    state.velocity[1] = 0.0
    state.velocity[0] *= friction
    state.velocity[2] *= friction


def resolve_ground(state: PhysicsState, params: Params) -> bool:
    """Clamp to the ground plane. Returns True on contact."""
    if state.position[1] < params.ground_level:
        _land(state, params.ground_level, params.ground_friction)
        return True
    return False


def substep_count(speed: float, dt: float, safe_step_size: float) -> int:
    """Number of sub-steps keeping per-step travel under ``safe_step_size``."""
    return max(1, math.ceil(speed * dt / safe_step_size))


def find_pad_crossing(
    y: float,
    vy: float,
    pad_height: float,
    dt: float,
    safe_step_size: float,
) -> bool:
    """
    Walk the coming motion in sub-steps and look for a pad crossing.

    This is a detection pass only; the caller's position is not touched.

    Args:
        y: Current height [m]
        vy: Vertical velocity [m/s]
        pad_height: Pad surface height [m]
        dt: Tick length [s]
        safe_step_size: Max travel per sub-step [m]

    Returns:
        True if some sub-step goes from above the surface to on/below it.
    """
    n = substep_count(abs(vy), dt, safe_step_size)
    sub_dt = dt / n
    for _ in range(n):
        next_y = y + vy * sub_dt
        if y > pad_height and next_y <= pad_height:
            return True
        y = next_y
    return False


def resolve_pad(
    state: PhysicsState,
    pad: LandingPad,
    prior_y: float,
    params: Params,
    dt: float,
) -> bool:
    """
    Resolve contact with a single landing pad. Returns True on contact.

    Args:
        state: Vehicle state (position/velocity mutated on contact)
        pad: Landing pad to test
        prior_y: Height at the start of the tick [m]
        params: Vehicle tunables
        dt: Tick length [s]
    """
    if not pad.contains_xz(state.position):
        return False

    rest_y = pad.height + params.pad_rest_offset
    y = state.position[1]

    # Tier 1: passed straight through the surface this tick
    if prior_y > pad.height and y < pad.height:
        _land(state, rest_y, params.pad_friction)
        return True

    # Tier 2: fast descent, look ahead in sub-steps
    if state.velocity[1] < -params.tunneling_velocity_threshold:
        if find_pad_crossing(y, state.velocity[1], pad.height, dt, params.safe_step_size):
            _land(state, rest_y, params.pad_friction)
            return True

    # Tier 3: resting on (or hovering just at) the surface
    margin = params.pad_contact_margin
    if pad.height - margin <= state.position[1] <= pad.height + margin:
        _land(state, rest_y, params.pad_friction)
        return True

    return False


def resolve_collisions(
    state: PhysicsState,
    prior_y: float,
    params: Params,
    dt: float,
    collision_context: Optional[ColliderQuery] = None,
) -> bool:
    """
    Clamp the vehicle against the ground and any landing pads.

    Args:
        state: Vehicle state after this tick's integration (mutated)
        prior_y: Height at the start of the tick [m]
        params: Vehicle tunables
        dt: Tick length [s]
        collision_context: Optional read-only pad enumeration

    Returns:
        True if any contact was resolved this tick.
    """
    contact = resolve_ground(state, params)

    if collision_context is None:
        return contact

    for pad in collision_context.landing_pads():
        if resolve_pad(state, pad, prior_y, params, dt):
            return True

    return contact
