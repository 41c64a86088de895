"""
Per-frame physics of the interactive pendulum.

This module provides:
- The pendulum state record and its initial value
- The damped semi-implicit Euler step used while gravity is on
- The clock-driven oscillation used while gravity is off
- Energy computation from angle and velocity
- The pure per-tick transition ``step``
- Position and angle helpers shared with the interaction and rendering code

Angles are in radians, velocities in radians per tick. The rod hangs along
the local -y axis of a pivot group that is rotated by ``angle`` about +z.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, replace
from typing import Optional, Tuple

from pendel3d.config import PendulumConfig

logger = logging.getLogger(__name__)

Energies = Tuple[float, float, float]


@dataclass(frozen=True)
class PhysicsParams:
    gravity: float = 0.001
    damping: float = 0.999
    length: float = 2.0
    free_frequency: float = 0.002

    @classmethod
    def from_config(cls, config: PendulumConfig) -> "PhysicsParams":
        return cls(
            gravity=config.gravity,
            damping=config.damping,
            length=config.length,
            free_frequency=config.free_frequency,
        )


@dataclass(frozen=True)
class PendulumState:
    """Complete mutable-by-replacement state of the pendulum.

    ``amplitude`` only changes on drag start or on the gravity on->off edge.
    """

    angle: float = math.pi / 2
    velocity: float = 0.0
    amplitude: float = math.pi / 2
    is_swinging: bool = True
    gravity_on: bool = False
    last_gravity_on: bool = True
    is_dragging: bool = False
    is_clicked_down: bool = False


def gravity_step(angle: float, velocity: float, g: float, damping: float) -> Tuple[float, float]:
    """Semi-implicit Euler step of the damped pendulum.

    Velocity is updated from the acceleration and damped, then the angle is
    advanced with the new velocity.
    """
    acceleration = -g * math.sin(angle)
    velocity = (velocity + acceleration) * damping
    return angle + velocity, velocity


def free_angle(amplitude: float, wall_clock_ms: float, frequency: float) -> float:
    """Angle of the undamped, clock-driven swing used while gravity is off."""
    return amplitude * math.sin(wall_clock_ms * frequency)


def energies(angle: float, velocity: float, length: float, g: float) -> Energies:
    """Return (kinetic, potential, mechanical) energy for unit mass."""
    kinetic = 0.5 * (length * velocity) ** 2
    potential = g * length * (1.0 - math.cos(angle))
    return kinetic, potential, kinetic + potential


def step(state: PendulumState, now_ms: float, params: PhysicsParams) -> Tuple[PendulumState, Optional[Energies]]:
    """Advance the pendulum by one tick.

    Returns the new state and, when the gravity-on regime ran, the energy
    triple of the new angle and velocity. ``now_ms`` is the wall clock in
    milliseconds and only matters while gravity is off.
    """
    amplitude = state.amplitude
    if state.last_gravity_on and not state.gravity_on:
        amplitude = state.angle
        logger.debug("Gravity switched off, amplitude captured at %.4f rad", amplitude)

    new_state = replace(state, amplitude=amplitude, last_gravity_on=state.gravity_on)

    if not new_state.is_swinging or new_state.is_dragging:
        return new_state, None

    if new_state.gravity_on:
        angle, velocity = gravity_step(new_state.angle, new_state.velocity, params.gravity, params.damping)
        if not (math.isfinite(angle) and math.isfinite(velocity)):
            logger.warning("Rejected non-finite tick (angle=%r, velocity=%r)", angle, velocity)
            return new_state, None
        sample = energies(angle, velocity, params.length, params.gravity)
        return replace(new_state, angle=angle, velocity=velocity), sample

    angle = free_angle(amplitude, now_ms, params.free_frequency)
    if not math.isfinite(angle):
        logger.warning("Rejected non-finite tick (angle=%r)", angle)
        return new_state, None
    return replace(new_state, angle=angle), None


def bob_position(angle: float, length: float) -> Tuple[float, float, float]:
    """World position of the bob for a pivot rotation of ``angle``."""
    return (length * math.sin(angle), -length * math.cos(angle), 0.0)


def wrap_angle(angle: float) -> float:
    """Normalize an angle to [-pi, pi)."""
    two_pi = 2.0 * math.pi
    return (angle + math.pi) % two_pi - math.pi
