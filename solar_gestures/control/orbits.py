"""
Deterministic orbit functions for the bodies the camera can follow.

A body at orbital angle ``a`` sits at ``(r cos a, 0, -r sin a)`` relative to
its parent (the sun for planets). Angles advance linearly with the shared
clock, so every position is a pure function of elapsed time.
"""

import math
from dataclasses import dataclass
from typing import Dict, Optional

import numpy as np

# Scene speeds are authored in "orbit units"; this converts them to rad/s
ORBIT_SPEED_SCALE = 0.2


@dataclass(frozen=True)
class Orbit:
    """Circular orbit in the XZ plane."""
    radius: float
    angular_speed: float  # rad/s
    phase: float = 0.0    # rad at t = 0
    parent: Optional[str] = None

    def angle(self, t: float) -> float:
        return t * self.angular_speed + self.phase

    def offset(self, t: float) -> np.ndarray:
        """Position relative to the parent body at time ``t``."""
        a = self.angle(t)
        return np.array([math.cos(a) * self.radius, 0.0, -math.sin(a) * self.radius])


def planet(radius: float, speed: float, phase: float) -> Orbit:
    return Orbit(radius, speed * ORBIT_SPEED_SCALE, phase)


BODIES: Dict[str, Orbit] = {
    "mercury": planet(10.0, 1.5, 0.0),
    "venus":   planet(14.0, 1.2, 1.0),
    "earth":   planet(18.0, 1.0, 2.0),
    "mars":    planet(22.0, 0.8, 3.0),
    "jupiter": planet(32.0, 0.5, 4.0),
    "saturn":  planet(42.0, 0.4, 5.0),
    "uranus":  planet(52.0, 0.3, 6.0),
    "neptune": planet(60.0, 0.2, 7.0),
    # Moon orbit speed is already in rad/s
    "moon":    Orbit(3.5, 0.5, 0.0, parent="earth"),
}


def body_position(name: str, t: float, bodies: Dict[str, Orbit] = BODIES) -> np.ndarray:
    """Absolute world position of a body at time ``t``.

    Moons add their own offset to their parent's position, both evaluated
    on the same clock.
    """
    orbit = bodies[name]
    position = orbit.offset(t)
    if orbit.parent is not None:
        position = position + body_position(orbit.parent, t, bodies)
    return position


def body_positions(t: float, bodies: Dict[str, Orbit] = BODIES) -> Dict[str, np.ndarray]:
    """World positions of every body, for scene placement."""
    return {name: body_position(name, t, bodies) for name in bodies}
