"""
creature_sim module: world/physics.py

Top-down 2D kinematics on pygame vectors:
- angle helpers (wrap to (-pi, pi], normalize headings to [0, 2pi))
- wall bounce: clamp to the arena, damp + invert velocity, reflect heading
- ray intersection tests used by the ray-casting sensors
"""

from __future__ import annotations
import math
from typing import Optional

from pygame.math import Vector2

TWO_PI = 2.0 * math.pi


def wrap_angle(a: float) -> float:
    while a > math.pi:
        a -= TWO_PI
    while a <= -math.pi:
        a += TWO_PI
    return a


def normalize_heading(a: float) -> float:
    a = math.fmod(a, TWO_PI)
    if a < 0.0:
        a += TWO_PI
    # fmod of a tiny negative can round back up to 2pi
    return 0.0 if a >= TWO_PI else a


def bearing(from_pos: Vector2, heading: float, tx: float, ty: float) -> float:
    """Heading-relative angle to (tx, ty), wrapped to (-pi, pi]."""
    return wrap_angle(math.atan2(ty - from_pos.y, tx - from_pos.x) - heading)


def bounce(pos: Vector2, vel: Vector2, heading: float, radius: float, w: float, h: float, damping: float) -> float:
    """
    Keep a body of ``radius`` inside [0, w] x [0, h]. Mutates pos/vel in-place
    and returns the reflected heading.
    """
    if pos.x < radius:
        pos.x = radius
        vel.x *= -damping
        heading = math.pi - heading
    elif pos.x > w - radius:
        pos.x = w - radius
        vel.x *= -damping
        heading = math.pi - heading

    if pos.y < radius:
        pos.y = radius
        vel.y *= -damping
        heading = -heading
    elif pos.y > h - radius:
        pos.y = h - radius
        vel.y *= -damping
        heading = -heading

    return normalize_heading(heading)


def ray_circle(ox: float, oy: float, dx: float, dy: float, cx: float, cy: float, r: float, max_t: float) -> Optional[float]:
    """
    Distance along the unit ray (o + t*d) to the nearest circle crossing, or
    None. Roots behind the origin or past ``max_t`` are discarded.
    """
    fx = ox - cx
    fy = oy - cy
    b = fx * dx + fy * dy
    c = fx * fx + fy * fy - r * r
    disc = b * b - c
    if disc < 0.0:
        return None
    s = math.sqrt(disc)
    for t in (-b - s, -b + s):
        if 0.0 <= t <= max_t:
            return t
    return None


def ray_box(ox: float, oy: float, dx: float, dy: float, w: float, h: float, max_t: float) -> Optional[float]:
    """Distance along the unit ray to the arena boundary, or None if out of range."""
    best = math.inf
    if dx > 1e-12:
        best = min(best, (w - ox) / dx)
    elif dx < -1e-12:
        best = min(best, -ox / dx)
    if dy > 1e-12:
        best = min(best, (h - oy) / dy)
    elif dy < -1e-12:
        best = min(best, -oy / dy)
    if 0.0 <= best <= max_t:
        return best
    return None
